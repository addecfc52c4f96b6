from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VocabularyEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    term: str = Field(min_length=1)
    lang: str = Field(min_length=2, max_length=16)
    gloss: str = ""
    tags: tuple[str, ...] = ()
    culture_note: str | None = None
    axes: dict[str, float] | None = None
    phase: str | None = None

    @field_validator("lang")
    @classmethod
    def _normalize_lang(cls, value: str) -> str:
        return value.strip().lower()


class RankedCandidate(BaseModel):
    entry: VocabularyEntry
    similarity: float = Field(ge=-1.0, le=1.0)
