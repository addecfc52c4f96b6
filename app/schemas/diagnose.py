from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.quiz.questions import AnswerKind


class Answer(BaseModel):
    id: int = Field(ge=1)
    kind: AnswerKind
    prompt_text: str = Field(default="", max_length=500)
    value: str = Field(default="", max_length=4000)


class CanonicalAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    kind: AnswerKind
    prompt_text: str
    value: str
    choice: str | None = None
    note: str = ""


class DiagnoseRequest(BaseModel):
    answers: list[Answer] = Field(min_length=1, max_length=50)
    max_picks: int = Field(default=1, ge=1, le=3)
    max_excerpts: int = Field(default=2, ge=0, le=5)
    include_reflection: bool = False


class AnalysisPayload(BaseModel):
    summary: str = Field(min_length=1)
    scores: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _accept_localized_keys(cls, data: Any) -> Any:
        if isinstance(data, dict) and "summary" not in data and "summary_ja" in data:
            data = dict(data)
            data["summary"] = data.pop("summary_ja")
        return data


class MatcherPick(BaseModel):
    id: str = Field(min_length=1)
    term: str = Field(min_length=1)
    lang: str = Field(min_length=1)
    gloss: str = ""
    reason: str = Field(min_length=1)
    catchphrase: str = Field(min_length=1, max_length=120)

    @model_validator(mode="before")
    @classmethod
    def _accept_localized_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "reason" not in data and "reason_ja" in data:
            data["reason"] = data.pop("reason_ja")
        if "catchphrase" not in data and "catch_ja" in data:
            data["catchphrase"] = data.pop("catch_ja")
        if data.get("gloss") is None:
            data["gloss"] = ""
        return data


class MatchPayload(BaseModel):
    picks: list[MatcherPick] = Field(min_length=1, max_length=3)

    @model_validator(mode="before")
    @classmethod
    def _wrap_single_pick(cls, data: Any) -> Any:
        if isinstance(data, dict) and "picks" not in data and isinstance(data.get("pick"), dict):
            return {"picks": [data["pick"]]}
        return data


class ReflectionPayload(BaseModel):
    excerpts: list[str] = Field(default_factory=list, max_length=5)
    interpretation: str = Field(min_length=1)
    tone_hint: str = Field(default="gentle", alias="toneHint")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("excerpts")
    @classmethod
    def _drop_blank_excerpts(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item and item.strip()]


class AnalysisResult(BaseModel):
    summary: str
    scores: dict[str, float]


class Reflection(BaseModel):
    excerpts: list[str]
    interpretation: str
    tone_hint: str
    fallback: bool = False


class DiagnoseResponse(BaseModel):
    analysis: AnalysisResult
    picks: list[MatcherPick] = Field(min_length=1, max_length=3)
    reflection: Reflection | None = None
    disclaimer: str
