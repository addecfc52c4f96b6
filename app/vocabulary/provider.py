from __future__ import annotations

from typing import Protocol, Sequence

from app.schemas.vocabulary import VocabularyEntry


class VocabularyProvider(Protocol):
    def entries(self) -> Sequence[VocabularyEntry]:
        """Return every vocabulary entry in dataset order."""

    def get(self, entry_id: str) -> VocabularyEntry | None:
        """Return the entry with the given id, if any."""
