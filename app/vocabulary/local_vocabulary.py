from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from app.schemas.vocabulary import VocabularyEntry

from .provider import VocabularyProvider


class LocalVocabulary(VocabularyProvider):
    def __init__(self, dataset_path: str | Path | None = None) -> None:
        path = Path(dataset_path) if dataset_path else Path(__file__).with_name("love_words.json")
        self._entries = self._load_entries(path)
        self._by_id = {entry.id: entry for entry in self._entries}

    @staticmethod
    def _load_entries(path: Path) -> tuple[VocabularyEntry, ...]:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        if not isinstance(raw, list):
            raise RuntimeError(f"Vocabulary dataset '{path}' must be a JSON list.")

        entries = tuple(VocabularyEntry.model_validate(item) for item in raw)
        seen: set[str] = set()
        for entry in entries:
            if entry.id in seen:
                raise RuntimeError(f"Vocabulary dataset '{path}' repeats id '{entry.id}'.")
            seen.add(entry.id)
        return entries

    def entries(self) -> Sequence[VocabularyEntry]:
        return self._entries

    def get(self, entry_id: str) -> VocabularyEntry | None:
        return self._by_id.get(entry_id)

    def __len__(self) -> int:
        return len(self._entries)
