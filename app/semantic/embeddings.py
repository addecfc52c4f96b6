from __future__ import annotations

import math
from typing import Awaitable, Callable, Protocol, Sequence

from app.core.errors import DimensionMismatch


class EmbeddingProvider(Protocol):
    async def embed(self, text: str) -> list[float]:
        """Return the vector embedding for one input text."""


class EmbeddingCache:
    """Exact-text embedding memo owned by whoever builds the ranker inputs.

    Unbounded on purpose only for the fixed vocabulary reference texts; do not
    route per-request query texts through it.
    """

    def __init__(self, seed: dict[str, Sequence[float]] | None = None) -> None:
        self._vectors: dict[str, list[float]] = {}
        for text, vector in (seed or {}).items():
            self._vectors[text] = list(vector)

    def __len__(self) -> int:
        return len(self._vectors)

    def __contains__(self, text: object) -> bool:
        return text in self._vectors

    def get(self, text: str) -> list[float] | None:
        return self._vectors.get(text)

    def put(self, text: str, vector: Sequence[float]) -> None:
        self._vectors[text] = list(vector)

    def clear(self) -> None:
        self._vectors.clear()

    async def get_or_embed(self, text: str, embed: Callable[[str], Awaitable[list[float]]]) -> list[float]:
        cached = self._vectors.get(text)
        if cached is not None:
            return cached

        vector = list(await embed(text))
        self._vectors[text] = vector
        return vector


def cosine_similarity(left: Sequence[float], right: Sequence[float]) -> float:
    """Cosine of the angle between two equal-length vectors.

    Zero-magnitude input yields 0.0 rather than an error; callers that need a
    strict mathematical contract must check magnitudes themselves.
    """
    if len(left) != len(right):
        raise DimensionMismatch(f"cannot compare vectors of length {len(left)} and {len(right)}")
    dot = sum(a * b for a, b in zip(left, right))
    left_norm = math.sqrt(sum(a * a for a in left))
    right_norm = math.sqrt(sum(b * b for b in right))
    if left_norm <= 0 or right_norm <= 0:
        return 0.0
    return dot / (left_norm * right_norm)
