from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from app.schemas.vocabulary import RankedCandidate, VocabularyEntry

from .embeddings import EmbeddingCache, EmbeddingProvider, cosine_similarity

logger = logging.getLogger(__name__)


def build_reference_text(entry: VocabularyEntry) -> str:
    return f"{entry.term}\n{entry.gloss}\n{', '.join(entry.tags)}\n{entry.culture_note or ''}"


def prioritize_languages(
    ranked: Sequence[RankedCandidate],
    home_language: str,
) -> list[RankedCandidate]:
    """Move every home-language entry behind all other languages, keeping similarity order."""
    home = home_language.strip().lower()
    foreign = [item for item in ranked if item.entry.lang != home]
    native = [item for item in ranked if item.entry.lang == home]
    return foreign + native


async def rank_with_scores(
    query_text: str,
    vocabulary: Sequence[VocabularyEntry],
    embedder: EmbeddingProvider,
    *,
    cache: EmbeddingCache | None = None,
) -> list[RankedCandidate]:
    if not vocabulary:
        return []

    entry_cache = cache if cache is not None else EmbeddingCache()
    query_vector = await embedder.embed(query_text)
    entry_vectors = await asyncio.gather(
        *(entry_cache.get_or_embed(build_reference_text(entry), embedder.embed) for entry in vocabulary)
    )

    ranked = [
        RankedCandidate(
            entry=entry,
            similarity=max(-1.0, min(1.0, cosine_similarity(query_vector, vector))),
        )
        for entry, vector in zip(vocabulary, entry_vectors)
    ]
    ranked.sort(key=lambda item: item.similarity, reverse=True)
    return ranked


async def rank_candidates(
    query_text: str,
    vocabulary: Sequence[VocabularyEntry],
    embedder: EmbeddingProvider,
    *,
    top_k: int,
    home_language: str,
    cache: EmbeddingCache | None = None,
) -> list[VocabularyEntry]:
    if top_k <= 0 or not vocabulary:
        return []

    ranked = await rank_with_scores(query_text, vocabulary, embedder, cache=cache)
    shortlist = prioritize_languages(ranked, home_language)[:top_k]
    logger.debug(
        "candidates_ranked total=%s top_k=%s shortlist=%s",
        len(ranked),
        top_k,
        [(item.entry.id, round(item.similarity, 4)) for item in shortlist],
    )
    return [item.entry for item in shortlist]
