from .embeddings import EmbeddingCache, EmbeddingProvider, cosine_similarity
from .ranker import build_reference_text, prioritize_languages, rank_candidates, rank_with_scores

__all__ = [
    "EmbeddingCache",
    "EmbeddingProvider",
    "cosine_similarity",
    "build_reference_text",
    "prioritize_languages",
    "rank_candidates",
    "rank_with_scores",
]
