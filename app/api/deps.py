from __future__ import annotations

from functools import lru_cache

from app.ai.factory import get_ai_client
from app.ai.types import AIClient
from app.semantic.embeddings import EmbeddingCache
from app.vocabulary import VocabularyProvider, get_default_vocabulary


@lru_cache(maxsize=1)
def get_embedding_cache() -> EmbeddingCache:
    return EmbeddingCache()


def get_vocabulary() -> VocabularyProvider:
    return get_default_vocabulary()


def get_client() -> AIClient:
    return get_ai_client()
