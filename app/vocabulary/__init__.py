from functools import lru_cache

from app.core.config import settings

from .local_vocabulary import LocalVocabulary
from .provider import VocabularyProvider


@lru_cache(maxsize=1)
def get_default_vocabulary() -> VocabularyProvider:
    return LocalVocabulary(settings.vocabulary_path)


__all__ = ["VocabularyProvider", "LocalVocabulary", "get_default_vocabulary"]
