from contextlib import asynccontextmanager
import logging

from app.api.deps import get_embedding_cache, get_vocabulary
from app.core.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    vocabulary = get_vocabulary()
    entries = vocabulary.entries()
    languages = sorted({entry.lang for entry in entries})
    logger.info(
        "vocabulary_loaded entries=%s languages=%s home_language=%s",
        len(entries),
        ",".join(languages),
        settings.home_language,
    )
    if not entries:
        logger.warning("vocabulary_empty diagnose requests will fail until a dataset is configured")

    yield
    logger.info("embedding_cache_size entries=%s", len(get_embedding_cache()))
