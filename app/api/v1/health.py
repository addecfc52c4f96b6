from fastapi import APIRouter, Depends

from app.api.deps import get_vocabulary
from app.core.config import settings
from app.vocabulary import VocabularyProvider

router = APIRouter()


@router.get("/health", summary="Health Check", description="Report liveness and the loaded vocabulary size.")
async def health_check(vocabulary: VocabularyProvider = Depends(get_vocabulary)):
    entries = len(vocabulary.entries())
    return {
        "status": "healthy" if entries else "degraded",
        "vocabulary_entries": entries,
        "home_language": settings.home_language,
    }
