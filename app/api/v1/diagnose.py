from fastapi import APIRouter, Depends, Request

from app.ai.types import AIClient
from app.api.deps import get_client, get_embedding_cache, get_vocabulary
from app.core.rate_limit import rate_limit
from app.quiz.questions import question_catalog
from app.schemas.diagnose import DiagnoseRequest, DiagnoseResponse
from app.semantic.embeddings import EmbeddingCache
from app.services.diagnosis_service import run_diagnosis
from app.vocabulary import VocabularyProvider

router = APIRouter()


@router.post("/diagnose", response_model=DiagnoseResponse, response_model_exclude_none=True)
@rate_limit()
async def diagnose(
    request: Request,
    payload: DiagnoseRequest,
    client: AIClient = Depends(get_client),
    vocabulary: VocabularyProvider = Depends(get_vocabulary),
    cache: EmbeddingCache = Depends(get_embedding_cache),
):
    return await run_diagnosis(
        payload,
        client=client,
        vocabulary=vocabulary,
        cache=cache,
        catalog=question_catalog(),
    )
