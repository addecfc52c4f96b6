from __future__ import annotations

import logging
import time
from typing import Mapping, Sequence

from app.ai.types import AIClient
from app.core.config import settings
from app.core.config.scoring import get_scoring_value
from app.core.errors import DiagnosisError, UpstreamParseError
from app.features.excerpts import extract_excerpts
from app.normalize.answers import answers_to_analyzer_text, canonicalize_answers
from app.normalize.scores import LOVE_AXES, normalize_scores
from app.normalize.utils import short_hash
from app.prompts.builders import build_analyzer_messages, build_matcher_messages, build_reflection_messages
from app.quiz.questions import Question
from app.schemas.diagnose import (
    AnalysisPayload,
    AnalysisResult,
    CanonicalAnswer,
    DiagnoseRequest,
    DiagnoseResponse,
    MatcherPick,
    MatchPayload,
    Reflection,
    ReflectionPayload,
)
from app.schemas.vocabulary import VocabularyEntry
from app.semantic.embeddings import EmbeddingCache
from app.semantic.ranker import rank_candidates
from app.services.llm_json import json_completion
from app.vocabulary import VocabularyProvider

logger = logging.getLogger(__name__)

RESULT_DISCLAIMER = "※ 診断は文化背景を断定するものではなく、個人差があります。"
FALLBACK_INTERPRETATION = (
    "あなたの言葉には、相手との距離や時間を大切に味わう感覚がにじんでいます。"
    "選ばれた言葉は、その感覚にそっと名前を与えるものです。"
)
FALLBACK_TONE_HINT = "gentle"


def shortlist_size(max_picks: int) -> int:
    if max_picks > 1:
        return int(get_scoring_value("ranking.top_k.multi_pick", 12))
    return int(get_scoring_value("ranking.top_k.single_pick", 6))


def resolve_picks(
    payload: MatchPayload,
    shortlist: Sequence[VocabularyEntry],
    vocabulary: VocabularyProvider,
    max_picks: int,
) -> list[MatcherPick]:
    allowed = {entry.id for entry in shortlist}
    picks: list[MatcherPick] = []
    seen: set[str] = set()
    for pick in payload.picks:
        if pick.id not in allowed:
            logger.warning("matcher_pick_outside_shortlist pick_id=%s", pick.id)
            raise UpstreamParseError("The matching step chose a word outside the candidate list.")
        if pick.id in seen:
            continue
        seen.add(pick.id)
        entry = vocabulary.get(pick.id)
        if entry is not None and not pick.gloss:
            pick = pick.model_copy(update={"gloss": entry.gloss})
        picks.append(pick)
    return picks[:max_picks]


async def reflect(
    client: AIClient,
    *,
    summary: str,
    answers: Sequence[CanonicalAnswer],
    picks: Sequence[MatcherPick],
    max_excerpts: int,
) -> Reflection:
    excerpts = extract_excerpts(answers, max_excerpts)
    try:
        payload = await json_completion(
            client,
            build_reflection_messages(summary, excerpts, picks),
            ReflectionPayload,
            step="reflection",
        )
    except Exception as exc:  # noqa: BLE001 - reflection must never fail the request
        logger.warning("reflection_fallback error=%s", type(exc).__name__)
        return Reflection(
            excerpts=excerpts,
            interpretation=FALLBACK_INTERPRETATION,
            tone_hint=FALLBACK_TONE_HINT,
            fallback=True,
        )

    # Only quotes that really came from the answers are shown.
    grounded = [item for item in payload.excerpts if item in excerpts] or excerpts
    return Reflection(
        excerpts=grounded[:max_excerpts],
        interpretation=payload.interpretation,
        tone_hint=payload.tone_hint or FALLBACK_TONE_HINT,
    )


async def run_diagnosis(
    request: DiagnoseRequest,
    *,
    client: AIClient,
    vocabulary: VocabularyProvider,
    cache: EmbeddingCache,
    catalog: Mapping[int, Question] | None = None,
) -> DiagnoseResponse:
    started = time.perf_counter()
    answers = canonicalize_answers(request.answers, catalog)
    if not vocabulary.entries():
        raise DiagnosisError("The vocabulary dataset is empty; nothing can be matched.", code="vocabulary_empty")
    answer_text = answers_to_analyzer_text(answers, settings.max_free_text_chars)
    logger.info(
        "diagnose_started answers=%s text_hash=%s text_len=%s",
        len(answers),
        short_hash(answer_text),
        len(answer_text),
    )

    analysis = await json_completion(
        client,
        build_analyzer_messages(answer_text, LOVE_AXES),
        AnalysisPayload,
        step="analysis",
    )
    scores = normalize_scores(analysis.scores)

    query_text = f"{answer_text}\n要約: {analysis.summary}"
    shortlist = await rank_candidates(
        query_text,
        vocabulary.entries(),
        client,
        top_k=shortlist_size(request.max_picks),
        home_language=settings.home_language,
        cache=cache,
    )

    match = await json_completion(
        client,
        build_matcher_messages(analysis.summary, scores, shortlist, request.max_picks),
        MatchPayload,
        step="matching",
    )
    picks = resolve_picks(match, shortlist, vocabulary, request.max_picks)

    reflection = None
    if request.include_reflection and settings.reflection_enabled:
        reflection = await reflect(
            client,
            summary=analysis.summary,
            answers=answers,
            picks=picks,
            max_excerpts=request.max_excerpts,
        )

    logger.info(
        "diagnose_completed picks=%s reflection=%s latency_ms=%s",
        [pick.id for pick in picks],
        "none" if reflection is None else ("fallback" if reflection.fallback else "ok"),
        int((time.perf_counter() - started) * 1000),
    )
    return DiagnoseResponse(
        analysis=AnalysisResult(summary=analysis.summary, scores=scores),
        picks=picks,
        reflection=reflection,
        disclaimer=RESULT_DISCLAIMER,
    )
