from __future__ import annotations

import json
import logging
import re
import time
import uuid
from typing import Sequence, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from app.ai.types import AIClient, ChatMessage
from app.core.errors import UpstreamParseError

logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def _strip_code_fence(text: str) -> str:
    stripped = (text or "").strip()
    match = _CODE_FENCE_RE.match(stripped)
    return match.group(1) if match else stripped


def parse_json_payload(text: str, model: type[PayloadT], *, step: str = "unknown") -> PayloadT:
    try:
        parsed = json.loads(_strip_code_fence(text))
    except json.JSONDecodeError as exc:
        logger.warning("llm_json_decode_failed step=%s text_len=%s: %s", step, len(text or ""), exc)
        raise UpstreamParseError(f"The {step} step returned malformed JSON.") from exc

    if not isinstance(parsed, dict):
        logger.warning("llm_json_not_object step=%s type=%s", step, type(parsed).__name__)
        raise UpstreamParseError(f"The {step} step did not return a JSON object.")

    try:
        return model.model_validate(parsed)
    except SchemaValidationError as exc:
        logger.warning("llm_json_schema_invalid step=%s errors=%s", step, exc.error_count())
        raise UpstreamParseError(f"The {step} step returned an unexpected shape.") from exc


async def json_completion(
    client: AIClient,
    messages: Sequence[ChatMessage],
    model: type[PayloadT],
    *,
    step: str = "unknown",
) -> PayloadT:
    run_id = uuid.uuid4().hex[:12]
    started = time.perf_counter()
    status = "error"
    try:
        content = await client.complete(messages)
        payload = parse_json_payload(content, model, step=step)
        status = "success"
        return payload
    except UpstreamParseError:
        status = "invalid_schema"
        raise
    finally:
        logger.info(
            "llm_step run_id=%s step=%s status=%s latency_ms=%s",
            run_id,
            step,
            status,
            int((time.perf_counter() - started) * 1000),
        )
