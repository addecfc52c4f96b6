from __future__ import annotations

import logging
import os
from typing import Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from app.ai.types import ChatMessage
from app.core.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        embed_model: str = "text-embedding-3-small",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 2,
        temperature: float = 0.2,
    ):
        self._model = model
        self._embed_model = embed_model
        self._temperature = temperature
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=float(os.getenv("OPENAI_TIMEOUT_S", str(timeout_s))),
            max_retries=int(os.getenv("OPENAI_MAX_RETRIES", str(max_retries))),
        )

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]

        try:
            completion = await self._client.chat.completions.create(
                model=self._model,
                messages=payload,
                temperature=self._temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            logger.warning("openai_completion_failed model=%s: %s", self._model, exc)
            raise UpstreamUnavailable("The language model could not be reached.") from exc

        content = completion.choices[0].message.content if completion.choices else ""
        if not content:
            raise UpstreamUnavailable("The language model returned an empty response.")
        return content

    async def embed(self, text: str) -> list[float]:
        try:
            response = await self._client.embeddings.create(input=text, model=self._embed_model)
        except OpenAIError as exc:
            logger.warning("openai_embedding_failed model=%s text_len=%s: %s", self._embed_model, len(text), exc)
            raise UpstreamUnavailable("The embedding service could not be reached.") from exc

        vector = response.data[0].embedding if response.data else None
        if not vector:
            raise UpstreamUnavailable("The embedding service returned an empty vector.")
        return list(vector)
