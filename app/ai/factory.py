from functools import lru_cache

from app.ai.config import load_ai_config
from app.ai.types import AIClient

from app.ai.providers.openai_provider import OpenAIProvider


@lru_cache(maxsize=1)
def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.model, embed_model=cfg.embed_model)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
