from __future__ import annotations

from typing import Any

from app.core.config import settings


def cors_allowed_origins() -> list[str]:
    return list(settings.cors_allowed_origins)


def cors_allow_origin_regex() -> str | None:
    regex = (settings.cors_allow_origin_regex or "").strip()
    return regex or None


def cors_options() -> dict[str, Any]:
    return {
        "allow_origins": cors_allowed_origins(),
        "allow_origin_regex": cors_allow_origin_regex(),
        "allow_credentials": settings.cors_allow_credentials,
        "allow_methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["*"],
    }
