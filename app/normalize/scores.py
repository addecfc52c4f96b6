from __future__ import annotations

import math
from numbers import Real
from typing import Any, Mapping

from app.core.config.scoring import get_scoring_value

LOVE_AXES: tuple[str, ...] = (
    "passion",
    "serenity",
    "dependence",
    "autonomy",
    "expressive",
    "restrained",
    "enduring",
    "fleeting",
    "poetic",
    "pragmatic",
)


def normalize_score(value: Any) -> float:
    """Clamp one externally supplied axis value into [0, 1]; unknown means neutral."""
    default = float(get_scoring_value("scores.default", 0.5))
    precision = int(get_scoring_value("scores.precision", 3))

    if isinstance(value, bool) or not isinstance(value, Real):
        return default
    number = float(value)
    if math.isnan(number):
        return default
    if number < 0:
        return 0.0
    if number > 1:
        return 1.0
    return round(number, precision)


def normalize_scores(raw: Mapping[str, Any] | None) -> dict[str, float]:
    source = raw if isinstance(raw, Mapping) else {}
    return {axis: normalize_score(source.get(axis)) for axis in LOVE_AXES}
