from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

DEFAULT_SCORING_PATH = Path(__file__).resolve().parents[3] / "config" / "scoring.yaml"


def scoring_config_path() -> Path:
    override = (os.getenv("SCORING_CONFIG_PATH") or "").strip()
    return Path(override) if override else DEFAULT_SCORING_PATH


@lru_cache(maxsize=1)
def get_scoring_config() -> dict[str, Any]:
    """Ranking and excerpt tunables, read once per process from YAML."""
    path = scoring_config_path()
    try:
        with path.open("r", encoding="utf-8") as handle:
            parsed = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise RuntimeError(f"Scoring config '{path}' does not exist.") from exc
    except (OSError, yaml.YAMLError) as exc:
        raise RuntimeError(f"Scoring config '{path}' could not be loaded: {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(f"Scoring config '{path}' must be a mapping at the top level.")
    return parsed


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Look up a dotted key such as 'excerpts.weights.emotion'."""
    node: Any = get_scoring_config()
    for key in path.split(".") if path else ():
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node if path else default
