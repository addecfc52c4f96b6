"""Extractive "evidence" quotes for the reflection step.

Short phrases are cut from free-text answers, masked for personal details,
scored with small keyword dictionaries and de-duplicated by character overlap.
Nothing here calls a model.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Sequence

from app.core.config.scoring import get_scoring_value
from app.normalize.utils import normalize_line
from app.schemas.diagnose import CanonicalAnswer

_EXCERPT_KINDS = {"open", "yesno+open"}

_SENTENCE_SPLIT_RE = re.compile(r"[。！？!?]")
_CLAUSE_SPLIT_RE = re.compile(r"[、,]")
_SENTENCE_END_RE = re.compile(r"[。.!！？?]$")
_LATIN_RE = re.compile(r"[A-Za-z0-9]")

# Applied in order; each rule sees the output of the previous one.
_PII_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(?<![0-9A-Za-z._%+-])@[0-9A-Za-z_.]+"), "@…"),
    (re.compile(r"[0-9A-Za-z._%+-]+@[0-9A-Za-z.-]+\.[A-Za-z]{2,}"), "［連絡先］"),
    (re.compile(r"\b0\d{1,4}[- ]?\d{1,4}[- ]?\d{3,4}\b", re.ASCII), "［連絡先］"),
    (re.compile(r"(.{0,8})(市|区|町|村|駅)(?=[0-9A-Za-z]|\b)"), "［場所］"),
    (re.compile(r"([一-龥々]{1,4}|[ぁ-んァ-ン]{2,4})(さん|くん|ちゃん)"), "［名前］"),
)


@dataclass(frozen=True)
class ScoredPhrase:
    text: str
    score: float


def _cfg(path: str, default):
    return get_scoring_value(f"excerpts.{path}", default)


def _keywords(name: str) -> tuple[str, ...]:
    return tuple(_cfg(f"keywords.{name}", []) or [])


def split_to_phrases(text: str) -> list[str]:
    min_chars = int(_cfg("phrase.min_chars", 20))
    max_chars = int(_cfg("phrase.max_chars", 48))
    window = int(_cfg("phrase.window_chars", 42))
    stride = int(_cfg("phrase.stride_chars", 36))

    segments = [
        clause.strip()
        for sentence in _SENTENCE_SPLIT_RE.split(text)
        for clause in _CLAUSE_SPLIT_RE.split(sentence)
    ]
    segments = [segment for segment in segments if segment]
    if len(segments) == 1 and len(segments[0]) < min_chars:
        return segments

    phrases: list[str] = []
    for segment in segments:
        if min_chars <= len(segment) <= max_chars:
            phrases.append(segment)
        elif len(segment) > max_chars:
            for start in range(0, len(segment), stride):
                chunk = segment[start : start + window]
                if len(chunk) >= min_chars:
                    phrases.append(chunk)
    return phrases


def mask_pii(text: str) -> str:
    masked = text
    for pattern, placeholder in _PII_RULES:
        masked = pattern.sub(placeholder, masked)
    return masked


def is_reasonable_length(text: str) -> bool:
    min_chars = int(_cfg("length_filter.min_chars", 16))
    max_chars = int(_cfg("length_filter.max_chars", 60))
    max_latin_ratio = float(_cfg("length_filter.max_latin_ratio", 0.1))
    length = len(text)
    latin = len(_LATIN_RE.findall(text))
    return min_chars <= length <= max_chars and latin <= math.ceil(length * max_latin_ratio)


def _density(text: str, keywords: Sequence[str]) -> float:
    saturation = float(_cfg("density_saturation_hits", 2)) or 1.0
    hits = sum(1 for keyword in keywords if keyword in text)
    return min(1.0, hits / saturation)


def score_phrase(text: str) -> float:
    zero_at = float(_cfg("length_curve.zero_at", 18))
    one_at = float(_cfg("length_curve.one_at", 44))

    emotion = _density(text, _keywords("emotion"))
    action = 1.0 if any(keyword in text for keyword in _keywords("action")) else 0.0
    sensory = _density(text, _keywords("sensory"))
    length = min(1.0, max(0.0, (len(text) - zero_at) / (one_at - zero_at)))
    return (
        float(_cfg("weights.emotion", 0.35)) * emotion
        + float(_cfg("weights.action", 0.25)) * action
        + float(_cfg("weights.sensory", 0.20)) * sensory
        + float(_cfg("weights.length", 0.20)) * length
    )


def char_jaccard(left: str, right: str) -> float:
    left_chars = set(left)
    right_chars = set(right)
    union = left_chars | right_chars
    if not union:
        return 0.0
    return len(left_chars & right_chars) / len(union)


def compress(text: str) -> str:
    compressed = text
    for filler in _cfg("fillers", []) or []:
        compressed = compressed.replace(filler, "")
    return normalize_line(compressed)


def ensure_sentence_end(text: str) -> str:
    return text if _SENTENCE_END_RE.search(text) else text + "。"


def score_candidates(texts: Sequence[str]) -> list[ScoredPhrase]:
    candidates = [mask_pii(phrase) for text in texts for phrase in split_to_phrases(text)]
    scored = [ScoredPhrase(text=phrase, score=score_phrase(phrase)) for phrase in candidates if is_reasonable_length(phrase)]
    scored.sort(key=lambda item: item.score, reverse=True)
    return scored


def extract_excerpts(answers: Sequence[CanonicalAnswer], max_excerpts: int = 2) -> list[str]:
    if max_excerpts <= 0:
        return []

    threshold = float(_cfg("jaccard_threshold", 0.6))
    texts = [
        normalize_line(answer.value)
        for answer in answers
        if answer.kind in _EXCERPT_KINDS and answer.value.strip()
    ]

    picked: list[str] = []
    for candidate in score_candidates(texts):
        if len(picked) >= max_excerpts:
            break
        text = ensure_sentence_end(candidate.text)
        if all(char_jaccard(existing, text) < threshold for existing in picked):
            picked.append(text)

    if not picked:
        fallback_min = int(_cfg("fallback.min_chars", 20))
        fallback_max = int(_cfg("fallback.max_chars", 40))
        # Mask before cutting so a truncated address cannot slip past the rules.
        masked = (mask_pii(compress(text)) for text in texts)
        fallback = next((item for item in masked if len(item) >= fallback_min), None)
        if fallback:
            picked.append(ensure_sentence_end(fallback[:fallback_max]))

    return picked
