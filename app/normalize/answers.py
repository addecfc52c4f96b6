from __future__ import annotations

from collections import Counter
from typing import Mapping, Sequence

from app.core.errors import DuplicateQuestion, EmptyAnswer, InvalidChoice, InvalidYesNo
from app.quiz.questions import NOTE_SEPARATOR, YES_NO_TOKENS, Question
from app.schemas.diagnose import Answer, CanonicalAnswer

from .utils import clip_text


def split_yes_no_note(raw: str) -> tuple[str, str]:
    """Split "<choice> / <note>" on the first separator only; the note keeps later separators."""
    choice_part, _, note_part = raw.partition(NOTE_SEPARATOR)
    return choice_part.strip(), note_part.strip()


def _require_yes_no(token: str, answer_id: int) -> str:
    if token not in YES_NO_TOKENS:
        raise InvalidYesNo(
            f"Answer {answer_id} must be one of {', '.join(YES_NO_TOKENS)}."
        )
    return token


def canonicalize_answer(answer: Answer, question: Question | None = None) -> CanonicalAnswer:
    raw = answer.value or ""
    kind = answer.kind
    prompt_text = answer.prompt_text.strip() or (question.text if question else "")

    if kind == "open":
        value = raw.strip()
        if not value:
            raise EmptyAnswer(f"Answer {answer.id} is empty.")
        return CanonicalAnswer(id=answer.id, kind=kind, prompt_text=prompt_text, value=value)

    if kind == "yesno":
        choice = _require_yes_no(raw.strip(), answer.id)
        return CanonicalAnswer(id=answer.id, kind=kind, prompt_text=prompt_text, value=choice, choice=choice)

    if kind == "yesno+open":
        choice_part, note = split_yes_no_note(raw)
        choice = _require_yes_no(choice_part, answer.id)
        value = f"{choice} {NOTE_SEPARATOR} {note}" if note else choice
        return CanonicalAnswer(
            id=answer.id,
            kind=kind,
            prompt_text=prompt_text,
            value=value,
            choice=choice,
            note=note,
        )

    if kind == "choice":
        value = raw.strip()
        if not value:
            raise EmptyAnswer(f"Answer {answer.id} is empty.")
        if question is not None and question.choices and value not in question.choices:
            raise InvalidChoice(
                f"Answer {answer.id} must be one of {', '.join(question.choices)}."
            )
        return CanonicalAnswer(id=answer.id, kind=kind, prompt_text=prompt_text, value=value, choice=value)

    raise ValueError(f"Unsupported answer kind '{kind}'")


def canonicalize_answers(
    answers: Sequence[Answer],
    catalog: Mapping[int, Question] | None = None,
) -> list[CanonicalAnswer]:
    counts = Counter(answer.id for answer in answers)
    duplicates = sorted(answer_id for answer_id, count in counts.items() if count > 1)
    if duplicates:
        raise DuplicateQuestion(f"Question {duplicates[0]} was answered more than once.")

    ordered = sorted(answers, key=lambda item: item.id)
    lookup = catalog or {}
    return [canonicalize_answer(answer, lookup.get(answer.id)) for answer in ordered]


def answers_to_query_text(answers: Sequence[CanonicalAnswer]) -> str:
    return "\n".join(f"Q{item.id}:{item.prompt_text}\nA{item.id}:{item.value}" for item in answers)


def answers_to_analyzer_text(answers: Sequence[CanonicalAnswer], max_chars: int) -> str:
    return clip_text(answers_to_query_text(answers), max_chars)
