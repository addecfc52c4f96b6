from __future__ import annotations


class DiagnosisError(RuntimeError):
    code = "internal_error"
    status_code = 500

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DiagnosisError):
    code = "invalid_request"
    status_code = 400


class EmptyAnswer(ValidationError):
    code = "empty_answer"


class InvalidYesNo(ValidationError):
    code = "invalid_yesno"


class InvalidChoice(ValidationError):
    code = "invalid_choice"


class DuplicateQuestion(ValidationError):
    code = "duplicate_question"


class UpstreamParseError(DiagnosisError):
    """The generation call answered, but not with JSON matching the expected shape."""

    code = "upstream_parse_failed"


class UpstreamUnavailable(DiagnosisError):
    code = "upstream_unavailable"


class DimensionMismatch(ValueError):
    """Vectors of different length were compared; the embedding model setup is inconsistent."""
