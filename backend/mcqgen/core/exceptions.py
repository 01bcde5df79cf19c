"""Error taxonomy for the quiz generation pipeline.

Three failure categories reach callers:

- ``ConfigurationError``: missing credential, empty style list, unknown
  style/difficulty. Fatal, never retried.
- ``BackendUnavailableError``: transport, auth, timeout or provider-side
  failure of the model call. The caller may try again.
- ``MalformedResponseError``: the model answered but no well-formed JSON
  array could be read from it. Carries the raw text for debugging.

Field-level problems inside a parseable array are repaired by the
normalizer and never raise.
"""

from __future__ import annotations

from typing import Optional


class QuizGenerationError(Exception):
    """Base class for every error the pipeline surfaces."""

    code = "QUIZ_GENERATION_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class ConfigurationError(QuizGenerationError):
    code = "CONFIGURATION_ERROR"


class BackendUnavailableError(QuizGenerationError):
    code = "BACKEND_UNAVAILABLE"


class MalformedResponseError(QuizGenerationError):
    """The model output holds no usable JSON array.

    ``reason`` is ``"no_array"`` when no ``[...]`` substring exists and
    ``"invalid_json"`` when one exists but fails to deserialize.
    """

    code = "MALFORMED_RESPONSE"

    NO_ARRAY = "no_array"
    INVALID_JSON = "invalid_json"

    def __init__(self, message: str, raw_response: str, reason: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.raw_response = raw_response
        self.reason = reason
        self.cause = cause

    def to_dict(self, max_raw_chars: int = 2000) -> dict:
        data = super().to_dict()
        data["reason"] = self.reason
        data["raw_response"] = self.raw_response[:max_raw_chars]
        return data
