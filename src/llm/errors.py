from __future__ import annotations

from enum import Enum
from typing import Optional

# Substrings local servers put in their error body when the loaded model has
# no vision projector. These follow the server's wording and may change with
# new releases.
CAPABILITY_MARKERS = (
    "image input is not supported",
    "mmproj",
    "multimodal",
)

CONNECTION_MESSAGE = (
    "Cannot connect to Jan.ai. Please ensure Jan.ai is running and the API server is enabled."
)


class LLMError(RuntimeError):
    """Base class for failures talking to the model endpoint."""


class LLMConnectionError(LLMError):
    def __init__(self, message: str = CONNECTION_MESSAGE):
        super().__init__(message)


class LLMAPIError(LLMError):
    def __init__(self, status_code: int, reason: str = "", body: str = ""):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"Jan.ai API error: {status_code} {reason}\n{body}".rstrip())


class LLMEmptyResponseError(LLMError):
    def __init__(self, message: str = "Model returned empty response"):
        super().__init__(message)


class FailureKind(str, Enum):
    TRANSPORT = "transport"
    HTTP = "http"
    CAPABILITY = "capability"
    OTHER = "other"


def is_capability_message(message: Optional[str]) -> bool:
    lowered = (message or "").lower()
    return any(marker in lowered for marker in CAPABILITY_MARKERS)


def classify_failure(exc: BaseException) -> FailureKind:
    """Map an exception raised by the LLM client to a coarse failure kind.

    A capability rejection usually arrives as an HTTP error, so the message is
    checked before the exception type.
    """
    if isinstance(exc, LLMConnectionError):
        return FailureKind.TRANSPORT
    if is_capability_message(str(exc)):
        return FailureKind.CAPABILITY
    if isinstance(exc, LLMAPIError):
        return FailureKind.HTTP
    return FailureKind.OTHER
