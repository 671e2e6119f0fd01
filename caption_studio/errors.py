"""Error kinds raised at the generation boundary and how they are shown.

WHY: A failed generation must leave the user on the input screen with a
titled, human-readable message. Callers need typed exceptions to tell a
too-large file from a bad API key, a quota problem, a flaky network, or a
response the AI mangled.

HOW: Three exception classes share a CaptionStudioError base.
UpstreamServiceError carries an ErrorCategory derived from the raw failure
text by classify_failure(). describe_error() turns any exception into an
ErrorNotice(title, message) for display.

RULES:
- The caption core never raises these for well-typed input
- MalformedResponseError means the response was rejected as a whole
- Unrecognized upstream failures fall back to ErrorCategory.GENERIC
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CaptionStudioError(Exception):
    """Base class for all errors raised by caption_studio."""


class ValidationError(CaptionStudioError, ValueError):
    """Input rejected before any work is done.

    Raised for media above the size ceiling, structurally invalid export
    configuration, and caption files that do not match the schema.
    """


class ErrorCategory(str, Enum):
    """User-facing category of a Generation Service failure."""

    NETWORK = "network"
    INVALID_CREDENTIAL = "invalid_credential"
    QUOTA_EXCEEDED = "quota_exceeded"
    GENERIC = "generic"


_CATEGORY_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.NETWORK: (
        "A network error occurred, which can happen with large files or an "
        "unstable connection. Please try a smaller file or check your connection."
    ),
    ErrorCategory.INVALID_CREDENTIAL: (
        "Your API key appears to be invalid. Please check your environment "
        "configuration and ensure it is set correctly."
    ),
    ErrorCategory.QUOTA_EXCEEDED: (
        "The API quota has been exceeded. Please check your Google AI account "
        "for usage limits."
    ),
    ErrorCategory.GENERIC: (
        "The AI service failed to process the video. Please try again later."
    ),
}

_NETWORK_SIGNATURES = ("xhr error", "500", "FETCH_ERROR")
_CREDENTIAL_SIGNATURES = ("API_KEY_INVALID", "API key not valid")
_QUOTA_SIGNATURES = ("quota", "resource_exhausted")


def classify_failure(detail: str) -> ErrorCategory:
    """Map raw failure text from the Generation Service to a category.

    RULES:
    - Network signatures are checked first, then credentials, then quota
    - Quota matching is case-insensitive
    - Anything else is GENERIC
    """
    if any(sig in detail for sig in _NETWORK_SIGNATURES):
        return ErrorCategory.NETWORK
    if any(sig in detail for sig in _CREDENTIAL_SIGNATURES):
        return ErrorCategory.INVALID_CREDENTIAL
    lowered = detail.lower()
    if any(sig in lowered for sig in _QUOTA_SIGNATURES):
        return ErrorCategory.QUOTA_EXCEEDED
    return ErrorCategory.GENERIC


class UpstreamServiceError(CaptionStudioError):
    """Raised when the Generation Service call fails.

    WHY: The raw failure (HTTP body, transport exception text) is useless
    to end users, but the category decides which advice to show.

    HOW: The category is derived from the raw detail unless given
    explicitly. str(exc) is the user-facing message; ``detail`` keeps the
    raw text for logs.
    """

    def __init__(self, detail: str, category: ErrorCategory | None = None) -> None:
        self.detail = detail
        self.category = category or classify_failure(detail)
        self.message = _CATEGORY_MESSAGES[self.category]
        super().__init__(self.message)


class MalformedResponseError(CaptionStudioError):
    """The Generation Service returned invalid JSON or schema-violating data."""


@dataclass(frozen=True)
class ErrorNotice:
    """A titled error message ready for display."""

    title: str
    message: str

    def __str__(self) -> str:
        return "{}: {}".format(self.title, self.message)


_CATEGORY_TITLES: dict[ErrorCategory, str] = {
    ErrorCategory.NETWORK: "Network Error",
    ErrorCategory.INVALID_CREDENTIAL: "API Key Error",
    ErrorCategory.QUOTA_EXCEEDED: "Quota Exceeded",
    ErrorCategory.GENERIC: "Request Failed",
}


def describe_error(exc: BaseException) -> ErrorNotice:
    """Turn an exception from the generation pipeline into an ErrorNotice.

    WHY: The application boundary recovers every error kind and shows it
    with a short title so users know whether to fix their file, their key,
    or just retry.

    RULES:
    - UpstreamServiceError → title from its category
    - MalformedResponseError → "AI Response Error"
    - ValidationError about file size → "File Too Large", message reworded
    - A missing/invalid API key message → "API Key Error"
    - Anything else → "Request Failed" with the exception text
    """
    if isinstance(exc, UpstreamServiceError):
        return ErrorNotice(_CATEGORY_TITLES[exc.category], exc.message)
    if isinstance(exc, MalformedResponseError):
        return ErrorNotice("AI Response Error", str(exc))

    message = str(exc) or "Failed to process your request. Please try again."
    if isinstance(exc, ValidationError) and message.startswith("File is too large"):
        return ErrorNotice(
            "File Too Large", message.replace("File is too large", "Your file", 1)
        )
    if "api key" in message.lower():
        return ErrorNotice("API Key Error", message)
    return ErrorNotice("Request Failed", message)
