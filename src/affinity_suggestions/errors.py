"""
Error taxonomy for the affinity suggestion client.

Every failure the client can report maps onto one SuggestionErrorCode and a
fixed user-facing message. Technical detail is logged, never shown.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

RETRY_LATER_MESSAGE = (
    "Se produjo un error al procesar tu solicitud. "
    "Por favor, intenta nuevamente más tarde."
)


class SuggestionErrorCode(str, Enum):
    """Classified failure kinds."""

    GENERIC_ERROR = "SUGGESTION_001"  # 2xx other than 200, or bad body
    CONNECTION_ERROR = "SUGGESTION_002"  # no response received
    SERVER_ERROR = "SUGGESTION_003"  # 5xx
    UNEXPECTED_ERROR = "SUGGESTION_004"  # anything else

    BAD_REQUEST = "SUGGESTION_400"
    UNAUTHORIZED = "SUGGESTION_401"
    FORBIDDEN = "SUGGESTION_403"
    NOT_FOUND = "SUGGESTION_404"
    SERVER_EXCEPTION = "SUGGESTION_500"  # any other non-2xx


ERROR_MESSAGES: dict[SuggestionErrorCode, str] = {
    SuggestionErrorCode.GENERIC_ERROR: RETRY_LATER_MESSAGE,
    SuggestionErrorCode.CONNECTION_ERROR: RETRY_LATER_MESSAGE,
    SuggestionErrorCode.SERVER_ERROR: RETRY_LATER_MESSAGE,
    SuggestionErrorCode.UNEXPECTED_ERROR: RETRY_LATER_MESSAGE,
    SuggestionErrorCode.BAD_REQUEST: "La solicitud es inválida. Por favor, revisa tus datos.",
    SuggestionErrorCode.UNAUTHORIZED: "Autenticación incorrecta. Por favor, revisa tus credenciales.",
    SuggestionErrorCode.FORBIDDEN: "No tienes permiso para acceder a este recurso.",
    SuggestionErrorCode.NOT_FOUND: "El recurso solicitado no se encontró.",
    SuggestionErrorCode.SERVER_EXCEPTION: RETRY_LATER_MESSAGE,
}

STATUS_CODES: dict[int, SuggestionErrorCode] = {
    400: SuggestionErrorCode.BAD_REQUEST,
    401: SuggestionErrorCode.UNAUTHORIZED,
    403: SuggestionErrorCode.FORBIDDEN,
    404: SuggestionErrorCode.NOT_FOUND,
}


def classify_status(status_code: int) -> SuggestionErrorCode:
    """
    Classify an HTTP status code that is not a plain 200.

    Args:
        status_code: Status returned by the remote service

    Returns:
        The error code reported to callers for that status
    """
    if status_code in STATUS_CODES:
        return STATUS_CODES[status_code]
    if 500 <= status_code < 600:
        return SuggestionErrorCode.SERVER_ERROR
    if 200 <= status_code < 300:
        return SuggestionErrorCode.GENERIC_ERROR
    return SuggestionErrorCode.SERVER_EXCEPTION


@dataclass(frozen=True)
class SuggestionFailure:
    """A classified failure: error code plus sanitized message."""

    error_code: SuggestionErrorCode
    message: str

    @classmethod
    def from_code(cls, error_code: SuggestionErrorCode) -> "SuggestionFailure":
        """Build the failure with the standard message for a code."""
        return cls(error_code=error_code, message=ERROR_MESSAGES[error_code])

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"code": self.error_code.value, "message": self.message}


class SuggestionServiceError(Exception):
    """Raised by Outcome.unwrap() for callers that prefer exceptions."""

    def __init__(self, message: str, error_code: SuggestionErrorCode):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    @classmethod
    def from_failure(cls, failure: SuggestionFailure) -> "SuggestionServiceError":
        return cls(failure.message, failure.error_code)
