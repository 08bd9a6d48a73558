"""
Data models for the affinity suggestion client.

Request/response value types, the tagged Outcome result, and decoding of the
upstream suggestion payload into a stable internal shape.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from .errors import SuggestionFailure, SuggestionServiceError

T = TypeVar("T")

# Upstream responses may wrap the payload one level deep under this key
RESULT_WRAPPER_KEY = "result"


class ResponseFormatError(ValueError):
    """The remote service answered 200 with a body we cannot decode."""


class DecisionAction(str, Enum):
    """Decision about a suggested match. Values are the wire tokens."""

    ACCEPT = "aceptar"
    DISCARD = "descartar"


@dataclass(frozen=True)
class SuggestionRequest:
    """Ask for ranked matches for one work offer."""

    business_user_id: int
    work_offer_id: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "business_user_id": self.business_user_id,
            "work_offer_id": self.work_offer_id,
        }


@dataclass(frozen=True)
class SuggestionItem:
    """One ranked candidate. Values pass through as the service sent them."""

    match_user_id: int
    affinity: float
    rank: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "match_user_id": self.match_user_id,
            "affinity": self.affinity,
            "rank": self.rank,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SuggestionItem":
        """
        Decode one upstream record, dropping fields we do not model.

        Raises:
            ResponseFormatError: if a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ResponseFormatError(f"Suggestion record is not an object: {data!r}")
        return cls(
            match_user_id=_require_int(data, "match_user_id"),
            affinity=_require_number(data, "affinity"),
            rank=_require_int(data, "rank"),
        )


@dataclass(frozen=True)
class SuggestionResult:
    """A batch of suggestions, in the service's ranking order."""

    uuid: str
    suggestions: tuple[SuggestionItem, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "uuid": self.uuid,
            "data": {
                "suggestions": [s.to_dict() for s in self.suggestions],
            },
        }


@dataclass(frozen=True)
class InterestDecision:
    """A user's decision about a suggestion from batch `uuid`."""

    uuid: str
    business_user_id: int
    match_user_id: int
    work_offer_id: int
    action: DecisionAction

    def to_payload(self) -> dict[str, Any]:
        return {
            "uuid": self.uuid,
            "match_user_id": self.match_user_id,
            "work_offer_id": self.work_offer_id,
            "business_user_id": self.business_user_id,
            "action": self.action.value,
        }


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Result of one client operation.

    Exactly one of `value` and `failure` is meaningful: a success carries the
    value, a failure carries the classified SuggestionFailure.
    """

    value: T | None = None
    failure: SuggestionFailure | None = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, failure: SuggestionFailure) -> "Outcome[T]":
        return cls(failure=failure)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> T:
        """Return the value, or raise SuggestionServiceError for a failure."""
        if self.failure is not None:
            raise SuggestionServiceError.from_failure(self.failure)
        return self.value

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        if self.failure is not None:
            return {"error": self.failure.to_dict()}
        if hasattr(self.value, "to_dict"):
            return self.value.to_dict()
        return {"result": self.value}

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False)


def parse_suggestion_response(body: bytes | str) -> SuggestionResult:
    """
    Decode the body of a 200 response from the suggestions endpoint.

    Accepts both the flat shape `{"uuid", "results"}` and the wrapped shape
    `{"success", "message", "result": {"uuid", "results"}}`.

    Raises:
        ResponseFormatError: on invalid JSON or a missing/mistyped field
    """
    try:
        payload = json.loads(body)
    except (TypeError, ValueError) as e:
        raise ResponseFormatError(f"Response body is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ResponseFormatError(f"Response body is not an object: {type(payload).__name__}")

    # A flat body may carry an unrelated "result" object of its own
    wrapped = payload.get(RESULT_WRAPPER_KEY)
    if isinstance(wrapped, dict) and "uuid" not in payload and "results" not in payload:
        payload = wrapped

    uuid = payload.get("uuid")
    if not isinstance(uuid, str):
        raise ResponseFormatError(f"Missing or invalid 'uuid': {uuid!r}")

    records = payload.get("results")
    if not isinstance(records, list):
        raise ResponseFormatError(f"Missing or invalid 'results': {records!r}")

    return SuggestionResult(
        uuid=uuid,
        suggestions=tuple(SuggestionItem.from_dict(r) for r in records),
    )


def _require_int(data: dict[str, Any], key: str) -> int:
    if key not in data:
        raise ResponseFormatError(f"Suggestion record missing '{key}'")
    value = data[key]
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise ResponseFormatError(f"Suggestion field '{key}' is not an integer: {value!r}")
    return value


def _require_number(data: dict[str, Any], key: str) -> float:
    if key not in data:
        raise ResponseFormatError(f"Suggestion record missing '{key}'")
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ResponseFormatError(f"Suggestion field '{key}' is not a number: {value!r}")
    return value
