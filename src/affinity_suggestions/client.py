"""
Affinity suggestion API client.

Wraps the two endpoints of the remote matching service:

- POST affinity-ml-hire          ranked match suggestions for a work offer
- POST affinity-ml-hire/change   record an accept/discard decision

Every public operation performs exactly one HTTP exchange and returns an
Outcome. Transport errors, error statuses and malformed bodies are logged
with their technical detail and reported as a classified SuggestionFailure;
none of them escape to the caller.
"""

import logging
from typing import Any

import httpx

from .config import SuggestionConfig
from .errors import SuggestionErrorCode, SuggestionFailure, classify_status
from .models import (
    DecisionAction,
    InterestDecision,
    Outcome,
    ResponseFormatError,
    SuggestionRequest,
    SuggestionResult,
    parse_suggestion_response,
)

logger = logging.getLogger(__name__)

SUGGESTIONS_PATH = "affinity-ml-hire"
DECISION_PATH = "affinity-ml-hire/change"


def build_http_client(config: SuggestionConfig) -> httpx.Client:
    """
    Build the transport used to talk to the affinity service.

    Args:
        config: Connection settings (base URL, API key, timeout)

    Returns:
        An httpx.Client bound to the configured base URL
    """
    headers = {"Content-Type": "application/json"}
    api_key = config.get_api_key()
    if api_key:
        headers["x-api-key"] = api_key
    return httpx.Client(
        base_url=config.base_url,
        headers=headers,
        timeout=config.timeout_seconds,
    )


def classify_exception(exc: BaseException) -> SuggestionErrorCode:
    """Map an exception raised during an exchange onto an error code."""
    if isinstance(exc, httpx.HTTPStatusError):
        return classify_status(exc.response.status_code)
    if isinstance(exc, httpx.TransportError):
        return SuggestionErrorCode.CONNECTION_ERROR
    if isinstance(exc, ResponseFormatError):
        return SuggestionErrorCode.GENERIC_ERROR
    return SuggestionErrorCode.UNEXPECTED_ERROR


class SuggestionClient:
    """
    Client for the affinity suggestion service.

    Holds only its transport and logger, both fixed at construction, so one
    instance can be shared between callers.
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        config: SuggestionConfig | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the client.

        Args:
            http_client: Transport to use; built from `config` when omitted
            config: Connection settings, required if no http_client is given
            logger: Logger for failure diagnostics (module logger by default)
        """
        self._owns_http_client = http_client is None
        if http_client is None:
            if config is None:
                raise ValueError("SuggestionClient needs either an http_client or a config")
            http_client = build_http_client(config)
        self.http_client = http_client
        self.logger = logger or logging.getLogger(__name__)

    def __enter__(self) -> "SuggestionClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_http_client:
            self.http_client.close()

    def fetch(self, business_user_id: int, work_offer_id: int) -> Outcome[SuggestionResult]:
        """
        Get ranked match suggestions for a work offer.

        Args:
            business_user_id: Business user asking for matches
            work_offer_id: Work offer to match against

        Returns:
            Outcome holding the SuggestionResult, or the classified failure
        """
        request = SuggestionRequest(
            business_user_id=business_user_id,
            work_offer_id=work_offer_id,
        )
        try:
            response = self._post(SUGGESTIONS_PATH, request.to_payload())
            if response.status_code != 200:
                return self._fail_status(response.status_code)
            return Outcome.success(parse_suggestion_response(response.content))
        except Exception as e:
            return self._fail_exception(e)

    def record_decision(
        self,
        uuid: str,
        business_user_id: int,
        match_user_id: int,
        work_offer_id: int,
        action: DecisionAction | str,
    ) -> Outcome[bool]:
        """
        Record an accept/discard decision about a suggestion.

        Args:
            uuid: Correlation id of the suggestion batch
            business_user_id: Business user making the decision
            match_user_id: Suggested user the decision is about
            work_offer_id: Work offer the suggestion belongs to
            action: DecisionAction, or its wire token

        Returns:
            Outcome holding True on HTTP 200, or the classified failure
        """
        try:
            decision = InterestDecision(
                uuid=uuid,
                business_user_id=business_user_id,
                match_user_id=match_user_id,
                work_offer_id=work_offer_id,
                action=DecisionAction(action),
            )
            response = self._post(DECISION_PATH, decision.to_payload())
            if response.status_code != 200:
                return self._fail_status(response.status_code)
            return Outcome.success(True)
        except Exception as e:
            return self._fail_exception(e)

    def interested(
        self, uuid: str, business_user_id: int, match_user_id: int, work_offer_id: int
    ) -> Outcome[bool]:
        """Accept a suggested match."""
        return self.record_decision(
            uuid, business_user_id, match_user_id, work_offer_id, DecisionAction.ACCEPT
        )

    def not_interested(
        self, uuid: str, business_user_id: int, match_user_id: int, work_offer_id: int
    ) -> Outcome[bool]:
        """Discard a suggested match."""
        return self.record_decision(
            uuid, business_user_id, match_user_id, work_offer_id, DecisionAction.DISCARD
        )

    def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        """Send one JSON POST. Raises httpx.HTTPStatusError for non-2xx."""
        self.logger.debug(f"POST {path}: {payload}")
        response = self.http_client.post(path, json=payload)
        response.raise_for_status()
        return response

    def _fail_status(self, status_code: int) -> Outcome:
        code = classify_status(status_code)
        self.logger.error(
            f"SUGGESTION: code {code.value} remote service answered with status {status_code}"
        )
        return Outcome.fail(SuggestionFailure.from_code(code))

    def _fail_exception(self, exc: Exception) -> Outcome:
        code = classify_exception(exc)
        if code is SuggestionErrorCode.UNEXPECTED_ERROR:
            self.logger.exception(
                f"SUGGESTION: code {code.value} unexpected error calling the external API: {exc}"
            )
        else:
            self.logger.error(
                f"SUGGESTION: code {code.value} error calling the external API: {exc}"
            )
        return Outcome.fail(SuggestionFailure.from_code(code))
