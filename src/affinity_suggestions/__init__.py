"""
affinity-suggestions: client for the affinity-based hiring match service.

Fetches ranked candidate suggestions for a work offer and records accept or
discard decisions, reporting every failure as a classified result.
"""

__version__ = "0.1.0"

from .client import SuggestionClient, build_http_client
from .config import SuggestionConfig
from .errors import SuggestionErrorCode, SuggestionFailure, SuggestionServiceError
from .models import DecisionAction, Outcome, SuggestionItem, SuggestionResult

__all__ = [
    "DecisionAction",
    "Outcome",
    "SuggestionClient",
    "SuggestionConfig",
    "SuggestionErrorCode",
    "SuggestionFailure",
    "SuggestionItem",
    "SuggestionResult",
    "SuggestionServiceError",
    "build_http_client",
]
