"""
Models package for request bodies, API responses and user-facing errors.
"""

from .cli_error import CLIError
from .responses import (
    AnswerResponse,
    ContentsResponse,
    ContextResponse,
    FindSimilarResponse,
    SearchResponse,
    StreamEvent,
    UsageEntry,
    UsageSummary,
)

__all__ = [
    "AnswerResponse",
    "CLIError",
    "ContentsResponse",
    "ContextResponse",
    "FindSimilarResponse",
    "SearchResponse",
    "StreamEvent",
    "UsageEntry",
    "UsageSummary",
]
