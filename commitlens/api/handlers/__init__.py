"""Handlers behind the review and thread endpoints."""

from .conversation_handler import (
    ThreadNotFoundError,
    handle_fix_request,
    handle_thread_reply,
)
from .review_handler import AnalysisFailedError, NoAnalysisError, handle_start_review

__all__ = [
    "handle_start_review",
    "handle_thread_reply",
    "handle_fix_request",
    "AnalysisFailedError",
    "NoAnalysisError",
    "ThreadNotFoundError",
]
