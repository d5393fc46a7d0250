"""Utility functions and helpers."""

from .filters import is_excluded_directory, language_for_path, should_review_file
from .logging import setup_observability
from .rate_limiter import with_exponential_backoff

__all__ = [
    "setup_observability",
    "should_review_file",
    "is_excluded_directory",
    "language_for_path",
    "with_exponential_backoff",
]
