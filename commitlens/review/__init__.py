"""Suggestion localisation and review thread management."""

from .locator import SuggestionLocator
from .registry import ReviewThreadRegistry
from .workspace import FileAccess, LocalWorkspace

__all__ = [
    "FileAccess",
    "LocalWorkspace",
    "ReviewThreadRegistry",
    "SuggestionLocator",
]
