"""Unified diff parsing and rendering."""

from .formatting import format_changes_for_prompt, to_unified_diff
from .parser import DiffParser, parse_diff

__all__ = [
    "DiffParser",
    "parse_diff",
    "format_changes_for_prompt",
    "to_unified_diff",
]
