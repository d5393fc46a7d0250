"""Data models for CommitLens."""

from .diff import DiffLine, FileChange, FileStatus, Hunk, LineKind
from .repository import (
    ChangedFile,
    ChangeSet,
    CommitAnalysis,
    FileStatusEntry,
    RepositoryInfo,
    RepositorySnapshot,
    WorkingTreeStatus,
)
from .review import (
    CodeReview,
    LineRange,
    LocatedSuggestion,
    ReviewThread,
    Suggestion,
    ThreadActionResult,
    ThreadMessage,
    ThreadOutcome,
    ThreadState,
)

__all__ = [
    "DiffLine",
    "FileChange",
    "FileStatus",
    "Hunk",
    "LineKind",
    "ChangedFile",
    "ChangeSet",
    "CommitAnalysis",
    "FileStatusEntry",
    "RepositoryInfo",
    "RepositorySnapshot",
    "WorkingTreeStatus",
    "CodeReview",
    "LineRange",
    "LocatedSuggestion",
    "ReviewThread",
    "Suggestion",
    "ThreadActionResult",
    "ThreadMessage",
    "ThreadOutcome",
    "ThreadState",
]
