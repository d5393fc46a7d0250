"""CommitLens: commit-by-commit AI code review with line-anchored threads."""

__version__ = "0.1.0"
