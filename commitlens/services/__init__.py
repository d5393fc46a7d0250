"""Services for CommitLens."""

from .session import ReviewSession, build_session

__all__ = ["ReviewSession", "build_session"]
