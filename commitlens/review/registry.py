"""Lifecycle of review threads created from suggestions."""

import asyncio
import logging
import secrets
import string
import time

from commitlens.models.review import (
    ReviewThread,
    Suggestion,
    ThreadActionResult,
    ThreadOutcome,
    ThreadState,
)
from commitlens.review.locator import SuggestionLocator
from commitlens.review.workspace import FileAccess

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def new_thread_id() -> str:
    """Return an id of the form ``thread_<epoch-ms>_<random base36>``."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"thread_{int(time.time() * 1000)}_{suffix}"


def _not_found(thread_id: str) -> ThreadActionResult:
    return ThreadActionResult(
        success=False,
        outcome=ThreadOutcome.NOT_FOUND,
        message=f"Thread {thread_id} not found",
    )


class ReviewThreadRegistry:
    """
    Owns the active review threads.

    Threads move OPEN -> CONVERSING -> RESOLVED | APPLIED. Resolved and
    applied threads leave the active set. All mutations go through one lock;
    unknown ids are reported as NOT_FOUND rather than raised.
    """

    def __init__(
        self,
        locator: SuggestionLocator,
        files: FileAccess,
        bot_name: str = "CommitLens",
    ) -> None:
        self.locator = locator
        self.files = files
        self.bot_name = bot_name
        self._threads: dict[str, ReviewThread] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._threads)

    def get(self, thread_id: str) -> ReviewThread | None:
        return self._threads.get(thread_id)

    def active_threads(self) -> list[ReviewThread]:
        return list(self._threads.values())

    async def create(self, suggestion: Suggestion) -> ReviewThread | None:
        """Create an OPEN thread for a suggestion, or None if it cannot be located."""
        located = await self.locator.locate(suggestion)
        if located is None:
            return None

        async with self._lock:
            thread_id = new_thread_id()
            while thread_id in self._threads:
                thread_id = new_thread_id()

            thread = ReviewThread(
                id=thread_id,
                suggestion=suggestion,
                file=located.path,
                range=located.range,
            )
            thread.add_message(self.bot_name, suggestion.format_markdown())
            self._threads[thread_id] = thread

        logger.info(
            f"Created thread {thread_id} at {located.path}:"
            f"{located.range.start + 1}-{located.range.end + 1}"
        )
        return thread

    async def reply(
        self, thread_id: str, message: str, author: str = "User"
    ) -> ThreadActionResult:
        """Append a message; an OPEN thread becomes CONVERSING."""
        async with self._lock:
            thread = self._threads.get(thread_id)
            if thread is None:
                return _not_found(thread_id)

            thread.add_message(author, message)
            if thread.state == ThreadState.OPEN:
                thread.state = ThreadState.CONVERSING

        return ThreadActionResult(
            success=True, outcome=ThreadOutcome.OK, message="Reply added", thread=thread
        )

    async def attach_replacement(
        self, thread_id: str, replacement: str
    ) -> ThreadActionResult:
        """Give a thread's suggestion a replacement so it can be applied."""
        async with self._lock:
            thread = self._threads.get(thread_id)
            if thread is None:
                return _not_found(thread_id)
            thread.suggestion = thread.suggestion.model_copy(
                update={"replacement": replacement}
            )

        return ThreadActionResult(
            success=True,
            outcome=ThreadOutcome.OK,
            message="Replacement attached",
            thread=thread,
        )

    async def apply(self, thread_id: str) -> ThreadActionResult:
        """
        Write the suggestion's replacement over its located lines.

        The suggestion is located again first so the edit targets the file as
        it is now. On any failure the thread is left as it was.
        """
        async with self._lock:
            thread = self._threads.get(thread_id)
            if thread is None:
                return _not_found(thread_id)

            replacement = thread.suggestion.replacement
            if not replacement:
                return ThreadActionResult(
                    success=False,
                    outcome=ThreadOutcome.NO_REPLACEMENT,
                    message="No code change available for this suggestion",
                    thread=thread,
                )

            located = await self.locator.locate(thread.suggestion)
            if located is None:
                return ThreadActionResult(
                    success=False,
                    outcome=ThreadOutcome.NOT_LOCATED,
                    message=f"Could not find {thread.suggestion.file_path}",
                    thread=thread,
                )

            if not await self.files.replace_lines(
                located.path, located.range, replacement
            ):
                return ThreadActionResult(
                    success=False,
                    outcome=ThreadOutcome.EDIT_REJECTED,
                    message=f"Failed to apply suggestion to {located.path}",
                    thread=thread,
                )

            thread.file = located.path
            thread.range = located.range
            thread.state = ThreadState.APPLIED
            del self._threads[thread_id]

        logger.info(f"Applied thread {thread_id} to {located.path}")
        return ThreadActionResult(
            success=True,
            outcome=ThreadOutcome.OK,
            message="Suggestion applied successfully",
            thread=thread,
        )

    async def resolve(self, thread_id: str) -> ThreadActionResult:
        """Mark a thread RESOLVED and remove it."""
        async with self._lock:
            thread = self._threads.pop(thread_id, None)
            if thread is None:
                return _not_found(thread_id)
            thread.state = ThreadState.RESOLVED

        logger.info(f"Resolved thread {thread_id}")
        return ThreadActionResult(
            success=True,
            outcome=ThreadOutcome.OK,
            message="Thread resolved",
            thread=thread,
        )

    async def clear_all(self) -> int:
        """Drop every active thread; returns how many were removed."""
        async with self._lock:
            count = len(self._threads)
            self._threads.clear()
        if count:
            logger.info(f"Cleared {count} review thread(s)")
        return count
