"""Models for review suggestions and the threads that track them."""

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from commitlens.utils.filters import language_for_path


class Suggestion(BaseModel):
    """A line-ranged annotation produced by the analysis collaborator.

    Field aliases follow the JSON the analysis agent is asked to produce
    (``filePath``, ``startLine``, ``endLine``, ``suggestion``, ``codeChange``).
    Line numbers are 1-based and inclusive.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_path: str = Field(alias="filePath")
    start_line: int = Field(alias="startLine")
    end_line: int = Field(alias="endLine")
    text: str = Field(alias="suggestion")
    replacement: str | None = Field(default=None, alias="codeChange")

    @model_validator(mode="before")
    @classmethod
    def order_line_range(cls, data: object) -> object:
        """Swap reversed line ranges so that start_line <= end_line."""
        if not isinstance(data, dict):
            return data
        start_key = "startLine" if "startLine" in data else "start_line"
        end_key = "endLine" if "endLine" in data else "end_line"
        start, end = data.get(start_key), data.get(end_key)
        if isinstance(start, int) and isinstance(end, int) and end < start:
            data = {**data, start_key: end, end_key: start}
        return data

    @property
    def has_replacement(self) -> bool:
        return bool(self.replacement)

    def format_markdown(self) -> str:
        """Format the suggestion as the opening message of a review thread."""
        body = f"**Issue:** {self.text}\n\n"
        if self.replacement:
            language = language_for_path(self.file_path)
            body += (
                f"**Suggested Code Change:**\n```{language}\n{self.replacement}\n```\n\n"
                "**Action:** Apply this thread to write the change into the file."
            )
        else:
            body += (
                "**Recommendation:** This is a general suggestion for improvement. "
                "Please review and implement manually, or ask for a fix."
            )
        return body


class CodeReview(BaseModel):
    """Structured result returned by the analysis collaborator."""

    summary: str
    suggestions: list[Suggestion] = Field(default_factory=list)

    def format_summary_markdown(self) -> str:
        """Format the review as markdown for display.

        Returns:
            Markdown with the summary and one bullet per suggestion
        """
        lines = ["# Code Review Summary\n", f"{self.summary}\n"]
        if not self.suggestions:
            lines.append("No suggestions found. Looks good!")
            return "\n".join(lines)

        lines.append(f"## Suggestions ({len(self.suggestions)})\n")
        for suggestion in self.suggestions:
            location = f"{suggestion.file_path}:{suggestion.start_line}"
            if suggestion.end_line != suggestion.start_line:
                location += f"-{suggestion.end_line}"
            lines.append(f"- `{location}` {suggestion.text}")
        return "\n".join(lines)


class LineRange(BaseModel):
    """A 0-based, inclusive range of whole lines in a file."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @property
    def line_count(self) -> int:
        return self.end - self.start + 1


class LocatedSuggestion(BaseModel):
    """Where a suggestion lands in the current workspace."""

    model_config = ConfigDict(frozen=True)

    path: Path
    range: LineRange


class ThreadState(str, Enum):
    """Lifecycle of a review thread."""

    OPEN = "open"
    CONVERSING = "conversing"
    RESOLVED = "resolved"
    APPLIED = "applied"

    @property
    def is_terminal(self) -> bool:
        return self in (ThreadState.RESOLVED, ThreadState.APPLIED)


class ThreadMessage(BaseModel):
    """One message in a thread conversation."""

    author: str
    text: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ReviewThread(BaseModel):
    """Conversation and lifecycle state wrapped around one suggestion."""

    id: str
    suggestion: Suggestion
    conversation: list[ThreadMessage] = Field(default_factory=list)
    state: ThreadState = ThreadState.OPEN
    file: Path
    range: LineRange

    def add_message(self, author: str, text: str) -> ThreadMessage:
        """Append a message to the conversation and return it."""
        message = ThreadMessage(author=author, text=text)
        self.conversation.append(message)
        return message

    def get_context_for_llm(self) -> list[dict[str, str]]:
        """
        Format the conversation history for the conversation agent.

        Returns:
            List of ``{"author": ..., "message": ...}`` entries in order
        """
        return [
            {"author": message.author, "message": message.text}
            for message in self.conversation
        ]


class ThreadOutcome(str, Enum):
    """Result codes for registry operations."""

    OK = "ok"
    NOT_FOUND = "not_found"
    NO_REPLACEMENT = "no_replacement"
    NOT_LOCATED = "not_located"
    EDIT_REJECTED = "edit_rejected"


class ThreadActionResult(BaseModel):
    """Outcome of reply/apply/resolve on a thread."""

    success: bool
    outcome: ThreadOutcome
    message: str
    thread: ReviewThread | None = None
