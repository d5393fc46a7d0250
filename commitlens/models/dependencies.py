"""Dependency types for the Pydantic AI agents."""

from pydantic import BaseModel, Field, field_validator


class ReviewDependencies(BaseModel):
    """Context for the review agent: what was compared and what to look at."""

    previous_revision: str
    new_revision: str
    file_paths: list[str] = Field(default_factory=list)


class ConversationDependencies(BaseModel):
    """
    Dependencies for the conversation and fix agents.

    Holds everything the agents need to talk about one review thread: the
    original suggestion, where it points, the code around it and the
    conversation so far.
    """

    original_suggestion: str = Field(description="Suggestion that started the thread")
    file_path: str = Field(description="Path of the file being discussed")
    start_line: int = Field(description="First line of the suggestion (1-indexed)")
    end_line: int = Field(description="Last line of the suggestion (1-indexed)")
    code_context: str | None = Field(
        default=None,
        description="Numbered lines around the suggestion ('N: text')",
    )
    conversation_history: list[dict[str, str]] = Field(
        default_factory=list,
        description="Previous messages: [{'author': str, 'message': str}]",
    )

    @field_validator("start_line", "end_line")
    @classmethod
    def validate_line_number(cls, v: int) -> int:
        """Line numbers are 1-indexed."""
        if v < 1:
            raise ValueError(f"line numbers must be positive (>= 1), got: {v}")
        return v
