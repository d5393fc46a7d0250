"""Structured change model produced by the diff parser."""

from enum import Enum
from typing import assert_never

from pydantic import BaseModel, Field, computed_field, model_validator


class LineKind(str, Enum):
    """Kind of a line inside a hunk."""

    ADD = "add"
    REMOVE = "remove"
    CONTEXT = "context"


class FileStatus(str, Enum):
    """How a file changed between the two sides of a diff."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


class DiffLine(BaseModel):
    """A single line of a hunk with its position on each side of the diff.

    Context lines carry both line numbers, added lines only the new one and
    removed lines only the old one.
    """

    kind: LineKind
    text: str
    old_line_number: int | None = None
    new_line_number: int | None = None

    @model_validator(mode="after")
    def check_line_numbers(self) -> "DiffLine":
        """Ensure the line numbers present match the line kind."""
        has_old = self.old_line_number is not None
        has_new = self.new_line_number is not None
        match self.kind:
            case LineKind.CONTEXT:
                valid = has_old and has_new
            case LineKind.ADD:
                valid = has_new and not has_old
            case LineKind.REMOVE:
                valid = has_old and not has_new
            case _:
                assert_never(self.kind)
        if not valid:
            raise ValueError(
                f"{self.kind.value} line has invalid line numbers "
                f"(old={self.old_line_number}, new={self.new_line_number})"
            )
        return self

    @classmethod
    def added(cls, text: str, new_line_number: int) -> "DiffLine":
        return cls(kind=LineKind.ADD, text=text, new_line_number=new_line_number)

    @classmethod
    def removed(cls, text: str, old_line_number: int) -> "DiffLine":
        return cls(kind=LineKind.REMOVE, text=text, old_line_number=old_line_number)

    @classmethod
    def context(
        cls, text: str, old_line_number: int, new_line_number: int
    ) -> "DiffLine":
        return cls(
            kind=LineKind.CONTEXT,
            text=text,
            old_line_number=old_line_number,
            new_line_number=new_line_number,
        )


class Hunk(BaseModel):
    """A contiguous region of change declared by an ``@@`` header."""

    old_start: int
    old_count: int = 1
    new_start: int
    new_count: int = 1
    lines: list[DiffLine] = Field(default_factory=list)

    @property
    def header(self) -> str:
        """Render the hunk header in unified diff form."""
        return (
            f"@@ -{self.old_start},{self.old_count} "
            f"+{self.new_start},{self.new_count} @@"
        )

    @property
    def is_well_formed(self) -> bool:
        """Check the declared counts against the lines actually present."""
        old_lines = sum(1 for line in self.lines if line.kind != LineKind.ADD)
        new_lines = sum(1 for line in self.lines if line.kind != LineKind.REMOVE)
        return old_lines == self.old_count and new_lines == self.new_count


class FileChange(BaseModel):
    """All hunks for one file of a diff.

    ``added_lines`` and ``removed_lines`` are derived from the hunks so they
    can never drift from the line data.
    """

    file_path: str
    status: FileStatus = FileStatus.MODIFIED
    hunks: list[Hunk] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def added_lines(self) -> int:
        return sum(
            1 for hunk in self.hunks for line in hunk.lines if line.kind == LineKind.ADD
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def removed_lines(self) -> int:
        return sum(
            1
            for hunk in self.hunks
            for line in hunk.lines
            if line.kind == LineKind.REMOVE
        )
