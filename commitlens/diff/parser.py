"""Unified diff parser.

The parser is a small state machine over the lines of a unified diff:

* ``Idle``   - before the first ``diff --git`` header
* ``InFile`` - inside a file section, outside any hunk
* ``InHunk`` - inside a hunk, numbering lines as they arrive

Each line is fed to :func:`step`, which returns the next state. Files and
hunks are finalised on transitions, so the output preserves input order and
nothing is ever emitted twice. Malformed input is skipped rather than raised.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import assert_never

from commitlens.models.diff import DiffLine, FileChange, FileStatus, Hunk

logger = logging.getLogger(__name__)

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
FILE_HEADER_RE = re.compile(r"^diff --git a/(.+) b/(.+)$")

UNKNOWN_PATH = "unknown"


@dataclass
class Idle:
    completed: list[FileChange] = field(default_factory=list)


@dataclass
class InFile:
    completed: list[FileChange]
    file: FileChange


@dataclass
class InHunk:
    completed: list[FileChange]
    file: FileChange
    hunk: Hunk
    old_line: int
    new_line: int


ParserState = Idle | InFile | InHunk


def parse_file_path(header: str) -> str:
    """Extract the new-side path from a ``diff --git`` header.

    The standard ``a/<path> b/<path>`` shape is matched first so that paths
    containing spaces survive. Otherwise the header is split on spaces and
    the second path token (then the first) is used without its two-character
    prefix.
    """
    if match := FILE_HEADER_RE.match(header):
        return match.group(2)

    parts = header.split(" ")
    for index in (3, 2):
        if len(parts) > index and (path := parts[index][2:]):
            return path
    return UNKNOWN_PATH


def _finalise(state: ParserState) -> list[FileChange]:
    """Close any in-progress hunk and file, returning the completed list."""
    match state:
        case Idle(completed=completed):
            return completed
        case InFile(completed=completed, file=file):
            completed.append(file)
            return completed
        case InHunk(completed=completed, file=file, hunk=hunk):
            file.hunks.append(hunk)
            completed.append(file)
            return completed
        case _:
            assert_never(state)


def _close_hunk(state: InFile | InHunk) -> InFile:
    if isinstance(state, InHunk):
        state.file.hunks.append(state.hunk)
    return InFile(completed=state.completed, file=state.file)


def _hunk_line(state: InHunk, line: str) -> InHunk:
    """Number one line of hunk content and advance the counters."""
    if line.startswith("+") and not line.startswith("+++"):
        state.hunk.lines.append(DiffLine.added(line[1:], state.new_line))
        state.new_line += 1
    elif line.startswith("-") and not line.startswith("---"):
        state.hunk.lines.append(DiffLine.removed(line[1:], state.old_line))
        state.old_line += 1
    elif line.startswith(" "):
        state.hunk.lines.append(
            DiffLine.context(line[1:], state.old_line, state.new_line)
        )
        state.old_line += 1
        state.new_line += 1
    # Anything else ("\ No newline at end of file", stray headers) is ignored
    return state


def step(state: ParserState, line: str) -> ParserState:
    """Feed one line to the parser and return the next state."""
    if line.startswith("diff --git"):
        completed = _finalise(state)
        file = FileChange(file_path=parse_file_path(line))
        return InFile(completed=completed, file=file)

    match state:
        case Idle():
            return state

        case InFile() | InHunk():
            if line.startswith("new file mode"):
                state.file.status = FileStatus.ADDED
                return state
            if line.startswith("deleted file mode"):
                state.file.status = FileStatus.DELETED
                return state

            if line.startswith("@@"):
                in_file = _close_hunk(state)
                header = HUNK_HEADER_RE.match(line)
                if header is None:
                    logger.debug(f"Skipping malformed hunk header: {line!r}")
                    return in_file
                old_start, old_count, new_start, new_count = header.groups()
                hunk = Hunk(
                    old_start=int(old_start),
                    old_count=int(old_count) if old_count is not None else 1,
                    new_start=int(new_start),
                    new_count=int(new_count) if new_count is not None else 1,
                )
                return InHunk(
                    completed=in_file.completed,
                    file=in_file.file,
                    hunk=hunk,
                    old_line=hunk.old_start,
                    new_line=hunk.new_start,
                )

            if isinstance(state, InHunk):
                return _hunk_line(state, line)
            return state

        case _:
            assert_never(state)


class DiffParser:
    """Convert unified diff text into structured :class:`FileChange` records."""

    @staticmethod
    def parse(text: str) -> list[FileChange]:
        """
        Parse unified diff text.

        Args:
            text: Concatenated unified diff, possibly covering many files

        Returns:
            One FileChange per ``diff --git`` section, in input order. Empty
            or malformed input yields an empty list; this never raises.
        """
        if not text:
            return []

        state: ParserState = Idle()
        for raw_line in text.split("\n"):
            state = step(state, raw_line.removesuffix("\r"))

        changes = _finalise(state)
        logger.debug(f"Parsed diff into {len(changes)} file(s)")
        return changes


def parse_diff(text: str) -> list[FileChange]:
    """Shortcut for :meth:`DiffParser.parse`."""
    return DiffParser.parse(text)
