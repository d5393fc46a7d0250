"""File access for resolving and editing suggestion targets."""

import asyncio
import logging
import os
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable

from commitlens.models.review import LineRange
from commitlens.utils.filters import is_excluded_directory

logger = logging.getLogger(__name__)


def normalize_suffix(path_suffix: str) -> tuple[str, ...]:
    """Split a suggestion path into components, ignoring leading ``./`` and ``/``."""
    parts = PurePosixPath(path_suffix.replace("\\", "/")).parts
    return tuple(part for part in parts if part not in ("/", "."))


@runtime_checkable
class FileAccess(Protocol):
    """Reads and edits files of the workspace under review."""

    async def find(self, path_suffix: str) -> list[Path]: ...

    async def read_text(self, path: Path) -> str: ...

    async def replace_lines(self, path: Path, line_range: LineRange, text: str) -> bool: ...


def replace_line_range(content: str, line_range: LineRange, text: str) -> str | None:
    """
    Replace whole lines of ``content``.

    Args:
        content: Current file content
        line_range: 0-based inclusive range of lines to replace
        text: Replacement text (may span several lines)

    Returns:
        The new content, or None if the range falls outside the content
    """
    lines = content.splitlines(keepends=True)
    if not lines:
        if line_range.start != 0 or line_range.end != 0:
            return None
        return text

    if line_range.start > line_range.end or line_range.end >= len(lines):
        return None

    replaced_tail = lines[line_range.end]
    line_ending = replaced_tail[len(replaced_tail.rstrip("\r\n")) :]
    if line_ending and not text.endswith(("\n", "\r")):
        text += line_ending

    return "".join(lines[: line_range.start]) + text + "".join(lines[line_range.end + 1 :])


class LocalWorkspace:
    """FileAccess over a directory on the local file system."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def _find(self, suffix: tuple[str, ...]) -> list[Path]:
        if not suffix:
            return []
        matches = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = [name for name in dirnames if not is_excluded_directory(name)]
            if suffix[-1] not in filenames:
                continue
            candidate = Path(dirpath) / suffix[-1]
            relative = candidate.relative_to(self.root).parts
            if relative[-len(suffix) :] == suffix:
                matches.append(candidate)
        return matches

    async def find(self, path_suffix: str) -> list[Path]:
        """List workspace files whose path ends with ``path_suffix`` component-wise."""
        return await asyncio.to_thread(self._find, normalize_suffix(path_suffix))

    async def read_text(self, path: Path) -> str:
        return await asyncio.to_thread(path.read_text, encoding="utf-8")

    def _replace_lines(self, path: Path, line_range: LineRange, text: str) -> bool:
        try:
            with path.open(encoding="utf-8", newline="") as f:
                content = f.read()
            updated = replace_line_range(content, line_range, text)
            if updated is None:
                logger.warning(f"Range {line_range} is outside {path}")
                return False
            with path.open("w", encoding="utf-8", newline="") as f:
                f.write(updated)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to edit {path}: {e}")
            return False
        return True

    async def replace_lines(self, path: Path, line_range: LineRange, text: str) -> bool:
        """Overwrite the given full lines of ``path`` with ``text``."""
        return await asyncio.to_thread(self._replace_lines, path, line_range, text)
