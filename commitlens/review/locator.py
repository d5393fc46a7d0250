"""Map suggestions onto files and line ranges in the current workspace."""

import logging
from pathlib import Path

from commitlens.models.review import LineRange, LocatedSuggestion, Suggestion
from commitlens.review.workspace import FileAccess

logger = logging.getLogger(__name__)


def clamp_line(line_number: int, line_count: int) -> int:
    """Convert a 1-based line number to a 0-based index inside the file."""
    return min(max(line_number - 1, 0), max(line_count - 1, 0))


def _candidate_order(path: Path) -> tuple[int, str]:
    return len(path.parts), path.as_posix()


class SuggestionLocator:
    """Resolves a suggestion's path and line range against live file content.

    When several files end with the suggested path, the one with the fewest
    path components wins, then the lexicographically smallest path.
    """

    def __init__(self, files: FileAccess) -> None:
        self.files = files

    async def resolve_path(self, file_path: str) -> Path | None:
        candidates = await self.files.find(file_path)
        if not candidates:
            return None
        if len(candidates) > 1:
            logger.debug(f"{len(candidates)} files match {file_path}")
        return min(candidates, key=_candidate_order)

    async def locate(self, suggestion: Suggestion) -> LocatedSuggestion | None:
        """
        Locate a suggestion in the workspace.

        Args:
            suggestion: Suggestion with a 1-based inclusive line range

        Returns:
            The resolved file and 0-based range clamped to the file's
            current length, or None if the file cannot be found or read
        """
        path = await self.resolve_path(suggestion.file_path)
        if path is None:
            logger.warning(f"Could not find file for suggestion: {suggestion.file_path}")
            return None

        try:
            content = await self.files.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}: {e}")
            return None

        line_count = len(content.splitlines())
        line_range = LineRange(
            start=clamp_line(suggestion.start_line, line_count),
            end=clamp_line(suggestion.end_line, line_count),
        )
        return LocatedSuggestion(path=path, range=line_range)
