"""Render parsed changes back to text."""

from typing import assert_never

from commitlens.models.diff import DiffLine, FileChange, FileStatus, LineKind


def _unified_line(line: DiffLine) -> str:
    match line.kind:
        case LineKind.ADD:
            return f"+{line.text}"
        case LineKind.REMOVE:
            return f"-{line.text}"
        case LineKind.CONTEXT:
            return f" {line.text}"
        case _:
            assert_never(line.kind)


def to_unified_diff(changes: list[FileChange]) -> str:
    """
    Serialise change records as unified diff text.

    Parsing the output again yields equal records for well-formed input.

    Args:
        changes: Parsed file changes

    Returns:
        Unified diff text with one ``diff --git`` section per file
    """
    out: list[str] = []
    for change in changes:
        path = change.file_path
        out.append(f"diff --git a/{path} b/{path}")
        if change.status == FileStatus.ADDED:
            out.append("new file mode 100644")
        elif change.status == FileStatus.DELETED:
            out.append("deleted file mode 100644")
        out.append(
            "--- /dev/null" if change.status == FileStatus.ADDED else f"--- a/{path}"
        )
        out.append(
            "+++ /dev/null" if change.status == FileStatus.DELETED else f"+++ b/{path}"
        )
        for hunk in change.hunks:
            out.append(hunk.header)
            out.extend(_unified_line(line) for line in hunk.lines)
    return "\n".join(out)


def _prompt_line(line: DiffLine) -> str:
    match line.kind:
        case LineKind.ADD:
            return f"+ (Line {line.new_line_number}) {line.text}"
        case LineKind.REMOVE:
            return f"- (Line {line.old_line_number}) {line.text}"
        case LineKind.CONTEXT:
            return f"  {line.text}"
        case _:
            assert_never(line.kind)


def format_changes_for_prompt(changes: list[FileChange]) -> str:
    """Render changes for the review agent with explicit line numbers.

    Added lines carry their new-side number and removed lines their old-side
    number, so suggestions can point at exact lines.
    """
    sections = []
    for change in changes:
        lines = [f"=== File: {change.file_path} ==="]
        for hunk in change.hunks:
            lines.append(hunk.header)
            lines.extend(_prompt_line(line) for line in hunk.lines)
        sections.append("\n".join(lines) + "\n")
    return "\n".join(sections)
