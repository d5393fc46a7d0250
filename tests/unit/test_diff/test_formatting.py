"""Unit tests for diff rendering."""

from commitlens.diff import format_changes_for_prompt, parse_diff, to_unified_diff
from commitlens.models.diff import FileChange, FileStatus

MIXED_DIFF = (
    "diff --git a/src/app.py b/src/app.py\n"
    "--- a/src/app.py\n"
    "+++ b/src/app.py\n"
    "@@ -3,3 +3,4 @@\n"
    " def main():\n"
    "-    print('hi')\n"
    "+    print('hello')\n"
    "+    return 0\n"
    " \n"
    "diff --git a/notes.md b/notes.md\n"
    "new file mode 100644\n"
    "--- /dev/null\n"
    "+++ b/notes.md\n"
    "@@ -0,0 +1,1 @@\n"
    "+# Notes\n"
    "diff --git a/old.txt b/old.txt\n"
    "deleted file mode 100644\n"
    "--- a/old.txt\n"
    "+++ /dev/null\n"
    "@@ -1,1 +0,0 @@\n"
    "-bye"
)


class TestToUnifiedDiff:
    """Tests for to_unified_diff."""

    def test_reparse_yields_equal_records(self):
        changes = parse_diff(MIXED_DIFF)

        assert parse_diff(to_unified_diff(changes)) == changes

    def test_status_headers(self):
        text = to_unified_diff(parse_diff(MIXED_DIFF))

        assert "new file mode 100644\n--- /dev/null\n+++ b/notes.md" in text
        assert "deleted file mode 100644\n--- a/old.txt\n+++ /dev/null" in text

    def test_file_without_hunks(self):
        text = to_unified_diff([FileChange(file_path="a.bin")])

        assert text == "diff --git a/a.bin b/a.bin\n--- a/a.bin\n+++ b/a.bin"

    def test_empty(self):
        assert to_unified_diff([]) == ""


class TestFormatChangesForPrompt:
    """Tests for format_changes_for_prompt."""

    def test_line_numbers_are_explicit(self):
        text = format_changes_for_prompt(parse_diff(MIXED_DIFF))

        assert "=== File: src/app.py ===" in text
        assert "@@ -3,3 +3,4 @@" in text
        assert "- (Line 4)     print('hi')" in text
        assert "+ (Line 4)     print('hello')" in text
        assert "+ (Line 5)     return 0" in text
        assert "  def main():" in text

    def test_sections_per_file(self):
        changes = parse_diff(MIXED_DIFF)

        text = format_changes_for_prompt(changes)

        assert text.count("=== File: ") == len(changes)
        assert changes[1].status == FileStatus.ADDED
        assert "+ (Line 1) # Notes" in text
        assert "- (Line 1) bye" in text
