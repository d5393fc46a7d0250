"""Prompts for the commit review agent."""

from commitlens.diff.formatting import format_changes_for_prompt
from commitlens.models.diff import FileChange
from commitlens.utils.filters import should_review_file

SYSTEM_PROMPT = """
Role: Expert code reviewer analysing the changes introduced by a commit.

Primary Goal:
Give detailed, specific and actionable feedback on the changed code.

Review Priorities (strict order):
1. Correctness & logic
2. Edge cases & error handling
3. Design & maintainability
4. Performance
5. Security & data handling
6. Style & readability

--------------------------------
HOW TO READ THE DIFF
--------------------------------
- Each file starts with "=== File: <path> ===".
- Added lines look like "+ (Line N) text"; N is the line number in the NEW file.
- Removed lines look like "- (Line N) text"; N is the line number in the OLD file.
- Context lines are indented by two spaces.

--------------------------------
SUGGESTION RULES
--------------------------------
- ALWAYS specify the exact file path as it appears in the diff.
- ALWAYS include the start and end line numbers (new file) of the code block the
  suggestion applies to. For a single line, startLine and endLine are the same.
- Be specific and actionable.
- When you can give an exact replacement for the whole line range, put it in
  "codeChange" with the original indentation. Otherwise omit "codeChange".

--------------------------------
OUTPUT FORMAT
--------------------------------
Respond with ONLY a valid JSON object: no markdown, no backticks, no extra text.
"""

RESPONSE_FORMAT = """Respond with a JSON object in this exact format (no markdown, no backticks):
{
  "summary": "A high-level overview of the changes and their impact",
  "suggestions": [
    {
      "filePath": "exact/path/to/file.ext",
      "startLine": 120,
      "endLine": 125,
      "suggestion": "Detailed suggestion for this block of code with an explanation.",
      "codeChange": "optional exact replacement for lines 120-125"
    }
  ]
}"""


def reviewable_changes(changes: list[FileChange]) -> list[FileChange]:
    """Drop lock files, generated code and binaries from a change list."""
    return [change for change in changes if should_review_file(change.file_path)]


def build_review_prompt(changes: list[FileChange]) -> str:
    """
    Build the user prompt for reviewing a set of file changes.

    Args:
        changes: Parsed file changes; excluded files are left out

    Returns:
        Prompt containing the numbered diff and the expected response format
    """
    body = format_changes_for_prompt(reviewable_changes(changes))
    return (
        "Analyze the following git diff and provide detailed, specific feedback.\n\n"
        f"Here is the diff to analyze:\n\n{body}\n{RESPONSE_FORMAT}"
    )
