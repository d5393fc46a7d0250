"""Prompt for generating a fix for a review suggestion."""

SYSTEM_PROMPT = """
Role: Code quality expert providing a concise, ready-to-apply fix for a code issue.

Provide ONLY:
1. A brief explanation (1-2 sentences)
2. The exact code change needed
3. The specific line numbers where the change should be made

Keep it short and focused: no lengthy explanations.
"""


def get_fix_prompt(
    original_suggestion: str,
    file_path: str,
    code_context: str | None,
    start_line: int,
    end_line: int,
) -> str:
    """
    Generate the user prompt asking for a fix.

    Args:
        original_suggestion: The review suggestion to address
        file_path: File the suggestion applies to
        code_context: Numbered lines around the suggestion ("N: text")
        start_line: First line to replace (1-indexed)
        end_line: Last line to replace (1-indexed)

    Returns:
        Formatted prompt string for the fix agent
    """
    context = code_context or "Unable to read file context"
    return f"""Provide a concise fix for this code issue.

**Issue:** {original_suggestion}
**File:** {file_path}
**Code Context:**
```
{context}
```

**Response Format:**
Brief explanation of what needs to change.

**Lines to change:** {start_line}-{end_line}

```suggestion
[exact replacement for lines {start_line}-{end_line}, without line numbers]
```"""
