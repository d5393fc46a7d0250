"""Commit review agent using Pydantic AI and OpenAI."""

import json
import logging
import os
import re
from typing import Any

from pydantic import ValidationError
from pydantic_ai import Agent, RunContext

from commitlens.config.settings import settings
from commitlens.models.dependencies import ReviewDependencies
from commitlens.models.diff import FileChange
from commitlens.models.review import CodeReview, Suggestion
from commitlens.prompts.review_prompt import SYSTEM_PROMPT, build_review_prompt
from commitlens.utils.rate_limiter import with_exponential_backoff

logger = logging.getLogger(__name__)

PARSE_FAILURE_SUMMARY = "Failed to parse AI response as JSON. Raw feedback follows:"

_FENCE_RE = re.compile(r"```json\n?|```\n?")

# Set OpenAI API key as environment variable for Pydantic AI
if settings.openai_api_key:
    os.environ["OPENAI_API_KEY"] = settings.openai_api_key

review_agent = Agent(
    model=settings.review_model,
    deps_type=ReviewDependencies,
    output_type=str,
    system_prompt=SYSTEM_PROMPT,
    retries=settings.max_retries,
    defer_model_check=True,
)


@review_agent.system_prompt
async def add_dynamic_context(ctx: RunContext[ReviewDependencies]) -> str:
    """Add the revisions and files under review to the system prompt."""
    files = ", ".join(ctx.deps.file_paths) or "none"
    return (
        f"Comparing {ctx.deps.previous_revision[:8]} -> {ctx.deps.new_revision[:8]} | "
        f"Files: {files}"
    )


def strip_json_fences(text: str) -> str:
    """Remove markdown code fences the model may wrap around its JSON."""
    return _FENCE_RE.sub("", text).strip()


def parse_review_response(text: str, changes: list[FileChange]) -> CodeReview:
    """
    Parse the agent's text output into a CodeReview.

    Args:
        text: Raw model output, expected to be a JSON object
        changes: Changes that were reviewed, used for the fallback location

    Returns:
        The parsed review. Output that is not valid JSON, or does not match
        the expected shape, becomes a single suggestion holding the raw text
        on line 1 of the first changed file.
    """
    content = strip_json_fences(text)
    try:
        data: Any = json.loads(content)
        return CodeReview.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Error parsing review response as JSON: {e}")
        logger.debug(f"Raw response: {content}")

    file_path = changes[0].file_path if changes else "unknown"
    return CodeReview(
        summary=PARSE_FAILURE_SUMMARY,
        suggestions=[
            Suggestion(file_path=file_path, start_line=1, end_line=1, text=content)
        ],
    )


async def review_changes(
    changes: list[FileChange],
    previous_revision: str,
    new_revision: str,
    agent: Agent[ReviewDependencies, str] | None = None,
) -> CodeReview:
    """
    Run the review agent over a set of changes.

    Transient provider errors are retried with exponential backoff; anything
    else propagates to the caller.
    """
    if agent is None:
        agent = review_agent

    deps = ReviewDependencies(
        previous_revision=previous_revision,
        new_revision=new_revision,
        file_paths=[change.file_path for change in changes],
    )
    logger.info(
        f"Running AI code review for {len(changes)} file(s) "
        f"({previous_revision[:8]} -> {new_revision[:8]})"
    )
    result: Any = await with_exponential_backoff(
        agent.run,
        build_review_prompt(changes),
        deps=deps,
        max_retries=settings.max_retries + 1,
    )
    review = parse_review_response(result.output, changes)
    logger.info(
        f"Code review completed: {len(review.suggestions)} suggestion(s)"
    )
    return review
