"""Conversation and fix agents for review threads."""

import logging
import os
import re
from typing import Any

from pydantic import BaseModel
from pydantic_ai import Agent, RunContext

from commitlens.config.settings import settings
from commitlens.models.dependencies import ConversationDependencies
from commitlens.prompts.conversation_prompt import (
    RESOLVE_PREFIX,
    format_conversation_history,
)
from commitlens.prompts.conversation_prompt import SYSTEM_PROMPT as CONVERSATION_PROMPT
from commitlens.prompts.fix_prompt import SYSTEM_PROMPT as FIX_PROMPT
from commitlens.prompts.fix_prompt import get_fix_prompt
from commitlens.utils.filters import language_for_path
from commitlens.utils.rate_limiter import with_exponential_backoff

logger = logging.getLogger(__name__)

EMPTY_REPLY = (
    "I encountered an issue generating a response. Could you rephrase your question?"
)

_SUGGESTION_BLOCK_RE = re.compile(r"```suggestion\n([\s\S]*?)\n```")

# Set OpenAI API key as environment variable for Pydantic AI
if settings.openai_api_key:
    os.environ["OPENAI_API_KEY"] = settings.openai_api_key

conversation_agent = Agent[ConversationDependencies, str](
    model=settings.conversation_model,
    instructions=CONVERSATION_PROMPT,
    deps_type=ConversationDependencies,
    retries=settings.max_retries,
    defer_model_check=True,
)

fix_agent = Agent[ConversationDependencies, str](
    model=settings.conversation_model,
    instructions=FIX_PROMPT,
    deps_type=ConversationDependencies,
    retries=settings.max_retries,
    defer_model_check=True,
)


@conversation_agent.system_prompt
def add_thread_context(ctx: RunContext[ConversationDependencies]) -> str:
    """Describe the suggestion and conversation being continued."""
    deps = ctx.deps
    return f"""
**Original Suggestion:**
{deps.original_suggestion}

**File:** {deps.file_path} (lines {deps.start_line}-{deps.end_line})

**Conversation History:**
{format_conversation_history(deps.conversation_history)}
"""


@conversation_agent.tool
def get_code_context(ctx: RunContext[ConversationDependencies]) -> str:
    """
    Get the code around the suggestion, one numbered line per row.

    Use this tool when you need to reference the specific code being discussed.
    """
    if not ctx.deps.code_context:
        return "[Code not available - file may have been deleted or moved]"
    return f"```\n{ctx.deps.code_context}\n```"


class ConversationReply(BaseModel):
    """A cleaned conversation reply and whether it closes the thread."""

    message: str
    resolve: bool = False


class FixProposal(BaseModel):
    """A fix message for display plus the replacement it proposes, if any."""

    message: str
    replacement: str | None = None


def build_code_context(content: str, start: int, end: int, context_lines: int) -> str:
    """
    Number the lines around a 0-based inclusive range.

    Args:
        content: Current file content
        start: First line of the range (0-based)
        end: Last line of the range (0-based)
        context_lines: Lines to include before and after the range

    Returns:
        Lines formatted as ``N: text`` with 1-based N
    """
    lines = content.splitlines()
    if not lines:
        return ""
    first = max(0, start - context_lines)
    last = min(len(lines) - 1, end + context_lines)
    return "\n".join(f"{i + 1}: {lines[i]}" for i in range(first, last + 1))


def validate_conversation_response(
    response: str, max_length: int = settings.max_reply_length
) -> ConversationReply:
    """
    Clean an agent reply and detect the resolve marker.

    Args:
        response: Raw agent response string
        max_length: Longest reply kept before truncating

    Returns:
        The reply without the marker; never empty
    """
    text = (response or "").strip()
    resolve = text.startswith(RESOLVE_PREFIX)
    if resolve:
        text = text[len(RESOLVE_PREFIX) :].strip()

    if not text:
        if not resolve:
            logger.warning("Agent returned empty response")
            return ConversationReply(message=EMPTY_REPLY)
        text = "Glad that's sorted. Marking this thread as resolved."

    if len(text) > max_length:
        logger.warning(
            f"Response too long ({len(text)} chars), truncating to {max_length}"
        )
        text = text[:max_length].rsplit(" ", 1)[0]
        text += "\n\n[Response truncated due to length...]"

    return ConversationReply(message=text, resolve=resolve)


def extract_suggestion_block(text: str) -> str | None:
    """Return the body of the first ```suggestion block, if any."""
    match = _SUGGESTION_BLOCK_RE.search(text)
    return match.group(1) if match else None


def format_fix_message(text: str, file_path: str) -> str:
    """Re-fence ```suggestion blocks with the file's language for display."""
    language = language_for_path(file_path)
    formatted = _SUGGESTION_BLOCK_RE.sub(
        lambda m: f"```{language}\n{m.group(1)}\n```", text
    )
    return f"**AI-Generated Fix**\n\n{formatted}"


async def generate_reply(
    user_message: str,
    deps: ConversationDependencies,
    agent: Agent[ConversationDependencies, str] | None = None,
) -> ConversationReply:
    """Ask the conversation agent to answer ``user_message``."""
    if agent is None:
        agent = conversation_agent

    result: Any = await with_exponential_backoff(
        agent.run,
        user_message,
        deps=deps,
        max_retries=settings.max_retries + 1,
    )
    return validate_conversation_response(result.output)


async def generate_fix(
    deps: ConversationDependencies,
    agent: Agent[ConversationDependencies, str] | None = None,
) -> FixProposal:
    """Ask the fix agent for a replacement for the suggestion's lines."""
    if agent is None:
        agent = fix_agent

    prompt = get_fix_prompt(
        original_suggestion=deps.original_suggestion,
        file_path=deps.file_path,
        code_context=deps.code_context,
        start_line=deps.start_line,
        end_line=deps.end_line,
    )
    result: Any = await with_exponential_backoff(
        agent.run,
        prompt,
        deps=deps,
        max_retries=settings.max_retries + 1,
    )
    text: str = result.output or ""
    replacement = extract_suggestion_block(text)
    if replacement is None:
        logger.info(f"Fix for {deps.file_path} did not include a code change")
    return FixProposal(
        message=format_fix_message(text, deps.file_path), replacement=replacement
    )
