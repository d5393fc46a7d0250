"""Thread conversation and fix-with-AI handlers."""

import logging

from pydantic import BaseModel
from pydantic_ai import Agent

from commitlens.agents.conversation import (
    build_code_context,
    generate_fix,
    generate_reply,
)
from commitlens.api.handlers.review_handler import AnalysisFailedError
from commitlens.models.dependencies import ConversationDependencies
from commitlens.models.review import ReviewThread
from commitlens.services.session import ReviewSession

logger = logging.getLogger(__name__)


class ThreadNotFoundError(Exception):
    """Raised when a thread id is not in the active set."""


class ConversationOutcome(BaseModel):
    reply: str
    resolved: bool = False
    thread: ReviewThread


class FixOutcome(BaseModel):
    message: str
    replacement: str | None = None
    thread: ReviewThread


def _get_thread(session: ReviewSession, thread_id: str) -> ReviewThread:
    thread = session.registry.get(thread_id)
    if thread is None:
        raise ThreadNotFoundError(f"Thread {thread_id} not found")
    return thread


async def _extract_file_context(session: ReviewSession, thread: ReviewThread) -> str | None:
    """Numbered code around the thread's range, or None if the file is unreadable."""
    try:
        content = await session.files.read_text(thread.file)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Error reading file context for {thread.file}: {e}")
        return None
    return build_code_context(
        content, thread.range.start, thread.range.end, session.fix_context_lines
    )


async def _build_dependencies(
    session: ReviewSession, thread: ReviewThread
) -> ConversationDependencies:
    suggestion = thread.suggestion
    return ConversationDependencies(
        original_suggestion=suggestion.text,
        file_path=suggestion.file_path,
        start_line=thread.range.start + 1,
        end_line=thread.range.end + 1,
        code_context=await _extract_file_context(session, thread),
        conversation_history=thread.get_context_for_llm(),
    )


async def handle_thread_reply(
    session: ReviewSession,
    thread_id: str,
    message: str,
    agent: Agent[ConversationDependencies, str] | None = None,
) -> ConversationOutcome:
    """
    Add a user message to a thread and answer it with the conversation agent.

    A reply marked as resolving closes the thread.

    Raises:
        ThreadNotFoundError: If the thread is not active
        AnalysisFailedError: If the agent call failed after retries
    """
    thread = _get_thread(session, thread_id)
    deps = await _build_dependencies(session, thread)

    await session.registry.reply(thread_id, message)
    logger.info(f"Invoking conversation agent for thread {thread_id}")
    try:
        reply = await generate_reply(message, deps, agent=agent)
    except Exception as e:
        logger.exception("Conversation agent failed")
        raise AnalysisFailedError(f"Conversation reply failed: {e}") from e

    result = await session.registry.reply(
        thread_id, reply.message, author=session.bot_name
    )
    if result.thread is None:
        raise ThreadNotFoundError(f"Thread {thread_id} was closed during the reply")

    if reply.resolve:
        resolved = await session.registry.resolve(thread_id)
        logger.info(f"Thread {thread_id} resolved by conversation")
        return ConversationOutcome(
            reply=reply.message, resolved=True, thread=resolved.thread or result.thread
        )

    return ConversationOutcome(reply=reply.message, thread=result.thread)


async def handle_fix_request(
    session: ReviewSession,
    thread_id: str,
    agent: Agent[ConversationDependencies, str] | None = None,
) -> FixOutcome:
    """
    Ask the fix agent for a code change and attach it to the thread.

    Raises:
        ThreadNotFoundError: If the thread is not active
        AnalysisFailedError: If the agent call failed after retries
    """
    thread = _get_thread(session, thread_id)
    deps = await _build_dependencies(session, thread)

    logger.info(f"Generating fix for thread {thread_id}")
    try:
        proposal = await generate_fix(deps, agent=agent)
    except Exception as e:
        logger.exception("Fix agent failed")
        raise AnalysisFailedError(f"Fix generation failed: {e}") from e

    result = await session.registry.reply(
        thread_id, proposal.message, author=session.bot_name
    )
    if proposal.replacement is not None:
        result = await session.registry.attach_replacement(
            thread_id, proposal.replacement
        )
    if result.thread is None:
        raise ThreadNotFoundError(f"Thread {thread_id} was closed during the fix")

    return FixOutcome(
        message=proposal.message,
        replacement=proposal.replacement,
        thread=result.thread,
    )
