"""Unit tests for the conversation and fix agents."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic_ai import RunContext

from commitlens.agents.conversation import (
    EMPTY_REPLY,
    add_thread_context,
    build_code_context,
    extract_suggestion_block,
    format_fix_message,
    generate_fix,
    generate_reply,
    get_code_context,
    validate_conversation_response,
)
from commitlens.models.dependencies import ConversationDependencies

FIX_OUTPUT = (
    "Read the value from the environment.\n\n"
    "**Lines to change:** 2-2\n\n"
    "```suggestion\n"
    "password = os.environ['APP_PASSWORD']\n"
    "```"
)


@pytest.fixture
def conversation_deps():
    """Create basic ConversationDependencies for testing."""
    return ConversationDependencies(
        original_suggestion="Do not hard-code credentials.",
        file_path="src/app.py",
        start_line=2,
        end_line=2,
        code_context="1: import os\n2: password = 'hunter2'",
        conversation_history=[
            {"author": "CommitLens", "message": "Do not hard-code credentials."},
            {"author": "User", "message": "Why not?"},
        ],
    )


@pytest.fixture
def mock_run_context(conversation_deps):
    """Create mock RunContext with ConversationDependencies."""
    context = MagicMock(spec=RunContext)
    context.deps = conversation_deps
    return context


def _agent(output):
    agent = MagicMock()
    agent.run = AsyncMock(return_value=MagicMock(output=output))
    return agent


class TestValidateConversationResponse:
    def test_plain_reply(self):
        reply = validate_conversation_response("  Because secrets leak.  ")

        assert reply.message == "Because secrets leak."
        assert not reply.resolve

    def test_resolve_prefix(self):
        reply = validate_conversation_response("RESOLVE: Great, thanks for fixing it!")

        assert reply.resolve
        assert reply.message == "Great, thanks for fixing it!"

    def test_resolve_prefix_without_text(self):
        reply = validate_conversation_response("RESOLVE:")

        assert reply.resolve
        assert reply.message

    def test_empty_reply(self):
        reply = validate_conversation_response("")

        assert reply.message == EMPTY_REPLY
        assert not reply.resolve

    def test_long_reply_is_truncated(self):
        reply = validate_conversation_response("word " * 100, max_length=50)

        assert reply.message.endswith("[Response truncated due to length...]")
        assert len(reply.message.split("\n\n")[0]) <= 50


class TestCodeContext:
    def test_build_code_context(self):
        content = "\n".join(f"line {n}" for n in range(1, 11))

        context = build_code_context(content, start=4, end=5, context_lines=2)

        assert context.splitlines() == [
            "3: line 3",
            "4: line 4",
            "5: line 5",
            "6: line 6",
            "7: line 7",
            "8: line 8",
        ]

    def test_build_code_context_at_file_edges(self):
        context = build_code_context("a\nb\n", start=0, end=1, context_lines=5)

        assert context == "1: a\n2: b"

    def test_build_code_context_empty_file(self):
        assert build_code_context("", 0, 0, 5) == ""

    def test_get_code_context_tool(self, mock_run_context):
        result = get_code_context(mock_run_context)

        assert result.startswith("```\n1: import os")

    def test_get_code_context_missing(self, mock_run_context):
        mock_run_context.deps.code_context = None

        assert "Code not available" in get_code_context(mock_run_context)

    def test_thread_context_prompt(self, mock_run_context):
        prompt = add_thread_context(mock_run_context)

        assert "Do not hard-code credentials." in prompt
        assert "src/app.py (lines 2-2)" in prompt
        assert "User: Why not?" in prompt


class TestSuggestionBlocks:
    def test_extract_suggestion_block(self):
        assert extract_suggestion_block(FIX_OUTPUT) == (
            "password = os.environ['APP_PASSWORD']"
        )

    def test_extract_multiline_block(self):
        text = "```suggestion\na = 1\nb = 2\n```"

        assert extract_suggestion_block(text) == "a = 1\nb = 2"

    def test_no_block(self):
        assert extract_suggestion_block("Just rename it.") is None

    def test_format_fix_message(self):
        message = format_fix_message(FIX_OUTPUT, "src/app.py")

        assert message.startswith("**AI-Generated Fix**\n\n")
        assert "```python\npassword = os.environ['APP_PASSWORD']\n```" in message
        assert "```suggestion" not in message


class TestGenerate:
    @pytest.mark.asyncio
    async def test_generate_reply(self, conversation_deps):
        agent = _agent("RESOLVE: Glad it's fixed.")

        reply = await generate_reply("Fixed it", conversation_deps, agent=agent)

        assert reply.resolve
        assert reply.message == "Glad it's fixed."
        agent.run.assert_awaited_once_with("Fixed it", deps=conversation_deps)

    @pytest.mark.asyncio
    async def test_generate_fix(self, conversation_deps):
        agent = _agent(FIX_OUTPUT)

        proposal = await generate_fix(conversation_deps, agent=agent)

        assert proposal.replacement == "password = os.environ['APP_PASSWORD']"
        assert proposal.message.startswith("**AI-Generated Fix**")
        prompt = agent.run.call_args.args[0]
        assert "**Issue:** Do not hard-code credentials." in prompt
        assert "2: password = 'hunter2'" in prompt

    @pytest.mark.asyncio
    async def test_generate_fix_without_code(self, conversation_deps):
        proposal = await generate_fix(conversation_deps, agent=_agent("Rename it."))

        assert proposal.replacement is None
        assert "Rename it." in proposal.message
