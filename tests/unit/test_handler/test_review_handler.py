"""Unit tests for the review handler."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from commitlens.api.handlers.review_handler import (
    AnalysisFailedError,
    NoAnalysisError,
    handle_start_review,
)
from commitlens.diff.parser import parse_diff
from commitlens.models.repository import CommitAnalysis
from commitlens.models.review import Suggestion

DIFF = (
    "diff --git a/src/app.py b/src/app.py\n"
    "@@ -1,3 +1,3 @@\n"
    " import os\n"
    '-print("hi")\n'
    '+print("hello")\n'
    " x = 1\n"
)


def _review_json(*suggestions):
    return json.dumps({"summary": "Small change.", "suggestions": list(suggestions)})


def _agent(output):
    agent = MagicMock()
    agent.run = AsyncMock(return_value=MagicMock(output=output))
    return agent


@pytest.fixture
def analysis():
    return CommitAnalysis(
        kind="commit",
        previous_revision="a" * 40,
        new_revision="b" * 40,
        diffs=parse_diff(DIFF),
    )


class TestHandleStartReview:
    @pytest.mark.asyncio
    async def test_creates_threads(self, session, analysis):
        agent = _agent(
            _review_json(
                {
                    "filePath": "src/app.py",
                    "startLine": 2,
                    "endLine": 2,
                    "suggestion": "Use logging instead of print.",
                    "codeChange": 'logger.info("hello")',
                },
                {
                    "filePath": "lib/missing.py",
                    "startLine": 1,
                    "endLine": 1,
                    "suggestion": "Not in this workspace.",
                },
            )
        )

        outcome = await handle_start_review(session, analysis, agent=agent)

        assert len(outcome.threads) == 1
        assert outcome.threads[0].suggestion.replacement == 'logger.info("hello")'
        assert [s.file_path for s in outcome.unlocated] == ["lib/missing.py"]
        assert outcome.summary_markdown.startswith("# Code Review Summary")
        assert "## Suggestions (2)" in outcome.summary_markdown
        assert session.latest_review == outcome.review
        assert len(session.registry) == 1

    @pytest.mark.asyncio
    async def test_uses_latest_analysis(self, session, analysis):
        await session.record_analysis(analysis)
        agent = _agent(_review_json())

        outcome = await handle_start_review(session, agent=agent)

        assert outcome.threads == []
        assert "No suggestions found. Looks good!" in outcome.summary_markdown
        deps = agent.run.call_args.kwargs["deps"]
        assert deps.new_revision == "b" * 40

    @pytest.mark.asyncio
    async def test_new_review_replaces_threads(self, session, analysis):
        await session.registry.create(
            Suggestion(file_path="README.md", start_line=1, end_line=1, text="Old")
        )

        await handle_start_review(session, analysis, agent=_agent(_review_json()))

        assert len(session.registry) == 0

    @pytest.mark.asyncio
    async def test_without_analysis(self, session):
        with pytest.raises(NoAnalysisError):
            await handle_start_review(session, agent=_agent(_review_json()))

    @pytest.mark.asyncio
    async def test_agent_failure(self, session, analysis):
        agent = MagicMock()
        agent.run = AsyncMock(side_effect=RuntimeError("model unavailable"))
        await session.registry.create(
            Suggestion(file_path="README.md", start_line=1, end_line=1, text="Keep")
        )

        with pytest.raises(AnalysisFailedError):
            await handle_start_review(session, analysis, agent=agent)

        assert len(session.registry) == 1
