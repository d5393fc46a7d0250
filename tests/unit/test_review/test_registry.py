"""Unit tests for ReviewThreadRegistry."""

import asyncio
import re
from unittest.mock import AsyncMock

import pytest

from commitlens.models.review import LineRange, Suggestion, ThreadOutcome, ThreadState
from commitlens.review.locator import SuggestionLocator
from commitlens.review.registry import ReviewThreadRegistry, new_thread_id
from commitlens.review.workspace import LocalWorkspace


@pytest.fixture
def registry(workspace_root):
    files = LocalWorkspace(workspace_root)
    return ReviewThreadRegistry(SuggestionLocator(files), files, bot_name="Bot")


def _suggestion(replacement=None, path="src/app.py", start=3, end=3):
    return Suggestion(
        file_path=path,
        start_line=start,
        end_line=end,
        text="Use a constant",
        replacement=replacement,
    )


def test_thread_id_format():
    assert re.fullmatch(r"thread_\d+_[0-9a-z]{9}", new_thread_id())


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_opens_thread(self, registry, workspace_root):
        thread = await registry.create(_suggestion())

        assert thread is not None
        assert thread.state == ThreadState.OPEN
        assert thread.file == workspace_root / "src" / "app.py"
        assert thread.range == LineRange(start=2, end=2)
        assert len(thread.conversation) == 1
        assert thread.conversation[0].author == "Bot"
        assert "**Issue:** Use a constant" in thread.conversation[0].text
        assert registry.get(thread.id) is thread
        assert len(registry) == 1

    @pytest.mark.asyncio
    async def test_unlocatable_suggestion(self, registry):
        assert await registry.create(_suggestion(path="missing.py")) is None
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, registry):
        first = await registry.create(_suggestion())
        second = await registry.create(_suggestion())

        assert first.id != second.id
        assert len(registry.active_threads()) == 2


class TestReply:
    @pytest.mark.asyncio
    async def test_reply_moves_to_conversing(self, registry):
        thread = await registry.create(_suggestion())

        result = await registry.reply(thread.id, "Why?")

        assert result.success
        assert thread.state == ThreadState.CONVERSING
        assert thread.get_context_for_llm()[-1] == {"author": "User", "message": "Why?"}

    @pytest.mark.asyncio
    async def test_reply_unknown_thread(self, registry):
        result = await registry.reply("thread_0_missing", "hello")

        assert not result.success
        assert result.outcome == ThreadOutcome.NOT_FOUND


class TestApply:
    @pytest.mark.asyncio
    async def test_apply_without_replacement_keeps_thread(self, registry):
        thread = await registry.create(_suggestion())

        result = await registry.apply(thread.id)

        assert not result.success
        assert result.outcome == ThreadOutcome.NO_REPLACEMENT
        assert thread.state == ThreadState.OPEN
        assert registry.get(thread.id) is thread

    @pytest.mark.asyncio
    async def test_apply_writes_file_and_removes_thread(self, registry, workspace_root):
        thread = await registry.create(_suggestion(replacement="X_VALUE = 1"))

        result = await registry.apply(thread.id)

        assert result.success
        assert result.outcome == ThreadOutcome.OK
        assert result.thread.state == ThreadState.APPLIED
        assert registry.get(thread.id) is None
        content = (workspace_root / "src" / "app.py").read_text()
        assert content == 'import os\nprint("hello")\nX_VALUE = 1\n'

    @pytest.mark.asyncio
    async def test_apply_relocates_against_current_file(self, registry, workspace_root):
        thread = await registry.create(_suggestion(replacement="y = 2", start=3, end=3))
        (workspace_root / "src" / "app.py").write_text("only line\n")

        result = await registry.apply(thread.id)

        assert result.success
        assert (workspace_root / "src" / "app.py").read_text() == "y = 2\n"

    @pytest.mark.asyncio
    async def test_apply_when_file_disappeared(self, registry, workspace_root):
        thread = await registry.create(_suggestion(replacement="y = 2"))
        (workspace_root / "src" / "app.py").unlink()

        result = await registry.apply(thread.id)

        assert result.outcome == ThreadOutcome.NOT_LOCATED
        assert registry.get(thread.id) is thread

    @pytest.mark.asyncio
    async def test_apply_edit_rejected(self, registry):
        thread = await registry.create(_suggestion(replacement="y = 2"))
        registry.files.replace_lines = AsyncMock(return_value=False)

        result = await registry.apply(thread.id)

        assert result.outcome == ThreadOutcome.EDIT_REJECTED
        assert thread.state == ThreadState.OPEN
        assert registry.get(thread.id) is thread

    @pytest.mark.asyncio
    async def test_apply_unknown_thread(self, registry):
        result = await registry.apply("thread_0_missing")

        assert result.outcome == ThreadOutcome.NOT_FOUND

    @pytest.mark.asyncio
    async def test_attach_replacement_enables_apply(self, registry, workspace_root):
        thread = await registry.create(_suggestion())

        attached = await registry.attach_replacement(thread.id, "x = 10")
        result = await registry.apply(thread.id)

        assert attached.success
        assert result.success
        assert (workspace_root / "src" / "app.py").read_text().endswith("x = 10\n")


class TestResolveAndClear:
    @pytest.mark.asyncio
    async def test_resolve(self, registry):
        thread = await registry.create(_suggestion())

        result = await registry.resolve(thread.id)
        again = await registry.resolve(thread.id)

        assert result.success
        assert result.thread.state == ThreadState.RESOLVED
        assert registry.get(thread.id) is None
        assert again.outcome == ThreadOutcome.NOT_FOUND

    @pytest.mark.asyncio
    async def test_clear_all_is_idempotent(self, registry):
        await registry.create(_suggestion())
        await registry.create(_suggestion(path="README.md", start=1, end=1))

        assert await registry.clear_all() == 2
        assert await registry.clear_all() == 0
        assert registry.active_threads() == []

    @pytest.mark.asyncio
    async def test_clear_all_waits_for_apply_in_progress(self, registry, workspace_root):
        applied = await registry.create(_suggestion(replacement="x = 2"))
        other = await registry.create(_suggestion(path="README.md", start=1, end=1))
        events = []
        replace_lines = registry.files.replace_lines

        async def slow_replace(path, line_range, text):
            events.append("write-start")
            await asyncio.sleep(0.01)
            written = await replace_lines(path, line_range, text)
            events.append("write-end")
            return written

        async def clear():
            count = await registry.clear_all()
            events.append("cleared")
            return count

        registry.files.replace_lines = slow_replace

        result, cleared = await asyncio.gather(registry.apply(applied.id), clear())

        assert result.success
        assert result.thread.state == ThreadState.APPLIED
        assert cleared == 1
        assert events == ["write-start", "write-end", "cleared"]
        assert registry.get(other.id) is None
        assert registry.active_threads() == []
        assert (workspace_root / "src" / "app.py").read_text().endswith("x = 2\n")
