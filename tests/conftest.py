"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from commitlens.acquisition.watcher import CommitWatcher
from commitlens.api.dependencies import get_session
from commitlens.config.settings import settings
from commitlens.main import app
from commitlens.models.repository import ChangedFile, WorkingTreeStatus
from commitlens.review.workspace import LocalWorkspace
from commitlens.services.session import ReviewSession
from commitlens.vcs.base import VCSError

REV_1 = "1111111111111111111111111111111111111111"
REV_2 = "2222222222222222222222222222222222222222"
REV_3 = "3333333333333333333333333333333333333333"

APP_DIFF = """diff --git a/src/app.py b/src/app.py
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,3 @@
 import os
-print("hi")
+print("hello")
 x = 1"""

README_DIFF = """diff --git a/README.md b/README.md
new file mode 100644
--- /dev/null
+++ b/README.md
@@ -0,0 +1,2 @@
+# Project
+Docs"""


class FakeRepository:
    """In-memory version-control collaborator."""

    def __init__(self, root: str = "/work/repo") -> None:
        self._root = root
        self.revision: str | None = REV_1
        self.branch: str | None = "main"
        self.changed_files: list[ChangedFile] = []
        self.working_tree: list[ChangedFile] = []
        self.diffs: dict[str, str] = {}
        self.failing_paths: set[str] = set()
        self.list_error: Exception | None = None
        self.list_calls: list[tuple[str, str | None]] = []
        self.diff_calls: list[tuple[str, str | None, str]] = []

    @property
    def root(self) -> str:
        return self._root

    async def current_revision(self) -> str | None:
        return self.revision

    async def current_branch(self) -> str | None:
        return self.branch

    async def list_changed_files(
        self, base: str, head: str | None
    ) -> list[ChangedFile]:
        self.list_calls.append((base, head))
        if self.list_error is not None:
            raise self.list_error
        return list(self.changed_files)

    async def diff_file(self, base: str, head: str | None, path: str) -> str:
        self.diff_calls.append((base, head, path))
        if path in self.failing_paths:
            raise VCSError(f"diff failed for {path}")
        return self.diffs.get(path, "")

    async def working_tree_changes(self) -> list[ChangedFile]:
        return list(self.working_tree)


class FakeProvider:
    """Repository provider that finds a repository after a number of misses."""

    def __init__(self, repository: FakeRepository | None, misses: int = 0) -> None:
        self.repository = repository
        self.misses = misses
        self.calls = 0

    async def find_repository(self) -> FakeRepository | None:
        self.calls += 1
        if self.calls <= self.misses:
            return None
        return self.repository


@pytest.fixture
def fake_repo() -> FakeRepository:
    """A repository with two changed files between REV_1 and REV_2."""
    repo = FakeRepository()
    repo.changed_files = [
        ChangedFile(path="src/app.py", status=WorkingTreeStatus.MODIFIED),
        ChangedFile(path="README.md", status=WorkingTreeStatus.ADDED),
    ]
    repo.diffs = {"src/app.py": APP_DIFF, "README.md": README_DIFF}
    return repo


@pytest.fixture
def make_provider():
    """Factory for repository providers."""
    return FakeProvider


@pytest.fixture
def make_repo():
    """Factory for empty in-memory repositories."""
    return FakeRepository


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """A small workspace mirroring the files touched by the fake repository."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text('import os\nprint("hello")\nx = 1\n')
    (tmp_path / "README.md").write_text("# Project\nDocs\n")
    return tmp_path.resolve()


@pytest.fixture
def session(workspace_root: Path) -> ReviewSession:
    """A review session over the temporary workspace with no repository attached."""
    watcher = CommitWatcher(max_attempts=1, retry_delay=0, debounce_seconds=0.01)
    return ReviewSession(watcher=watcher, files=LocalWorkspace(workspace_root))


@pytest.fixture
def client(session: ReviewSession):
    """Return a FastAPI TestClient bound to the test session."""
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def webhook_url() -> str:
    """Return the webhook URL for testing."""
    return "/webhook/github"


@pytest.fixture
def webhook_secret(monkeypatch) -> str:
    """Configure a webhook secret for signature checks."""
    secret = "test-webhook-secret"
    monkeypatch.setattr(settings, "github_webhook_secret", secret)
    return secret
