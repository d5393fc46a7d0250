"""Remote repository access through the GitHub REST API (PyGithub)."""

import asyncio
import logging
from typing import Any

from github import Auth, Github, GithubException
from github.Comparison import Comparison
from github.Repository import Repository

from commitlens.models.repository import ChangedFile, WorkingTreeStatus
from commitlens.vcs.base import VCSError

logger = logging.getLogger(__name__)

_STATUS_BY_GITHUB_STATUS: dict[str, WorkingTreeStatus] = {
    "added": WorkingTreeStatus.ADDED,
    "modified": WorkingTreeStatus.MODIFIED,
    "changed": WorkingTreeStatus.MODIFIED,
    "removed": WorkingTreeStatus.DELETED,
    "renamed": WorkingTreeStatus.RENAMED,
    "copied": WorkingTreeStatus.COPIED,
}


def wrap_patch(file: Any) -> str:
    """Turn a compare-API file entry into a ``diff --git`` section.

    The API returns only the hunks (``patch``); the file header lines the
    parser expects are rebuilt from the entry's metadata. Files without a
    patch (binary or too large) produce an empty string.
    """
    if not file.patch:
        return ""

    path = file.filename
    old_path = file.previous_filename or path
    lines = [f"diff --git a/{old_path} b/{path}"]
    if file.status == "added":
        lines += ["new file mode 100644", "--- /dev/null", f"+++ b/{path}"]
    elif file.status == "removed":
        lines += ["deleted file mode 100644", f"--- a/{old_path}", "+++ /dev/null"]
    else:
        lines += [f"--- a/{old_path}", f"+++ b/{path}"]
    lines.append(file.patch.rstrip("\n"))
    return "\n".join(lines)


class GitHubRepository:
    """Version-control collaborator for one branch of a GitHub repository.

    There is no working tree on the remote side, so working-tree queries
    report no changes.
    """

    def __init__(self, repo: Repository, branch: str) -> None:
        self.repo = repo
        self.branch = branch
        self._comparisons: dict[tuple[str, str], Comparison] = {}

    @property
    def root(self) -> str:
        return self.repo.full_name

    async def _compare(self, base: str, head: str) -> Comparison:
        key = (base, head)
        if key not in self._comparisons:
            try:
                self._comparisons[key] = await asyncio.to_thread(
                    self.repo.compare, base, head
                )
            except GithubException as e:
                raise VCSError(
                    f"Compare {base[:7]}...{head[:7]} failed: {e}",
                    exit_code=e.status,
                ) from e
        return self._comparisons[key]

    async def current_revision(self) -> str | None:
        try:
            branch = await asyncio.to_thread(self.repo.get_branch, self.branch)
        except GithubException as e:
            # Empty repositories have no branches yet
            logger.debug(f"Branch {self.branch} not available: {e}")
            return None
        return branch.commit.sha

    async def current_branch(self) -> str | None:
        return self.branch

    async def list_changed_files(
        self, base: str, head: str | None
    ) -> list[ChangedFile]:
        if head is None:
            return await self.working_tree_changes()
        comparison = await self._compare(base, head)
        return [
            ChangedFile(
                path=file.filename,
                status=_STATUS_BY_GITHUB_STATUS.get(
                    file.status, WorkingTreeStatus.MODIFIED
                ),
            )
            for file in comparison.files
        ]

    async def diff_file(self, base: str, head: str | None, path: str) -> str:
        if head is None:
            return ""
        comparison = await self._compare(base, head)
        for file in comparison.files:
            if file.filename == path:
                return wrap_patch(file)
        raise VCSError(f"{path} is not part of {base[:7]}...{head[:7]}")

    async def working_tree_changes(self) -> list[ChangedFile]:
        return []


class GitHubRepositoryProvider:
    """Looks up the configured GitHub repository."""

    def __init__(
        self,
        token: str | None,
        repository: str | None,
        branch: str = "main",
        client: Github | None = None,
    ) -> None:
        self.repository = repository
        self.branch = branch
        self._client = client
        self._token = token

    def _get_client(self) -> Github:
        if self._client is None:
            auth = Auth.Token(self._token) if self._token else None
            self._client = Github(auth=auth, per_page=100)
        return self._client

    async def find_repository(self) -> GitHubRepository | None:
        if not self.repository:
            logger.warning("No GitHub repository configured (GH_REPOSITORY)")
            return None
        try:
            repo = await asyncio.to_thread(self._get_client().get_repo, self.repository)
        except GithubException as e:
            logger.warning(f"Could not open GitHub repository {self.repository}: {e}")
            return None
        return GitHubRepository(repo, self.branch)
