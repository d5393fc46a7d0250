"""Local repository access through the ``git`` command line."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from commitlens.models.repository import ChangedFile, WorkingTreeStatus
from commitlens.vcs.base import VCSError

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 60

# First letter of `git diff --name-status` / porcelain status codes
_STATUS_BY_CODE: dict[str, WorkingTreeStatus] = {
    "A": WorkingTreeStatus.ADDED,
    "M": WorkingTreeStatus.MODIFIED,
    "T": WorkingTreeStatus.MODIFIED,
    "D": WorkingTreeStatus.DELETED,
    "R": WorkingTreeStatus.RENAMED,
    "C": WorkingTreeStatus.COPIED,
    "U": WorkingTreeStatus.UNMERGED,
}

_UNMERGED_PAIRS = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}


class GitError(VCSError):
    """A git command exited with an error or timed out."""


@dataclass
class GitResult:
    stdout: str
    stderr: str
    returncode: int


async def run_git(
    cwd: str | Path,
    *args: str,
    check: bool = True,
    timeout: float = GIT_TIMEOUT_SECONDS,
) -> GitResult:
    """Run a git command in ``cwd``.

    Args:
        cwd: Directory passed to ``git -C``
        *args: Git command arguments
        check: Whether to raise on non-zero exit
        timeout: Timeout in seconds

    Returns:
        Captured output and exit code

    Raises:
        GitError: If the command fails (when check=True), times out or git
            cannot be started
    """
    cmd = ["git", "-C", str(cwd), *args]
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise GitError(f"Unable to start git: {e}", command=" ".join(cmd)) from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
    except asyncio.TimeoutError as e:
        process.kill()
        await process.wait()
        raise GitError(
            f"Git command timed out after {timeout}s: {' '.join(args)}",
            command=" ".join(cmd),
            exit_code=-1,
        ) from e

    result = GitResult(
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
        returncode=process.returncode if process.returncode is not None else -1,
    )
    if check and result.returncode != 0:
        raise GitError(
            f"Git command failed: {result.stderr.strip() or result.returncode}",
            command=" ".join(cmd),
            exit_code=result.returncode,
        )
    return result


def parse_name_status(output: str) -> list[ChangedFile]:
    """Parse ``git diff --name-status`` output.

    Renames and copies list the old and new path; the new path is kept.
    """
    changes = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split("\t")
        code, paths = fields[0], fields[1:]
        if not paths:
            continue
        status = _STATUS_BY_CODE.get(code[:1], WorkingTreeStatus.MODIFIED)
        changes.append(ChangedFile(path=paths[-1], status=status))
    return changes


def parse_porcelain_status(output: str) -> list[ChangedFile]:
    """Parse ``git status --porcelain -z`` output.

    Entries are NUL separated. Renamed and copied entries are followed by an
    extra entry holding the original path, which is skipped.
    """
    changes = []
    entries = iter(output.split("\0"))
    for entry in entries:
        if len(entry) < 4:
            continue
        code, path = entry[:2], entry[3:]
        if code == "??":
            status = WorkingTreeStatus.UNTRACKED
        elif code in _UNMERGED_PAIRS:
            status = WorkingTreeStatus.UNMERGED
        else:
            letter = code[0] if code[0] != " " else code[1]
            status = _STATUS_BY_CODE.get(letter, WorkingTreeStatus.MODIFIED)
        if code[0] in ("R", "C"):
            next(entries, None)
        changes.append(ChangedFile(path=path, status=status))
    return changes


class GitCliRepository:
    """Version-control collaborator backed by a local git checkout."""

    def __init__(self, repo_path: str | Path) -> None:
        self.repo_path = Path(repo_path).resolve()

    def __repr__(self) -> str:
        return f"GitCliRepository({str(self.repo_path)!r})"

    @property
    def root(self) -> str:
        return str(self.repo_path)

    async def _run(self, *args: str, check: bool = True) -> GitResult:
        return await run_git(self.repo_path, *args, check=check)

    async def current_revision(self) -> str | None:
        """Return the HEAD commit SHA, or None for a repository without commits."""
        result = await self._run("rev-parse", "--verify", "--quiet", "HEAD", check=False)
        revision = result.stdout.strip()
        return revision if result.returncode == 0 and revision else None

    async def current_branch(self) -> str | None:
        result = await self._run("rev-parse", "--abbrev-ref", "HEAD", check=False)
        branch = result.stdout.strip()
        return branch if result.returncode == 0 and branch else None

    async def list_changed_files(
        self, base: str, head: str | None
    ) -> list[ChangedFile]:
        revisions = [base] if head is None else [base, head]
        result = await self._run("diff", "--name-status", *revisions)
        return parse_name_status(result.stdout)

    async def diff_file(self, base: str, head: str | None, path: str) -> str:
        revisions = [base] if head is None else [base, head]
        result = await self._run("diff", *revisions, "--", path)
        return result.stdout.rstrip("\n")

    async def working_tree_changes(self) -> list[ChangedFile]:
        result = await self._run("status", "--porcelain", "-z")
        return parse_porcelain_status(result.stdout)


class LocalRepositoryProvider:
    """Finds the git repository containing the workspace root."""

    def __init__(self, workspace_root: str | Path) -> None:
        self.workspace_root = Path(workspace_root)

    async def find_repository(self) -> GitCliRepository | None:
        if not self.workspace_root.is_dir():
            logger.debug(f"Workspace root does not exist: {self.workspace_root}")
            return None
        try:
            result = await run_git(
                self.workspace_root, "rev-parse", "--show-toplevel", check=False
            )
        except GitError as e:
            logger.warning(f"Repository discovery failed: {e}")
            return None
        if result.returncode != 0:
            return None
        return GitCliRepository(result.stdout.strip())
