"""Models describing repositories, acquired change sets and analyses."""

from datetime import datetime, timezone
from enum import IntEnum
from typing import Literal

from pydantic import BaseModel, Field

from commitlens.models.diff import FileChange


class WorkingTreeStatus(IntEnum):
    """Status codes reported for working-tree changes."""

    UNTRACKED = 0
    ADDED = 1
    MODIFIED = 2
    DELETED = 3
    RENAMED = 4
    COPIED = 5
    UNMERGED = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()


class ChangedFile(BaseModel):
    """A path reported as changed by the version-control collaborator."""

    path: str
    status: WorkingTreeStatus = WorkingTreeStatus.MODIFIED


class ChangeSet(BaseModel):
    """Result of one acquisition.

    ``head_revision`` is None when the working tree was compared against
    ``base_revision``.
    """

    base_revision: str
    head_revision: str | None = None
    files: list[FileChange] = Field(default_factory=list)

    @property
    def is_working_tree(self) -> bool:
        return self.head_revision is None


class CommitAnalysis(BaseModel):
    """A detected change handed to presentation and review."""

    kind: Literal["commit", "working-tree"]
    previous_revision: str
    new_revision: str
    diffs: list[FileChange] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class FileStatusEntry(BaseModel):
    file: str
    status: str


class RepositoryInfo(BaseModel):
    """Summary of the tracked repository for display."""

    status: str
    branch: str | None = None
    commit: str | None = None
    repository_path: str | None = None
    last_revision: str | None = None
    changed_files: int = 0
    changes: list[FileStatusEntry] = Field(default_factory=list)


class RepositorySnapshot(BaseModel):
    """Last revision observed by a commit watcher."""

    last_revision: str | None = None
