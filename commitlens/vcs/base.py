"""Interfaces for version-control collaborators."""

from typing import Protocol, runtime_checkable

from commitlens.models.repository import ChangedFile


class VCSError(Exception):
    """Raised when a version-control query fails."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code


@runtime_checkable
class VersionControl(Protocol):
    """Read-only view of one repository.

    ``head=None`` always means the working tree.
    """

    @property
    def root(self) -> str: ...

    async def current_revision(self) -> str | None: ...

    async def current_branch(self) -> str | None: ...

    async def list_changed_files(
        self, base: str, head: str | None
    ) -> list[ChangedFile]: ...

    async def diff_file(self, base: str, head: str | None, path: str) -> str: ...

    async def working_tree_changes(self) -> list[ChangedFile]: ...


@runtime_checkable
class RepositoryProvider(Protocol):
    """Finds the repository to watch, if one is available yet."""

    async def find_repository(self) -> VersionControl | None: ...
