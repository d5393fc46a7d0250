"""Detect new commits and hand their changes to presentation."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import assert_never

from commitlens.acquisition.acquirer import ChangeAcquirer
from commitlens.acquisition.debounce import Debouncer
from commitlens.models.repository import (
    CommitAnalysis,
    FileStatusEntry,
    RepositoryInfo,
    RepositorySnapshot,
)
from commitlens.vcs.base import RepositoryProvider, VersionControl

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[CommitAnalysis], Awaitable[None]]

NO_REPOSITORY = "No repository found"


class WatcherState(str, Enum):
    UNINITIALIZED = "uninitialized"
    TRACKING = "tracking"


class CommitWatcher:
    """
    Tracks the head revision of one repository.

    The first observed revision only sets the watermark. Every later
    notification compares the current revision with the watermark; on a
    difference the changes between the two are acquired and published, and
    the watermark advances whether or not acquisition succeeded.

    Notifications and acquisitions are serialised by a lock, so a transition
    that arrives during an acquisition is compared against the advanced
    watermark once the lock is released.
    """

    def __init__(
        self,
        acquirer: ChangeAcquirer | None = None,
        provider: RepositoryProvider | None = None,
        on_change: ChangeCallback | None = None,
        max_attempts: int = 5,
        retry_delay: float = 0.5,
        debounce_seconds: float = 0.3,
    ) -> None:
        self.acquirer = acquirer or ChangeAcquirer()
        self.provider = provider
        self.on_change = on_change
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

        self.repository: VersionControl | None = None
        self.state = WatcherState.UNINITIALIZED
        self.snapshot = RepositorySnapshot()
        self.latest_analysis: CommitAnalysis | None = None

        self._lock = asyncio.Lock()
        self._debouncer = Debouncer(debounce_seconds, self.notify)

    @property
    def is_attached(self) -> bool:
        return self.repository is not None

    async def _read_revision(self, repository: VersionControl) -> str | None:
        try:
            return await repository.current_revision()
        except Exception as e:
            logger.warning(f"Could not read current revision of {repository.root}: {e}")
            return None

    async def _observe_initial(self, repository: VersionControl) -> None:
        revision = await self._read_revision(repository)
        if revision is None:
            logger.info("No initial commit found in repository")
            return
        self.snapshot = RepositorySnapshot(last_revision=revision)
        self.state = WatcherState.TRACKING
        logger.info(f"Tracking {repository.root} from {revision[:8]}")

    async def attach(self, repository: VersionControl) -> None:
        """Start watching ``repository``, recording its revision without an event."""
        async with self._lock:
            self.repository = repository
            self.state = WatcherState.UNINITIALIZED
            self.snapshot = RepositorySnapshot()
            await self._observe_initial(repository)

    async def notify(self) -> CommitAnalysis | None:
        """
        Handle a repository change notification.

        Returns:
            The published analysis, or None if there was no new commit or
            no changes could be acquired
        """
        repository = self.repository
        if repository is None:
            logger.debug("Change notification ignored: no repository attached")
            return None

        async with self._lock:
            match self.state:
                case WatcherState.UNINITIALIZED:
                    await self._observe_initial(repository)
                    return None
                case WatcherState.TRACKING:
                    analysis = await self._check_for_commit(repository)
                case _:
                    assert_never(self.state)

        if analysis is not None:
            await self._publish(analysis)
        return analysis

    async def _check_for_commit(
        self, repository: VersionControl
    ) -> CommitAnalysis | None:
        previous = self.snapshot.last_revision
        current = await self._read_revision(repository)
        if current is None or previous is None or current == previous:
            return None

        logger.info(f"New commit detected: {previous[:8]} -> {current[:8]}")
        self.snapshot = RepositorySnapshot(last_revision=current)

        change_set = await self.acquirer.acquire(repository, previous, current)
        if change_set is None:
            return None

        analysis = CommitAnalysis(
            kind="commit",
            previous_revision=previous,
            new_revision=current,
            diffs=change_set.files,
        )
        self.latest_analysis = analysis
        return analysis

    async def _publish(self, analysis: CommitAnalysis) -> None:
        if self.on_change is None:
            return
        try:
            await self.on_change(analysis)
        except Exception:
            logger.exception("Change callback failed")

    def request_refresh(self) -> None:
        """Debounced notify for bursts of file-system activity."""
        self._debouncer.trigger()

    async def wait_for_refresh(self) -> None:
        await self._debouncer.wait()

    def cancel_refresh(self) -> None:
        self._debouncer.cancel()

    async def discover(self) -> bool:
        """
        Look for a repository with bounded, fixed-delay polling.

        Returns:
            True if a repository is attached afterwards
        """
        if self.repository is not None:
            return True
        if self.provider is None:
            logger.debug("No repository provider configured")
            return False

        for attempt in range(1, self.max_attempts + 1):
            repository = await self.provider.find_repository()
            if repository is not None:
                if self.repository is None:
                    await self.attach(repository)
                return True

            if attempt < self.max_attempts:
                logger.info(
                    f"No repository found. Retrying... "
                    f"({self.max_attempts - attempt} attempts left)"
                )
                await asyncio.sleep(self.retry_delay)
                if self.repository is not None:
                    return True

        logger.info(f"No repository found after {self.max_attempts} attempts")
        return False

    async def on_repository_opened(
        self, repository: VersionControl | None = None
    ) -> bool:
        """Attach a newly opened repository if nothing is watched yet."""
        if self.repository is not None:
            return False
        if repository is None:
            return await self.discover()
        await self.attach(repository)
        return True

    async def analyze_working_tree(self) -> CommitAnalysis | None:
        """Acquire uncommitted changes against the current revision."""
        repository = self.repository
        if repository is None:
            return None
        revision = await self._read_revision(repository)
        if revision is None:
            return None

        change_set = await self.acquirer.acquire(repository, revision)
        if change_set is None:
            return None
        return CommitAnalysis(
            kind="working-tree",
            previous_revision=revision,
            new_revision="working-tree",
            diffs=change_set.files,
        )

    async def describe(self) -> RepositoryInfo:
        """Summarise the watched repository for display."""
        repository = self.repository
        if repository is None:
            return RepositoryInfo(status=NO_REPOSITORY)

        try:
            branch = await repository.current_branch()
            commit = await repository.current_revision()
            changes = await repository.working_tree_changes()
        except Exception as e:
            logger.error(f"Failed to read repository info: {e}")
            return RepositoryInfo(
                status=f"Error: {e}", repository_path=repository.root
            )

        return RepositoryInfo(
            status="Repository found",
            branch=branch,
            commit=commit[:8] if commit else None,
            repository_path=repository.root,
            last_revision=self.snapshot.last_revision,
            changed_files=len(changes),
            changes=[
                FileStatusEntry(file=change.path, status=change.status.label)
                for change in changes
            ],
        )
