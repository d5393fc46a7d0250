"""Per-process review session wiring the watcher, locator and thread registry."""

import logging

from commitlens.acquisition.acquirer import ChangeAcquirer
from commitlens.acquisition.watcher import CommitWatcher
from commitlens.config.settings import Settings
from commitlens.models.repository import CommitAnalysis
from commitlens.models.review import CodeReview
from commitlens.review.locator import SuggestionLocator
from commitlens.review.registry import ReviewThreadRegistry
from commitlens.review.workspace import FileAccess, LocalWorkspace
from commitlens.vcs.base import RepositoryProvider
from commitlens.vcs.git_cli import LocalRepositoryProvider
from commitlens.vcs.github_api import GitHubRepositoryProvider

logger = logging.getLogger(__name__)


class ReviewSession:
    """
    Everything one running service needs: the commit watcher for the
    repository, the workspace files suggestions land in, and the registry
    of open threads.
    """

    def __init__(
        self,
        watcher: CommitWatcher,
        files: FileAccess,
        bot_name: str = "CommitLens",
        fix_context_lines: int = 5,
    ) -> None:
        self.watcher = watcher
        self.files = files
        self.bot_name = bot_name
        self.fix_context_lines = fix_context_lines
        self.locator = SuggestionLocator(files)
        self.registry = ReviewThreadRegistry(self.locator, files, bot_name=bot_name)
        self.latest_analysis: CommitAnalysis | None = None
        self.latest_review: CodeReview | None = None

        self.watcher.on_change = self.record_analysis

    async def record_analysis(self, analysis: CommitAnalysis) -> None:
        """Keep the most recent analysis for review requests."""
        self.latest_analysis = analysis
        logger.info(
            f"Analysis ready: {analysis.kind} {analysis.previous_revision[:8]} -> "
            f"{analysis.new_revision[:8]} ({len(analysis.diffs)} file(s))"
        )

    async def start(self) -> None:
        found = await self.watcher.discover()
        if not found:
            logger.warning("No repository attached; waiting for one to be opened")

    async def stop(self) -> None:
        self.watcher.cancel_refresh()
        await self.registry.clear_all()


def build_provider(config: Settings) -> RepositoryProvider:
    """Choose the repository provider for the configured backend."""
    if config.vcs_backend == "github":
        return GitHubRepositoryProvider(
            token=config.github_token,
            repository=config.github_repository,
            branch=config.github_branch,
        )
    return LocalRepositoryProvider(config.workspace_root)


def build_session(config: Settings) -> ReviewSession:
    """Create a session from settings."""
    watcher = CommitWatcher(
        acquirer=ChangeAcquirer(),
        provider=build_provider(config),
        max_attempts=config.discovery_max_attempts,
        retry_delay=config.discovery_retry_delay,
        debounce_seconds=config.refresh_debounce_seconds,
    )
    return ReviewSession(
        watcher=watcher,
        files=LocalWorkspace(config.workspace_root),
        bot_name=config.bot_name,
        fix_context_lines=config.fix_context_lines,
    )
