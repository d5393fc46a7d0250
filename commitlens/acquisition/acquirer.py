"""Reconstruct a full diff from per-file diff queries."""

import logging

from commitlens.diff.parser import DiffParser
from commitlens.models.repository import ChangedFile, ChangeSet
from commitlens.vcs.base import VersionControl

logger = logging.getLogger(__name__)


class ChangeAcquirer:
    """Builds a ChangeSet between two revisions, or a revision and the working tree.

    The version-control collaborator is asked for the changed file list and
    then for each file's diff on its own, so one unreadable file never loses
    the rest of the change.
    """

    async def _list_files(
        self, repository: VersionControl, base: str, head: str | None
    ) -> list[ChangedFile]:
        if head is None:
            return await repository.working_tree_changes()
        return await repository.list_changed_files(base, head)

    async def acquire(
        self, repository: VersionControl, base: str, head: str | None = None
    ) -> ChangeSet | None:
        """
        Acquire and parse the changes between ``base`` and ``head``.

        Args:
            repository: Version-control collaborator to query
            base: Base revision
            head: Head revision, or None for the working tree

        Returns:
            The parsed ChangeSet, or None when nothing changed or the file
            list could not be obtained
        """
        target = head[:8] if head else "working tree"
        try:
            files = await self._list_files(repository, base, head)
        except Exception as e:
            logger.warning(f"Could not list changed files {base[:8]}..{target}: {e}")
            return None

        if not files:
            logger.info(f"No files changed between {base[:8]} and {target}")
            return None

        logger.info(f"Found {len(files)} changed file(s); fetching per-file diffs")

        diff_texts = []
        for changed in files:
            try:
                text = await repository.diff_file(base, head, changed.path)
            except Exception as e:
                logger.warning(f"Could not get diff for {changed.path}, skipping: {e}")
                continue
            if text:
                diff_texts.append(text)

        if not diff_texts:
            logger.info("Diff reconstruction produced no text")
            return None

        changes = DiffParser.parse("\n".join(diff_texts))
        if not changes:
            logger.info("Diff parsing resulted in zero files")
            return None

        logger.info(f"Parsed diffs for {len(changes)} file(s)")
        return ChangeSet(base_revision=base, head_revision=head, files=changes)
