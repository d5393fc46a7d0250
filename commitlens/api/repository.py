"""Repository status, refresh and discovery endpoints."""

import logging

from fastapi import APIRouter, Depends, status

from commitlens.api.dependencies import get_session
from commitlens.models.repository import CommitAnalysis, RepositoryInfo
from commitlens.services.session import ReviewSession

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/repository", tags=["repository"])


@router.get("", response_model=RepositoryInfo)
async def repository_info(
    session: ReviewSession = Depends(get_session),
) -> RepositoryInfo:
    """Branch, commit and working-tree status of the watched repository."""
    return await session.watcher.describe()


@router.post("/refresh", status_code=status.HTTP_202_ACCEPTED)
async def refresh(session: ReviewSession = Depends(get_session)) -> dict[str, str]:
    """Schedule a debounced check for new commits."""
    session.watcher.request_refresh()
    return {"status": "scheduled"}


@router.post("/discover")
async def discover(session: ReviewSession = Depends(get_session)) -> dict[str, bool]:
    """Look for a repository if none is attached yet."""
    attached = await session.watcher.discover()
    return {"attached": attached}


@router.get("/working-tree", response_model=CommitAnalysis | None)
async def working_tree(
    session: ReviewSession = Depends(get_session),
) -> CommitAnalysis | None:
    """Analyse uncommitted changes; they become the latest analysis."""
    analysis = await session.watcher.analyze_working_tree()
    if analysis is None:
        logger.info("No working tree changes to analyze")
        return None
    await session.record_analysis(analysis)
    return analysis
