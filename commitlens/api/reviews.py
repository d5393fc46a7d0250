"""Analysis and review endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from commitlens.api.dependencies import get_session
from commitlens.api.handlers.review_handler import (
    AnalysisFailedError,
    NoAnalysisError,
    ReviewOutcome,
    handle_start_review,
)
from commitlens.models.repository import CommitAnalysis
from commitlens.services.session import ReviewSession

router = APIRouter(tags=["reviews"])


class ReviewRequest(BaseModel):
    analysis: CommitAnalysis | None = None


@router.get("/analysis/latest", response_model=CommitAnalysis)
async def latest_analysis(
    session: ReviewSession = Depends(get_session),
) -> CommitAnalysis:
    if session.latest_analysis is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No analysis available"
        )
    return session.latest_analysis


@router.post("/reviews", response_model=ReviewOutcome)
async def start_review(
    request: ReviewRequest | None = None,
    session: ReviewSession = Depends(get_session),
) -> ReviewOutcome:
    """Review the given analysis (or the latest one) and open threads."""
    analysis = request.analysis if request is not None else None
    try:
        return await handle_start_review(session, analysis=analysis)
    except NoAnalysisError as err:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(err)
        ) from err
    except AnalysisFailedError as err:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(err)
        ) from err
