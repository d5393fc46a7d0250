"""Review thread endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from commitlens.api.dependencies import get_session
from commitlens.api.handlers.conversation_handler import (
    ConversationOutcome,
    FixOutcome,
    ThreadNotFoundError,
    handle_fix_request,
    handle_thread_reply,
)
from commitlens.api.handlers.review_handler import AnalysisFailedError
from commitlens.models.review import ReviewThread, ThreadActionResult, ThreadOutcome
from commitlens.services.session import ReviewSession

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/threads", tags=["threads"])


class ReplyRequest(BaseModel):
    message: str = Field(min_length=1)


def _thread_not_found(thread_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail=f"Thread {thread_id} not found"
    )


def _checked(result: ThreadActionResult, thread_id: str) -> ThreadActionResult:
    if result.outcome == ThreadOutcome.NOT_FOUND:
        raise _thread_not_found(thread_id)
    return result


@router.get("", response_model=list[ReviewThread])
async def list_threads(
    session: ReviewSession = Depends(get_session),
) -> list[ReviewThread]:
    return session.registry.active_threads()


@router.delete("")
async def clear_threads(session: ReviewSession = Depends(get_session)) -> dict[str, int]:
    cleared = await session.registry.clear_all()
    return {"cleared": cleared}


@router.get("/{thread_id}", response_model=ReviewThread)
async def get_thread(
    thread_id: str, session: ReviewSession = Depends(get_session)
) -> ReviewThread:
    thread = session.registry.get(thread_id)
    if thread is None:
        raise _thread_not_found(thread_id)
    return thread


@router.post("/{thread_id}/reply", response_model=ConversationOutcome)
async def reply_to_thread(
    thread_id: str,
    request: ReplyRequest,
    session: ReviewSession = Depends(get_session),
) -> ConversationOutcome:
    try:
        return await handle_thread_reply(session, thread_id, request.message)
    except ThreadNotFoundError as err:
        raise _thread_not_found(thread_id) from err
    except AnalysisFailedError as err:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(err)
        ) from err


@router.post("/{thread_id}/fix", response_model=FixOutcome)
async def fix_thread(
    thread_id: str, session: ReviewSession = Depends(get_session)
) -> FixOutcome:
    try:
        return await handle_fix_request(session, thread_id)
    except ThreadNotFoundError as err:
        raise _thread_not_found(thread_id) from err
    except AnalysisFailedError as err:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(err)
        ) from err


@router.post("/{thread_id}/apply", response_model=ThreadActionResult)
async def apply_thread(
    thread_id: str, session: ReviewSession = Depends(get_session)
) -> ThreadActionResult:
    """Write the thread's code change into the file; failures leave the thread open."""
    result = _checked(await session.registry.apply(thread_id), thread_id)
    if not result.success:
        logger.warning(f"Apply failed for {thread_id}: {result.message}")
    return result


@router.post("/{thread_id}/resolve", response_model=ThreadActionResult)
async def resolve_thread(
    thread_id: str, session: ReviewSession = Depends(get_session)
) -> ThreadActionResult:
    return _checked(await session.registry.resolve(thread_id), thread_id)
