"""FastAPI dependencies shared by the routers."""

from fastapi import HTTPException, Request, status

from commitlens.services.session import ReviewSession


def get_session(request: Request) -> ReviewSession:
    """Return the review session created during application startup."""
    session: ReviewSession | None = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Review session not initialised",
        )
    return session
