"""GitHub webhook endpoint: the change notification stream for watched repositories."""

import hashlib
import hmac
import logging
from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from commitlens.api.dependencies import get_session
from commitlens.config.settings import settings
from commitlens.services.session import ReviewSession

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/webhook", tags=["webhooks"])


async def validate_signature(
    request: Request,
    x_hub_signature_256: str | None = Header(None, alias="X-Hub-Signature-256"),
) -> None:
    """
    Validate GitHub webhook signature.

    Args:
        request: The incoming request
        x_hub_signature_256: GitHub signature from header

    Raises:
        HTTPException: If signature is missing or invalid
    """
    if not x_hub_signature_256:
        logger.warning("Missing X-Hub-Signature-256 header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Hub-Signature-256 header",
        )

    body = await request.body()

    webhook_secret = settings.github_webhook_secret
    if not webhook_secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook secret not configured",
        )
    secret = webhook_secret.encode("utf-8")
    expected_signature = f"sha256={hmac.new(secret, body, hashlib.sha256).hexdigest()}"

    if not hmac.compare_digest(expected_signature, x_hub_signature_256):
        logger.warning("Invalid webhook signature")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid signature",
        )


def _is_tracked_ref(ref: str | None) -> bool:
    """Pushes to other branches are ignored for the GitHub backend."""
    if settings.vcs_backend != "github" or ref is None:
        return True
    return ref == f"refs/heads/{settings.github_branch}"


@router.post("/github")
async def github_webhook(
    request: Request,
    x_github_event: str | None = Header(None, alias="X-GitHub-Event"),
    x_hub_signature_256: str | None = Header(None, alias="X-Hub-Signature-256"),
    session: ReviewSession = Depends(get_session),
) -> dict[str, Any]:
    """
    Handle GitHub webhook events.

    ``push`` events are treated as change notifications for the watched
    repository; ``ping`` is answered and everything else is ignored.

    Args:
        request: The incoming request
        x_github_event: The type of GitHub event
        x_hub_signature_256: GitHub signature for verification
        session: The running review session

    Returns:
        Status message
    """
    await validate_signature(request, x_hub_signature_256)

    payload: dict[str, Any] = await request.json()

    if x_github_event == "ping":
        logger.info("Received ping event from GitHub")
        return {"message": "pong"}

    if x_github_event == "push":
        ref = payload.get("ref")
        head = payload.get("after")
        repo_name = payload.get("repository", {}).get("full_name")
        logger.info(f"Received push event for {repo_name} ({ref} -> {head})")

        if not _is_tracked_ref(ref):
            logger.info(f"Ignoring push to untracked ref {ref}")
            return {"message": f"Push to {ref} ignored", "status": "ignored"}

        watcher = session.watcher
        if not watcher.is_attached:
            await watcher.on_repository_opened()
            return {"message": "Repository attached", "status": "attached"}

        analysis = await watcher.notify()
        if analysis is None:
            return {"message": "No new changes", "status": "unchanged"}
        return {
            "message": f"Analysed {len(analysis.diffs)} changed file(s)",
            "status": "analysed",
            "previous_revision": analysis.previous_revision,
            "new_revision": analysis.new_revision,
        }

    logger.info(f"Ignoring event type: {x_github_event}")
    return {"message": f"Event {x_github_event} not supported"}
