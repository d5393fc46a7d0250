"""Review request handler: run the review agent and open threads."""

import logging

from pydantic import BaseModel, Field
from pydantic_ai import Agent

from commitlens.agents.reviewer import review_changes
from commitlens.models.dependencies import ReviewDependencies
from commitlens.models.repository import CommitAnalysis
from commitlens.models.review import CodeReview, ReviewThread, Suggestion
from commitlens.services.session import ReviewSession

logger = logging.getLogger(__name__)


class NoAnalysisError(Exception):
    """Raised when a review is requested before any change was detected."""


class AnalysisFailedError(Exception):
    """Raised when the review agent could not be reached or failed."""


class ReviewOutcome(BaseModel):
    """What a review produced: the review itself and the threads it opened."""

    review: CodeReview
    summary_markdown: str
    threads: list[ReviewThread] = Field(default_factory=list)
    unlocated: list[Suggestion] = Field(default_factory=list)


async def handle_start_review(
    session: ReviewSession,
    analysis: CommitAnalysis | None = None,
    agent: Agent[ReviewDependencies, str] | None = None,
) -> ReviewOutcome:
    """
    Review an analysis and replace the active threads with the new suggestions.

    Args:
        session: The running review session
        analysis: Analysis to review (default: the session's latest)
        agent: Optional review agent (default: review_agent)

    Returns:
        The review with created threads and the suggestions that could not
        be located in the workspace

    Raises:
        NoAnalysisError: If there is nothing to review
        AnalysisFailedError: If the review agent call failed after retries
    """
    if analysis is None:
        analysis = session.latest_analysis
    if analysis is None:
        raise NoAnalysisError("No commit analysis available to review")

    try:
        review = await review_changes(
            analysis.diffs,
            previous_revision=analysis.previous_revision,
            new_revision=analysis.new_revision,
            agent=agent,
        )
    except Exception as e:
        logger.exception("Review agent failed")
        raise AnalysisFailedError(f"Code review failed: {e}") from e

    session.latest_review = review
    await session.registry.clear_all()

    threads: list[ReviewThread] = []
    unlocated: list[Suggestion] = []
    for suggestion in review.suggestions:
        thread = await session.registry.create(suggestion)
        if thread is None:
            unlocated.append(suggestion)
        else:
            threads.append(thread)

    if unlocated:
        logger.warning(
            f"{len(unlocated)} suggestion(s) could not be located: "
            + ", ".join(s.file_path for s in unlocated)
        )
    logger.info(f"Created {len(threads)} review thread(s)")

    return ReviewOutcome(
        review=review,
        summary_markdown=review.format_summary_markdown(),
        threads=threads,
        unlocated=unlocated,
    )
