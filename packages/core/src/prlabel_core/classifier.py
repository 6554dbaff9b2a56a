"""Triage classification: one Todo and one CIStatus per pull request.

Rules are applied in a fixed order and the first that matches wins:

  1. draft PR                      → WAITING_ON_AUTHOR (CI not attached)
  2. CI-only event                 → NONE (only the CI label moves)
  3. PR just marked ready          → WAITING_ON_REVIEW
  4. reviewers still requested     → WAITING_ON_REVIEW
  5. review verdict                → READY_FOR_MERGE or WAITING_ON_REVIEW
  6. ready but no description      → WAITING_ON_DESCRIPTION (when required)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prlabel_core.models import CIStatus, PullRequest, ReviewVerdict, Todo, TriageVerdict

if TYPE_CHECKING:
    from prlabel_core.config import LabelConfiguration
    from prlabel_core.event import Event

logger = logging.getLogger(__name__)


def needs_reviews(event: Event, pr: PullRequest, pending_reviewer_count: int) -> bool:
    """True when only the review verdict (rule 5) can decide this PR."""
    if pr.draft or event.is_ci_event or event.marks_ready_for_review:
        return False
    return pending_reviewer_count == 0


def has_description(pr: PullRequest) -> bool:
    return bool(pr.body)


def classify(
    event: Event,
    pr: PullRequest,
    pending_reviewer_count: int,
    review_verdict: ReviewVerdict | None,
    ci_status: CIStatus,
    cfg: LabelConfiguration,
    log: logging.Logger | logging.LoggerAdapter = logger,
) -> TriageVerdict:
    if pr.draft:
        log.info("Draft pull request, waiting on author")
        return TriageVerdict(todo=Todo.WAITING_ON_AUTHOR, ci_status=CIStatus.UNKNOWN, pull_request=pr)

    if event.is_ci_event:
        return TriageVerdict(todo=Todo.NONE, ci_status=ci_status, pull_request=pr)

    if event.marks_ready_for_review:
        log.info("Pull request was just marked ready for review")
        return TriageVerdict(todo=Todo.WAITING_ON_REVIEW, ci_status=ci_status, pull_request=pr)

    if pending_reviewer_count > 0:
        log.debug("Detected %d pending reviewers", pending_reviewer_count)
        todo = Todo.WAITING_ON_REVIEW
    elif review_verdict is ReviewVerdict.APPROVED:
        todo = Todo.READY_FOR_MERGE
    elif review_verdict is ReviewVerdict.NOT_APPROVED:
        todo = Todo.WAITING_ON_REVIEW
    elif review_verdict is ReviewVerdict.NO_REVIEWS:
        if cfg.requires_review:
            log.debug("There are no reviews but we require them, marking PR as waiting on review")
            todo = Todo.WAITING_ON_REVIEW
        else:
            log.debug("There are no reviews and we don't require them, marking PR as ready for merge")
            todo = Todo.READY_FOR_MERGE
    else:
        raise ValueError(f"PR#{pr.number}: no review verdict to classify with")

    if todo is Todo.READY_FOR_MERGE and cfg.requires_description and not has_description(pr):
        log.error("The PR is ready to be merged, but it doesn't have a description, and one is required")
        todo = Todo.WAITING_ON_DESCRIPTION

    return TriageVerdict(todo=todo, ci_status=ci_status, pull_request=pr)
