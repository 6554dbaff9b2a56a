"""Reduce a pull request's review history to a single ReviewVerdict."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from prlabel_core.models import Review, ReviewState, ReviewVerdict

logger = logging.getLogger(__name__)

# Unsubmitted reviews carry no timestamp; they sort before everything else.
_NEVER = datetime.min.replace(tzinfo=timezone.utc)


def _submitted(review: Review) -> datetime:
    if review.submitted_at is None:
        return _NEVER
    if review.submitted_at.tzinfo is None:
        return review.submitted_at.replace(tzinfo=timezone.utc)
    return review.submitted_at


def latest_reviews(reviews: list[Review], author_id) -> dict:
    """Return ``{reviewer_id: Review}`` holding each reviewer's most recent review.

    The author's own reviews are dropped. On equal timestamps the later entry
    wins, since the API returns reviews in chronological order.
    """
    latest: dict = {}
    for review in reviews:
        if review.reviewer_id == author_id:
            continue
        current = latest.get(review.reviewer_id)
        if current is None or _submitted(review) >= _submitted(current):
            latest[review.reviewer_id] = review
    return latest


def evaluate_reviews(
    reviews: list[Review],
    author_id,
    log: logging.Logger | logging.LoggerAdapter = logger,
) -> ReviewVerdict:
    latest = latest_reviews(reviews, author_id)
    if not latest:
        log.debug("no reviews from anyone but the author")
        return ReviewVerdict.NO_REVIEWS

    pending = sorted(str(rid) for rid, review in latest.items() if review.state is not ReviewState.APPROVED)
    if pending:
        log.debug("reviewers without an approval: %s", ", ".join(pending))
        return ReviewVerdict.NOT_APPROVED

    log.info("All %d reviewer(s) approved", len(latest))
    return ReviewVerdict.APPROVED
