"""Event processing: find the affected pull requests, triage each, write labels."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prlabel_core.ci import evaluate_ci
from prlabel_core.classifier import classify, needs_reviews
from prlabel_core.errors import CollaboratorError, MissingPullRequestError
from prlabel_core.labels import apply_labels
from prlabel_core.models import CIStatus, EventReport, LabelPatch, PullRequest, TriageVerdict
from prlabel_core.reviews import evaluate_reviews

if TYPE_CHECKING:
    from prlabel_core.config import LabelConfiguration
    from prlabel_core.event import Event
    from prlabel_core.gh.base import LabelGateway

logger = logging.getLogger(__name__)


class PullRequestLogger(logging.LoggerAdapter):
    """Prefixes every message with the pull request it is about."""

    def process(self, msg, kwargs):
        return f"[{self.extra['pull_request']}] {msg}", kwargs


def _pull_requests_for(
    event: Event,
    gateway: LabelGateway,
    cfg: LabelConfiguration,
    log: logging.Logger | logging.LoggerAdapter,
) -> list[PullRequest]:
    if event.is_ci_event:
        context = event.context
        if cfg.required_checks and context and context not in cfg.required_checks:
            log.info("Ignoring %s event for context %s, it is not a required check", event.name, context)
            return []

        branches = event.branches
        if not branches:
            log.info("Ignoring %s event for %s, no branches found", event.name, context)
            return []

        pulls: dict[int, PullRequest] = {}
        for branch in branches:
            for pr in gateway.find_open_pulls(event.owner, event.repo, branch):
                pulls.setdefault(pr.number, pr)
        if not pulls:
            log.info("No open pull requests for %s", ", ".join(branches))
        return list(pulls.values())

    if event.pull_request:
        return [PullRequest.from_payload(event.pull_request)]

    raise MissingPullRequestError(f"event {event.name} didn't pertain to a pull request")


def triage_pull_request(
    event: Event,
    pr: PullRequest,
    gateway: LabelGateway,
    cfg: LabelConfiguration,
    log: logging.Logger | logging.LoggerAdapter = logger,
) -> TriageVerdict:
    """Gather what the classifier needs for one PR, fetching only what it will use."""
    ci_status = CIStatus.UNKNOWN
    if not pr.draft:
        checks = gateway.get_combined_status(pr.owner, pr.repo, pr.head_sha)
        if cfg.include_check_runs:
            checks = checks + gateway.get_check_runs(pr.owner, pr.repo, pr.head_sha)
        ci_status = evaluate_ci(checks, cfg.required_checks, log)
        log.debug("CI status is %s", ci_status.value)

    review_verdict = None
    if needs_reviews(event, pr, pr.requested_reviewers):
        reviews = gateway.list_reviews(pr.owner, pr.repo, pr.number)
        review_verdict = evaluate_reviews(reviews, pr.author_id, log)

    return classify(event, pr, pr.requested_reviewers, review_verdict, ci_status, cfg, log)


def process_pull_request(
    event: Event,
    pr: PullRequest,
    gateway: LabelGateway,
    cfg: LabelConfiguration,
    dry_run: bool = False,
    log: logging.Logger | logging.LoggerAdapter = logger,
) -> tuple[TriageVerdict, LabelPatch]:
    verdict = triage_pull_request(event, pr, gateway, cfg, log)
    log.info("Triaged as %s (CI %s)", verdict.todo.value, verdict.ci_status.value)
    return verdict, apply_labels(gateway, verdict, cfg, dry_run, log)


def process_event(
    event: Event,
    gateway: LabelGateway,
    cfg: LabelConfiguration,
    dry_run: bool = False,
    log: logging.Logger | logging.LoggerAdapter = logger,
) -> EventReport:
    """Triage every pull request the event touches and bring its labels up to date.

    PRs are handled one at a time. For CI events that fan out to several PRs a
    CollaboratorError is recorded in the report and the remaining PRs are still
    processed; for a single-PR event it propagates.
    """
    report = EventReport(event_name=event.name)
    pulls = _pull_requests_for(event, gateway, cfg, log)
    if not pulls:
        log.info("event %s didn't pertain to 1 or more pull requests, ignoring", event.name)
        return report

    for pr in pulls:
        pr_log = PullRequestLogger(log, {"pull_request": f"{pr.full_name}#{pr.number}"})
        try:
            verdict, patch = process_pull_request(event, pr, gateway, cfg, dry_run, pr_log)
        except CollaboratorError as e:
            if not event.is_ci_event:
                raise
            pr_log.error("Giving up on this pull request: %s", e)
            report.failures[pr.number] = e
            continue
        report.verdicts.append(verdict)
        report.patches[pr.number] = patch

    return report
