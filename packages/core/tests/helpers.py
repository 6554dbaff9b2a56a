"""Shared builders and an in-memory LabelGateway for the core tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from prlabel_core.config import LabelConfiguration
from prlabel_core.errors import CollaboratorError
from prlabel_core.event import Event
from prlabel_core.gh.base import LabelGateway
from prlabel_core.models import CheckResult, CheckState, PullRequest, Review, ReviewState

OWNER = "octo"
REPO = "widgets"
AUTHOR_ID = 99
SHA = "a" * 40
T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    return T0 + timedelta(minutes=minutes)


def review(reviewer_id, state=ReviewState.APPROVED, minutes=0) -> Review:
    return Review(reviewer_id=reviewer_id, state=state, submitted_at=at(minutes))


def check(context, state) -> CheckResult:
    return CheckResult(context=context, state=CheckState(state))


def make_cfg(**overrides) -> LabelConfiguration:
    values = dict(
        waiting_for_review=("needs-review",),
        ready_for_merge=("ready",),
        waiting_for_author=("needs-author",),
        ci_passed=("ci-passed",),
        requires_description=False,
        requires_review=True,
    )
    values.update(overrides)
    return LabelConfiguration(**values)


def make_pr(number=1, **overrides) -> PullRequest:
    values = dict(
        number=number,
        owner=OWNER,
        repo=REPO,
        author_id=AUTHOR_ID,
        head_sha=SHA,
        head_ref="feature",
        draft=False,
        body="Fixes the widget frobnicator.",
        requested_reviewers=0,
    )
    values.update(overrides)
    return PullRequest(**values)


def pr_payload(number=1, draft=False, body="Fixes the widget frobnicator.", requested_reviewers=(), labels=()):
    return {
        "number": number,
        "draft": draft,
        "body": body,
        "user": {"id": AUTHOR_ID, "login": "author"},
        "requested_reviewers": [{"id": rid} for rid in requested_reviewers],
        "labels": [{"name": name} for name in labels],
        "head": {"sha": SHA, "ref": "feature"},
        "base": {"repo": {"name": REPO, "owner": {"login": OWNER}}},
    }


def pull_request_event(action="synchronize", name="pull_request", **payload_kwargs) -> Event:
    return Event(name=name, owner=OWNER, repo=REPO, payload={"action": action, "pull_request": pr_payload(**payload_kwargs)})


def status_event(context="build", state="success", branches=("feature",)) -> Event:
    return Event(
        name="status",
        owner=OWNER,
        repo=REPO,
        payload={"context": context, "state": state, "sha": SHA, "branches": [{"name": b} for b in branches]},
    )


class FakeGateway(LabelGateway):
    """Keeps labels, reviews, statuses and open PRs in dicts and records every write."""

    def __init__(self, labels=None, reviews=None, statuses=None, check_runs=None, pulls=None):
        self.labels: dict[int, list[str]] = {n: list(v) for n, v in (labels or {}).items()}
        self.reviews: dict[int, list[Review]] = reviews or {}
        self.statuses: dict[str, list[CheckResult]] = statuses or {}
        self.check_runs: dict[str, list[CheckResult]] = check_runs or {}
        self.pulls: dict[str, list[PullRequest]] = pulls or {}
        self.writes: list[tuple[int, list[str]]] = []
        self.review_calls: list[int] = []
        self.failing: set[int] = set()

    def _maybe_fail(self, number):
        if number in self.failing:
            raise CollaboratorError(f"boom on #{number}", number)

    def list_reviews(self, owner, repo, pr_number):
        self._maybe_fail(pr_number)
        self.review_calls.append(pr_number)
        return list(self.reviews.get(pr_number, []))

    def get_combined_status(self, owner, repo, ref):
        return list(self.statuses.get(ref, []))

    def get_check_runs(self, owner, repo, ref):
        return list(self.check_runs.get(ref, []))

    def list_current_labels(self, owner, repo, issue_number):
        self._maybe_fail(issue_number)
        return list(self.labels.get(issue_number, []))

    def replace_all_labels(self, owner, repo, issue_number, labels):
        self.writes.append((issue_number, list(labels)))
        self.labels[issue_number] = list(labels)

    def find_open_pulls(self, owner, repo, branch):
        return list(self.pulls.get(branch, []))

    def get_pull(self, owner, repo, number):
        for pulls in self.pulls.values():
            for pr in pulls:
                if pr.number == number:
                    return pr
        raise CollaboratorError(f"#{number} not found", number)
