"""Data model shared by the evaluators, the classifier and the reconciler.

Every record is frozen: a snapshot is built fresh for each event and thrown
away once the labels are written. Absent states are modelled as explicit enum
members (``Todo.NONE``, ``CIStatus.UNKNOWN``) rather than ``None``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime


class ReviewState(enum.Enum):
    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    COMMENTED = "COMMENTED"
    OTHER = "OTHER"

    @classmethod
    def from_api(cls, value: str | None) -> ReviewState:
        """Map a GitHub review state; DISMISSED, PENDING and the like become OTHER."""
        try:
            return cls((value or "").upper())
        except ValueError:
            return cls.OTHER


class CheckState(enum.Enum):
    FAILURE = "failure"
    PENDING = "pending"
    SUCCESS = "success"
    UNKNOWN = "unknown"


class CIStatus(enum.Enum):
    FAILURE = "failure"
    PENDING = "pending"
    SUCCESS = "success"
    UNKNOWN = "unknown"


class ReviewVerdict(enum.Enum):
    APPROVED = "approved"
    NOT_APPROVED = "not-approved"
    NO_REVIEWS = "no-reviews"


class Todo(enum.Enum):
    WAITING_ON_REVIEW = "waiting-on-review"
    WAITING_ON_AUTHOR = "waiting-on-author"
    WAITING_ON_DESCRIPTION = "waiting-on-description"
    READY_FOR_MERGE = "ready-for-merge"
    NONE = "none"


@dataclass(frozen=True)
class Review:
    reviewer_id: int
    state: ReviewState
    submitted_at: datetime | None = None


@dataclass(frozen=True)
class CheckResult:
    context: str
    state: CheckState
    raw_state: str | None = None  # state string as the API reported it


@dataclass(frozen=True)
class PullRequest:
    """Read-only snapshot of the fields prlabel looks at."""

    number: int
    owner: str
    repo: str
    author_id: int
    head_sha: str
    head_ref: str = ""
    draft: bool = False
    body: str | None = None
    requested_reviewers: int = 0
    labels: tuple[str, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_payload(cls, payload: dict) -> PullRequest:
        """Build from the ``pull_request`` object of a webhook payload."""
        base_repo = payload["base"]["repo"]
        return cls(
            number=payload["number"],
            owner=base_repo["owner"]["login"],
            repo=base_repo["name"],
            author_id=payload["user"]["id"],
            head_sha=payload["head"]["sha"],
            head_ref=payload["head"].get("ref", ""),
            draft=bool(payload.get("draft", False)),
            body=payload.get("body"),
            requested_reviewers=len(payload.get("requested_reviewers") or []),
            labels=tuple(label["name"] for label in payload.get("labels") or []),
        )

    @classmethod
    def from_github(cls, pr) -> PullRequest:
        """Build from a PyGithub ``PullRequest``."""
        return cls(
            number=pr.number,
            owner=pr.base.repo.owner.login,
            repo=pr.base.repo.name,
            author_id=pr.user.id,
            head_sha=pr.head.sha,
            head_ref=pr.head.ref or "",
            draft=bool(pr.draft),
            body=pr.body,
            requested_reviewers=len(pr.requested_reviewers or []),
            labels=tuple(label.name for label in pr.labels),
        )


@dataclass(frozen=True)
class TriageVerdict:
    todo: Todo
    ci_status: CIStatus
    pull_request: PullRequest


@dataclass(frozen=True)
class LabelPatch:
    """Minimal change to a live label set. Removals apply before additions."""

    to_add: tuple[str, ...] = ()
    to_remove: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove

    def apply(self, live_labels) -> list[str]:
        removed = set(self.to_remove)
        labels = [label for label in live_labels if label not in removed]
        for label in self.to_add:
            if label not in labels:
                labels.append(label)
        return labels


@dataclass
class EventReport:
    """What a single ``process_event`` call did, one entry per pull request."""

    event_name: str
    verdicts: list[TriageVerdict] = field(default_factory=list)
    patches: dict[int, LabelPatch] = field(default_factory=dict)
    failures: dict[int, Exception] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    @property
    def missing_description(self) -> list[PullRequest]:
        return [v.pull_request for v in self.verdicts if v.todo is Todo.WAITING_ON_DESCRIPTION]
