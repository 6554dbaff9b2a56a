"""Abstract interface to the source-control API.

The processor depends on LabelGateway, not on PyGithub, so it can run against
an in-memory fake in tests and against GitHubGateway in a workflow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prlabel_core.models import CheckResult, PullRequest, Review


class LabelGateway(ABC):
    """Reads and writes needed to triage one pull request.

    Implementations raise CollaboratorError for any API or network failure.
    """

    @abstractmethod
    def list_reviews(self, owner: str, repo: str, pr_number: int) -> list[Review]:
        """Return every submitted review on the PR, oldest first."""

    @abstractmethod
    def get_combined_status(self, owner: str, repo: str, ref: str) -> list[CheckResult]:
        """Return the commit statuses reported for ``ref``."""

    def get_check_runs(self, owner: str, repo: str, ref: str) -> list[CheckResult]:
        """Return check runs reported for ``ref``.

        Optional. Gateways without check run support report none.
        """
        return []

    @abstractmethod
    def list_current_labels(self, owner: str, repo: str, issue_number: int) -> list[str]:
        """Return the label names on the issue as they are right now."""

    @abstractmethod
    def replace_all_labels(self, owner: str, repo: str, issue_number: int, labels: list[str]) -> None:
        """Overwrite the issue's labels with exactly ``labels``."""

    @abstractmethod
    def find_open_pulls(self, owner: str, repo: str, branch: str) -> list[PullRequest]:
        """Return open PRs whose head is ``owner:branch``, most recently updated first."""

    @abstractmethod
    def get_pull(self, owner: str, repo: str, number: int) -> PullRequest:
        """Fetch a single pull request."""
