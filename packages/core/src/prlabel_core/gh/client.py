"""PyGithub-backed LabelGateway."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager

from github import Auth, Github, GithubException

from prlabel_core.ci import check_state_from_run, parse_check_state
from prlabel_core.errors import CollaboratorError, UnrecognizedStateError
from prlabel_core.gh.base import LabelGateway
from prlabel_core.models import CheckResult, CheckState, PullRequest, Review, ReviewState

logger = logging.getLogger(__name__)

_DEFAULT_API_URL = "https://api.github.com"


@contextmanager
def _api_call(what: str, pr_number: int | None = None):
    """Re-raise API and network failures as CollaboratorError."""
    try:
        yield
    except GithubException as e:
        raise CollaboratorError(f"GitHub API error while trying to {what}: {e.status} {e.data}", pr_number) from e
    except OSError as e:
        raise CollaboratorError(f"Network error while trying to {what}: {e}", pr_number) from e


def _check_from_status(status) -> CheckResult:
    try:
        state = parse_check_state(status.state)
    except UnrecognizedStateError as e:
        return CheckResult(context=status.context, state=CheckState.UNKNOWN, raw_state=e.state)
    return CheckResult(context=status.context, state=state)


class GitHubGateway(LabelGateway):
    """Talks to github.com, or to GitHub Enterprise when GITHUB_API_URL says so."""

    def __init__(self, token: str, base_url: str | None = None):
        base_url = base_url or os.environ.get("GITHUB_API_URL") or _DEFAULT_API_URL
        self._gh = Github(base_url=base_url, auth=Auth.Token(token), user_agent="prlabel")
        self._repos: dict[str, object] = {}

    def _repo(self, owner: str, repo: str):
        full_name = f"{owner}/{repo}"
        if full_name not in self._repos:
            self._repos[full_name] = self._gh.get_repo(full_name)
        return self._repos[full_name]

    def list_reviews(self, owner: str, repo: str, pr_number: int) -> list[Review]:
        with _api_call(f"list reviews of {owner}/{repo}#{pr_number}", pr_number):
            raw_reviews = list(self._repo(owner, repo).get_pull(pr_number).get_reviews())

        reviews = []
        for r in raw_reviews:
            # Reviews by deleted accounts have no user.
            if r.user is None:
                logger.debug("Skipping review %s without a user", r.id)
                continue
            reviews.append(Review(reviewer_id=r.user.id, state=ReviewState.from_api(r.state), submitted_at=r.submitted_at))
        return reviews

    def get_combined_status(self, owner: str, repo: str, ref: str) -> list[CheckResult]:
        with _api_call(f"get the combined status of {ref[:7]}"):
            statuses = self._repo(owner, repo).get_commit(ref).get_combined_status().statuses
        return [_check_from_status(s) for s in statuses]

    def get_check_runs(self, owner: str, repo: str, ref: str) -> list[CheckResult]:
        with _api_call(f"list check runs of {ref[:7]}"):
            runs = list(self._repo(owner, repo).get_commit(ref).get_check_runs())
        return [
            CheckResult(
                context=run.name,
                state=check_state_from_run(run.status, run.conclusion),
                raw_state=run.conclusion,
            )
            for run in runs
        ]

    def list_current_labels(self, owner: str, repo: str, issue_number: int) -> list[str]:
        with _api_call(f"list labels of {owner}/{repo}#{issue_number}", issue_number):
            return [label.name for label in self._repo(owner, repo).get_issue(issue_number).get_labels()]

    def replace_all_labels(self, owner: str, repo: str, issue_number: int, labels: list[str]) -> None:
        with _api_call(f"set labels on {owner}/{repo}#{issue_number}", issue_number):
            self._repo(owner, repo).get_issue(issue_number).set_labels(*labels)

    def find_open_pulls(self, owner: str, repo: str, branch: str) -> list[PullRequest]:
        with _api_call(f"find open pull requests for {branch}"):
            pulls = self._repo(owner, repo).get_pulls(
                state="open", head=f"{owner}:{branch}", sort="updated", direction="desc"
            )
            return [PullRequest.from_github(pr) for pr in pulls]

    def get_pull(self, owner: str, repo: str, number: int) -> PullRequest:
        with _api_call(f"fetch {owner}/{repo}#{number}", number):
            return PullRequest.from_github(self._repo(owner, repo).get_pull(number))
