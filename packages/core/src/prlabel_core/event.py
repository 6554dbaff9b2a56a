"""The triggering GitHub event, as handed to a workflow run."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from prlabel_core.errors import ConfigurationError

CI_EVENTS = frozenset({"status", "check_suite", "check_run"})
PULL_REQUEST_EVENTS = frozenset(
    {"pull_request", "pull_request_target", "pull_request_review", "pull_request_review_comment"}
)


@dataclass(frozen=True)
class Event:
    name: str
    owner: str
    repo: str
    payload: dict = field(default_factory=dict)

    @property
    def action(self) -> str | None:
        return self.payload.get("action")

    @property
    def is_ci_event(self) -> bool:
        return self.name in CI_EVENTS

    @property
    def marks_ready_for_review(self) -> bool:
        return self.name in ("pull_request", "pull_request_target") and self.action == "ready_for_review"

    @property
    def pull_request(self) -> dict | None:
        return self.payload.get("pull_request")

    @property
    def context(self) -> str | None:
        """Name of the check a ``status`` event reports on."""
        if self.name == "check_run":
            return (self.payload.get("check_run") or {}).get("name")
        return self.payload.get("context")

    @property
    def branches(self) -> list[str]:
        """Branch names a CI event applies to."""
        if self.name == "status":
            return [b["name"] for b in self.payload.get("branches") or [] if b.get("name")]
        if self.name == "check_suite":
            suite = self.payload.get("check_suite") or {}
        elif self.name == "check_run":
            suite = (self.payload.get("check_run") or {}).get("check_suite") or {}
        else:
            return []
        head_branch = suite.get("head_branch")
        return [head_branch] if head_branch else []


def load_event(environ: dict | None = None) -> Event:
    """Read the event a GitHub Actions job was started by.

    Uses GITHUB_EVENT_NAME, GITHUB_EVENT_PATH and GITHUB_REPOSITORY, which the
    runner always sets.
    """
    env = os.environ if environ is None else environ

    name = env.get("GITHUB_EVENT_NAME")
    event_path = env.get("GITHUB_EVENT_PATH")
    repository = env.get("GITHUB_REPOSITORY", "")
    if not name or not event_path:
        raise ConfigurationError("GITHUB_EVENT_NAME and GITHUB_EVENT_PATH must be set (is this a workflow run?)")
    if repository.count("/") != 1:
        raise ConfigurationError(f"GITHUB_REPOSITORY must look like owner/name, got {repository!r}")

    path = Path(event_path)
    try:
        payload = json.loads(path.read_text())
    except FileNotFoundError:
        raise ConfigurationError(f"Event payload not found: {event_path}") from None
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Event payload {event_path} is not valid JSON: {e}") from e

    owner, repo = repository.split("/")
    return Event(name=name, owner=owner, repo=repo, payload=payload or {})
