"""Exception hierarchy for prlabel.

Classification and reconciliation are pure and never raise on valid input.
Everything here originates at a boundary: configuration parsing, event
loading, or the GitHub API.
"""

from __future__ import annotations


class PrLabelError(Exception):
    """Base class for every error prlabel raises on purpose."""


class ConfigurationError(PrLabelError):
    """Malformed inputs (label lists, boolean flags, event environment).

    Always fatal, and always raised before any API call is made.
    """


class MissingPullRequestError(PrLabelError):
    """The triggering event does not point at a pull request.

    Fatal for pull-request-scoped events. CI events that only name branches
    log it and skip instead.
    """


class UnrecognizedStateError(PrLabelError):
    """A CI state string prlabel does not know about.

    Soft: callers log it and treat the check as having no opinion.
    """

    def __init__(self, state: str):
        super().__init__(f"unrecognized CI state {state!r}")
        self.state = state


class CollaboratorError(PrLabelError):
    """A read or write against the GitHub API failed."""

    def __init__(self, message: str, pr_number: int | None = None):
        super().__init__(message)
        self.pr_number = pr_number
