"""Reduce a commit's CI checks to a single CIStatus.

Failure dominates everything, pending dominates success, and a commit with no
(required) checks has no opinion at all: ``CIStatus.UNKNOWN``.
"""

from __future__ import annotations

import logging

from prlabel_core.errors import UnrecognizedStateError
from prlabel_core.models import CheckResult, CheckState, CIStatus

logger = logging.getLogger(__name__)

_STATUS_STATES = {
    "failure": CheckState.FAILURE,
    "pending": CheckState.PENDING,
    "success": CheckState.SUCCESS,
}

_RUN_CONCLUSIONS = {
    "success": CheckState.SUCCESS,
    "neutral": CheckState.SUCCESS,
    "skipped": CheckState.SUCCESS,
    "failure": CheckState.FAILURE,
    "timed_out": CheckState.FAILURE,
    "cancelled": CheckState.FAILURE,
    "action_required": CheckState.FAILURE,
    "startup_failure": CheckState.FAILURE,
}


def parse_check_state(raw: str | None) -> CheckState:
    """Map a commit status state string. Raises UnrecognizedStateError for anything else."""
    try:
        return _STATUS_STATES[(raw or "").lower()]
    except KeyError:
        raise UnrecognizedStateError(raw or "") from None


def check_state_from_run(status: str | None, conclusion: str | None) -> CheckState:
    """Map a check run's status/conclusion pair onto the commit status vocabulary."""
    if status != "completed":
        return CheckState.PENDING
    return _RUN_CONCLUSIONS.get(conclusion or "", CheckState.UNKNOWN)


def evaluate_ci(
    checks: list[CheckResult],
    required_checks=(),
    log: logging.Logger | logging.LoggerAdapter = logger,
) -> CIStatus:
    required = set(required_checks)
    status = CIStatus.UNKNOWN

    for check in checks:
        if required and check.context not in required:
            continue

        if check.state is CheckState.UNKNOWN:
            log.debug("unknown status state %s encountered for %s", check.raw_state, check.context)
            continue

        log.debug("checking state %s of %s", check.state.value, check.context)

        if check.state is CheckState.FAILURE:
            return CIStatus.FAILURE
        if check.state is CheckState.PENDING:
            if status in (CIStatus.UNKNOWN, CIStatus.SUCCESS):
                status = CIStatus.PENDING
        elif check.state is CheckState.SUCCESS:
            if status is CIStatus.UNKNOWN:
                status = CIStatus.SUCCESS

    return status
