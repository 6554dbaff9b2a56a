"""Turn a TriageVerdict into the smallest label change that reflects it."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prlabel_core.models import CIStatus, LabelPatch, Todo, TriageVerdict

if TYPE_CHECKING:
    from prlabel_core.config import LabelConfiguration
    from prlabel_core.gh.base import LabelGateway

logger = logging.getLogger(__name__)


def _ordered_union(*groups) -> tuple[str, ...]:
    result: list[str] = []
    for group in groups:
        for label in group:
            if label not in result:
                result.append(label)
    return tuple(result)


def desired_labels(verdict: TriageVerdict, cfg: LabelConfiguration) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Return ``(to_add, to_remove)`` for a verdict, before looking at live labels.

    A label that ends up in both sets stays: additions win.
    """
    todo = verdict.todo
    if todo is Todo.READY_FOR_MERGE:
        to_remove = _ordered_union(cfg.waiting_for_review, cfg.waiting_for_author)
        to_add = cfg.ready_for_merge
    elif todo is Todo.WAITING_ON_REVIEW:
        to_remove = _ordered_union(cfg.ready_for_merge, cfg.waiting_for_author)
        to_add = cfg.waiting_for_review
    elif todo in (Todo.WAITING_ON_AUTHOR, Todo.WAITING_ON_DESCRIPTION):
        to_remove = _ordered_union(cfg.ready_for_merge, cfg.waiting_for_review)
        to_add = cfg.waiting_for_author
    elif todo is Todo.NONE:
        to_remove = ()
        to_add = ()
    else:
        raise ValueError(f"unhandled todo {todo!r}")

    if verdict.ci_status is CIStatus.SUCCESS:
        to_add = _ordered_union(to_add, cfg.ci_passed)
    elif verdict.ci_status in (CIStatus.PENDING, CIStatus.FAILURE, CIStatus.UNKNOWN):
        to_remove = _ordered_union(to_remove, cfg.ci_passed)
    else:
        raise ValueError(f"unhandled CI status {verdict.ci_status!r}")

    added = set(to_add)
    return to_add, tuple(label for label in to_remove if label not in added)


def reconcile(verdict: TriageVerdict, cfg: LabelConfiguration, current_labels) -> LabelPatch:
    """Diff the desired labels against the live set and keep only real changes."""
    to_add, to_remove = desired_labels(verdict, cfg)
    live = set(current_labels)
    return LabelPatch(
        to_add=tuple(label for label in to_add if label not in live),
        to_remove=tuple(label for label in to_remove if label in live),
    )


def apply_labels(
    gateway: LabelGateway,
    verdict: TriageVerdict,
    cfg: LabelConfiguration,
    dry_run: bool = False,
    log: logging.Logger | logging.LoggerAdapter = logger,
) -> LabelPatch:
    """Reconcile against the PR's labels as they are right now and write them once.

    The labels captured in the event payload may be stale by the time the job
    runs, so they are fetched again immediately before the write.
    """
    pr = verdict.pull_request
    labels = gateway.list_current_labels(pr.owner, pr.repo, pr.number)
    patch = reconcile(verdict, cfg, labels)

    if patch.is_empty:
        log.info("No labels to change")
        return patch

    new_labels = patch.apply(labels)
    log.debug("adding labels %s, removing labels %s", list(patch.to_add), list(patch.to_remove))
    if dry_run:
        log.info("Dry run: would change labels from %s to %s", labels, new_labels)
        return patch

    log.debug("changing labels from %s to %s", labels, new_labels)
    gateway.replace_all_labels(pr.owner, pr.repo, pr.number, new_labels)
    return patch
