"""Tests for label reconciliation."""

import pytest

from helpers import FakeGateway, make_cfg, make_pr
from prlabel_core.labels import apply_labels, desired_labels, reconcile
from prlabel_core.models import CIStatus, LabelPatch, Todo, TriageVerdict


def verdict(todo, ci_status=CIStatus.UNKNOWN, pr=None):
    return TriageVerdict(todo=todo, ci_status=ci_status, pull_request=pr or make_pr())


class TestDesiredLabels:
    def test_ready_for_merge(self):
        to_add, to_remove = desired_labels(verdict(Todo.READY_FOR_MERGE), make_cfg())
        assert to_add == ("ready",)
        assert set(to_remove) == {"needs-review", "needs-author", "ci-passed"}

    def test_waiting_on_review(self):
        to_add, to_remove = desired_labels(verdict(Todo.WAITING_ON_REVIEW, CIStatus.SUCCESS), make_cfg())
        assert set(to_add) == {"needs-review", "ci-passed"}
        assert set(to_remove) == {"ready", "needs-author"}

    @pytest.mark.parametrize("todo", [Todo.WAITING_ON_AUTHOR, Todo.WAITING_ON_DESCRIPTION])
    def test_waiting_on_author_and_description(self, todo):
        to_add, to_remove = desired_labels(verdict(todo, CIStatus.SUCCESS), make_cfg())
        assert set(to_add) == {"needs-author", "ci-passed"}
        assert set(to_remove) == {"ready", "needs-review"}

    def test_none_only_moves_ci_label(self):
        assert desired_labels(verdict(Todo.NONE, CIStatus.SUCCESS), make_cfg()) == (("ci-passed",), ())
        assert desired_labels(verdict(Todo.NONE, CIStatus.FAILURE), make_cfg()) == ((), ("ci-passed",))

    @pytest.mark.parametrize("ci_status", [CIStatus.PENDING, CIStatus.FAILURE, CIStatus.UNKNOWN])
    def test_non_success_removes_ci_label(self, ci_status):
        _, to_remove = desired_labels(verdict(Todo.NONE, ci_status), make_cfg())
        assert "ci-passed" in to_remove

    def test_add_wins_over_remove(self):
        # A shared label would normally be rejected at config time; the reconciler still keeps it.
        cfg = make_cfg(ready_for_merge=("triaged", "ready"), waiting_for_review=("triaged",))
        to_add, to_remove = desired_labels(verdict(Todo.READY_FOR_MERGE), cfg)
        assert "triaged" in to_add
        assert "triaged" not in to_remove

    def test_no_ci_labels_configured(self):
        to_add, to_remove = desired_labels(verdict(Todo.NONE, CIStatus.SUCCESS), make_cfg(ci_passed=()))
        assert to_add == () and to_remove == ()


class TestReconcile:
    def test_minimal_patch(self):
        patch = reconcile(verdict(Todo.READY_FOR_MERGE), make_cfg(), ["needs-review", "bug"])
        assert patch == LabelPatch(to_add=("ready",), to_remove=("needs-review",))

    def test_no_op_when_already_labelled(self):
        patch = reconcile(verdict(Todo.READY_FOR_MERGE, CIStatus.SUCCESS), make_cfg(), ["bug", "ready", "ci-passed"])
        assert patch.is_empty

    def test_result_is_live_minus_remove_plus_add(self):
        live = ["bug", "needs-review", "needs-author", "ci-passed"]
        patch = reconcile(verdict(Todo.READY_FOR_MERGE, CIStatus.PENDING), make_cfg(), live)
        assert set(patch.apply(live)) == (set(live) - {"needs-review", "needs-author", "ci-passed"}) | {"ready"}

    def test_applying_twice_is_idempotent(self):
        live = ["needs-review", "bug"]
        v = verdict(Todo.READY_FOR_MERGE, CIStatus.SUCCESS)
        once = reconcile(v, make_cfg(), live).apply(live)
        assert reconcile(v, make_cfg(), once).is_empty
        assert reconcile(v, make_cfg(), live).apply(once) == once


class TestLabelPatchApply:
    def test_removals_before_additions_preserve_order(self):
        patch = LabelPatch(to_add=("ready",), to_remove=("needs-review",))
        assert patch.apply(["needs-review", "bug"]) == ["bug", "ready"]

    def test_does_not_duplicate(self):
        assert LabelPatch(to_add=("bug",)).apply(["bug"]) == ["bug"]


class TestApplyLabels:
    def test_writes_once_with_fresh_labels(self):
        pr = make_pr(labels=("stale-label",))
        gateway = FakeGateway(labels={1: ["needs-review", "bug"]})
        patch = apply_labels(gateway, verdict(Todo.READY_FOR_MERGE, pr=pr), make_cfg(ci_passed=()))
        assert patch.to_add == ("ready",)
        assert gateway.writes == [(1, ["bug", "ready"])]

    def test_no_write_when_nothing_changes(self):
        gateway = FakeGateway(labels={1: ["ready", "ci-passed"]})
        patch = apply_labels(gateway, verdict(Todo.READY_FOR_MERGE, CIStatus.SUCCESS), make_cfg())
        assert patch.is_empty
        assert gateway.writes == []

    def test_dry_run_does_not_write(self):
        gateway = FakeGateway(labels={1: ["needs-review"]})
        patch = apply_labels(gateway, verdict(Todo.READY_FOR_MERGE), make_cfg(), dry_run=True)
        assert not patch.is_empty
        assert gateway.writes == []

    def test_draft_scenario(self):
        gateway = FakeGateway(labels={1: ["ready", "needs-review", "ci-passed"]})
        apply_labels(gateway, verdict(Todo.WAITING_ON_AUTHOR, pr=make_pr(draft=True)), make_cfg())
        assert gateway.writes == [(1, ["needs-author"])]
