"""triage command: triage one pull request by number, outside of a workflow."""

from __future__ import annotations

import click

from prlabel_cli.common import check_outcome, label_config, make_gateway, render_report
from prlabel_core.errors import PrLabelError
from prlabel_core.event import Event
from prlabel_core.models import EventReport
from prlabel_core.processor import process_pull_request


@click.command("triage")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option("--dry-run", is_flag=True, help="Work out label changes without writing them.")
@click.pass_context
def triage_cmd(ctx, repo: str, pr_number: int, dry_run: bool):
    """Triage a single pull request as if it had just been pushed to."""
    if repo.count("/") != 1:
        raise click.BadParameter("expected owner/name", param_hint="--repo")
    owner, name = repo.split("/")

    cfg = label_config(ctx)
    gateway = make_gateway(ctx)
    event = Event(name="pull_request", owner=owner, repo=name, payload={"action": "synchronize"})

    try:
        pr = gateway.get_pull(owner, name, pr_number)
        verdict, patch = process_pull_request(event, pr, gateway, cfg, dry_run=dry_run)
    except PrLabelError as e:
        raise click.ClickException(str(e))

    report = EventReport(event_name=event.name, verdicts=[verdict], patches={pr.number: patch})
    render_report(report, dry_run=dry_run)
    check_outcome(report, cfg)
