"""run command: triage the pull request(s) behind the current workflow event."""

from __future__ import annotations

import click

from prlabel_cli.common import check_outcome, label_config, make_gateway, render_report
from prlabel_core.errors import ConfigurationError, PrLabelError
from prlabel_core.event import load_event
from prlabel_core.processor import process_event


@click.command("run")
@click.option("--dry-run", is_flag=True, help="Work out label changes without writing them.")
@click.pass_context
def run_cmd(ctx, dry_run: bool):
    """Triage the pull request(s) the current GitHub Actions event is about.

    Reads the event from the runner environment, classifies each affected
    pull request and replaces its triage labels when they are out of date.

    \b
    Required environment variables (set by the Actions runner):
      GITHUB_EVENT_NAME    Name of the triggering event
      GITHUB_EVENT_PATH    Path to the event payload JSON
      GITHUB_REPOSITORY    owner/name of the repository
      GITHUB_TOKEN         Token with pull-requests: write (or use gh CLI)
    """
    cfg = label_config(ctx)
    try:
        event = load_event()
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    gateway = make_gateway(ctx)

    try:
        report = process_event(event, gateway, cfg, dry_run=dry_run)
    except PrLabelError as e:
        raise click.ClickException(str(e))

    render_report(report, dry_run=dry_run)
    check_outcome(report, cfg)
