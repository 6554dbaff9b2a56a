"""Helpers shared by the run and triage commands."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from prlabel_core.config import LabelConfiguration
from prlabel_core.errors import ConfigurationError
from prlabel_core.models import CIStatus, EventReport, Todo

console = Console()

_TODO_STYLE = {
    Todo.READY_FOR_MERGE: "green",
    Todo.WAITING_ON_REVIEW: "yellow",
    Todo.WAITING_ON_AUTHOR: "magenta",
    Todo.WAITING_ON_DESCRIPTION: "red",
    Todo.NONE: "dim",
}

_CI_STYLE = {
    CIStatus.SUCCESS: "green",
    CIStatus.PENDING: "yellow",
    CIStatus.FAILURE: "red",
    CIStatus.UNKNOWN: "dim",
}


def label_config(ctx: click.Context) -> LabelConfiguration:
    """Validate the config loaded by the group; bad input is a usage error."""
    config = ctx.obj["config"] if ctx.obj else {}
    try:
        return LabelConfiguration.from_config(config)
    except ConfigurationError as e:
        raise click.UsageError(str(e))


def make_gateway(ctx: click.Context):
    from prlabel_core.gh.client import GitHubGateway

    token = ctx.obj.get("config", {}).get("github_token") if ctx.obj else None
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    return GitHubGateway(token)


def render_report(report: EventReport, dry_run: bool = False) -> None:
    if not report.verdicts and not report.failures:
        console.print(f"[yellow]Nothing to triage for {report.event_name} event.[/yellow]")
        return

    title = "Triage" + (" (dry run, labels not written)" if dry_run else "")
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("PR", style="bold", width=8)
    table.add_column("Todo", width=24)
    table.add_column("CI", width=9)
    table.add_column("Added")
    table.add_column("Removed")

    for verdict in report.verdicts:
        pr = verdict.pull_request
        patch = report.patches.get(pr.number)
        todo_style = _TODO_STYLE[verdict.todo]
        ci_style = _CI_STYLE[verdict.ci_status]
        table.add_row(
            f"#{pr.number}",
            f"[{todo_style}]{verdict.todo.value}[/{todo_style}]",
            f"[{ci_style}]{verdict.ci_status.value}[/{ci_style}]",
            ", ".join(patch.to_add) if patch else "",
            ", ".join(patch.to_remove) if patch else "",
        )
    for number, error in report.failures.items():
        table.add_row(f"#{number}", "[red]failed[/red]", "", "", str(error))

    console.print(table)


def check_outcome(report: EventReport, cfg: LabelConfiguration) -> None:
    """Fail the process when PRs errored or a required description is missing."""
    if report.failed:
        numbers = ", ".join(f"#{n}" for n in report.failures)
        raise click.ClickException(f"Could not update labels on {numbers}")

    missing = report.missing_description
    if missing and cfg.fail_on_missing_description:
        numbers = ", ".join(f"#{pr.number}" for pr in missing)
        raise click.ClickException(f"Pull request {numbers} is ready to merge but needs a description")
