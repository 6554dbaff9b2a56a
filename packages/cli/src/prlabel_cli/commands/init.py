"""init command: write a starter .prlabel.yml and GitHub Actions workflow."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import click
import yaml
from rich.console import Console

from prlabel_core.config import DEFAULT_CONFIG

console = Console()

_WORKFLOW_TEMPLATE = """\
name: PR Triage Labels

on:
  pull_request:
    types: [opened, reopened, synchronize, edited, ready_for_review, converted_to_draft, review_requested, review_request_removed]
  pull_request_review:
    types: [submitted, dismissed]
  status:

jobs:
  triage:
    runs-on: ubuntu-latest
    permissions:
      contents: read
      pull-requests: write
      issues: write
      statuses: read

    steps:
      - uses: actions/checkout@v4

      - name: Set up Python
        uses: actions/setup-python@v5
        with:
          python-version: "3.12"

      - name: Install prlabel
        run: pip install "prlabel=={version}"

      - name: Update triage labels
        env:
          GITHUB_TOKEN: ${{{{ secrets.GITHUB_TOKEN }}}}
        run: prlabel run
"""


@click.command("init")
@click.option("--yes", "-y", is_flag=True, help="Accept the defaults without prompting.")
@click.pass_context
def init_cmd(ctx, yes: bool):
    """Set up prlabel for a repository.

    Creates .prlabel.yml with the label names to manage and optionally
    generates a GitHub Actions workflow that runs `prlabel run`.
    """
    config_path = Path(ctx.obj.get("config_path", ".prlabel.yml") if ctx.obj else ".prlabel.yml")
    console.print("\n[bold cyan]prlabel init[/bold cyan] repository setup\n")

    def ask(text: str, key: str) -> str:
        default = DEFAULT_CONFIG[key]
        if yes:
            return default
        return click.prompt(text, default=default, show_default=True)

    config: dict = {
        "waiting_for_review": ask("Labels for PRs waiting on review", "waiting_for_review"),
        "ready_for_merge": ask("Labels for PRs ready to merge", "ready_for_merge"),
        "waiting_for_author": ask("Labels for PRs waiting on the author", "waiting_for_author"),
    }

    ci_passed = "" if yes else click.prompt("Label for PRs whose CI passed (blank for none)", default="")
    if ci_passed:
        config["ci_passed"] = ci_passed

    config["requires_description"] = False if yes else click.confirm("Require a PR description?", default=False)
    config["requires_review"] = True if yes else click.confirm("Require at least one review?", default=True)

    _write_config(config_path, config)
    console.print(f"[green]Created {config_path}[/green]")

    setup_ci = yes or click.confirm("\nGenerate .github/workflows/prlabel.yml for GitHub Actions?", default=True)
    if setup_ci:
        _write_workflow()
        console.print("[green]Created .github/workflows/prlabel.yml[/green]")

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Try it locally with: [bold]prlabel triage --repo <owner/name> --pr <number> --dry-run[/bold]")


def _write_config(path: Path, config: dict) -> None:
    """Write or update the config file, preserving any existing keys."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))


def _get_version() -> str:
    try:
        return version("prlabel")
    except PackageNotFoundError:
        return "0.1.0"


def _write_workflow() -> None:
    workflow_dir = Path(".github/workflows")
    workflow_dir.mkdir(parents=True, exist_ok=True)
    (workflow_dir / "prlabel.yml").write_text(_WORKFLOW_TEMPLATE.format(version=_get_version()))
