"""CLI entry point for prlabel.

Commands:
  run     triage the pull request(s) behind the current GitHub Actions event
  triage  triage one pull request by number
  init    write a starter .prlabel.yml and GitHub Actions workflow
"""

from __future__ import annotations

import click

from prlabel_cli.commands.init import init_cmd
from prlabel_cli.commands.run import run_cmd
from prlabel_cli.commands.triage import triage_cmd


@click.group()
@click.version_option(package_name="prlabel", prog_name="prlabel")
@click.option(
    "--config",
    "config_path",
    default=".prlabel.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRLABEL_CONFIG",
)
@click.option(
    "--required-checks",
    default=None,
    help="Comma-separated check names that decide the CI status (overrides the config file).",
)
@click.option(
    "--allow-merge-without-review",
    type=click.BOOL,
    default=None,
    help="Whether an unreviewed PR can be ready to merge (overrides the config file).",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug output.")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: str,
    required_checks: str | None,
    allow_merge_without_review: bool | None,
    verbose: bool,
):
    """Keep pull request triage labels in sync with review and CI state."""
    from prlabel_core.config import load_config
    from prlabel_core.errors import ConfigurationError
    from prlabel_cli.auth import resolve_github_token
    from prlabel_cli.logs import setup_logging

    setup_logging(verbose)
    ctx.ensure_object(dict)

    try:
        config = load_config(
            config_path,
            cli_overrides={
                "required_checks": required_checks,
                "allow_merge_without_review": allow_merge_without_review,
            },
        )
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    # Only fall back to the gh CLI when the environment has no token.
    if not config.get("github_token"):
        config["github_token"] = resolve_github_token()

    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path


main.add_command(run_cmd)
main.add_command(triage_cmd)
main.add_command(init_cmd)
