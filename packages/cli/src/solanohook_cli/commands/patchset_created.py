"""patchset-created command — the Gerrit hook itself.

Gerrit's hooks plugin calls the hook with a long, version-dependent list of
options (--change-url, --change-owner, --uploader, --kind, ...). Only the
four needed to trigger Solano are declared; everything else is accepted
and ignored so a Gerrit upgrade never breaks the hook.
"""

from __future__ import annotations

import logging

import click
from rich.console import Console

from solanohook_cli.settings import get_hook_config
from solanohook_core.errors import SolanoHookError
from solanohook_core.hook import PatchsetEvent, handle_patchset_created

console = Console()
logger = logging.getLogger(__name__)

EXIT_ALL_DELIVERIES_FAILED = 2


@click.command(
    "patchset-created",
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
@click.option("--change", "change_id", required=True, help="Gerrit change id (Change-Id or number).")
@click.option("--project", required=True, help="Gerrit project; selects the Solano endpoints.")
@click.option("--commit", "commit_sha", required=True, help="Commit SHA of the new patchset.")
@click.option("--patchset", "patchset_number", type=int, required=True, help="Patchset number.")
@click.option("--dry-run", is_flag=True, help="Resolve and print the payload without posting to Solano.")
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Path to the configuration file.  [default: .solanohook.yml]",
    envvar="SOLANOHOOK_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output.")
@click.pass_context
def patchset_created_cmd(
    ctx: click.Context,
    change_id: str,
    project: str,
    commit_sha: str,
    patchset_number: int,
    dry_run: bool,
    config_path: str | None,
    verbose: bool,
):
    """Trigger Solano CI for a newly uploaded Gerrit patchset."""
    config = get_hook_config(ctx, config_path, verbose=verbose)
    if ctx.args:
        logger.debug("Ignoring Gerrit hook arguments: %s", " ".join(ctx.args))

    event = PatchsetEvent(
        change_id=change_id,
        patchset_number=patchset_number,
        commit_sha=commit_sha,
        repository_name=project,
    )
    try:
        summary = handle_patchset_created(event, config, dry_run=dry_run)
    except SolanoHookError as e:
        logger.error("patchset-created failed for change %s: %s", change_id, e)
        raise click.ClickException(str(e))

    if summary.payload is None:
        console.print(f"[yellow]No Solano endpoints configured for {project}. Nothing to do.[/yellow]")
        return

    if dry_run:
        console.print(f"[bold]Payload for {summary.ref}:[/bold]")
        console.print_json(summary.payload.to_json())
        for endpoint in summary.endpoints:
            console.print(f"  would POST to {endpoint}")
        return

    for outcome in summary.outcomes:
        if outcome.ok:
            console.print(f"[green]{outcome.endpoint}: {outcome.status_code}[/green]")
        else:
            console.print(f"[red]{outcome.endpoint}: {outcome.error}[/red]")

    if summary.all_failed:
        ctx.exit(EXIT_ALL_DELIVERIES_FAILED)
