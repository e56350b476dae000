"""resolve command — look up the ref Gerrit holds for a patchset."""

from __future__ import annotations

import click
from rich.console import Console

from solanohook_cli.settings import get_hook_config
from solanohook_core.errors import SolanoHookError
from solanohook_core.gerrit.changes import RefResolver
from solanohook_core.solano.payload import build_payload

console = Console()


@click.command("resolve")
@click.option("--change", "change_id", required=True, help="Gerrit change id (Change-Id or number).")
@click.option("--patchset", "patchset_number", type=int, required=True, help="Patchset number.")
@click.option("--commit", "commit_sha", default=None, help="Also print the Solano payload for this commit.")
@click.pass_context
def resolve_cmd(ctx: click.Context, change_id: str, patchset_number: int, commit_sha: str | None):
    """Print the git ref of a change's patchset.

    Useful for checking Gerrit connectivity and the gerrit_prefix setting
    without triggering any build.
    """
    config = get_hook_config(ctx)
    resolver = RefResolver(config.gerrit_prefix, timeout=config.timeout)
    try:
        ref = resolver.resolve(change_id, patchset_number)
        payload = build_payload(ref, commit_sha) if commit_sha else None
    except SolanoHookError as e:
        raise click.ClickException(str(e))

    click.echo(ref)
    if payload is not None:
        console.print_json(payload.to_json())
