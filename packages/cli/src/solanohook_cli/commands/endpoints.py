"""endpoints command — show which Solano endpoints each repository triggers."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from solanohook_cli.settings import get_hook_config

console = Console()


@click.command("endpoints")
@click.option("--project", default=None, help="Only show endpoints for this Gerrit project.")
@click.pass_context
def endpoints_cmd(ctx: click.Context, project: str | None):
    """List configured Solano endpoints by repository."""
    config = get_hook_config(ctx)

    endpoints = config.endpoints
    if project is not None:
        endpoints = {project: config.endpoints_for(project)} if project in endpoints else {}
    if not endpoints:
        console.print("[yellow]No Solano endpoints configured.[/yellow]")
        return

    table = Table(title=f"Solano endpoints — {config.gerrit_prefix}", show_header=True, header_style="bold cyan")
    table.add_column("Repository", style="bold")
    table.add_column("Endpoint")

    for repo in sorted(endpoints):
        for url in endpoints[repo]:
            table.add_row(repo, url)

    console.print(table)
