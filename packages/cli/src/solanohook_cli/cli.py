"""CLI entry point for solanohook.

Commands:
  patchset-created  — Gerrit hook: resolve the new patchset and trigger Solano CI
  resolve           — print the ref (and optionally the payload) for a patchset
  endpoints         — list the Solano endpoints configured per repository
"""

from __future__ import annotations

import importlib.metadata

import click

from solanohook_cli.commands.endpoints import endpoints_cmd
from solanohook_cli.commands.patchset_created import patchset_created_cmd
from solanohook_cli.commands.resolve import resolve_cmd
from solanohook_cli.settings import bootstrap


@click.group()
@click.version_option(
    version=importlib.metadata.version("solanohook"),
    prog_name="solanohook",
)
@click.option(
    "--config",
    "config_path",
    default=".solanohook.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="SOLANOHOOK_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output, including Gerrit queries.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Trigger Solano CI builds for new Gerrit patchsets."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = bootstrap(config_path, verbose=verbose)
    ctx.obj["verbose"] = verbose


main.add_command(patchset_created_cmd)
main.add_command(resolve_cmd)
main.add_command(endpoints_cmd)
