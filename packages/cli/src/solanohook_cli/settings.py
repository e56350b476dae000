"""Configuration bootstrap shared by the group and the standalone hook script.

Gerrit invokes ``patchset-created`` directly, without the ``solanohook``
group, so each command must be able to load configuration on its own. When
the group has already loaded it, the command reuses that copy unless its
own --config was given on the command line.
"""

from __future__ import annotations

import click
from click.core import ParameterSource

from solanohook_cli.logs import configure_logging
from solanohook_core.config import HookConfig, load_config
from solanohook_core.errors import ConfigError

DEFAULT_CONFIG_PATH = ".solanohook.yml"


def bootstrap(config_path: str | None = None, verbose: bool = False) -> HookConfig:
    """Load, validate and freeze configuration, then set up logging."""
    try:
        config = HookConfig.from_dict(load_config(config_path or DEFAULT_CONFIG_PATH))
    except ConfigError as e:
        raise click.ClickException(str(e))
    configure_logging(syslog=config.syslog, syslog_address=config.syslog_address, verbose=verbose)
    return config


def get_hook_config(ctx: click.Context, config_path: str | None = None, verbose: bool = False) -> HookConfig:
    obj = ctx.find_object(dict) or {}
    if "config" in obj:
        # SOLANOHOOK_CONFIG already fed the group option; only an explicit
        # subcommand --config replaces the group's config.
        if config_path is None or ctx.get_parameter_source("config_path") is not ParameterSource.COMMANDLINE:
            return obj["config"]
    return bootstrap(config_path, verbose=verbose or obj.get("verbose", False))
