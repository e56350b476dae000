import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Optional

import httpx
import yaml

from solanohook_core.errors import ConfigError

DEFAULT_CONFIG: dict = {
    "gerrit_prefix": "http://localhost:8080",
    "endpoints": {},  # repository (Gerrit project) name -> list of Solano webhook URLs
    "syslog": True,
    "syslog_address": "/dev/log",
    "timeout": 10,  # seconds, applied to the Gerrit query and to every Solano POST
    "ca_bundle": None,  # None = system trust store; set to a PEM path to override
}


def load_config(config_path: str = ".solanohook.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .solanohook.yml (or the given path)
      3. CLI argument overrides
      4. SOLANOHOOK_GERRIT_PREFIX from the environment
    """
    config = {**DEFAULT_CONFIG, "endpoints": dict(DEFAULT_CONFIG["endpoints"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a YAML mapping")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    gerrit_prefix = os.environ.get("SOLANOHOOK_GERRIT_PREFIX")
    if gerrit_prefix:
        config["gerrit_prefix"] = gerrit_prefix

    return config


def _check_endpoint_url(repo, url) -> None:
    if not isinstance(url, str):
        raise ConfigError(f"Solano endpoint for {repo!r} must be an https:// URL, got {url!r}")
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ConfigError(f"Solano endpoint for {repo!r} is not a valid URL ({e}): {url!r}") from e
    if parsed.scheme != "https" or not parsed.host:
        raise ConfigError(f"Solano endpoint for {repo!r} must be an https:// URL, got {url!r}")


def _normalize_endpoints(raw) -> Mapping[str, tuple[str, ...]]:
    if raw is None:
        return MappingProxyType({})
    if not isinstance(raw, dict):
        raise ConfigError("endpoints must map repository names to Solano webhook URLs")

    endpoints: dict[str, tuple[str, ...]] = {}
    for repo, urls in raw.items():
        if isinstance(urls, str):
            urls = [urls]
        if not isinstance(urls, list):
            raise ConfigError(f"endpoints for {repo!r} must be a URL or a list of URLs")
        for url in urls:
            _check_endpoint_url(repo, url)
        endpoints[str(repo)] = tuple(urls)
    return MappingProxyType(endpoints)


@dataclass(frozen=True)
class HookConfig:
    """Validated, read-only view of the merged configuration dict.

    Built once per process by the CLI and passed down to the resolver and
    dispatcher, so nothing in the pipeline can mutate settings mid-run.
    """

    gerrit_prefix: str = DEFAULT_CONFIG["gerrit_prefix"]
    endpoints: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    syslog: bool = DEFAULT_CONFIG["syslog"]
    syslog_address: str = DEFAULT_CONFIG["syslog_address"]
    timeout: float = DEFAULT_CONFIG["timeout"]
    ca_bundle: Optional[str] = None

    @classmethod
    def from_dict(cls, config: dict) -> "HookConfig":
        gerrit_prefix = config.get("gerrit_prefix") or DEFAULT_CONFIG["gerrit_prefix"]
        if not isinstance(gerrit_prefix, str):
            raise ConfigError("gerrit_prefix must be a URL string")

        try:
            timeout = float(config.get("timeout", DEFAULT_CONFIG["timeout"]))
        except (TypeError, ValueError):
            raise ConfigError(f"timeout must be a number, got {config.get('timeout')!r}")
        if timeout <= 0:
            raise ConfigError("timeout must be greater than zero")

        syslog = config.get("syslog", DEFAULT_CONFIG["syslog"])
        if not isinstance(syslog, bool):
            raise ConfigError(f"syslog must be true or false, got {syslog!r}")

        return cls(
            gerrit_prefix=gerrit_prefix.rstrip("/"),
            endpoints=_normalize_endpoints(config.get("endpoints")),
            syslog=syslog,
            syslog_address=config.get("syslog_address") or DEFAULT_CONFIG["syslog_address"],
            timeout=timeout,
            ca_bundle=config.get("ca_bundle"),
        )

    def endpoints_for(self, repository_name: str) -> tuple[str, ...]:
        """Return the Solano endpoints configured for a repository, or ()."""
        return self.endpoints.get(repository_name, ())
