"""Resolve the Sentry project and auth token for the upload tool."""

from __future__ import annotations

import json
import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

from expo_sourcemaps.config import SentryConfig
from expo_sourcemaps.errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

ExpoConfigLoader = Callable[[], dict[str, Any] | None]


@dataclass(frozen=True, slots=True)
class SentryCredentials:
    project: str
    auth_token: str = field(repr=False)


def find_plugin_config(config: Any, plugin_name: str) -> dict[str, Any] | None:
    """Return the options of ``[plugin_name, {...}]`` from an Expo config's plugin list."""

    if not isinstance(config, dict):
        return None
    plugins = config.get("plugins")
    if not isinstance(plugins, list):
        return None
    for plugin in plugins:
        if not isinstance(plugin, list) or len(plugin) < 2:
            continue
        name, options = plugin[0], plugin[1]
        if name == plugin_name:
            return options if isinstance(options, dict) else None
    return None


def load_expo_sentry_plugin_config(
    command: Sequence[str],
    plugin_name: str,
    *,
    cwd: Path | None = None,
    logger: logging.Logger | None = None,
) -> dict[str, Any] | None:
    """Run ``expo config --json`` and pull out the Sentry plugin options.

    Any failure (command missing, non-zero exit, bad JSON) is logged and
    reported as None.
    """

    effective_logger = logger or LOGGER
    try:
        completed = subprocess.run(
            list(command),
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        effective_logger.error("credentials.expo_config_failed command=%s error=%s", " ".join(command), exc)
        return None

    try:
        config = json.loads(completed.stdout)
    except json.JSONDecodeError as exc:
        effective_logger.error("credentials.expo_config_invalid_json command=%s error=%s", " ".join(command), exc)
        return None
    return find_plugin_config(config, plugin_name)


def resolve_credentials(
    settings: SentryConfig,
    *,
    environ: Mapping[str, str] | None = None,
    expo_config_loader: ExpoConfigLoader | None = None,
    project_root: Path | None = None,
    logger: logging.Logger | None = None,
) -> SentryCredentials:
    """Read the auth token from the environment and the project from env or Expo config."""

    effective_logger = logger or LOGGER
    env = os.environ if environ is None else environ

    auth_token = env.get(settings.auth_token_env_var)
    if not auth_token:
        raise ConfigurationError(f"{settings.auth_token_env_var} environment variable must be set.")

    project = env.get(settings.project_env_var)
    if project:
        return SentryCredentials(project=project, auth_token=auth_token)

    effective_logger.info("credentials.fetch_project_from_expo_config env_var=%s", settings.project_env_var)
    if expo_config_loader is None:
        plugin_config = load_expo_sentry_plugin_config(
            settings.expo_config_command,
            settings.plugin_name,
            cwd=project_root,
            logger=effective_logger,
        )
    else:
        plugin_config = expo_config_loader()

    if plugin_config is None:
        raise ConfigurationError(f"Could not fetch '{settings.plugin_name}' plugin properties from expo config.")
    project = plugin_config.get("project")
    if not isinstance(project, str) or not project:
        raise ConfigurationError(
            f"{settings.project_env_var} is not set and the '{settings.plugin_name}' plugin "
            "in expo config has no 'project' option."
        )

    effective_logger.info(
        "credentials.project_resolved env_var=%s project=%s source=expo_config", settings.project_env_var, project
    )
    return SentryCredentials(project=project, auth_token=auth_token)
