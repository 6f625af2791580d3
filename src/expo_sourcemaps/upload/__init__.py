"""Credential resolution and upload-tool invocation."""

from expo_sourcemaps.upload.credentials import (
    SentryCredentials,
    find_plugin_config,
    load_expo_sentry_plugin_config,
    resolve_credentials,
)
from expo_sourcemaps.upload.driver import (
    DEBUG_ID_FLAG,
    UploadResult,
    build_upload_command,
    run_upload_command,
    upload_environment,
    upload_staged_groups,
)

__all__ = [
    "SentryCredentials",
    "find_plugin_config",
    "load_expo_sentry_plugin_config",
    "resolve_credentials",
    "DEBUG_ID_FLAG",
    "UploadResult",
    "build_upload_command",
    "run_upload_command",
    "upload_environment",
    "upload_staged_groups",
]
