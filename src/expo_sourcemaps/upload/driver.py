"""Invoke the upload tool once per staged group.

The scratch area is walked and grouped again so that each group is exactly
one staged update. Groups holding a Hermes bytecode file are uploaded in
debug-id reference mode; plain JS bundles are uploaded against the release
only. The first failing upload aborts the rest; groups already uploaded
stay uploaded.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Sequence

from expo_sourcemaps.config import AppSettings, SentryConfig
from expo_sourcemaps.errors import MissingRuntimeMappingError, UploadFailedError
from expo_sourcemaps.ingest.discover import classify_artifact, discover_artifacts
from expo_sourcemaps.ingest.grouping import group_artifacts, relative_key_text
from expo_sourcemaps.upload.credentials import SentryCredentials

LOGGER = logging.getLogger(__name__)

DEBUG_ID_FLAG = "--debug-id-reference"

CommandRunner = Callable[[Sequence[str], Mapping[str, str]], int]


@dataclass(frozen=True, slots=True)
class UploadResult:
    """One successful upload-tool invocation."""

    group_name: str
    release: str
    debug_id_reference: bool
    files: tuple[Path, ...]
    command: tuple[str, ...]


def build_upload_command(
    cli_path: str,
    release: str,
    files: Sequence[Path],
    *,
    debug_id_reference: bool,
) -> list[str]:
    command = [cli_path, "sourcemaps", "upload", "--release", release]
    if debug_id_reference:
        command.append(DEBUG_ID_FLAG)
    command.extend(str(path) for path in files)
    return command


def upload_environment(
    credentials: SentryCredentials,
    sentry: SentryConfig,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    env = dict(os.environ if base_env is None else base_env)
    env[sentry.project_env_var] = credentials.project
    env[sentry.auth_token_env_var] = credentials.auth_token
    return env


def run_upload_command(command: Sequence[str], env: Mapping[str, str]) -> int:
    """Run the upload tool with inherited stdio and return its exit code."""

    completed = subprocess.run(list(command), env=dict(env), check=False)
    return completed.returncode


def upload_staged_groups(
    scratch_dir: Path,
    runtime_by_group: Mapping[str, str],
    *,
    credentials: SentryCredentials,
    settings: AppSettings,
    runner: CommandRunner | None = None,
    logger: logging.Logger | None = None,
) -> list[UploadResult]:
    effective_logger = logger or LOGGER
    effective_runner = runner or run_upload_command

    groups = group_artifacts(discover_artifacts(scratch_dir, logger=effective_logger))
    env = upload_environment(credentials, settings.sentry)

    results: list[UploadResult] = []
    for key in sorted(groups):
        group_name = relative_key_text(key, scratch_dir)
        files = sorted(groups[key])
        debug_id_reference = any(classify_artifact(path.name) == "bytecode" for path in files)

        release = runtime_by_group.get(group_name)
        if release is None:
            raise MissingRuntimeMappingError(group_name)

        command = build_upload_command(
            settings.upload.cli_path,
            release,
            files,
            debug_id_reference=debug_id_reference,
        )
        effective_logger.info(
            "upload.group_start group=%s release=%s debug_id_reference=%s files=%s",
            group_name,
            release,
            debug_id_reference,
            len(files),
        )
        try:
            returncode = effective_runner(command, env)
        except OSError as exc:
            effective_logger.error("upload.group_failed group=%s error=%s", group_name, exc)
            raise UploadFailedError(group_name, None, str(exc)) from exc
        if returncode != 0:
            effective_logger.error("upload.group_failed group=%s returncode=%s", group_name, returncode)
            raise UploadFailedError(group_name, returncode)

        results.append(
            UploadResult(
                group_name=group_name,
                release=release,
                debug_id_reference=debug_id_reference,
                files=tuple(files),
                command=tuple(command),
            )
        )

    effective_logger.info("upload.done groups=%s", len(results))
    return results
