"""End-to-end orchestration: discover, group, correlate, stage, upload."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from expo_sourcemaps.config import AppSettings, ProjectConfig
from expo_sourcemaps.errors import ConfigurationError, DirectoryNotFoundError
from expo_sourcemaps.ingest.discover import discover_artifacts
from expo_sourcemaps.ingest.grouping import group_artifacts
from expo_sourcemaps.ingest.manifest import load_update_manifest, manifest_path_for
from expo_sourcemaps.staging.correlate import CorrelationResult, correlate_and_stage, correlate_updates
from expo_sourcemaps.staging.stager import ScratchArea
from expo_sourcemaps.upload.credentials import SentryCredentials
from expo_sourcemaps.upload.driver import CommandRunner, UploadResult, upload_staged_groups
from expo_sourcemaps.utils.paths import write_json_atomically
from expo_sourcemaps.utils.time_utils import now_utc

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UploadRunOptions:
    """Runtime options for one upload run."""

    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class UploadRunResult:
    """Return object for upload run outcomes."""

    run_id: str
    summary: dict[str, Any]
    summary_path: Path | None
    correlation: CorrelationResult
    uploads: list[UploadResult] = field(default_factory=list)


def _build_summary(
    *,
    run_id: str,
    project: ProjectConfig,
    started_ts: datetime,
    duration_sec: float,
    dry_run: bool,
    output_dir: Path,
    manifest_path: Path,
    scratch_dir: Path,
    artifacts_total: int,
    groups_total: int,
    updates_total: int,
    correlation: CorrelationResult,
    uploads: list[UploadResult],
) -> dict[str, Any]:
    return {
        "run_id": run_id,
        "project": project.name,
        "env": project.env,
        "started_ts": started_ts.isoformat(),
        "finished_ts": now_utc().isoformat(),
        "duration_sec": round(duration_sec, 3),
        "dry_run": dry_run,
        "output_dir": str(output_dir),
        "manifest_path": str(manifest_path),
        "scratch_dir": str(scratch_dir),
        "artifacts_discovered_total": artifacts_total,
        "groups_discovered_total": groups_total,
        "updates_total": updates_total,
        "updates_matched": len(correlation.matched),
        "unmatched_platforms": correlation.unmatched_platforms,
        "staged_groups": [
            {
                "group_name": item.group_name,
                "update_id": item.update.id,
                "platform": item.update.platform,
                "runtime_version": item.update.runtime_version,
                "source_group": str(item.source_key),
                "source_files": [str(path) for path in item.source_files],
            }
            for item in correlation.matched
        ],
        "uploads": [
            {
                "group_name": upload.group_name,
                "release": upload.release,
                "debug_id_reference": upload.debug_id_reference,
                "files": [str(path) for path in upload.files],
            }
            for upload in uploads
        ],
    }


def run_upload_pipeline(
    settings: AppSettings,
    *,
    output_dir: Path,
    credentials: SentryCredentials | None,
    options: UploadRunOptions | None = None,
    runner: CommandRunner | None = None,
    logger: logging.Logger | None = None,
) -> UploadRunResult:
    """Upload every update's bundle and sourcemap found in an export directory.

    A dry run walks, groups and correlates but leaves the scratch area alone
    and never calls the upload tool.
    """

    effective_logger = logger or LOGGER
    run_options = options or UploadRunOptions()
    if not output_dir.is_dir():
        effective_logger.error("upload_run.output_dir_missing output_dir=%s", output_dir)
        raise DirectoryNotFoundError(output_dir)

    run_id = f"upload-run-{uuid4().hex[:12]}"
    started_ts = now_utc()
    started_mono = time.monotonic()

    upload_settings = settings.upload
    scratch_dir = output_dir / upload_settings.scratch_dir_name
    manifest_path = manifest_path_for(output_dir, upload_settings.manifest_file_name)
    effective_logger.info(
        "upload_run.start run_id=%s project=%s env=%s output_dir=%s dry_run=%s",
        run_id,
        settings.project.name,
        settings.project.env,
        output_dir,
        run_options.dry_run,
    )

    uploads: list[UploadResult] = []
    if run_options.dry_run:
        artifacts = discover_artifacts(output_dir, exclude=[scratch_dir], logger=effective_logger)
        groups = group_artifacts(artifacts)
        manifest = load_update_manifest(manifest_path)
        correlation = correlate_updates(groups, manifest.updates, root=output_dir, logger=effective_logger)
    else:
        if credentials is None:
            raise ConfigurationError("Sentry credentials are required unless running with --dry-run.")
        with ScratchArea(
            output_dir,
            upload_settings.scratch_dir_name,
            keep=upload_settings.keep_scratch,
            logger=effective_logger,
        ) as scratch:
            artifacts = discover_artifacts(output_dir, exclude=[scratch], logger=effective_logger)
            groups = group_artifacts(artifacts)
            manifest = load_update_manifest(manifest_path)
            correlation = correlate_and_stage(
                groups,
                manifest.updates,
                root=output_dir,
                scratch_dir=scratch,
                logger=effective_logger,
            )
            uploads = upload_staged_groups(
                scratch,
                correlation.runtime_by_group,
                credentials=credentials,
                settings=settings,
                runner=runner,
                logger=effective_logger,
            )

    duration_sec = time.monotonic() - started_mono
    summary = _build_summary(
        run_id=run_id,
        project=settings.project,
        started_ts=started_ts,
        duration_sec=duration_sec,
        dry_run=run_options.dry_run,
        output_dir=output_dir,
        manifest_path=manifest_path,
        scratch_dir=scratch_dir,
        artifacts_total=len(artifacts),
        groups_total=len(groups),
        updates_total=len(manifest.updates),
        correlation=correlation,
        uploads=uploads,
    )

    summary_path: Path | None = None
    if upload_settings.write_summary:
        summary_path = write_json_atomically(
            summary,
            settings.paths.summaries_root / f"{run_id}_upload_summary.json",
        )

    effective_logger.info(
        "upload_run.finish run_id=%s groups=%s matched=%s unmatched=%s uploaded=%s elapsed_sec=%.2f",
        run_id,
        len(groups),
        len(correlation.matched),
        len(correlation.unmatched),
        len(uploads),
        duration_sec,
    )
    return UploadRunResult(
        run_id=run_id,
        summary=summary,
        summary_path=summary_path,
        correlation=correlation,
        uploads=uploads,
    )
