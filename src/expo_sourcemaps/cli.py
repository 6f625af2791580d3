"""Typer CLI entrypoint for expo_sourcemaps."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
import yaml

from expo_sourcemaps.config import AppSettings, load_settings
from expo_sourcemaps.errors import ExpoSourcemapsError
from expo_sourcemaps.logging_utils import configure_logging
from expo_sourcemaps.pipeline import UploadRunOptions, run_upload_pipeline
from expo_sourcemaps.upload.credentials import resolve_credentials

app = typer.Typer(
    add_completion=False,
    help="Upload Expo update bundles and sourcemaps to Sentry.",
    no_args_is_help=True,
)

SUCCESS_MESSAGE = "✅ Uploaded sourcemaps to Sentry successfully."
LOG_FILE_NAME = "expo_sourcemaps.log"


def _load_and_optionally_configure_logger(
    config_file: Path | None,
    configure: bool,
    verbose: bool = False,
) -> tuple[AppSettings, logging.Logger]:
    settings = load_settings(config_file=config_file)
    if configure:
        level = logging.DEBUG if verbose else logging.INFO
        logger = configure_logging(None, level=level)
    else:
        logger = logging.getLogger("expo_sourcemaps")
    return settings, logger


@app.command("show-config")
def show_config(
    config_file: Path | None = typer.Option(
        None,
        "--config-file",
        help="Optional settings YAML path.",
        exists=False,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """Print the effective configuration after env overrides."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    rendered = yaml.safe_dump(settings.as_dict(), sort_keys=False)
    typer.echo(rendered)


@app.command("upload")
def upload(
    output_dir: Path | None = typer.Argument(
        None,
        help="Directory with your bundles, sourcemaps and eas-update-metadata.json.",
        file_okay=False,
        dir_okay=True,
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Discover, group and correlate without staging or uploading.",
    ),
    project_root: Path | None = typer.Option(
        None,
        "--project-root",
        help="Directory to run `expo config` in when the project is not set in the environment.",
        file_okay=False,
        dir_okay=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log at DEBUG level.",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config-file",
        help="Optional settings YAML path.",
        exists=False,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """Stage every update's bundle and sourcemap and upload them with sentry-cli."""

    if output_dir is None:
        typer.echo("Provide the directory with your bundles and sourcemaps as the first argument.", err=True)
        typer.echo("Example: expo-sourcemaps upload dist", err=True)
        raise typer.Exit(code=1)

    # Console only until credentials resolve.
    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True, verbose=verbose)
    try:
        credentials = None
        if not dry_run:
            credentials = resolve_credentials(settings.sentry, project_root=project_root, logger=logger)
    except ExpoSourcemapsError as exc:
        logger.error("upload.aborted output_dir=%s error=%s", output_dir, exc)
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    logger = configure_logging(
        settings.paths.logs_root / LOG_FILE_NAME,
        level=logging.DEBUG if verbose else logging.INFO,
    )
    try:
        result = run_upload_pipeline(
            settings,
            output_dir=output_dir,
            credentials=credentials,
            options=UploadRunOptions(dry_run=dry_run),
            logger=logger,
        )
    except ExpoSourcemapsError as exc:
        logger.error("upload.aborted output_dir=%s error=%s", output_dir, exc)
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    summary = result.summary
    typer.echo(f"run_id: {summary['run_id']}")
    typer.echo(f"artifacts_discovered_total: {summary['artifacts_discovered_total']}")
    typer.echo(f"groups_discovered_total: {summary['groups_discovered_total']}")
    typer.echo(f"updates_total: {summary['updates_total']}")
    typer.echo(f"updates_matched: {summary['updates_matched']}")
    typer.echo(f"unmatched_platforms: {', '.join(summary['unmatched_platforms']) or 'none'}")
    for staged in summary["staged_groups"]:
        typer.echo(f"staged: {staged['group_name']} release={staged['runtime_version']} source={staged['source_group']}")
    typer.echo(f"summary_path: {result.summary_path if result.summary_path else 'none'}")
    if dry_run:
        typer.echo("Dry run: nothing was staged or uploaded.")
    else:
        typer.echo(SUCCESS_MESSAGE)


def main() -> None:
    """CLI script entrypoint."""

    app()


if __name__ == "__main__":
    main()
