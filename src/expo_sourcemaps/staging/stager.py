"""Copy matched artifact groups into the scratch area under their staged names."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from types import TracebackType
from typing import Sequence

from expo_sourcemaps.errors import CopyFailedError
from expo_sourcemaps.ingest.discover import classify_artifact
from expo_sourcemaps.utils.paths import ensure_directories

LOGGER = logging.getLogger(__name__)

DEFAULT_SCRATCH_DIR_NAME = ".tmp"


def staged_file_name(source: Path, group_name: str) -> str:
    """Sourcemaps keep their suffix; every other artifact is named exactly like the group."""

    if classify_artifact(source.name) == "sourcemap":
        return f"{group_name}{source.suffix}"
    return group_name


def stage_group(
    scratch_dir: Path,
    files: Sequence[Path],
    group_name: str,
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Copy one group's files into scratch_dir and return the staged paths."""

    effective_logger = logger or LOGGER
    ensure_directories([scratch_dir])

    staged: list[Path] = []
    for source in files:
        destination = scratch_dir / staged_file_name(source, group_name)
        try:
            shutil.copyfile(source, destination)
        except OSError as exc:
            effective_logger.error(
                "stage.copy_failed source=%s destination=%s error=%s", source, destination, exc
            )
            raise CopyFailedError(source, destination, str(exc)) from exc
        staged.append(destination)

    effective_logger.info("stage.group_staged group=%s files=%s", group_name, len(staged))
    return staged


def remove_scratch_dir(scratch_dir: Path, logger: logging.Logger | None = None) -> bool:
    """Best-effort recursive delete. Returns True when something was removed.

    A symlinked scratch dir is unlinked; its target is left alone.
    """

    effective_logger = logger or LOGGER
    if not scratch_dir.exists() and not scratch_dir.is_symlink():
        return False
    try:
        if scratch_dir.is_symlink():
            scratch_dir.unlink()
        else:
            shutil.rmtree(scratch_dir)
    except OSError as exc:
        effective_logger.error("scratch.delete_failed path=%s error=%s", scratch_dir, exc)
        return False
    effective_logger.debug("scratch.deleted path=%s", scratch_dir)
    return True


class ScratchArea:
    """Fresh staging directory for one run.

    Entering deletes whatever a previous run left behind and recreates the
    directory. Leaving deletes it only when ``keep`` is false. Delete
    failures are logged and never raised.
    """

    def __init__(
        self,
        root: Path,
        name: str = DEFAULT_SCRATCH_DIR_NAME,
        *,
        keep: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        self.path = root / name
        self.keep = keep
        self._logger = logger or LOGGER

    def __enter__(self) -> Path:
        remove_scratch_dir(self.path, logger=self._logger)
        ensure_directories([self.path])
        return self.path

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self.keep:
            remove_scratch_dir(self.path, logger=self._logger)
