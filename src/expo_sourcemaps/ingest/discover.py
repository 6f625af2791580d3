"""Discover bundle, sourcemap and Hermes bytecode files in an export directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Literal

from expo_sourcemaps.errors import DirectoryNotFoundError

LOGGER = logging.getLogger(__name__)

ArtifactKind = Literal["sourcemap", "bundle", "bytecode"]

SOURCEMAP_SUFFIX = ".map"
ARTIFACT_KIND_BY_SUFFIX: dict[str, ArtifactKind] = {
    SOURCEMAP_SUFFIX: "sourcemap",
    ".js": "bundle",
    ".bundle": "bundle",
    ".jsbundle": "bundle",
    ".hbc": "bytecode",
}


def classify_artifact(name: str | Path) -> ArtifactKind | None:
    """Return the artifact kind for a file name, or None when it is not an artifact."""

    return ARTIFACT_KIND_BY_SUFFIX.get(Path(name).suffix.lower())


def is_artifact(name: str | Path) -> bool:
    return classify_artifact(name) is not None


def discover_artifacts(
    root: Path,
    *,
    exclude: Iterable[Path] = (),
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Recursively collect artifact files under root.

    Symlinked directories are not descended into. Directories in ``exclude``
    are pruned from the walk. The result is sorted and free of duplicates.
    """

    effective_logger = logger or LOGGER
    if not root.is_dir() or not os.access(root, os.R_OK | os.X_OK):
        effective_logger.error("discover.root_missing root=%s", root)
        raise DirectoryNotFoundError(root)

    excluded = {path.resolve(strict=False) for path in exclude}
    found: set[Path] = set()
    for dir_path, dir_names, file_names in os.walk(root):
        current = Path(dir_path)
        dir_names[:] = [
            name for name in dir_names if (current / name).resolve(strict=False) not in excluded
        ]
        for file_name in file_names:
            file_path = current / file_name
            if is_artifact(file_name) and file_path.is_file():
                found.add(file_path)

    effective_logger.debug("discover.done root=%s artifacts=%s", root, len(found))
    return sorted(found)
