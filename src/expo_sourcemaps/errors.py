"""Exception hierarchy for the sourcemap upload pipeline."""

from __future__ import annotations

from pathlib import Path


class ExpoSourcemapsError(Exception):
    """Base class for every fatal pipeline error."""


class ConfigurationError(ExpoSourcemapsError):
    """Missing output directory, project or auth token."""


class DirectoryNotFoundError(ExpoSourcemapsError):
    """A directory to walk does not exist or cannot be read."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Directory {path} does not exist or is not readable.")
        self.path = path


class ManifestError(ExpoSourcemapsError):
    """The update metadata manifest cannot be used."""


class ManifestMissingError(ManifestError):
    def __init__(self, path: Path) -> None:
        super().__init__(
            f'The file "{path}" does not exist. '
            "Ensure the export was produced with an eas-cli version that writes update metadata."
        )
        self.path = path


class ManifestMalformedError(ManifestError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f'The file "{path}" is not a valid update metadata manifest: {reason}')
        self.path = path
        self.reason = reason


class CopyFailedError(ExpoSourcemapsError):
    """Copying an artifact into the scratch area failed."""

    def __init__(self, source: Path, destination: Path, reason: str) -> None:
        super().__init__(f"Failed to copy {source} to {destination}: {reason}")
        self.source = source
        self.destination = destination


class MissingRuntimeMappingError(ExpoSourcemapsError):
    """A staged group has no runtime version recorded for it."""

    def __init__(self, group_name: str) -> None:
        super().__init__(f"No runtime version recorded for staged group {group_name!r}.")
        self.group_name = group_name


class UploadFailedError(ExpoSourcemapsError):
    """The upload tool failed for one group; remaining groups are not uploaded."""

    def __init__(self, group_name: str, returncode: int | None, reason: str | None = None) -> None:
        detail = reason if reason is not None else f"exit code {returncode}"
        super().__init__(f"Uploading {group_name} failed ({detail}).")
        self.group_name = group_name
        self.returncode = returncode
