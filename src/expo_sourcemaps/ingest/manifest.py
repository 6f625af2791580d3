"""Read the EAS update metadata manifest written next to an export."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from expo_sourcemaps.errors import ManifestMalformedError, ManifestMissingError

DEFAULT_MANIFEST_FILE = "eas-update-metadata.json"


class UpdateRecord(BaseModel):
    """One platform-specific update from the manifest."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    platform: str
    runtime_version: str = Field(alias="runtimeVersion")


class UpdateManifest(BaseModel):
    """Top-level manifest payload: ``{"updates": [...]}``."""

    model_config = ConfigDict(extra="ignore")

    updates: list[UpdateRecord]


def manifest_path_for(root: Path, file_name: str = DEFAULT_MANIFEST_FILE) -> Path:
    return root / file_name


def _describe_validation_error(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors()[:3]:
        location = ".".join(str(item) for item in error["loc"]) or "<root>"
        parts.append(f"{location}: {error['msg']}")
    if exc.error_count() > 3:
        parts.append(f"... {exc.error_count() - 3} more")
    return "; ".join(parts)


def load_update_manifest(path: Path) -> UpdateManifest:
    """Load and shape-check the manifest.

    Raises ManifestMissingError when the file is absent and
    ManifestMalformedError when it is not JSON of the expected shape.
    Numeric values are read as strings; nothing else is checked.
    """

    if not path.is_file():
        raise ManifestMissingError(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestMalformedError(path, str(exc)) from exc
    try:
        return UpdateManifest.model_validate_json(raw)
    except ValidationError as exc:
        raise ManifestMalformedError(path, _describe_validation_error(exc)) from exc
