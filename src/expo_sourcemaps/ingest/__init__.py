"""Ingestion package for artifact discovery, grouping and the update manifest."""

from expo_sourcemaps.ingest.discover import (
    ARTIFACT_KIND_BY_SUFFIX,
    SOURCEMAP_SUFFIX,
    ArtifactKind,
    classify_artifact,
    discover_artifacts,
    is_artifact,
)
from expo_sourcemaps.ingest.grouping import (
    ArtifactGroups,
    GroupIdentity,
    describe_group,
    describe_groups,
    group_artifacts,
    group_key_for,
    path_tokens,
)
from expo_sourcemaps.ingest.manifest import (
    DEFAULT_MANIFEST_FILE,
    UpdateManifest,
    UpdateRecord,
    load_update_manifest,
    manifest_path_for,
)

__all__ = [
    "ARTIFACT_KIND_BY_SUFFIX",
    "SOURCEMAP_SUFFIX",
    "ArtifactKind",
    "classify_artifact",
    "is_artifact",
    "discover_artifacts",
    "ArtifactGroups",
    "GroupIdentity",
    "group_key_for",
    "group_artifacts",
    "path_tokens",
    "describe_group",
    "describe_groups",
    "DEFAULT_MANIFEST_FILE",
    "UpdateRecord",
    "UpdateManifest",
    "manifest_path_for",
    "load_update_manifest",
]
