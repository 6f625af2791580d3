"""Group artifacts that belong to the same logical build output."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from expo_sourcemaps.ingest.discover import ArtifactKind, classify_artifact

ArtifactGroups = dict[Path, list[Path]]

_TOKEN_SEPARATOR = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True, slots=True)
class GroupIdentity:
    """Structured description of one group used for platform correlation."""

    key: Path
    relative_key: str
    tokens: frozenset[str]
    kind: ArtifactKind | None
    has_sourcemap: bool


def group_key_for(path: Path) -> Path:
    """Sourcemaps group under their path minus the ``.map`` suffix; everything else under itself."""

    if classify_artifact(path.name) == "sourcemap":
        return path.with_suffix("")
    return path


def group_artifacts(paths: Iterable[Path]) -> ArtifactGroups:
    """Partition artifact paths into groups keyed by :func:`group_key_for`."""

    groups: ArtifactGroups = {}
    for path in paths:
        members = groups.setdefault(group_key_for(path), [])
        if path not in members:
            members.append(path)
    return groups


def relative_key_text(key: Path, root: Path) -> str:
    try:
        return key.relative_to(root).as_posix()
    except ValueError:
        return key.as_posix()


def path_tokens(text: str) -> frozenset[str]:
    """Split a path into lowercase alphanumeric tokens."""

    return frozenset(token for token in _TOKEN_SEPARATOR.split(text.lower()) if token)


def describe_group(key: Path, files: Sequence[Path], root: Path) -> GroupIdentity:
    relative_key = relative_key_text(key, root)
    kinds = [classify_artifact(path.name) for path in files]
    primary_kind = next((kind for kind in kinds if kind is not None and kind != "sourcemap"), None)
    return GroupIdentity(
        key=key,
        relative_key=relative_key,
        tokens=path_tokens(relative_key),
        kind=primary_kind,
        has_sourcemap="sourcemap" in kinds,
    )


def describe_groups(groups: Mapping[Path, Sequence[Path]], root: Path) -> list[GroupIdentity]:
    """Describe every group, ordered by key."""

    return [describe_group(key, groups[key], root) for key in sorted(groups)]
