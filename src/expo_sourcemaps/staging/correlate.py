"""Match update records from the manifest to artifact groups.

Each update names a platform. The group for that platform is found through
the group's path tokens (``dist/_expo/static/js/android/entry-1a2b.hbc``
carries the token ``android``); plain substring matching is only the
fallback when no token matches. Matched groups get a staged name of the
form ``<platform>-update-id-<id><ext>`` so that two updates never collide,
even for the same platform.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from expo_sourcemaps.ingest.grouping import ArtifactGroups, GroupIdentity, describe_groups
from expo_sourcemaps.ingest.manifest import UpdateRecord
from expo_sourcemaps.staging.stager import stage_group

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CorrelatedUpdate:
    """An update record paired with the source group it will upload."""

    update: UpdateRecord
    source_key: Path
    source_files: tuple[Path, ...]
    group_name: str


@dataclass(slots=True)
class CorrelationResult:
    matched: list[CorrelatedUpdate] = field(default_factory=list)
    unmatched: list[UpdateRecord] = field(default_factory=list)
    runtime_by_group: dict[str, str] = field(default_factory=dict)

    @property
    def unmatched_platforms(self) -> list[str]:
        return [update.platform for update in self.unmatched]


def staged_group_name(platform: str, update_id: str, source_key: Path) -> str:
    return f"{platform}-update-id-{update_id}{source_key.suffix}"


def find_group_for_platform(
    identities: Sequence[GroupIdentity],
    platform: str,
    logger: logging.Logger | None = None,
) -> GroupIdentity | None:
    """Pick the group for a platform.

    Exact path-token matches win over substring matches. Among several
    candidates, groups with a sourcemap come first, then the lowest key.
    """

    effective_logger = logger or LOGGER
    needle = platform.strip().lower()
    if not needle:
        return None

    candidates = [identity for identity in identities if needle in identity.tokens]
    match_mode = "token"
    if not candidates:
        candidates = [identity for identity in identities if needle in identity.relative_key.lower()]
        match_mode = "substring"
    if not candidates:
        return None

    ordered = sorted(candidates, key=lambda identity: (not identity.has_sourcemap, identity.relative_key))
    chosen = ordered[0]
    if len(ordered) > 1:
        effective_logger.warning(
            "correlate.ambiguous_platform platform=%s mode=%s chosen=%s candidates=%s",
            platform,
            match_mode,
            chosen.relative_key,
            [identity.relative_key for identity in ordered],
        )
    else:
        effective_logger.debug(
            "correlate.platform_matched platform=%s mode=%s group=%s", platform, match_mode, chosen.relative_key
        )
    return chosen


def correlate_updates(
    groups: ArtifactGroups,
    updates: Sequence[UpdateRecord],
    *,
    root: Path,
    logger: logging.Logger | None = None,
) -> CorrelationResult:
    """Pair every update with a group; unmatched updates are logged and skipped."""

    effective_logger = logger or LOGGER
    identities = describe_groups(groups, root)
    result = CorrelationResult()

    for update in updates:
        identity = find_group_for_platform(identities, update.platform, logger=effective_logger)
        if identity is None:
            effective_logger.warning(
                "correlate.no_match platform=%s update_id=%s: could not find code assets for %s",
                update.platform,
                update.id,
                update.platform,
            )
            result.unmatched.append(update)
            continue

        group_name = staged_group_name(update.platform, update.id, identity.key)
        if group_name in result.runtime_by_group:
            effective_logger.warning(
                "correlate.duplicate_group_name group=%s update_id=%s", group_name, update.id
            )
        result.runtime_by_group[group_name] = update.runtime_version
        result.matched.append(
            CorrelatedUpdate(
                update=update,
                source_key=identity.key,
                source_files=tuple(groups[identity.key]),
                group_name=group_name,
            )
        )

    effective_logger.info(
        "correlate.done updates=%s matched=%s unmatched=%s",
        len(updates),
        len(result.matched),
        len(result.unmatched),
    )
    return result


def correlate_and_stage(
    groups: ArtifactGroups,
    updates: Sequence[UpdateRecord],
    *,
    root: Path,
    scratch_dir: Path,
    logger: logging.Logger | None = None,
) -> CorrelationResult:
    """Correlate updates, then copy each matched group into the scratch area."""

    effective_logger = logger or LOGGER
    result = correlate_updates(groups, updates, root=root, logger=effective_logger)
    for correlated in result.matched:
        stage_group(scratch_dir, correlated.source_files, correlated.group_name, logger=effective_logger)
    return result
