"""Correlation of updates with artifact groups and scratch-area staging."""

from expo_sourcemaps.staging.correlate import (
    CorrelatedUpdate,
    CorrelationResult,
    correlate_and_stage,
    correlate_updates,
    find_group_for_platform,
    staged_group_name,
)
from expo_sourcemaps.staging.stager import (
    DEFAULT_SCRATCH_DIR_NAME,
    ScratchArea,
    remove_scratch_dir,
    stage_group,
    staged_file_name,
)

__all__ = [
    "CorrelatedUpdate",
    "CorrelationResult",
    "correlate_updates",
    "correlate_and_stage",
    "find_group_for_platform",
    "staged_group_name",
    "DEFAULT_SCRATCH_DIR_NAME",
    "ScratchArea",
    "remove_scratch_dir",
    "stage_group",
    "staged_file_name",
]
