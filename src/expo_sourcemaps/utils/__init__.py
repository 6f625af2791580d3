"""Shared utility helpers."""

from expo_sourcemaps.utils.paths import ensure_directories, write_json_atomically
from expo_sourcemaps.utils.time_utils import now_utc

__all__ = [
    "ensure_directories",
    "write_json_atomically",
    "now_utc",
]
