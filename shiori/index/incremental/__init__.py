"""Incremental metadata update."""

from shiori.index.incremental.types import (
    IncrementalUpdateResult,
    IncrementalUpdateStats,
    expand_renames,
    structural_reason,
)
from shiori.index.incremental.updater import ArtifactSession, IncrementalUpdater

__all__ = [
    "ArtifactSession",
    "IncrementalUpdateResult",
    "IncrementalUpdateStats",
    "IncrementalUpdater",
    "expand_renames",
    "structural_reason",
]
