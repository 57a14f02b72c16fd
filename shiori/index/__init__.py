"""Metadata derivation and incremental update."""

from shiori.index.generator import GenerationResult, MetadataGenerator
from shiori.index.incremental import IncrementalUpdater, IncrementalUpdateResult
from shiori.index.store import (
    ANCESTORS_FILE,
    FULL_INDEX_FILE,
    LOCALES_FILE,
    SHALLOW_INDEX_FILE,
    ArtifactStore,
    dump_json,
)

__all__ = [
    "ANCESTORS_FILE",
    "ArtifactStore",
    "FULL_INDEX_FILE",
    "GenerationResult",
    "IncrementalUpdateResult",
    "IncrementalUpdater",
    "LOCALES_FILE",
    "MetadataGenerator",
    "SHALLOW_INDEX_FILE",
    "dump_json",
]
