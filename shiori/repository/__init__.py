"""Repository collaborators: file loading, revision metadata, scanning, change detection."""

from shiori.repository.changes import (
    ChangeDetector,
    ChangeTarget,
    ChangeType,
    FileChange,
    parse_name_status,
)
from shiori.repository.git import (
    GitMetadataProvider,
    StatsProviderProtocol,
    filesystem_stats,
    run_git,
)
from shiori.repository.loader import FileLoaderProtocol, FrontmatterLoader, LoadedFile
from shiori.repository.scanner import (
    INDEX_FILE,
    LOCALE_FILE,
    ContentScanner,
    ScanReport,
)

__all__ = [
    "ChangeDetector",
    "ChangeTarget",
    "ChangeType",
    "ContentScanner",
    "FileChange",
    "FileLoaderProtocol",
    "FrontmatterLoader",
    "GitMetadataProvider",
    "INDEX_FILE",
    "LOCALE_FILE",
    "LoadedFile",
    "ScanReport",
    "StatsProviderProtocol",
    "filesystem_stats",
    "parse_name_status",
    "run_git",
]
