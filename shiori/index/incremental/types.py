"""Incremental Update Types.

差分メタデータ更新で使用する型定義。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from shiori.repository.changes import ChangeTarget, ChangeType, FileChange


@dataclass
class IncrementalUpdateStats:
    """差分更新の統計

    Attributes:
        locales_updated: 書き込みがあったロケール数
        folders_updated: 書き込みがあったフォルダ数
        files_processed: 適用した変更数
        skipped: スキップした変更数
    """

    locales_updated: int = 0
    folders_updated: int = 0
    files_processed: int = 0
    skipped: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "locales_updated": self.locales_updated,
            "folders_updated": self.folders_updated,
            "files_processed": self.files_processed,
            "skipped": self.skipped,
        }


@dataclass
class IncrementalUpdateResult:
    """差分更新の結果

    Attributes:
        updated_files: 書き込んだファイル（リポジトリ相対、ソート済み）
        requires_full_regeneration: 差分では整合性を保てないため全体再生成が必要か
        reasons: 全体再生成が必要な理由
        stats: 統計
    """

    updated_files: list[str] = field(default_factory=list)
    requires_full_regeneration: bool = False
    reasons: list[str] = field(default_factory=list)
    stats: IncrementalUpdateStats = field(default_factory=IncrementalUpdateStats)

    def require_full_regeneration(self, reason: str) -> None:
        self.requires_full_regeneration = True
        self.reasons.append(reason)

    def to_dict(self) -> dict[str, Any]:
        return {
            "updated_files": list(self.updated_files),
            "requires_full_regeneration": self.requires_full_regeneration,
            "reasons": list(self.reasons),
            "stats": self.stats.to_dict(),
        }


def expand_renames(changes: list[FileChange]) -> list[FileChange]:
    """記事のリネームを削除 + 追加に展開"""
    expanded: list[FileChange] = []
    for change in changes:
        if change.change_type != ChangeType.RENAMED or change.target != ChangeTarget.ARTICLE:
            expanded.append(change)
            continue

        if change.old_path:
            old = FileChange.from_path(ChangeType.DELETED, change.old_path)
            if old is not None:
                expanded.append(old)
        added = FileChange.from_path(ChangeType.ADDED, change.path)
        if added is not None:
            expanded.append(added)
    return expanded


def structural_reason(change: FileChange) -> str | None:
    """差分で適用できない変更なら理由を返す"""
    if change.target == ChangeTarget.FOLDER and change.change_type != ChangeType.MODIFIED:
        return f"folder {change.change_type.value}: {change.path}"
    if change.target == ChangeTarget.LOCALE and change.change_type == ChangeType.RENAMED:
        return f"locale renamed: {change.old_path} -> {change.path}"
    return None


__all__ = [
    "ChangeTarget",
    "ChangeType",
    "FileChange",
    "IncrementalUpdateResult",
    "IncrementalUpdateStats",
    "expand_renames",
    "structural_reason",
]
