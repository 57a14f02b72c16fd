"""File-level change detection between two revisions."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any

from shiori.domain.content_path import ContentPath
from shiori.errors import ChangeDetectionError, GitError
from shiori.repository.git import run_git

logger = logging.getLogger(__name__)


class ChangeType(str, Enum):
    """変更タイプ"""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


class ChangeTarget(str, Enum):
    """変更されたファイルの役割（ファイル名で決まる）"""

    LOCALE = "locale"
    FOLDER = "folder"
    ARTICLE = "article"


STATUS_MAP = {
    "A": ChangeType.ADDED,
    "M": ChangeType.MODIFIED,
    "D": ChangeType.DELETED,
    "R": ChangeType.RENAMED,
}


@dataclass(frozen=True)
class FileChange:
    """ファイル変更

    Attributes:
        change_type: 変更タイプ
        path: 変更後のパス（削除の場合は削除されたパス）
        old_path: リネーム前のパス
        locale: ロケールコード
        target: ファイルの役割
        slug: ロケールを除くスラッグ（フォルダは自身のスラッグ、記事は拡張子なし）
    """

    change_type: ChangeType
    path: str
    locale: str
    target: ChangeTarget
    slug: tuple[str, ...] = field(default_factory=tuple)
    old_path: str | None = None

    @property
    def content_path(self) -> ContentPath:
        return ContentPath(self.locale, self.slug)

    @property
    def folder_slug(self) -> tuple[str, ...]:
        """ファイルを含むフォルダのスラッグ"""
        if self.target == ChangeTarget.ARTICLE:
            return self.slug[:-1]
        return self.slug

    @classmethod
    def from_path(
        cls,
        change_type: ChangeType,
        path: str,
        old_path: str | None = None,
    ) -> FileChange | None:
        """リポジトリ相対パスから分類

        ロケールディレクトリ外のパスや Markdown 以外は None。
        """
        parts = PurePosixPath(path).parts
        if len(parts) < 2 or not path.endswith(".md"):
            return None

        locale = parts[0]
        if not ContentPath.is_valid_locale(locale):
            return None

        name = parts[-1]
        folders = tuple(parts[1:-1])
        if name == "locale.md":
            if folders:
                return None
            return cls(change_type, path, locale, ChangeTarget.LOCALE, (), old_path)
        if name == "index.md":
            if not folders:
                return None
            return cls(change_type, path, locale, ChangeTarget.FOLDER, folders, old_path)

        stem = PurePosixPath(name).stem
        return cls(
            change_type, path, locale, ChangeTarget.ARTICLE, (*folders, stem), old_path
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "change_type": self.change_type.value,
            "path": self.path,
            "old_path": self.old_path,
            "locale": self.locale,
            "target": self.target.value,
            "slug": list(self.slug),
        }


def parse_name_status(output: str) -> list[FileChange]:
    """``git diff --name-status`` の出力を解析

    Markdown 以外、ロケール外のパスは除外する。
    """
    changes: list[FileChange] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split("\t")
        status = fields[0][:1]
        change_type = STATUS_MAP.get(status)
        if change_type is None:
            logger.debug(f"Ignoring unsupported status: {line}")
            continue

        if change_type == ChangeType.RENAMED:
            if len(fields) < 3:
                continue
            old_path, new_path = fields[1], fields[2]
            change = FileChange.from_path(change_type, new_path, old_path)
            if change is None:
                # moved out of the content tree
                change = FileChange.from_path(ChangeType.DELETED, old_path)
        else:
            change = FileChange.from_path(change_type, fields[1])

        if change is not None:
            changes.append(change)
    return changes


class ChangeDetector:
    """リビジョン間のMarkdownファイル変更を検出

    Example:
        >>> detector = ChangeDetector(Path("."))
        >>> changes = await detector.detect("HEAD~1", "HEAD")
    """

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = Path(repo_root)

    def detect_sync(self, before: str, after: str) -> list[FileChange]:
        """変更を検出

        Raises:
            ChangeDetectionError: git diff が失敗した場合
        """
        try:
            output = run_git(
                self.repo_root,
                "diff",
                "--name-status",
                "--find-renames",
                # repo_root がサブディレクトリでも repo_root 相対のパスを得る
                "--relative",
                before,
                after,
                "--",
                "*.md",
            )
        except GitError as e:
            raise ChangeDetectionError(
                f"Failed to detect changes between {before} and {after}: {e.message}",
                cause=e,
                component="repository",
                operation="detect",
            ) from e

        changes = parse_name_status(output)
        logger.info(f"Detected {len(changes)} content changes between {before} and {after}")
        return changes

    async def detect(self, before: str, after: str) -> list[FileChange]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.detect_sync, before, after)
