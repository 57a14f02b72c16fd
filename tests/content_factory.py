"""Builders for on-disk content repositories used across tests."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from shiori.domain.types import FileStats

ULID_PREFIX = "01HZX3V8K2M4N6P8R0T2W4Y6"
FIXED_TIME = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def make_ulid(number: int) -> str:
    """テスト用の有効なULID"""
    return f"{ULID_PREFIX}{number:02d}"


def fixed_stats(sha: str = "abc123", size: int = 42) -> FileStats:
    return FileStats(sha=sha, size=size, created_at=FIXED_TIME, updated_at=FIXED_TIME)


class ContentRepo:
    """ディスク上にコンテンツリポジトリを組み立てるヘルパー"""

    def __init__(self, root: Path):
        self.root = root
        self._counter = 0

    def next_id(self) -> str:
        self._counter += 1
        return make_ulid(self._counter)

    def write(self, relative: str, **frontmatter: Any) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        header = yaml.safe_dump(frontmatter, allow_unicode=True, sort_keys=False)
        path.write_text(f"---\n{header}---\n\nBody of {relative}\n", encoding="utf-8")
        return path

    def locale(self, code: str, title: str | None = None, **extra: Any) -> Path:
        return self.write(
            f"{code}/locale.md", id=self.next_id(), title=title or code, type="locale", **extra
        )

    def chapter(self, folder: str, title: str | None = None, **extra: Any) -> Path:
        return self.write(
            f"{folder}/index.md",
            id=self.next_id(),
            title=title or folder.rsplit("/", 1)[-1],
            type="chapter",
            **extra,
        )

    def directory(self, folder: str, title: str | None = None, **extra: Any) -> Path:
        return self.write(
            f"{folder}/index.md",
            id=self.next_id(),
            title=title or folder.rsplit("/", 1)[-1],
            type="directory",
            **extra,
        )

    def article(self, file: str, title: str | None = None, **extra: Any) -> Path:
        return self.write(
            file,
            id=self.next_id(),
            title=title or Path(file).stem,
            type="article",
            **extra,
        )


