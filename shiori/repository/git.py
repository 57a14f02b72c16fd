"""Revision metadata for content files.

git から sha・サイズ・最初/最後のコミット日時を取得する。
コミットされていないファイルはファイルシステムの stat と空の sha にフォールバックする。
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from shiori.domain.types import FileStats
from shiori.errors import GitError

logger = logging.getLogger(__name__)


class StatsProviderProtocol(Protocol):
    """ファイル統計プロバイダープロトコル"""

    def get_stats(self, path: Path) -> FileStats:
        ...


def run_git(repo_root: Path, *args: str) -> str:
    """gitコマンドを実行して標準出力を返す

    Raises:
        GitError: gitが見つからない、または終了コードが0以外
    """
    command = ["git", "-C", str(repo_root), *args]
    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise GitError(f"Cannot run git: {e}", command=command, cause=e) from e

    if completed.returncode != 0:
        raise GitError(
            completed.stderr.strip() or f"git exited with {completed.returncode}",
            command=command,
            returncode=completed.returncode,
        )
    return completed.stdout


def filesystem_stats(path: Path) -> FileStats:
    """ファイルシステムの stat から統計を作成（sha は空）"""
    stat = path.stat()
    created = getattr(stat, "st_birthtime", None) or stat.st_ctime
    return FileStats(
        sha="",
        size=stat.st_size,
        created_at=datetime.fromtimestamp(created, tz=timezone.utc),
        updated_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
    )


class GitMetadataProvider:
    """gitベースのファイル統計プロバイダー

    Args:
        repo_root: リポジトリルート
        use_git: False の場合は常にファイルシステムの stat を使う
    """

    def __init__(self, repo_root: Path, use_git: bool = True) -> None:
        self.repo_root = Path(repo_root)
        self.use_git = use_git

    def get_stats(self, path: Path) -> FileStats:
        """ファイル統計を取得"""
        path = Path(path)
        if not self.use_git:
            return filesystem_stats(path)

        try:
            return self._git_stats(path)
        except GitError as e:
            logger.debug(f"Using filesystem stats for {path}: {e.message}")
            return filesystem_stats(path)

    async def get_stats_async(self, path: Path) -> FileStats:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.get_stats, path)

    def _relative(self, path: Path) -> str:
        absolute = path if path.is_absolute() else self.repo_root / path
        return absolute.resolve().relative_to(self.repo_root.resolve()).as_posix()

    def _git_stats(self, path: Path) -> FileStats:
        relative = self._relative(path)
        sha = run_git(self.repo_root, "rev-parse", f"HEAD:./{relative}").strip()
        size = int(run_git(self.repo_root, "cat-file", "-s", sha).strip())

        history = run_git(
            self.repo_root, "log", "--follow", "--format=%aI", "--", relative
        ).split()
        if not history:
            raise GitError(f"No commits for {relative}")

        # git log は新しい順
        return FileStats(
            sha=sha,
            size=size,
            created_at=datetime.fromisoformat(history[-1]),
            updated_at=datetime.fromisoformat(history[0]),
        )
