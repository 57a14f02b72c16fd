"""JSON artifact store.

メタデータ JSON の配置と読み書き。書き込みは一時ファイル経由でアトミックに行う。

配置:
    <root>/locales.json
    <root>/<locale>/index.full.json, index.shallow.json
    <root>/<locale>/<slug>/.../index.full.json, index.shallow.json, ancestors.json
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from shiori.errors import ArtifactError

logger = logging.getLogger(__name__)

LOCALES_FILE = "locales.json"
FULL_INDEX_FILE = "index.full.json"
SHALLOW_INDEX_FILE = "index.shallow.json"
ANCESTORS_FILE = "ancestors.json"


def dump_json(data: Any) -> str:
    """決定的な JSON 文字列（2スペースインデント、非ASCIIはそのまま、末尾改行）"""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class ArtifactStore:
    """メタデータ JSON ストア

    Args:
        repo_root: リポジトリルート
    """

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = Path(repo_root)

    # ------------------------------------------------------------
    # パス
    # ------------------------------------------------------------

    def folder_dir(self, locale: str, slug: Sequence[str] = ()) -> Path:
        return self.repo_root.joinpath(locale, *slug)

    def locales_path(self) -> Path:
        return self.repo_root / LOCALES_FILE

    def full_path(self, locale: str, slug: Sequence[str] = ()) -> Path:
        return self.folder_dir(locale, slug) / FULL_INDEX_FILE

    def shallow_path(self, locale: str, slug: Sequence[str] = ()) -> Path:
        return self.folder_dir(locale, slug) / SHALLOW_INDEX_FILE

    def ancestors_path(self, locale: str, slug: Sequence[str]) -> Path:
        return self.folder_dir(locale, slug) / ANCESTORS_FILE

    def ancestor_files(self, locale: str, slug: Sequence[str] = ()) -> list[Path]:
        """フォルダ配下（自身を含む）のすべての ``ancestors.json``"""
        base = self.folder_dir(locale, slug)
        if not base.is_dir():
            return []
        return sorted(base.rglob(ANCESTORS_FILE))

    def relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.repo_root).as_posix()
        except ValueError:
            return path.as_posix()

    # ------------------------------------------------------------
    # 読み書き
    # ------------------------------------------------------------

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read(self, path: Path) -> Any:
        """JSON を読み込み

        Raises:
            ArtifactError: 存在しない、または JSON として不正
        """
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ArtifactError(
                f"Artifact not found: {self.relative(path)}",
                code="ARTIFACT_NOT_FOUND",
                path=self.relative(path),
                cause=e,
            ) from e
        except OSError as e:
            raise ArtifactError(
                f"Cannot read artifact: {self.relative(path)}",
                path=self.relative(path),
                cause=e,
            ) from e

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ArtifactError(
                f"Invalid JSON in {self.relative(path)}: {e}",
                code="INVALID_JSON",
                path=self.relative(path),
                cause=e,
            ) from e

    def write(self, path: Path, data: Any) -> Path:
        """JSON をアトミックに書き込み"""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(dump_json(data))
            os.replace(temp_name, path)
        except BaseException:
            if os.path.exists(temp_name):
                os.unlink(temp_name)
            raise
        logger.debug(f"Wrote {self.relative(path)}")
        return path

    async def read_async(self, path: Path) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.read, path)

    async def write_async(self, path: Path, data: Any) -> Path:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.write, path, data)
