"""Metadata Derivation Engine.

ツリー全体から JSON アーティファクトを再生成する。

兄弟サブツリー間に順序の依存はないため並行に処理する。各フォルダの3ファイルは
そのフォルダのプロジェクション計算が終わってから書き込む。
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from shiori.content.projection import (
    ancestors_projection,
    full_projection,
    locale_list_projection,
    locale_projection,
    projected_children,
    shallow_projection,
)
from shiori.content.tree import ContentElement, ContentTree
from shiori.index.store import ArtifactStore
from shiori.observability import measure_time

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """生成結果

    Attributes:
        locales_json: ``locales.json`` のパス（リポジトリ相対）
        locale_indices: ロケールごとの full/shallow パス
        folder_indices: フォルダ（``<locale>/<slug>/...``）ごとの full/shallow/ancestors パス
        duration_ms: 処理時間
    """

    locales_json: str = ""
    locale_indices: dict[str, dict[str, str]] = field(default_factory=dict)
    folder_indices: dict[str, dict[str, str]] = field(default_factory=dict)
    duration_ms: float = 0.0

    @property
    def written_files(self) -> list[str]:
        """書き込んだすべてのファイル（ソート済み）"""
        files = [self.locales_json] if self.locales_json else []
        for paths in self.locale_indices.values():
            files.extend(paths.values())
        for paths in self.folder_indices.values():
            files.extend(paths.values())
        return sorted(files)

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "locales": len(self.locale_indices),
            "folders": len(self.folder_indices),
            "files_written": len(self.written_files),
            "duration_ms": round(self.duration_ms, 1),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "locales_json": self.locales_json,
            "locale_indices": self.locale_indices,
            "folder_indices": self.folder_indices,
            "stats": self.stats,
        }


class MetadataGenerator:
    """メタデータ生成器

    Example:
        >>> generator = MetadataGenerator(ArtifactStore(Path("docs")))
        >>> result = await generator.generate(tree)
        >>> result.stats["files_written"]
    """

    def __init__(self, store: ArtifactStore, max_concurrent: int = 10) -> None:
        self.store = store
        self.max_concurrent = max(1, max_concurrent)

    async def generate(self, tree: ContentTree) -> GenerationResult:
        """すべてのアーティファクトを生成

        途中で例外が発生した場合はそのまま伝播する（書き込み済みのファイルは残る）。
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)
        result = GenerationResult()

        with measure_time("generate", logger) as timer:
            locales_path = await self._write(
                semaphore, self.store.locales_path(), locale_list_projection(tree)
            )
            result.locales_json = self.store.relative(locales_path)

            await asyncio.gather(
                *[
                    self._generate_locale(tree, locale, result, semaphore)
                    for locale in tree.locales()
                ]
            )
        result.duration_ms = timer.elapsed_ms

        logger.info(
            f"Generated {len(result.written_files)} metadata files for "
            f"{len(result.locale_indices)} locales"
        )
        return result

    async def _generate_locale(
        self,
        tree: ContentTree,
        locale: ContentElement,
        result: GenerationResult,
        semaphore: asyncio.Semaphore,
    ) -> None:
        code = locale.path.locale
        full = locale_projection(tree, locale)
        shallow = shallow_projection(tree, locale)

        full_path, shallow_path = await asyncio.gather(
            self._write(semaphore, self.store.full_path(code), full),
            self._write(semaphore, self.store.shallow_path(code), shallow),
        )
        result.locale_indices[code] = {
            "full": self.store.relative(full_path),
            "shallow": self.store.relative(shallow_path),
        }

        await asyncio.gather(
            *[
                self._generate_folder(tree, chapter, result, semaphore)
                for chapter in projected_children(tree, locale)
            ]
        )

    async def _generate_folder(
        self,
        tree: ContentTree,
        folder: ContentElement,
        result: GenerationResult,
        semaphore: asyncio.Semaphore,
    ) -> None:
        locale, slug = folder.path.locale, folder.path.slug

        ancestors = ancestors_projection(tree, folder)
        shallow = shallow_projection(tree, folder)
        full = full_projection(tree, folder)

        ancestors_path, shallow_path, full_path = await asyncio.gather(
            self._write(semaphore, self.store.ancestors_path(locale, slug), ancestors),
            self._write(semaphore, self.store.shallow_path(locale, slug), shallow),
            self._write(semaphore, self.store.full_path(locale, slug), full),
        )
        result.folder_indices[folder.path.key] = {
            "full": self.store.relative(full_path),
            "shallow": self.store.relative(shallow_path),
            "ancestors": self.store.relative(ancestors_path),
        }
        logger.debug(f"Generated {folder.path}/index.*.json")

        await asyncio.gather(
            *[
                self._generate_folder(tree, child, result, semaphore)
                for child in projected_children(tree, folder)
                if child.kind.is_folder
            ]
        )

    async def _write(self, semaphore: asyncio.Semaphore, path: Path, data: Any) -> Path:
        async with semaphore:
            return await self.store.write_async(path, data)
