"""Incremental Update Engine.

変更されたファイルの集合から、影響を受ける JSON アーティファクトだけを更新する。

ファイル名ごとの処理:
    - ``locale.md``: ``locales.json`` の1エントリを更新（削除時は除去）し、
      ロケールのインデックスと ``ancestors.json`` のロケールヘッダーを更新
    - ``index.md`` (変更): フォルダのヘッダーを更新し、children はそのまま保持
    - 記事: 所属フォルダの full/shallow の children を更新して並べ替え

フォルダの追加・削除・リネームとロケールのリネームは差分では整合性を保てないため、
``requires_full_regeneration`` を立てる。
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from shiori.content.metadata import (
    build_article_metadata,
    build_chapter_metadata,
    build_directory_metadata,
    build_locale_metadata,
)
from shiori.domain.content_path import ContentPath
from shiori.domain.types import ElementKind, FileStats
from shiori.errors import ArtifactError
from shiori.index.incremental.patch import (
    find_entry,
    remove_child,
    replace_header,
    replace_in_list,
    upsert_child,
)
from shiori.index.incremental.types import (
    ChangeTarget,
    ChangeType,
    FileChange,
    IncrementalUpdateResult,
    expand_renames,
    structural_reason,
)
from shiori.index.store import ArtifactStore
from shiori.repository.git import GitMetadataProvider, StatsProviderProtocol
from shiori.repository.loader import FileLoaderProtocol, FrontmatterLoader, LoadedFile

logger = logging.getLogger(__name__)


class ArtifactSession:
    """1回の更新で使うアーティファクトのキャッシュ

    各ファイルは一度だけ読み込み、変更はメモリ上で行って最後にまとめて書き込む。
    """

    def __init__(self, store: ArtifactStore) -> None:
        self.store = store
        self._cache: dict[Path, Any] = {}
        self._dirty: set[Path] = set()

    def load(self, path: Path) -> Any | None:
        """読み込み（存在しない・不正な場合は None）"""
        if path not in self._cache:
            try:
                self._cache[path] = self.store.read(path)
            except ArtifactError as e:
                logger.debug(f"Artifact unavailable: {e.message}")
                self._cache[path] = None
        return self._cache[path]

    def mark(self, path: Path) -> None:
        if self._cache.get(path) is not None:
            self._dirty.add(path)

    @property
    def dirty(self) -> list[Path]:
        return sorted(self._dirty)

    async def flush(self, semaphore: asyncio.Semaphore) -> list[str]:
        """変更したファイルを書き込み"""

        async def write(path: Path) -> str:
            async with semaphore:
                await self.store.write_async(path, self._cache[path])
            return self.store.relative(path)

        written = await asyncio.gather(*[write(path) for path in self.dirty])
        self._dirty.clear()
        return list(written)


@dataclass
class _Prepared:
    change: FileChange
    file: LoadedFile | None = None
    stats: FileStats | None = None


@dataclass
class _LocaleOutcome:
    session: ArtifactSession
    written: list[str] = field(default_factory=list)
    processed: int = 0
    skipped: int = 0


class IncrementalUpdater:
    """差分メタデータ更新

    ソースファイルの読み込みと最後の書き込みは並行に行い、
    アーティファクトへの適用はロケールごとに変更順に行う。

    Example:
        >>> updater = IncrementalUpdater(Path("docs"))
        >>> result = await updater.apply(changes)
        >>> if result.requires_full_regeneration:
        ...     ...
    """

    def __init__(
        self,
        repo_root: Path,
        store: ArtifactStore | None = None,
        loader: FileLoaderProtocol | None = None,
        stats_provider: StatsProviderProtocol | None = None,
        max_concurrent: int = 10,
    ) -> None:
        self.repo_root = Path(repo_root)
        self.store = store or ArtifactStore(self.repo_root)
        self.loader = loader or FrontmatterLoader()
        self.stats_provider = stats_provider or GitMetadataProvider(self.repo_root)
        self.max_concurrent = max(1, max_concurrent)

    async def apply(self, changes: list[FileChange]) -> IncrementalUpdateResult:
        """変更を適用

        Args:
            changes: ファイル変更（Markdown のみ）

        Returns:
            更新結果。変更はすべてメモリ上で適用してから書き込むため、
            ``requires_full_regeneration`` が立っている場合は何も書き込まない。
        """
        result = IncrementalUpdateResult()
        changes = expand_renames(changes)

        for change in changes:
            reason = structural_reason(change)
            if reason is not None:
                result.require_full_regeneration(reason)
        if result.requires_full_regeneration:
            logger.info(f"Full regeneration required: {'; '.join(result.reasons)}")
            return result

        semaphore = asyncio.Semaphore(self.max_concurrent)
        prepared = await asyncio.gather(*[self._prepare(change, semaphore) for change in changes])

        by_locale: dict[str, list[_Prepared]] = defaultdict(list)
        for item in prepared:
            by_locale[item.change.locale].append(item)

        # locales.json はロケール間で共有されるため先にまとめて更新する
        locale_items = [item for item in prepared if item.change.target == ChangeTarget.LOCALE]
        locales_outcome = self._apply_locales_json(locale_items, result)

        outcomes = [
            self._apply_locale(locale, items, result)
            for locale, items in sorted(by_locale.items())
        ]

        # 適用中に全体再生成が必要と判明した場合は何も書き込まない
        if result.requires_full_regeneration:
            logger.info(f"Full regeneration required: {'; '.join(result.reasons)}")
            return result

        await asyncio.gather(
            *[self._flush(outcome, semaphore) for outcome in [locales_outcome, *outcomes]]
        )

        written = set(locales_outcome.written)
        locales_updated = 0
        for outcome in outcomes:
            written.update(outcome.written)
            if outcome.written:
                locales_updated += 1
            result.stats.files_processed += outcome.processed
            result.stats.skipped += outcome.skipped

        result.updated_files = sorted(written)
        result.stats.locales_updated = locales_updated
        result.stats.folders_updated = len(
            {
                str(Path(path).parent)
                for path in result.updated_files
                if len(Path(path).parts) > 2
            }
        )
        logger.info(
            f"Incremental update wrote {len(result.updated_files)} files "
            f"({result.stats.files_processed} changes, {result.stats.skipped} skipped)"
        )
        return result

    # ------------------------------------------------------------
    # 準備
    # ------------------------------------------------------------

    async def _prepare(self, change: FileChange, semaphore: asyncio.Semaphore) -> _Prepared:
        if change.change_type == ChangeType.DELETED:
            return _Prepared(change)

        loop = asyncio.get_running_loop()
        path = self.repo_root / change.path
        async with semaphore:
            loaded = await loop.run_in_executor(None, self.loader.try_load, path)
            if loaded is None:
                return _Prepared(change)
            stats = await loop.run_in_executor(None, self.stats_provider.get_stats, path)
        return _Prepared(change, loaded, stats)

    # ------------------------------------------------------------
    # locales.json
    # ------------------------------------------------------------

    def _apply_locales_json(
        self, items: list[_Prepared], result: IncrementalUpdateResult
    ) -> _LocaleOutcome:
        session = ArtifactSession(self.store)
        outcome = _LocaleOutcome(session)
        if not items:
            return outcome

        path = self.store.locales_path()
        locales = session.load(path)
        if not isinstance(locales, list):
            logger.warning(f"{self.store.relative(path)} not found; skipping locale list update")
            return outcome

        for item in items:
            change = item.change
            if change.change_type == ChangeType.DELETED:
                locales[:] = [entry for entry in locales if entry.get("locale") != change.locale]
            elif item.file is not None and item.stats is not None:
                header = build_locale_metadata(
                    item.file.frontmatter, item.stats, change.locale
                ).to_dict()
                if not replace_in_list(locales, [], header):
                    locales.append(header)
                    locales.sort(key=lambda entry: entry.get("locale", ""))
                if not self.store.exists(self.store.full_path(change.locale)):
                    result.require_full_regeneration(
                        f"locale {change.locale} has no generated indices"
                    )
            session.mark(path)

        return outcome

    # ------------------------------------------------------------
    # ロケール単位
    # ------------------------------------------------------------

    def _apply_locale(
        self, locale: str, items: list[_Prepared], result: IncrementalUpdateResult
    ) -> _LocaleOutcome:
        session = ArtifactSession(self.store)
        outcome = _LocaleOutcome(session)

        for item in items:
            change = item.change
            if change.change_type != ChangeType.DELETED and item.file is None:
                logger.warning(f"Skipping {change.path}: source could not be loaded")
                outcome.skipped += 1
                continue

            if change.target == ChangeTarget.LOCALE:
                applied = self._apply_locale_header(session, item)
            elif change.target == ChangeTarget.FOLDER:
                applied = self._apply_folder_header(session, item, result)
            else:
                applied = self._apply_article(session, item)

            if applied:
                outcome.processed += 1
            else:
                outcome.skipped += 1

        return outcome

    async def _flush(self, outcome: _LocaleOutcome, semaphore: asyncio.Semaphore) -> None:
        outcome.written = await outcome.session.flush(semaphore)

    def _apply_locale_header(self, session: ArtifactSession, item: _Prepared) -> bool:
        change = item.change
        if change.change_type == ChangeType.DELETED:
            # locales.json からの除去のみ
            return True
        assert item.file is not None and item.stats is not None

        header = build_locale_metadata(item.file.frontmatter, item.stats, change.locale).to_dict()
        for path in (self.store.full_path(change.locale), self.store.shallow_path(change.locale)):
            document = session.load(path)
            if isinstance(document, dict) and replace_header(document, [], header):
                session.mark(path)

        self._patch_ancestor_files(session, change.locale, (), [], header)
        return True

    def _apply_folder_header(
        self,
        session: ArtifactSession,
        item: _Prepared,
        result: IncrementalUpdateResult,
    ) -> bool:
        change = item.change
        assert item.file is not None and item.stats is not None
        locale, slug = change.locale, list(change.slug)

        full_path = self.store.full_path(locale, slug)
        shallow_path = self.store.shallow_path(locale, slug)
        full = session.load(full_path)
        shallow = session.load(shallow_path)
        if not isinstance(full, dict) or not isinstance(shallow, dict):
            logger.warning(f"Skipping {change.path}: folder indices not found")
            return False

        frontmatter = item.file.frontmatter
        path = ContentPath(locale, tuple(slug))
        if frontmatter.get("type") == ElementKind.CHAPTER.value:
            header = build_chapter_metadata(frontmatter, item.stats, path).to_dict()
        else:
            header = build_directory_metadata(frontmatter, item.stats, path).to_dict()

        if header["type"] != full.get("type"):
            result.require_full_regeneration(
                f"folder type changed from {full.get('type')} to {header['type']}: {change.path}"
            )
            return False

        replace_header(full, slug, header)
        replace_header(shallow, slug, header)
        session.mark(full_path)
        session.mark(shallow_path)

        parent_slug = slug[:-1]
        if parent_slug:
            parent_shallow_path = self.store.shallow_path(locale, parent_slug)
            parent_shallow = session.load(parent_shallow_path)
            if isinstance(parent_shallow, dict) and replace_header(parent_shallow, slug, header):
                session.mark(parent_shallow_path)

            # 祖先の full にはサブツリーとして埋め込まれている
            for depth in range(len(parent_slug), 0, -1):
                ancestor_path = self.store.full_path(locale, slug[:depth])
                ancestor = session.load(ancestor_path)
                if isinstance(ancestor, dict) and replace_header(ancestor, slug, header):
                    session.mark(ancestor_path)

        if header["type"] == ElementKind.CHAPTER.value:
            # ロケールのチャプター階層
            locale_full_path = self.store.full_path(locale)
            locale_full = session.load(locale_full_path)
            if isinstance(locale_full, dict) and replace_header(locale_full, slug, header):
                session.mark(locale_full_path)
            if len(slug) == 1:
                locale_shallow_path = self.store.shallow_path(locale)
                locale_shallow = session.load(locale_shallow_path)
                if isinstance(locale_shallow, dict) and replace_header(
                    locale_shallow, slug, header
                ):
                    session.mark(locale_shallow_path)

        self._patch_ancestor_files(session, locale, tuple(slug), slug, header)
        return True

    def _apply_article(self, session: ArtifactSession, item: _Prepared) -> bool:
        change = item.change
        locale = change.locale
        folder_slug = list(change.folder_slug)
        name = change.slug[-1]

        if not folder_slug:
            logger.warning(f"Skipping {change.path}: articles are not allowed in a locale root")
            return False

        full_path = self.store.full_path(locale, folder_slug)
        shallow_path = self.store.shallow_path(locale, folder_slug)
        full = session.load(full_path)
        shallow = session.load(shallow_path)
        if not isinstance(full, dict) or not isinstance(shallow, dict):
            logger.warning(f"Skipping {change.path}: folder indices not found")
            return False

        entry = None
        if change.change_type != ChangeType.DELETED:
            assert item.file is not None and item.stats is not None
            entry = build_article_metadata(
                item.file.frontmatter, item.stats, change.content_path
            ).to_dict()

        targets = [(full_path, full), (shallow_path, shallow)]

        # フォルダがサブツリーとして埋め込まれている祖先の full
        for depth in range(len(folder_slug) - 1, 0, -1):
            ancestor_path = self.store.full_path(locale, folder_slug[:depth])
            ancestor = session.load(ancestor_path)
            if not isinstance(ancestor, dict):
                continue
            embedded = find_entry(ancestor, folder_slug)
            if embedded is not None and "children" in embedded:
                targets.append((ancestor_path, embedded))

        for path, container in targets:
            if entry is None:
                remove_child(container, name)
            else:
                upsert_child(container, dict(entry))
            session.mark(path)
        return True

    def _patch_ancestor_files(
        self,
        session: ArtifactSession,
        locale: str,
        under: tuple[str, ...],
        slug: list[str],
        header: dict[str, Any],
    ) -> None:
        """子孫フォルダの ``ancestors.json`` 内のエントリを置き換える"""
        own = self.store.ancestors_path(locale, under) if under else None
        for path in self.store.ancestor_files(locale, under):
            if path == own:
                continue
            ancestors = session.load(path)
            if isinstance(ancestors, list) and replace_in_list(ancestors, slug, header):
                session.mark(path)
