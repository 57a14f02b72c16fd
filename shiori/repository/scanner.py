"""Content scanner.

リポジトリのファイルシステムを走査してコンテンツツリーを構築する。

- ``locale.md`` を持つトップレベルディレクトリがロケール
- ``index.md`` を持つサブディレクトリがフォルダ（type が chapter ならチャプター、
  それ以外はディレクトリ）。``index.md`` がないフォルダは配下ごと除外する
- その他の ``.md`` ファイルは記事
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from shiori.content.tree import ContentElement, ContentTree
from shiori.domain.content_path import ContentPath
from shiori.domain.slug import Slug
from shiori.domain.types import ElementKind, FileStats
from shiori.repository.git import GitMetadataProvider, StatsProviderProtocol
from shiori.repository.loader import FileLoaderProtocol, FrontmatterLoader, LoadedFile

logger = logging.getLogger(__name__)

LOCALE_FILE = "locale.md"
INDEX_FILE = "index.md"
RESERVED_FILES = frozenset({LOCALE_FILE, INDEX_FILE})


@dataclass
class ScanReport:
    """スキャン結果

    Attributes:
        tree: 構築したツリー
        warnings: 命名規則の逸脱など（除外はしない）
        skipped: 読み込めずに除外したファイル
    """

    tree: ContentTree
    warnings: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass
class _Entry:
    role: str
    file: Path
    path: ContentPath
    parent: _Entry | None = None


def is_hidden(path: Path) -> bool:
    return path.name.startswith(".") or path.name.startswith("_")


def is_article_file(path: Path) -> bool:
    return path.is_file() and path.suffix == ".md" and path.name not in RESERVED_FILES


class ContentScanner:
    """コンテンツスキャナー

    ファイルの読み込みと統計取得は ``max_concurrent`` 件まで並行に行い、
    ツリーへの追加は走査順（決定的）に行う。

    Example:
        >>> scanner = ContentScanner(Path("docs"))
        >>> report = await scanner.scan()
        >>> report.tree.locales()
    """

    def __init__(
        self,
        repo_root: Path,
        loader: FileLoaderProtocol | None = None,
        stats_provider: StatsProviderProtocol | None = None,
        max_concurrent: int = 10,
    ) -> None:
        self.repo_root = Path(repo_root)
        self.loader = loader or FrontmatterLoader()
        self.stats_provider = stats_provider or GitMetadataProvider(self.repo_root)
        self.max_concurrent = max(1, max_concurrent)

    async def scan(self) -> ScanReport:
        """リポジトリ全体を走査"""
        entries: list[_Entry] = []
        warnings: list[str] = []
        for locale_dir in self.locale_directories():
            self._plan_locale(locale_dir, entries, warnings)

        loaded = await self._load_all(entries)
        report = ScanReport(tree=ContentTree(), warnings=warnings)
        self._build(entries, loaded, report)

        logger.info(
            f"Scanned {len(report.tree)} elements in {len(report.tree.locales())} locales"
        )
        return report

    def locale_directories(self) -> list[Path]:
        """``locale.md`` を持つトップレベルディレクトリ"""
        if not self.repo_root.is_dir():
            return []
        return sorted(
            child
            for child in self.repo_root.iterdir()
            if child.is_dir() and not is_hidden(child) and (child / LOCALE_FILE).is_file()
        )

    # ------------------------------------------------------------
    # 走査計画
    # ------------------------------------------------------------

    def _plan_locale(self, locale_dir: Path, entries: list[_Entry], warnings: list[str]) -> None:
        path = ContentPath.from_locale(locale_dir.name)
        if not ContentPath.is_valid_locale(locale_dir.name):
            warnings.append(f"{locale_dir.name}: locale directory does not match xx-XX")

        entry = _Entry("locale", locale_dir / LOCALE_FILE, path)
        entries.append(entry)
        self._plan_folder(locale_dir, entry, entries, warnings)

    def _plan_folder(
        self,
        directory: Path,
        parent: _Entry,
        entries: list[_Entry],
        warnings: list[str],
    ) -> None:
        for child in sorted(directory.iterdir()):
            if is_hidden(child):
                continue

            if is_article_file(child):
                path = parent.path.append(child.stem)
                self._check_name(child.stem, path, warnings)
                entries.append(_Entry("article", child, path, parent))
            elif child.is_dir():
                index_file = child / INDEX_FILE
                if not index_file.is_file():
                    logger.debug(f"Excluding {child}: no {INDEX_FILE}")
                    continue
                path = parent.path.append(child.name)
                self._check_name(child.name, path, warnings)
                entry = _Entry("folder", index_file, path, parent)
                entries.append(entry)
                self._plan_folder(child, entry, entries, warnings)

    def _check_name(self, segment: str, path: ContentPath, warnings: list[str]) -> None:
        if not Slug.is_valid(segment):
            message = f"{path}: name does not follow <number><letters>-<name>"
            logger.warning(message)
            warnings.append(message)

    # ------------------------------------------------------------
    # 読み込み
    # ------------------------------------------------------------

    async def _load_all(
        self, entries: list[_Entry]
    ) -> list[tuple[LoadedFile, FileStats] | None]:
        semaphore = asyncio.Semaphore(self.max_concurrent)
        loop = asyncio.get_running_loop()

        async def load(entry: _Entry) -> tuple[LoadedFile, FileStats] | None:
            async with semaphore:
                loaded = await loop.run_in_executor(None, self.loader.try_load, entry.file)
                if loaded is None:
                    return None
                stats = await loop.run_in_executor(
                    None, self.stats_provider.get_stats, entry.file
                )
                return loaded, stats

        return await asyncio.gather(*[load(entry) for entry in entries])

    # ------------------------------------------------------------
    # ツリー構築
    # ------------------------------------------------------------

    def _build(
        self,
        entries: list[_Entry],
        loaded: list[tuple[LoadedFile, FileStats] | None],
        report: ScanReport,
    ) -> None:
        elements: dict[int, ContentElement] = {}

        for entry, record in zip(entries, loaded):
            source = self._relative(entry.file)
            if record is None:
                report.skipped.append(source)
                continue

            parent_element = None
            if entry.parent is not None:
                parent_element = elements.get(id(entry.parent))
                if parent_element is None:
                    logger.warning(f"Skipping {source}: parent was not loaded")
                    report.skipped.append(source)
                    continue

            file, stats = record
            element = ContentElement(
                kind=self._kind_of(entry, file.frontmatter),
                path=entry.path,
                source=source,
                frontmatter=file.frontmatter,
                stats=stats,
            )
            report.tree.add(element, parent=parent_element)
            elements[id(entry)] = element

    @staticmethod
    def _kind_of(entry: _Entry, frontmatter: dict) -> ElementKind:
        if entry.role == "locale":
            return ElementKind.LOCALE
        if entry.role == "folder":
            if frontmatter.get("type") == ElementKind.CHAPTER.value:
                return ElementKind.CHAPTER
            return ElementKind.DIRECTORY
        return ElementKind.ARTICLE

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.repo_root).as_posix()
        except ValueError:
            return path.as_posix()
