# Frontmatter Loader
"""
Markdown file loading with YAML frontmatter parsing.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import frontmatter
import yaml

from shiori.errors import ContentLoadError, FrontmatterError

logger = logging.getLogger(__name__)


@dataclass
class LoadedFile:
    """読み込んだMarkdownファイル

    Attributes:
        path: ファイルパス
        content: フロントマターを除いた本文
        frontmatter: フロントマター
    """

    path: Path
    content: str
    frontmatter: dict[str, Any] = field(default_factory=dict)


class FileLoaderProtocol(Protocol):
    """ファイルローダープロトコル"""

    def load(self, path: Path) -> LoadedFile:
        """ファイルを読み込み"""
        ...

    def try_load(self, path: Path) -> LoadedFile | None:
        """読み込みに失敗した場合は None"""
        ...


class FrontmatterLoader:
    """フロントマター付きMarkdownローダー

    Example:
        >>> loader = FrontmatterLoader()
        >>> loaded = loader.load(Path("en-US/locale.md"))
        >>> loaded.frontmatter["type"]
        'locale'
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def load(self, path: Path) -> LoadedFile:
        """ファイルを読み込み

        Args:
            path: ファイルパス

        Returns:
            読み込み結果

        Raises:
            ContentLoadError: ファイルが存在しない、または読み込めない
            FrontmatterError: フロントマターが解析できない
        """
        path = Path(path)
        try:
            text = path.read_text(encoding=self.encoding)
        except FileNotFoundError as e:
            raise ContentLoadError(
                f"File not found: {path}", path=str(path), cause=e, operation="load"
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ContentLoadError(
                f"Cannot read file: {path}", path=str(path), cause=e, operation="load"
            ) from e

        try:
            post = frontmatter.loads(text)
        except yaml.YAMLError as e:
            raise FrontmatterError(
                f"Invalid frontmatter in {path}: {e}",
                path=str(path),
                cause=e,
                operation="parse",
            ) from e

        metadata = post.metadata if isinstance(post.metadata, dict) else {}
        return LoadedFile(path=path, content=post.content, frontmatter=dict(metadata))

    def try_load(self, path: Path) -> LoadedFile | None:
        """読み込みに失敗した場合は警告を出して None"""
        try:
            return self.load(path)
        except ContentLoadError as e:
            logger.warning(f"Skipping {path}: {e.message}")
            return None

    async def load_async(self, path: Path) -> LoadedFile | None:
        """非同期で読み込み（失敗時は None）"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.try_load, path)
