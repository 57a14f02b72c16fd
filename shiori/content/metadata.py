"""Metadata records.

各要素種別ごとのメタデータレコードと、フロントマター + ファイル統計から
フィールド単位で組み立てるビルダー。

JSON のキー順は固定:
``id, title, type, description?, cover_url?, aliases?, locale, slug,
created_at, updated_at, sha, size`` （``children`` はプロジェクション側で付与）
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar

from shiori.domain.content_path import ContentPath
from shiori.domain.types import ElementKind, FileStats


@dataclass(frozen=True)
class ElementMetadata:
    """全種別共通のメタデータ

    Attributes:
        id: ULID
        title: タイトル
        locale: ロケールコード
        slug: ロケールを除くパスセグメント
        created_at: 作成日時
        updated_at: 更新日時
        sha: コンテンツハッシュ
        size: バイトサイズ
        description: 説明（任意）
        cover_url: カバー画像（任意）
    """

    kind: ClassVar[ElementKind]

    id: str
    title: str
    locale: str
    slug: list[str]
    created_at: datetime
    updated_at: datetime
    sha: str
    size: int
    description: str | None = None
    cover_url: str | None = None

    def _extra_fields(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        """JSON用の辞書に変換（キー順固定、未設定の任意項目は省略）"""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "type": self.kind.value,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.cover_url is not None:
            data["cover_url"] = self.cover_url
        data.update(self._extra_fields())
        data["locale"] = self.locale
        data["slug"] = list(self.slug)
        data["created_at"] = self.created_at.isoformat()
        data["updated_at"] = self.updated_at.isoformat()
        data["sha"] = self.sha
        data["size"] = self.size
        return data


@dataclass(frozen=True)
class LocaleMetadata(ElementMetadata):
    """ロケールメタデータ"""

    kind: ClassVar[ElementKind] = ElementKind.LOCALE

    aliases: list[str] | None = field(default=None)

    def _extra_fields(self) -> dict[str, Any]:
        if self.aliases is None:
            return {}
        return {"aliases": list(self.aliases)}


@dataclass(frozen=True)
class ChapterMetadata(ElementMetadata):
    """チャプターメタデータ"""

    kind: ClassVar[ElementKind] = ElementKind.CHAPTER


@dataclass(frozen=True)
class DirectoryMetadata(ElementMetadata):
    """ディレクトリメタデータ"""

    kind: ClassVar[ElementKind] = ElementKind.DIRECTORY


@dataclass(frozen=True)
class ArticleMetadata(ElementMetadata):
    """記事メタデータ"""

    kind: ClassVar[ElementKind] = ElementKind.ARTICLE


# ============================================================
# Builders
# ============================================================


def _text(frontmatter: Mapping[str, Any], key: str) -> str:
    value = frontmatter.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_text(frontmatter: Mapping[str, Any], key: str) -> str | None:
    value = frontmatter.get(key)
    return value if isinstance(value, str) else None


def build_locale_metadata(
    frontmatter: Mapping[str, Any], stats: FileStats, locale: str
) -> LocaleMetadata:
    """ロケールメタデータを構築"""
    aliases = frontmatter.get("aliases")
    if isinstance(aliases, list):
        aliases = [str(alias) for alias in aliases]
    else:
        aliases = None

    return LocaleMetadata(
        id=_text(frontmatter, "id"),
        title=_text(frontmatter, "title"),
        description=_optional_text(frontmatter, "description"),
        cover_url=_optional_text(frontmatter, "cover_url"),
        aliases=aliases,
        locale=locale,
        slug=[],
        created_at=stats.created_at,
        updated_at=stats.updated_at,
        sha=stats.sha,
        size=stats.size,
    )


def build_chapter_metadata(
    frontmatter: Mapping[str, Any], stats: FileStats, path: ContentPath
) -> ChapterMetadata:
    """チャプターメタデータを構築"""
    return ChapterMetadata(
        id=_text(frontmatter, "id"),
        title=_text(frontmatter, "title"),
        description=_optional_text(frontmatter, "description"),
        cover_url=_optional_text(frontmatter, "cover_url"),
        locale=path.locale,
        slug=path.slug,
        created_at=stats.created_at,
        updated_at=stats.updated_at,
        sha=stats.sha,
        size=stats.size,
    )


def build_directory_metadata(
    frontmatter: Mapping[str, Any], stats: FileStats, path: ContentPath
) -> DirectoryMetadata:
    """ディレクトリメタデータを構築"""
    return DirectoryMetadata(
        id=_text(frontmatter, "id"),
        title=_text(frontmatter, "title"),
        description=_optional_text(frontmatter, "description"),
        cover_url=_optional_text(frontmatter, "cover_url"),
        locale=path.locale,
        slug=path.slug,
        created_at=stats.created_at,
        updated_at=stats.updated_at,
        sha=stats.sha,
        size=stats.size,
    )


def build_article_metadata(
    frontmatter: Mapping[str, Any], stats: FileStats, path: ContentPath
) -> ArticleMetadata:
    """記事メタデータを構築"""
    return ArticleMetadata(
        id=_text(frontmatter, "id"),
        title=_text(frontmatter, "title"),
        description=_optional_text(frontmatter, "description"),
        cover_url=_optional_text(frontmatter, "cover_url"),
        locale=path.locale,
        slug=path.slug,
        created_at=stats.created_at,
        updated_at=stats.updated_at,
        sha=stats.sha,
        size=stats.size,
    )


def build_metadata(
    kind: ElementKind,
    frontmatter: Mapping[str, Any],
    stats: FileStats,
    path: ContentPath,
) -> ElementMetadata:
    """種別に応じたビルダーで構築"""
    if kind == ElementKind.LOCALE:
        return build_locale_metadata(frontmatter, stats, path.locale)
    if kind == ElementKind.CHAPTER:
        return build_chapter_metadata(frontmatter, stats, path)
    if kind == ElementKind.DIRECTORY:
        return build_directory_metadata(frontmatter, stats, path)
    return build_article_metadata(frontmatter, stats, path)
