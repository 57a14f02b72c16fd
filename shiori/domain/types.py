"""Domain value types shared by the tree model, validators and index builders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ElementKind(str, Enum):
    """要素種別

    Attributes:
        LOCALE: ロケール（``locale.md``）
        CHAPTER: チャプター（``index.md`` の type が chapter）
        DIRECTORY: ディレクトリ（``index.md`` の type が directory）
        ARTICLE: 記事（その他の ``.md``）
    """

    LOCALE = "locale"
    CHAPTER = "chapter"
    DIRECTORY = "directory"
    ARTICLE = "article"

    @property
    def is_folder(self) -> bool:
        """``index.md`` を持つフォルダ種別か"""
        return self in (ElementKind.CHAPTER, ElementKind.DIRECTORY)


ALLOWED_CHILDREN: dict[ElementKind, frozenset[ElementKind]] = {
    ElementKind.LOCALE: frozenset({ElementKind.CHAPTER}),
    ElementKind.CHAPTER: frozenset(
        {ElementKind.CHAPTER, ElementKind.DIRECTORY, ElementKind.ARTICLE}
    ),
    ElementKind.DIRECTORY: frozenset({ElementKind.DIRECTORY, ElementKind.ARTICLE}),
    ElementKind.ARTICLE: frozenset(),
}


def is_allowed_child(parent: ElementKind, child: ElementKind) -> bool:
    """親種別が子種別を許可するか"""
    return child in ALLOWED_CHILDREN[parent]


@dataclass(frozen=True)
class FileStats:
    """ファイル統計（リビジョン管理由来）

    Attributes:
        sha: コンテンツハッシュ（未コミットの場合は空文字）
        size: バイトサイズ
        created_at: 最初のコミット日時
        updated_at: 最後のコミット日時
    """

    sha: str
    size: int
    created_at: datetime
    updated_at: datetime
