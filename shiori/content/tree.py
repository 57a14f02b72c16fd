"""Content Tree Model.

要素はフラットなノードテーブルに格納し、親子関係はキー参照で表す。
ツリーは1回のスキャンごとに構築され、構築後は変更しない。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from shiori.content.metadata import ElementMetadata, build_metadata
from shiori.domain.content_path import ContentPath
from shiori.domain.diagnostics import Diagnostic, DiagnosticCode, error
from shiori.domain.slug import slug_sort_key
from shiori.domain.types import ElementKind, FileStats

logger = logging.getLogger(__name__)


@dataclass
class ContentElement:
    """ツリー要素

    Attributes:
        kind: 構造上の種別
        path: コンテンツパス
        source: 元となるMarkdownファイル（リポジトリ相対、``/`` 区切り）
        frontmatter: フロントマター
        stats: ファイル統計
        parent_key: 親要素のキー（ロケールは None）
        child_keys: 子要素のキー
    """

    kind: ElementKind
    path: ContentPath
    source: str
    frontmatter: dict[str, Any]
    stats: FileStats
    parent_key: str | None = None
    child_keys: list[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return self.source

    @property
    def name(self) -> str:
        """最後のパスセグメント（ロケールはロケールコード）"""
        return self.path.last_segment or self.path.locale

    @property
    def declared_type(self) -> Any:
        """フロントマターで宣言された type"""
        return self.frontmatter.get("type")

    @property
    def id(self) -> str:
        value = self.frontmatter.get("id")
        return value if isinstance(value, str) else ""

    def metadata(self) -> ElementMetadata:
        """メタデータレコードを構築"""
        return build_metadata(self.kind, self.frontmatter, self.stats, self.path)

    def validate_self(self) -> Iterator[Diagnostic]:
        """宣言された type と構造上の種別が一致するか検査"""
        declared = self.declared_type
        if self.kind == ElementKind.ARTICLE and declared is None:
            return
        if declared != self.kind.value:
            yield error(
                DiagnosticCode.INVALID_FRONTMATTER_TYPE,
                f'Expected type "{self.kind.value}" but frontmatter declares "{declared}"',
                self.source,
                title="Frontmatter type mismatch",
                suggestion=f'Set "type: {self.kind.value}" in the frontmatter',
            )


class ContentTree:
    """コンテンツツリー

    ロケール・チャプター・ディレクトリ・記事をフラットなテーブルで保持する。

    Example:
        >>> tree = ContentTree()
        >>> locale = tree.add(locale_element)
        >>> tree.add(chapter_element, parent=locale)
        >>> tree.children(locale)
    """

    def __init__(self) -> None:
        self._nodes: dict[str, ContentElement] = {}
        self._locale_keys: list[str] = []

    # ------------------------------------------------------------
    # 構築
    # ------------------------------------------------------------

    def add(
        self, element: ContentElement, parent: ContentElement | None = None
    ) -> ContentElement:
        """要素を追加

        Raises:
            ValueError: キーが重複している場合、またはロケール以外で親がない場合
        """
        if element.key in self._nodes:
            raise ValueError(f"Element already exists: {element.key}")

        if parent is None:
            if element.kind != ElementKind.LOCALE:
                raise ValueError(f"Only locales can be roots: {element.key}")
            self._locale_keys.append(element.key)
        else:
            element.parent_key = parent.key
            parent.child_keys.append(element.key)

        self._nodes[element.key] = element
        return element

    # ------------------------------------------------------------
    # 参照
    # ------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def __iter__(self) -> Iterator[ContentElement]:
        return iter(self._nodes.values())

    def get(self, key: str) -> ContentElement | None:
        return self._nodes.get(key)

    def find(self, path: ContentPath) -> ContentElement | None:
        """コンテンツパスで検索（フォルダを記事より優先）"""
        matches = [element for element in self._nodes.values() if element.path == path]
        if not matches:
            return None
        matches.sort(key=lambda element: element.kind == ElementKind.ARTICLE)
        return matches[0]

    def locales(self) -> list[ContentElement]:
        """ロケール一覧（ロケールコード順）"""
        locales = [self._nodes[key] for key in self._locale_keys]
        return sorted(locales, key=lambda element: element.path.locale)

    def parent(self, element: ContentElement) -> ContentElement | None:
        if element.parent_key is None:
            return None
        return self._nodes.get(element.parent_key)

    def children(
        self,
        element: ContentElement,
        kinds: Iterable[ElementKind] | None = None,
    ) -> list[ContentElement]:
        """子要素（フラクショナルインデックス順）

        Args:
            element: 親要素
            kinds: 指定した場合、この種別のみ
        """
        allowed = set(kinds) if kinds is not None else None
        children = [
            self._nodes[key]
            for key in element.child_keys
            if allowed is None or self._nodes[key].kind in allowed
        ]
        return sort_elements(children)

    def ancestors(self, element: ContentElement) -> list[ContentElement]:
        """祖先（ロケールから直近の親まで、上から順、自身は含まない）"""
        chain: list[ContentElement] = []
        current = self.parent(element)
        while current is not None:
            chain.append(current)
            current = self.parent(current)
        chain.reverse()
        return chain

    def locale_of(self, element: ContentElement) -> ContentElement | None:
        ancestors = self.ancestors(element)
        if ancestors:
            return ancestors[0]
        return element if element.kind == ElementKind.LOCALE else None

    def elements(self, kind: ElementKind | None = None) -> list[ContentElement]:
        """全要素（種別で絞り込み可）"""
        return [
            element
            for element in self._nodes.values()
            if kind is None or element.kind == kind
        ]

    def folders(self) -> list[ContentElement]:
        """チャプターとディレクトリ"""
        return [element for element in self._nodes.values() if element.kind.is_folder]

    def count_by_kind(self) -> dict[str, int]:
        counts = {kind.value: 0 for kind in ElementKind}
        for element in self._nodes.values():
            counts[element.kind.value] += 1
        return counts

    # ------------------------------------------------------------
    # 自己検証
    # ------------------------------------------------------------

    def validate(self, element: ContentElement | None = None) -> Iterator[Diagnostic]:
        """自己検査と子要素の再帰的な集約

        ``element`` を省略した場合はすべてのロケールから辿る。
        """
        roots = [element] if element is not None else self.locales()
        stack = list(reversed(roots))
        while stack:
            current = stack.pop()
            yield from current.validate_self()
            stack.extend(reversed(self.children(current)))


def sort_elements(elements: Iterable[ContentElement]) -> list[ContentElement]:
    """最後のスラッグセグメントの順序で並べ替え"""
    return sorted(
        elements,
        key=lambda element: (slug_sort_key(element.name), element.kind.value),
    )
