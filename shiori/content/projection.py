"""Tree projections.

ツリー要素を JSON 直列化可能な形に射影する。

- full: 自身 + 並び替え済みの子（チャプター内の入れ子チャプターはメタデータのみ、
  ディレクトリはサブツリー全体）
- shallow: 自身 + 直下の子のメタデータのみ
- ancestors: ロケールから直近の親までのメタデータ
- locale: ロケール + チャプターのみの階層
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from shiori.content.tree import ContentElement, ContentTree
from shiori.domain.slug import slug_sort_key
from shiori.domain.types import ElementKind

logger = logging.getLogger(__name__)


def bare(element: ContentElement) -> dict[str, Any]:
    """子を持たないメタデータ"""
    return element.metadata().to_dict()


def projected_children(tree: ContentTree, element: ContentElement) -> list[ContentElement]:
    """プロジェクションに含める子要素

    ロケールはチャプターのみ、ディレクトリ内のチャプターは警告してスキップする。
    """
    if element.kind == ElementKind.LOCALE:
        return tree.children(element, kinds=[ElementKind.CHAPTER])

    if element.kind == ElementKind.DIRECTORY:
        children = []
        for child in tree.children(element):
            if child.kind == ElementKind.CHAPTER:
                logger.warning(
                    f"Directory {element.path} contains chapter {child.name}; "
                    "skipping it in metadata"
                )
                continue
            children.append(child)
        return children

    if element.kind == ElementKind.CHAPTER:
        return tree.children(
            element,
            kinds=[ElementKind.CHAPTER, ElementKind.DIRECTORY, ElementKind.ARTICLE],
        )

    return []


def full_projection(tree: ContentTree, element: ContentElement) -> dict[str, Any]:
    """full プロジェクション"""
    if element.kind == ElementKind.LOCALE:
        return locale_projection(tree, element)

    data = bare(element)
    if element.kind == ElementKind.ARTICLE:
        return data

    children: list[dict[str, Any]] = []
    for child in projected_children(tree, element):
        if child.kind == ElementKind.DIRECTORY:
            children.append(full_projection(tree, child))
        else:
            children.append(bare(child))
    data["children"] = children
    return data


def shallow_projection(tree: ContentTree, element: ContentElement) -> dict[str, Any]:
    """shallow プロジェクション（1階層のみ）"""
    data = bare(element)
    if element.kind == ElementKind.ARTICLE:
        return data
    data["children"] = [bare(child) for child in projected_children(tree, element)]
    return data


def ancestors_projection(tree: ContentTree, element: ContentElement) -> list[dict[str, Any]]:
    """祖先チェーン（children フィールドなし）"""
    return [bare(ancestor) for ancestor in tree.ancestors(element)]


def locale_projection(tree: ContentTree, locale: ContentElement) -> dict[str, Any]:
    """ロケール + チャプターのみの階層"""
    data = bare(locale)
    data["children"] = [
        chapter_hierarchy(tree, chapter) for chapter in projected_children(tree, locale)
    ]
    return data


def chapter_hierarchy(tree: ContentTree, chapter: ContentElement) -> dict[str, Any]:
    """チャプターとその入れ子チャプターのみ"""
    data = bare(chapter)
    data["children"] = [
        chapter_hierarchy(tree, child)
        for child in tree.children(chapter, kinds=[ElementKind.CHAPTER])
    ]
    return data


def locale_list_projection(tree: ContentTree) -> list[dict[str, Any]]:
    """``locales.json`` の内容（ロケールコード順）"""
    return [bare(locale) for locale in tree.locales()]


# ============================================================
# JSON エントリの並び替え
# ============================================================


def entry_sort_key(entry: dict[str, Any]) -> tuple:
    """JSON エントリのソートキー（slug の最後のセグメント）"""
    slug = entry.get("slug") or []
    last = slug[-1] if slug else entry.get("locale", "")
    return (slug_sort_key(last), entry.get("type", ""))


def sort_entries(entries: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """JSON エントリをフラクショナルインデックス順に並べ替え"""
    return sorted(entries, key=entry_sort_key)
