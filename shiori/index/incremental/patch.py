"""In-place patch helpers for derived JSON documents."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from shiori.content.projection import sort_entries


def last_segment(entry: dict[str, Any]) -> str | None:
    slug = entry.get("slug") or []
    return slug[-1] if slug else None


def remove_child(document: dict[str, Any], name: str) -> bool:
    """最後のスラッグセグメントが一致する子を取り除く"""
    children = document.get("children")
    if not isinstance(children, list):
        return False
    kept = [child for child in children if last_segment(child) != name]
    if len(kept) == len(children):
        return False
    document["children"] = kept
    return True


def upsert_child(document: dict[str, Any], entry: dict[str, Any]) -> None:
    """子を置き換え、なければ追加してから並べ替える"""
    children = [
        child
        for child in document.get("children") or []
        if last_segment(child) != last_segment(entry)
    ]
    children.append(entry)
    document["children"] = sort_entries(children)


def with_children(header: dict[str, Any], previous: dict[str, Any] | None) -> dict[str, Any]:
    """ヘッダーに既存の children をそのまま付ける"""
    patched = dict(header)
    if previous is not None and "children" in previous:
        patched["children"] = previous["children"]
    return patched


def find_entry(document: dict[str, Any], slug: Sequence[str]) -> dict[str, Any] | None:
    """ネストした children をたどって slug が一致するエントリを探す"""
    current = document
    depth = len(current.get("slug") or [])
    target = list(slug)
    while True:
        if (current.get("slug") or []) == target:
            return current
        depth += 1
        prefix = target[:depth]
        if len(prefix) < depth:
            return None
        children = current.get("children")
        if not isinstance(children, list):
            return None
        for child in children:
            if (child.get("slug") or []) == prefix:
                current = child
                break
        else:
            return None


def replace_header(
    document: dict[str, Any], slug: Sequence[str], header: dict[str, Any]
) -> bool:
    """slug が一致するエントリのヘッダーを置き換える（children は保持）

    ドキュメント自身が一致する場合も対象にする。
    """
    parent = None
    current = document
    depth = len(current.get("slug") or [])
    target = list(slug)
    while (current.get("slug") or []) != target:
        depth += 1
        if depth > len(target):
            return False
        children = current.get("children")
        if not isinstance(children, list):
            return False
        for child in children:
            if (child.get("slug") or []) == target[:depth]:
                parent, current = current, child
                break
        else:
            return False

    patched = with_children(header, current)
    if parent is None:
        document.clear()
        document.update(patched)
    else:
        parent["children"] = [
            patched if child is current else child for child in parent["children"]
        ]
    return True


def replace_in_list(entries: list[dict[str, Any]], slug: Sequence[str], header: dict[str, Any]) -> bool:
    """リスト中の slug が一致するエントリを置き換える"""
    target = list(slug)
    for index, entry in enumerate(entries):
        if (entry.get("slug") or []) == target and entry.get("locale") == header.get("locale"):
            entries[index] = with_children(header, entry)
            return True
    return False
