"""Shared fixtures: on-disk content repositories and stubbed file stats."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from shiori.content.tree import ContentElement, ContentTree
from shiori.domain.content_path import ContentPath
from shiori.domain.types import ElementKind
from tests.content_factory import ContentRepo, fixed_stats, make_ulid


@pytest.fixture
def stats_provider():
    """git を使わない固定のファイル統計"""
    provider = MagicMock()
    provider.get_stats.return_value = fixed_stats()
    return provider


@pytest.fixture
def content_repo(tmp_path):
    """空のコンテンツリポジトリ"""
    return ContentRepo(tmp_path)


@pytest.fixture
def sample_repo(content_repo):
    """2ロケールのサンプルリポジトリ

    en-US/
        1a-csharp/ (chapter)
            1a-intro.md
            1a-basics/ (chapter)
                1a-variables.md
            2a-tools/ (directory)
                1a-ide.md
                1a-plugins/ (directory)
                    1a-lint.md
        2a-python/ (chapter)
    uk-UA/
        1a-start/ (chapter)
    """
    repo = content_repo
    repo.locale("en-US", "English", aliases=["en"])
    repo.chapter("en-US/1a-csharp", "C#")
    repo.article("en-US/1a-csharp/1a-intro.md", "Intro")
    repo.chapter("en-US/1a-csharp/1a-basics", "Basics")
    repo.article("en-US/1a-csharp/1a-basics/1a-variables.md", "Variables")
    repo.directory("en-US/1a-csharp/2a-tools", "Tools")
    repo.article("en-US/1a-csharp/2a-tools/1a-ide.md", "IDE")
    repo.directory("en-US/1a-csharp/2a-tools/1a-plugins", "Plugins")
    repo.article("en-US/1a-csharp/2a-tools/1a-plugins/1a-lint.md", "Lint")
    repo.chapter("en-US/2a-python", "Python")
    repo.locale("uk-UA", "Українська")
    repo.chapter("uk-UA/1a-start", "Початок")
    return repo


@pytest.fixture
def make_element():
    """ディスクを使わずに要素を作るファクトリ"""

    def _create(
        kind: ElementKind,
        locale: str = "en-US",
        segments: tuple[str, ...] = (),
        frontmatter: dict[str, Any] | None = None,
        number: int = 1,
    ) -> ContentElement:
        if frontmatter is None:
            frontmatter = {"id": make_ulid(number), "title": "Title", "type": kind.value}
        path = ContentPath(locale, tuple(segments))
        if kind == ElementKind.LOCALE:
            source = f"{locale}/locale.md"
        elif kind == ElementKind.ARTICLE:
            source = "/".join([locale, *segments]) + ".md"
        else:
            source = "/".join([locale, *segments, "index.md"])
        return ContentElement(
            kind=kind,
            path=path,
            source=source,
            frontmatter=frontmatter,
            stats=fixed_stats(),
        )

    return _create


@pytest.fixture
def build_tree(make_element):
    """(kind, segments) のリストからツリーを作るファクトリ

    各要素の親は最長一致のフォルダ（なければロケール）。
    """

    def _build(locale: str, specs: list[tuple[ElementKind, tuple[str, ...]]]) -> ContentTree:
        tree = ContentTree()
        root = tree.add(make_element(ElementKind.LOCALE, locale, (), number=1))
        folders: dict[tuple[str, ...], ContentElement] = {(): root}
        for number, (kind, segments) in enumerate(specs, start=2):
            element = make_element(kind, locale, segments, number=number)
            parent = folders[tuple(segments[:-1])]
            tree.add(element, parent=parent)
            if kind != ElementKind.ARTICLE:
                folders[tuple(segments)] = element
        return tree

    return _build
