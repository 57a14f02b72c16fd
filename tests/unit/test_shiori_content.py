"""Content tree, metadata and projection tests."""

from __future__ import annotations

import logging

import pytest

from shiori.content import (
    ChapterMetadata,
    ContentTree,
    LocaleMetadata,
    ancestors_projection,
    build_metadata,
    full_projection,
    locale_list_projection,
    locale_projection,
    shallow_projection,
    sort_entries,
)
from shiori.domain import ContentPath, DiagnosticCode, ElementKind

from tests.content_factory import FIXED_TIME, fixed_stats, make_ulid

C = ElementKind.CHAPTER
D = ElementKind.DIRECTORY
A = ElementKind.ARTICLE


class TestMetadata:
    """メタデータレコードのテスト"""

    def test_key_order(self):
        """キー順は固定"""
        frontmatter = {
            "cover_url": "cover.png",
            "type": "chapter",
            "description": "About",
            "title": "Intro",
            "id": make_ulid(1),
        }
        metadata = build_metadata(
            C, frontmatter, fixed_stats(), ContentPath("en-US", ("1a-intro",))
        )
        assert isinstance(metadata, ChapterMetadata)
        assert list(metadata.to_dict()) == [
            "id",
            "title",
            "type",
            "description",
            "cover_url",
            "locale",
            "slug",
            "created_at",
            "updated_at",
            "sha",
            "size",
        ]

    def test_optional_fields_omitted(self):
        """任意項目は未設定なら出力しない"""
        metadata = build_metadata(
            A,
            {"id": make_ulid(1), "title": "Page"},
            fixed_stats(),
            ContentPath("en-US", ("1a-x", "1a-page")),
        )
        data = metadata.to_dict()
        assert data["type"] == "article"
        assert "description" not in data
        assert "cover_url" not in data
        assert data["slug"] == ["1a-x", "1a-page"]
        assert data["created_at"] == FIXED_TIME.isoformat()
        assert data["sha"] == "abc123"
        assert data["size"] == 42

    def test_locale_aliases(self):
        """ロケールのエイリアスは type の後、locale の前"""
        metadata = build_metadata(
            ElementKind.LOCALE,
            {"id": make_ulid(1), "title": "English", "aliases": ["en", "eng"]},
            fixed_stats(),
            ContentPath.from_locale("en-US"),
        )
        assert isinstance(metadata, LocaleMetadata)
        data = metadata.to_dict()
        keys = list(data)
        assert keys.index("aliases") == keys.index("type") + 1
        assert data["aliases"] == ["en", "eng"]
        assert data["slug"] == []
        assert data["locale"] == "en-US"


class TestContentTree:
    """ContentTree のテスト"""

    def test_add_and_children_sorted(self, build_tree):
        """子要素はフラクショナルインデックス順"""
        tree = build_tree(
            "en-US",
            [
                (C, ("2a-second",)),
                (C, ("1a-first",)),
                (C, ("1aa-zeroth",)),
            ],
        )
        locale = tree.locales()[0]
        assert [child.name for child in tree.children(locale)] == [
            "1aa-zeroth",
            "1a-first",
            "2a-second",
        ]

    def test_children_by_kind(self, build_tree):
        """種別で絞り込み"""
        tree = build_tree(
            "en-US",
            [(C, ("1a-c",)), (A, ("1a-c", "1a-a")), (D, ("1a-c", "2a-d"))],
        )
        chapter = tree.find(ContentPath("en-US", ("1a-c",)))
        assert [child.kind for child in tree.children(chapter)] == [A, D]
        assert [child.name for child in tree.children(chapter, kinds=[D])] == ["2a-d"]

    def test_duplicate_key_rejected(self, make_element):
        """同じキーは追加できない"""
        tree = ContentTree()
        tree.add(make_element(ElementKind.LOCALE))
        with pytest.raises(ValueError):
            tree.add(make_element(ElementKind.LOCALE))

    def test_non_locale_root_rejected(self, make_element):
        """ロケール以外はルートにできない"""
        tree = ContentTree()
        with pytest.raises(ValueError):
            tree.add(make_element(C, segments=("1a-x",)))

    def test_ancestors(self, build_tree):
        """ロケールから直近の親まで"""
        tree = build_tree(
            "en-US",
            [(C, ("1a-a",)), (D, ("1a-a", "1a-b")), (A, ("1a-a", "1a-b", "1a-c"))],
        )
        article = tree.find(ContentPath("en-US", ("1a-a", "1a-b", "1a-c")))
        assert [ancestor.path.key for ancestor in tree.ancestors(article)] == [
            "en-US",
            "en-US/1a-a",
            "en-US/1a-a/1a-b",
        ]
        assert tree.locale_of(article).kind == ElementKind.LOCALE
        assert tree.ancestors(tree.locales()[0]) == []

    def test_locales_sorted(self, make_element):
        """ロケールはコード順"""
        tree = ContentTree()
        tree.add(make_element(ElementKind.LOCALE, "uk-UA", number=1))
        tree.add(make_element(ElementKind.LOCALE, "en-US", number=2))
        assert [locale.path.locale for locale in tree.locales()] == ["en-US", "uk-UA"]

    def test_find_prefers_folder(self, build_tree):
        """同じパスならフォルダを優先"""
        tree = build_tree("en-US", [(C, ("1a-x",)), (A, ("1a-x",))])
        assert tree.find(ContentPath("en-US", ("1a-x",))).kind == C
        assert tree.find(ContentPath("en-US", ("9z-missing",))) is None

    def test_counts(self, build_tree):
        """種別ごとの件数"""
        tree = build_tree("en-US", [(C, ("1a-a",)), (A, ("1a-a", "1a-b"))])
        assert tree.count_by_kind() == {
            "locale": 1,
            "chapter": 1,
            "directory": 0,
            "article": 1,
        }
        assert len(tree) == 3
        assert len(tree.folders()) == 1

    def test_validate_type_mismatch(self, make_element):
        """宣言された type と構造の不一致"""
        tree = ContentTree()
        locale = tree.add(make_element(ElementKind.LOCALE))
        tree.add(
            make_element(
                C,
                segments=("1a-x",),
                frontmatter={"id": make_ulid(2), "title": "X", "type": "directory"},
            ),
            parent=locale,
        )
        diagnostics = list(tree.validate())
        assert [diagnostic.code for diagnostic in diagnostics] == [
            DiagnosticCode.INVALID_FRONTMATTER_TYPE
        ]
        assert diagnostics[0].path == "en-US/1a-x/index.md"

    def test_article_may_omit_type(self, make_element):
        """記事は type を省略できる"""
        element = make_element(
            A, segments=("1a-x", "1a-y"), frontmatter={"id": make_ulid(3), "title": "Y"}
        )
        assert list(element.validate_self()) == []


class TestProjections:
    """プロジェクションのテスト"""

    @pytest.fixture
    def tree(self, build_tree):
        return build_tree(
            "en-US",
            [
                (C, ("1a-csharp",)),
                (A, ("1a-csharp", "2a-intro")),
                (C, ("1a-csharp", "1a-basics")),
                (A, ("1a-csharp", "1a-basics", "1a-vars")),
                (D, ("1a-csharp", "3a-tools")),
                (A, ("1a-csharp", "3a-tools", "1a-ide")),
                (D, ("1a-csharp", "3a-tools", "2a-plugins")),
                (A, ("1a-csharp", "3a-tools", "2a-plugins", "1a-lint")),
                (C, ("2a-python",)),
            ],
        )

    def test_full_chapter(self, tree):
        """チャプターの full: 入れ子チャプターは浅く、ディレクトリは再帰"""
        chapter = tree.find(ContentPath("en-US", ("1a-csharp",)))
        data = full_projection(tree, chapter)
        names = [child["slug"][-1] for child in data["children"]]
        assert names == ["1a-basics", "2a-intro", "3a-tools"]

        basics, intro, tools = data["children"]
        assert "children" not in basics
        assert "children" not in intro
        assert [child["slug"][-1] for child in tools["children"]] == ["1a-ide", "2a-plugins"]
        assert tools["children"][1]["children"][0]["slug"][-1] == "1a-lint"

    def test_shallow_chapter(self, tree):
        """shallow は直下のみ"""
        chapter = tree.find(ContentPath("en-US", ("1a-csharp",)))
        data = shallow_projection(tree, chapter)
        assert all("children" not in child for child in data["children"])
        assert len(data["children"]) == 3

    def test_locale_hierarchy(self, tree):
        """ロケールはチャプターのみの階層"""
        data = locale_projection(tree, tree.locales()[0])
        assert data["type"] == "locale"
        assert [child["slug"] for child in data["children"]] == [["1a-csharp"], ["2a-python"]]
        csharp = data["children"][0]
        assert [child["slug"][-1] for child in csharp["children"]] == ["1a-basics"]
        assert csharp["children"][0]["children"] == []
        assert data["children"][1]["children"] == []

    def test_ancestors(self, tree):
        """祖先チェーン"""
        plugins = tree.find(ContentPath("en-US", ("1a-csharp", "3a-tools", "2a-plugins")))
        chain = ancestors_projection(tree, plugins)
        assert [entry["type"] for entry in chain] == ["locale", "chapter", "directory"]
        assert all("children" not in entry for entry in chain)

    def test_locale_list(self, tree):
        """locales.json"""
        entries = locale_list_projection(tree)
        assert len(entries) == 1
        assert entries[0]["locale"] == "en-US"
        assert "children" not in entries[0]

    def test_directory_chapter_skipped(self, build_tree, caplog):
        """ディレクトリ内のチャプターは警告して除外"""
        tree = build_tree(
            "en-US",
            [(C, ("1a-c",)), (D, ("1a-c", "1a-d")), (C, ("1a-c", "1a-d", "1a-bad"))],
        )
        directory = tree.find(ContentPath("en-US", ("1a-c", "1a-d")))
        with caplog.at_level(logging.WARNING):
            data = shallow_projection(tree, directory)
        assert data["children"] == []
        assert "1a-bad" in caplog.text

    def test_sort_entries(self):
        """JSONエントリの並び替え"""
        entries = [
            {"slug": ["x", "3a-z"], "type": "article"},
            {"slug": ["x", "1a-x"], "type": "article"},
            {"slug": ["x", "2b-advanced"], "type": "article"},
        ]
        assert [entry["slug"][-1] for entry in sort_entries(entries)] == [
            "1a-x",
            "2b-advanced",
            "3a-z",
        ]
