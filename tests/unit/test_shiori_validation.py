"""Validator and validation pipeline tests."""

from __future__ import annotations

import pytest

from shiori.content import ContentTree
from shiori.domain import ElementKind
from shiori.errors import ConfigurationError
from shiori.validation import (
    AVAILABLE_VALIDATORS,
    DiagnosticCode,
    DuplicateIdValidator,
    FrontmatterValidator,
    HierarchyValidator,
    NamingValidator,
    Severity,
    ValidationOptions,
    ValidationPipeline,
)
from shiori.domain.diagnostics import warning
from shiori.validation.base import Validator
from tests.content_factory import make_ulid

C = ElementKind.CHAPTER
D = ElementKind.DIRECTORY
A = ElementKind.ARTICLE


def codes(diagnostics):
    return [diagnostic.code for diagnostic in diagnostics]


class TestFrontmatterValidator:
    """FrontmatterValidator のテスト"""

    def test_valid(self, make_element):
        """正常なフロントマター"""
        element = make_element(C, segments=("1a-x",))
        assert list(FrontmatterValidator().validate(element)) == []

    def test_missing_fields(self, make_element):
        """必須項目の欠落"""
        element = make_element(C, segments=("1a-x",), frontmatter={})
        assert codes(FrontmatterValidator().validate(element)) == [
            DiagnosticCode.MISSING_REQUIRED_FIELD,
            DiagnosticCode.MISSING_REQUIRED_FIELD,
            DiagnosticCode.MISSING_REQUIRED_FIELD,
        ]

    def test_article_without_type(self, make_element):
        """記事は type 省略可"""
        element = make_element(
            A, segments=("1a-x", "1a-y"), frontmatter={"id": make_ulid(1), "title": "Y"}
        )
        assert list(FrontmatterValidator().validate(element)) == []

    def test_type_mismatch(self, make_element):
        """type の不一致"""
        element = make_element(
            D,
            segments=("1a-x",),
            frontmatter={"id": make_ulid(1), "title": "X", "type": "article"},
        )
        assert codes(FrontmatterValidator().validate(element)) == [
            DiagnosticCode.INVALID_FRONTMATTER_TYPE
        ]

    def test_invalid_field_types(self, make_element):
        """型の不正"""
        element = make_element(
            C,
            segments=("1a-x",),
            frontmatter={
                "id": make_ulid(1),
                "title": 42,
                "type": "chapter",
                "description": ["a"],
            },
        )
        assert codes(FrontmatterValidator().validate(element)) == [
            DiagnosticCode.INVALID_FIELD_TYPE,
            DiagnosticCode.INVALID_FIELD_TYPE,
        ]

    def test_invalid_id_format(self, make_element):
        """ULID 形式でない ID"""
        element = make_element(
            C,
            segments=("1a-x",),
            frontmatter={"id": "chapter-1", "title": "X", "type": "chapter"},
        )
        assert codes(FrontmatterValidator().validate(element)) == [
            DiagnosticCode.INVALID_ID_FORMAT
        ]

    def test_locale_aliases(self, make_element):
        """エイリアスは文字列のリスト"""
        element = make_element(
            ElementKind.LOCALE,
            frontmatter={
                "id": make_ulid(1),
                "title": "English",
                "type": "locale",
                "aliases": "en",
            },
        )
        assert codes(FrontmatterValidator().validate(element)) == [
            DiagnosticCode.INVALID_FIELD_TYPE
        ]


class TestNamingValidator:
    """NamingValidator のテスト"""

    @pytest.mark.parametrize(
        "segment,expected",
        [
            ("intro", DiagnosticCode.INVALID_FILE_NAME),
            ("1-intro", DiagnosticCode.INVALID_FRACTIONAL_INDEX),
            ("1a-Intro", DiagnosticCode.INVALID_SLUG_CHARACTERS),
            ("1a-intro-", DiagnosticCode.INVALID_SLUG_HYPHEN),
            ("1a-getting--started", DiagnosticCode.CONSECUTIVE_HYPHENS),
        ],
    )
    def test_distinct_codes(self, make_element, segment, expected):
        """違反ごとに異なるコード"""
        element = make_element(A, segments=("1a-x", segment))
        assert codes(NamingValidator().validate(element)) == [expected]

    def test_valid_segment(self, make_element):
        element = make_element(A, segments=("1a-x", "10aa-getting-started"))
        assert list(NamingValidator().validate(element)) == []

    def test_only_own_segment(self, make_element):
        """祖先のセグメントは検査しない"""
        element = make_element(A, segments=("basics", "1a-x"))
        assert list(NamingValidator().validate(element)) == []

    def test_multiple_violations(self, make_element):
        """独立した違反はすべて報告"""
        element = make_element(A, segments=("1a-x", "1-Bad-"))
        assert codes(NamingValidator().validate(element)) == [
            DiagnosticCode.INVALID_FRACTIONAL_INDEX,
            DiagnosticCode.INVALID_SLUG_CHARACTERS,
            DiagnosticCode.INVALID_SLUG_HYPHEN,
        ]

    def test_locale_format(self, make_element):
        """ロケールコード"""
        element = make_element(ElementKind.LOCALE, locale="english")
        assert codes(NamingValidator().validate(element)) == [
            DiagnosticCode.INVALID_LOCALE_FORMAT
        ]


class TestHierarchyValidator:
    """HierarchyValidator のテスト"""

    def test_valid_tree(self, build_tree):
        tree = build_tree("en-US", [(C, ("1a-c",)), (D, ("1a-c", "1a-d")), (A, ("1a-c", "1a-d", "1a-a"))])
        assert list(HierarchyValidator().validate_batch(list(tree))) == []

    def test_directory_contains_chapter(self, build_tree):
        """ディレクトリ内のチャプター"""
        tree = build_tree(
            "en-US",
            [(C, ("1a-c",)), (D, ("1a-c", "1a-d")), (C, ("1a-c", "1a-d", "1a-bad"))],
        )
        diagnostics = list(HierarchyValidator().validate_batch(list(tree)))
        assert DiagnosticCode.DIRECTORY_CONTAINS_CHAPTER in codes(diagnostics)
        flagged = [d for d in diagnostics if d.code == DiagnosticCode.DIRECTORY_CONTAINS_CHAPTER]
        assert flagged[0].path == "en-US/1a-c/1a-d/index.md"
        assert DiagnosticCode.INVALID_PARENT_TYPE in codes(diagnostics)

    def test_locale_contains_article(self, make_element):
        """ロケール直下の記事"""
        tree = ContentTree()
        locale = tree.add(make_element(ElementKind.LOCALE))
        tree.add(make_element(A, segments=("1a-stray",), number=2), parent=locale)
        assert set(codes(HierarchyValidator().validate_batch(list(tree)))) == {
            DiagnosticCode.INVALID_HIERARCHY,
            DiagnosticCode.INVALID_PARENT_TYPE,
        }

    def test_orphan(self, make_element):
        """ロケール外の要素"""
        element = make_element(C, segments=("1a-x",))
        assert codes(HierarchyValidator().validate_batch([element])) == [
            DiagnosticCode.INVALID_TYPE
        ]


class TestDuplicateIdValidator:
    """DuplicateIdValidator のテスト"""

    def test_duplicates(self, make_element):
        """出現ごとに1件、すべてのパスを列挙"""
        first = make_element(A, segments=("1a-x", "1a-a"), number=5)
        second = make_element(A, segments=("1a-x", "2a-b"), number=5)
        unique = make_element(A, segments=("1a-x", "3a-c"), number=6)
        diagnostics = list(DuplicateIdValidator().validate_batch([first, second, unique]))
        assert codes(diagnostics) == [DiagnosticCode.DUPLICATE_ID] * 2
        assert {d.path for d in diagnostics} == {first.source, second.source}
        for diagnostic in diagnostics:
            assert first.source in diagnostic.message
            assert second.source in diagnostic.message

    def test_duplicates_across_locales_and_depths(self, make_element):
        """ロケールや階層が異なっても出現ごとに1件"""
        chapter = make_element(C, segments=("1a-x",), number=7)
        article = make_element(A, locale="uk-UA", segments=("1a-y", "1a-z", "1a-w"), number=7)
        locale = make_element(ElementKind.LOCALE, locale="de-DE", number=7)
        other = make_element(A, locale="uk-UA", segments=("1a-y", "2a-v"), number=8)
        diagnostics = list(
            DuplicateIdValidator().validate_batch([chapter, article, locale, other])
        )
        assert codes(diagnostics) == [DiagnosticCode.DUPLICATE_ID] * 3
        assert {d.path for d in diagnostics} == {chapter.source, article.source, locale.source}

    def test_empty_ids_ignored(self, make_element):
        first = make_element(A, segments=("1a-x", "1a-a"), frontmatter={"title": "a"})
        second = make_element(A, segments=("1a-x", "2a-b"), frontmatter={"title": "b"})
        assert list(DuplicateIdValidator().validate_batch([first, second])) == []


class WarnEverything(Validator):
    """全要素に警告を出すテスト用バリデータ"""

    name = "warn_everything"

    def validate(self, element):
        yield warning(DiagnosticCode.INVALID_SLUG_HYPHEN, "warn", element.source)


class TestValidationPipeline:
    """ValidationPipeline のテスト"""

    @pytest.fixture
    def broken_tree(self, build_tree):
        return build_tree(
            "en-US",
            [(C, ("intro",)), (A, ("intro", "bad_name")), (A, ("intro", "Also-Bad"))],
        )

    def test_available(self):
        assert AVAILABLE_VALIDATORS == ("frontmatter", "naming", "hierarchy", "duplicate_id")

    def test_valid_tree(self, build_tree):
        tree = build_tree("en-US", [(C, ("1a-c",)), (A, ("1a-c", "1a-a"))])
        result = ValidationPipeline().run(tree)
        assert result.is_valid
        assert result.stats.checked["article"] == 1
        assert result.to_dict()["valid"] is True

    def test_collects_all(self, broken_tree):
        """途中で止めない"""
        result = ValidationPipeline().run(broken_tree)
        assert result.error_count == 3
        assert not result.truncated

    def test_max_errors(self, broken_tree):
        """上限で打ち切り"""
        result = ValidationPipeline(options=ValidationOptions(max_errors=2)).run(broken_tree)
        assert result.error_count == 2
        assert result.truncated

    def test_enabled_validators(self, broken_tree):
        """有効なバリデータのみ実行"""
        pipeline = ValidationPipeline(
            options=ValidationOptions(enabled_validators=["frontmatter", "duplicate_id"])
        )
        assert pipeline.names == ["frontmatter", "duplicate_id"]
        assert pipeline.run(broken_tree).is_valid

    def test_unknown_validator(self):
        with pytest.raises(ConfigurationError):
            ValidationPipeline(options=ValidationOptions(enabled_validators=["spelling"]))

    def test_strict_mode(self, build_tree):
        """strict では警告をエラーに昇格"""
        tree = build_tree("en-US", [(C, ("1a-c",))])
        lenient = ValidationPipeline(validators=[WarnEverything()]).run(tree)
        assert lenient.is_valid
        assert len(lenient.warnings) == 2

        strict = ValidationPipeline(
            validators=[WarnEverything()], options=ValidationOptions(strict_mode=True)
        ).run(tree)
        assert strict.error_count == 2
        assert all(d.severity == Severity.ERROR for d in strict.errors)

    def test_add_and_remove(self):
        pipeline = ValidationPipeline()
        assert pipeline.remove("naming")
        assert not pipeline.remove("naming")
        pipeline.add(WarnEverything())
        assert pipeline.names[-1] == "warn_everything"
