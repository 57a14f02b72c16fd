"""Frontmatter shape validator."""

from __future__ import annotations

from collections.abc import Iterator

from shiori.content.tree import ContentElement
from shiori.domain.diagnostics import Diagnostic, DiagnosticCode, error
from shiori.domain.types import ElementKind
from shiori.domain.ulid import Ulid
from shiori.validation.base import Validator

OPTIONAL_STRING_FIELDS = ("description", "cover_url")


class FrontmatterValidator(Validator):
    """フロントマターの形を検査

    - ``title``: 空でない文字列
    - ``type``: 構造上の種別と一致（記事は省略可）
    - ``id``: ULID 形式の文字列
    - ``description`` / ``cover_url``: 指定時は文字列
    - ``aliases`` (ロケールのみ): 指定時は文字列のリスト
    """

    name = "frontmatter"

    def validate(self, element: ContentElement) -> Iterator[Diagnostic]:
        frontmatter = element.frontmatter
        source = element.source

        yield from self._check_type(element)

        title = frontmatter.get("title")
        if title is None or (isinstance(title, str) and not title.strip()):
            yield error(
                DiagnosticCode.MISSING_REQUIRED_FIELD,
                'Missing required field "title"',
                source,
                suggestion='Add a non-empty "title" to the frontmatter',
            )
        elif not isinstance(title, str):
            yield error(
                DiagnosticCode.INVALID_FIELD_TYPE,
                f'Field "title" must be a string, got {type(title).__name__}',
                source,
            )

        identifier = frontmatter.get("id")
        if identifier is None or identifier == "":
            yield error(
                DiagnosticCode.MISSING_REQUIRED_FIELD,
                'Missing required field "id"',
                source,
                suggestion='Add a ULID "id" to the frontmatter',
            )
        elif not isinstance(identifier, str):
            yield error(
                DiagnosticCode.INVALID_FIELD_TYPE,
                f'Field "id" must be a string, got {type(identifier).__name__}',
                source,
            )
        elif not Ulid.is_valid(identifier):
            yield error(
                DiagnosticCode.INVALID_ID_FORMAT,
                f'Invalid ULID format: "{identifier}". Expected 26 base32 characters',
                source,
            )

        for key in OPTIONAL_STRING_FIELDS:
            value = frontmatter.get(key)
            if value is not None and not isinstance(value, str):
                yield error(
                    DiagnosticCode.INVALID_FIELD_TYPE,
                    f'Field "{key}" must be a string, got {type(value).__name__}',
                    source,
                )

        if element.kind == ElementKind.LOCALE:
            aliases = frontmatter.get("aliases")
            if aliases is not None and not (
                isinstance(aliases, list) and all(isinstance(a, str) for a in aliases)
            ):
                yield error(
                    DiagnosticCode.INVALID_FIELD_TYPE,
                    'Field "aliases" must be a list of strings',
                    source,
                )

    def _check_type(self, element: ContentElement) -> Iterator[Diagnostic]:
        declared = element.declared_type
        expected = element.kind.value

        if declared is None:
            if element.kind != ElementKind.ARTICLE:
                yield error(
                    DiagnosticCode.MISSING_REQUIRED_FIELD,
                    'Missing required field "type"',
                    element.source,
                    suggestion=f'Add "type: {expected}" to the frontmatter',
                )
            return

        if declared != expected:
            yield error(
                DiagnosticCode.INVALID_FRONTMATTER_TYPE,
                f'Expected type "{expected}" but frontmatter declares "{declared}"',
                element.source,
                title="Frontmatter type mismatch",
            )
