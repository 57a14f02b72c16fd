"""Hierarchy legality validator."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from shiori.content.tree import ContentElement
from shiori.domain.diagnostics import Diagnostic, DiagnosticCode, error
from shiori.domain.types import ElementKind, is_allowed_child
from shiori.validation.base import Validator


class HierarchyValidator(Validator):
    """階層構造を検査

    - ローカル検査: 要素の直下の子が許可された種別か
    - 関係検査: 要素の親がこの種別の子を許可するか

    子要素のキーは親要素に保持されているため、ローカル検査は
    バッチ内に存在する子のみを対象にする。
    """

    name = "hierarchy"

    def __init__(self) -> None:
        self._lookup: dict[str, ContentElement] = {}

    def validate(self, element: ContentElement) -> Iterator[Diagnostic]:
        for key in element.child_keys:
            child = self._lookup.get(key)
            if child is None or is_allowed_child(element.kind, child.kind):
                continue

            if element.kind == ElementKind.DIRECTORY and child.kind == ElementKind.CHAPTER:
                yield error(
                    DiagnosticCode.DIRECTORY_CONTAINS_CHAPTER,
                    f"Directory cannot contain Chapters. Found Chapter at {child.path}",
                    element.source,
                    suggestion="Change the nested folder to a directory or move it under a chapter",
                )
            else:
                yield error(
                    DiagnosticCode.INVALID_HIERARCHY,
                    f"{element.kind.value.capitalize()} cannot contain "
                    f"{child.kind.value}. Found {child.kind.value} at {child.path}",
                    element.source,
                )

    def validate_batch(self, elements: Sequence[ContentElement]) -> Iterator[Diagnostic]:
        self._lookup = {element.key: element for element in elements}
        try:
            yield from super().validate_batch(elements)
            yield from self._validate_parents(elements)
        finally:
            self._lookup = {}

    def _validate_parents(self, elements: Sequence[ContentElement]) -> Iterator[Diagnostic]:
        for element in elements:
            if element.parent_key is None:
                if element.kind != ElementKind.LOCALE:
                    yield error(
                        DiagnosticCode.INVALID_TYPE,
                        f"{element.kind.value.capitalize()} must be placed inside a locale",
                        element.source,
                    )
                continue

            parent = self._lookup.get(element.parent_key)
            if parent is None:
                continue

            if parent.kind == ElementKind.ARTICLE:
                yield error(
                    DiagnosticCode.INVALID_HIERARCHY,
                    f"Article cannot contain children. Path: {element.path}",
                    parent.source,
                )
            elif not is_allowed_child(parent.kind, element.kind):
                yield error(
                    DiagnosticCode.INVALID_PARENT_TYPE,
                    f"{element.kind.value.capitalize()} cannot be placed under "
                    f"{parent.kind.value.capitalize()}. Path: {element.path}",
                    element.source,
                )
