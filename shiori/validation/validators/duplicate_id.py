"""Identifier uniqueness validator."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator, Sequence

from shiori.content.tree import ContentElement
from shiori.domain.diagnostics import Diagnostic, DiagnosticCode, error
from shiori.validation.base import Validator


class DuplicateIdValidator(Validator):
    """ID の一意性をリポジトリ全体で検査

    重複した ID の出現ごとに1件の診断を出し、衝突しているすべてのパスを列挙する。
    """

    name = "duplicate_id"

    def validate(self, element: ContentElement) -> Iterator[Diagnostic]:
        return iter(())

    def validate_batch(self, elements: Sequence[ContentElement]) -> Iterator[Diagnostic]:
        occurrences: dict[str, list[ContentElement]] = defaultdict(list)
        for element in elements:
            if element.id:
                occurrences[element.id].append(element)

        for identifier, group in occurrences.items():
            if len(group) < 2:
                continue
            paths = [element.source for element in group]
            for element in group:
                yield error(
                    DiagnosticCode.DUPLICATE_ID,
                    f'Duplicate id "{identifier}" found in: {", ".join(paths)}',
                    element.source,
                    title="Duplicate identifier",
                )
