"""File and folder naming validator."""

from __future__ import annotations

import re
from collections.abc import Iterator

from shiori.content.tree import ContentElement
from shiori.domain.content_path import ContentPath
from shiori.domain.diagnostics import Diagnostic, DiagnosticCode, error
from shiori.domain.types import ElementKind
from shiori.validation.base import Validator

# 文字は任意にして、欠落を個別に報告できるようにする
LOOSE_SEGMENT_PATTERN = re.compile(r"^(\d+)([a-z]*)-(.+)$")
INVALID_NAME_CHARS = re.compile(r"[^a-z0-9-]")


class NamingValidator(Validator):
    """命名規則を検査

    ロケールはロケールコード、その他の要素は自身の最後のセグメントを検査する
    （祖先のセグメントは祖先自身の検査で報告される）。
    """

    name = "naming"

    def validate(self, element: ContentElement) -> Iterator[Diagnostic]:
        if element.kind == ElementKind.LOCALE:
            locale = element.path.locale
            if not ContentPath.is_valid_locale(locale):
                yield error(
                    DiagnosticCode.INVALID_LOCALE_FORMAT,
                    f'Invalid locale format: "{locale}". Expected format: xx-XX (e.g., en-US, uk-UA)',
                    element.source,
                )
            return

        segment = element.path.last_segment
        if segment is not None:
            yield from check_segment(segment, element.source)


def check_segment(segment: str, source: str) -> Iterator[Diagnostic]:
    """セグメント1つを検査（各違反は独立した診断になる）"""
    match = LOOSE_SEGMENT_PATTERN.match(segment)
    if not match:
        yield error(
            DiagnosticCode.INVALID_FILE_NAME,
            f'Invalid file name format: "{segment}". '
            "Expected format: <number><letters>-<name> (e.g., 1a-intro, 2b-advanced)",
            source,
        )
        return

    number, letters, name = match.groups()

    if not letters:
        yield error(
            DiagnosticCode.INVALID_FRACTIONAL_INDEX,
            f'Fractional index must include letters: "{segment}". '
            "Letters are mandatory (e.g., 1a, 2b, 10aa)",
            source,
            suggestion=f"Rename to {number}a-{name}",
        )

    if INVALID_NAME_CHARS.search(name):
        yield error(
            DiagnosticCode.INVALID_SLUG_CHARACTERS,
            f'Slug name contains invalid characters: "{name}". '
            "Only lowercase letters, digits, and hyphens are allowed",
            source,
        )

    if name.startswith("-") or name.endswith("-"):
        yield error(
            DiagnosticCode.INVALID_SLUG_HYPHEN,
            f'Slug name cannot start or end with hyphen: "{name}"',
            source,
        )

    if "--" in name:
        yield error(
            DiagnosticCode.CONSECUTIVE_HYPHENS,
            f'Slug name cannot contain consecutive hyphens: "{name}"',
            source,
        )
