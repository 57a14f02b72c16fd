"""Diagnostic records produced by tree self-checks and validators.

Diagnostics are collected, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DiagnosticCode(str, Enum):
    """診断コード"""

    # Frontmatter
    INVALID_FRONTMATTER_TYPE = "INVALID_FRONTMATTER_TYPE"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_FIELD_TYPE = "INVALID_FIELD_TYPE"
    INVALID_ID_FORMAT = "INVALID_ID_FORMAT"

    # File naming
    INVALID_FILE_NAME = "INVALID_FILE_NAME"
    INVALID_FRACTIONAL_INDEX = "INVALID_FRACTIONAL_INDEX"
    INVALID_SLUG_CHARACTERS = "INVALID_SLUG_CHARACTERS"
    INVALID_SLUG_HYPHEN = "INVALID_SLUG_HYPHEN"
    CONSECUTIVE_HYPHENS = "CONSECUTIVE_HYPHENS"
    INVALID_LOCALE_FORMAT = "INVALID_LOCALE_FORMAT"

    # Hierarchy
    INVALID_TYPE = "INVALID_TYPE"
    INVALID_HIERARCHY = "INVALID_HIERARCHY"
    DIRECTORY_CONTAINS_CHAPTER = "DIRECTORY_CONTAINS_CHAPTER"
    INVALID_PARENT_TYPE = "INVALID_PARENT_TYPE"

    # IDs
    DUPLICATE_ID = "DUPLICATE_ID"


class Severity(str, Enum):
    """診断の重要度"""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Position:
    """ソース位置（line/column は1始まり、offset は0始まり）"""

    line: int = 1
    column: int = 1
    offset: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "column": self.column, "offset": self.offset}


@dataclass(frozen=True)
class Diagnostic:
    """診断レコード

    Attributes:
        code: 診断コード
        message: メッセージ
        path: 対象ファイルのパス（リポジトリ相対）
        severity: 重要度
        position: 位置
        title: 短いタイトル
        suggestion: 修正案
    """

    code: DiagnosticCode
    message: str
    path: str
    severity: Severity = Severity.ERROR
    position: Position = field(default_factory=Position)
    title: str | None = None
    suggestion: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def as_error(self) -> Diagnostic:
        """重要度をERRORにした複製（strictモード用）"""
        return Diagnostic(
            code=self.code,
            message=self.message,
            path=self.path,
            severity=Severity.ERROR,
            position=self.position,
            title=self.title,
            suggestion=self.suggestion,
        )

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換"""
        data: dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "path": self.path,
            "severity": self.severity.value,
            "start": self.position.to_dict(),
        }
        if self.title:
            data["title"] = self.title
        if self.suggestion:
            data["suggestion"] = self.suggestion
        return data


def error(
    code: DiagnosticCode,
    message: str,
    path: str,
    *,
    title: str | None = None,
    suggestion: str | None = None,
) -> Diagnostic:
    """ERROR診断を作成"""
    return Diagnostic(code, message, path, Severity.ERROR, title=title, suggestion=suggestion)


def warning(
    code: DiagnosticCode,
    message: str,
    path: str,
    *,
    title: str | None = None,
    suggestion: str | None = None,
) -> Diagnostic:
    """WARNING診断を作成"""
    return Diagnostic(code, message, path, Severity.WARNING, title=title, suggestion=suggestion)
