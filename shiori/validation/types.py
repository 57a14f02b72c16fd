"""Validation result and option types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from shiori.domain.diagnostics import Diagnostic, DiagnosticCode, Position, Severity
from shiori.domain.types import ElementKind


@dataclass
class ValidationStats:
    """種別ごとの検査数"""

    checked: dict[str, int] = field(
        default_factory=lambda: {kind.value: 0 for kind in ElementKind}
    )

    def record(self, kind: ElementKind) -> None:
        self.checked[kind.value] += 1

    def to_dict(self) -> dict[str, Any]:
        return {"checked": dict(self.checked)}


@dataclass
class ValidationResult:
    """検証結果

    Attributes:
        errors: エラー診断
        warnings: 警告診断
        infos: 情報診断
        stats: 統計
        truncated: max_errors により打ち切られたか
    """

    errors: list[Diagnostic] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)
    infos: list[Diagnostic] = field(default_factory=list)
    stats: ValidationStats = field(default_factory=ValidationStats)
    truncated: bool = False

    @property
    def is_valid(self) -> bool:
        """エラーが0件か"""
        return not self.errors

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [*self.errors, *self.warnings, *self.infos]

    def add(self, diagnostic: Diagnostic) -> None:
        if diagnostic.severity == Severity.ERROR:
            self.errors.append(diagnostic)
        elif diagnostic.severity == Severity.WARNING:
            self.warnings.append(diagnostic)
        else:
            self.infos.append(diagnostic)

    def by_code(self, code: DiagnosticCode) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.code == code]

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換"""
        return {
            "valid": self.is_valid,
            "errors": [d.to_dict() for d in self.errors],
            "warnings": [d.to_dict() for d in self.warnings],
            "infos": [d.to_dict() for d in self.infos],
            "stats": self.stats.to_dict(),
            "truncated": self.truncated,
        }


@dataclass
class ValidationOptions:
    """パイプラインオプション

    Attributes:
        enabled_validators: 有効にするバリデータ名（None の場合はすべて）
        max_errors: 収集する診断の上限（0 = 無制限）
        strict_mode: 警告をエラーとして扱う
    """

    enabled_validators: list[str] | None = None
    max_errors: int = 0
    strict_mode: bool = False


__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "Position",
    "Severity",
    "ValidationOptions",
    "ValidationResult",
    "ValidationStats",
]
