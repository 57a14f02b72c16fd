"""Shiori Error Handling.

コンテンツツリー処理で発生する構造化例外を提供。

検証診断（Diagnostic）は例外ではなく収集される。ここで定義する例外は
設定・I/O・外部コマンドの失敗など、処理を継続できない場合にのみ送出される。

Example:
    >>> from shiori.errors import ArtifactError
    >>> raise ArtifactError("Artifact not found", path="en-US/index.full.json")
"""

from __future__ import annotations

import time
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

__all__ = [
    "ShioriError",
    "ConfigurationError",
    "ContentLoadError",
    "FrontmatterError",
    "ArtifactError",
    "ChangeDetectionError",
    "GitError",
    "ErrorContext",
    "ErrorSeverity",
]


# ============================================================
# Error Severity
# ============================================================


class ErrorSeverity(str, Enum):
    """エラー重要度"""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# ============================================================
# Error Context
# ============================================================


@dataclass
class ErrorContext:
    """エラーコンテキスト情報

    Attributes:
        error_id: ユニークなエラーID
        timestamp: エラー発生時刻
        component: エラー発生コンポーネント
        operation: 実行中の操作
        details: 追加の詳細情報
        stack_trace: スタックトレース
    """

    error_id: str = field(default_factory=lambda: f"err_{int(time.time() * 1000)}")
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    component: str | None = None
    operation: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    stack_trace: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換"""
        return {
            "error_id": self.error_id,
            "timestamp": self.timestamp.isoformat(),
            "component": self.component,
            "operation": self.operation,
            "details": self.details,
            "stack_trace": self.stack_trace,
        }


# ============================================================
# Base Exception
# ============================================================


class ShioriError(Exception):
    """Shiori基底例外クラス

    Attributes:
        message: エラーメッセージ
        code: エラーコード
        severity: エラー重要度
        context: エラーコンテキスト
        cause: 原因となった例外
    """

    default_code: str = "SHIORI_ERROR"
    default_severity: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        code: str | None = None,
        severity: ErrorSeverity | None = None,
        cause: Exception | None = None,
        component: str | None = None,
        operation: str | None = None,
        **details: Any,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.severity = severity or self.default_severity
        self.cause = cause

        self.context = ErrorContext(
            component=component,
            operation=operation,
            details=details,
            stack_trace=traceback.format_exc() if cause else None,
        )

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.context.component:
            parts.append(f"(component: {self.context.component})")
        if self.context.operation:
            parts.append(f"(operation: {self.context.operation})")
        if self.cause:
            parts.append(f"caused by: {self.cause}")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"severity={self.severity.value!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "severity": self.severity.value,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


# ============================================================
# Specific Exceptions
# ============================================================


class ConfigurationError(ShioriError):
    """設定エラー

    設定ファイルの読み込みや検証に失敗した場合。
    """

    default_code = "CONFIG_ERROR"


class ContentLoadError(ShioriError):
    """コンテンツ読み込みエラー

    Markdownファイルが存在しない、または読み込めない場合。
    """

    default_code = "CONTENT_LOAD_ERROR"
    default_severity = ErrorSeverity.WARNING

    def __init__(
        self,
        message: str,
        path: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.path = path
        if path:
            self.context.details["path"] = path


class FrontmatterError(ContentLoadError):
    """フロントマター解析エラー"""

    default_code = "FRONTMATTER_ERROR"


class ArtifactError(ShioriError):
    """JSONアーティファクトエラー

    メタデータJSONの読み書きに失敗した場合。
    """

    default_code = "ARTIFACT_ERROR"

    def __init__(
        self,
        message: str,
        path: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.path = path
        if path:
            self.context.details["path"] = path


class GitError(ShioriError):
    """gitコマンドエラー"""

    default_code = "GIT_ERROR"

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        returncode: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        if command:
            self.context.details["command"] = " ".join(command)
        if returncode is not None:
            self.context.details["returncode"] = returncode


class ChangeDetectionError(GitError):
    """変更検出エラー

    リビジョン間の差分取得に失敗した場合。
    """

    default_code = "CHANGE_DETECTION_ERROR"
