# Shiori Observability Module
"""
shiori.observability - ロギング設定と処理時間計測

各モジュールは ``logging.getLogger(__name__)`` でロガーを取得し、
ハンドラの設定は ``configure_logging`` に集約する。
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generator

ROOT_LOGGER_NAME = "shiori"


class LogLevel(Enum):
    """ログレベル"""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_logging_level(self) -> int:
        """Python logging レベルに変換"""
        mapping = {
            LogLevel.DEBUG: logging.DEBUG,
            LogLevel.INFO: logging.INFO,
            LogLevel.WARNING: logging.WARNING,
            LogLevel.ERROR: logging.ERROR,
            LogLevel.CRITICAL: logging.CRITICAL,
        }
        return mapping[self]


@dataclass
class ObservabilityConfig:
    """ロギング設定"""

    log_level: LogLevel = LogLevel.WARNING
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_to_console: bool = True
    log_to_file: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換"""
        return {
            "log_level": self.log_level.value,
            "log_format": self.log_format,
            "log_to_console": self.log_to_console,
            "log_to_file": self.log_to_file,
        }


def configure_logging(config: ObservabilityConfig | None = None) -> logging.Logger:
    """``shiori`` ロガーにハンドラを設定

    既存のハンドラは置き換える（CLIの複数回呼び出しで重複しないように）。

    Args:
        config: ロギング設定（省略時はデフォルト）

    Returns:
        設定済みのルートロガー
    """
    config = config or ObservabilityConfig()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(config.log_level.to_logging_level())

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.log_format)
    if config.log_to_console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if config.log_to_file:
        file_handler = logging.FileHandler(config.log_to_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root


@dataclass
class Timer:
    """経過時間（ミリ秒）"""

    started_at: float = field(default_factory=time.perf_counter)
    elapsed_ms: float = 0.0

    def stop(self) -> float:
        self.elapsed_ms = (time.perf_counter() - self.started_at) * 1000
        return self.elapsed_ms


@contextmanager
def measure_time(
    operation: str, logger: logging.Logger | None = None
) -> Generator[Timer, None, None]:
    """処理時間を計測してDEBUGログに出力

    Example:
        >>> with measure_time("generate") as timer:
        ...     ...
        >>> timer.elapsed_ms
    """
    timer = Timer()
    try:
        yield timer
    finally:
        timer.stop()
        (logger or logging.getLogger(ROOT_LOGGER_NAME)).debug(
            f"{operation} finished in {timer.elapsed_ms:.1f}ms"
        )


__all__ = [
    "LogLevel",
    "ObservabilityConfig",
    "ROOT_LOGGER_NAME",
    "Timer",
    "configure_logging",
    "measure_time",
]
