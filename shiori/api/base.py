# Shiori API Base Types
"""
shiori.api.base - Python API 基本型定義
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from shiori.index.generator import GenerationResult
from shiori.index.incremental.types import IncrementalUpdateResult
from shiori.repository.changes import FileChange
from shiori.validation.types import ValidationResult

DEFAULT_CONFIG_FILES = ("shiori.yaml", "shiori.yml", ".shiori.yaml")


@dataclass
class ShioriConfig:
    """Shiori設定"""

    # コンテンツリポジトリのルート
    repo_root: Path = field(default_factory=lambda: Path("."))

    # 並行実行数（ファイル読み込み・JSON書き込み）
    max_concurrent: int = 10

    # 検証設定
    max_errors: int = 0  # 0 = 無制限
    strict_mode: bool = False
    enabled_validators: list[str] | None = None  # None = すべて

    # ログ
    log_level: str = "warning"

    # git から sha・日時を取得するか（False の場合はファイルシステムの stat）
    use_git: bool = True

    def __post_init__(self):
        """パス変換"""
        if isinstance(self.repo_root, str):
            self.repo_root = Path(self.repo_root)


@dataclass
class ValidationReport:
    """スキャン + 検証の結果"""

    result: ValidationResult
    scan_warnings: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    element_count: int = 0

    @property
    def is_valid(self) -> bool:
        return self.result.is_valid

    def to_dict(self) -> dict[str, Any]:
        data = self.result.to_dict()
        data["scan_warnings"] = list(self.scan_warnings)
        data["skipped"] = list(self.skipped)
        data["element_count"] = self.element_count
        return data


@dataclass
class UpdateOutcome:
    """差分更新の結果（必要に応じて全体再生成を含む）"""

    changes: list[FileChange] = field(default_factory=list)
    incremental: IncrementalUpdateResult | None = None
    generation: GenerationResult | None = None

    @property
    def regenerated(self) -> bool:
        return self.generation is not None

    @property
    def updated_files(self) -> list[str]:
        if self.generation is not None:
            return self.generation.written_files
        if self.incremental is not None:
            return self.incremental.updated_files
        return []

    def to_dict(self) -> dict[str, Any]:
        return {
            "changes": [change.to_dict() for change in self.changes],
            "regenerated": self.regenerated,
            "incremental": self.incremental.to_dict() if self.incremental else None,
            "generation": self.generation.to_dict() if self.generation else None,
            "updated_files": self.updated_files,
        }
