# Shiori Config Manager
"""
shiori.api.config - 設定マネージャー
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from shiori.api.base import DEFAULT_CONFIG_FILES, ShioriConfig
from shiori.errors import ConfigurationError
from shiori.observability import LogLevel
from shiori.validation.pipeline import AVAILABLE_VALIDATORS


class ConfigManager:
    """設定マネージャー"""

    def __init__(self, config_path: str | Path | None = None):
        self.config_path = Path(config_path) if config_path else None
        self._config: ShioriConfig | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> ConfigManager:
        """YAMLファイルから読み込み"""
        manager = cls(path)
        manager.load()
        return manager

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> ConfigManager:
        """辞書から作成"""
        manager = cls()
        manager._config = cls._parse_config(config_dict)
        return manager

    @classmethod
    def from_config(cls, config: ShioriConfig) -> ConfigManager:
        """ShioriConfigから作成"""
        manager = cls()
        manager._config = config
        return manager

    def load(self) -> ShioriConfig:
        """設定を読み込み

        Raises:
            ConfigurationError: YAMLが不正、または値が不正な場合
        """
        if not self.config_path or not self.config_path.exists():
            self._config = ShioriConfig()
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {self.config_path}: {e}",
                cause=e,
                operation="load",
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file must contain a mapping: {self.config_path}",
                operation="load",
            )

        config = self._parse_config(data)
        # 相対パスは設定ファイルの位置から解決する
        if not config.repo_root.is_absolute():
            config.repo_root = self.config_path.parent / config.repo_root
        self._config = config
        return self._config

    def save(self, path: str | Path | None = None) -> None:
        """設定を保存"""
        if self._config is None:
            return

        save_path = Path(path) if path else self.config_path
        if save_path is None:
            raise ValueError("No path specified for saving config")

        save_path.parent.mkdir(parents=True, exist_ok=True)

        data = self._config_to_dict(self._config)
        with open(save_path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True)

    @staticmethod
    def _parse_config(data: dict[str, Any]) -> ShioriConfig:
        """設定をパース"""
        enabled = data.get("enabled_validators")
        if enabled is not None:
            if not isinstance(enabled, list):
                raise ConfigurationError("enabled_validators must be a list")
            unknown = sorted(set(enabled) - set(AVAILABLE_VALIDATORS))
            if unknown:
                raise ConfigurationError(
                    f"Unknown validators: {', '.join(unknown)}",
                    available=list(AVAILABLE_VALIDATORS),
                )

        max_concurrent = data.get("max_concurrent", 10)
        if not isinstance(max_concurrent, int) or max_concurrent < 1:
            raise ConfigurationError("max_concurrent must be a positive integer")

        max_errors = data.get("max_errors", 0)
        if not isinstance(max_errors, int) or max_errors < 0:
            raise ConfigurationError("max_errors must be a non-negative integer")

        log_level = str(data.get("log_level", "warning")).lower()
        if log_level not in {level.value for level in LogLevel}:
            raise ConfigurationError(f"Invalid log_level: {log_level}")

        return ShioriConfig(
            repo_root=Path(data.get("repo_root", ".")),
            max_concurrent=max_concurrent,
            max_errors=max_errors,
            strict_mode=bool(data.get("strict_mode", False)),
            enabled_validators=list(enabled) if enabled is not None else None,
            log_level=log_level,
            use_git=bool(data.get("use_git", True)),
        )

    @staticmethod
    def _config_to_dict(config: ShioriConfig) -> dict[str, Any]:
        """ShioriConfigを辞書に変換"""
        return {
            "repo_root": str(config.repo_root),
            "max_concurrent": config.max_concurrent,
            "max_errors": config.max_errors,
            "strict_mode": config.strict_mode,
            "enabled_validators": config.enabled_validators,
            "log_level": config.log_level,
            "use_git": config.use_git,
        }

    @property
    def config(self) -> ShioriConfig:
        """設定を取得"""
        if self._config is None:
            self._config = self.load()
        return self._config


def find_config_file(directory: Path | None = None) -> Path | None:
    """既定の設定ファイルを探す"""
    base = Path(directory) if directory else Path(".")
    for name in DEFAULT_CONFIG_FILES:
        candidate = base / name
        if candidate.exists():
            return candidate
    return None


def load_config(path: str | Path | None = None) -> ShioriConfig:
    """設定を読み込むヘルパー関数"""
    manager = ConfigManager(path)
    return manager.load()
