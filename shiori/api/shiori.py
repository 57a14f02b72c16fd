# Shiori Main Facade
"""
shiori.api.shiori - メインFacade API

スキャン → 検証 → 全体生成 / 差分更新 をまとめる。
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from shiori.api.base import ShioriConfig, UpdateOutcome, ValidationReport
from shiori.api.config import ConfigManager
from shiori.content.tree import ContentTree
from shiori.index.generator import GenerationResult, MetadataGenerator
from shiori.index.incremental.updater import IncrementalUpdater
from shiori.index.store import ArtifactStore
from shiori.repository.changes import ChangeDetector, FileChange
from shiori.repository.git import GitMetadataProvider, StatsProviderProtocol
from shiori.repository.loader import FileLoaderProtocol, FrontmatterLoader
from shiori.repository.scanner import ContentScanner, ScanReport
from shiori.validation.pipeline import ValidationPipeline
from shiori.validation.types import ValidationOptions

logger = logging.getLogger(__name__)


class Shiori:
    """Shiori メインAPI (Facade)

    Example:
        >>> shiori = Shiori({"repo_root": "docs", "use_git": False})
        >>> report = shiori.validate()
        >>> if report.is_valid:
        ...     shiori.generate()
    """

    def __init__(
        self,
        config: str | Path | dict[str, Any] | ShioriConfig | None = None,
        loader: FileLoaderProtocol | None = None,
        stats_provider: StatsProviderProtocol | None = None,
    ):
        """
        Shiori を初期化

        Args:
            config: 設定ファイルパス、辞書、またはShioriConfigオブジェクト
            loader: ファイルローダー（省略時はフロントマターローダー）
            stats_provider: ファイル統計プロバイダー（省略時はgit）
        """
        if config is None:
            self._config_manager = ConfigManager()
        elif isinstance(config, (str, Path)):
            self._config_manager = ConfigManager.from_yaml(config)
        elif isinstance(config, dict):
            self._config_manager = ConfigManager.from_dict(config)
        elif isinstance(config, ShioriConfig):
            self._config_manager = ConfigManager.from_config(config)
        else:
            raise ValueError(f"Invalid config type: {type(config)}")

        root = self.config.repo_root
        self.loader = loader or FrontmatterLoader()
        self.stats_provider = stats_provider or GitMetadataProvider(
            root, use_git=self.config.use_git
        )
        self.store = ArtifactStore(root)

    @property
    def config(self) -> ShioriConfig:
        """設定を取得"""
        return self._config_manager.config

    @property
    def repo_root(self) -> Path:
        return self.config.repo_root

    # ========== コンポーネント ==========

    def create_scanner(self) -> ContentScanner:
        return ContentScanner(
            self.repo_root,
            loader=self.loader,
            stats_provider=self.stats_provider,
            max_concurrent=self.config.max_concurrent,
        )

    def create_pipeline(self) -> ValidationPipeline:
        return ValidationPipeline(
            options=ValidationOptions(
                enabled_validators=self.config.enabled_validators,
                max_errors=self.config.max_errors,
                strict_mode=self.config.strict_mode,
            )
        )

    def create_generator(self) -> MetadataGenerator:
        return MetadataGenerator(self.store, max_concurrent=self.config.max_concurrent)

    def create_updater(self) -> IncrementalUpdater:
        return IncrementalUpdater(
            self.repo_root,
            store=self.store,
            loader=self.loader,
            stats_provider=self.stats_provider,
            max_concurrent=self.config.max_concurrent,
        )

    # ========== 非同期API ==========

    async def scan_async(self) -> ScanReport:
        """ツリーを構築"""
        return await self.create_scanner().scan()

    async def validate_async(self, scan: ScanReport | None = None) -> ValidationReport:
        """ツリーを検証"""
        scan = scan or await self.scan_async()
        result = self.create_pipeline().run(scan.tree)
        return ValidationReport(
            result=result,
            scan_warnings=list(scan.warnings),
            skipped=list(scan.skipped),
            element_count=len(scan.tree),
        )

    async def generate_async(self, tree: ContentTree | None = None) -> GenerationResult:
        """すべてのメタデータを再生成"""
        if tree is None:
            tree = (await self.scan_async()).tree
        return await self.create_generator().generate(tree)

    async def update_async(
        self,
        before: str | None,
        after: str = "HEAD",
        changes: list[FileChange] | None = None,
    ) -> UpdateOutcome:
        """リビジョン間の変更を差分で適用

        ``before`` がない場合、または差分で整合性を保てない変更が含まれる場合は
        全体を再生成する。

        Raises:
            ChangeDetectionError: 変更検出に失敗した場合
        """
        if changes is None:
            if not before:
                logger.info("No base revision; running full regeneration")
                return UpdateOutcome(generation=await self.generate_async())
            changes = await ChangeDetector(self.repo_root).detect(before, after)

        outcome = UpdateOutcome(changes=list(changes))
        if not changes:
            logger.info("No content changes detected")
            return outcome

        outcome.incremental = await self.create_updater().apply(list(changes))
        if outcome.incremental.requires_full_regeneration:
            logger.info(
                "Falling back to full regeneration: "
                + "; ".join(outcome.incremental.reasons)
            )
            outcome.generation = await self.generate_async()
        return outcome

    # ========== 同期API ==========

    def scan(self) -> ScanReport:
        return asyncio.run(self.scan_async())

    def validate(self) -> ValidationReport:
        return asyncio.run(self.validate_async())

    def generate(self) -> GenerationResult:
        return asyncio.run(self.generate_async())

    def update(self, before: str | None, after: str = "HEAD") -> UpdateOutcome:
        return asyncio.run(self.update_async(before, after))


def create_shiori(
    config: str | Path | dict[str, Any] | ShioriConfig | None = None,
) -> Shiori:
    """Shiori インスタンスを作成するヘルパー関数"""
    return Shiori(config)
