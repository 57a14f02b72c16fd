"""Validation pipeline.

独立したバリデータを順に実行し、診断を連結する。
検証は途中で打ち切らない（max_errors による上限を除く）。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from shiori.content.tree import ContentElement, ContentTree
from shiori.domain.diagnostics import Severity
from shiori.errors import ConfigurationError
from shiori.validation.base import Validator
from shiori.validation.types import ValidationOptions, ValidationResult
from shiori.validation.validators import (
    DuplicateIdValidator,
    FrontmatterValidator,
    HierarchyValidator,
    NamingValidator,
)

logger = logging.getLogger(__name__)


def default_validators() -> list[Validator]:
    """標準のバリデータ（実行順）"""
    return [
        FrontmatterValidator(),
        NamingValidator(),
        HierarchyValidator(),
        DuplicateIdValidator(),
    ]


AVAILABLE_VALIDATORS = tuple(validator.name for validator in default_validators())


class ValidationPipeline:
    """検証パイプライン

    Example:
        >>> pipeline = ValidationPipeline(options=ValidationOptions(max_errors=100))
        >>> pipeline.remove("naming")
        >>> result = pipeline.run(tree)
        >>> result.is_valid
    """

    def __init__(
        self,
        validators: Iterable[Validator] | None = None,
        options: ValidationOptions | None = None,
    ):
        self.options = options or ValidationOptions()
        self._validators: list[Validator] = list(
            validators if validators is not None else default_validators()
        )

        if self.options.enabled_validators is not None:
            enabled = set(self.options.enabled_validators)
            unknown = enabled - {validator.name for validator in self._validators}
            if unknown:
                raise ConfigurationError(
                    f"Unknown validators: {', '.join(sorted(unknown))}",
                    component="validation",
                    available=[validator.name for validator in self._validators],
                )
            self._validators = [v for v in self._validators if v.name in enabled]

    @property
    def validators(self) -> list[Validator]:
        return list(self._validators)

    @property
    def names(self) -> list[str]:
        return [validator.name for validator in self._validators]

    def add(self, validator: Validator) -> None:
        """バリデータを追加（同名は置き換え）"""
        self.remove(validator.name)
        self._validators.append(validator)

    def remove(self, name: str) -> bool:
        """名前でバリデータを削除"""
        before = len(self._validators)
        self._validators = [v for v in self._validators if v.name != name]
        return len(self._validators) != before

    def run(self, elements: ContentTree | Sequence[ContentElement]) -> ValidationResult:
        """すべての有効なバリデータを実行

        Args:
            elements: ツリー、または要素のフラットな集合

        Returns:
            検証結果
        """
        batch = list(elements)
        result = ValidationResult()
        for element in batch:
            result.stats.record(element.kind)

        limit = self.options.max_errors
        collected = 0

        for validator in self._validators:
            logger.debug(f"Running validator {validator.name} on {len(batch)} elements")
            for diagnostic in validator.validate_batch(batch):
                if limit and collected >= limit:
                    result.truncated = True
                    break
                if self.options.strict_mode and diagnostic.severity == Severity.WARNING:
                    diagnostic = diagnostic.as_error()
                result.add(diagnostic)
                collected += 1
            if result.truncated:
                logger.warning(f"Diagnostic limit reached ({limit}); stopping validation")
                break

        logger.info(
            f"Validation finished: {len(result.errors)} errors, "
            f"{len(result.warnings)} warnings"
        )
        return result
