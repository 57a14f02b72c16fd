"""Validator base class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence

from shiori.content.tree import ContentElement
from shiori.domain.diagnostics import Diagnostic


class Validator(ABC):
    """バリデータ基底クラス

    ``validate`` は要素単体の検査、``validate_batch`` は要素集合全体の検査。
    要素をまたぐ検査が必要なバリデータは ``validate_batch`` をオーバーライドする。
    """

    name: str = "Validator"

    @abstractmethod
    def validate(self, element: ContentElement) -> Iterator[Diagnostic]:
        """要素単体を検査"""
        ...

    def validate_batch(self, elements: Sequence[ContentElement]) -> Iterator[Diagnostic]:
        """要素集合を検査"""
        for element in elements:
            yield from self.validate(element)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
