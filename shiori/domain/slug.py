"""Slug.

パスセグメント ``<fractional-index>-<name>`` （例: ``1a-intro``）。
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from shiori.domain.fractional_index import FractionalIndex

SLUG_PATTERN = re.compile(r"^(\d+[a-z]+)-([a-z0-9-]+)$")
NAME_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


@dataclass(frozen=True)
class Slug:
    """スラッグ

    Attributes:
        fractional_index: 並び順キー
        name: 小文字・数字・ハイフンのみの名前（先頭/末尾/連続ハイフン不可）
    """

    fractional_index: FractionalIndex
    name: str

    def __post_init__(self) -> None:
        if not Slug.is_valid_name(self.name):
            raise ValueError(
                f'Invalid slug name: "{self.name}". Only lowercase letters, digits, '
                "and single inner hyphens are allowed"
            )

    @property
    def full(self) -> str:
        """文字列表現（例: ``"1a-intro"``）"""
        return f"{self.fractional_index.full}-{self.name}"

    @classmethod
    def parse(cls, text: str) -> Slug:
        """文字列からパース

        正規化は行わない。形式が不正なら例外。

        Raises:
            ValueError: 形式が不正な場合
        """
        match = SLUG_PATTERN.match(text)
        if not match:
            raise ValueError(
                f'Invalid slug format: "{text}". '
                "Expected format: <number><letters>-<name> (e.g., 1a-intro)"
            )
        return cls(FractionalIndex.parse(match.group(1)), match.group(2))

    @classmethod
    def try_parse(cls, text: str) -> Slug | None:
        """パースできなければ None"""
        try:
            return cls.parse(text)
        except ValueError:
            return None

    @staticmethod
    def is_valid(text: str) -> bool:
        """有効なスラッグか"""
        return Slug.try_parse(text) is not None

    @staticmethod
    def is_valid_name(name: str) -> bool:
        """名前部分が有効か"""
        return NAME_PATTERN.match(name) is not None

    @staticmethod
    def compare(left: Slug, right: Slug) -> int:
        """比較（フラクショナルインデックス → 名前）"""
        result = FractionalIndex.compare(left.fractional_index, right.fractional_index)
        if result != 0:
            return result
        if left.name == right.name:
            return 0
        return -1 if left.name < right.name else 1

    def __lt__(self, other: Slug) -> bool:
        return Slug.compare(self, other) < 0

    def __str__(self) -> str:
        return self.full


def slug_sort_key(segment: str) -> tuple:
    """パスセグメントのソートキー

    パース可能なセグメントはフラクショナルインデックス順（同順位は名前順）。
    パースできないセグメントは有効なものの後ろに生の文字列順で並ぶ。
    """
    slug = Slug.try_parse(segment)
    if slug is None:
        return (1, 0, 0, "", segment)
    number, letter_rank, letters = slug.fractional_index.sort_key()
    return (0, number, letter_rank, letters, slug.name)
