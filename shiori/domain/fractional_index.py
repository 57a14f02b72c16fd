"""Fractional Index.

兄弟要素の並び順を表す順序キー ``<number><letters>`` （例: ``1a``, ``10aa``）。
"""

from __future__ import annotations

import re
from dataclasses import dataclass

FRACTIONAL_INDEX_PATTERN = re.compile(r"^(\d+)([a-z]+)$")


@dataclass(frozen=True, eq=True)
class FractionalIndex:
    """フラクショナルインデックス

    並び順:
        1. 数値部分を整数として比較
        2. 数値が等しい場合、文字数が多い方が小さい（``1aa`` < ``1a``）
        3. 文字数も等しい場合、文字列を辞書順で比較

    例: ``1aa < 1a < 1b < 2a``

    Attributes:
        number: 非負整数部分
        letters: 必須の小文字アルファベット部分
    """

    number: int
    letters: str

    def __post_init__(self) -> None:
        if self.number < 0:
            raise ValueError("Number must be non-negative")
        if not self.letters:
            raise ValueError("Letters are required")
        if not re.fullmatch(r"[a-z]+", self.letters):
            raise ValueError("Letters must be lowercase a-z only")

    @property
    def full(self) -> str:
        """文字列表現（例: ``"10aa"``）"""
        return f"{self.number}{self.letters}"

    @classmethod
    def parse(cls, text: str) -> FractionalIndex:
        """文字列からパース

        Args:
            text: ``"1a"`` のような文字列

        Returns:
            FractionalIndex

        Raises:
            ValueError: 形式が不正な場合
        """
        match = FRACTIONAL_INDEX_PATTERN.match(text)
        if not match:
            raise ValueError(
                f'Invalid fractional index format: "{text}". '
                "Expected format: <number><letters> (e.g., 1a, 2b, 10aa)"
            )
        return cls(int(match.group(1)), match.group(2))

    @staticmethod
    def is_valid(text: str) -> bool:
        """有効なフラクショナルインデックスか"""
        return FRACTIONAL_INDEX_PATTERN.match(text) is not None

    @staticmethod
    def compare(left: FractionalIndex, right: FractionalIndex) -> int:
        """比較（負: left < right, 0: 等しい, 正: left > right）"""
        if left.number != right.number:
            return left.number - right.number
        if len(left.letters) != len(right.letters):
            # more letters sorts first
            return len(right.letters) - len(left.letters)
        if left.letters == right.letters:
            return 0
        return -1 if left.letters < right.letters else 1

    def sort_key(self) -> tuple[int, int, str]:
        """``sorted()`` 用のキー"""
        return (self.number, -len(self.letters), self.letters)

    def __lt__(self, other: FractionalIndex) -> bool:
        return FractionalIndex.compare(self, other) < 0

    def __le__(self, other: FractionalIndex) -> bool:
        return FractionalIndex.compare(self, other) <= 0

    def __gt__(self, other: FractionalIndex) -> bool:
        return FractionalIndex.compare(self, other) > 0

    def __ge__(self, other: FractionalIndex) -> bool:
        return FractionalIndex.compare(self, other) >= 0

    def __str__(self) -> str:
        return self.full
