"""ULID identifier value type."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone

CROCKFORD_BASE32 = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
ULID_PATTERN = re.compile(r"^[0-9A-HJKMNP-TV-Z]{26}$")


@dataclass(frozen=True)
class Ulid:
    """ULID

    26文字のCrockford base32文字列。先頭10文字はミリ秒単位の作成時刻。
    """

    value: str

    def __post_init__(self) -> None:
        if not Ulid.is_valid(self.value):
            raise ValueError(
                f'Invalid ULID format: "{self.value}". Expected 26 base32 characters'
            )

    @staticmethod
    def is_valid(value: object) -> bool:
        return isinstance(value, str) and ULID_PATTERN.match(value) is not None

    @property
    def timestamp(self) -> datetime:
        """埋め込まれた作成時刻（UTC）"""
        millis = 0
        for char in self.value[:10]:
            millis = millis * 32 + CROCKFORD_BASE32.index(char)
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)

    def __str__(self) -> str:
        return self.value
