"""Content Path.

``<locale>/<slug>/<slug>/...`` 形式のコンテンツパス。
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from shiori.domain.slug import Slug

LOCALE_PATTERN = re.compile(r"^[a-z]{2}-[A-Z]{2}$")


@dataclass(frozen=True)
class ContentPath:
    """コンテンツパス

    生成時は検証しない（命名違反を報告できるようにするため）。
    厳密な検証が必要な場合は :meth:`parse` を使う。

    Attributes:
        locale: ロケールコード（例: ``en-US``）
        segments: ロケールを除くパスセグメント
    """

    locale: str
    segments: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.segments, tuple):
            object.__setattr__(self, "segments", tuple(self.segments))

    @classmethod
    def parse(cls, text: str) -> ContentPath:
        """文字列から厳密にパース

        Raises:
            ValueError: 空パス、ロケール形式不正、スラッグ形式不正
        """
        parts = [part for part in text.split("/") if part]
        if not parts:
            raise ValueError("Content path cannot be empty")

        locale = parts[0]
        if not cls.is_valid_locale(locale):
            raise ValueError(
                f'Invalid locale format: "{locale}". Expected format: xx-XX (e.g., en-US, uk-UA)'
            )

        for segment in parts[1:]:
            Slug.parse(segment)

        return cls(locale, tuple(parts[1:]))

    @classmethod
    def from_locale(cls, locale: str) -> ContentPath:
        """ロケールのみのルートパス"""
        return cls(locale, ())

    @staticmethod
    def is_valid_locale(locale: str) -> bool:
        """``xx-XX`` 形式か"""
        return LOCALE_PATTERN.match(locale) is not None

    @property
    def path(self) -> list[str]:
        """ロケールを含むセグメント一覧"""
        return [self.locale, *self.segments]

    @property
    def slug(self) -> list[str]:
        """ロケールを除くセグメント一覧（JSONの ``slug`` フィールド）"""
        return list(self.segments)

    @property
    def key(self) -> str:
        """ノードテーブル用のキー"""
        return "/".join(self.path)

    @property
    def depth(self) -> int:
        """深さ（0 = ロケールルート）"""
        return len(self.segments)

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def last_segment(self) -> str | None:
        return self.segments[-1] if self.segments else None

    @property
    def parent(self) -> ContentPath | None:
        """親パス（ルートの場合は None）"""
        if self.is_root:
            return None
        return ContentPath(self.locale, self.segments[:-1])

    def append(self, segment: str | Slug) -> ContentPath:
        """セグメントを追加した新しいパス"""
        return ContentPath(self.locale, (*self.segments, str(segment)))

    def ancestors(self) -> list[ContentPath]:
        """ロケールから親までの祖先パス（上から順、自身は含まない）"""
        return [
            ContentPath(self.locale, self.segments[:depth])
            for depth in range(len(self.segments))
        ]

    def __str__(self) -> str:
        return self.key
