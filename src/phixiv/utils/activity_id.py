# FILE: src/phixiv/utils/activity_id.py
"""
(言語, 作品ID, ページ番号, ページ範囲) を1つの64bit整数に詰めるコーデック。

    bits 63..56  offset_end  (8bit, 0..255 に丸める)
    bits 55..48  言語ID      (jp=0, en=1, zh=2, zh_tw=3, ko=4。未知は jp)
    bits 47..16  作品ID      (32bit)
    bits 15..0   ページ番号  (16bit, 0始まり)

外部キャッシュされうるURLに現れるため、ビット配置は互換性を保つ必要がある。
"""

from dataclasses import dataclass
from typing import Final

from ..shared.enums import Language
from ..shared.exceptions import InvalidActivityId

OFFSET_END_MAX: Final = 0xFF
LANGUAGE_MASK: Final = 0xFF
ID_MASK: Final = 0xFFFF_FFFF
INDEX_MASK: Final = 0xFFFF
U64_MAX: Final = 0xFFFF_FFFF_FFFF_FFFF


@dataclass(frozen=True)
class CompactActivityId:
    language: str = Language.JP.value
    id: int = 0
    index: int = 0
    offset_end: int = 0

    def to_int(self) -> int:
        offset_end = min(max(self.offset_end, 0), OFFSET_END_MAX)
        lang_id = Language(self.language).wire_id
        return (
            offset_end << 56
            | lang_id << 48
            | (self.id & ID_MASK) << 16
            | (self.index & INDEX_MASK)
        )

    def __int__(self) -> int:
        return self.to_int()

    def __str__(self) -> str:
        return str(self.to_int())

    @classmethod
    def from_int(cls, value: int) -> 'CompactActivityId':
        value &= U64_MAX
        return cls(
            language=Language.from_wire_id((value >> 48) & LANGUAGE_MASK).value,
            id=(value >> 16) & ID_MASK,
            index=value & INDEX_MASK,
            offset_end=(value >> 56) & OFFSET_END_MAX,
        )

    @classmethod
    def parse(cls, text: str) -> 'CompactActivityId':
        """パスセグメントなどの10進数文字列からデコードします。"""
        stripped = text.strip()
        if not stripped.isascii() or not stripped.isdigit():
            raise InvalidActivityId(f'数値ではないアクティビティIDです: {text!r}')
        value = int(stripped)
        if value > U64_MAX:
            raise InvalidActivityId(f'64bitの範囲を超えるアクティビティIDです: {text!r}')
        return cls.from_int(value)

    @property
    def last_index(self) -> int:
        """範囲に含まれる最後のページ番号 (0始まり)。"""
        return self.index + min(max(self.offset_end, 0), OFFSET_END_MAX)


def encode(language: str, illust_id: int, index: int = 0, offset_end: int = 0) -> int:
    return CompactActivityId(language, illust_id, index, offset_end).to_int()


def decode(value: int) -> CompactActivityId:
    return CompactActivityId.from_int(value)
