# src/phixiv/shared/enums.py
from enum import Enum, IntEnum


class Language(str, Enum):
    """
    アクティビティIDに埋め込み可能な言語コード。
    定義順がそのまま8bitの言語IDになるため、並びを変更してはならない。
    """

    JP = 'jp'
    EN = 'en'
    ZH = 'zh'
    ZH_TW = 'zh_tw'
    KO = 'ko'

    @classmethod
    def _missing_(cls, value: object) -> 'Language':
        # 'EN' のような大文字でも受け付け、未知のコードは jp に倒す
        for member in cls:
            if member.value == str(value).lower():
                return member
        return cls.JP

    @property
    def wire_id(self) -> int:
        """アクティビティIDのビット列上での言語ID。"""
        return list(type(self)).index(self)

    @classmethod
    def from_wire_id(cls, wire_id: int) -> 'Language':
        members = list(cls)
        if 0 <= wire_id < len(members):
            return members[wire_id]
        return cls.JP

    @property
    def iso_code(self) -> str:
        """ActivityPubの language フィールド向けのISO 639形式のコード。"""
        return {
            Language.JP: 'ja',
            Language.ZH_TW: 'zh-TW',
        }.get(self, self.value)


class IllustType(IntEnum):
    """Pixiv APIの illustType。"""

    ILLUST = 0
    MANGA = 1
    UGOIRA = 2


class AiType(IntEnum):
    """Pixiv APIの aiType。2 のみがAI生成を意味する。"""

    UNKNOWN = 0
    NOT_AI = 1
    AI_GENERATED = 2


class MediaType(str, Enum):
    """ステータスの media_attachments に設定するメディア種別。"""

    IMAGE = 'image'
    VIDEO = 'video'
