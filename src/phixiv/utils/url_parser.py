# src/phixiv/utils/url_parser.py
from dataclasses import dataclass

from ..shared.constants import PATTERNS
from ..shared.exceptions import InvalidIdentifier


@dataclass(frozen=True)
class ArtworkReference:
    """入力から読み取った作品の指定。illust_id は未クリーニングのまま保持する。"""

    illust_id: str
    language: str | None = None
    image_index: int | None = None


def parse_artwork_reference(input_str: str) -> ArtworkReference:
    """
    入力された文字列 (URL または作品ID) を解析し、ArtworkReference を返します。
    以下の形式に対応します:
    - https://www.pixiv.net/{lang}/artworks/{id}/{index}
    - https://www.pixiv.net/member_illust.php?mode=medium&illust_id={id}
    - 作品IDそのもの (数字以降の余分な文字列はビルダー側で切り捨てられる)
    """
    stripped = input_str.strip()

    if match := PATTERNS.PIXIV_ARTWORK.search(stripped):
        index = match.group('index')
        return ArtworkReference(
            illust_id=match.group('id'),
            language=match.group('language'),
            image_index=int(index) if index else None,
        )

    if match := PATTERNS.PIXIV_MEMBER_ILLUST.search(stripped):
        return ArtworkReference(illust_id=match.group('id'))

    if stripped[:1].isdigit():
        return ArtworkReference(illust_id=stripped)

    raise InvalidIdentifier(f"対応していない、または無効な入力形式です: '{input_str}'")
