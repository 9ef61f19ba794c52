import pytest

from phixiv.shared.exceptions import InvalidIdentifier
from phixiv.utils.url_parser import ArtworkReference, parse_artwork_reference


@pytest.mark.parametrize(
    ('input_str', 'expected'),
    [
        ('12345', ArtworkReference('12345')),
        ('  12345#frag ', ArtworkReference('12345#frag')),
        ('https://www.pixiv.net/artworks/12345', ArtworkReference('12345')),
        (
            'https://www.pixiv.net/en/artworks/12345',
            ArtworkReference('12345', language='en'),
        ),
        (
            'https://www.pixiv.net/zh_tw/artworks/12345/3',
            ArtworkReference('12345', language='zh_tw', image_index=3),
        ),
        (
            'https://www.pixiv.net/member_illust.php?mode=medium&illust_id=12345',
            ArtworkReference('12345'),
        ),
    ],
)
def test_parse_artwork_reference(input_str: str, expected: ArtworkReference) -> None:
    assert parse_artwork_reference(input_str) == expected


@pytest.mark.parametrize('input_str', ['', 'abc', 'https://example.com/artworks/x'])
def test_rejects_unsupported_input(input_str: str) -> None:
    with pytest.raises(InvalidIdentifier):
        parse_artwork_reference(input_str)
