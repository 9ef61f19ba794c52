"""
phixiv テストスイート共通のフィクスチャ。

ajax_payload: `/ajax/illust/{id}` のレスポンスを生成するファクトリ
listing: 3ページ分の構築済み ArtworkListing
settings: 環境変数・.env・pyproject から切り離した Settings
"""

from __future__ import annotations

import copy
import os
from typing import Any, Callable

import pytest

from phixiv.models.domain import ArtworkListing
from phixiv.shared.settings import Settings

IMAGE_REGULAR = (
    'https://i.pximg.net/img-master/img/2023/01/02/03/04/05/12345_p0_master1200.jpg'
)
IMAGE_ORIGINAL = 'https://i.pximg.net/img-original/img/2023/01/02/03/04/05/12345_p0.png'
PROFILE_IMAGE = 'https://i.pximg.net/user-profile/img/2020/01/01/00/00/00/1_abc_50.png'

_BASE_PAYLOAD: dict[str, Any] = {
    'error': False,
    'message': '',
    'body': {
        'title': 'Sample <Title>',
        'description': (
            'Hello<br /><a href="/jump.php?https%3A%2F%2Fexample.com%2F" '
            'target="_blank">https://example.com/</a>'
        ),
        'tags': {
            'tags': [
                {'tag': '猫', 'translation': {'en': 'cat'}},
                {'tag': 'オリジナル'},
            ]
        },
        'urls': {'regular': IMAGE_REGULAR, 'original': IMAGE_ORIGINAL},
        'userId': '777',
        'userName': 'artist',
        'extraData': {'meta': {'canonical': 'https://www.pixiv.net/en/artworks/12345'}},
        'illustType': 0,
        'createDate': '2023-01-02T03:04:05+00:00',
        'userIllusts': {
            '100': None,
            '101': {'profileImageUrl': None},
            '102': {'profileImageUrl': PROFILE_IMAGE},
            '103': {'profileImageUrl': 'https://i.pximg.net/other.png'},
        },
        'pageCount': 3,
        'aiType': 1,
        'bookmarkCount': 10,
        'likeCount': 5,
        'commentCount': 1,
        'viewCount': 100,
        'xRestrict': 0,
    },
}


@pytest.fixture
def ajax_payload() -> Callable[..., dict[str, Any]]:
    """Return a factory producing a fresh payload with ``body`` fields overridden."""

    def _factory(**body_overrides: Any) -> dict[str, Any]:
        payload = copy.deepcopy(_BASE_PAYLOAD)
        payload['body'].update(body_overrides)
        return payload

    return _factory


@pytest.fixture
def listing() -> ArtworkListing:
    return ArtworkListing(
        image_proxy_urls=[
            'https://phixiv.net/i/img-master/img/2023/01/02/03/04/05/12345_p0_master1200.jpg',
            'https://phixiv.net/i/img-master/img/2023/01/02/03/04/05/12345_p1_master1200.jpg',
            'https://phixiv.net/i/img-master/img/2023/01/02/03/04/05/12345_p2_master1200.jpg',
        ],
        title='Sample <Title>',
        ai_generated=False,
        description='Hello<br /><a href="https://example.com/">https://example.com/</a>',
        tags=['#cat', '#オリジナル'],
        url='https://www.pixiv.net/en/artworks/12345',
        author_name='artist',
        author_id='777',
        is_ugoira=False,
        create_date='2023-01-02T03:04:05+00:00',
        illust_id='12345',
        profile_image_url='https://phixiv.net/i/user-profile/img/2020/01/01/00/00/00/1_abc_50.png',
        language='en',
    )


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Settings:
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith('PHIXIV_'):
            monkeypatch.delenv(key)
    return Settings()
