# FILE: src/phixiv/infrastructure/builder.py
from urllib.parse import urlsplit

from loguru import logger

from ..models.domain import ArtworkListing
from ..models.pixiv import AjaxBody, AjaxResponse, Tag
from ..shared.constants import PATTERNS, PROXY_PATHS
from ..shared.enums import AiType, IllustType
from ..shared.exceptions import InvalidIdentifier, InvalidUpstreamUrl, MissingImageUrl
from ..shared.settings import FeatureSettings
from ..utils.caption import fix_jump_links
from .client import PixivAjaxClient


def clean_illust_id(illust_id: str) -> str:
    """先頭から連続する数字のみを取り出します。URLフラグメントなどの後続は捨てる。"""
    match = PATTERNS.LEADING_DIGITS.match(illust_id)
    return match.group(0) if match else ''


def localize_tag(tag: Tag, language: str) -> str:
    """要求言語の翻訳があればそれを、なければ元のタグ名を '#' 付きで返します。"""
    text = tag.tag
    if tag.translation is not None:
        text = tag.translation.get(language, tag.tag)
    return f'#{text}'


def _url_path(url: str) -> str:
    """スキームとホストを持つURLからパス部分を取り出します。"""
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise InvalidUpstreamUrl('URLを解析できませんでした', url) from e
    if not parts.scheme or not parts.netloc:
        raise InvalidUpstreamUrl('URLを解析できませんでした', url)
    return parts.path


def _require_url(url: str) -> str:
    _url_path(url)
    return url


def proxy_url(host: str, path: str) -> str:
    return PROXY_PATHS.IMAGE.format(host=host, path=path)


class ListingBuilder:
    """APIレスポンス1件から ArtworkListing 1件を構築するクラス。"""

    def __init__(self, client: PixivAjaxClient, features: FeatureSettings):
        self.client = client
        self.features = features

    async def build(self, language: str, illust_id: str, host: str) -> ArtworkListing:
        """
        作品IDをクリーニングしてAPIを呼び出し、リスティングを構築します。
        部分的なリスティングは返さず、失敗時は例外を送出します。

        Raises:
            InvalidIdentifier: クリーニング後のIDが空の場合 (APIは呼び出さない)。
            UpstreamError: API呼び出しに失敗した場合。
            BuildError: 画像URLの欠落やURLの解析失敗。
        """
        clean_id = clean_illust_id(illust_id)
        if not clean_id:
            raise InvalidIdentifier(f'数値ではない作品IDです: {illust_id!r}')

        response = await self.client.fetch_illust(clean_id, language)
        return self.derive_listing(response, language, clean_id, host)

    def derive_listing(
        self,
        response: AjaxResponse,
        language: str,
        clean_id: str,
        host: str,
    ) -> ArtworkListing:
        body = response.body
        is_ugoira = body.illust_type == IllustType.UGOIRA

        return ArtworkListing(
            image_proxy_urls=self._derive_image_urls(body, clean_id, host, is_ugoira),
            title=body.title,
            ai_generated=body.ai_type == AiType.AI_GENERATED,
            description=fix_jump_links(body.description),
            tags=[localize_tag(tag, language) for tag in body.tags.tags],
            url=_require_url(body.extra_data.meta.canonical),
            author_name=body.author_name,
            author_id=body.author_id,
            is_ugoira=is_ugoira,
            create_date=body.create_date,
            illust_id=clean_id,
            profile_image_url=self._derive_profile_image_url(body, host),
            language=language,
            bookmark_count=body.bookmark_count,
            like_count=body.like_count,
            comment_count=body.comment_count,
            view_count=body.view_count,
            x_restrict=body.x_restrict,
        )

    def _derive_image_urls(
        self, body: AjaxBody, clean_id: str, host: str, is_ugoira: bool
    ) -> list[str]:
        """
        ページごとのプロキシURLを導出します。
        `_p0_` を `_p{i}_` に置換してページiのパスとし、
        thumbnail_type が設定されていれば全ページの 'img-master' を置換します。
        """
        image_url = body.urls.regular or body.urls.original
        if image_url is None:
            raise MissingImageUrl(
                f'作品 {clean_id} に regular / original の画像URLがありません。'
            )
        path = _url_path(image_url)

        pages = []
        for i in range(body.page_count):
            current_path = path
            if i > 0:
                current_path = current_path.replace(
                    PROXY_PATHS.PAGE_ZERO_MARKER, PROXY_PATHS.PAGE_MARKER.format(index=i)
                )
            if self.features.thumbnail_type is not None:
                current_path = current_path.replace(
                    PROXY_PATHS.MASTER_SEGMENT, self.features.thumbnail_type
                )
            pages.append(proxy_url(host, current_path))

        if is_ugoira and self.features.ugoira_enabled:
            return [
                PROXY_PATHS.UGOIRA_VIDEO.format(host=host, illust_id=clean_id),
                pages[0],
            ]
        return pages

    def _derive_profile_image_url(self, body: AjaxBody, host: str) -> str | None:
        """作者の最近の作品から最初に見つかったプロフィール画像をプロキシURLにします。"""
        raw_url = next(
            (
                user_illust.profile_image_url
                for user_illust in body.user_illusts.values()
                if user_illust is not None and user_illust.profile_image_url
            ),
            None,
        )
        if raw_url is None:
            return None

        try:
            return proxy_url(host, _url_path(raw_url))
        except InvalidUpstreamUrl:
            logger.bind(url=raw_url).warning(
                'プロフィール画像のURLを解析できないため省略します。'
            )
            return None
