# FILE: src/phixiv/services.py
from loguru import logger

from .infrastructure.builder import ListingBuilder
from .infrastructure.cache import ListingCache
from .infrastructure.renderers.activity import ActivityRenderer
from .infrastructure.renderers.html import HtmlRenderer
from .infrastructure.renderers.oembed import OEmbedResponse, build_oembed
from .models.activity import ActivityStatus
from .models.domain import ArtworkListing
from .shared.constants import DEFAULT_LANGUAGE
from .shared.settings import Settings
from .utils.activity_id import CompactActivityId


class ArtworkService:
    """
    作品リスティングの取得と各表示面へのレンダリングを統括するサービスレイヤー。
    依存関係の構築(DI)はコンポジションルート(cli.py)で行われ、
    キャッシュはプロセス内で1つだけ生成されて注入される。
    """

    def __init__(
        self,
        settings: Settings,
        builder: ListingBuilder,
        cache: ListingCache,
        html_renderer: HtmlRenderer | None = None,
        activity_renderer: ActivityRenderer | None = None,
    ):
        self.settings = settings
        self.builder = builder
        self.cache = cache
        self.html_renderer = html_renderer or HtmlRenderer()
        self.activity_renderer = activity_renderer or ActivityRenderer()
        logger.debug('ArtworkService が初期化されました。')

    async def get_listing(
        self, language: str | None, illust_id: str, host: str
    ) -> ArtworkListing:
        """キャッシュ経由でリスティングを取得します。言語未指定は jp として扱う。"""
        return await self.cache.get_or_build(
            language or DEFAULT_LANGUAGE, illust_id, host, self.builder
        )

    async def render_embed(
        self,
        language: str | None,
        illust_id: str,
        image_index: int | None,
        host: str,
    ) -> str:
        """1始まりの image_index で指定されたページのプレビューHTMLを返します。"""
        with logger.contextualize(
            illust_id=illust_id, language=language, image_index=image_index
        ):
            listing = await self.get_listing(language, illust_id, host)
            html = self.html_renderer.render(
                listing, image_index, host, self.settings.provider.name
            )
            logger.debug('プレビューHTMLを生成しました。')
            return html

    async def render_status(
        self, activity_id: int | str | CompactActivityId, host: str
    ) -> ActivityStatus:
        """アクティビティIDが指すページ範囲のステータスを返します。"""
        if isinstance(activity_id, CompactActivityId):
            decoded = activity_id
        elif isinstance(activity_id, str):
            decoded = CompactActivityId.parse(activity_id)
        else:
            decoded = CompactActivityId.from_int(activity_id)

        with logger.contextualize(
            illust_id=decoded.id,
            language=decoded.language,
            index=decoded.index,
            offset_end=decoded.offset_end,
        ):
            listing = await self.get_listing(decoded.language, str(decoded.id), host)
            status = self.activity_renderer.render(listing, decoded)
            logger.bind(media_count=len(status.media_attachments)).debug(
                'ステータスを生成しました。'
            )
            return status

    def render_oembed(self, author_name: str, author_id: str | None) -> OEmbedResponse:
        return build_oembed(author_name, author_id, self.settings.provider)
