# FILE: src/phixiv/infrastructure/renderers/html.py
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateError
from loguru import logger

from ...models.domain import ArtworkListing
from ...shared.constants import RENDER_STRINGS, TEMPLATE_NAMES, TEMPLATES_ROOT
from ...shared.exceptions import RenderError
from ...utils.activity_id import CompactActivityId
from ...utils.caption import extract_inner_text


def build_plain_description(listing: ArtworkListing, host: str) -> str:
    """
    OGP向けの説明文を組み立てます。
    AI生成マーカー + プレーンテキストのキャプション、タグ列の順に、空でないものを改行で連結する。
    `c.` で始まるホストではキャプション本文を省略します。
    """
    description_text = (
        ''
        if host.startswith(RENDER_STRINGS.COMPACT_HOST_PREFIX)
        else extract_inner_text(listing.description)
    )
    marker = RENDER_STRINGS.AI_MARKER_TEXT if listing.ai_generated else ''
    segments = [
        f'{marker}{description_text}',
        RENDER_STRINGS.TAG_SEPARATOR.join(listing.tags),
    ]
    return '\n'.join(segment for segment in segments if segment)


class HtmlRenderer:
    """1ページ分のソーシャルプレビュー用HTMLを生成するクラス。"""

    def __init__(self, template_dir: Path = TEMPLATES_ROOT):
        self.template_env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def build_context(
        self,
        listing: ArtworkListing,
        image_index: int | None,
        host: str,
        site_name: str,
    ) -> dict:
        """テンプレートに渡すコンテキストを構築します。image_index は1始まり。"""
        index = listing.select_page(image_index)
        activity_id = CompactActivityId(
            language=listing.language,
            id=int(listing.illust_id),
            index=index,
        )
        tag_string = RENDER_STRINGS.TAG_SEPARATOR.join(listing.tags)

        return {
            'image_proxy_url': listing.image_proxy_urls[index],
            'fallback_image_url': listing.image_proxy_urls[-1],
            'title': listing.title,
            'description': build_plain_description(listing, host),
            'author_name': listing.author_name,
            'author_id': listing.author_id,
            'url': listing.url,
            'alt_text': tag_string,
            'host': host,
            'activity_id': activity_id.to_int(),
            'site_name': site_name,
        }

    def render(
        self,
        listing: ArtworkListing,
        image_index: int | None,
        host: str,
        site_name: str,
    ) -> str:
        template_name = (
            TEMPLATE_NAMES.UGOIRA if listing.has_video else TEMPLATE_NAMES.ARTWORK
        )
        context = self.build_context(listing, image_index, host, site_name)
        try:
            template = self.template_env.get_template(template_name)
            return template.render(context)
        except TemplateError as e:
            logger.bind(template_name=template_name).error(
                f"テンプレート '{template_name}' のレンダリングに失敗しました。"
            )
            raise RenderError(f'テンプレートエラー: {e}') from e
