# FILE: src/phixiv/infrastructure/renderers/oembed.py
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from ...shared.constants import PIXIV_URLS
from ...shared.settings import ProviderSettings


class OEmbedResponse(BaseModel):
    """HTMLページから参照されるrich形式のoEmbedドキュメント。"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    version: str = '1.0'
    embed_type: str = Field('rich', alias='type')
    author_name: str
    author_url: str
    provider_name: str
    provider_url: str


def build_oembed(
    author_name: str,
    author_id: str | None,
    provider: ProviderSettings,
) -> OEmbedResponse:
    """作者IDが分かればユーザーページ、なければPixivのトップページを author_url にします。"""
    if author_id:
        author_url = PIXIV_URLS.USER_PAGE.format(author_id=quote(author_id, safe=''))
    else:
        author_url = PIXIV_URLS.TOP_PAGE

    return OEmbedResponse(
        author_name=author_name,
        author_url=author_url,
        provider_name=provider.name,
        provider_url=provider.url,
    )
