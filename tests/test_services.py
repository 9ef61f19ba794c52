import httpx
import pytest
import respx

from phixiv.infrastructure.builder import ListingBuilder
from phixiv.infrastructure.cache import ListingCache
from phixiv.infrastructure.client import PixivAjaxClient
from phixiv.services import ArtworkService
from phixiv.shared.exceptions import InvalidActivityId
from phixiv.shared.settings import Settings
from phixiv.utils.activity_id import CompactActivityId

HOST = 'phixiv.net'


@pytest.fixture
def service(settings: Settings) -> ArtworkService:
    client = PixivAjaxClient(settings.upstream)
    builder = ListingBuilder(client, settings.features)
    return ArtworkService(settings, builder, ListingCache(capacity=8))


class TestArtworkService:
    @pytest.mark.asyncio
    @respx.mock
    async def test_listing_is_cached(self, service: ArtworkService, ajax_payload) -> None:
        route = respx.get(host='www.pixiv.net', path='/ajax/illust/12345').mock(
            return_value=httpx.Response(200, json=ajax_payload())
        )

        first = await service.get_listing(None, '12345', HOST)
        second = await service.get_listing('jp', '12345#x', HOST)

        assert first == second
        assert first.language == 'jp'
        assert route.call_count == 1
        assert route.calls.last.request.url.params['lang'] == 'jp'

    @pytest.mark.asyncio
    @respx.mock
    async def test_render_embed(self, service: ArtworkService, ajax_payload) -> None:
        respx.get(host='www.pixiv.net', path='/ajax/illust/12345').mock(
            return_value=httpx.Response(200, json=ajax_payload())
        )

        html = await service.render_embed('en', '12345', 2, HOST)

        assert '12345_p1_master1200.jpg' in html
        assert '<meta property="og:site_name" content="phixiv">' in html

    @pytest.mark.asyncio
    @respx.mock
    async def test_render_status_from_string(
        self, service: ArtworkService, ajax_payload
    ) -> None:
        respx.get(host='www.pixiv.net', path='/ajax/illust/12345').mock(
            return_value=httpx.Response(200, json=ajax_payload())
        )
        activity_id = CompactActivityId('en', 12345, 1, offset_end=1)

        status = await service.render_status(str(activity_id), HOST)

        assert status.id == str(activity_id)
        assert len(status.media_attachments) == 2
        assert status.media_attachments[0].url.endswith('12345_p1_master1200.jpg')

    @pytest.mark.asyncio
    async def test_render_status_rejects_garbage(self, service: ArtworkService) -> None:
        with pytest.raises(InvalidActivityId):
            await service.render_status('not-a-number', HOST)

    def test_render_oembed(self, service: ArtworkService) -> None:
        document = service.render_oembed('artist', '777')

        assert document.author_url == 'https://www.pixiv.net/users/777'
