import json

import httpx
import pytest
import respx
from typer.testing import CliRunner

from phixiv.entrypoints.cli import app
from phixiv.shared.settings import Settings
from phixiv.utils.activity_id import CompactActivityId

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(settings: Settings) -> Settings:
    return settings


class TestIdCommands:
    def test_encode_id(self) -> None:
        result = runner.invoke(
            app, ['encode-id', '--id', '12345', '--lang', 'en', '--index', '2']
        )

        assert result.exit_code == 0
        assert result.stdout.strip() == str(CompactActivityId('en', 12345, 2))

    def test_decode_id(self) -> None:
        value = CompactActivityId('zh_tw', 12345, 4, offset_end=2).to_int()

        result = runner.invoke(app, ['decode-id', str(value)])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            'language': 'zh_tw',
            'id': 12345,
            'index': 4,
            'offset_end': 2,
        }

    def test_decode_id_rejects_garbage(self) -> None:
        result = runner.invoke(app, ['decode-id', 'abc'])

        assert result.exit_code == 1


class TestOEmbedCommand:
    def test_prints_document(self) -> None:
        result = runner.invoke(app, ['oembed', 'artist', '--author-id', '777'])

        assert result.exit_code == 0
        document = json.loads(result.stdout)
        assert document['type'] == 'rich'
        assert document['author_url'] == 'https://www.pixiv.net/users/777'

    def test_uses_configured_provider(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('PHIXIV_PROVIDER__NAME', 'my-phixiv')

        result = runner.invoke(app, ['oembed', 'artist'])

        assert result.exit_code == 0
        document = json.loads(result.stdout)
        assert document['provider_name'] == 'my-phixiv'
        assert document['author_url'] == 'https://www.pixiv.net/'


class TestNetworkCommands:
    @respx.mock
    def test_info(self, ajax_payload) -> None:
        respx.get(host='www.pixiv.net', path='/ajax/illust/12345').mock(
            return_value=httpx.Response(200, json=ajax_payload())
        )

        result = runner.invoke(
            app, ['info', 'https://www.pixiv.net/en/artworks/12345', '--host', 'example.net']
        )

        assert result.exit_code == 0
        listing = json.loads(result.stdout)
        assert listing['language'] == 'en'
        assert listing['tags'] == ['#cat', '#オリジナル']
        assert listing['image_proxy_urls'][0].startswith('https://example.net/i/')

    @respx.mock
    def test_embed(self, ajax_payload) -> None:
        respx.get(host='www.pixiv.net', path='/ajax/illust/12345').mock(
            return_value=httpx.Response(200, json=ajax_payload())
        )

        result = runner.invoke(app, ['embed', '12345', '--index', '3'])

        assert result.exit_code == 0
        assert '12345_p2_master1200.jpg' in result.stdout
        assert 'https://phixiv.net/api/v1/statuses/' in result.stdout

    @respx.mock
    def test_status(self, ajax_payload) -> None:
        respx.get(host='www.pixiv.net', path='/ajax/illust/12345').mock(
            return_value=httpx.Response(200, json=ajax_payload())
        )
        activity_id = CompactActivityId('jp', 12345, 0, offset_end=2)

        result = runner.invoke(app, ['status', str(activity_id)])

        assert result.exit_code == 0
        document = json.loads(result.stdout)
        assert document['id'] == str(activity_id)
        assert len(document['media_attachments']) == 3

    @respx.mock
    def test_upstream_failure_exits_with_error(self) -> None:
        respx.get(host='www.pixiv.net', path='/ajax/illust/12345').mock(
            return_value=httpx.Response(404)
        )

        result = runner.invoke(app, ['info', '12345'])

        assert result.exit_code == 1

    def test_invalid_input_exits_with_error(self) -> None:
        result = runner.invoke(app, ['info', 'not-an-artwork'])

        assert result.exit_code == 1


class TestSetCookie:
    def test_writes_env_file(self, tmp_path) -> None:
        result = runner.invoke(app, ['set-cookie', '--cookie', ' abc123 '])

        assert result.exit_code == 0
        env_text = (tmp_path / '.env').read_text(encoding='utf-8')
        assert 'PHIXIV_UPSTREAM__COOKIE' in env_text
        assert 'abc123' in env_text
        assert Settings().upstream.cookie.get_secret_value() == 'abc123'
