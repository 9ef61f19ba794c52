# FILE: src/phixiv/infrastructure/client.py
from types import TracebackType

import httpx
from loguru import logger
from pydantic import ValidationError

from ..models.pixiv import AjaxResponse
from ..shared.constants import HEADER_NAMES, PIXIV_URLS
from ..shared.exceptions import SchemaError, TransportError
from ..shared.settings import UpstreamSettings


class PixivAjaxClient:
    """
    Pixivの ajax API (/ajax/illust/{id}) と通信するためのクライアント。
    1回のリクエストで失敗した場合はリトライせず、そのまま呼び出し元に例外を伝播します。
    """

    def __init__(
        self,
        settings: UpstreamSettings,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.timeout,
        )

    async def __aenter__(self) -> 'PixivAjaxClient':
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """自身で生成した httpx.AsyncClient のみを閉じます。"""
        if self._owns_client:
            await self.http_client.aclose()

    def build_headers(self) -> dict[str, str]:
        """端末識別ヘッダー、ユーザーエージェント、任意のセッションクッキーを組み立てます。"""
        headers = {
            HEADER_NAMES.APP_OS: self.settings.app_os,
            HEADER_NAMES.APP_OS_VERSION: self.settings.app_os_version,
            HEADER_NAMES.USER_AGENT: self.settings.user_agent,
        }
        if self.settings.cookie:
            headers[HEADER_NAMES.COOKIE] = (
                f'PHPSESSID={self.settings.cookie.get_secret_value()}'
            )
        return headers

    def illust_url(self, illust_id: str) -> str:
        return self.settings.base_url.rstrip('/') + PIXIV_URLS.AJAX_ILLUST_PATH.format(
            illust_id=illust_id
        )

    async def fetch_illust(self, illust_id: str, language: str) -> AjaxResponse:
        """
        作品詳細を取得し、AjaxResponse にデシリアライズして返します。

        Raises:
            TransportError: 通信障害、または2xx以外のステータスの場合。
            SchemaError: レスポンスが期待する構造を満たさない場合。
        """
        log = logger.bind(illust_id=illust_id, language=language)
        log.debug('Pixiv APIにリクエストを送信します。')

        try:
            response = await self.http_client.get(
                self.illust_url(illust_id),
                params={'lang': language},
                headers=self.build_headers(),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            log.bind(status_code=status_code).warning(
                'Pixiv APIが成功以外のステータスを返しました。'
            )
            raise TransportError(
                f'Pixiv APIエラー (HTTP {status_code})',
                illust_id=illust_id,
                status_code=status_code,
            ) from e
        except httpx.HTTPError as e:
            log.bind(error=str(e)).warning('Pixiv APIとの通信に失敗しました。')
            raise TransportError(
                f'Pixiv APIとの通信に失敗しました: {e}', illust_id=illust_id
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise SchemaError(
                f'レスポンスをJSONとして解析できませんでした: {e}', illust_id=illust_id
            ) from e

        if isinstance(payload, dict) and payload.get('error') is True:
            message = payload.get('message') or 'unknown error'
            log.bind(message=message).warning('Pixiv APIがエラーを返しました。')
            raise TransportError(
                f'Pixiv APIエラー: {message}',
                illust_id=illust_id,
                status_code=response.status_code,
            )

        try:
            return AjaxResponse.model_validate(payload)
        except ValidationError as e:
            log.bind(error_count=e.error_count()).warning(
                'レスポンスの構造が想定と異なります。'
            )
            raise SchemaError(
                f'レスポンスの検証に失敗しました:\n{e}', illust_id=illust_id
            ) from e
