# FILE: src/phixiv/infrastructure/cache.py
import asyncio

from cachetools import LRUCache
from loguru import logger

from ..models.domain import ArtworkListing
from .builder import ListingBuilder, clean_illust_id


class ListingCache:
    """
    (言語, 作品ID) をキーに構築済みの ArtworkListing を保持する容量制限付きキャッシュ。

    - 容量を超えると最も長く参照されていないエントリから破棄する (TTLなし)。
    - 読み取りはロックを取らない。書き込み (ミス後の登録) のみ短い排他区間を取る。
    - 同一キーへの同時ミスはそれぞれビルダーを呼び出す (重複排除はしない)。
      どちらの結果も正しいため、後から書き込んだ方が残る。
    - 構築に失敗した結果はキャッシュしない。
    """

    def __init__(self, capacity: int = 1024):
        self._entries: LRUCache[str, ArtworkListing] = LRUCache(maxsize=capacity)
        self._write_lock = asyncio.Lock()

    @property
    def capacity(self) -> int:
        return int(self._entries.maxsize)

    @staticmethod
    def key_for(language: str, illust_id: str) -> str:
        return f'{language}_{clean_illust_id(illust_id)}'

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, language: str, illust_id: str) -> ArtworkListing | None:
        """キャッシュ済みのリスティングを返します。参照したエントリは最新扱いになる。"""
        return self._entries.get(self.key_for(language, illust_id))

    async def put(self, language: str, illust_id: str, listing: ArtworkListing) -> None:
        async with self._write_lock:
            self._entries[self.key_for(language, illust_id)] = listing

    async def get_or_build(
        self,
        language: str,
        illust_id: str,
        host: str,
        builder: ListingBuilder,
    ) -> ArtworkListing:
        """キャッシュにあればそれを返し、なければ構築して登録してから返します。"""
        key = self.key_for(language, illust_id)
        log = logger.bind(cache_key=key)

        cached = self._entries.get(key)
        if cached is not None:
            log.debug('リスティングキャッシュにヒットしました。')
            return cached

        log.debug('リスティングキャッシュにないため構築します。')
        listing = await builder.build(language, illust_id, host)
        await self.put(language, illust_id, listing)
        return listing

    def clear(self) -> None:
        self._entries.clear()
