# FILE: src/phixiv/models/domain.py
"""
アプリケーションのドメインにおける中心的なデータモデルを定義します。
ArtworkListing は言語と作品IDの組で一意に決まり、構築後は変更されません。
"""

from pydantic import BaseModel, ConfigDict, Field

from ..shared.constants import PROXY_PATHS


class ArtworkListing(BaseModel):
    """正規化された作品情報。HTML・ActivityPubの両レンダラーが共有します。"""

    model_config = ConfigDict(frozen=True)

    image_proxy_urls: tuple[str, ...] = Field(min_length=1)
    title: str
    ai_generated: bool
    description: str  # jump.php リンク修正済みのキャプションHTML
    tags: tuple[str, ...]
    url: str
    author_name: str
    author_id: str
    is_ugoira: bool
    create_date: str
    illust_id: str
    profile_image_url: str | None = None
    language: str
    bookmark_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    view_count: int = 0
    x_restrict: int = 0

    @property
    def page_count(self) -> int:
        return len(self.image_proxy_urls)

    @property
    def has_video(self) -> bool:
        """先頭のURLがうごイラの動画かどうか。"""
        return is_video_url(self.image_proxy_urls[0])

    def select_page(self, image_index: int | None) -> int:
        """
        1始まりのページ番号を0始まりのインデックスに変換します。
        None は1ページ目、範囲外の値は最終ページ(0以下は先頭)に丸めます。
        動画付きのうごイラは常に先頭を返します。
        """
        if self.has_video:
            return 0
        page = 1 if image_index is None else image_index
        return max(min(page, self.page_count) - 1, 0)


def is_video_url(url: str) -> bool:
    """ローカルプロキシ上のうごイラ動画URLかどうかを判定します。"""
    return PROXY_PATHS.UGOIRA_MARKER in url and url.endswith('.mp4')
