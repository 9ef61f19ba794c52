# FILE: src/phixiv/infrastructure/renderers/activity.py
from datetime import datetime, timezone
from html import escape

from loguru import logger

from ...models.activity import Account, ActivityStatus, MediaAttachment
from ...models.domain import ArtworkListing, is_video_url
from ...shared.constants import PIXIV_URLS, RENDER_STRINGS
from ...shared.enums import Language, MediaType
from ...utils.activity_id import CompactActivityId


def format_created_at(create_date: str) -> str:
    """
    Pixivの作成日時を `YYYY-MM-DDTHH:MM:SS.sssZ` (UTC, ミリ秒精度) に変換します。
    解析できない場合は元の文字列をそのまま返します。
    """
    try:
        parsed = datetime.fromisoformat(create_date)
    except ValueError:
        logger.bind(create_date=create_date).warning('作成日時を解析できませんでした。')
        return create_date
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime('%Y-%m-%dT%H:%M:%S.') + f'{parsed.microsecond // 1000:03d}Z'


def build_status_content(listing: ArtworkListing) -> str:
    """タイトルリンク、AI生成マーカー、キャプションHTML、タグを `<br />` で連結します。"""
    segments = [
        f'<a href="{escape(listing.url)}">{escape(listing.title)}</a>',
        RENDER_STRINGS.AI_MARKER_HTML if listing.ai_generated else '',
        listing.description,
        ' '.join(escape(tag) for tag in listing.tags),
    ]
    return RENDER_STRINGS.HTML_LINE_BREAK.join(segment for segment in segments if segment)


class ActivityRenderer:
    """ArtworkListing をMastodon互換のステータスに射影するクラス。"""

    def page_range(self, listing: ArtworkListing, activity_id: CompactActivityId) -> range:
        """アクティビティIDが指すページ範囲をリスティングの範囲内に丸めて返します。"""
        last = listing.page_count - 1
        start = min(activity_id.index, last)
        end = min(activity_id.last_index, last)
        return range(start, end + 1)

    def render(
        self, listing: ArtworkListing, activity_id: CompactActivityId
    ) -> ActivityStatus:
        created_at = format_created_at(listing.create_date)
        author_url = PIXIV_URLS.USER_PAGE.format(author_id=listing.author_id)

        media_attachments = []
        for index in self.page_range(listing, activity_id):
            url = listing.image_proxy_urls[index]
            media_attachments.append(
                MediaAttachment(
                    id=str(
                        CompactActivityId(
                            language=activity_id.language,
                            id=activity_id.id,
                            index=index,
                        )
                    ),
                    media_type=MediaType.VIDEO if is_video_url(url) else MediaType.IMAGE,
                    url=url,
                    preview_url=url,
                )
            )

        return ActivityStatus(
            id=str(activity_id),
            url=listing.url,
            uri=listing.url,
            created_at=created_at,
            language=Language(listing.language).iso_code,
            content=build_status_content(listing),
            media_attachments=media_attachments,
            account=Account(
                id=listing.author_id,
                display_name=listing.author_name,
                username=listing.author_name,
                acct=listing.author_name,
                url=author_url,
                uri=author_url,
                created_at=created_at,
                avatar=listing.profile_image_url,
                avatar_static=listing.profile_image_url,
            ),
        )
