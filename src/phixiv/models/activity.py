# FILE: src/phixiv/models/activity.py
"""
Fediverseのリンクプレビュー用クローラーが読むMastodonステータスのサブセット。
クローラーはフィールドの存在を前提にするため、未使用の項目も省略せず
null または空のコレクションとして出力します。
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..shared.constants import RENDER_STRINGS
from ..shared.enums import MediaType


class ActivityBaseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Application(ActivityBaseModel):
    name: str = RENDER_STRINGS.APPLICATION_NAME
    website: Any | None = None


class MediaAttachment(ActivityBaseModel):
    id: str
    media_type: MediaType = Field(MediaType.IMAGE, alias='type')
    url: str
    preview_url: str
    remote_url: Any | None = None
    preview_remote_url: Any | None = None
    text_url: Any | None = None
    description: str = ''
    meta: dict[str, Any] = Field(default_factory=dict)


class Account(ActivityBaseModel):
    id: str
    display_name: str
    username: str
    acct: str
    url: str
    uri: str
    created_at: str
    locked: bool = False
    bot: bool = False
    discoverable: bool = True
    indexable: bool = False
    group: bool = False
    avatar: str | None = None
    avatar_static: str | None = None
    header: Any | None = None
    header_static: Any | None = None
    followers_count: int = 0
    following_count: int = 0
    statuses_count: int = 0
    hide_collections: bool = False
    noindex: bool = False
    emojis: list[Any] = Field(default_factory=list)
    roles: list[Any] = Field(default_factory=list)
    fields_: list[Any] = Field(default_factory=list, alias='fields')


class ActivityStatus(ActivityBaseModel):
    """`/api/v1/statuses/{id}` 相当のレスポンス。"""

    id: str
    url: str
    uri: str
    created_at: str
    edited_at: Any | None = None
    reblog: Any | None = None
    language: str
    content: str
    spoiler_text: str = ''
    visibility: str = 'public'
    application: Application = Field(default_factory=Application)
    media_attachments: list[MediaAttachment] = Field(default_factory=list)
    account: Account
    mentions: list[Any] = Field(default_factory=list)
    tags: list[Any] = Field(default_factory=list)
    emojis: list[Any] = Field(default_factory=list)
    card: Any | None = None
    poll: Any | None = None

    def to_json_dict(self) -> dict[str, Any]:
        """エイリアス付き・None含みのJSON互換辞書を返します。"""
        return self.model_dump(mode='json', by_alias=True)
