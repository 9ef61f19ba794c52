# FILE: src/phixiv/models/pixiv.py
"""
Pixiv ajax API (/ajax/illust/{id}) のJSONレスポンスをマッピングするためのPydanticデータモデル。
このモジュールは外部APIの仕様に依存します。
必須フィールドの欠落は検証エラーとして扱い、黙ってデフォルト値で埋めることはしません。
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PixivBaseModel(BaseModel):
    """すべてのPixivモデルで共通の設定を持つ基底クラス。"""

    model_config = ConfigDict(
        populate_by_name=True,  # エイリアス名とフィールド名の両方で値を受け付ける
        extra='ignore',  # モデルにない余分なフィールドは無視する
    )


class Tag(PixivBaseModel):
    tag: str
    translation: dict[str, str] | None = None


class Tags(PixivBaseModel):
    tags: list[Tag] = Field(default_factory=list)


class Urls(PixivBaseModel):
    regular: str | None = None
    original: str | None = None


class AjaxMeta(PixivBaseModel):
    canonical: str


class AjaxExtraData(PixivBaseModel):
    meta: AjaxMeta


class UserIllust(PixivBaseModel):
    profile_image_url: str | None = Field(None, alias='profileImageUrl')


class AjaxBody(PixivBaseModel):
    """作品詳細の本体。"""

    title: str
    description: str
    tags: Tags
    urls: Urls
    author_id: str = Field(alias='userId')
    author_name: str = Field(alias='userName')
    extra_data: AjaxExtraData = Field(alias='extraData')
    illust_type: int = Field(alias='illustType')
    create_date: str = Field(alias='createDate')
    user_illusts: dict[str, UserIllust | None] = Field(alias='userIllusts')
    page_count: int = Field(alias='pageCount', ge=1)
    ai_type: int = Field(alias='aiType')
    bookmark_count: int = Field(0, alias='bookmarkCount')
    like_count: int = Field(0, alias='likeCount')
    comment_count: int = Field(0, alias='commentCount')
    view_count: int = Field(0, alias='viewCount')
    x_restrict: int = Field(0, alias='xRestrict')

    @field_validator('user_illusts', mode='before')
    @classmethod
    def empty_list_to_dict(cls, v: object) -> object:
        """APIが `userIllusts: []` のように空のリストを返す場合に対応する。"""
        if isinstance(v, list) and not v:
            return {}
        return v


class AjaxResponse(PixivBaseModel):
    """
    ajax APIからの応答データ全体を格納します。
    `error` / `message` はクライアントが検証前の辞書で判定するため保持しない。
    """

    body: AjaxBody
