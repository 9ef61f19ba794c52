# FILE: src/phixiv/shared/settings.py

import tomllib
from pathlib import Path
from typing import Any, cast

from pydantic import (
    BaseModel,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
)
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .exceptions import SettingsError


# --- TOMLファイル読み込みロジック ---
def load_toml_config(toml_file: Path) -> dict[str, Any]:
    """指定されたTOMLファイルを読み込みます。"""
    if not toml_file.is_file():
        return {}
    try:
        with toml_file.open('rb') as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise SettingsError(
            f"設定ファイル '{toml_file}' の解析に失敗しました: {e}"
        ) from e


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """ユーザー指定のTOML設定ファイルを読み込むためのカスタムソース。"""

    def __init__(self, settings_cls: type[BaseSettings], config_file: Path | None):
        super().__init__(settings_cls)
        self.config_file = config_file
        self._toml_config: dict[str, Any] = (
            load_toml_config(self.config_file) if self.config_file else {}
        )

    def get_field_value(self, field: object, field_name: str) -> tuple[Any, str, bool]:
        """フィールドごとの値取得はサポートしないため、__call__に処理を委ねます。"""
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._toml_config


class PyProjectTomlSource(PydanticBaseSettingsSource):
    """pyproject.tomlから[tool.phixiv]セクションを読み込むソース。"""

    def __init__(self, settings_cls: type[BaseSettings]):
        super().__init__(settings_cls)
        self._config = self._load_pyproject_toml()

    def _load_pyproject_toml(self) -> dict[str, Any]:
        pyproject_path = Path.cwd() / 'pyproject.toml'
        config = load_toml_config(pyproject_path)
        return cast(dict[str, Any], config.get('tool', {}).get('phixiv', {}))

    def get_field_value(self, field: object, field_name: str) -> tuple[Any, str, bool]:
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._config


# --- 設定モデル定義 ---


class UpstreamSettings(BaseModel):
    """Pixiv ajax APIへのリクエストに関する設定。"""

    base_url: str = Field(
        default='https://www.pixiv.net',
        description='ajax APIのホスト。',
    )
    cookie: SecretStr | None = Field(
        default=None,
        description='PHPSESSIDクッキーの値。R-18作品の取得などに使用します。',
    )
    user_agent: str = Field(
        default=(
            'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
            '(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36'
        ),
        description='APIリクエストに使用するユーザーエージェント。',
    )
    app_os: str = Field(default='iOS', description='App-Os ヘッダーの値。')
    app_os_version: str = Field(
        default='14.6', description='App-Os-Version ヘッダーの値。'
    )
    timeout: float = Field(
        default=10.0,
        gt=0,
        description='1回のリクエストのタイムアウト(秒)。',
    )

    @field_validator('cookie')
    @classmethod
    def validate_cookie_is_not_blank(cls, value: SecretStr | None) -> SecretStr | None:
        # 空文字のクッキーは未設定として扱う
        if value is None or not value.get_secret_value().strip():
            return None
        return value


class FeatureSettings(BaseModel):
    """リスティング構築時の機能フラグ。"""

    ugoira_enabled: bool = Field(
        default=False,
        description='うごイラを動画(mp4)として配信するかどうか。',
    )
    thumbnail_type: str | None = Field(
        default=None,
        description="画像パス中の 'img-master' を置き換える文字列 (例: 'c/600x1200_90/img-master')。",
    )


class CacheSettings(BaseModel):
    """リスティングキャッシュの設定。"""

    capacity: int = Field(
        default=1024,
        gt=0,
        description='キャッシュに保持するリスティングの最大件数。',
    )


class ProviderSettings(BaseModel):
    """埋め込み表示やoEmbedに表示するサービス情報。"""

    name: str = Field(default='phixiv', description='サイト名。')
    host: str = Field(
        default='phixiv.net',
        description='CLIでホスト名が指定されなかった場合に使うホスト名。',
    )
    url: str = Field(
        default='https://github.com/HazelTheWitch/phixiv',
        description='oEmbedの provider_url。',
    )


class Settings(BaseSettings):
    """
    アプリケーションの階層的設定管理クラス。
    以下の優先順位で設定を読み込みます:
    1. Pythonコードからの直接初期化
    2. --config で指定されたカスタムTOMLファイル
    3. 環境変数 (例: PHIXIV_UPSTREAM__COOKIE=...)
    4. .env ファイル
    5. pyproject.toml内の [tool.phixiv] セクション
    6. モデルで定義されたデフォルト値
    """

    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    features: FeatureSettings = Field(default_factory=FeatureSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    log_level: str = 'INFO'

    _config_file: Path | None = None

    def __init__(self, **values: object):
        config_file_path = values.pop('_config_file', None)
        config_file = (
            Path(cast(Path | str, config_file_path)) if config_file_path else None
        )

        try:
            # _config_file は init ソース経由で settings_customise_sources に渡る
            super().__init__(_config_file=config_file, **values)  # type: ignore [arg-type]
        except (ValidationError, ValueError) as e:
            raise SettingsError(f'設定の検証に失敗しました:\n{e}') from e
        self._config_file = config_file

    model_config = SettingsConfigDict(
        env_nested_delimiter='__',
        env_prefix='PHIXIV_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        config_file_path = getattr(init_settings, 'init_kwargs', {}).get('_config_file')
        if config_file_path and not isinstance(config_file_path, Path):
            config_file_path = Path(config_file_path)

        return (
            init_settings,
            TomlConfigSettingsSource(settings_cls, config_file_path),
            env_settings,
            dotenv_settings,
            PyProjectTomlSource(settings_cls),
        )
