# FILE: src/phixiv/shared/exceptions.py


class PhixivError(Exception):
    """アプリケーションの基底例外クラス。"""

    pass


class SettingsError(PhixivError):
    """設定関連のエラー。"""

    pass


# --- Upstream (Pixiv ajax API) ---
class UpstreamError(PhixivError):
    """Pixiv APIとの通信層で発生したエラーの基底クラス。"""

    def __init__(self, message: str, illust_id: str | None = None):
        if illust_id:
            super().__init__(f'[illust:{illust_id}] {message}')
        else:
            super().__init__(message)
        self.illust_id = illust_id


class TransportError(UpstreamError):
    """ネットワーク障害、または成功以外のHTTPステータスが返されたエラー。"""

    def __init__(
        self,
        message: str,
        illust_id: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, illust_id)
        self.status_code = status_code


class SchemaError(UpstreamError):
    """レスポンスのJSONが期待する構造を満たしていないエラー。"""

    pass


# --- Listing build ---
class BuildError(PhixivError):
    """作品リスティングの構築中に発生したエラーの基底クラス。"""

    pass


class InvalidIdentifier(BuildError):
    """作品IDが数字で始まっていない(クリーニング後に空になる)エラー。"""

    pass


class MissingImageUrl(BuildError):
    """regular・original のどちらの画像URLも存在しないエラー。"""

    pass


class InvalidUpstreamUrl(BuildError):
    """APIが返したURLを解析できなかったエラー。"""

    def __init__(self, message: str, url: str):
        super().__init__(f'{message}: {url!r}')
        self.url = url


# --- Compact activity id ---
class IdentifierError(PhixivError):
    """アクティビティIDの入力に関するエラーの基底クラス。"""

    pass


class InvalidActivityId(IdentifierError):
    """10進数の64bit符号なし整数として解釈できないアクティビティID。"""

    pass


class RenderError(PhixivError):
    """テンプレートのレンダリング中に発生したエラー。"""

    pass
