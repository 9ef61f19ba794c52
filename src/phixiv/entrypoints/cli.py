# FILE: src/phixiv/entrypoints/cli.py
import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from dotenv import find_dotenv, set_key
from loguru import logger

from ..infrastructure.builder import ListingBuilder
from ..infrastructure.cache import ListingCache
from ..infrastructure.client import PixivAjaxClient
from ..services import ArtworkService
from ..shared.exceptions import PhixivError, SettingsError
from ..shared.settings import Settings
from ..utils.activity_id import CompactActivityId
from ..utils.logging import setup_logging
from ..utils.url_parser import ArtworkReference, parse_artwork_reference

T = TypeVar('T')

# ArtworkService を組み立てて ctx.obj に渡すサブコマンド
SERVICE_COMMANDS = frozenset({'info', 'embed', 'status', 'oembed'})

DEFAULT_ENV_FILENAME = '.env'
COOKIE_ENV_KEY = 'PHIXIV_UPSTREAM__COOKIE'

app = typer.Typer(
    help='Pixivの作品IDから埋め込み用のHTMLやActivityPubステータスを生成するコマンドラインツールです。',
    rich_markup_mode='markdown',
)


def _initialize_settings(config_file: Path | None, log_level: str) -> Settings:
    """設定オブジェクトを初期化するヘルパー関数。"""
    try:
        return Settings(_config_file=config_file, log_level=log_level)
    except SettingsError as e:
        logger.bind(error=str(e)).error('❌ 設定エラーが発生しました。')
        raise typer.Exit(code=1) from e


def _parse_reference(target_input: str) -> ArtworkReference:
    try:
        return parse_artwork_reference(target_input)
    except PhixivError as e:
        logger.bind(error=str(e)).error('❌ 入力を解析できませんでした。')
        raise typer.Exit(code=1) from e


def build_service(settings: Settings) -> ArtworkService:
    """設定から依存関係を組み立て、ArtworkService を返します。"""
    client = PixivAjaxClient(settings.upstream)
    builder = ListingBuilder(client, settings.features)
    cache = ListingCache(capacity=settings.cache.capacity)
    return ArtworkService(settings=settings, builder=builder, cache=cache)


def _run(service: ArtworkService, factory: Callable[[], Awaitable[T]]) -> T:
    """
    イベントループ上で処理を実行し、終了時にHTTPクライアントを閉じます。
    アプリケーション定義の例外は終了コード1に変換します。
    """

    async def runner() -> T:
        try:
            return await factory()
        finally:
            await service.builder.client.aclose()

    try:
        return asyncio.run(runner())
    except PhixivError as e:
        logger.bind(error=str(e), error_type=type(e).__name__).error(
            '❌ 処理中にエラーが発生しました。'
        )
        raise typer.Exit(code=1) from e


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option(
            '-v',
            '--verbose',
            help='詳細なデバッグログを有効にします。',
            show_default=False,
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            '-c',
            '--config',
            help='カスタム設定TOMLファイルへのパス。',
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ] = None,
    log_file: Annotated[
        bool,
        typer.Option(
            '--log-file',
            help='ログをJSON形式でファイルに出力します。',
            show_default=False,
        ),
    ] = False,
) -> None:
    """
    Pixiv embed fixer
    """
    log_level = 'DEBUG' if verbose else 'INFO'
    setup_logging(log_level, serialize_to_file=log_file)

    settings = _initialize_settings(config, log_level)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        return

    if ctx.invoked_subcommand in SERVICE_COMMANDS:
        ctx.obj = build_service(settings)
    else:
        ctx.obj = settings


@app.command()
def info(
    ctx: typer.Context,
    target_input: Annotated[
        str,
        typer.Argument(help='Pixivの作品URLまたはID。', metavar='INPUT'),
    ],
    lang: Annotated[
        str | None,
        typer.Option('--lang', '-l', help='タグ翻訳などに使う言語コード。'),
    ] = None,
    host: Annotated[
        str | None,
        typer.Option('--host', help='画像プロキシURLに使うホスト名。'),
    ] = None,
) -> None:
    """作品リスティングをJSONで出力します。"""
    service: ArtworkService = ctx.obj
    reference = _parse_reference(target_input)
    listing = _run(
        service,
        lambda: service.get_listing(
            lang or reference.language,
            reference.illust_id,
            host or service.settings.provider.host,
        ),
    )
    typer.echo(listing.model_dump_json(indent=2))


@app.command()
def embed(
    ctx: typer.Context,
    target_input: Annotated[
        str,
        typer.Argument(help='Pixivの作品URLまたはID。', metavar='INPUT'),
    ],
    lang: Annotated[
        str | None,
        typer.Option('--lang', '-l', help='タグ翻訳などに使う言語コード。'),
    ] = None,
    index: Annotated[
        int | None,
        typer.Option('--index', '-i', help='表示するページ番号 (1始まり)。', min=0),
    ] = None,
    host: Annotated[
        str | None,
        typer.Option('--host', help="リクエストを受けたホスト名。'c.' で始まるとキャプションを省略します。"),
    ] = None,
) -> None:
    """ソーシャルプレビュー用のHTMLを出力します。"""
    service: ArtworkService = ctx.obj
    reference = _parse_reference(target_input)
    html = _run(
        service,
        lambda: service.render_embed(
            lang or reference.language,
            reference.illust_id,
            index if index is not None else reference.image_index,
            host or service.settings.provider.host,
        ),
    )
    typer.echo(html)


@app.command()
def status(
    ctx: typer.Context,
    activity_id: Annotated[
        str,
        typer.Argument(help='10進数のアクティビティID。', metavar='ACTIVITY_ID'),
    ],
    host: Annotated[
        str | None,
        typer.Option('--host', help='画像プロキシURLに使うホスト名。'),
    ] = None,
) -> None:
    """アクティビティIDに対応するMastodon互換ステータスをJSONで出力します。"""
    service: ArtworkService = ctx.obj
    result = _run(
        service,
        lambda: service.render_status(
            activity_id, host or service.settings.provider.host
        ),
    )
    typer.echo(json.dumps(result.to_json_dict(), ensure_ascii=False, indent=2))


@app.command('encode-id')
def encode_id(
    illust_id: Annotated[int, typer.Option('--id', help='作品ID。', min=0)],
    lang: Annotated[str, typer.Option('--lang', '-l', help='言語コード。')] = 'jp',
    index: Annotated[
        int, typer.Option('--index', '-i', help='ページ番号 (0始まり)。', min=0)
    ] = 0,
    offset_end: Annotated[
        int,
        typer.Option('--offset-end', help='index 以降に含める追加ページ数。', min=0),
    ] = 0,
) -> None:
    """アクティビティIDを生成します。"""
    typer.echo(CompactActivityId(lang, illust_id, index, offset_end).to_int())


@app.command('decode-id')
def decode_id(
    value: Annotated[str, typer.Argument(help='10進数のアクティビティID。')],
) -> None:
    """アクティビティIDを各フィールドに分解して表示します。"""
    try:
        decoded = CompactActivityId.parse(value)
    except PhixivError as e:
        logger.bind(error=str(e)).error('❌ アクティビティIDを解析できませんでした。')
        raise typer.Exit(code=1) from e
    typer.echo(
        json.dumps(
            {
                'language': decoded.language,
                'id': decoded.id,
                'index': decoded.index,
                'offset_end': decoded.offset_end,
            }
        )
    )


@app.command()
def oembed(
    ctx: typer.Context,
    author_name: Annotated[str, typer.Argument(help='作者名。')],
    author_id: Annotated[
        str | None, typer.Option('--author-id', help='作者のユーザーID。')
    ] = None,
) -> None:
    """HTMLページから参照されるoEmbedドキュメントを出力します。"""
    service: ArtworkService = ctx.obj
    document = service.render_oembed(author_name, author_id)
    typer.echo(document.model_dump_json(by_alias=True, indent=2))


@app.command('set-cookie')
def set_cookie(
    cookie: Annotated[
        str,
        typer.Option(
            '--cookie',
            prompt='PHPSESSID',
            hide_input=True,
            help='PixivのPHPSESSIDクッキーの値。',
        ),
    ],
) -> None:
    """PHPSESSIDクッキーを .env ファイルに保存します。"""
    env_path_str = find_dotenv(usecwd=True)
    env_path = Path(env_path_str) if env_path_str else Path(DEFAULT_ENV_FILENAME)

    if not env_path.exists():
        env_path.touch()

    set_key(str(env_path), COOKIE_ENV_KEY, cookie.strip())
    logger.bind(env_path=str(env_path.resolve())).success(
        'PHPSESSIDクッキーを保存しました。'
    )


@logger.catch(exclude=PhixivError, onerror=lambda _: sys.exit(1))
def run_app() -> None:
    """
    アプリケーション全体を@logger.catchでラップし、
    制御下の例外は個別処理、それ以外をLoguruに記録させるためのラッパー関数。
    """
    try:
        app()
    except PhixivError as e:
        logger.bind(error=str(e)).error('❌ 処理中にエラーが発生しました。')
        sys.exit(1)
