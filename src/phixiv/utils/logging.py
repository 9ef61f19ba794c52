# FILE: src/phixiv/utils/logging.py
"""
CLIのログ出力設定。

標準出力は生成したHTML・ステータスJSON・oEmbedドキュメントの出力先なので、
ログはすべて標準エラー(Rich)か、任意のJSONファイルにのみ書き出す。
"""

from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler

LOG_FILE_PATTERN = 'phixiv_{time}.log'


def setup_logging(
    level: str = 'INFO',
    serialize_to_file: bool = False,
    log_dir: Path = Path('logs'),
) -> None:
    """
    既存のシンクを外し、stderr向けのRichシンクを登録します。
    serialize_to_file が真なら log_dir 以下にDEBUGレベルのJSONログも残す。
    """
    logger.remove()

    logger.add(
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            # キャプションやタグ由来の角括弧をRichのマークアップとして解釈させない
            markup=False,
            log_time_format='[%X]',
        ),
        level=level.upper(),
        format='{message}',
        backtrace=False,
        diagnose=False,
    )

    if serialize_to_file:
        logger.add(
            str(log_dir / LOG_FILE_PATTERN),
            level='DEBUG',
            serialize=True,
            enqueue=True,
            rotation='10 MB',
            retention='7 days',
            backtrace=True,
            diagnose=True,
        )

    log = logger.bind(level=level.upper())
    if serialize_to_file:
        log = log.bind(log_dir=str(log_dir))
    log.debug('ロガーを設定しました。')
