# src/phixiv/shared/constants.py
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Final


# --- 1. Pixiv endpoints ---
@dataclass(frozen=True)
class PixivUrls:
    """Pixiv側のURLテンプレート。"""

    AJAX_ILLUST_PATH: str = '/ajax/illust/{illust_id}'
    USER_PAGE: str = 'https://www.pixiv.net/users/{author_id}'
    TOP_PAGE: str = 'https://www.pixiv.net/'


PIXIV_URLS: Final = PixivUrls()


# --- 2. Local proxy paths ---
@dataclass(frozen=True)
class ProxyPaths:
    """
    ローカル画像プロキシ上のパス。
    リスティングの画像URLはすべてこの形式で再ホストされる。
    """

    IMAGE: str = 'https://{host}/i{path}'
    UGOIRA_VIDEO: str = 'https://{host}/i/ugoira/{illust_id}.mp4'
    UGOIRA_MARKER: str = '/i/ugoira/'
    PAGE_ZERO_MARKER: str = '_p0_'
    PAGE_MARKER: str = '_p{index}_'
    MASTER_SEGMENT: str = 'img-master'


PROXY_PATHS: Final = ProxyPaths()


# --- 3. Patterns ---
@dataclass(frozen=True)
class Patterns:
    """
    キャプション処理と入力解析用のコンパイル済み正規表現
    """

    LEADING_DIGITS: re.Pattern = re.compile(r'^[0-9]*')
    JUMP_LINK: re.Pattern = re.compile(r'href="/jump\.php\?(.*?)"')
    # before / tag / inner / after の4分割。非貪欲マッチとバックトラックに依存する
    TAG_PAIR: re.Pattern = re.compile(
        r'^(?P<before>.*?)<(?P<tag>[^\s>]+)(?:\s*[^>]+)?>(?P<inner>.*?)</(?P=tag)\s*>(?P<after>.*)$',
        re.DOTALL,
    )
    LINE_BREAK: re.Pattern = re.compile(r'<br\s*/?>')
    PIXIV_ARTWORK: re.Pattern = re.compile(
        r'pixiv\.net/(?:(?P<language>[a-z_]+)/)?artworks/(?P<id>\d+)(?:/(?P<index>\d+))?'
    )
    PIXIV_MEMBER_ILLUST: re.Pattern = re.compile(
        r'member_illust\.php\?(?:.*&)?illust_id=(?P<id>\d+)'
    )


PATTERNS: Final = Patterns()


# --- 4. Upstream headers ---
@dataclass(frozen=True)
class HeaderNames:
    APP_OS: str = 'App-Os'
    APP_OS_VERSION: str = 'App-Os-Version'
    USER_AGENT: str = 'User-Agent'
    COOKIE: str = 'Cookie'


HEADER_NAMES: Final = HeaderNames()


# --- 5. Renderer ---
@dataclass(frozen=True)
class RenderStrings:
    """各表示面に埋め込む固定文字列。"""

    AI_MARKER_TEXT: str = '[AI Generated] '
    AI_MARKER_HTML: str = 'AI Generated'
    COMPACT_HOST_PREFIX: str = 'c.'
    TAG_SEPARATOR: str = ', '
    HTML_LINE_BREAK: str = '<br />'
    APPLICATION_NAME: str = 'Twitter Web App'


RENDER_STRINGS: Final = RenderStrings()


@dataclass(frozen=True)
class TemplateNames:
    ARTWORK: str = 'artwork.html.j2'
    UGOIRA: str = 'ugoira.html.j2'


TEMPLATE_NAMES: Final = TemplateNames()

TEMPLATES_ROOT: Final = Path(__file__).parent.parent / 'assets' / 'templates'

DEFAULT_LANGUAGE: Final = 'jp'
