# FILE: src/phixiv/utils/caption.py
"""
Pixivのキャプション(HTML断片)を表示面ごとに整形するユーティリティ。

キャプションで使われるHTMLの種類は pixiv ヘルプセンター
「キャプションとは？」に準拠します。illust/○○○ 形式の短縮リンクは特別扱いしません。
"""

from urllib.parse import unquote

from ..shared.constants import PATTERNS


def fix_jump_links(description: str) -> str:
    """
    `href="/jump.php?<エンコード済みURL>"` 形式の内部リダイレクトリンクを
    `href="<デコード済みURL>"` に置換します。その他のマークアップには触れません。
    """
    return PATTERNS.JUMP_LINK.sub(
        lambda match: f'href="{unquote(match.group(1))}"', description
    )


def extract_inner_text(html: str) -> str:
    """
    HTML文字列から表示される文字列 (innerText) を取り出します。

    1. 先頭から最初に閉じタグまで揃っているタグ対を探し、
       前方 / 内側 / 後方 に分割します。見つからなければ全体をそのまま出力します。
    2. 前方はそのまま、内側は再帰的に処理してから後方を処理します。
       アンカー(`a`)の内側は前後の文字列と連結しないよう半角スペースで挟みます。
    3. 最後に `<br>` 系のタグで分割し、各行をtrimして改行で連結します。

    不正なマークアップはリテラルとして扱い、例外は送出しません。
    """
    full_string: list[str] = []
    # 後方 → 内側の順に積み、内側から先に取り出す
    segments = [html]

    while segments:
        segment = segments.pop()
        match = PATTERNS.TAG_PAIR.match(segment)
        if match is None:
            full_string.append(segment)
            continue

        segments.append(match.group('after'))

        inner = match.group('inner')
        if match.group('tag') == 'a':
            inner = f' {inner} '
        segments.append(inner)

        full_string.append(match.group('before'))

    # 単独のアンカー由来の前後スペースもここで除去される
    return '\n'.join(
        line.strip() for line in PATTERNS.LINE_BREAK.split(''.join(full_string))
    )
