# FILE: src/phixiv/__main__.py
"""
パッケージを 'python -m phixiv' コマンドで実行可能にするための
エントリーポイントです。
"""

from .entrypoints.cli import run_app

if __name__ == '__main__':
    run_app()
