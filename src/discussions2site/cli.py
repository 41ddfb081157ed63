"""discussions2site のコマンドラインインターフェース。"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable

from .builder import build_site
from .config import DEFAULT_ASSETS_DIR, DEFAULT_OUTPUT_DIR, BuildConfig
from .env import load_env_file, load_site_settings
from .errors import SiteBuildError

logger = logging.getLogger(__name__)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="GitHub Discussions からブログの静的サイトを生成します")
    parser.add_argument("--out", dest="output_dir", type=Path, default=DEFAULT_OUTPUT_DIR, help="生成物を書き出すディレクトリ (既存の内容は削除されます)")
    parser.add_argument("--assets", dest="assets_dir", type=Path, default=DEFAULT_ASSETS_DIR, help="出力先へそのままコピーする静的ファイルのディレクトリ")
    parser.add_argument("--env-file", dest="env_file", type=Path, default=None, help="読み込む .env ファイルへのパス")
    parser.add_argument("--site-url", dest="site_url", type=str, default=None, help="RSS フィードに記載する公開 URL (既定は GitHub Pages の URL)")
    parser.add_argument("--summary", dest="summary_path", type=Path, default=None, help="ビルドの進捗を JSON Lines で記録するファイル")
    parser.add_argument("--verbose", dest="verbose", action="store_true", help="進捗ログを標準出力へ表示")

    fetch_group = parser.add_argument_group("取得設定")
    fetch_group.add_argument(
        "--page-size",
        dest="page_size",
        type=int,
        default=None,
        help="1 回のクエリで取得する Discussion 数 (1〜100)",
    )
    fetch_group.add_argument(
        "--max-pages",
        dest="max_pages",
        type=int,
        default=None,
        help="取得するページ数の上限 (省略時は無制限)",
    )
    fetch_group.add_argument(
        "--timeout",
        dest="timeout",
        type=float,
        default=None,
        help="GraphQL API へのリクエストのタイムアウト秒数",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    _validate_args(args)
    _configure_logging(args.verbose)
    load_env_file(args.env_file)
    try:
        settings = load_site_settings()
        if args.site_url:
            settings.site_url = args.site_url.rstrip("/")
        config = BuildConfig.from_args(
            settings,
            output_dir=args.output_dir,
            assets_dir=args.assets_dir,
            summary_path=args.summary_path,
            fetch_overrides=_collect_fetch_overrides(args),
        )
        result = build_site(config)
    except SiteBuildError as exc:
        logger.error("[エラー] %s: %s", exc.phase, exc)
        raise SystemExit(1) from exc
    summary = {
        "discussions": len(result.posts),
        "published": len(result.published),
        "drafts": result.drafts,
        "documents": len(result.written),
        "output": str(config.output.root),
    }
    print(json.dumps(summary, ensure_ascii=False))


def _validate_args(args: argparse.Namespace) -> None:
    errors: list[str] = []
    if args.output_dir.exists() and not args.output_dir.is_dir():
        errors.append(f"[エラー] 出力パスがディレクトリではありません: {args.output_dir}")
    if not args.assets_dir.is_dir():
        errors.append(f"[エラー] アセットディレクトリが見つかりません: {args.assets_dir}")
    if args.page_size is not None and not 1 <= args.page_size <= 100:
        errors.append("[エラー] --page-size には 1 以上 100 以下の整数を指定してください。")
    if args.max_pages is not None and args.max_pages < 1:
        errors.append("[エラー] --max-pages には 1 以上の整数を指定してください。")
    if args.timeout is not None and args.timeout <= 0:
        errors.append("[エラー] --timeout には 0 より大きい数値を指定してください。")

    output_dir = args.output_dir.resolve()
    assets_dir = args.assets_dir.resolve()
    if output_dir == assets_dir or output_dir in assets_dir.parents or assets_dir in output_dir.parents:
        errors.append("[エラー] 出力ディレクトリとアセットディレクトリは互いに含まない別の場所を指定してください。")

    if errors:
        for message in errors:
            print(message, file=sys.stderr)
        raise SystemExit(2)

    args.output_dir = output_dir
    args.assets_dir = assets_dir


def _collect_fetch_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.page_size is not None:
        overrides["page_size"] = args.page_size
    if args.max_pages is not None:
        overrides["max_pages"] = args.max_pages
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    return overrides


def _configure_logging(verbose: bool) -> None:
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")


if __name__ == "__main__":
    main()
