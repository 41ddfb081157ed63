"""出力ディレクトリの準備とファイル書き込みのユーティリティ。"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterator

from .errors import SiteFilesystemError

logger = logging.getLogger(__name__)


def reset_output_dir(root: Path, posts_dir: Path) -> None:
    """出力ディレクトリを削除し、空の状態で作り直します。

    ディレクトリが存在しない場合の削除は成功として扱います。
    """

    try:
        shutil.rmtree(root)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise SiteFilesystemError("reset", root, exc) from exc
    try:
        root.mkdir(parents=True)
        posts_dir.mkdir()
    except OSError as exc:
        raise SiteFilesystemError("reset", root, exc) from exc


def copy_assets(source: Path, destination: Path) -> list[Path]:
    """アセットディレクトリ配下を相対構造を保ったまま出力先へコピーします。

    深さ優先でたどり、ディレクトリはその中のファイルより先に作成します。
    コピーしたファイルの出力先パスを返します。
    """

    if not source.is_dir():
        raise SiteFilesystemError(
            "copy", source, FileNotFoundError("アセットディレクトリが見つかりません")
        )
    copied: list[Path] = []
    for path in _walk(source):
        target = destination / path.relative_to(source)
        try:
            if path.is_dir():
                target.mkdir(exist_ok=True)
            else:
                shutil.copyfile(path, target)
                copied.append(target)
        except OSError as exc:
            raise SiteFilesystemError("copy", path, exc) from exc
    logger.info("アセットを %d 件コピーしました。", len(copied))
    return copied


def write_text(path: Path, content: str) -> None:
    with path.open("w", encoding="utf-8", newline="\n") as stream:
        stream.write(content)


def _walk(root: Path) -> Iterator[Path]:
    try:
        entries = sorted(root.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        raise SiteFilesystemError("copy", root, exc) from exc
    for entry in entries:
        yield entry
        if entry.is_dir() and not os.path.islink(entry):
            yield from _walk(entry)
