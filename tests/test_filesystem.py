from __future__ import annotations

from pathlib import Path

import pytest

from discussions2site import filesystem
from discussions2site.errors import SiteFilesystemError
from discussions2site.filesystem import copy_assets, reset_output_dir


def test_reset_creates_empty_output_when_absent(tmp_path: Path) -> None:
    root = tmp_path / "output"

    reset_output_dir(root, root / "posts")
    reset_output_dir(root, root / "posts")

    assert root.is_dir()
    assert list(root.iterdir()) == [root / "posts"]


def test_reset_removes_previous_contents(tmp_path: Path) -> None:
    root = tmp_path / "output"
    (root / "posts").mkdir(parents=True)
    (root / "posts" / "stale.html").write_text("old", encoding="utf-8")
    (root / "index.html").write_text("old", encoding="utf-8")

    reset_output_dir(root, root / "posts")

    assert list((root / "posts").iterdir()) == []
    assert not (root / "index.html").exists()


def test_reset_propagates_other_failures(tmp_path: Path, monkeypatch) -> None:
    def deny(path) -> None:
        raise PermissionError("denied")

    monkeypatch.setattr(filesystem.shutil, "rmtree", deny)

    with pytest.raises(SiteFilesystemError) as exc:
        reset_output_dir(tmp_path / "output", tmp_path / "output" / "posts")

    assert exc.value.phase == "reset"


def test_copy_assets_preserves_structure(tmp_path: Path) -> None:
    assets = tmp_path / "assets"
    (assets / "img" / "icons").mkdir(parents=True)
    (assets / "style.css").write_text("body {}", encoding="utf-8")
    (assets / "img" / "logo.png").write_bytes(b"\x89PNG")
    (assets / "img" / "icons" / "rss.svg").write_text("<svg/>", encoding="utf-8")
    output = tmp_path / "output"
    reset_output_dir(output, output / "posts")

    copied = copy_assets(assets, output)

    assert (output / "style.css").read_text(encoding="utf-8") == "body {}"
    assert (output / "img" / "logo.png").read_bytes() == b"\x89PNG"
    assert (output / "img" / "icons" / "rss.svg").exists()
    assert copied == [
        output / "img" / "icons" / "rss.svg",
        output / "img" / "logo.png",
        output / "style.css",
    ]


def test_copy_assets_reuses_existing_directories(tmp_path: Path) -> None:
    assets = tmp_path / "assets"
    (assets / "posts").mkdir(parents=True)
    (assets / "posts" / "feed.css").write_text("x", encoding="utf-8")
    output = tmp_path / "output"
    reset_output_dir(output, output / "posts")

    copy_assets(assets, output)

    assert (output / "posts" / "feed.css").exists()


def test_missing_assets_directory_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(SiteFilesystemError) as exc:
        copy_assets(tmp_path / "missing", tmp_path / "output")

    assert exc.value.phase == "copy"
