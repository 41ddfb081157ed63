from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from discussion_builder import FakeExecutor, discussion_node, discussions_page
from discussions2site.builder import SiteBuilder, build_site
from discussions2site.config import BuildConfig, OutputConfig, SiteSettings
from discussions2site.errors import MalformedDiscussionError, SiteFilesystemError


def _config(tmp_path: Path, **extra) -> BuildConfig:
    assets = tmp_path / "assets"
    (assets / "img").mkdir(parents=True, exist_ok=True)
    (assets / "style.css").write_text("body {}", encoding="utf-8")
    (assets / "img" / "logo.svg").write_text("<svg/>", encoding="utf-8")
    return BuildConfig(
        settings=SiteSettings(owner="alice", repo="blog", owner_id="4242", token="token"),
        output=OutputConfig(tmp_path / "output"),
        assets_dir=assets,
        **extra,
    )


def _pages() -> list[dict]:
    return [
        discussions_page([discussion_node(2, "Hello#My first post#hello", login="alice")], True),
        discussions_page(
            [discussion_node(1, "Secret#Not yet#secret", category="Draft", body="<p>draft body</p>")],
            False,
        ),
    ]


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


def test_build_site_renders_published_discussions(tmp_path: Path) -> None:
    executor = FakeExecutor(_pages())

    result = build_site(_config(tmp_path), executor=executor)

    output = tmp_path / "output"
    assert len(executor.queries) == 2
    assert [post.slug for post in result.published] == ["hello"]
    assert result.drafts == 1

    post_page = (output / "posts" / "hello.html").read_text(encoding="utf-8")
    assert "<p>Hello, world!</p>" in post_page
    for name in ("index.html", "posts.html"):
        html = (output / name).read_text(encoding="utf-8")
        assert 'href="posts/hello.html"' in html
        assert "Hello" in html
    assert (output / "about.html").exists()
    assert (output / "style.css").read_text(encoding="utf-8") == "body {}"
    assert (output / "img" / "logo.svg").exists()
    assert "https://avatars.githubusercontent.com/u/4242?v=4&amp;s=100" in (output / "about.html").read_text(
        encoding="utf-8"
    )


def test_drafts_are_excluded_everywhere(tmp_path: Path) -> None:
    build_site(_config(tmp_path), executor=FakeExecutor(_pages()))

    output = tmp_path / "output"
    assert not (output / "posts" / "secret.html").exists()
    for name in ("index.html", "posts.html", "rss.xml"):
        content = (output / name).read_text(encoding="utf-8")
        assert "secret" not in content
        assert "draft body" not in content


def test_rebuild_produces_identical_output(tmp_path: Path) -> None:
    config = _config(tmp_path)

    build_site(config, executor=FakeExecutor(_pages()))
    first = _snapshot(config.output.root)
    (config.output.root / "posts" / "stale.html").write_text("stale", encoding="utf-8")
    build_site(config, executor=FakeExecutor(_pages()))
    second = _snapshot(config.output.root)

    assert first == second


def test_summary_records_each_stage(tmp_path: Path) -> None:
    summary_path = tmp_path / "logs" / "build_summary.jsonl"
    config = _config(tmp_path, summary_path=summary_path)

    build_site(config, executor=FakeExecutor(_pages()))

    events = [json.loads(line) for line in summary_path.read_text(encoding="utf-8").splitlines() if line.strip()]
    assert [event["stage"] for event in events] == ["reset", "copied", "fetched", "completed"]
    assert events[-1]["published"] == 1
    assert events[-1]["discussions"] == 2
    assert events[0]["repository"] == "alice/blog"


def test_malformed_discussion_stops_before_rendering(tmp_path: Path, caplog) -> None:
    caplog.set_level("INFO")
    executor = FakeExecutor([discussions_page([discussion_node(9, "no delimiter")], False)])
    builder = SiteBuilder(_config(tmp_path), executor=executor)

    with pytest.raises(MalformedDiscussionError) as exc:
        asyncio.run(builder.build())

    assert exc.value.phase == "fetch"
    assert exc.value.number == 9
    assert not (tmp_path / "output" / "index.html").exists()
    assert any("Discussion" in record.message for record in caplog.records)


def test_summary_inside_output_survives_reset(tmp_path: Path) -> None:
    summary_path = tmp_path / "output" / "logs" / "build_summary.jsonl"
    config = _config(tmp_path, summary_path=summary_path)

    build_site(config, executor=FakeExecutor(_pages()))

    stages = [json.loads(line)["stage"] for line in summary_path.read_text(encoding="utf-8").splitlines()]
    assert stages == ["reset", "copied", "fetched", "completed"]


def test_unwritable_summary_is_reported_as_filesystem_error(tmp_path: Path) -> None:
    summary_path = tmp_path / "logs"
    summary_path.mkdir()
    config = _config(tmp_path, summary_path=summary_path)

    with pytest.raises(SiteFilesystemError) as exc:
        build_site(config, executor=FakeExecutor(_pages()))

    assert exc.value.phase == "summary"
    assert exc.value.path == summary_path
