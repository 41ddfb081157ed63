"""投稿一覧からサイトのページとフィードを書き出すレンダラー。"""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Mapping, Sequence

from .config import OutputConfig, SiteSettings
from .errors import DuplicateSlugError, MalformedDiscussionError, SiteFilesystemError
from .filesystem import write_text
from .models import Author, Post
from .templates import TemplateRenderer


def check_slugs(posts: Sequence[Post]) -> None:
    """スラッグが出力パスとして安全かつ一意であることを確認します。"""

    owners: dict[str, list[int]] = defaultdict(list)
    for post in posts:
        if post.slug in {".", ".."} or any(char in post.slug for char in ("/", "\\", "\x00")):
            raise MalformedDiscussionError(
                f"スラッグにパス区切り文字や NUL 文字は使用できません: {post.slug!r}",
                number=post.number,
                title=post.title,
            )
        owners[post.slug].append(post.number)
    duplicates = {slug: numbers for slug, numbers in owners.items() if len(numbers) > 1}
    if duplicates:
        raise DuplicateSlugError(duplicates=duplicates)


class SiteRenderer:
    """テンプレートを描画し、決められたパスへ書き出します。

    各ページの描画と書き込みは独立しており、途中で失敗しても
    それまでに書き出したファイルは残ります。
    """

    def __init__(self, output: OutputConfig, templates: TemplateRenderer, settings: SiteSettings) -> None:
        self.output = output
        self.templates = templates
        self.settings = settings
        self._logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    def post_path(self, post: Post) -> Path:
        return self.output.posts_dir / f"{post.slug}.html"

    def render_index(self, posts: Sequence[Post], owner: Author) -> Path:
        return self._write("index.html", self.output.root / "index.html", posts=posts, owner=owner)

    def render_about(self, owner: Author) -> Path:
        return self._write("about.html", self.output.root / "about.html", owner=owner)

    def render_listing(self, posts: Sequence[Post], owner: Author) -> Path:
        return self._write("posts.html", self.output.root / "posts.html", posts=posts, owner=owner)

    def render_post(self, post: Post, owner: Author) -> Path:
        return self._write("post.html", self.post_path(post), post=post, owner=owner)

    def render_feed(self, posts: Sequence[Post], owner: Author) -> Path:
        return self._write("rss.xml", self.output.root / "rss.xml", posts=posts, owner=owner)

    def render_all(self, posts: Sequence[Post], owner: Author) -> list[Path]:
        check_slugs(posts)
        written = [
            self.render_index(posts, owner),
            self.render_about(owner),
            self.render_listing(posts, owner),
        ]
        for index, post in enumerate(posts, start=1):
            written.append(self.render_post(post, owner))
            self._logger.info("投稿ページを出力しました (%d/%d): %s", index, len(posts), post.slug)
        written.append(self.render_feed(posts, owner))
        return written

    def _write(self, template: str, path: Path, **context: Any) -> Path:
        content = self.templates.render(template, self._context(context))
        try:
            write_text(path, content)
        except (OSError, ValueError) as exc:
            raise SiteFilesystemError("render", path, exc) from exc
        self._logger.debug("%s を出力しました。", path)
        return path

    def _context(self, extra: Mapping[str, Any]) -> dict[str, Any]:
        context: dict[str, Any] = {
            "site_title": self.settings.title,
            "site_description": self.settings.description,
            "site_url": self.settings.site_url,
        }
        context.update(extra)
        return context
