"""HTML ページと RSS フィードのテンプレート。

テンプレートは名前とコンテキストを受け取り文字列を返します。投稿本文
(``Post.body``) は GitHub が描画済みの HTML なのでそのまま埋め込み、
それ以外の値はすべてエスケープします。
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from email.utils import format_datetime
from html import escape
from typing import Any, Callable, Mapping, Protocol, Sequence
from urllib.parse import quote

from .models import Author, Post

STYLESHEET = "style.css"


class TemplateRenderer(Protocol):
    def render(self, name: str, context: Mapping[str, Any]) -> str:
        ...


def post_href(post: Post) -> str:
    return f"posts/{quote(post.slug)}.html"


def join_url(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path.lstrip("/")
    if not path:
        return base
    return f"{base}/{path}"


def rfc822_date(value: date) -> str:
    return format_datetime(datetime.combine(value, time(), tzinfo=timezone.utc))


class SiteTemplates:
    """組み込みのテンプレート一式。"""

    def __init__(self) -> None:
        self._templates: dict[str, Callable[[Mapping[str, Any]], str]] = {
            "index.html": self._index,
            "about.html": self._about,
            "posts.html": self._posts,
            "post.html": self._post,
            "rss.xml": self._rss,
        }

    def render(self, name: str, context: Mapping[str, Any]) -> str:
        try:
            template = self._templates[name]
        except KeyError:
            raise KeyError(f"未定義のテンプレートです: {name}") from None
        return template(context)

    def _index(self, context: Mapping[str, Any]) -> str:
        owner: Author = context["owner"]
        posts: Sequence[Post] = context["posts"]
        body = [
            '<section class="profile">',
            _avatar(owner, "profile-avatar"),
            f"<h1>{escape(owner.name)}</h1>",
            "</section>",
            '<section class="recent">',
            "<h2>Recent posts</h2>",
        ]
        body.extend(_summary(post, root="") for post in posts)
        body.append('<p><a href="posts.html">All posts</a></p>')
        body.append("</section>")
        return _layout(context["site_title"], owner, body, root="")

    def _about(self, context: Mapping[str, Any]) -> str:
        owner: Author = context["owner"]
        body = [
            '<section class="about">',
            _avatar(owner, "profile-avatar"),
            f"<h1>{escape(owner.name)}</h1>",
        ]
        description = context.get("site_description")
        if description:
            body.append(f"<p>{escape(description)}</p>")
        body.append(
            f'<p><a href="https://github.com/{escape(owner.name)}">github.com/{escape(owner.name)}</a></p>'
        )
        body.append("</section>")
        return _layout(f"About | {context['site_title']}", owner, body, root="")

    def _posts(self, context: Mapping[str, Any]) -> str:
        owner: Author = context["owner"]
        posts: Sequence[Post] = context["posts"]
        body = ['<section class="posts">', "<h1>Posts</h1>", "<ul>"]
        for post in posts:
            body.append(
                "<li>"
                f'<time datetime="{post.published_at.isoformat()}">{post.published_at.isoformat()}</time> '
                f'<a href="{escape(post_href(post))}">{escape(post.title)}</a>'
                "</li>"
            )
        body.extend(["</ul>", "</section>"])
        return _layout(f"Posts | {context['site_title']}", owner, body, root="")

    def _post(self, context: Mapping[str, Any]) -> str:
        owner: Author = context["owner"]
        post: Post = context["post"]
        author = post.author
        body = [
            '<article class="post">',
            "<header>",
            f"<h1>{escape(post.title)}</h1>",
            f'<p class="description">{escape(post.description)}</p>',
            '<p class="meta">',
            _avatar(author, "author-avatar"),
            f"<span>{escape(author.name)}</span> ",
            f'<time datetime="{post.published_at.isoformat()}">{post.published_at.isoformat()}</time>',
        ]
        if post.updated_at != post.published_at:
            body.append(
                f' (updated <time datetime="{post.updated_at.isoformat()}">{post.updated_at.isoformat()}</time>)'
            )
        body.append("</p>")
        body.append(_labels(post))
        body.extend(["</header>", '<div class="body">', post.body, "</div>", "</article>"])
        return _layout(f"{post.title} | {context['site_title']}", owner, body, root="../", description=post.description)

    def _rss(self, context: Mapping[str, Any]) -> str:
        posts: Sequence[Post] = context["posts"]
        site_url: str = context["site_url"]
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0">',
            "<channel>",
            f"<title>{escape(context['site_title'])}</title>",
            f"<link>{escape(site_url)}/</link>",
            f"<description>{escape(context.get('site_description') or context['site_title'])}</description>",
        ]
        if posts:
            last_updated = max(post.updated_at for post in posts)
            lines.append(f"<lastBuildDate>{rfc822_date(last_updated)}</lastBuildDate>")
        for post in posts:
            link = escape(join_url(site_url, post_href(post)))
            lines.extend(
                [
                    "<item>",
                    f"<title>{escape(post.title)}</title>",
                    f"<link>{link}</link>",
                    f'<guid isPermaLink="true">{link}</guid>',
                    f"<pubDate>{rfc822_date(post.published_at)}</pubDate>",
                    f"<description>{escape(post.description)}</description>",
                ]
            )
            lines.extend(f"<category>{escape(label.name)}</category>" for label in post.labels)
            lines.append("</item>")
        lines.extend(["</channel>", "</rss>"])
        return "\n".join(lines) + "\n"


def _layout(
    title: str,
    owner: Author,
    body: Sequence[str],
    *,
    root: str,
    description: str | None = None,
) -> str:
    head = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1">',
        f"<title>{escape(title)}</title>",
    ]
    if description:
        head.append(f'<meta name="description" content="{escape(description)}">')
    head.extend(
        [
            f'<link rel="stylesheet" href="{root}{STYLESHEET}">',
            f'<link rel="alternate" type="application/rss+xml" title="{escape(owner.name)}" href="{root}rss.xml">',
            "</head>",
            "<body>",
            "<nav>",
            f'<a href="{root}index.html">{escape(owner.name)}</a>',
            f'<a href="{root}posts.html">Posts</a>',
            f'<a href="{root}about.html">About</a>',
            "</nav>",
            "<main>",
        ]
    )
    tail = ["</main>", "</body>", "</html>"]
    return "\n".join([*head, *body, *tail]) + "\n"


def _avatar(author: Author, css_class: str) -> str:
    return (
        f'<img class="{css_class}" src="{escape(author.avatar)}" '
        f'alt="{escape(author.name)}" width="100" height="100">'
    )


def _summary(post: Post, *, root: str) -> str:
    return "\n".join(
        [
            '<article class="summary">',
            f'<h3><a href="{root}{escape(post_href(post))}">{escape(post.title)}</a></h3>',
            f'<time datetime="{post.published_at.isoformat()}">{post.published_at.isoformat()}</time>',
            f"<p>{escape(post.description)}</p>",
            _labels(post),
            "</article>",
        ]
    )


def _labels(post: Post) -> str:
    if not post.labels:
        return ""
    items = []
    for label in post.labels:
        title = f' title="{escape(label.description)}"' if label.description else ""
        items.append(
            f'<li class="label" style="border-color: #{escape(label.color)}"{title}>{escape(label.name)}</li>'
        )
    return '<ul class="labels">' + "".join(items) + "</ul>"
