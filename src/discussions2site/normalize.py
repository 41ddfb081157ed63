"""生の Discussion ノードを投稿モデルへ変換するユーティリティ。"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from pydantic import ValidationError

from .errors import MalformedDiscussionError
from .models import Author, Label, Post, PostStatus, sized_avatar
from .schema import DiscussionNode

TITLE_DELIMITER = "#"
TITLE_FORMAT = "タイトル#説明#スラッグ"


def normalize(raw_node: Mapping[str, Any] | DiscussionNode) -> Post:
    """Discussion ノード 1 件を :class:`Post` に変換します。

    必須フィールドの欠落や型の不一致、タイトル形式の違反はすべて
    :class:`MalformedDiscussionError` として報告します。
    """

    node = raw_node if isinstance(raw_node, DiscussionNode) else _validate(raw_node)
    title, description, slug = split_title(node.title, number=node.number)
    return Post(
        number=node.number,
        title=title,
        description=description,
        slug=slug,
        body=node.body_html,
        author=Author(name=node.author.login, avatar=sized_avatar(node.author.avatar_url)),
        status=PostStatus.from_category(node.category.name),
        published_at=_to_date(node.created_at, node),
        updated_at=_to_date(node.updated_at, node),
        labels=tuple(
            Label(name=edge.node.name, color=edge.node.color, description=edge.node.description)
            for edge in node.labels.edges
        ),
    )


def split_title(raw_title: str, *, number: int | None = None) -> tuple[str, str, str]:
    """``タイトル#説明#スラッグ`` 形式の文字列を 3 要素へ分割します。"""

    parts = raw_title.split(TITLE_DELIMITER)
    if len(parts) != 3:
        raise MalformedDiscussionError(
            f"タイトルは '{TITLE_FORMAT}' の形式で指定してください "
            f"({len(parts)} 個の要素に分割されました)",
            number=number,
            title=raw_title,
        )
    title, description, slug = parts
    if not slug:
        raise MalformedDiscussionError("スラッグが空です", number=number, title=raw_title)
    return title, description, slug


def _validate(raw_node: Mapping[str, Any]) -> DiscussionNode:
    if not isinstance(raw_node, Mapping):
        raise MalformedDiscussionError(f"ノードがオブジェクトではありません ({type(raw_node).__name__})")
    try:
        return DiscussionNode.model_validate(dict(raw_node))
    except ValidationError as exc:
        number = raw_node.get("number")
        title = raw_node.get("title")
        raise MalformedDiscussionError(
            "API レスポンスの形式が想定と異なります: " + _summarize(exc),
            number=number if isinstance(number, int) else None,
            title=title if isinstance(title, str) else None,
        ) from exc


def _summarize(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])} ({error['msg']})"
        for error in exc.errors()
    )


def _to_date(timestamp: str, node: DiscussionNode) -> date:
    day = timestamp.split("T", 1)[0]
    try:
        return date.fromisoformat(day)
    except ValueError as exc:
        raise MalformedDiscussionError(
            f"日付として解釈できないタイムスタンプです: {timestamp!r}",
            number=node.number,
            title=node.title,
        ) from exc
