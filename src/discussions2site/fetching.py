"""GitHub Discussions をページ単位で取得し、投稿へ変換するユーティリティ。"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

import requests
from pydantic import ValidationError

from .errors import MalformedResponseError, TransportError
from .models import Post
from .normalize import normalize
from .query import DEFAULT_LABEL_LIMIT, DEFAULT_PAGE_SIZE, build_query
from .schema import DiscussionsPage

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"
USER_AGENT = "discussions2site"

logger = logging.getLogger(__name__)


class QueryExecutor(Protocol):
    def execute(self, query: str) -> Mapping[str, Any]:
        ...


class GitHubGraphQLClient:
    """GitHub GraphQL API へクエリを送信するクライアント。

    失敗時の再試行は行わず、すべての失敗を :class:`TransportError` として送出します。
    """

    def __init__(
        self,
        token: str,
        *,
        endpoint: str = GITHUB_GRAPHQL_URL,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session or requests.Session()
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    def execute(self, query: str) -> Mapping[str, Any]:
        try:
            response = self._session.post(
                self.endpoint,
                json={"query": query},
                headers=self._headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"GraphQL API への接続に失敗しました: {exc}") from exc
        if response.status_code != 200:
            raise TransportError(
                f"GraphQL API がエラーを返しました: {response.status_code} - {response.text}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError("GraphQL API のレスポンスが JSON ではありません") from exc
        if not isinstance(payload, dict):
            raise TransportError("GraphQL API のレスポンスがオブジェクトではありません")
        errors = payload.get("errors")
        if errors:
            messages = ", ".join(
                str(error.get("message", error)) if isinstance(error, dict) else str(error)
                for error in errors
            )
            raise TransportError(f"GraphQL API errors: {messages}")
        return payload


def fetch_all(
    owner: str,
    repo: str,
    executor: QueryExecutor,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    label_limit: int = DEFAULT_LABEL_LIMIT,
    max_pages: int | None = None,
) -> list[Post]:
    """すべてのページを順に取得し、API の並び順のまま投稿を返します。

    ``hasNextPage`` が偽になるまでカーソルを進めます。``max_pages`` を指定した
    場合、そのページ数を超えて続きがあると :class:`TransportError` になります。
    """

    posts: list[Post] = []
    cursor: str | None = None
    pages = 0
    while True:
        if max_pages is not None and pages >= max_pages:
            raise TransportError(
                f"取得ページ数が上限 ({max_pages}) を超えました。API が次ページを返し続けています"
            )
        query = build_query(owner, repo, cursor, page_size=page_size, label_limit=label_limit)
        page = _parse_page(executor.execute(query))
        pages += 1
        connection = page.connection
        for edge in connection.edges:
            logger.debug("Discussion を取得しました: %s", edge.node)
            posts.append(normalize(edge.node))
            cursor = edge.cursor
        logger.info("Discussion ページ %d を取得しました (%d 件)", pages, len(connection.edges))
        if not connection.page_info.has_next_page:
            break
        if not connection.edges:
            raise MalformedResponseError(
                "hasNextPage が真ですが Discussion が 1 件も含まれていないため、カーソルを進められません"
            )
    return posts


def _parse_page(payload: Mapping[str, Any]) -> DiscussionsPage:
    try:
        return DiscussionsPage.model_validate(dict(payload))
    except (TypeError, ValueError) as exc:
        detail = exc.errors() if isinstance(exc, ValidationError) else exc
        raise MalformedResponseError(
            f"Discussion 一覧のレスポンス形式が想定と異なります (API changed?): {detail}"
        ) from exc
