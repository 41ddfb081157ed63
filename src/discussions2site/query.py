"""Discussion 一覧を 1 ページ分取得する GraphQL クエリの組み立て。"""

from __future__ import annotations

import json

DEFAULT_PAGE_SIZE = 1
DEFAULT_LABEL_LIMIT = 10

_DISCUSSIONS_QUERY = """\
{{
  repository(owner: {owner}, name: {repo}) {{
    discussions(first: {page_size}, {after}orderBy: {{ field: CREATED_AT, direction: DESC }}) {{
      edges {{
        cursor
        node {{
          number
          title
          createdAt
          updatedAt
          bodyHTML
          author {{
            login
            avatarUrl
          }}
          category {{ name }}
          labels(first: {label_limit}) {{
            edges {{
              node {{
                name
                description
                color
              }}
            }}
          }}
        }}
      }}
      pageInfo {{
        hasNextPage
        endCursor
      }}
    }}
  }}
}}"""


def build_query(
    owner: str,
    repo: str,
    cursor: str | None = None,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    label_limit: int = DEFAULT_LABEL_LIMIT,
) -> str:
    """作成日時の降順で Discussion を 1 ページ分取得するクエリを返します。

    ``cursor`` を指定するとそのカーソルの直後から取得を再開します。
    ``owner`` と ``repo`` の内容は検証しません。
    """

    after = f"after: {_quote(cursor)}, " if cursor else ""
    return _DISCUSSIONS_QUERY.format(
        owner=_quote(owner),
        repo=_quote(repo),
        page_size=page_size,
        after=after,
        label_limit=label_limit,
    )


def _quote(value: str) -> str:
    # GraphQL の文字列リテラルは JSON と同じエスケープ規則に従う
    return json.dumps(value)
