"""GitHub GraphQL API のレスポンスを検証する pydantic モデル。

レスポンスはこの境界で一度だけ検証し、以降の処理では型付きの値として扱います。
ページ全体の構造 (``edges`` / ``pageInfo``) と個々の Discussion ノードは別々に
検証するため、ノードの不備はどの Discussion が原因かを特定して報告できます。
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class DiscussionAuthor(_ApiModel):
    login: StrictStr
    avatar_url: StrictStr = Field(alias="avatarUrl")


class DiscussionCategory(_ApiModel):
    name: StrictStr


class LabelNode(_ApiModel):
    name: StrictStr
    color: StrictStr
    description: StrictStr | None = None


class LabelEdge(_ApiModel):
    node: LabelNode


class LabelConnection(_ApiModel):
    edges: list[LabelEdge] = Field(default_factory=list)


class DiscussionNode(_ApiModel):
    number: StrictInt
    title: StrictStr
    created_at: StrictStr = Field(alias="createdAt")
    updated_at: StrictStr = Field(alias="updatedAt")
    body_html: StrictStr = Field(alias="bodyHTML")
    author: DiscussionAuthor
    category: DiscussionCategory
    labels: LabelConnection = Field(default_factory=LabelConnection)


class DiscussionEdge(_ApiModel):
    cursor: StrictStr
    # ノードは正規化時に個別に検証する
    node: dict[str, Any]


class PageInfo(_ApiModel):
    has_next_page: StrictBool = Field(alias="hasNextPage")
    end_cursor: StrictStr | None = Field(default=None, alias="endCursor")


class DiscussionConnection(_ApiModel):
    edges: list[DiscussionEdge]
    page_info: PageInfo = Field(alias="pageInfo")


class RepositoryDiscussions(_ApiModel):
    discussions: DiscussionConnection


class QueryData(_ApiModel):
    repository: RepositoryDiscussions


class DiscussionsPage(_ApiModel):
    """``{"data": {"repository": {"discussions": ...}}}`` 形式のレスポンス。"""

    data: QueryData

    @property
    def connection(self) -> DiscussionConnection:
        return self.data.repository.discussions
