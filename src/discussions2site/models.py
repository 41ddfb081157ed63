"""ブログ投稿を表すドメインモデル。"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

AVATAR_SIZE = 100
OWNER_AVATAR_URL = "https://avatars.githubusercontent.com/u/{owner_id}?v=4&s=" + str(AVATAR_SIZE)


class PostStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"

    @classmethod
    def from_category(cls, name: str) -> "PostStatus":
        """カテゴリ名が厳密に ``Published`` の場合のみ公開扱いにします。"""

        if name == "Published":
            return cls.PUBLISHED
        return cls.DRAFT


@dataclass(frozen=True, slots=True)
class Author:
    name: str
    avatar: str

    @classmethod
    def site_owner(cls, name: str, owner_id: str) -> "Author":
        return cls(name=name, avatar=OWNER_AVATAR_URL.format(owner_id=owner_id))


@dataclass(frozen=True, slots=True)
class Label:
    name: str
    # 先頭の # を含まない 16 進カラーコード
    color: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class Post:
    """Discussion 1 件から組み立てた投稿。"""

    number: int
    title: str
    description: str
    slug: str
    body: str
    author: Author
    status: PostStatus
    published_at: date
    updated_at: date
    labels: tuple[Label, ...] = field(default=())

    @property
    def is_published(self) -> bool:
        return self.status is PostStatus.PUBLISHED


def sized_avatar(url: str, size: int = AVATAR_SIZE) -> str:
    """アバター URL にサムネイルサイズの指定を付与します。"""

    separator = "&" if "?" in url else "?"
    return f"{url}{separator}s={size}"
