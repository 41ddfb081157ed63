"""discussions2site のビルド設定モデル群。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .fetching import GITHUB_GRAPHQL_URL
from .query import DEFAULT_LABEL_LIMIT, DEFAULT_PAGE_SIZE

DEFAULT_OUTPUT_DIR = Path("output")
DEFAULT_ASSETS_DIR = Path("assets")


def default_site_url(owner: str, repo: str) -> str:
    """GitHub Pages で公開される場合の URL を推定します。"""

    if repo.lower() == f"{owner.lower()}.github.io":
        return f"https://{repo.lower()}"
    return f"https://{owner.lower()}.github.io/{repo}"


@dataclass(slots=True)
class SiteSettings:
    """環境から一度だけ読み込むサイト所有者とリポジトリの情報。"""

    owner: str
    repo: str
    owner_id: str
    token: str = field(repr=False)
    site_url: str = ""
    title: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if not self.site_url:
            self.site_url = default_site_url(self.owner, self.repo)
        self.site_url = self.site_url.rstrip("/")
        if not self.title:
            self.title = self.owner


@dataclass(slots=True)
class FetchConfig:
    """Discussion 取得時の設定。"""

    endpoint: str = GITHUB_GRAPHQL_URL
    page_size: int = DEFAULT_PAGE_SIZE
    label_limit: int = DEFAULT_LABEL_LIMIT
    timeout: float = 30.0
    max_pages: int | None = None


@dataclass(slots=True)
class OutputConfig:
    """出力ディレクトリの設定。"""

    root: Path
    posts_dir: Path = field(init=False)

    def __post_init__(self) -> None:
        self.posts_dir = self.root / "posts"


@dataclass(slots=True)
class BuildConfig:
    """サイト生成全体を束ねる設定。"""

    settings: SiteSettings
    output: OutputConfig
    assets_dir: Path = DEFAULT_ASSETS_DIR
    fetch: FetchConfig = field(default_factory=FetchConfig)
    summary_path: Path | None = None

    @classmethod
    def from_args(
        cls,
        settings: SiteSettings,
        output_dir: Path = DEFAULT_OUTPUT_DIR,
        assets_dir: Path = DEFAULT_ASSETS_DIR,
        summary_path: Path | None = None,
        fetch_overrides: Mapping[str, Any] | None = None,
    ) -> "BuildConfig":
        fetch_config = FetchConfig(**(dict(fetch_overrides) if fetch_overrides else {}))
        return cls(
            settings=settings,
            output=OutputConfig(output_dir),
            assets_dir=assets_dir,
            fetch=fetch_config,
            summary_path=summary_path,
        )
