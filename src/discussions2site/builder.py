"""Discussion の取得からサイト出力までを統括するオーケストレーター。"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config import BuildConfig
from .errors import SiteFilesystemError
from .fetching import GitHubGraphQLClient, QueryExecutor, fetch_all
from .filesystem import copy_assets, reset_output_dir
from .models import Author, Post
from .site import SiteRenderer
from .templates import SiteTemplates, TemplateRenderer


@dataclass(slots=True)
class BuildResult:
    posts: list[Post]
    published: list[Post]
    assets: list[Path]
    written: list[Path]

    @property
    def drafts(self) -> int:
        return len(self.posts) - len(self.published)


class SiteBuilder:
    """出力先の初期化・アセットのコピー・取得・描画を順に実行するパイプライン。"""

    def __init__(
        self,
        config: BuildConfig,
        executor: QueryExecutor | None = None,
        templates: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.executor = executor or GitHubGraphQLClient(
            config.settings.token,
            endpoint=config.fetch.endpoint,
            timeout=config.fetch.timeout,
        )
        self.renderer = SiteRenderer(config.output, templates or SiteTemplates(), config.settings)
        self.owner = Author.site_owner(config.settings.owner, config.settings.owner_id)
        self._logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)
        self._summary_base = {
            "repository": f"{config.settings.owner}/{config.settings.repo}",
            "output_dir": str(config.output.root),
        }

    async def build(self) -> BuildResult:
        settings = self.config.settings
        output = self.config.output
        self._prepare_summary()

        reset_output_dir(output.root, output.posts_dir)
        self._update_summary("reset")
        assets = copy_assets(self.config.assets_dir, output.root)
        self._update_summary("copied", assets=len(assets))

        self._logger.info("%s/%s の Discussion を取得します。", settings.owner, settings.repo)
        posts = await asyncio.to_thread(self._fetch_posts)
        published = [post for post in posts if post.is_published]
        self._logger.info(
            "Discussion を %d 件取得しました (公開 %d 件、下書き %d 件)。",
            len(posts),
            len(published),
            len(posts) - len(published),
        )
        self._update_summary("fetched", discussions=len(posts), published=len(published))

        written = self.renderer.render_all(published, self.owner)
        self._logger.info("ページを %d 件出力しました: %s", len(written), output.root)
        self._update_summary(
            "completed",
            discussions=len(posts),
            published=len(published),
            documents=len(written),
        )
        return BuildResult(posts=posts, published=published, assets=assets, written=written)

    def _fetch_posts(self) -> list[Post]:
        fetch = self.config.fetch
        return fetch_all(
            self.config.settings.owner,
            self.config.settings.repo,
            self.executor,
            page_size=fetch.page_size,
            label_limit=fetch.label_limit,
            max_pages=fetch.max_pages,
        )

    def _prepare_summary(self) -> None:
        path = self.config.summary_path
        if path is None:
            return
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("", encoding="utf-8")
        except OSError as exc:
            raise SiteFilesystemError("summary", path, exc) from exc

    def _update_summary(self, stage: str, **extra: Any) -> None:
        path = self.config.summary_path
        if path is None:
            return
        payload = dict(self._summary_base)
        payload.update(extra)
        payload["stage"] = stage
        try:
            # 出力ディレクトリ配下のファイルは初期化で削除されるため毎回作り直す
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as stream:
                stream.write(json.dumps(payload, ensure_ascii=False))
                stream.write("\n")
        except OSError as exc:
            raise SiteFilesystemError("summary", path, exc) from exc


def build_site(config: BuildConfig, executor: QueryExecutor | None = None) -> BuildResult:
    builder = SiteBuilder(config, executor=executor)
    return asyncio.run(builder.build())
