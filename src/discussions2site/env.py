"""環境変数および `.env` ファイルからサイト設定を読み込むローダー。"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Mapping

from .config import SiteSettings
from .errors import ConfigurationError

DEFAULT_ENV_NAME = ".env"
REPOSITORY_ENV = "GITHUB_REPOSITORY"
OWNER_ID_ENV = "GITHUB_REPOSITORY_OWNER_ID"
TOKEN_ENV = "GITHUB_TOKEN"
SITE_URL_ENV = "SITE_URL"
SITE_TITLE_ENV = "SITE_TITLE"
SITE_DESCRIPTION_ENV = "SITE_DESCRIPTION"


def load_env_file(path: str | Path | None = None) -> dict[str, str]:
    """`.env` ファイルを読み込み、未設定の環境変数を補完します。"""

    env_path = _locate_env_file(path)
    if env_path is None or not env_path.exists():
        return {}
    loaded: dict[str, str] = {}
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue
        value = _strip_quotes(value.strip())
        if key not in os.environ:
            os.environ[key] = value
        loaded[key] = value
    return loaded


def load_site_settings(source: Mapping[str, str] | None = None) -> SiteSettings:
    """環境変数からサイト設定を組み立てます。

    ``GITHUB_REPOSITORY`` (``owner/repo`` 形式)、``GITHUB_REPOSITORY_OWNER_ID``、
    ``GITHUB_TOKEN`` は必須で、欠けている場合は :class:`ConfigurationError` を送出します。
    """

    env = os.environ if source is None else source
    missing = [name for name in (REPOSITORY_ENV, OWNER_ID_ENV, TOKEN_ENV) if not env.get(name)]
    if missing:
        raise ConfigurationError("必須の環境変数が設定されていません: " + ", ".join(missing))

    owner, repo = _split_repository(env[REPOSITORY_ENV])
    owner_id = env[OWNER_ID_ENV].strip()
    if not owner_id.isdigit():
        raise ConfigurationError(f"{OWNER_ID_ENV} は数値で指定してください: {owner_id!r}")
    return SiteSettings(
        owner=owner,
        repo=repo,
        owner_id=owner_id,
        token=env[TOKEN_ENV].strip(),
        site_url=env.get(SITE_URL_ENV, "").strip(),
        title=env.get(SITE_TITLE_ENV, "").strip(),
        description=env.get(SITE_DESCRIPTION_ENV, "").strip(),
    )


def _split_repository(raw: str) -> tuple[str, str]:
    owner, sep, repo = raw.strip().partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise ConfigurationError(f"{REPOSITORY_ENV} は 'owner/repo' 形式で指定してください: {raw!r}")
    return owner, repo


def _locate_env_file(path: str | Path | None) -> Path | None:
    if path is not None:
        candidate = Path(path)
        if candidate.is_dir():
            candidate = candidate / DEFAULT_ENV_NAME
        return candidate
    candidates: Iterable[Path] = (
        Path.cwd() / DEFAULT_ENV_NAME,
        Path(__file__).resolve().parents[2] / DEFAULT_ENV_NAME,
    )
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _strip_quotes(value: str) -> str:
    if not value:
        return value
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value
