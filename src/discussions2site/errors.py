"""ビルド中に送出される例外の定義。"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence


class SiteBuildError(RuntimeError):
    """ビルドを中断させるすべての例外の基底クラス。"""

    phase = "build"

    def __init__(self, message: str, *, phase: str | None = None) -> None:
        if phase is not None:
            self.phase = phase
        super().__init__(message)


class ConfigurationError(SiteBuildError):
    """必須の環境変数が未設定、または形式が不正な場合に送出されます。"""

    phase = "config"


class TransportError(SiteBuildError):
    """GraphQL クエリの実行に失敗した場合に送出されます。"""

    phase = "fetch"


class MalformedResponseError(SiteBuildError):
    """API レスポンス全体の構造が想定と異なる場合に送出されます。"""

    phase = "fetch"


class MalformedDiscussionError(SiteBuildError):
    """個々の Discussion が投稿として解釈できない場合に送出されます。"""

    phase = "fetch"

    def __init__(
        self,
        reason: str,
        *,
        number: int | None = None,
        title: str | None = None,
    ) -> None:
        self.reason = reason
        self.number = number
        self.title = title
        subject = []
        if number is not None:
            subject.append(f"#{number}")
        if title is not None:
            subject.append(repr(title))
        prefix = f"Discussion {' '.join(subject)}: " if subject else "Discussion: "
        super().__init__(prefix + reason)


class SiteFilesystemError(SiteBuildError):
    """出力ディレクトリの準備・アセットのコピー・ページ書き込みの失敗。"""

    def __init__(self, phase: str, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause}", phase=phase)


class DuplicateSlugError(SiteBuildError):
    """複数の投稿が同じ出力パスを指している場合に送出されます。"""

    phase = "render"

    def __init__(self, *, duplicates: Mapping[str, Sequence[int]]) -> None:
        self.duplicates: dict[str, tuple[int, ...]] = {
            slug: tuple(numbers) for slug, numbers in duplicates.items()
        }
        details = ", ".join(
            f"{slug} ({', '.join(f'#{number}' for number in numbers)})"
            for slug, numbers in self.duplicates.items()
        )
        super().__init__("スラッグが重複しています: " + details)
