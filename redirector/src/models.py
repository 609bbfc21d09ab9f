"""データモデル定義."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CampaignRecord:
    """landing_redirects テーブルの1行を表す."""

    id: str | int | None  # 主キー
    slug: str  # 短縮リンク識別子
    keywords: list | None = None  # キーワード配列 (jsonb / text[])
    keyword: str | None = None  # 単一 or カンマ区切りキーワード
    product_name: str | None = None
    active: bool = True
    redirect_count: int = 0
    created_at: str | None = None  # ISO 8601

    @classmethod
    def from_row(cls, row: dict) -> CampaignRecord:
        """PostgREST の行 dict からレコードを生成する（欠損カラムは既定値）."""
        return cls(
            id=row.get("id"),
            slug=row.get("slug") or "",
            keywords=row.get("keywords"),
            keyword=row.get("keyword"),
            product_name=row.get("product_name"),
            active=bool(row.get("active", True)),
            redirect_count=row.get("redirect_count") or 0,
            created_at=row.get("created_at"),
        )


@dataclass
class LandingItem:
    """ランディング一覧に表示する1件."""

    slug: str
    keyword: str | None
    product_name: str | None
    redirect_count: int
    created_at: str | None
    href: str = field(init=False)

    def __post_init__(self) -> None:
        self.href = f"/r/{self.slug}"

    @classmethod
    def from_row(cls, row: dict) -> LandingItem:
        return cls(
            slug=row.get("slug") or "",
            keyword=row.get("keyword"),
            product_name=row.get("product_name"),
            redirect_count=row.get("redirect_count") or 0,
            created_at=row.get("created_at"),
        )
