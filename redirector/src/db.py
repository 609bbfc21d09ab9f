"""Supabase データベース操作モジュール.

リダイレクト情報は landing_redirects テーブル（public スキーマ）に配置。
クライアントは初回アクセス時に生成し、プロセス内で使い回す。
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from postgrest.exceptions import APIError
from supabase import Client, SupabaseException, create_client

from src import config
from src.models import CampaignRecord, LandingItem

logger = logging.getLogger(__name__)

_client: Client | None = None

# ストア由来として扱う例外
_STORE_ERRORS = (APIError, httpx.HTTPError, SupabaseException, RuntimeError)


class StoreError(Exception):
    """ストアへの読み書きに失敗した."""


class CampaignRepository(Protocol):
    """リダイレクトハンドラが依存するストア操作.

    失敗はすべて StoreError で通知する。
    """

    def fetch_active(self, slug: str) -> CampaignRecord | None: ...

    def increment_redirect_count(self, record: CampaignRecord) -> None:
        """回数を +1 する. 失敗しても呼び出し側は結果を待たず、リダイレクトは続行する."""
        ...

    def list_recent_active(self, limit: int) -> list[LandingItem]: ...


def _get_client() -> Client:
    """Supabase クライアントを返す（未生成なら生成する）."""
    global _client
    if _client is None:
        if not config.SUPABASE_URL or not config.SUPABASE_SECRET_KEY:
            raise RuntimeError("SUPABASE_URL / SUPABASE_SECRET_KEY が未設定です")
        _client = create_client(config.SUPABASE_URL, config.SUPABASE_SECRET_KEY)
    return _client


def _table(name: str):
    """public スキーマのテーブルを参照する."""
    return _get_client().table(name)


class SupabaseCampaignRepository:
    """landing_redirects テーブルに対する読み書き."""

    def __init__(self, table_name: str = config.REDIRECT_TABLE):
        self.table_name = table_name

    def fetch_active(self, slug: str) -> CampaignRecord | None:
        """slug に一致する有効なレコードを取得する.

        Returns:
            CampaignRecord。該当なしは None。

        Raises:
            StoreError: 問い合わせに失敗した場合
        """
        try:
            resp = (
                _table(self.table_name)
                .select("*")
                .eq("slug", slug)
                .eq("active", True)
                .limit(1)
                .execute()
            )
        except _STORE_ERRORS as e:
            raise StoreError(f"レコード取得失敗: slug={slug}") from e

        if not resp.data:
            return None
        return CampaignRecord.from_row(resp.data[0])

    def increment_redirect_count(self, record: CampaignRecord) -> None:
        """リダイレクト回数を +1 する.

        読み取り時点の値に +1 して書き戻すだけなので、同時アクセスでは
        更新が失われうる（後勝ち）。失敗はログに残して握りつぶす。
        """
        new_count = (record.redirect_count or 0) + 1
        try:
            (
                _table(self.table_name)
                .update({"redirect_count": new_count})
                .eq("id", record.id)
                .execute()
            )
        except _STORE_ERRORS as e:
            logger.warning("redirect_count 更新失敗: slug=%s, error=%s", record.slug, e)
            return
        logger.debug("redirect_count 更新: slug=%s → %d", record.slug, new_count)

    def list_recent_active(self, limit: int = config.LANDING_LIST_LIMIT) -> list[LandingItem]:
        """有効なレコードを作成日時の新しい順に最大 limit 件取得する.

        Raises:
            StoreError: 問い合わせに失敗した場合
        """
        try:
            resp = (
                _table(self.table_name)
                .select("slug, keyword, product_name, redirect_count, created_at")
                .eq("active", True)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except _STORE_ERRORS as e:
            raise StoreError("ランディング一覧取得失敗") from e

        return [LandingItem.from_row(row) for row in resp.data or []]
