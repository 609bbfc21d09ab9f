"""リダイレクトサーバー.

短縮URL形式:
    GET /r/{slug}  → ネイバーモバイル検索へ 302 リダイレクト（該当なしは 404）
    GET /          → 有効なランディング一覧（JSON）
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from functools import lru_cache

from fastapi import BackgroundTasks, Depends, FastAPI
from fastapi.responses import PlainTextResponse, RedirectResponse

from src.config import LANDING_LIST_LIMIT
from src.db import CampaignRepository, StoreError, SupabaseCampaignRepository
from src.models import CampaignRecord
from src.query import build_search_url, generate_query, pick_random_keyword

logger = logging.getLogger(__name__)

app = FastAPI(title="Naver Search Redirector", docs_url=None, redoc_url=None)


@lru_cache
def get_repository() -> CampaignRepository:
    """プロセス共通のリポジトリを返す."""
    return SupabaseCampaignRepository()


def _increment_quietly(repository: CampaignRepository, record: CampaignRecord) -> None:
    """回数更新. 失敗はログに残すだけでリトライしない."""
    try:
        repository.increment_redirect_count(record)
    except StoreError as e:
        logger.warning("%s: %s", e, e.__cause__)


@app.get("/r/{slug}")
def redirect_to_search(
    slug: str,
    background_tasks: BackgroundTasks,
    repository: CampaignRepository = Depends(get_repository),
):
    """slug に対応する検索クエリを合成してネイバー検索へリダイレクトする."""
    try:
        record = repository.fetch_active(slug)
    except StoreError as e:
        logger.warning("%s: %s", e, e.__cause__)
        record = None

    if record is None:
        logger.info("リダイレクト先なし: slug=%s", slug)
        return PlainTextResponse("Not Found", status_code=404)

    # 回数更新はレスポンス送信後に実行（結果は待たない）
    background_tasks.add_task(_increment_quietly, repository, record)

    try:
        keyword = pick_random_keyword(record)
        query = generate_query(keyword, record.product_name or "")
    except (TypeError, ValueError) as e:
        logger.warning("クエリ生成失敗: slug=%s, error=%s", slug, e)
        query = ""

    target_url = build_search_url(query)
    logger.info("リダイレクト: slug=%s, query=%s", slug, query)
    return RedirectResponse(
        url=target_url,
        status_code=302,
        headers={"Cache-Control": "no-store"},
    )


@app.get("/")
def list_landings(repository: CampaignRepository = Depends(get_repository)):
    """有効なランディングを新しい順に返す. 取得失敗時は空リスト."""
    try:
        items = repository.list_recent_active(LANDING_LIST_LIMIT)
    except StoreError as e:
        logger.error("%s: %s", e, e.__cause__)
        items = []

    return {"items": [asdict(item) for item in items]}
