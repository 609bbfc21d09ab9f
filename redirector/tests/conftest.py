"""共通フィクスチャ."""

from __future__ import annotations

import random

import pytest
from fastapi.testclient import TestClient

from src.app import app, get_repository
from src.db import StoreError
from src.models import CampaignRecord, LandingItem


class ScriptedRandom(random.Random):
    """random() だけ指定した値を順に返す乱数源.

    choice / shuffle / randrange は getrandbits 経由なので seed 依存のまま。
    """

    def __new__(cls, *args, **kwargs):
        # random.Random.__new__ は第1引数を seed として扱うので渡さない
        return super().__new__(cls)

    def __init__(self, values=(), seed: int = 0):
        super().__init__(seed)
        self._values = list(values)

    def random(self) -> float:
        if self._values:
            return self._values.pop(0)
        return super().random()

    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)


class FakeRepository:
    """メモリ上のリダイレクト情報ストア."""

    def __init__(self, records: list[CampaignRecord] | None = None):
        self.records = {r.slug: r for r in records or []}
        self.incremented: list[CampaignRecord] = []
        self.fail_lookup = False
        self.fail_increment = False

    def fetch_active(self, slug: str) -> CampaignRecord | None:
        if self.fail_lookup:
            raise StoreError(f"レコード取得失敗: slug={slug}")
        record = self.records.get(slug)
        if record is None or not record.active:
            return None
        return record

    def increment_redirect_count(self, record: CampaignRecord) -> None:
        if self.fail_increment:
            raise StoreError(f"redirect_count 更新失敗: slug={record.slug}")
        self.incremented.append(record)

    def list_recent_active(self, limit: int) -> list[LandingItem]:
        if self.fail_lookup:
            raise StoreError("ランディング一覧取得失敗")
        active = [r for r in self.records.values() if r.active]
        active.sort(key=lambda r: r.created_at or "", reverse=True)
        return [
            LandingItem(
                slug=r.slug,
                keyword=r.keyword,
                product_name=r.product_name,
                redirect_count=r.redirect_count,
                created_at=r.created_at,
            )
            for r in active[:limit]
        ]


@pytest.fixture()
def scripted_rng():
    """random() の値を指定した ScriptedRandom を作るファクトリ."""
    def _make(values=(), seed: int = 0) -> ScriptedRandom:
        return ScriptedRandom(values, seed)
    return _make


@pytest.fixture()
def repository() -> FakeRepository:
    return FakeRepository([
        CampaignRecord(
            id=1,
            slug="promo1",
            keywords=["유모차", "카시트"],
            redirect_count=4,
            created_at="2026-03-02T00:00:00+00:00",
        ),
        CampaignRecord(
            id=2,
            slug="abc123",
            keyword="아기상어장난감",
            active=False,
            created_at="2026-03-03T00:00:00+00:00",
        ),
        CampaignRecord(
            id=3,
            slug="toy",
            keyword="아기상어장난감",
            product_name="[핑크퐁] 아기상어 사운드북",
            created_at="2026-03-01T00:00:00+00:00",
        ),
    ])


@pytest.fixture()
def client(repository):
    app.dependency_overrides[get_repository] = lambda: repository
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
