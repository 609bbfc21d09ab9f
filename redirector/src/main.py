"""ネイバー検索リダイレクター — メインエントリーポイント.

処理フロー（1リクエスト）:
  1. slug から有効なリダイレクト情報を取得（なければ 404）
  2. リダイレクト回数をバックグラウンドで +1
  3. キーワードを選んで検索クエリを合成
  4. ネイバーモバイル検索 URL へ 302 リダイレクト
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime

import uvicorn

from src.config import HOST, LOG_DIR, PORT


def setup_logging() -> None:
    """ロギングの初期設定."""
    log_file = LOG_DIR / f"redirector_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def run() -> None:
    """メイン処理."""
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("=== リダイレクター起動 %s:%d ===", HOST, PORT)

    # ロギングは basicConfig 側で設定済み
    uvicorn.run("src.app:app", host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    run()
