"""設定モジュール — 環境変数・定数定義."""

import os
from pathlib import Path

from dotenv import load_dotenv

# .env はプロジェクトルートに配置
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# --- Supabase ---
# クライアント生成時に検証する（未設定でも import は通す）
SUPABASE_URL: str = os.environ.get("SUPABASE_URL", "")
SUPABASE_SECRET_KEY: str = (
    os.environ.get("SUPABASE_SECRET_KEY") or os.environ.get("SUPABASE_ANON_KEY", "")
)
REDIRECT_TABLE: str = os.environ.get("REDIRECT_TABLE", "landing_redirects")

# --- ランディング一覧 ---
LANDING_LIST_LIMIT: int = int(os.environ.get("LANDING_LIST_LIMIT", "8"))

# --- サーバー ---
HOST: str = os.environ.get("HOST", "0.0.0.0")
PORT: int = int(os.environ.get("PORT", "8000"))

# --- ネイバーモバイル検索 ---
NAVER_SEARCH_BASE = "https://m.search.naver.com/search.naver"
SEARCH_SM = "mtp_sug.top"
SEARCH_WHERE = "m"
SEARCH_QDT = "0"
ACR_MIN = 1
ACR_MAX = 9

# --- ackey（追跡トークン） ---
ACKEY_CHARS = "abcdefghijklmnopqrstuvwxyz0123456789"
ACKEY_LENGTH = 8

# --- 尻尾キーワード（クエリ多様化用） ---
TAIL_KEYWORDS = [
    "추천", "할인", "후기", "가격비교", "인기",
    "베스트", "구매", "쇼핑", "특가", "세일",
]

# --- ログ ---
LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_DIR.mkdir(exist_ok=True)
