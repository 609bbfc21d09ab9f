"""ネイバー検索クエリ生成モジュール.

キーワード・商品名から、人が打ち込んだような検索クエリを合成する。
  1. キーワードプールからランダムに1つ選ぶ
  2. 商品名あり: キーワード＋商品名の単語から3語をランダムに組み合わせる
  3. キーワードのみ: 合成語分割で分かち書きを揺らし、尻尾キーワードを付ける

乱数はすべて rng 引数（random.Random）から引く。テストでは差し替えて
各分岐を固定できる。
"""

from __future__ import annotations

import random
import re
from urllib.parse import urlencode

from src.config import (
    ACKEY_CHARS,
    ACKEY_LENGTH,
    ACR_MAX,
    ACR_MIN,
    NAVER_SEARCH_BASE,
    SEARCH_QDT,
    SEARCH_SM,
    SEARCH_WHERE,
    TAIL_KEYWORDS,
)
from src.models import CampaignRecord

_default_rng = random.Random()

_BRACKETS_PATTERN = re.compile(r"[\[\](){}]")
# 英数字・アンダースコア・空白・ハングル以外を除去
_NON_WORD_PATTERN = re.compile(r"[^0-9A-Za-z_\sㄱ-ㅎㅏ-ㅣ가-힣]")

# 単語プールの条件
_MIN_WORD_LENGTH = 2
_QUERY_WORD_COUNT = 3


def pick_random_keyword(
    record: CampaignRecord, rng: random.Random | None = None
) -> str:
    """キーワードプールからランダムに1つ選ぶ.

    優先順位: keywords（配列） > keyword（カンマ区切り） > keyword（単一）
    """
    rng = rng or _default_rng

    if isinstance(record.keywords, list) and record.keywords:
        return str(rng.choice(record.keywords))

    kw = record.keyword
    if not isinstance(kw, str):
        return ""
    if "," in kw:
        candidates = [k.strip() for k in kw.split(",") if k.strip()]
        if candidates:
            return rng.choice(candidates)

    return kw


def split_compound_word(word: str, rng: random.Random | None = None) -> list[str]:
    """合成語を 2〜3 文字ずつに分割する.

    "아기상어장난감" → ["아기", "상어", "장난감"] など。
    3 文字以下はそのまま1要素のリストで返す。末尾に1文字余った場合は
    直前の塊に連結するので、連結すると必ず元の単語に戻る。
    """
    if len(word) <= 3:
        return [word]

    rng = rng or _default_rng
    chunks: list[str] = []
    i = 0
    while i < len(word):
        size = 3 if rng.random() > 0.5 else 2
        chunk = word[i:i + size]
        if len(chunk) == 1 and chunks:
            chunks[-1] += chunk
        else:
            chunks.append(chunk)
        i += size

    return chunks


def pick_query_words(
    keyword: str, product_name: str, rng: random.Random | None = None
) -> str:
    """keyword + product_name の単語から3語をランダムに組み合わせる.

    足りない分は尻尾キーワードで埋める（選択済みの語とは重複させない）。
    """
    rng = rng or _default_rng

    text = _BRACKETS_PATTERN.sub(" ", f"{keyword} {product_name}")
    text = _NON_WORD_PATTERN.sub(" ", text)
    words = _unique(w for w in text.split() if len(w) >= _MIN_WORD_LENGTH)

    # 合成語を分割した断片もプールに加える
    expanded = list(words)
    for w in words:
        if len(w) > 3:
            expanded.extend(split_compound_word(w, rng))
    pool = _unique(w for w in expanded if len(w) >= _MIN_WORD_LENGTH)

    rng.shuffle(pool)
    selected = pool[:_QUERY_WORD_COUNT]

    while len(selected) < _QUERY_WORD_COUNT:
        selected.append(pick_tail_keyword(selected, rng))

    return " ".join(selected)


def pick_tail_keyword(exclude: list[str], rng: random.Random | None = None) -> str:
    """exclude に含まれない尻尾キーワードをランダムに選ぶ.

    Raises:
        ValueError: 候補が残っていない場合
    """
    rng = rng or _default_rng
    candidates = [t for t in TAIL_KEYWORDS if t not in exclude]
    if not candidates:
        raise ValueError("選択可能な尻尾キーワードがありません")
    return rng.choice(candidates)


def generate_query(
    keyword: str, product_name: str = "", rng: random.Random | None = None
) -> str:
    """検索クエリを生成する.

    product_name があれば pick_query_words（3語組み合わせ）。
    キーワードのみの場合:
      - 空白なしで 4 文字以上なら合成語分割し、
        40% 原文のまま / 30% 全部分かち書き / 30% 1か所だけ分かち書き
      - 50% の確率で尻尾キーワードを付ける（既出の語とは重複させない）
    """
    rng = rng or _default_rng

    if product_name:
        return pick_query_words(keyword, product_name, rng)

    query = keyword
    if " " not in keyword and len(keyword) > 3:
        parts = split_compound_word(keyword, rng)
        r = rng.random()
        if r < 0.4:
            query = keyword
        elif r < 0.7:
            query = " ".join(parts)
        elif len(parts) > 1:
            idx = rng.randrange(len(parts) - 1)
            query = " ".join(parts[:idx + 1]) + "".join(parts[idx + 1:])

    # 既に含まれている尻尾キーワードは重ねない
    words = query.split()
    if rng.random() < 0.5 and not set(TAIL_KEYWORDS) <= set(words):
        query = f"{query} {pick_tail_keyword(words, rng)}"

    return query.strip()


def generate_ackey(rng: random.Random | None = None) -> str:
    """ackey（英小文字＋数字 8 桁）を生成する."""
    rng = rng or _default_rng
    return "".join(rng.choice(ACKEY_CHARS) for _ in range(ACKEY_LENGTH))


def build_search_url(query: str, rng: random.Random | None = None) -> str:
    """ネイバーモバイル検索 URL を生成する.

    https://m.search.naver.com/search.naver?sm=mtp_sug.top&where=m
    &query=...&ackey=...&acq=...&acr=1~9&qdt=0

    パラメータ名・順序は検索側の想定どおりにすること。
    """
    rng = rng or _default_rng
    params = {
        "sm": SEARCH_SM,
        "where": SEARCH_WHERE,
        "query": query,
        "ackey": generate_ackey(rng),
        "acq": query,
        "acr": str(rng.randint(ACR_MIN, ACR_MAX)),
        "qdt": SEARCH_QDT,
    }
    return f"{NAVER_SEARCH_BASE}?{urlencode(params)}"


def _unique(words) -> list[str]:
    """出現順を保ったまま重複を除く."""
    return list(dict.fromkeys(words))
