# services/asin_input.py

import re
from typing import List, Optional

from app.config import settings
from services.errors import InputValidationError

# 空白・カンマの連続で区切る
_SPLIT_PATTERN = re.compile(r"[\s,]+")

EMPTY_INPUT_MESSAGE = "Please enter at least one valid identifier."


def _split_tokens(raw: str) -> List[str]:
    return [t for t in _SPLIT_PATTERN.split(raw or "") if t]


def count_asin_tokens(raw: str) -> int:
    """入力欄横のカウンタ用。重複・上限は考慮しない生のトークン数。"""
    return len(_split_tokens(raw))


def parse_asin_input(raw: str, max_asins: Optional[int] = None) -> List[str]:
    """
    入力テキストから ASIN のリストを作る。

    - 空白 / カンマの連続で分割し、空トークンは捨てる
    - 同じ ASIN は最初に出てきた位置だけ残す
    - 先頭から max_asins 件（デフォルト 30）で打ち切る

    1 件も残らない場合は InputValidationError。
    """
    limit = max_asins if max_asins is not None else settings.max_asins

    asins: List[str] = []
    seen = set()
    for token in _split_tokens(raw):
        if token in seen:
            continue
        seen.add(token)
        asins.append(token)
        if len(asins) >= limit:
            break

    if not asins:
        raise InputValidationError(EMPTY_INPUT_MESSAGE)
    return asins
