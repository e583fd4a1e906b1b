# agents/response_normalizer.py

from __future__ import annotations

import json
import logging
import re
from typing import List

from pydantic import ValidationError

from models.keyword_models import KeywordRecord
from services.errors import (
    MalformedResponseError,
    NoStructuredDataError,
    RecordSchemaError,
)

logger = logging.getLogger(__name__)

NO_STRUCTURED_DATA_MESSAGE = (
    "The analysis did not return structured data. "
    "Please try again with different identifiers."
)
INVALID_JSON_MESSAGE = "Failed to parse keyword data. The AI returned invalid JSON."

# 診断ログに残す生テキストの最大長
MAX_LOGGED_CHARS = 2000

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """```json / ``` を取り除く（指示しても付けてくることがある）。"""
    return _CODE_FENCE.sub("", text).strip()


def extract_json_array(text: str) -> str:
    """
    最初の '[' から最後の ']' までを切り出す。
    前後に説明文が付いていても拾えるが、'[' が無ければ NoStructuredDataError。

    '[' はあるのに閉じ ']' が無い場合（途中で切れた出力など）は
    '[' 以降をそのまま返し、JSON パース側で MalformedResponseError にする。
    """
    cleaned = strip_code_fences(text)
    start = cleaned.find("[")

    if start == -1:
        logger.error(
            "[normalizer] no JSON array found in response: %r",
            text[:MAX_LOGGED_CHARS],
        )
        raise NoStructuredDataError(NO_STRUCTURED_DATA_MESSAGE)

    end = cleaned.rfind("]")
    if end < start:
        return cleaned[start:]
    return cleaned[start : end + 1]


def normalize_response(raw_text: str, strict: bool = False) -> List[KeywordRecord]:
    """
    LLM の生テキストから KeywordRecord のリストを作る。

    1) コードフェンス除去
    2) '[' 〜 ']' の切り出し（無ければ NoStructuredDataError）
    3) JSON パース（失敗したら MalformedResponseError、生テキストはログのみ）
    4) 各要素を KeywordRecord に変換

    分類値などが閉じた集合に入らないレコードは、通常はそのまま返して
    WARNING を出すだけ。strict=True のときは RecordSchemaError にする。
    """
    payload = extract_json_array(raw_text)

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.error(
            "[normalizer] JSON parse error: %s content=%r",
            e,
            payload[:MAX_LOGGED_CHARS],
        )
        raise MalformedResponseError(INVALID_JSON_MESSAGE) from e

    if not isinstance(data, list):
        # '[' 〜 ']' を切り出しているので基本ここには来ない
        raise MalformedResponseError(INVALID_JSON_MESSAGE)

    records: List[KeywordRecord] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            logger.error("[normalizer] item #%d is not an object: %r", index, item)
            raise MalformedResponseError(INVALID_JSON_MESSAGE)
        try:
            records.append(KeywordRecord.model_validate(item))
        except ValidationError as e:
            logger.error(
                "[normalizer] item #%d does not match the record shape: %s item=%r",
                index,
                e,
                item,
            )
            raise MalformedResponseError(INVALID_JSON_MESSAGE) from e

    flagged = [r for r in records if r.schema_issues]
    if flagged:
        logger.warning(
            "[normalizer] %d/%d records have unexpected enum values: %s",
            len(flagged),
            len(records),
            [(r.term, r.schema_issues) for r in flagged[:10]],
        )
        if strict:
            first = flagged[0]
            raise RecordSchemaError(
                f"The AI returned {len(flagged)} keyword(s) with unexpected values "
                f"(e.g. '{first.term}': {', '.join(first.schema_issues)})."
            )

    logger.info("[normalizer] parsed records=%d flagged=%d", len(records), len(flagged))
    return records
