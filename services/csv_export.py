# services/csv_export.py

import csv
import io
from typing import Iterable

from models.keyword_models import KeywordRecord

EXPORT_FILENAME = "asin_keyword_export.csv"

EXPORT_HEADER = [
    "Keyword",
    "Classification",
    "Intent Score",
    "Est. Volume",
    "Competition",
    "Recommendation",
    "Reasoning",
]


def _format_number(value: float):
    # 8.0 → 8 のように整数値は小数点なしで出す
    if float(value).is_integer():
        return int(value)
    return value


def _quote(text: str) -> str:
    return '"' + (text or "").replace('"', '""') + '"'


def export_csv(records: Iterable[KeywordRecord]) -> str:
    """
    表示中（絞り込み・ソート済み）のレコードを CSV 文字列にする。
    reasoning は常にダブルクォートで囲み、それ以外は必要なときだけ囲む。
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)

    for r in records:
        cells = io.StringIO()
        csv.writer(cells, lineterminator="").writerow(
            [
                r.term,
                r.classification,
                _format_number(r.intent_score),
                _format_number(r.search_volume_est),
                r.competition,
                r.recommendation,
            ]
        )
        buffer.write(cells.getvalue() + "," + _quote(r.reasoning) + "\n")

    return buffer.getvalue()
