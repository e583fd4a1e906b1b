# services/table_view.py

from __future__ import annotations

import unicodedata
from typing import Any, Callable, List, Sequence, Tuple

from models.keyword_models import KeywordRecord
from models.table_models import SORT_FIELDS, TableViewState


def _string_key(value: Any) -> Tuple[str, str, str]:
    # アクセント・大文字小文字を無視した順を優先し、同順位は元の文字列で決める
    text = str(value)
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return folded.casefold(), text.casefold(), text


def _numeric_key(value: Any) -> float:
    return float(value)


def _sort_key(attr: str, sample: Any) -> Callable[[KeywordRecord], Any]:
    if isinstance(sample, str):
        convert = _string_key
    else:
        # bool も数値（False < True）として扱う
        convert = _numeric_key
    return lambda record: convert(getattr(record, attr))


def filter_records(
    records: Sequence[KeywordRecord],
    filter_text: str = "",
    classification: str = "All",
) -> List[KeywordRecord]:
    """term の部分一致（大文字小文字無視）と classification の一致で絞り込む。"""
    needle = (filter_text or "").lower()
    result: List[KeywordRecord] = []
    for record in records:
        if needle and needle not in record.term.lower():
            continue
        if classification != "All" and record.classification != classification:
            continue
        result.append(record)
    return result


def sort_records(
    records: Sequence[KeywordRecord],
    sort_field: str,
    sort_direction: str = "desc",
) -> List[KeywordRecord]:
    """1 列で安定ソートする。文字列は大文字小文字・アクセントを無視した順、数値・真偽値は数値順。"""
    attr = SORT_FIELDS[sort_field]
    if not records:
        return []
    key = _sort_key(attr, getattr(records[0], attr))
    return sorted(records, key=key, reverse=(sort_direction == "desc"))


def apply_table_view(
    records: Sequence[KeywordRecord],
    state: TableViewState,
) -> List[KeywordRecord]:
    """
    表示用の派生リストを作る（元のリストは変更しない）。

    絞り込み → ソートの順で適用する。
    """
    filtered = filter_records(records, state.filter_text, state.classification)
    return sort_records(filtered, state.sort_field, state.sort_direction)
