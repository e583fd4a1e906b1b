# agents/summary_agent.py

from __future__ import annotations

from typing import Iterable, List

from models.keyword_models import AnalysisSummary, KeywordRecord

# gap キーワード判定に使う intentScore のしきい値（これより大きいもの）
GAP_INTENT_THRESHOLD: float = 6


def is_gap_keyword(record: KeywordRecord) -> bool:
    """オーガニックで取れておらず、購買意図がしきい値を超えているか。"""
    return (not record.is_organic) and record.intent_score > GAP_INTENT_THRESHOLD


def summarize_keywords(
    records: Iterable[KeywordRecord],
    analyzed_asins: List[str],
) -> AnalysisSummary:
    """
    キーワード一覧を 1 パスで集計して AnalysisSummary を返す。

    - total_keywords: 件数
    - attack_count: classification == Attack
    - gap_count: is_organic == False かつ intent_score > 6
    - ppc_ready_count: recommendation が PPC-Exact / PPC-Phrase

    入力のレコードは変更しない。
    """
    total = attack = gap = ppc_ready = 0

    for record in records:
        total += 1
        if record.classification == "Attack":
            attack += 1
        if is_gap_keyword(record):
            gap += 1
        if record.is_ppc_ready:
            ppc_ready += 1

    return AnalysisSummary(
        total_keywords=total,
        attack_count=attack,
        gap_count=gap,
        ppc_ready_count=ppc_ready,
        analyzed_asins=list(analyzed_asins),
    )
