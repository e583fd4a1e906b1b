# models/table_models.py

from __future__ import annotations

from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field

SortDirection = Literal["asc", "desc"]

# 画面・API で使うソートキー（camelCase） → KeywordRecord の属性名
SORT_FIELDS: Dict[str, str] = {
    "term": "term",
    "classification": "classification",
    "intentScore": "intent_score",
    "competition": "competition",
    "searchVolumeEst": "search_volume_est",
    "isOrganic": "is_organic",
    "isSponsored": "is_sponsored",
    "asinOverlap": "asin_overlap",
    "recommendation": "recommendation",
    "reasoning": "reasoning",
}

SortField = Literal[
    "term",
    "classification",
    "intentScore",
    "competition",
    "searchVolumeEst",
    "isOrganic",
    "isSponsored",
    "asinOverlap",
    "recommendation",
    "reasoning",
]

ClassFilter = Literal["All", "Attack", "Support", "Waste"]


class TableViewState(BaseModel):
    """キーワードテーブルの表示状態（ソート・絞り込み）。

    レコード本体は持たず、派生ビューは services.table_view.apply_table_view で作る。
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    sort_field: SortField = Field("intentScore", alias="sortField")
    sort_direction: SortDirection = Field("desc", alias="sortDirection")
    filter_text: str = Field("", alias="filterText")
    classification: ClassFilter = "All"

    def toggle_sort(self, field: SortField) -> "TableViewState":
        """同じ列なら昇順/降順を反転、別の列なら降順でその列に切り替える。"""
        if field == self.sort_field:
            direction: SortDirection = "asc" if self.sort_direction == "desc" else "desc"
            return self.model_copy(update={"sort_direction": direction})
        return self.model_copy(update={"sort_field": field, "sort_direction": "desc"})

    def query_params(self) -> Dict[str, str]:
        """ダッシュボードのリンク用クエリパラメータ。"""
        params = {"sort": self.sort_field, "direction": self.sort_direction}
        if self.filter_text:
            params["q"] = self.filter_text
        if self.classification != "All":
            params["classification"] = self.classification
        return params
