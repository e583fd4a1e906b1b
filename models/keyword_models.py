# models/keyword_models.py

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


# -----------------------------------------
# 分類値（LLM に返させる閉じた集合）
# -----------------------------------------
# Attack: 高い購買意図 + 競合 Low/Medium
# Support: 関連性・インデックス用の補助語
# Waste: トラフィックはあるが意図が低い / 無関係
CLASSIFICATIONS: tuple[str, ...] = ("Attack", "Support", "Waste")
COMPETITION_LEVELS: tuple[str, ...] = ("Low", "Medium", "High")
RECOMMENDATIONS: tuple[str, ...] = (
    "Title",
    "Bullets",
    "Backend",
    "PPC-Exact",
    "PPC-Phrase",
    "Negative",
    "Ignore",
)
PPC_RECOMMENDATIONS: frozenset[str] = frozenset({"PPC-Exact", "PPC-Phrase"})

# モデルが括弧表記で返してくる場合の読み替え
_RECOMMENDATION_ALIASES = {
    "PPC (Exact)": "PPC-Exact",
    "PPC (Phrase)": "PPC-Phrase",
}


class KeywordRecord(BaseModel):
    """Reverse ASIN 分析で得られた 1 キーワード分のレコード。

    JSON 上は camelCase（intentScore など）、Python 側は snake_case で扱う。
    classification / competition / recommendation は文字列のまま保持し、
    閉じた集合に入らない値は schema_issues で確認できるようにしている。

    Attributes:
        term (str): キーワード文字列。
        classification (str): Attack / Support / Waste。
        intent_score (float): 購買意図スコア（0〜10）。
        competition (str): Low / Medium / High。
        search_volume_est (float): 推定月間検索ボリューム。
        is_organic (bool): オーガニックで現在ランクインしているか。
        is_sponsored (bool): 広告で現在表示されているか。
        asin_overlap (int): このキーワードでランクインしている入力 ASIN 数。
        recommendation (str): 配置アクション。
        reasoning (str): 短い根拠。
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # 数値・真偽値は集計に直結するので必須（欠けていればレコードとして読めない扱い）。
    # 分類系の 3 項目は欠けていても "" になり、schema_issues で拾われる。
    term: str = Field(..., min_length=1)
    classification: str = ""
    intent_score: float = Field(..., alias="intentScore")
    competition: str = ""
    search_volume_est: float = Field(..., alias="searchVolumeEst")
    is_organic: bool = Field(..., alias="isOrganic")
    is_sponsored: bool = Field(..., alias="isSponsored")
    asin_overlap: int = Field(..., alias="asinOverlap")
    recommendation: str = ""
    reasoning: str = ""

    @field_validator("term", mode="before")
    @classmethod
    def _strip_term(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("classification", "competition", mode="before")
    @classmethod
    def _none_enum(cls, value):
        return "" if value is None else value

    @field_validator("recommendation", mode="before")
    @classmethod
    def _normalize_recommendation(cls, value):
        if isinstance(value, str):
            stripped = value.strip()
            return _RECOMMENDATION_ALIASES.get(stripped, stripped)
        return "" if value is None else value

    @field_validator("reasoning", mode="before")
    @classmethod
    def _none_reasoning(cls, value):
        return "" if value is None else value

    @property
    def schema_issues(self) -> List[str]:
        """閉じた集合に入らないフィールド名のリスト（空なら問題なし）。"""
        issues: List[str] = []
        if self.classification not in CLASSIFICATIONS:
            issues.append("classification")
        if self.competition not in COMPETITION_LEVELS:
            issues.append("competition")
        if self.recommendation not in RECOMMENDATIONS:
            issues.append("recommendation")
        return issues

    @property
    def is_ppc_ready(self) -> bool:
        return self.recommendation in PPC_RECOMMENDATIONS


class AnalysisSummary(BaseModel):
    """キーワード一覧から導出される集計値。単独で更新されることはない。"""

    model_config = ConfigDict(populate_by_name=True)

    total_keywords: int = Field(0, alias="totalKeywords")
    attack_count: int = Field(0, alias="attackCount")
    gap_count: int = Field(0, alias="gapCount")
    ppc_ready_count: int = Field(0, alias="ppcReadyCount")
    analyzed_asins: List[str] = Field(default_factory=list, alias="analyzedAsins")


class AnalysisResult(BaseModel):
    """1 回の分析結果（集計 + キーワード一覧 + ワークフローの進捗ログ）。"""

    model_config = ConfigDict(populate_by_name=True)

    summary: AnalysisSummary
    keywords: List[KeywordRecord] = Field(default_factory=list)
    progress_messages: List[str] = Field(default_factory=list, alias="progressMessages")

    def flagged_keywords(self) -> List[KeywordRecord]:
        """分類値などが想定外のレコードだけを返す。"""
        return [k for k in self.keywords if k.schema_issues]
