# app/graph/workflow.py
from __future__ import annotations

import logging

from app.graph.state import DashboardState, GraphState, create_initial_state
from app.graph import nodes
from models.keyword_models import AnalysisResult
from services.errors import AnalysisError

logger = logging.getLogger(__name__)


def run_workflow(raw_input: str) -> GraphState:
    """
    Reverse ASIN 分析のシンプルな直列ワークフロー。

    tokenizer → reverse_asin → normalizer → aggregator

    途中のエラー（services.errors.AnalysisError）はそのまま呼び出し側へ投げる。
    """
    logger.info("[workflow] run_workflow start input_length=%d", len(raw_input or ""))

    state = create_initial_state(raw_input=raw_input)

    # 1) 入力の分割・重複除去・上限
    state = nodes.tokenizer_node(state)

    # 2) LLM 呼び出し（Web 検索つき）
    state = nodes.reverse_asin_node(state)

    # 3) JSON 抽出 → KeywordRecord
    state = nodes.normalizer_node(state)

    # 4) 集計
    state = nodes.aggregator_node(state)

    logger.info(
        "[workflow] run_workflow done asins=%d current_node=%s",
        len(state.get("asins", [])),
        state.get("current_node"),
    )
    return state


def run_analysis(raw_input: str) -> AnalysisResult:
    """run_workflow の結果を AnalysisResult にまとめて返す。"""
    state = run_workflow(raw_input)
    return AnalysisResult(
        summary=state["summary"],
        keywords=state["keywords"],
        progress_messages=state.get("progress_messages", []),
    )


def analyze_into(dashboard: DashboardState, raw_input: str) -> AnalysisResult:
    """
    ダッシュボードの「現在の結果」を新しい分析で置き換える。

    - 実行中の分析があれば AnalysisInProgressError
    - 失敗時は結果を空にしてエラーメッセージを残し、例外を投げ直す
    """
    with dashboard.begin_run(raw_input):
        try:
            result = run_analysis(raw_input)
        except AnalysisError as e:
            logger.warning("[workflow] analysis failed kind=%s message=%s", e.kind, e.message)
            dashboard.fail(e.message)
            raise
        dashboard.store(result)
        return result
