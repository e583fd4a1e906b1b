# app/graph/nodes.py
from __future__ import annotations

import logging
from typing import List

from app.config import settings
from app.graph.state import GraphState
from agents.reverse_asin_agent import request_reverse_asin_analysis
from agents.response_normalizer import normalize_response
from agents.summary_agent import summarize_keywords
from services.asin_input import parse_asin_input

from models.keyword_models import AnalysisSummary, KeywordRecord

logger = logging.getLogger(__name__)


def _log_progress(state: GraphState, node: str, message: str) -> GraphState:
    """
    進捗ログを state に積むユーティリティ。
    state は dict (GraphState) として扱う。
    """
    line = f"[{node}] {message}"

    messages: List[str] = list(state.get("progress_messages", []))
    messages.append(line)

    state["progress_messages"] = messages
    state["current_node"] = node

    logger.info(line)
    return state


# ---------- Tokenizer ノード ----------


def tokenizer_node(state: GraphState) -> GraphState:
    """
    入力テキストを ASIN リストに変換する。
    1 件も無ければ InputValidationError（LLM は呼ばない）。
    """
    state = _log_progress(state, "tokenizer", "start: parsing identifiers")

    asins = parse_asin_input(state["raw_input"], max_asins=settings.max_asins)
    state["asins"] = asins

    state = _log_progress(state, "tokenizer", f"done: {len(asins)} identifiers")
    return state


# ---------- Reverse ASIN (LLM) ノード ----------


def reverse_asin_node(state: GraphState) -> GraphState:
    state = _log_progress(state, "reverse_asin", "start: requesting keyword analysis")

    raw_text = request_reverse_asin_analysis(state["asins"])
    state["raw_response"] = raw_text

    state = _log_progress(state, "reverse_asin", f"done: received {len(raw_text)} chars")
    return state


# ---------- Normalizer ノード ----------


def normalizer_node(state: GraphState) -> GraphState:
    """
    Normalizer ノード:
    LLM の生テキストから JSON 配列を取り出して KeywordRecord に変換する。
    """
    state = _log_progress(state, "normalizer", "start: extracting keyword records")

    records: List[KeywordRecord] = normalize_response(
        state["raw_response"],
        strict=settings.strict_records,
    )
    state["keywords"] = records

    flagged = sum(1 for r in records if r.schema_issues)
    state = _log_progress(
        state,
        "normalizer",
        f"done: {len(records)} records ({flagged} with unexpected values)",
    )
    return state


# ---------- Aggregator ノード ----------


def aggregator_node(state: GraphState) -> GraphState:
    state = _log_progress(state, "aggregator", "start: computing summary")

    summary: AnalysisSummary = summarize_keywords(state["keywords"], state["asins"])
    state["summary"] = summary

    logger.info(
        "[aggregator_node] total=%d attack=%d gap=%d ppc_ready=%d",
        summary.total_keywords,
        summary.attack_count,
        summary.gap_count,
        summary.ppc_ready_count,
    )

    state = _log_progress(state, "aggregator", "done: summary computed")
    return state
