# app/api/routes.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field

from app.graph.state import DashboardState
from app.graph.workflow import analyze_into
from models.keyword_models import AnalysisResult, KeywordRecord
from models.table_models import ClassFilter, SortDirection, SortField, TableViewState
from services.csv_export import EXPORT_FILENAME, export_csv
from services.table_view import apply_table_view

logger = logging.getLogger(__name__)

router = APIRouter()


# --------- Request / Response モデル ---------


class AnalyzeRequest(BaseModel):
    asins: str = Field(..., description="ASIN の羅列（改行・カンマ・スペース区切り）")


class KeywordViewResponse(BaseModel):
    view: TableViewState
    total: int
    rows: List[KeywordRecord] = []


# --------- 依存関係 ---------


def get_dashboard_state(request: Request) -> DashboardState:
    return request.app.state.dashboard


def table_view_params(
    sort: SortField = Query("intentScore"),
    direction: SortDirection = Query("desc"),
    q: str = Query(""),
    classification: ClassFilter = Query("All"),
) -> TableViewState:
    """クエリパラメータから TableViewState を組み立てる（API / ダッシュボード共通）。"""
    return TableViewState(
        sort_field=sort,
        sort_direction=direction,
        filter_text=q,
        classification=classification,
    )


def _require_result(dashboard: DashboardState) -> AnalysisResult:
    if dashboard.result is None:
        raise HTTPException(status_code=404, detail="No analysis has been run yet.")
    return dashboard.result


def csv_download(records: List[KeywordRecord]) -> Response:
    return Response(
        content=export_csv(records),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


# --------- エンドポイント ---------


@router.get("/health")
def api_health() -> dict:
    return {"status": "ok"}


@router.post("/analyze", response_model=AnalysisResult)
def api_analyze(
    payload: AnalyzeRequest,
    dashboard: DashboardState = Depends(get_dashboard_state),
) -> AnalysisResult:
    """
    ASIN の羅列を受け取り、Reverse ASIN 分析をまとめて実行するメインAPI。

    1) 入力の分割・重複除去（最大 30 件）
    2) LLM 呼び出し
    3) JSON 抽出 → KeywordRecord
    4) 集計

    失敗時は AnalysisError がそのまま飛び、main の例外ハンドラで JSON にする。
    """
    logger.info("[api.analyze] start input_length=%d", len(payload.asins))
    result = analyze_into(dashboard, payload.asins)
    logger.info(
        "[api.analyze] done asins=%d keywords=%d",
        len(result.summary.analyzed_asins),
        result.summary.total_keywords,
    )
    return result


@router.get("/analysis", response_model=AnalysisResult)
def api_current_analysis(
    dashboard: DashboardState = Depends(get_dashboard_state),
) -> AnalysisResult:
    return _require_result(dashboard)


@router.get("/keywords", response_model=KeywordViewResponse)
def api_keywords(
    view: TableViewState = Depends(table_view_params),
    dashboard: DashboardState = Depends(get_dashboard_state),
) -> KeywordViewResponse:
    """現在の分析結果を、絞り込み・ソートした状態で返す。"""
    result = _require_result(dashboard)
    rows = apply_table_view(result.keywords, view)
    return KeywordViewResponse(view=view, total=len(result.keywords), rows=rows)


@router.get("/export")
def api_export(
    view: TableViewState = Depends(table_view_params),
    dashboard: DashboardState = Depends(get_dashboard_state),
) -> Response:
    """表示中のビュー（絞り込み・ソート済み）だけを CSV で返す。"""
    result = _require_result(dashboard)
    rows = apply_table_view(result.keywords, view)
    logger.info("[api.export] rows=%d total=%d", len(rows), len(result.keywords))
    return csv_download(rows)
