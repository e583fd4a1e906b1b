# app/dashboard/routes.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from app.api.routes import csv_download, get_dashboard_state, table_view_params
from app.config import settings
from app.graph.state import DashboardState
from app.graph.workflow import analyze_into
from models.keyword_models import CLASSIFICATIONS
from models.table_models import TableViewState
from services.asin_input import count_asin_tokens
from services.errors import AnalysisError
from services.table_view import apply_table_view

logger = logging.getLogger(__name__)

router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

# (見出し, ソートキー)。Reasoning 列はソート対象にしない
TABLE_COLUMNS = [
    ("Keyword", "term"),
    ("Class", "classification"),
    ("Intent (0-10)", "intentScore"),
    ("Est. Vol", "searchVolumeEst"),
    ("Competition", "competition"),
    ("Action", "recommendation"),
]


def _url(path: str, params: Dict[str, str]) -> str:
    return f"{path}?{urlencode(params)}" if params else path


def _render(
    request: Request,
    dashboard: DashboardState,
    view: TableViewState,
    error: Optional[str] = None,
    raw_input: Optional[str] = None,
    status_code: int = 200,
) -> HTMLResponse:
    result = dashboard.result
    rows = apply_table_view(result.keywords, view) if result else []

    columns: List[dict] = []
    for label, key in TABLE_COLUMNS:
        columns.append(
            {
                "label": label,
                "key": key,
                "active": view.sort_field == key,
                "url": _url("/", view.toggle_sort(key).query_params()),
            }
        )

    asin_text = raw_input if raw_input is not None else dashboard.last_input

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "result": result,
            "summary": result.summary if result else None,
            "rows": rows,
            "total_rows": len(result.keywords) if result else 0,
            "view": view,
            "columns": columns,
            "classifications": CLASSIFICATIONS,
            "export_url": _url("/export.csv", view.query_params()),
            "error": error if error is not None else dashboard.last_error,
            "asin_input": asin_text,
            "asin_count": count_asin_tokens(asin_text),
            "max_asins": settings.max_asins,
            "in_flight": dashboard.in_flight,
        },
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse)
def dashboard_index(
    request: Request,
    view: TableViewState = Depends(table_view_params),
    dashboard: DashboardState = Depends(get_dashboard_state),
) -> HTMLResponse:
    return _render(request, dashboard, view)


@router.post("/analyze", response_class=HTMLResponse)
def dashboard_analyze(
    request: Request,
    asins: str = Form(""),
    dashboard: DashboardState = Depends(get_dashboard_state),
) -> Response:
    """
    フォームから分析を実行する。
    成功したら一覧へリダイレクト、失敗したらエラーバナー付きで再描画する。
    """
    logger.info("[dashboard.analyze] start input_length=%d", len(asins))
    try:
        analyze_into(dashboard, asins)
    except AnalysisError as e:
        return _render(
            request,
            dashboard,
            TableViewState(),
            error=e.message,
            raw_input=asins,
            status_code=e.status_code,
        )
    return RedirectResponse(url="/", status_code=303)


@router.get("/export.csv")
def dashboard_export(
    view: TableViewState = Depends(table_view_params),
    dashboard: DashboardState = Depends(get_dashboard_state),
) -> Response:
    result = dashboard.result
    rows = apply_table_view(result.keywords, view) if result else []
    logger.info("[dashboard.export] rows=%d", len(rows))
    return csv_download(rows)
