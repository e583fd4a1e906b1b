# app/graph/state.py
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from models.keyword_models import AnalysisResult
from services.errors import AnalysisInProgressError

logger = logging.getLogger(__name__)


class GraphState(Dict[str, Any]):
    """
    ワークフロー 1 回分の「状態」コンテナ。
    実体はただの dict だが、型ヒントとして分かりやすくするためのラッパ。
    """
    pass


def create_initial_state(raw_input: str) -> GraphState:
    """
    ワークフロー開始時の初期 state を作成。
    """
    state: GraphState = GraphState()
    state["raw_input"] = raw_input
    state["progress_messages"] = []  # 各ノードからのログ的メッセージ
    state["current_node"] = None
    return state


class DashboardState:
    """
    ダッシュボードが持つ「現在の分析結果」。

    - 同時に走る分析は 1 つだけ（begin_run で非ブロッキングにロックを取る）
    - 新しい分析を始めた時点で前回の結果は破棄する
    - 失敗した場合は結果なしのまま（部分的な結果は残さない）
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._result: Optional[AnalysisResult] = None
        self.last_error: Optional[str] = None
        self.last_input: str = ""

    @property
    def result(self) -> Optional[AnalysisResult]:
        return self._result

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def begin_run(self, raw_input: str = "") -> Iterator["DashboardState"]:
        if not self._lock.acquire(blocking=False):
            logger.warning("[dashboard_state] analysis already in flight, rejected")
            raise AnalysisInProgressError("An analysis is already running.")
        try:
            self._result = None
            self.last_error = None
            self.last_input = raw_input
            yield self
        finally:
            self._lock.release()

    def store(self, result: AnalysisResult) -> None:
        self._result = result

    def fail(self, message: str) -> None:
        self._result = None
        self.last_error = message
