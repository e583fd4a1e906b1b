# services/errors.py

from __future__ import annotations


class AnalysisError(Exception):
    """分析 1 回分を打ち切るエラーの基底クラス。

    message はそのまま画面・API に表示してよい文言にする
    （LLM の生レスポンスは含めない）。
    """

    kind = "analysis"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputValidationError(AnalysisError):
    """ASIN が 1 件も取れなかった（通信は行わない）。"""

    kind = "validation"
    status_code = 400


class AIServiceError(AnalysisError):
    """LLM 呼び出し自体の失敗（ネットワーク / 認証 / クォータなど）。"""

    kind = "service"
    status_code = 502


class NoStructuredDataError(AnalysisError):
    """レスポンス中に JSON 配列の境界（[ と ]）が見つからない。"""

    kind = "extraction"
    status_code = 502


class MalformedResponseError(AnalysisError):
    """配列の境界はあるが、中身が JSON として / レコードとして読めない。"""

    kind = "parse"
    status_code = 502


class RecordSchemaError(AnalysisError):
    """strict モードで、分類値などが閉じた集合に入らないレコードがあった。"""

    kind = "schema"
    status_code = 502


class AnalysisInProgressError(AnalysisError):
    kind = "busy"
    status_code = 409
