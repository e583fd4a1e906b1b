# app/main.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.routes import router as api_router
from app.config import settings
from app.dashboard.routes import router as dashboard_router
from app.graph.state import DashboardState
from app.logging_config import configure_logging
from services.errors import AnalysisError

configure_logging(settings.log_level)


def create_app() -> FastAPI:
    app = FastAPI(title="ASIN Keyword Advisor")

    # 現在の分析結果（プロセス内のみ・永続化しない）
    app.state.dashboard = DashboardState()

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(request: Request, exc: AnalysisError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "kind": exc.kind},
        )

    app.include_router(api_router, prefix="/api")
    app.include_router(dashboard_router)
    return app


app = create_app()
