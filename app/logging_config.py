# app/logging_config.py

import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """ルートロガーにコンソール出力のハンドラを 1 つだけ付ける。"""
    root = logging.getLogger()

    if not any(getattr(h, "_asin_advisor", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATEFMT))
        handler._asin_advisor = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    root.setLevel(level.upper())
