"""
web/worker_main.py — 내보내기 API 서버 진입점

    python -m web.worker_main            # 0.0.0.0:8000
    PORT=9000 python -m web.worker_main
"""
from __future__ import annotations

import os

import uvicorn

from core.config import validate_settings
from core.logger import Phase, configure_logging, get_logger, log_context

logger = get_logger(__name__)


def main() -> None:
    configure_logging()
    with log_context(phase=Phase.INIT):
        validate_settings()
        port = int(os.getenv("PORT", "8000"))
        logger.info("내보내기 API 서버 시작", port=port)

    uvicorn.run("web.api:app", host="0.0.0.0", port=port, log_level="warning")
    logger.info("서버 종료")


if __name__ == "__main__":
    main()
