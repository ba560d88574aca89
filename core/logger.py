"""
core/logger.py — 예측 테이블 추출기 구조화 로깅

structlog 이벤트와 stdlib logging 레코드(SQLAlchemy, uvicorn 등)가 같은
ProcessorFormatter 를 거쳐 나갑니다.

    콘솔 (stderr)   개발: 컬러 ConsoleRenderer / 프로덕션: JSON
    파일 (선택)     logs/table_export.log, JSON, 5 MB × 3 회전

stdout 은 CLI 의 CSV 출력 전용이므로 로그는 절대 stdout 으로 가지 않습니다.

컨텍스트:
    with log_context(node_id=1234, phase=Phase.EXTRACTION):
        logger.info("테이블 탐색 시작")
    # → {"event": "테이블 탐색 시작", "node_id": 1234, "phase": "Extraction", ...}
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

import structlog
from structlog.stdlib import ProcessorFormatter


class Phase:
    """log_context(phase=...) 에 쓰는 처리 단계 이름."""
    DB_READ      = "DB Read"        # 레코드 소스 조회
    EXTRACTION   = "Extraction"     # 테이블 탐색
    SANITIZATION = "Sanitization"   # 속성 제거 / 언랩 / 정규화
    EXPORT       = "Export"         # CSV 행 출력
    API_CALL     = "API Call"       # FastAPI 요청 처리
    INIT         = "Initialization" # 앱 초기화


_SERVICE  = "table-export"
_LOG_DIR  = Path(os.getenv("LOG_DIR", "logs"))
_LOG_FILE = "table_export.log"

# 자체 로그가 많은 라이브러리는 WARNING 이상만
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "sqlalchemy.pool", "httpx", "asyncio")


def _add_service(logger: Any, method: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", _SERVICE)
    return event_dict


def _shared_processors() -> list:
    """structlog 체인과 stdlib 레코드(foreign_pre_chain)가 함께 쓰는 전처리."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        _add_service,
    ]


def _formatter(renderer: Any) -> ProcessorFormatter:
    return ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            ProcessorFormatter.remove_processors_meta,
            structlog.processors.ExceptionRenderer(),
            renderer,
        ],
    )


def configure_logging(
    level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    log_file: bool = False,
) -> None:
    """
    structlog 와 루트 로거를 설정합니다. 다시 호출하면 핸들러를 교체합니다.

    Args:
        level:     로그 레벨 이름 (기본: LOG_LEVEL 설정값)
        json_logs: 콘솔 JSON 여부 (기본: production 이면 True)
        log_file:  회전 파일 핸들러 추가 여부
    """
    from core.config import get_settings

    s = get_settings()
    level_name = (level or s.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    use_json = s.is_production if json_logs is None else json_logs

    structlog.configure(
        processors=_shared_processors() + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_formatter(
        structlog.processors.JSONRenderer() if use_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), sort_keys=False)
    ))
    handlers: list[logging.Handler] = [console]

    if log_file:
        _LOG_DIR.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            _LOG_DIR / _LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8",
        )
        rotating.setFormatter(_formatter(structlog.processors.JSONRenderer()))
        handlers.append(rotating)

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        handler.setLevel(log_level)
        root.addHandler(handler)
    root.setLevel(log_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).debug(
        "로깅 초기화 완료",
        level=level_name,
        console="json" if use_json else "color",
        file=str(_LOG_DIR / _LOG_FILE) if log_file else None,
    )


def _context_fields(node_id, phase, job_id, extra: dict) -> dict:
    fields = {"node_id": node_id, "phase": phase, "job_id": job_id, **extra}
    return {k: v for k, v in fields.items() if v is not None}


def bind_log_context(
    *,
    node_id: Optional[int | str] = None,
    phase: Optional[str] = None,
    job_id: Optional[str] = None,
    **extra: Any,
) -> None:
    """현재 컨텍스트에 값을 추가합니다. None 인 키는 무시합니다."""
    fields = _context_fields(node_id, phase, job_id, extra)
    if fields:
        structlog.contextvars.bind_contextvars(**fields)


def clear_log_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(
    *,
    node_id: Optional[int | str] = None,
    phase: Optional[str] = None,
    job_id: Optional[str] = None,
    **extra: Any,
) -> Iterator[None]:
    """
    블록 안에서만 유효한 로그 컨텍스트.

    중첩 가능하며, 블록을 벗어나면(예외 포함) 바깥 값이 복원됩니다.
    """
    with structlog.contextvars.bound_contextvars(**_context_fields(node_id, phase, job_id, extra)):
        yield


def get_logger(name: str = __name__) -> Any:
    return structlog.get_logger(name)
