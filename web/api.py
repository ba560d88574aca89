"""
web/api.py — FastAPI 내보내기 API 서버 (포트 8000)

엔드포인트:
  GET  /health     헬스체크 (콘텐츠 DB 연결)
  GET  /export     예측 테이블 CSV 다운로드 (스트리밍)
  GET  /preview    처음 N 개 행을 JSON 으로 미리보기

/export 는 레코드를 먼저 모두 조회한 뒤 스트리밍을 시작합니다.
DB 오류는 스트리밍 전이므로 503 으로 응답할 수 있습니다.
행 생성(추출·정리)은 응답 본문을 보내는 동안 레코드 단위로 진행됩니다.
"""

from __future__ import annotations

import logging
import re
from itertools import islice
from typing import Any, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse, StreamingResponse

from core.config import get_settings
from core.db import ping_db
from core.logger import Phase, log_context
from processor.errors import RecordSourceError
from processor.export import iter_csv
from processor.models import Record, TablePolicy
from processor.pipeline import TableExportPipeline
from processor.source import RecordSource, SqlRecordSource

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Forecast Table Export API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
)


def get_record_source() -> RecordSource:
    """레코드 소스 의존성. 테스트는 app.dependency_overrides 로 교체합니다."""
    return SqlRecordSource()


# ── 헬퍼 ─────────────────────────────────────────────────────

def _load_records(source: RecordSource) -> list[Record]:
    """레코드를 모두 조회합니다. 실패 시 503."""
    try:
        with log_context(phase=Phase.API_CALL):
            return list(source.fetch_matching())
    except RecordSourceError as exc:
        logger.exception("레코드 조회 실패: %s", exc)
        raise HTTPException(status_code=503, detail=f"콘텐츠 DB 조회 오류: {exc}") from exc


def _pipeline(all_tables: bool, pattern: Optional[str]) -> TableExportPipeline:
    """요청 파라미터로 파이프라인 생성. 잘못된 정규식은 422."""
    try:
        return TableExportPipeline(
            pattern=pattern,
            policy=TablePolicy.ALL if all_tables else None,
        )
    except re.error as exc:
        raise HTTPException(status_code=422, detail=f"pattern 정규식 오류: {exc}") from exc


# ── 엔드포인트 ───────────────────────────────────────────────

@app.get("/health")
def health() -> JSONResponse:
    """콘텐츠 DB 연결 상태. 연결 불가 시 503."""
    db_ok = ping_db()
    logger.info("헬스체크 | db=%s", "ok" if db_ok else "error")
    return JSONResponse(
        status_code=200 if db_ok else 503,
        content={"status": "healthy" if db_ok else "unhealthy", "db": "ok" if db_ok else "error"},
    )


@app.get("/export")
def export_csv(
    all_tables: bool = Query(False, description="True 면 기사당 매칭 테이블 전체를 행으로 출력"),
    pattern: Optional[str] = Query(None, description="셀 텍스트 매칭 정규식 (기본: 설정값)"),
    source: RecordSource = Depends(get_record_source),
) -> StreamingResponse:
    """
    매칭 테이블이 있는 기사마다 한 행씩 CSV 로 스트리밍합니다.

    컬럼: Node ID, Title, Tag, Publication Date, Table
    """
    pipeline = _pipeline(all_tables, pattern)
    records = _load_records(source)
    filename = get_settings().EXPORT_FILENAME

    logger.info("CSV 내보내기 시작 | records=%d policy=%s", len(records), pipeline.policy.value)
    return StreamingResponse(
        iter_csv(pipeline.iter_rows(records)),
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment;filename="{filename}"',
            "Cache-Control": "max-age=0",
        },
    )


@app.get("/preview")
def preview(
    limit: int = Query(5, ge=1, le=50),
    all_tables: bool = Query(False),
    pattern: Optional[str] = Query(None),
    source: RecordSource = Depends(get_record_source),
) -> list[dict[str, Any]]:
    """처음 limit 개 행을 JSON 으로 반환합니다."""
    pipeline = _pipeline(all_tables, pattern)
    records = _load_records(source)
    rows = islice(pipeline.iter_rows(records), limit)
    return [row.model_dump() for row in rows]
