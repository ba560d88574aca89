"""
processor/export.py — ResultRow → CSV 싱크

필드 인용·이스케이프는 csv 모듈이 담당합니다. Table 컬럼의 HTML 조각에는
줄바꿈이 없으므로 CSV 한 행은 항상 한 줄입니다.

사용법:
    # 파일
    with open("cep427.csv", "w", newline="", encoding="utf-8") as fh:
        write_csv(rows, fh)

    # 스트리밍 (FastAPI StreamingResponse)
    StreamingResponse(iter_csv(rows), media_type="text/csv")
"""

from __future__ import annotations

import csv
import io
from typing import IO, Iterable, Iterator

from processor.models import ResultRow

HEADER: tuple[str, ...] = (
    "Node ID",
    "Title",
    "Tag",
    "Publication Date",
    "Table",
)


def iter_csv(rows: Iterable[ResultRow]) -> Iterator[str]:
    """헤더 줄을 먼저, 이어서 행마다 CSV 한 줄을 문자열로 내보냅니다."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    def _flush() -> str:
        line = buffer.getvalue()
        buffer.seek(0)
        buffer.truncate(0)
        return line

    writer.writerow(HEADER)
    yield _flush()
    for row in rows:
        writer.writerow(row.as_list())
        yield _flush()


def write_csv(rows: Iterable[ResultRow], fh: IO[str]) -> int:
    """rows 를 fh 에 CSV 로 기록하고 기록한 행 수(헤더 제외)를 반환합니다."""
    writer = csv.writer(fh)
    writer.writerow(HEADER)
    count = 0
    for row in rows:
        writer.writerow(row.as_list())
        count += 1
    return count
