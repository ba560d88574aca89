"""
processor/pipeline.py — 레코드 → CSV 행 변환 파이프라인

파이프라인 (레코드 단위, 서로 독립):
    Record
      └─► TableExtractor.find(body_html)      매칭 테이블 목록
            ├─ 없음  → 레코드 제외 (행 없음)
            └─ 있음  → TablePolicy 에 따라 첫 번째 / 전체 선택
                         └─► TableSanitizer.sanitize(table)
                               └─► ResultRow(id, title, tag, date, table)

사용법:
    pipeline = TableExportPipeline()
    for row in pipeline.iter_rows(source.fetch_matching()):
        writer.writerow(row.as_list())

취소:
    iter_rows(records, should_stop=event.is_set): 레코드 사이마다 확인합니다.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, Optional, Union

import structlog

from core.config import get_settings
from core.logger import Phase, log_context
from processor.dates import format_date
from processor.extractor import PatternLike, TableExtractor
from processor.models import ExportSummary, Record, ResultRow, TablePolicy
from processor.sanitizer import TableSanitizer

logger = structlog.get_logger(__name__)

DateFormatter = Callable[..., str]


class TableExportPipeline:
    """
    매칭 테이블 추출·정리 후 ResultRow 를 만드는 배치 드라이버.

    Args:
        pattern:        셀 텍스트 매칭 정규식 (None 이면 설정값)
        unwrap_tags:    언랩 태그 목록 (None 이면 설정값)
        policy:         TablePolicy 또는 "first" / "all" (None 이면 설정값)
        date_formatter: published_at → 문자열 (기본: processor.dates.format_date)
    """

    def __init__(
        self,
        pattern: PatternLike = None,
        unwrap_tags: Optional[Iterable[str]] = None,
        policy: Union[TablePolicy, str, None] = None,
        date_formatter: Optional[DateFormatter] = None,
    ) -> None:
        self.extractor = TableExtractor(pattern)
        self.sanitizer = TableSanitizer(unwrap_tags)
        policy = policy or get_settings().TABLE_POLICY
        self.policy = policy if isinstance(policy, TablePolicy) else TablePolicy(policy.lower())
        self._format_date = date_formatter or format_date

    # ── 레코드 단위 ──────────────────────────────────────────

    def rows_for(self, record: Record) -> list[ResultRow]:
        """레코드 하나에서 나오는 행 목록. 매칭이 없으면 []."""
        with log_context(node_id=record.id, phase=Phase.EXTRACTION):
            tables = self.extractor.find(record.body_html)
            if not tables:
                logger.debug("매칭 테이블 없음, 제외")
                return []

            if self.policy is TablePolicy.FIRST:
                tables = tables[:1]

            with log_context(phase=Phase.SANITIZATION, tables=len(tables)):
                formatted_date = self._format_date(record.published_at)
                rows = [
                    ResultRow(
                        id=record.id,
                        title=record.title,
                        category_name=record.category_name,
                        formatted_date=formatted_date,
                        table_html=self.sanitizer.sanitize(table),
                    )
                    for table in tables
                ]
                logger.debug("행 생성", rows=len(rows))
            return rows

    # ── 배치 ──────────────────────────────────────────────────

    def iter_rows(
        self,
        records: Iterable[Record],
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> Iterator[ResultRow]:
        """
        레코드를 순서대로 처리하며 행을 하나씩 내보냅니다.

        should_stop() 이 True 를 반환하면 다음 레코드로 넘어가기 전에 멈춥니다.
        레코드 소스에서 발생한 예외는 그대로 전파됩니다.
        """
        for record in records:
            if should_stop is not None and should_stop():
                logger.info("내보내기 취소됨", next_node_id=record.id)
                return
            yield from self.rows_for(record)

    def run(
        self,
        records: Iterable[Record],
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> ExportSummary:
        """모든 레코드를 처리하고 행과 통계를 함께 반환합니다."""
        summary = ExportSummary()
        for record in records:
            if should_stop is not None and should_stop():
                summary.cancelled = True
                break
            summary.records_seen += 1
            rows = self.rows_for(record)
            if rows:
                summary.records_matched += 1
                summary.rows.extend(rows)
        summary.rows_emitted = len(summary.rows)

        logger.info(
            "내보내기 완료",
            phase=Phase.EXPORT,
            seen=summary.records_seen,
            matched=summary.records_matched,
            rows=summary.rows_emitted,
            cancelled=summary.cancelled,
        )
        return summary
