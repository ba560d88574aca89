"""
processor/__main__.py — 예측 테이블 CSV 내보내기 CLI

사용법:
    # 콘텐츠 DB → stdout
    python -m processor > cep427.csv

    # 파일로, 기사당 매칭 테이블 전체
    python -m processor --out cep427.csv --all-tables

    # DB 없이 JSON Lines 덤프에서
    python -m processor --input records.jsonl --pattern "Key Forecasts"

SIGTERM / SIGINT 를 받으면 현재 레코드까지 처리하고 멈춥니다.

종료 코드:
    0  성공 (취소된 경우 포함, 처리한 행까지 기록)
    1  레코드 소스 오류
    2  잘못된 인자 (정규식 오류, 입력 파일 없음)
"""

from __future__ import annotations

import argparse
import re
import signal
import sys
import uuid
from pathlib import Path
from typing import Optional

import structlog

from core.config import validate_settings
from core.logger import Phase, configure_logging, log_context
from processor.errors import RecordSourceError
from processor.export import write_csv
from processor.models import TablePolicy
from processor.pipeline import TableExportPipeline
from processor.source import JsonlRecordSource, SqlRecordSource

logger = structlog.get_logger(__name__)


class _ShutdownFlag:
    """SIGTERM/SIGINT 를 받으면 stop_requested 를 True 로 전환합니다."""

    def __init__(self) -> None:
        self.stop_requested = False
        signal.signal(signal.SIGTERM, self._handle)
        signal.signal(signal.SIGINT,  self._handle)

    def _handle(self, signum, frame) -> None:  # noqa: ANN001
        logger.info("종료 신호 수신, 현재 레코드 처리 후 멈춥니다", signum=signum)
        self.stop_requested = True

    def __call__(self) -> bool:
        return self.stop_requested


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m processor",
        description="본문 HTML 의 예측 테이블을 CSV 로 내보냅니다.",
    )
    parser.add_argument("--out", default="-", help="출력 파일 경로 (기본: stdout)")
    parser.add_argument("--input", default=None, help="JSON Lines 레코드 파일 (없으면 DB 조회)")
    parser.add_argument("--pattern", default=None, help="셀 텍스트 매칭 정규식 (대소문자 무시)")
    parser.add_argument(
        "--unwrap",
        default=None,
        help="텍스트로 치환할 태그, 쉼표 구분 (예: strong,span,p)",
    )
    parser.add_argument(
        "--all-tables",
        action="store_true",
        help="기사당 첫 번째가 아닌 모든 매칭 테이블을 행으로 출력",
    )
    parser.add_argument("--log-level", default=None, help="로그 레벨 (DEBUG/INFO/...)")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(level=args.log_level)
    validate_settings()

    unwrap = [t.strip() for t in args.unwrap.split(",") if t.strip()] if args.unwrap else None
    try:
        pipeline = TableExportPipeline(
            pattern=args.pattern,
            unwrap_tags=unwrap,
            policy=TablePolicy.ALL if args.all_tables else None,
        )
    except re.error as exc:
        logger.error("--pattern 정규식 오류", pattern=args.pattern, error=str(exc))
        return 2

    if args.input and not Path(args.input).is_file():
        logger.error("입력 파일 없음", input=args.input)
        return 2

    source = JsonlRecordSource(args.input) if args.input else SqlRecordSource()
    flag = _ShutdownFlag()

    with log_context(job_id=uuid.uuid4().hex[:8]):
        try:
            with log_context(phase=Phase.DB_READ):
                records = source.fetch_matching()
            summary = pipeline.run(records, should_stop=flag)
        except RecordSourceError as exc:
            logger.error("레코드 소스 오류", error=str(exc))
            return 1

        # 처리가 끝난 뒤에야 출력 파일을 엽니다.
        with log_context(phase=Phase.EXPORT):
            if args.out == "-":
                write_csv(summary.rows, sys.stdout)
            else:
                with open(args.out, "w", newline="", encoding="utf-8") as fh:
                    write_csv(summary.rows, fh)

        logger.info(
            "CSV 출력 완료",
            rows=summary.rows_emitted,
            out=args.out,
            cancelled=summary.cancelled,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
