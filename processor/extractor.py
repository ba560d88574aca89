"""
processor/extractor.py — 본문 HTML 에서 매칭 테이블 탐색

동작:
  1. 본문이 비어 있으면 파싱 없이 [] 반환
  2. html.parser 로 관대하게 파싱 (깨진 마크업도 최선의 트리 생성)
     파서 진단은 호출 단위로 수집 후 버림, 전역 상태 없음
  3. 문서 순서대로 모든 <table> 순회
       └─ 각 <tr> 의 셀(<td>/<th>) 텍스트에 패턴 search
  4. 셀 하나라도 매칭되면 해당 테이블을 한 번만 기록

사용법:
    tables = find_matching_tables(body_html)
    if tables:
        html = TableSanitizer().sanitize(tables[0])
"""

from __future__ import annotations

import re
import warnings
from typing import Optional, Union

import structlog
from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from core.config import get_settings

logger = structlog.get_logger(__name__)

# 헤더/데이터 셀 구분 없음
CELL_TAGS: tuple[str, ...] = ("td", "th")

PatternLike = Union[str, re.Pattern, None]


def resolve_pattern(pattern: PatternLike = None) -> re.Pattern[str]:
    """
    매칭 패턴을 컴파일된 정규식으로 정규화합니다.

    - None        → 설정의 TABLE_PATTERN (대소문자 무시)
    - str         → 대소문자 무시로 컴파일
    - re.Pattern  → 그대로 사용
    """
    if pattern is None:
        return get_settings().compiled_pattern
    if isinstance(pattern, str):
        return re.compile(pattern, re.IGNORECASE)
    return pattern


def parse_html(body_html: str) -> tuple[Optional[BeautifulSoup], list[str]]:
    """
    본문 HTML 을 파싱해 (트리, 진단 메시지 목록) 을 반환합니다.

    파서가 입력을 거부하면 트리 대신 None 을 반환합니다. 예외는 밖으로
    나가지 않습니다. 파싱 중 bs4 경고(예: 본문이 URL 처럼 보임)는 이 호출
    안에서만 기록해 진단 목록에 담고, 전역 경고 필터는 건드리지 않습니다.
    """
    diagnostics: list[str] = []
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            soup = BeautifulSoup(body_html, "html.parser")
        except (ParserRejectedMarkup, AssertionError, ValueError) as exc:
            soup = None
            diagnostics.append(f"{type(exc).__name__}: {exc}")

    diagnostics.extend(f"{w.category.__name__}: {w.message}" for w in caught)
    if soup is None:
        return None, diagnostics

    if soup.find() is None:
        diagnostics.append("요소 없음")
    return soup, diagnostics


def table_matches(table: Tag, pattern: re.Pattern[str]) -> bool:
    """테이블의 셀 텍스트 중 하나라도 패턴에 매칭되면 True. 태그 마크업은 보지 않습니다."""
    for row in table.find_all("tr"):
        for cell in row.find_all(CELL_TAGS):
            if pattern.search(cell.get_text()):
                return True
    return False


class TableExtractor:
    """
    매칭 패턴을 보관하는 테이블 탐색기.

    Args:
        pattern: 셀 텍스트 매칭 정규식 (None 이면 설정값)
    """

    def __init__(self, pattern: PatternLike = None) -> None:
        self.pattern = resolve_pattern(pattern)

    def find(self, body_html: Optional[str]) -> list[Tag]:
        """
        본문에서 매칭 테이블을 문서 순서대로 모두 반환합니다.

        같은 테이블에서 여러 셀이 매칭되어도 결과에는 한 번만 들어갑니다.
        반환된 Tag 는 이번 호출에서 만든 트리에 속하며, 호출자가 자유롭게 변경해도 됩니다.
        """
        if not body_html or not body_html.strip():
            return []

        soup, diagnostics = parse_html(body_html)
        if diagnostics:
            logger.debug("파서 진단 무시", diagnostics=diagnostics)
        if soup is None:
            return []

        matches: list[Tag] = []
        tables = soup.find_all("table")
        for table in tables:
            if table_matches(table, self.pattern):
                matches.append(table)

        logger.debug("테이블 탐색 완료", tables=len(tables), matches=len(matches))
        return matches


def find_matching_tables(
    body_html: Optional[str],
    pattern: PatternLike = None,
) -> list[Tag]:
    """TableExtractor(pattern).find(body_html) 의 단축 함수."""
    return TableExtractor(pattern).find(body_html)
