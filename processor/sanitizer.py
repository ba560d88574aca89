"""
processor/sanitizer.py — 매칭 테이블을 최소 HTML 조각으로 정리

정리 파이프라인 (순서 고정):
  1. 속성 제거    : 테이블과 모든 하위 요소의 속성 삭제 (깊이 우선 재귀)
  2. 태그 언랩    : strong / span / p 등을 텍스트 노드로 치환
  3. 직렬화       : 서브트리 → HTML 문자열
  4. 텍스트 정규화 : 이스케이프·엔티티 통일, 줄바꿈 제거, 공백 축약

구조 요소(table / tr / td / th)는 절대 추가·삭제하지 않습니다.

사용법:
    sanitizer = TableSanitizer(unwrap_tags=("strong", "span", "p"))
    html = sanitizer.sanitize(table)
    # '<table><tr><td>Main Economic ...</td></tr>...</table>'
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

import structlog
from bs4 import NavigableString, Tag

from core.config import get_settings

logger = structlog.get_logger(__name__)

# ─────────────────────────────────────────────────────────────
# 텍스트 정규화 규칙
# ─────────────────────────────────────────────────────────────

# 순서 중요: &amp; 해제 → 줄바꿈 제거 → 공백 축약
_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("\\u003C",     "<"),
    ("\\u003E",     ">"),
    ("\\u0022",     '"'),
    ("\\u0026amp;", "&"),
    ("&amp;",       "&"),
    ("&nbsp;",      " "),
    ("\r\n",        ""),
    ("\r",          ""),
    ("\n",          ""),
)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(html: str) -> str:
    """
    직렬화된 HTML 문자열의 이스케이프·공백을 정리합니다.

    - 문자 그대로 적힌 \\u003C / \\u003E / \\u0022 → < > "
    - \\u0026amp; 와 &amp; → &
    - &nbsp; → 공백
    - CR / LF 제거 후 연속 공백을 공백 하나로 축약
    """
    if not html:
        return ""
    for old, new in _REPLACEMENTS:
        html = html.replace(old, new)
    return _WHITESPACE_RE.sub(" ", html)


# ─────────────────────────────────────────────────────────────
# 트리 변환
# ─────────────────────────────────────────────────────────────

def strip_attributes(element: Tag) -> None:
    """element 와 모든 하위 요소의 속성을 제거합니다. 텍스트 노드는 건드리지 않습니다."""
    if element.attrs:
        element.attrs = {}
    for child in element.children:
        if isinstance(child, Tag):
            strip_attributes(child)


def unwrap_tags(element: Tag, tags: Iterable[str]) -> int:
    """
    element 하위의 지정 태그를 모두 텍스트 노드로 치환하고, 치환 개수를 반환합니다.

    치환 텍스트는 get_text() 이므로 중첩 요소의 텍스트까지 포함합니다.

    태그별로 find_all() 결과를 리스트로 먼저 확보한 뒤 역순(문서 뒤쪽부터)으로
    치환합니다. 같은 태그가 중첩된 경우 안쪽이 먼저 치환되고, 바깥쪽은 이미
    바뀐 트리에서 텍스트를 모읍니다. 바깥쪽이 먼저 사라져 안쪽이 떨어져 나가는
    일은 생기지 않습니다.
    """
    replaced = 0
    for tag in tags:
        snapshot = element.find_all(tag)
        for found in reversed(snapshot):
            found.replace_with(NavigableString(found.get_text()))
            replaced += 1
    return replaced


class TableSanitizer:
    """
    매칭 테이블 정리기.

    Args:
        unwrap_tags: 텍스트로 치환할 인라인 태그 목록 (None 이면 설정값)
    """

    def __init__(self, unwrap_tags: Optional[Iterable[str]] = None) -> None:
        tags = unwrap_tags if unwrap_tags is not None else get_settings().UNWRAP_TAGS
        self.unwrap_tags: tuple[str, ...] = tuple(t.lower() for t in tags)

    def sanitize(self, table: Tag) -> str:
        """
        table 을 제자리에서 정리한 뒤 정규화된 HTML 문자열을 반환합니다.

        table 이 속한 트리는 변경됩니다. 같은 테이블을 다시 정리해도 결과는 같습니다.
        """
        strip_attributes(table)
        replaced = unwrap_tags(table, self.unwrap_tags)
        html = normalize_text(str(table))
        logger.debug("테이블 정리 완료", unwrapped=replaced, length=len(html))
        return html
