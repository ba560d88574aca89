"""
processor/models.py — Pydantic v2 데이터 모델

레코드 소스 → 파이프라인 → CSV 싱크 전달 구조:

  Record         : 레코드 소스가 넘겨주는 입력 단위 (불변)
  ResultRow      : CSV 한 행 (Node ID, Title, Tag, Publication Date, Table)
  ExportSummary  : 배치 실행 통계
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TablePolicy(str, enum.Enum):
    """기사 하나에서 매칭 테이블이 여러 개일 때의 행 생성 정책."""
    FIRST = "first"   # 첫 번째 매칭 테이블만 (기존 CSV 와 동일)
    ALL   = "all"     # 매칭 테이블마다 한 행


# ─────────────────────────────────────────────────────────────
# 1. 입력 레코드
# ─────────────────────────────────────────────────────────────

class Record(BaseModel):
    """레코드 소스가 제공하는 게시물 한 건. 파이프라인은 절대 수정하지 않습니다."""

    id:            Union[int, str]
    title:         str
    category_name: str                = ""
    published_at:  Optional[datetime] = None
    body_html:     str                = ""

    model_config = ConfigDict(frozen=True)

    @field_validator("body_html", "category_name", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        """DB NULL 은 빈 문자열로 받습니다."""
        return "" if v is None else v


# ─────────────────────────────────────────────────────────────
# 2. 출력 행
# ─────────────────────────────────────────────────────────────

class ResultRow(BaseModel):
    """CSV 출력 한 행."""

    id:             Union[int, str]
    title:          str
    category_name:  str
    formatted_date: str
    table_html:     str

    model_config = ConfigDict(frozen=True)

    def as_list(self) -> list[str]:
        """HEADER 순서대로 필드를 나열합니다."""
        return [
            str(self.id),
            self.title,
            self.category_name,
            self.formatted_date,
            self.table_html,
        ]


# ─────────────────────────────────────────────────────────────
# 3. 실행 통계
# ─────────────────────────────────────────────────────────────

class ExportSummary(BaseModel):
    """TableExportPipeline.run() 결과."""

    records_seen:    int  = 0
    records_matched: int  = 0
    rows_emitted:    int  = 0
    cancelled:       bool = False
    rows:            list[ResultRow] = Field(default_factory=list)
