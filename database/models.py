"""
database/models.py — SQLAlchemy ORM 모델 (콘텐츠 DB 읽기 전용 매핑)

테이블:
    service_terms  — 서비스(택소노미) 용어. 예: "US Economics Weekly"
    publications   — 게시물 노드 (제목, 본문 HTML, 게시 상태, 게시 시각)

설계 원칙:
    - 스키마는 콘텐츠 시스템이 소유합니다. 이 프로젝트는 조회만 하며
      마이그레이션을 관리하지 않습니다.
    - publications.status 는 게시 여부 (1 = 게시됨, 0 = 미게시)
    - publications.body 는 편집기가 저장한 원시 HTML (비어 있거나 깨져 있을 수 있음)
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database.base import Base

TIMESTAMPTZ = DateTime(timezone=True)


# ═════════════════════════════════════════════════════════════
# ServiceTerm
# ═════════════════════════════════════════════════════════════

class ServiceTerm(Base):
    """
    게시물이 속한 서비스(택소노미 용어).

    CSV 의 'Tag' 컬럼에는 name 이 그대로 들어갑니다.
    """
    __tablename__ = "service_terms"

    id:   Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    publications: Mapped[list["Publication"]] = relationship(back_populates="service")

    def __repr__(self) -> str:
        return f"<ServiceTerm id={self.id} name={self.name!r}>"


# ═════════════════════════════════════════════════════════════
# Publication
# ═════════════════════════════════════════════════════════════

class Publication(Base):
    """게시물 노드. 추출 대상 테이블은 body HTML 안에 들어 있습니다."""
    __tablename__ = "publications"

    id:           Mapped[int]                = mapped_column(Integer, primary_key=True)
    type:         Mapped[str]                = mapped_column(String(32), nullable=False, default="publication")
    title:        Mapped[str]                = mapped_column(String(255), nullable=False)
    status:       Mapped[int]                = mapped_column(SmallInteger, nullable=False, default=1)
    published_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMPTZ)
    body:         Mapped[Optional[str]]      = mapped_column(Text)
    service_id:   Mapped[Optional[int]]      = mapped_column(ForeignKey("service_terms.id"))

    # ── 관계 ──────────────────────────────────────────────────
    service: Mapped[Optional[ServiceTerm]] = relationship(back_populates="publications")

    __table_args__ = (
        Index("idx_publications_type_status", "type", "status"),
    )

    def __repr__(self) -> str:
        return f"<Publication id={self.id} title={self.title!r} status={self.status}>"
