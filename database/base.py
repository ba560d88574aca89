"""database/base.py — 콘텐츠 DB 매핑용 DeclarativeBase (models 와 분리해 순환 임포트 방지)."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """ServiceTerm / Publication 이 공유하는 Base. create_all 은 테스트·로컬 덤프용."""
