"""
database 패키지 — 콘텐츠 DB 의 SQLAlchemy ORM 매핑

구조:
    database/
    ├── __init__.py      ← 이 파일 (Base 공통 임포트)
    ├── base.py          ← DeclarativeBase
    └── models.py        ← ORM 모델 (ServiceTerm, Publication)

스키마는 콘텐츠 시스템 소유이므로 마이그레이션은 두지 않습니다.
"""

from database.base import Base  # noqa: F401 (다른 모듈에서 Base import용)
