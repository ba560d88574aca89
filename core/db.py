"""
core/db.py — 콘텐츠 DB 연결 (읽기 전용)

이 프로젝트는 콘텐츠 DB 에 쓰지 않습니다. get_db() 세션은 커밋하지 않고
블록이 끝나면 항상 롤백 후 닫습니다. 스키마 생성·마이그레이션도 하지 않습니다.

    from core.db import get_db
    with get_db() as db:
        pubs = db.scalars(select(Publication).limit(10)).all()

PostgreSQL 등 서버 DB 는 풀 옵션(pre_ping, recycle 30분)을 붙여 만들고,
SQLite URL(로컬 덤프)은 기본 옵션으로 만듭니다.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

_POOL_OPTIONS = {
    "pool_pre_ping": True,
    "pool_size": 5,
    "max_overflow": 10,
    "pool_recycle": 1800,
}

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def _make_engine(url: str) -> Engine:
    if not url:
        raise ValueError("DATABASE_URL 이 설정되지 않았습니다.")
    if make_url(url).get_backend_name() == "sqlite":
        return create_engine(url)
    return create_engine(url, **_POOL_OPTIONS)


def _get_session_factory() -> sessionmaker:
    """첫 호출 때 엔진을 만들고 이후에는 재사용합니다."""
    global _engine, _session_factory
    if _session_factory is None:
        from core.config import get_settings

        _engine = _make_engine(get_settings().DATABASE_URL)
        _session_factory = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False)
        logger.info("콘텐츠 DB 엔진 생성 | backend=%s", _engine.dialect.name)
    return _session_factory


@contextmanager
def get_db() -> Iterator[Session]:
    """읽기 전용 세션. 블록 종료 시 롤백하고 닫습니다."""
    session = _get_session_factory()()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def ping_db() -> bool:
    """SELECT 1 이 성공하면 True. 설정 누락·연결 실패는 False."""
    try:
        with get_db() as db:
            db.execute(text("SELECT 1"))
    except (SQLAlchemyError, ValueError) as exc:
        logger.error("콘텐츠 DB 연결 실패: %s", exc)
        return False
    return True
