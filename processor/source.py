"""
processor/source.py — 레코드 소스 (콘텐츠 DB → Record)

조회 조건:
    publications.type   = CONTENT_TYPE      (기본 'publication')
    service_terms.name IN SERVICE_NAMES     (5개 Economics Weekly)
    publications.status = 1                 (게시됨)
    ORDER BY publications.id

파이프라인은 Record 이터러블이면 무엇이든 받습니다. 테스트나 다른 저장소는
fetch_matching() 만 구현하면 됩니다 (RecordSource 프로토콜).
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Protocol, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import get_settings
from database.models import Publication, ServiceTerm
from processor.errors import RecordSourceError
from processor.models import Record

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Session]]


class RecordSource(Protocol):
    def fetch_matching(self) -> Iterator[Record]: ...


class SqlRecordSource:
    """
    SQLAlchemy 세션으로 게시물을 조회해 Record 로 변환합니다.

    Args:
        session_factory: 세션 컨텍스트 매니저 팩토리 (기본: core.db.get_db)
        service_names:   서비스 용어 이름 목록 (기본: 설정값)
        content_type:    게시물 타입 (기본: 설정값)
    """

    def __init__(
        self,
        session_factory: Optional[SessionFactory] = None,
        service_names: Optional[Iterable[str]] = None,
        content_type: Optional[str] = None,
    ) -> None:
        s = get_settings()
        if session_factory is None:
            from core.db import get_db
            session_factory = get_db
        self._session_factory = session_factory
        self.service_names = tuple(service_names) if service_names is not None else s.SERVICE_NAMES
        self.content_type = content_type or s.CONTENT_TYPE

    def _query(self):
        return (
            select(Publication, ServiceTerm.name)
            .join(ServiceTerm, Publication.service_id == ServiceTerm.id)
            .where(Publication.type == self.content_type)
            .where(ServiceTerm.name.in_(self.service_names))
            .where(Publication.status == 1)
            .order_by(Publication.id)
        )

    def fetch_matching(self) -> Iterator[Record]:
        """
        조건에 맞는 게시물을 id 순으로 반환합니다.

        Raises:
            RecordSourceError: DB 조회 실패
        """
        try:
            with self._session_factory() as session:
                rows = session.execute(self._query()).all()
                records = [
                    Record(
                        id=pub.id,
                        title=pub.title,
                        category_name=service_name,
                        published_at=pub.published_at,
                        body_html=pub.body,
                    )
                    for pub, service_name in rows
                ]
        except SQLAlchemyError as exc:
            logger.error("게시물 조회 실패: %s", exc)
            raise RecordSourceError(f"게시물 조회 실패: {exc}") from exc

        logger.info(
            "게시물 조회 완료 | count=%d services=%d type=%s",
            len(records), len(self.service_names), self.content_type,
        )
        return iter(records)


class JsonlRecordSource:
    """
    JSON Lines 파일에서 Record 를 읽습니다 (DB 없이 덤프 파일로 실행할 때).

    각 줄은 Record 필드를 가진 JSON 객체입니다. 빈 줄은 건너뜁니다.
    잘못된 줄은 ValidationError 로 즉시 실패합니다.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def fetch_matching(self) -> Iterator[Record]:
        with self.path.open("r", encoding="utf-8") as fh:
            for line in fh:
                if line.strip():
                    yield Record.model_validate_json(line)
