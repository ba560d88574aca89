"""processor/errors.py — 내보내기 파이프라인 예외."""


class ExportError(Exception):
    """내보내기 처리 중 발생하는 모든 예외의 기본 클래스."""


class RecordSourceError(ExportError):
    """레코드 소스(콘텐츠 DB) 조회 실패. 원인 예외는 __cause__ 로 연결됩니다."""
