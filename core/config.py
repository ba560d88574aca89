"""
core/config.py — 예측 테이블 추출기 통합 설정

설정 로드 우선순위:
  1. 환경 변수
  2. .env 파일 (로컬 개발)
  3. 아래 Settings 기본값

사용법:
    from core.config import get_settings

    s       = get_settings()
    pattern = s.compiled_pattern
    tags    = s.UNWRAP_TAGS

─────────────────────────────────────────────────────────────────
[매칭 패턴 / 언랩 태그 재정의]

 기본 패턴은 "Main Economic ... Market Forecasts" 를 대소문자 구분 없이
 찾습니다. 다른 주간지의 표를 뽑으려면 코드 수정 없이 환경 변수만 바꿉니다.

   TABLE_PATTERN="Key Forecasts.*Outlook"
   UNWRAP_TAGS="strong,span,p,em"
   SERVICE_NAMES="US Economics Weekly;UK Economics Weekly"

 TABLE_POLICY:
   first  기사당 첫 번째 매칭 테이블만 내보냄 (기존 CSV 와 동일)
   all    매칭 테이블마다 한 행씩 내보냄
─────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# -------------------------------------------------------
# 기본값
# -------------------------------------------------------

DEFAULT_TABLE_PATTERN = r"Main Economic.*Market Forecasts"

DEFAULT_UNWRAP_TAGS: tuple[str, ...] = ("strong", "span", "p")

DEFAULT_SERVICE_NAMES: tuple[str, ...] = (
    "US Economics Weekly",
    "Canada Economics Weekly",
    "Japan Economics Weekly",
    "UK Economics Weekly",
    "Europe Economics Weekly",
)

TABLE_POLICIES = ("first", "all")


def _split_env(key: str, sep: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """구분자로 나뉜 환경 변수를 튜플로 변환합니다. 비어 있으면 기본값."""
    raw = os.getenv(key, "")
    items = tuple(part.strip() for part in raw.split(sep) if part.strip())
    return items or default


# -------------------------------------------------------
# 설정 데이터클래스
# -------------------------------------------------------

@dataclass(frozen=True)
class Settings:
    # ── 민감 정보 ────────────────────────────────────────
    DATABASE_URL: str = ""

    # ── 배포 환경 ─────────────────────────────────────────
    ENVIRONMENT: str = "development"

    # ── 테이블 매칭 ───────────────────────────────────────
    TABLE_PATTERN: str       = DEFAULT_TABLE_PATTERN
    TABLE_PATTERN_FLAGS: int = re.IGNORECASE
    UNWRAP_TAGS: tuple[str, ...] = DEFAULT_UNWRAP_TAGS
    TABLE_POLICY: str        = "first"

    # ── 레코드 소스 (콘텐츠 DB) ───────────────────────────
    CONTENT_TYPE: str = "publication"
    SERVICE_NAMES: tuple[str, ...] = field(default_factory=lambda: DEFAULT_SERVICE_NAMES)

    # ── 날짜 포맷 ─────────────────────────────────────────
    DATE_FORMAT: str = "%m/%d/%Y - %H:%M"   # 'short' 포맷
    TIMEZONE: str    = "UTC"

    # ── 내보내기 ──────────────────────────────────────────
    EXPORT_FILENAME: str = "cep427.csv"

    # ── 로깅 ──────────────────────────────────────────────
    LOG_LEVEL: str  = "INFO"

    # ── 편의 프로퍼티 ─────────────────────────────────────
    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def compiled_pattern(self) -> re.Pattern[str]:
        return re.compile(self.TABLE_PATTERN, self.TABLE_PATTERN_FLAGS)


# -------------------------------------------------------
# 싱글톤 팩토리
# -------------------------------------------------------

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Settings 싱글톤을 반환합니다.

    환경 변수가 없으면 Settings 기본값을 사용합니다.
    테스트에서 환경을 바꾼 경우 get_settings.cache_clear() 후 재호출하세요.
    """
    return Settings(
        DATABASE_URL    = os.getenv("DATABASE_URL", ""),
        ENVIRONMENT     = os.getenv("ENVIRONMENT", "development"),
        TABLE_PATTERN   = os.getenv("TABLE_PATTERN") or DEFAULT_TABLE_PATTERN,
        UNWRAP_TAGS     = _split_env("UNWRAP_TAGS", ",", DEFAULT_UNWRAP_TAGS),
        TABLE_POLICY    = os.getenv("TABLE_POLICY", "first").strip().lower(),
        CONTENT_TYPE    = os.getenv("CONTENT_TYPE", "publication"),
        SERVICE_NAMES   = _split_env("SERVICE_NAMES", ";", DEFAULT_SERVICE_NAMES),
        DATE_FORMAT     = os.getenv("DATE_FORMAT", "%m/%d/%Y - %H:%M"),
        TIMEZONE        = os.getenv("TIMEZONE", "UTC"),
        EXPORT_FILENAME = os.getenv("EXPORT_FILENAME", "cep427.csv"),
        LOG_LEVEL       = os.getenv("LOG_LEVEL", "INFO"),
    )


# -------------------------------------------------------
# 시작 시 필수 값 검증
# -------------------------------------------------------

def validate_settings(s: Settings | None = None) -> None:
    """앱 시작 시 호출하여 필수 설정이 모두 올바른지 확인합니다."""
    s = s or get_settings()
    problems = []

    if s.is_production and not s.DATABASE_URL:
        problems.append("DATABASE_URL 누락")

    try:
        s.compiled_pattern
    except re.error as exc:
        problems.append(f"TABLE_PATTERN 정규식 오류: {exc}")

    if s.TABLE_POLICY not in TABLE_POLICIES:
        problems.append(
            f"TABLE_POLICY={s.TABLE_POLICY!r} (허용: {', '.join(TABLE_POLICIES)})"
        )

    if problems:
        raise ValueError(
            "설정 오류: " + "; ".join(problems) + "\n"
            "  로컬: .env 파일에 KEY=value 형식으로 추가"
        )

    logger.info(
        "설정 로드 완료 | env=%s | DB=%s | pattern=%s | unwrap=%s",
        s.ENVIRONMENT,
        "OK" if s.DATABASE_URL else "MISSING",
        s.TABLE_PATTERN,
        ",".join(s.UNWRAP_TAGS),
    )
