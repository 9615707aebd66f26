"""
cdnlookup/config.py - 중앙 설정 관리

환경 변수 기반 설정을 불변 데이터클래스로 제공합니다.

환경 변수:
    CDNLOOKUP_CACHE_DIR: 캐시 디렉토리 (기본: 사용자 홈 디렉토리)
    CDNLOOKUP_CACHE_TTL: 캐시 유효기간 초 (기본: 7일)
    CDNLOOKUP_HTTP_TIMEOUT: 프로바이더 HTTP 요청 타임아웃 초 (기본: 15)
    CDNLOOKUP_QUERY_TIMEOUT: lookup 1회의 최대 대기 시간 초 (기본: 30)
    CDNLOOKUP_MAX_WORKERS: 병렬 워커 수 (기본: 0 = 프로바이더 수)
    CDNLOOKUP_USER_AGENT: HTTP User-Agent 헤더

Usage:
    from cdnlookup.config import settings, load_settings

    timeout = settings.HTTP_TIMEOUT
    custom = load_settings(CACHE_DIR="/tmp/cdn")
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

ENV_PREFIX = "CDNLOOKUP_"

# 7일
DEFAULT_CACHE_TTL_SECONDS = 7 * 24 * 60 * 60

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/58.0.3029.110 Safari/537.3"
)


# =============================================================================
# 환경 변수 헬퍼
# =============================================================================


def get_env_str(name: str, default: str) -> str:
    """환경 변수 문자열 값 (빈 문자열이면 기본값)"""
    value = os.environ.get(f"{ENV_PREFIX}{name}", "").strip()
    return value or default


def get_env_int(name: str, default: int) -> int:
    """환경 변수 정수 값

    Args:
        name: 접두사(CDNLOOKUP_)를 제외한 변수 이름
        default: 변수가 없거나 파싱 실패 시 기본값

    Returns:
        정수 값
    """
    raw = os.environ.get(f"{ENV_PREFIX}{name}", "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer for %s%s: %r (using %s)", ENV_PREFIX, name, raw, default)
        return default


def get_env_float(name: str, default: float) -> float:
    """환경 변수 실수 값 (파싱 실패 시 기본값)"""
    raw = os.environ.get(f"{ENV_PREFIX}{name}", "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid number for %s%s: %r (using %s)", ENV_PREFIX, name, raw, default)
        return default


# =============================================================================
# Settings
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """애플리케이션 설정 (불변)

    Attributes:
        CACHE_DIR: 프로바이더별 캐시 파일이 저장되는 디렉토리
        CACHE_TTL_SECONDS: 캐시 유효기간 (초)
        HTTP_TIMEOUT: 프로바이더 HTTP 요청 타임아웃 (초)
        QUERY_TIMEOUT: lookup 1회 최대 대기 시간 (초)
        MAX_WORKERS: 병렬 워커 수 (0이면 프로바이더 수만큼)
        USER_AGENT: HTTP User-Agent 헤더
    """

    CACHE_DIR: str
    CACHE_TTL_SECONDS: int = DEFAULT_CACHE_TTL_SECONDS
    HTTP_TIMEOUT: float = 15.0
    QUERY_TIMEOUT: float = 30.0
    MAX_WORKERS: int = 0
    USER_AGENT: str = DEFAULT_USER_AGENT


def load_settings(**overrides: Any) -> Settings:
    """환경 변수에서 Settings 생성

    Args:
        **overrides: 환경 변수보다 우선 적용할 필드 값

    Returns:
        Settings 인스턴스
    """
    loaded = Settings(
        CACHE_DIR=get_env_str("CACHE_DIR", str(Path.home())),
        CACHE_TTL_SECONDS=get_env_int("CACHE_TTL", DEFAULT_CACHE_TTL_SECONDS),
        HTTP_TIMEOUT=get_env_float("HTTP_TIMEOUT", 15.0),
        QUERY_TIMEOUT=get_env_float("QUERY_TIMEOUT", 30.0),
        MAX_WORKERS=get_env_int("MAX_WORKERS", 0),
        USER_AGENT=get_env_str("USER_AGENT", DEFAULT_USER_AGENT),
    )
    return replace(loaded, **overrides) if overrides else loaded


# 전역 설정 인스턴스
settings = load_settings()


# =============================================================================
# 버전
# =============================================================================


@lru_cache(maxsize=1)
def get_version() -> str:
    """패키지에 포함된 version.txt에서 버전 문자열 반환"""
    version_file = Path(__file__).resolve().parent / "version.txt"
    try:
        return version_file.read_text(encoding="utf-8").strip() or "0.0.0"
    except OSError:
        return "0.0.0"
