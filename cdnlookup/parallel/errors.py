"""
cdnlookup/parallel/errors.py - 에러 수집 및 관리

병렬 조회 중 프로바이더별로 발생하고 삼켜지는 에러를 수집합니다.
lookup()은 개별 프로바이더 실패를 호출자에게 전파하지 않으므로,
운영자가 원인을 확인할 수 있는 진단 채널 역할을 합니다.

주요 구성 요소:
- ErrorSeverity: 에러 심각도 분류
- ErrorCategory: 예외 종류 분류 (네트워크, 타임아웃, HTTP, 디코딩 등)
- CollectedError: 수집된 에러 상세 정보
- ErrorCollector: 스레드 세이프 에러 수집기

Example:
    collector = ErrorCollector("lookup")
    engine = QueryEngine(registry, error_collector=collector)
    engine.locate("104.16.1.1")

    if collector.has_errors:
        print(collector.get_summary())
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import requests

from cdnlookup.exceptions import CacheError, CDNLookupError, FetchError

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """에러 심각도 분류"""

    CRITICAL = "critical"  # 핵심 기능 실패 - 반드시 보고
    WARNING = "warning"  # 부분 실패 - 보고하되 계속 진행
    INFO = "info"  # 정보성 - 로그만 남김
    DEBUG = "debug"  # 디버그 - 개발 시에만 필요


class ErrorCategory(Enum):
    """예외 종류 분류"""

    NETWORK = "network"
    TIMEOUT = "timeout"
    HTTP = "http"
    DECODE = "decode"
    CACHE = "cache"
    UNKNOWN = "unknown"


def categorize_error(error: BaseException) -> ErrorCategory:
    """예외 객체를 분석하여 ErrorCategory로 분류

    FetchError는 원인 예외(cause)를 기준으로 분류합니다.

    Args:
        error: 분류할 예외

    Returns:
        에러 카테고리
    """
    if isinstance(error, FetchError) and error.cause is not None:
        return categorize_error(error.cause)
    if isinstance(error, CacheError):
        return ErrorCategory.CACHE
    if isinstance(error, (requests.Timeout, FutureTimeoutError, TimeoutError)):
        return ErrorCategory.TIMEOUT
    if isinstance(error, requests.HTTPError):
        return ErrorCategory.HTTP
    if isinstance(error, (requests.ConnectionError, ConnectionError)):
        return ErrorCategory.NETWORK
    if isinstance(error, (ValueError, KeyError, TypeError)):
        # json.JSONDecodeError, requests.JSONDecodeError 포함
        return ErrorCategory.DECODE
    if isinstance(error, requests.RequestException):
        return ErrorCategory.NETWORK
    return ErrorCategory.UNKNOWN


@dataclass
class CollectedError:
    """수집된 에러 상세 정보

    Attributes:
        timestamp: 에러 발생 시각
        provider: 프로바이더 이름
        operation: 작업 이름 (예: "fetch_with_cache", "locate")
        error_type: 예외 클래스 이름
        error_message: 에러 메시지
        severity: 에러 심각도
        category: 에러 카테고리
    """

    timestamp: datetime
    provider: str
    operation: str
    error_type: str
    error_message: str
    severity: ErrorSeverity
    category: ErrorCategory

    def __str__(self) -> str:
        return f"[{self.severity.value.upper()}] {self.provider}.{self.operation}: {self.error_type} - {self.error_message}"

    def to_dict(self) -> dict[str, str]:
        """딕셔너리로 변환 (로깅/직렬화용)"""
        return {
            "timestamp": self.timestamp.isoformat(),
            "provider": self.provider,
            "operation": self.operation,
            "error_type": self.error_type,
            "error_message": self.error_message,
            "severity": self.severity.value,
            "category": self.category.value,
        }


class ErrorCollector:
    """스레드 세이프 에러 수집기

    Example:
        collector = ErrorCollector("warm")

        try:
            provider.fetch_with_cache()
        except CDNLookupError as e:
            collector.collect(e, provider.name, "fetch_with_cache")

        if collector.has_errors:
            print(collector.get_summary())
    """

    def __init__(self, scope: str = "cdnlookup"):
        """초기화

        Args:
            scope: 수집 범위 이름 (로그 구분용)
        """
        self.scope = scope
        self._errors: list[CollectedError] = []
        self._lock = threading.Lock()

    def collect(
        self,
        error: BaseException,
        provider: str,
        operation: str,
        severity: ErrorSeverity = ErrorSeverity.WARNING,
    ) -> CollectedError:
        """예외를 수집하고 로깅

        Args:
            error: 발생한 예외
            provider: 프로바이더 이름
            operation: 작업 이름
            severity: 에러 심각도 (기본: WARNING)

        Returns:
            수집된 CollectedError
        """
        message = error.message if isinstance(error, CDNLookupError) else str(error)
        if isinstance(error, CDNLookupError) and error.cause is not None:
            message = f"{message}: {error.cause}"

        collected = CollectedError(
            timestamp=datetime.now(),
            provider=provider,
            operation=operation,
            error_type=type(error).__name__,
            error_message=message,
            severity=severity,
            category=categorize_error(error),
        )

        with self._lock:
            self._errors.append(collected)

        log_msg = f"({self.scope}) {collected}"
        if severity == ErrorSeverity.CRITICAL:
            logger.error(log_msg)
        elif severity == ErrorSeverity.WARNING:
            logger.warning(log_msg)
        elif severity == ErrorSeverity.INFO:
            logger.info(log_msg)
        else:
            logger.debug(log_msg)

        return collected

    @property
    def errors(self) -> list[CollectedError]:
        """수집된 모든 에러의 복사본 반환"""
        with self._lock:
            return list(self._errors)

    @property
    def has_errors(self) -> bool:
        """에러 존재 여부"""
        with self._lock:
            return len(self._errors) > 0

    def get_by_provider(self) -> dict[str, list[CollectedError]]:
        """프로바이더별로 에러를 그룹핑하여 반환"""
        with self._lock:
            result: dict[str, list[CollectedError]] = {}
            for e in self._errors:
                result.setdefault(e.provider, []).append(e)
            return result

    def get_summary(self) -> str:
        """카테고리별 에러 건수를 포함한 요약 문자열 반환

        Returns:
            포맷팅된 요약 문자열 (예: "3 errors (network: 1, timeout: 2)")
        """
        with self._lock:
            if not self._errors:
                return "no errors"

            by_category: dict[str, int] = {}
            for e in self._errors:
                by_category[e.category.value] = by_category.get(e.category.value, 0) + 1

            parts = [f"{k}: {v}" for k, v in sorted(by_category.items())]
            return f"{len(self._errors)} errors ({', '.join(parts)})"

    def clear(self) -> None:
        """수집된 에러 전체 초기화"""
        with self._lock:
            self._errors.clear()
