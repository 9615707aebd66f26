"""
cdnlookup/exceptions.py - 통합 예외 계층 구조

CDN 조회 전체에서 사용되는 예외 클래스들을 정의합니다.

예외 계층 구조:
    CDNLookupError (베이스)
    ├── ProviderNotFoundError (등록되지 않은 프로바이더)
    ├── RegistryFrozenError (초기화 이후 등록 시도)
    ├── InvalidIPError (잘못된 IP 입력)
    ├── FetchError (프로바이더 IP 대역 다운로드/파싱 실패)
    └── CacheError (캐시 내부 신호)
        ├── CacheMissError
        ├── CacheCorruptError
        ├── CacheStaleError
        └── CacheWriteError

Cache*Error는 Provider.fetch_with_cache() 내부에서만 사용되며
라이브 fetch 여부를 결정하는 신호일 뿐, 호출자에게 전파되지 않습니다.

Usage:
    from cdnlookup.exceptions import FetchError, ProviderNotFoundError

    try:
        ranges = engine.fetch("cloudflare")
    except ProviderNotFoundError as e:
        print(e.name)
    except FetchError as e:
        print(e.provider, e.cause)
"""

from typing import Any, Dict, List, Optional

# =============================================================================
# 베이스 예외
# =============================================================================


class CDNLookupError(Exception):
    """cdnlookup 기본 예외 클래스

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 레지스트리 관련 예외
# =============================================================================


class ProviderNotFoundError(CDNLookupError):
    """등록되지 않은 프로바이더 이름으로 조회한 경우"""

    def __init__(self, name: str):
        super().__init__(f"CDN provider not found: {name}", details={"provider": name})
        self.name = name


class RegistryFrozenError(CDNLookupError):
    """freeze() 이후 register() 호출"""

    def __init__(self, name: str):
        super().__init__(f"Registry is frozen, cannot register: {name}", details={"provider": name})
        self.name = name


# =============================================================================
# 입력 / 네트워크 관련 예외
# =============================================================================


class InvalidIPError(CDNLookupError, ValueError):
    """IP 주소 파싱 실패"""

    def __init__(self, value: Any, cause: Optional[Exception] = None):
        super().__init__(f"Invalid IP address: {value!r}", cause=cause, details={"value": str(value)})
        self.value = value


class FetchError(CDNLookupError):
    """프로바이더 IP 대역 다운로드 또는 응답 파싱 실패

    requests 예외, HTTP 상태 코드 에러, JSON/HTML 디코딩 에러를 래핑합니다.
    """

    def __init__(
        self,
        provider: str,
        reason: str,
        url: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(f"Failed to fetch {provider} IP ranges ({reason})", cause=cause)
        self.provider = provider
        self.reason = reason
        self.url = url
        self.details.update({"provider": provider, "reason": reason, "url": url})


# =============================================================================
# 캐시 관련 예외
# =============================================================================


class CacheError(CDNLookupError):
    """캐시 관련 예외 베이스

    Attributes:
        provider: 프로바이더 이름
        ranges: 디코딩에 성공한 범위 목록 (신뢰하면 안 됨, 비어 있을 수 있음)
    """

    def __init__(
        self,
        provider: str,
        message: str,
        ranges: Optional[List[str]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(f"[{provider}] {message}", cause=cause, details={"provider": provider})
        self.provider = provider
        self.ranges = ranges or []


class CacheMissError(CacheError):
    """캐시 파일 없음"""

    def __init__(self, provider: str, path: str):
        super().__init__(provider, f"cache not found: {path}")
        self.path = path


class CacheCorruptError(CacheError):
    """캐시 파일 디코딩 실패"""

    def __init__(self, provider: str, reason: str, cause: Optional[Exception] = None):
        super().__init__(provider, f"cache corrupt ({reason})", cause=cause)
        self.reason = reason


class CacheStaleError(CacheError):
    """캐시 유효기간 초과"""

    def __init__(
        self,
        provider: str,
        fetched_at: int,
        age_seconds: float,
        ranges: Optional[List[str]] = None,
    ):
        super().__init__(provider, f"cache expired ({int(age_seconds)}s old)", ranges=ranges)
        self.fetched_at = fetched_at
        self.age_seconds = age_seconds


class CacheWriteError(CacheError):
    """캐시 저장 실패 (I/O 에러 등)"""

    def __init__(self, provider: str, path: str, cause: Optional[Exception] = None):
        super().__init__(provider, f"cache write failed: {path}", cause=cause)
        self.path = path


__all__: List[str] = [
    "CDNLookupError",
    "ProviderNotFoundError",
    "RegistryFrozenError",
    "InvalidIPError",
    "FetchError",
    "CacheError",
    "CacheMissError",
    "CacheCorruptError",
    "CacheStaleError",
    "CacheWriteError",
]
