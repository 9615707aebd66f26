"""
cdnlookup/parallel - 병렬 조회 보조 모듈

프로바이더 fan-out 중 삼켜지는 에러를 수집하는 진단 채널을 제공합니다.

Example:
    from cdnlookup.parallel import ErrorCollector

    collector = ErrorCollector("lookup")
    engine = QueryEngine(registry, error_collector=collector)
"""

from .errors import (
    CollectedError,
    ErrorCategory,
    ErrorCollector,
    ErrorSeverity,
    categorize_error,
)

__all__: list[str] = [
    "CollectedError",
    "ErrorCategory",
    "ErrorCollector",
    "ErrorSeverity",
    "categorize_error",
]
