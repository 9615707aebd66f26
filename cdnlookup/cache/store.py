"""프로바이더별 IP 대역 캐시 저장소.

프로바이더 하나당 JSON 파일 하나에 마지막으로 받아온 IP 대역 목록을 저장합니다.

파일 형식::

    {
     "timestamp": 1760000000,
     "ip_ranges": ["104.16.0.0/13", "..."]
    }

``timestamp`` 기준으로 유효기간(기본 7일)을 판단합니다. 파일 mtime은 사용하지 않습니다.
경계값: ``now - timestamp == ttl`` 이면 유효, 1초라도 넘으면 만료입니다.

Example:
    ::

        store = CacheStore("cloudflare")
        try:
            ranges = store.read().ranges
        except CacheError:
            ranges = fetch_live()
            store.write(ranges)
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from cdnlookup.exceptions import (
    CacheCorruptError,
    CacheError,
    CacheMissError,
    CacheStaleError,
    CacheWriteError,
)

from .path import get_cache_path

logger = logging.getLogger(__name__)

TIMESTAMP_KEY = "timestamp"
RANGES_KEY = "ip_ranges"


@dataclass(frozen=True)
class CacheSnapshot:
    """캐시된 IP 대역 스냅샷

    Attributes:
        fetched_at: 저장 시각 (epoch 초)
        ranges: 정규화된 범위 문자열 목록 (원래 순서 유지)
    """

    fetched_at: int
    ranges: list[str] = field(default_factory=list)

    def age(self, now: float) -> float:
        """스냅샷 나이 (초)"""
        return now - self.fetched_at

    def to_dict(self) -> dict:
        return {TIMESTAMP_KEY: self.fetched_at, RANGES_KEY: list(self.ranges)}


@dataclass
class CacheStatus:
    """캐시 상태 요약 (CLI ``cache status`` 용)"""

    provider: str
    path: str
    cached: bool
    valid: bool = False
    count: int = 0
    fetched_at: int | None = None
    age_seconds: float | None = None
    error: str | None = None

    @property
    def fetched_time(self) -> str:
        """저장 시각 문자열 (YYYY-MM-DD HH:MM)"""
        if self.fetched_at is None:
            return ""
        return datetime.fromtimestamp(self.fetched_at).strftime("%Y-%m-%d %H:%M")


def _decode(provider: str, raw: str) -> CacheSnapshot:
    """JSON 문자열을 CacheSnapshot으로 디코딩

    Raises:
        CacheCorruptError: JSON 파싱 실패 또는 필드 형식 오류.
            디코딩 가능한 문자열 항목은 ``ranges`` 속성에 담깁니다.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CacheCorruptError(provider, "invalid json", cause=e) from e

    if not isinstance(data, dict):
        raise CacheCorruptError(provider, f"expected object, got {type(data).__name__}")

    raw_ranges = data.get(RANGES_KEY)
    if not isinstance(raw_ranges, list):
        raise CacheCorruptError(provider, f"missing or invalid '{RANGES_KEY}'")
    ranges = [r for r in raw_ranges if isinstance(r, str)]

    timestamp = data.get(TIMESTAMP_KEY)
    # bool은 int의 하위 클래스
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        err = CacheCorruptError(provider, f"missing or invalid '{TIMESTAMP_KEY}'")
        err.ranges = ranges
        raise err

    if len(ranges) != len(raw_ranges):
        err = CacheCorruptError(provider, "non-string range entries")
        err.ranges = ranges
        raise err

    return CacheSnapshot(fetched_at=timestamp, ranges=ranges)


class CacheStore:
    """프로바이더 1개의 캐시 파일 읽기/쓰기

    모든 파일 시스템 I/O는 이 클래스에서만 수행됩니다.

    Args:
        provider: 프로바이더 이름 (파일 경로 결정에 사용)
        cache_dir: 캐시 디렉토리 (None이면 settings.CACHE_DIR)
        ttl_seconds: 유효기간 (None이면 settings.CACHE_TTL_SECONDS)
        clock: 현재 시각 함수 (테스트용 주입)
    """

    def __init__(
        self,
        provider: str,
        cache_dir: str | None = None,
        ttl_seconds: int | None = None,
        clock: Callable[[], float] = time.time,
    ):
        if ttl_seconds is None:
            from cdnlookup.config import settings

            ttl_seconds = settings.CACHE_TTL_SECONDS
        self.provider = provider
        self.ttl_seconds = ttl_seconds
        self._path = get_cache_path(provider, cache_dir)
        self._clock = clock

    def __repr__(self) -> str:
        return f"CacheStore(provider={self.provider!r}, path={self._path!r})"

    @property
    def path(self) -> str:
        return self._path

    def exists(self) -> bool:
        return os.path.isfile(self._path)

    def read(self) -> CacheSnapshot:
        """캐시 스냅샷 로드

        Returns:
            유효기간 이내의 CacheSnapshot

        Raises:
            CacheMissError: 캐시 파일 없음
            CacheCorruptError: 디코딩 실패
            CacheStaleError: 유효기간 초과 (``ranges``에 만료된 데이터 포함)
        """
        try:
            with open(self._path, encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError as e:
            raise CacheMissError(self.provider, self._path) from e
        except (OSError, UnicodeDecodeError) as e:
            raise CacheCorruptError(self.provider, "unreadable file", cause=e) from e

        snapshot = _decode(self.provider, raw)

        age = snapshot.age(self._clock())
        if age > self.ttl_seconds:
            raise CacheStaleError(self.provider, snapshot.fetched_at, age, ranges=snapshot.ranges)

        return snapshot

    def write(self, ranges: Sequence[str]) -> CacheSnapshot:
        """현재 시각으로 스냅샷 저장 (기존 파일 덮어쓰기)

        임시 파일에 쓴 뒤 os.replace로 교체하므로 동시 읽기가
        절반만 쓰인 파일을 보는 일이 없습니다.

        Raises:
            CacheWriteError: 디렉토리 생성/파일 쓰기 실패
        """
        snapshot = CacheSnapshot(fetched_at=int(self._clock()), ranges=list(ranges))
        directory = os.path.dirname(self._path)
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{self.provider}.", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f, indent=1, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError as cleanup_error:
                    logger.debug("Failed to remove temp cache file %s: %s", tmp_path, cleanup_error)
            raise CacheWriteError(self.provider, self._path, cause=e) from e

        logger.debug("Cached %d ranges for %s at %s", len(snapshot.ranges), self.provider, self._path)
        return snapshot

    def clear(self) -> bool:
        """캐시 파일 삭제

        Returns:
            삭제했으면 True, 파일이 없었으면 False
        """
        try:
            os.remove(self._path)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("Cache delete failed for %s: %s", self.provider, e)
            return False
        return True

    def status(self) -> CacheStatus:
        """캐시 상태 조회 (만료/손상도 예외 없이 보고)"""
        status = CacheStatus(provider=self.provider, path=self._path, cached=False)
        try:
            snapshot = self.read()
        except CacheMissError:
            return status
        except CacheStaleError as e:
            status.cached = True
            status.count = len(e.ranges)
            status.age_seconds = e.age_seconds
            status.fetched_at = e.fetched_at
            status.error = "expired"
            return status
        except CacheError as e:
            status.cached = True
            status.count = len(e.ranges)
            status.error = e.message
            return status

        status.cached = True
        status.valid = True
        status.count = len(snapshot.ranges)
        status.fetched_at = snapshot.fetched_at
        status.age_seconds = snapshot.age(self._clock())
        return status
