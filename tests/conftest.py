"""
tests/conftest.py - pytest 공통 픽스처

네트워크 없이 동작하는 가짜 어댑터, 고정 시계, 임시 캐시 디렉토리를 제공합니다.

Usage:
    def test_something(make_provider, clock):
        provider = make_provider("x", ranges=["10.0.0.0/8"])
        clock.advance(3600)
"""

import sys
import threading
import time
from pathlib import Path

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from cdnlookup.cache.store import CacheStore  # noqa: E402
from cdnlookup.config import load_settings  # noqa: E402
from cdnlookup.engine import QueryEngine  # noqa: E402
from cdnlookup.providers.base import Provider  # noqa: E402
from cdnlookup.registry import ProviderRegistry  # noqa: E402

SEVEN_DAYS = 7 * 24 * 3600
NOW = 1_760_000_000.0


# =============================================================================
# 테스트 더블
# =============================================================================


class FakeAdapter:
    """호출 횟수를 기록하는 가짜 어댑터

    Args:
        ranges: fetch()가 반환할 목록
        error: fetch()에서 발생시킬 예외
        delay: 반환 전 대기 시간 (초)
        gate: 설정되면 이 이벤트가 set 될 때까지 대기 (최대 5초)
    """

    def __init__(self, ranges=None, error=None, delay=0.0, gate=None):
        self.ranges = list(ranges or [])
        self.error = error
        self.delay = delay
        self.gate = gate
        self.calls = 0
        self._lock = threading.Lock()

    def fetch(self):
        with self._lock:
            self.calls += 1
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.ranges)


class FakeClock:
    """수동으로 진행시키는 시계"""

    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


# =============================================================================
# 픽스처
# =============================================================================


@pytest.fixture
def cache_dir(tmp_path):
    """임시 캐시 디렉토리 (생성은 CacheStore.write가 수행)"""
    return str(tmp_path / "cache")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_store(cache_dir, clock):
    """임시 디렉토리/고정 시계를 사용하는 CacheStore 팩토리"""

    def _make(name="x"):
        return CacheStore(name, cache_dir=cache_dir, ttl_seconds=SEVEN_DAYS, clock=clock)

    return _make


@pytest.fixture
def write_raw():
    """캐시 파일에 임의의 내용을 직접 기록"""

    def _write(path, payload):
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        Path(path).write_text(payload, encoding="utf-8")

    return _write


@pytest.fixture
def make_provider(make_store):
    """FakeAdapter를 감싼 Provider 팩토리"""

    def _make(name, ranges=None, error=None, delay=0.0, gate=None):
        adapter = FakeAdapter(ranges=ranges, error=error, delay=delay, gate=gate)
        return Provider(name, adapter, make_store(name))

    return _make


@pytest.fixture
def test_settings(cache_dir):
    """짧은 타임아웃의 테스트용 설정"""
    return load_settings(CACHE_DIR=cache_dir, HTTP_TIMEOUT=1.0, QUERY_TIMEOUT=5.0, MAX_WORKERS=0)


@pytest.fixture
def make_engine(test_settings):
    """Provider 목록으로 QueryEngine 생성"""

    def _make(*providers, settings=None):
        registry = ProviderRegistry(providers).freeze()
        return QueryEngine(registry, settings or test_settings)

    return _make


@pytest.fixture
def gate():
    """대기 중인 가짜 어댑터를 테스트 종료 시 해제"""
    event = threading.Event()
    yield event
    event.set()
