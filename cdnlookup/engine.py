"""
cdnlookup/engine.py - Concurrent multi-provider membership query

등록된 프로바이더마다 작업 1개씩 병렬로 실행하여
IP를 포함하는 첫 번째 프로바이더를 반환합니다.

Features:
- 먼저 매칭된 프로바이더가 승리 (같은 대역을 공개한 프로바이더 간 우선순위 없음)
- fetch 실패는 "매칭 없음"으로 처리, 에러는 ErrorCollector에만 기록
- 모든 작업이 끝나거나 쿼리 타임아웃이 지나야 "프로바이더 없음"을 반환
- 결과가 정해지면 풀을 기다리지 않고 종료 (실행 중인 작업의 결과는 버림)
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cdnlookup.exceptions import InvalidIPError
from cdnlookup.parallel.errors import ErrorCollector, ErrorSeverity
from cdnlookup.providers.base import Provider
from cdnlookup.ranges import IPAddress, find_match, parse_ip

if TYPE_CHECKING:
    from cdnlookup.config import Settings
    from cdnlookup.registry import ProviderRegistry

logger = logging.getLogger(__name__)


@dataclass
class WarmResult:
    """Result of pre-warming every provider cache"""

    success: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class QueryEngine:
    """
    Lookup engine over an injected provider registry.

    Args:
        registry: Providers to query (read-only during queries)
        settings: Timeouts and worker count (None for the global settings)
        error_collector: Diagnostic sink for swallowed provider failures
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        settings: Settings | None = None,
        error_collector: ErrorCollector | None = None,
    ):
        if settings is None:
            from cdnlookup.config import settings as default_settings

            settings = default_settings
        self._registry = registry
        self._settings = settings
        self._errors = error_collector or ErrorCollector("engine")

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def errors(self) -> ErrorCollector:
        return self._errors

    def _max_workers(self, task_count: int) -> int:
        configured = self._settings.MAX_WORKERS
        return max(1, min(configured, task_count) if configured > 0 else task_count)

    # =========================================================================
    # Single provider operations
    # =========================================================================

    def get(self, name: str) -> Provider:
        """Registry lookup, raises ProviderNotFoundError"""
        return self._registry.get(name)

    def fetch(self, provider: str | Provider) -> list[str]:
        """
        Cache-or-live fetch for one provider.

        Raises:
            ProviderNotFoundError: unknown provider name
            FetchError: cache unusable and the live fetch failed
        """
        if isinstance(provider, str):
            provider = self._registry.get(provider)
        return provider.fetch_with_cache()

    # =========================================================================
    # Fan-out
    # =========================================================================

    def _match_provider(self, provider: Provider, ip: IPAddress) -> str | None:
        try:
            ranges = provider.fetch_with_cache()
        except Exception as e:
            # one failing provider must not fail the lookup
            self._errors.collect(e, provider.name, "fetch_with_cache", ErrorSeverity.DEBUG)
            return None

        entry = find_match(ranges, ip)
        if entry is None:
            return None
        logger.debug("%s matched %s via %s", ip, provider.name, entry)
        return provider.name

    def locate(self, ip: str | IPAddress, timeout: float | None = None) -> str | None:
        """
        Find the CDN provider owning ``ip``.

        Args:
            ip: Target IP address (string or ipaddress object)
            timeout: Max seconds to wait (None for settings.QUERY_TIMEOUT,
                0 or less for no limit)

        Returns:
            Provider name, or None if no provider matched, the IP is invalid
            or the query timed out. Never raises.
        """
        try:
            target = parse_ip(ip)
        except InvalidIPError as e:
            logger.warning("%s", e)
            return None

        providers = list(self._registry.all().values())
        if not providers:
            return None

        if timeout is None:
            timeout = self._settings.QUERY_TIMEOUT
        wait_for = timeout if timeout and timeout > 0 else None

        executor = ThreadPoolExecutor(
            max_workers=self._max_workers(len(providers)),
            thread_name_prefix="cdnlookup",
        )
        futures: dict[Future[str | None], Provider] = {}
        try:
            for provider in providers:
                futures[executor.submit(self._match_provider, provider, target)] = provider

            try:
                for future in as_completed(futures, timeout=wait_for):
                    name = future.result()
                    if name is not None:
                        return name
            except FutureTimeoutError as e:
                pending = [p.name for f, p in futures.items() if not f.done()]
                logger.warning("Lookup of %s timed out after %ss (pending: %s)", target, wait_for, ", ".join(pending))
                for name in pending:
                    self._errors.collect(e, name, "locate", ErrorSeverity.DEBUG)
            return None
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def warm_all(self, force: bool = False) -> WarmResult:
        """
        Cache-or-live fetch for every provider, ignoring failures.

        Args:
            force: Delete existing caches first so every provider is re-downloaded

        Returns:
            WarmResult with succeeded/failed provider names and range counts
        """
        result = WarmResult()
        providers = list(self._registry.all().values())
        if not providers:
            return result

        if force:
            for provider in providers:
                provider.store.clear()

        with ThreadPoolExecutor(max_workers=self._max_workers(len(providers))) as executor:
            futures = {executor.submit(p.fetch_with_cache): p for p in providers}
            for future in as_completed(futures):
                provider = futures[future]
                try:
                    ranges = future.result()
                except Exception as e:
                    # one failing provider must not abort the warm-up
                    self._errors.collect(e, provider.name, "warm_all", ErrorSeverity.INFO)
                    result.failed.append(provider.name)
                    continue
                result.success.append(provider.name)
                result.counts[provider.name] = len(ranges)

        result.success.sort()
        result.failed.sort()
        return result
