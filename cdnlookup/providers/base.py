"""
cdnlookup/providers/base.py - Provider adapter contract and cached fetch

프로바이더는 어댑터(네트워크 조회, 벤더 형식) 1개와 캐시 저장소 1개로 구성됩니다.
캐시 정책은 ``Provider`` 한 곳에만 있고, 어댑터는 ``fetch()``만 구현합니다.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from cdnlookup.cache.store import CacheStore
from cdnlookup.exceptions import CacheError, CacheWriteError, FetchError
from cdnlookup.ranges import normalize

logger = logging.getLogger(__name__)


@runtime_checkable
class RangeAdapter(Protocol):
    """Fetches the raw range list of one provider.

    Implementations raise ``FetchError`` on network or decode failure.
    """

    def fetch(self) -> list[str]: ...


class Provider:
    """
    Cached fetch decorator around a ``RangeAdapter``.

    Policy:
        1. A fresh, non-empty cache snapshot is returned without a network call.
        2. Otherwise exactly one live fetch runs. Failures propagate; expired
           data is never served as a fallback.
        3. A non-empty live result is written back. Write failures are logged
           and the live data is still returned.

    Args:
        name: Unique provider name (registry key, cache file key)
        adapter: Live fetch implementation
        store: Cache store for this provider (defaults to one keyed by ``name``)
    """

    def __init__(self, name: str, adapter: RangeAdapter, store: CacheStore | None = None):
        self._name = name
        self.adapter = adapter
        self.store = store if store is not None else CacheStore(name)

    def __repr__(self) -> str:
        return f"Provider(name={self._name!r}, adapter={type(self.adapter).__name__})"

    @property
    def name(self) -> str:
        return self._name

    def fetch_live(self) -> list[str]:
        """Fetch from the network, bypassing the cache"""
        try:
            return normalize(self.adapter.fetch())
        except FetchError:
            raise
        except Exception as e:
            # adapters outside this package may not wrap their errors or return strings
            raise FetchError(self._name, type(e).__name__, cause=e) from e

    def fetch_with_cache(self) -> list[str]:
        """
        Return cached ranges if fresh, otherwise fetch and cache.

        Raises:
            FetchError: cache unusable and the live fetch failed
        """
        try:
            snapshot = self.store.read()
        except CacheError as e:
            logger.debug("%s: cache unusable (%s), fetching live", self._name, e)
        else:
            if snapshot.ranges:
                return list(snapshot.ranges)
            logger.debug("%s: cache empty, fetching live", self._name)

        ranges = self.fetch_live()
        if ranges:
            try:
                self.store.write(ranges)
            except CacheWriteError as e:
                logger.warning("%s: %s", self._name, e)
        else:
            logger.debug("%s: live fetch returned no ranges, not caching", self._name)
        return ranges
