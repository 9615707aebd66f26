"""
cdnlookup/registry.py - Provider registry

시작 시 한 번 구성되어 쿼리 엔진에 전달되는 이름 -> Provider 매핑.
``freeze()`` 이후에는 읽기 전용이므로 병렬 조회 중 잠금 없이 읽습니다.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from cdnlookup.cache.store import CacheStore
from cdnlookup.exceptions import ProviderNotFoundError, RegistryFrozenError
from cdnlookup.providers.adapters import PROVIDER_NAMES, create_adapter
from cdnlookup.providers.base import Provider

if TYPE_CHECKING:
    from cdnlookup.config import Settings

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Registry of providers keyed by lowercase name"""

    def __init__(self, providers: Iterable[Provider] = ()):
        self._providers: dict[str, Provider] = {}
        self._frozen = False
        for provider in providers:
            self.register(provider)

    def __repr__(self) -> str:
        return f"ProviderRegistry({list(self._providers)!r}, frozen={self._frozen})"

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._providers

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, provider: Provider) -> Provider:
        """
        Add a provider (startup only).

        Raises:
            RegistryFrozenError: registry already frozen
            ValueError: a provider with the same name is registered
        """
        key = provider.name.lower()
        if self._frozen:
            raise RegistryFrozenError(key)
        if key in self._providers:
            raise ValueError(f"Provider already registered: {key}")
        self._providers[key] = provider
        return provider

    def freeze(self) -> ProviderRegistry:
        self._frozen = True
        return self

    def get(self, name: str) -> Provider:
        """
        Look up a provider by name (case-insensitive).

        Raises:
            ProviderNotFoundError: name is not registered
        """
        try:
            return self._providers[name.lower()]
        except KeyError:
            raise ProviderNotFoundError(name) from None

    def all(self) -> Mapping[str, Provider]:
        """Read-only view of every registered provider"""
        return MappingProxyType(self._providers)

    def names(self) -> list[str]:
        return list(self._providers)


def build_default_registry(settings: Settings | None = None) -> ProviderRegistry:
    """
    Register every known CDN provider and freeze the registry.

    Args:
        settings: Settings to use (None for the global settings)

    Returns:
        Frozen ProviderRegistry
    """
    if settings is None:
        from cdnlookup.config import settings as default_settings

        settings = default_settings

    registry = ProviderRegistry()
    for name in PROVIDER_NAMES:
        adapter = create_adapter(name, timeout=settings.HTTP_TIMEOUT, user_agent=settings.USER_AGENT)
        store = CacheStore(name, cache_dir=settings.CACHE_DIR, ttl_seconds=settings.CACHE_TTL_SECONDS)
        registry.register(Provider(name, adapter, store))

    logger.debug("Registered %d providers (cache dir: %s)", len(registry), settings.CACHE_DIR)
    return registry.freeze()
