"""
cdnlookup - Identify the CDN provider that owns an IP address

Matches an IP against the range lists published by Akamai, Bunny, CacheFly,
Cloudflare, CloudFront, Fastly, G-Core, Google, KeyCDN and QUIC.cloud.
Range lists are cached per provider for 7 days.

Usage:
    import cdnlookup

    cdnlookup.lookup("104.16.1.1")        # "cloudflare" or None
    cdnlookup.fetch("fastly")             # list of ranges (cache or live)
    cdnlookup.warm_all()                  # pre-download every provider

    # Explicit wiring (custom settings, fake providers in tests)
    from cdnlookup import QueryEngine, ProviderRegistry, build_default_registry
    from cdnlookup.config import load_settings

    settings = load_settings(CACHE_DIR="/tmp/cdn")
    engine = QueryEngine(build_default_registry(settings), settings)
    engine.locate("151.101.1.1")
"""

from __future__ import annotations

import threading

from .config import get_version
from .engine import QueryEngine, WarmResult
from .exceptions import (
    CacheError,
    CDNLookupError,
    FetchError,
    InvalidIPError,
    ProviderNotFoundError,
)
from .providers import Provider, RangeAdapter
from .ranges import IPAddress
from .registry import ProviderRegistry, build_default_registry

__version__ = get_version()

_default_engine: QueryEngine | None = None
_default_lock = threading.Lock()


def get_default_engine() -> QueryEngine:
    """Engine over the default registry, built once on first use"""
    global _default_engine

    if _default_engine is None:
        with _default_lock:
            if _default_engine is None:
                _default_engine = QueryEngine(build_default_registry())
    return _default_engine


def lookup(ip: str | IPAddress) -> str | None:
    """Provider name owning ``ip``, or None"""
    return get_default_engine().locate(ip)


def get(name: str) -> Provider:
    """Registered provider by name, raises ProviderNotFoundError"""
    return get_default_engine().get(name)


def fetch(provider: str | Provider) -> list[str]:
    """Cache-or-live range list of one provider, raises FetchError"""
    return get_default_engine().fetch(provider)


def warm_all(force: bool = False) -> WarmResult:
    """Pre-warm every provider cache, ignoring individual failures"""
    return get_default_engine().warm_all(force=force)


__all__ = [
    "__version__",
    # API
    "lookup",
    "get",
    "fetch",
    "warm_all",
    "get_default_engine",
    # Building blocks
    "QueryEngine",
    "WarmResult",
    "ProviderRegistry",
    "build_default_registry",
    "Provider",
    "RangeAdapter",
    # Errors
    "CDNLookupError",
    "ProviderNotFoundError",
    "FetchError",
    "InvalidIPError",
    "CacheError",
]
