"""
cdnlookup/providers - CDN 프로바이더 어댑터 및 캐시 조회

Usage:
    from cdnlookup.providers import Provider, create_adapter, CLOUDFLARE

    provider = Provider(CLOUDFLARE, create_adapter(CLOUDFLARE))
    ranges = provider.fetch_with_cache()
"""

from .adapters import (
    AKAMAI,
    BUNNY,
    CACHEFLY,
    CLOUDFLARE,
    CLOUDFRONT,
    FASTLY,
    GCORE,
    GOOGLE,
    KEY,
    PROVIDER_NAMES,
    QUIC,
    HTMLCodeBlockAdapter,
    HTTPRangeAdapter,
    JSONFieldAdapter,
    PlainTextAdapter,
    create_adapter,
)
from .base import Provider, RangeAdapter

__all__ = [
    # Contract / decorator
    "Provider",
    "RangeAdapter",
    # Adapters
    "HTTPRangeAdapter",
    "PlainTextAdapter",
    "JSONFieldAdapter",
    "HTMLCodeBlockAdapter",
    "create_adapter",
    # Names
    "PROVIDER_NAMES",
    "AKAMAI",
    "BUNNY",
    "CACHEFLY",
    "CLOUDFLARE",
    "CLOUDFRONT",
    "FASTLY",
    "GCORE",
    "GOOGLE",
    "KEY",
    "QUIC",
]
