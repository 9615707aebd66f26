"""
cdnlookup/cache - 프로바이더별 IP 대역 캐시

구조:
    ~/ (또는 CDNLOOKUP_CACHE_DIR)
    ├── .akamai.cdn.ip.range
    ├── .cloudflare.cdn.ip.range
    ├── .fastly.cdn.ip.range
    └── ...

사용법:
    from cdnlookup.cache import CacheStore, get_cache_path

    store = CacheStore("cloudflare")
    snapshot = store.read()      # CacheMissError / CacheCorruptError / CacheStaleError
    store.write(["104.16.0.0/13"])
"""

__all__ = [
    "CacheSnapshot",
    "CacheStatus",
    "CacheStore",
    "get_cache_dir",
    "get_cache_path",
]


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in ("get_cache_dir", "get_cache_path"):
        from . import path

        return getattr(path, name)
    if name in ("CacheSnapshot", "CacheStatus", "CacheStore"):
        from . import store

        return getattr(store, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
