"""캐시 경로 유틸리티.

프로바이더별 캐시 파일은 캐시 디렉토리(기본: 사용자 홈) 바로 아래에
``.{provider}.cdn.ip.range`` 이름으로 저장됩니다. 이름에서 경로가
결정적으로 계산되므로 두 프로바이더의 캐시가 충돌하지 않습니다.
"""

import os
import re
from typing import Optional

CACHE_FILE_TEMPLATE = ".{name}.cdn.ip.range"

# 경로 구분자, 상위 디렉토리 참조, NUL
_UNSAFE_NAME = re.compile(r"[/\\\x00]|\.\.")


def get_cache_dir(base_dir: Optional[str] = None) -> str:
    """캐시 디렉토리 경로 반환

    디렉토리를 생성하지 않습니다. 생성은 첫 쓰기 시점에 CacheStore가 수행합니다.

    Args:
        base_dir: 캐시 디렉토리. None이면 settings.CACHE_DIR 사용

    Returns:
        캐시 디렉토리 절대 경로
    """
    if base_dir is None:
        from cdnlookup.config import settings

        base_dir = settings.CACHE_DIR
    return os.path.abspath(os.path.expanduser(base_dir))


def get_cache_path(name: str, base_dir: Optional[str] = None) -> str:
    """프로바이더 캐시 파일 경로 반환

    이름은 소문자로 변환되므로 "Cloudflare"와 "cloudflare"는 같은 파일을 사용합니다.

    Args:
        name: 프로바이더 이름 (예: "cloudflare")
        base_dir: 캐시 디렉토리 (None이면 설정값)

    Returns:
        캐시 파일 절대 경로

    Raises:
        ValueError: 파일명으로 쓸 수 없는 프로바이더 이름

    Example:
        >>> get_cache_path("cloudflare", "/home/user")
        '/home/user/.cloudflare.cdn.ip.range'
    """
    key = name.strip().lower()
    if not key or _UNSAFE_NAME.search(key):
        raise ValueError(f"Invalid provider name for cache file: {name!r}")
    return os.path.join(get_cache_dir(base_dir), CACHE_FILE_TEMPLATE.format(name=key))
