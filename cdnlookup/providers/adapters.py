"""
cdnlookup/providers/adapters.py - CDN Provider IP Range Adapters

벤더 엔드포인트에 HTTP 요청 1회를 보내고 응답 형식을
범위 문자열 목록으로 변환합니다:
- Plain text (Bunny, CacheFly, Cloudflare, QUIC.cloud)
- JSON 필드 (CloudFront, Fastly, G-Core, Google, KeyCDN)
- HTML 코드 블록 (Akamai)

출력은 공백만 정리하며, CIDR 파싱은 매칭 시점에 수행합니다.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import requests
from bs4 import BeautifulSoup

from cdnlookup.exceptions import FetchError
from cdnlookup.ranges import normalize, split_lines

logger = logging.getLogger(__name__)

# =============================================================================
# Provider names
# =============================================================================

AKAMAI = "akamai"
BUNNY = "bunny"
CACHEFLY = "cachefly"
CLOUDFLARE = "cloudflare"
CLOUDFRONT = "cloudfront"
FASTLY = "fastly"
GCORE = "gcore"
GOOGLE = "google"
KEY = "key"
QUIC = "quic"


# =============================================================================
# Base adapters
# =============================================================================


class HTTPRangeAdapter(ABC):
    """
    Fetch one URL and parse the response.

    Args:
        name: Provider name (used in errors)
        url: Endpoint URL
        timeout: Request timeout in seconds (None for settings.HTTP_TIMEOUT)
        user_agent: User-Agent header (None for settings.USER_AGENT)
    """

    def __init__(
        self,
        name: str,
        url: str,
        timeout: float | None = None,
        user_agent: str | None = None,
    ):
        if timeout is None or user_agent is None:
            from cdnlookup.config import settings

            timeout = settings.HTTP_TIMEOUT if timeout is None else timeout
            user_agent = settings.USER_AGENT if user_agent is None else user_agent
        self.name = name
        self.url = url
        self.timeout = timeout
        self.user_agent = user_agent

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, url={self.url!r})"

    def _get(self) -> requests.Response:
        try:
            response = requests.get(
                self.url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(self.name, type(e).__name__, url=self.url, cause=e) from e
        return response

    @abstractmethod
    def parse(self, response: requests.Response) -> list[str]:
        """Turn the HTTP response into a list of range strings"""

    def fetch(self) -> list[str]:
        """Download and parse the provider's range list"""
        response = self._get()
        try:
            ranges = self.parse(response)
        except FetchError:
            raise
        except (ValueError, KeyError, TypeError) as e:
            raise FetchError(self.name, "invalid response", url=self.url, cause=e) from e
        logger.debug("Fetched %d ranges for %s", len(ranges), self.name)
        return ranges


class PlainTextAdapter(HTTPRangeAdapter):
    """Text body, one range per ``separator``"""

    def __init__(self, name: str, url: str, separator: str = "\n", **kwargs: Any):
        super().__init__(name, url, **kwargs)
        self.separator = separator

    def parse(self, response: requests.Response) -> list[str]:
        return split_lines(response.text, self.separator)


class JSONFieldAdapter(HTTPRangeAdapter):
    """
    JSON object with the ranges under ``field``.

    ``item_key`` handles lists of objects (e.g. Google's
    ``{"prefixes": [{"ipv4Prefix": ...}]}``); objects without the key are skipped.
    """

    def __init__(self, name: str, url: str, field: str, item_key: str | None = None, **kwargs: Any):
        super().__init__(name, url, **kwargs)
        self.field = field
        self.item_key = item_key

    def parse(self, response: requests.Response) -> list[str]:
        data = response.json()
        if not isinstance(data, dict):
            raise TypeError(f"expected JSON object, got {type(data).__name__}")

        items = data.get(self.field)
        if not isinstance(items, list):
            raise KeyError(self.field)

        values: list[str] = []
        for item in items:
            if self.item_key is not None:
                if not isinstance(item, dict) or self.item_key not in item:
                    continue
                item = item[self.item_key]
            if not isinstance(item, str):
                raise TypeError(f"non-string entry in '{self.field}': {item!r}")
            values.append(item)
        return normalize(values)


class HTMLCodeBlockAdapter(HTTPRangeAdapter):
    """Ranges listed in the ``index``-th element matching a CSS selector"""

    def __init__(self, name: str, url: str, selector: str, index: int = 0, **kwargs: Any):
        super().__init__(name, url, **kwargs)
        self.selector = selector
        self.index = index

    def parse(self, response: requests.Response) -> list[str]:
        soup = BeautifulSoup(response.text, "html.parser")
        blocks = soup.select(self.selector)
        if len(blocks) <= self.index:
            raise ValueError(f"no element matches {self.selector!r} at index {self.index}")
        return split_lines(blocks[self.index].get_text(), "\n")


# =============================================================================
# Known providers
# =============================================================================

AdapterFactory = Callable[..., HTTPRangeAdapter]

ADAPTER_FACTORIES: dict[str, AdapterFactory] = {
    AKAMAI: lambda **kw: HTMLCodeBlockAdapter(
        AKAMAI,
        "https://techdocs.akamai.com/origin-ip-acl/docs/update-your-origin-server",
        selector=".rdmd-code",
        **kw,
    ),
    BUNNY: lambda **kw: PlainTextAdapter(BUNNY, "https://api.bunny.net/system/edgeserverlist/plain", **kw),
    CACHEFLY: lambda **kw: PlainTextAdapter(CACHEFLY, "https://cachefly.cachefly.net/ips/cdn.txt", **kw),
    CLOUDFLARE: lambda **kw: PlainTextAdapter(CLOUDFLARE, "https://www.cloudflare.com/ips-v4", **kw),
    CLOUDFRONT: lambda **kw: JSONFieldAdapter(
        CLOUDFRONT,
        "https://d7uri8nf7uskq.cloudfront.net/tools/list-cloudfront-ips",
        field="CLOUDFRONT_GLOBAL_IP_LIST",
        **kw,
    ),
    FASTLY: lambda **kw: JSONFieldAdapter(FASTLY, "https://api.fastly.com/public-ip-list", field="addresses", **kw),
    GCORE: lambda **kw: JSONFieldAdapter(GCORE, "https://api.gcore.com/cdn/public-ip-list", field="addresses", **kw),
    GOOGLE: lambda **kw: JSONFieldAdapter(
        GOOGLE,
        "https://www.gstatic.com/ipranges/cloud.json",
        field="prefixes",
        item_key="ipv4Prefix",
        **kw,
    ),
    KEY: lambda **kw: JSONFieldAdapter(KEY, "https://www.keycdn.com/shield-prefixes.json", field="prefixes", **kw),
    QUIC: lambda **kw: PlainTextAdapter(QUIC, "https://quic.cloud/ips", separator="<br />", **kw),
}

PROVIDER_NAMES: tuple[str, ...] = tuple(ADAPTER_FACTORIES)


def create_adapter(name: str, timeout: float | None = None, user_agent: str | None = None) -> HTTPRangeAdapter:
    """
    Build the adapter for a known provider.

    Raises:
        ProviderNotFoundError: unknown provider name
    """
    from cdnlookup.exceptions import ProviderNotFoundError

    factory = ADAPTER_FACTORIES.get(name.lower())
    if factory is None:
        raise ProviderNotFoundError(name)
    return factory(timeout=timeout, user_agent=user_agent)
