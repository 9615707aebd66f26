"""
cdnlookup/ranges.py - Range entry parsing and membership

CDN이 공개하는 IP 대역 목록은 CIDR 블록("104.16.0.0/13")과
단일 주소("203.0.113.5")가 섞여 있습니다. 항목은 원본 문자열로 보관하고
멤버십 검사 시마다 파싱합니다.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Iterable, Sequence

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

_STRIP_CHARS = " \t\r\n"


def normalize(lines: Iterable[str]) -> list[str]:
    """Trim whitespace and drop empty lines, keeping order"""
    result: list[str] = []
    for line in lines:
        line = line.strip(_STRIP_CHARS)
        if not line:
            continue
        result.append(line)
    return result


def split_lines(text: str, separator: str = "\n") -> list[str]:
    """Split a raw payload on ``separator`` and normalize the pieces"""
    return normalize(text.split(separator))


def parse_ip(value: str | IPAddress) -> IPAddress:
    """
    Parse a target IP.

    Args:
        value: IP string or an ipaddress address object

    Returns:
        IPv4Address or IPv6Address

    Raises:
        InvalidIPError: value is not an IP address
    """
    from .exceptions import InvalidIPError

    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return value
    try:
        return ipaddress.ip_address(str(value).strip())
    except ValueError as e:
        raise InvalidIPError(value, cause=e) from e


def entry_matches(entry: str, ip: IPAddress) -> bool:
    """
    Test whether a range entry covers ``ip``.

    The entry is parsed as a network (host bits allowed, a bare address is a
    single-host network). Entries that do not parse fall back to exact text
    comparison with the canonical form of ``ip``.
    """
    try:
        network = ipaddress.ip_network(entry, strict=False)
    except ValueError:
        return entry == str(ip)
    # different IP versions never match
    return ip in network


def find_match(ranges: Sequence[str], ip: IPAddress) -> str | None:
    """Return the first entry of ``ranges`` covering ``ip``"""
    for entry in ranges:
        if entry_matches(entry, ip):
            return entry
    return None
