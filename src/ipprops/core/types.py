"""Common type definitions for ipprops.

Defines address ranges and arena text references used across all components.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import NamedTuple

from .errors import AddressParseError

# Core primitive types
Address = ipaddress.IPv4Address | ipaddress.IPv6Address


class TextSpan(NamedTuple):
    """Reference to text persisted in an arena."""
    address: int
    length: int


@dataclass(frozen=True)
class IPRange:
    """Contiguous, inclusive interval of addresses of one family.

    Invariants:
        - first and last share an address family
        - first <= last
    """

    first: Address
    last: Address

    def __post_init__(self) -> None:
        if self.first.version != self.last.version:
            raise ValueError(f"Mixed address families in range {self.first}-{self.last}")
        if self.first > self.last:
            raise ValueError(f"Range start {self.first} is after end {self.last}")

    @property
    def version(self) -> int:
        return self.first.version

    def __contains__(self, addr: object) -> bool:
        if isinstance(addr, str):
            addr = address_from_text(addr)
        if not isinstance(addr, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
            return False
        return addr.version == self.version and self.first <= addr <= self.last

    def __str__(self) -> str:
        if self.first == self.last:
            return str(self.first)
        nets = list(ipaddress.summarize_address_range(self.first, self.last))
        if len(nets) == 1:
            return str(nets[0])
        return f"{self.first}-{self.last}"


def address_from_text(text: str) -> Address:
    """Parse a single address, raising AddressParseError if invalid."""
    try:
        return ipaddress.ip_address(text.strip())
    except ValueError as e:
        raise AddressParseError(f"{text!r} is not a valid address") from e


def range_from_text(text: str) -> IPRange | None:
    """Parse an address, CIDR block or ``first-last`` pair.

    Host bits in a CIDR block are tolerated. Returns None for empty or
    malformed text.
    """
    text = text.strip()
    if not text:
        return None

    try:
        if "/" in text:
            net = ipaddress.ip_network(text, strict=False)
            return IPRange(net.network_address, net.broadcast_address)
        if "-" in text:
            lo, _, hi = text.partition("-")
            first = ipaddress.ip_address(lo.strip())
            last = ipaddress.ip_address(hi.strip())
        else:
            first = last = ipaddress.ip_address(text)
    except ValueError:
        return None

    if first.version != last.version or first > last:
        return None
    return IPRange(first, last)
