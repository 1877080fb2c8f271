"""Range index mapping IP address ranges to payloads.

Uses sortedcontainers.SortedDict keyed by range start for O(log n) lookups.
"""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import Iterator
from typing import Any

from sortedcontainers import SortedDict

from ..core.types import Address, IPRange, address_from_text

logger = logging.getLogger(__name__)


class SimpleIPSpace:
    """Disjoint address ranges with payloads, one sorted map per family.

    Each map holds ``start -> (end, value)`` with integer endpoints.

    Invariants:
        - Stored ranges never overlap
        - A mark replaces the payload for every address it covers
        - Adjacent ranges with equal payloads are coalesced
    """

    _FAMILIES = {4: ipaddress.IPv4Address, 6: ipaddress.IPv6Address}

    def __init__(self):
        self._spans: dict[int, SortedDict] = {4: SortedDict(), 6: SortedDict()}

    def mark(self, rng: IPRange, value: Any) -> None:
        """Map every address in rng to value, shadowing earlier marks."""
        spans = self._spans[rng.version]
        lo, hi = int(rng.first), int(rng.last)

        self._cut(spans, lo, hi)
        spans[lo] = (hi, value)
        self._coalesce(spans, lo)

    def _cut(self, spans: SortedDict, lo: int, hi: int) -> None:
        """Remove [lo, hi] from all stored ranges, keeping the remainders."""
        # A range starting before lo may still reach into [lo, hi].
        idx = spans.bisect_right(lo) - 1
        first_key = spans.peekitem(idx)[0] if idx >= 0 else lo
        overlapping = list(spans.irange(first_key, hi))

        for key in overlapping:
            end, old = spans[key]
            if end < lo:
                continue
            del spans[key]
            if key < lo:
                spans[key] = (lo - 1, old)
            if end > hi:
                spans[hi + 1] = (end, old)

    def _coalesce(self, spans: SortedDict, lo: int) -> None:
        """Merge the range at lo with equal-valued neighbours."""
        hi, value = spans[lo]

        idx = spans.index(lo)
        if idx > 0:
            prev_lo, (prev_hi, prev_value) = spans.peekitem(idx - 1)
            if prev_hi + 1 == lo and prev_value == value:
                del spans[lo]
                lo = prev_lo
                spans[lo] = (hi, value)
                idx -= 1

        if idx + 1 < len(spans):
            next_lo, (next_hi, next_value) = spans.peekitem(idx + 1)
            if next_lo == hi + 1 and next_value == value:
                del spans[next_lo]
                spans[lo] = (next_hi, value)

    def find(self, addr: Address | str) -> Any | None:
        """Return the payload covering addr, or None."""
        if isinstance(addr, str):
            addr = address_from_text(addr)
        spans = self._spans[addr.version]
        key = int(addr)

        idx = spans.bisect_right(key) - 1
        if idx < 0:
            return None
        _start, (end, value) = spans.peekitem(idx)
        return value if key <= end else None

    def count(self) -> int:
        """Return the number of distinct ranges stored."""
        return sum(len(spans) for spans in self._spans.values())

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[tuple[IPRange, Any]]:
        """Iterate ranges in address order, IPv4 before IPv6."""
        for version, spans in self._spans.items():
            family = self._FAMILIES[version]
            for lo, (hi, value) in spans.items():
                yield IPRange(family(lo), family(hi)), value

    def clear(self) -> None:
        """Remove all ranges."""
        for spans in self._spans.values():
            spans.clear()
        logger.debug("Cleared range index")
