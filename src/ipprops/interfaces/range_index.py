"""Protocol definition for the range index."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, TypeVar, runtime_checkable

from ..core.types import Address, IPRange

V = TypeVar("V")


@runtime_checkable
class RangeIndex(Protocol[V]):
    """Maps address ranges to payloads with point lookup."""

    def mark(self, rng: IPRange, value: V) -> None:
        """Map every address in rng to value.

        Later marks take precedence over earlier ones for the addresses
        they cover.
        """
        ...

    def find(self, addr: Address) -> V | None:
        """Return the payload covering addr, or None."""
        ...

    def count(self) -> int:
        """Return the number of distinct ranges stored."""
        ...

    def __iter__(self) -> Iterator[tuple[IPRange, V]]:
        """Iterate ranges and payloads in address order."""
        ...
