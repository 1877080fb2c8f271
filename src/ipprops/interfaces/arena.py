"""Protocol definition for the row arena."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..core.types import TextSpan


@runtime_checkable
class Arena(Protocol):
    """Append-only owner of row blocks and persisted text."""

    def alloc(self, size: int) -> memoryview:
        """Return a zero-filled writable block of exactly size bytes.

        The block never moves and stays valid for the arena's lifetime.
        """
        ...

    def localize(self, text: str) -> TextSpan:
        """Copy text into arena storage and return a reference to it."""
        ...

    def view(self, address: int, length: int) -> memoryview:
        """Return the bytes at address previously handed out by the arena."""
        ...

    def text(self, span: TextSpan) -> str:
        """Decode text persisted by localize."""
        ...
