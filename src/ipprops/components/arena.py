"""Append-only memory arena.

Hands out stable, zero-filled byte blocks carved from a growing list of
bytearrays. Uses sortedcontainers.SortedDict to map addresses back to blocks.
"""

from __future__ import annotations

import logging

from sortedcontainers import SortedDict

from ..core.types import TextSpan

logger = logging.getLogger(__name__)


class SimpleArena:
    """Bump allocator over a list of fixed bytearray blocks.

    Args:
        block_size: Minimum size of each block in bytes
        encoding: Encoding used for localized text

    Invariants:
        - Blocks are never resized, so handed-out views never move
        - Every block has a base address; addresses are unique across blocks
        - Allocation is append-only; nothing is freed before the arena
    """

    def __init__(self, block_size: int = 4096, encoding: str = "utf-8"):
        if block_size <= 0:
            raise ValueError(f"Invalid block size: {block_size}")
        self.block_size = block_size
        self.encoding = encoding
        # base address -> block
        self._blocks: SortedDict = SortedDict()
        self._next_base = 0
        self._current: bytearray | None = None
        self._current_base = 0
        self._fill = 0
        self._allocated = 0

    def _new_block(self, size: int) -> None:
        """Start a new block with room for at least size bytes."""
        capacity = max(size, self.block_size)
        block = bytearray(capacity)
        self._blocks[self._next_base] = block
        self._current = block
        self._current_base = self._next_base
        self._fill = 0
        self._next_base += capacity
        logger.debug(f"Arena block of {capacity} bytes at base {self._current_base}")

    def _carve(self, size: int) -> tuple[int, memoryview]:
        if self._current is None or len(self._current) - self._fill < size:
            self._new_block(size)
        start = self._fill
        self._fill += size
        self._allocated += size
        view = memoryview(self._current)[start:start + size]
        return self._current_base + start, view

    def alloc(self, size: int) -> memoryview:
        """Return a zero-filled writable block of exactly size bytes."""
        if size < 0:
            raise ValueError(f"Invalid allocation size: {size}")
        _address, view = self._carve(size)
        return view

    def localize(self, text: str) -> TextSpan:
        """Copy text into arena storage and return a reference to it."""
        data = text.encode(self.encoding)
        address, view = self._carve(len(data))
        view[:] = data
        return TextSpan(address, len(data))

    def view(self, address: int, length: int) -> memoryview:
        """Return the bytes at address previously handed out by the arena."""
        idx = self._blocks.bisect_right(address) - 1
        if idx < 0:
            raise ValueError(f"Address {address} is not in the arena")
        base, block = self._blocks.peekitem(idx)
        start = address - base
        if start + length > len(block):
            raise ValueError(f"Span {address}+{length} crosses a block boundary")
        return memoryview(block)[start:start + length]

    def text(self, span: TextSpan) -> str:
        """Decode text persisted by localize."""
        return bytes(self.view(span.address, span.length)).decode(self.encoding)

    @property
    def allocated(self) -> int:
        """Bytes handed out so far."""
        return self._allocated

    @property
    def reserved(self) -> int:
        """Total capacity of all blocks."""
        return self._next_base

    def __len__(self) -> int:
        """Number of blocks."""
        return len(self._blocks)
