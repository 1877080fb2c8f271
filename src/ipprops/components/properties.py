"""Column property types.

Each property owns the parse rule and binary encoding of one column. A table
assigns every property an index and a byte offset into its fixed-size rows.
"""

from __future__ import annotations

import logging
import struct
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from ..core.errors import ColumnNotBoundError, SchemaError, VocabularyOverflowError
from ..core.types import TextSpan

if TYPE_CHECKING:
    from ..core.table import Row

logger = logging.getLogger(__name__)


class Property(ABC):
    """Description of data for an address; one column of the table.

    Args:
        name: Property name, informational only

    Invariants:
        - size is positive and fixed at construction
        - index and offset are assigned once, by the owning table
    """

    #: Whether the token must be copied into table storage before parse.
    needs_localized_token: bool = False

    def __init__(self, name: str):
        self.name = name
        self._index: int | None = None
        self._offset: int | None = None

    @property
    @abstractmethod
    def size(self) -> int:
        """Bytes needed for one instance of the property value."""
        ...

    @property
    def index(self) -> int:
        """Column index in the table."""
        if self._index is None:
            raise ColumnNotBoundError(f"Column {self.name!r} has not been added to a table")
        return self._index

    @property
    def offset(self) -> int:
        """Row data offset in bytes."""
        if self._offset is None:
            raise ColumnNotBoundError(f"Column {self.name!r} has not been added to a table")
        return self._offset

    @property
    def is_bound(self) -> bool:
        return self._index is not None

    def assign_index(self, index: int) -> Property:
        if self._index is not None:
            raise SchemaError(f"Column {self.name!r} already has index {self._index}")
        self._index = index
        return self

    def assign_offset(self, offset: int) -> Property:
        if self._offset is not None:
            raise SchemaError(f"Column {self.name!r} already has offset {self._offset}")
        self._offset = offset
        return self

    @abstractmethod
    def parse(self, token: str | TextSpan, span: memoryview) -> bool:
        """Parse token into span.

        Args:
            token: Value from the input for this property
            span: Row storage for this property, exactly size bytes

        Returns:
            True if token was parsed, False if it is invalid for the column
        """
        ...

    @abstractmethod
    def value(self, row: Row) -> Any:
        """Decode this column from row."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class FlagProperty(Property):
    """Single boolean flag."""

    SIZE = 1
    TRUE_TOKENS = frozenset({"1", "t", "true", "y", "yes", "on"})
    FALSE_TOKENS = frozenset({"0", "f", "false", "n", "no", "off"})

    @property
    def size(self) -> int:
        return self.SIZE

    def parse(self, token: str | TextSpan, span: memoryview) -> bool:
        if not isinstance(token, str):
            return False
        word = token.strip().lower()
        if word in self.TRUE_TOKENS:
            span[0] = 1
        elif word in self.FALSE_TOKENS:
            span[0] = 0
        else:
            return False
        return True

    def value(self, row: Row) -> bool:
        return row.span_for(self)[0] != 0


class FlagGroupProperty(Property):
    """Fixed set of named flags stored as a bit mask.

    Args:
        name: Property name
        tags: Flag names; the position of a name is its bit index
        separator: Separator between names in a token
        no_flags_marker: Token meaning no flags are set

    Invariants:
        - Name matching is case-insensitive
        - Bit j lives in byte j // 8 at position j % 8
    """

    def __init__(self, name: str, tags: Iterable[str], separator: str = ";", no_flags_marker: str = "-"):
        super().__init__(name)
        self._tags: tuple[str, ...] = tuple(tags)
        self._lookup: dict[str, int] = {}
        for j, tag in enumerate(self._tags):
            self._lookup.setdefault(tag.lower(), j)
        self.separator = separator
        self.no_flags_marker = no_flags_marker

    @property
    def size(self) -> int:
        return max(1, (len(self._tags) + 7) // 8)

    @property
    def tags(self) -> tuple[str, ...]:
        return self._tags

    def parse(self, token: str | TextSpan, span: memoryview) -> bool:
        if not isinstance(token, str):
            return False
        if token == self.no_flags_marker:
            return True
        span[:] = bytes(len(span))
        if not token:
            return True

        for tag in token.split(self.separator):
            tag = tag.strip()
            if not tag:
                continue
            j = self._lookup.get(tag.lower())
            if j is None:
                # Bits set so far are kept.
                logger.debug(f'Tag "{tag}" is not recognized by {self.name!r}')
                return False
            span[j // 8] |= 1 << (j % 8)
        return True

    def is_set(self, idx: int, row: Row) -> bool:
        """Return whether flag idx is set in row."""
        if not 0 <= idx < len(self._tags):
            raise IndexError(f"Flag index {idx} out of range for {self.name!r}")
        span = row.span_for(self)
        return bool((span[idx // 8] >> (idx % 8)) & 1)

    def flags(self, row: Row) -> list[str]:
        """Names of the flags set in row, in vocabulary order."""
        return [tag for j, tag in enumerate(self._tags) if self.is_set(j, row)]

    def value(self, row: Row) -> list[str]:
        return self.flags(row)


class TagProperty(Property):
    """Enumeration whose values are collected from the input.

    The first occurrence of a value (case-insensitive) appends it to the
    vocabulary; the stored byte is its position.

    A value past MAX_TAGS raises VocabularyOverflowError and leaves the byte
    at zero, which reads back as the first tag. Rows with that diagnostic in
    Table.diagnostics do not hold a real value for this column.
    """

    SIZE = 1
    MAX_TAGS = 1 << (8 * SIZE)

    def __init__(self, name: str):
        super().__init__(name)
        self._tags: list[str] = []
        self._lookup: dict[str, int] = {}

    @property
    def size(self) -> int:
        return self.SIZE

    @property
    def tags(self) -> tuple[str, ...]:
        """Vocabulary in first-seen order."""
        return tuple(self._tags)

    def parse(self, token: str | TextSpan, span: memoryview) -> bool:
        if not isinstance(token, str):
            return False
        key = token.lower()
        idx = self._lookup.get(key)
        if idx is None:
            if len(self._tags) >= self.MAX_TAGS:
                raise VocabularyOverflowError(
                    token, reason=f"Column {self.name!r} is limited to {self.MAX_TAGS} values."
                )
            idx = len(self._tags)
            self._tags.append(token)
            self._lookup[key] = idx
        span[0] = idx
        return True

    def value(self, row: Row) -> str | None:
        idx = row.span_for(self)[0]
        return self._tags[idx] if idx < len(self._tags) else None


class StringProperty(Property):
    """Free text; the row stores a reference to text persisted in the arena."""

    # [address (8B)] [length (4B)]
    FORMAT = "<QI"
    SIZE = struct.calcsize(FORMAT)
    needs_localized_token = True

    @property
    def size(self) -> int:
        return self.SIZE

    def parse(self, token: str | TextSpan, span: memoryview) -> bool:
        if not isinstance(token, TextSpan):
            return False
        struct.pack_into(self.FORMAT, span, 0, token.address, token.length)
        return True

    def value(self, row: Row) -> str:
        address, length = struct.unpack_from(self.FORMAT, row.span_for(self))
        return row.arena.text(TextSpan(address, length))
