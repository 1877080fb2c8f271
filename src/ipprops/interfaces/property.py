"""Protocol definition for table columns."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..core.types import TextSpan


@runtime_checkable
class ColumnProperty(Protocol):
    """Description and codec of one column of row data."""

    name: str

    @property
    def size(self) -> int:
        """Bytes contributed to every row."""
        ...

    @property
    def index(self) -> int:
        """Column index in the table."""
        ...

    @property
    def offset(self) -> int:
        """Byte offset of this column inside a row."""
        ...

    @property
    def needs_localized_token(self) -> bool:
        """Whether the token must be copied into the arena before parse."""
        ...

    def parse(self, token: str | TextSpan, span: memoryview) -> bool:
        """Encode token into span (exactly size bytes).

        Returns False if token is not valid for this column.
        """
        ...
