"""Property table - main public API.

Orchestrates the schema, the token scanner, the row arena and the range index.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from .config import TableConfig
from .errors import ColumnParseError, IPPropsError, RangeParseError, SchemaError
from .types import Address, IPRange, address_from_text, range_from_text
from ..components.arena import SimpleArena
from ..components.ipspace import SimpleIPSpace
from ..components.scanner import TokenScanner

if TYPE_CHECKING:
    from ..components.properties import Property
    from ..interfaces.arena import Arena
    from ..interfaces.range_index import RangeIndex

logger = logging.getLogger(__name__)


class Row:
    """View of one row's bytes in the table arena.

    Rows compare by identity; equal bytes do not make equal rows.
    """

    __slots__ = ("_data", "arena")

    def __init__(self, data: memoryview, arena: Arena):
        self._data = data
        self.arena = arena

    def span_for(self, prop: Property) -> memoryview:
        """Return the bytes of row data for prop."""
        return self._data[prop.offset:prop.offset + prop.size]

    @property
    def size(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __repr__(self) -> str:
        return f"Row({bytes(self._data).hex()})"


class Table:
    """Table of properties with rows labeled by IP address ranges.

    Args:
        config: Input format and arena configuration
        space: Range index to hold the rows; a SimpleIPSpace by default
        arena: Storage for rows and localized tokens; a SimpleArena by default

    Public API:
        - add_column(prop): Append a column to the schema
        - parse(src): Load rows from text
        - load(path): Load rows from a file
        - find(addr): Row for an address, or None
        - column(idx): Property for a column

    Invariants:
        - Column offsets are the running sum of earlier column sizes
        - The schema is frozen once parsing starts
        - Rows are owned by the arena and valid for the table's lifetime
    """

    def __init__(
        self,
        config: TableConfig | None = None,
        space: RangeIndex[Row] | None = None,
        arena: Arena | None = None,
    ):
        self.config = config or TableConfig()
        self._space = space if space is not None else SimpleIPSpace()
        self._arena = arena if arena is not None else SimpleArena(
            self.config.arena_block_size, self.config.encoding
        )
        self._columns: list[Property] = []
        self._size = 0
        self._frozen = False
        self.diagnostics: list[IPPropsError] = []

    def add_column(self, prop: Property) -> Table:
        """Add a property column to the table."""
        if self._frozen:
            raise SchemaError(f"Cannot add column {prop.name!r} after parsing has started")
        prop.assign_offset(self._size)
        prop.assign_index(len(self._columns))
        self._size += prop.size
        self._columns.append(prop)
        return self

    @property
    def columns(self) -> tuple[Property, ...]:
        return tuple(self._columns)

    @property
    def row_size(self) -> int:
        """Size of row data in bytes."""
        return self._size

    @property
    def arena(self) -> Arena:
        return self._arena

    def column(self, idx: int) -> Property:
        """Property for column idx."""
        return self._columns[idx]

    def parse(self, src: str) -> bool:
        """Parse input text, one row per line.

        Invalid ranges skip their line and invalid values leave their column
        as written; both are recorded in diagnostics and logged.

        Returns:
            True once the whole source has been consumed
        """
        self._frozen = True
        self.diagnostics = []
        sep = self.config.delimiter
        line_no = 0
        rows = 0

        while src:
            line, _, src = src.partition("\n")
            line_no += 1

            range_token, _, rest = line.partition(sep)
            rng = range_from_text(range_token)
            if rng is None:
                self._report(RangeParseError(range_token.strip(), line_no))
                continue

            data = self._arena.alloc(self._size)
            row = Row(data, self._arena)
            scanner = TokenScanner(rest, sep, self.config.quote)
            for col in self._columns:
                token = scanner.next_token()
                self._parse_column(col, token, row, line_no)

            if scanner:
                logger.debug(f"Ignoring extra fields on line {line_no}: {scanner.remaining!r}")

            self._space.mark(rng, row)
            rows += 1

        logger.info(
            f"Parsed {rows} rows from {line_no} lines "
            f"({len(self.diagnostics)} diagnostics, {self.size()} ranges)"
        )
        return True

    def _parse_column(self, col: Property, token: str, row: Row, line_no: int) -> None:
        value = self._arena.localize(token) if col.needs_localized_token else token
        try:
            ok = col.parse(value, row.span_for(col))
        except ColumnParseError as e:
            self._report(e.locate(col.index, line_no))
            return
        if not ok:
            self._report(ColumnParseError(token, col.index, line_no))

    def _report(self, error: IPPropsError) -> None:
        logger.warning(str(error))
        self.diagnostics.append(error)

    def load(self, path: str | Path) -> bool:
        """Parse the contents of the file at path.

        Returns:
            False if the file could not be read, otherwise the parse result
        """
        path = Path(path)
        try:
            src = path.read_text(encoding=self.config.encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            return False
        logger.info(f"Loading {path}")
        return self.parse(src)

    def find(self, addr: Address | str) -> Row | None:
        """Look up addr in the table.

        Raises:
            AddressParseError: addr is a string that is not an address
        """
        if isinstance(addr, str):
            addr = address_from_text(addr)
        return self._space.find(addr)

    def items(self) -> Iterator[tuple[IPRange, Row]]:
        """Ranges and rows in address order."""
        return iter(self._space)

    def size(self) -> int:
        """Number of ranges in the container."""
        return self._space.count()

    def __len__(self) -> int:
        return self.size()
