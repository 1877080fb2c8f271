"""Configuration for ipprops tables.

Defines the tunable parameters of the input format and the row arena.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TableConfig:
    """Configuration parameters for a property table.

    Attributes:
        delimiter: Field separator for input lines
        quote: Quote character; delimiters between quotes are literal
        flag_separator: Separator between names in a flag group token
        no_flags_marker: Token meaning "no flags set" for flag groups
        arena_block_size: Minimum size of each arena block in bytes
        encoding: Text encoding for files and persisted strings
    """

    delimiter: str = ","
    quote: str = '"'
    flag_separator: str = ";"
    no_flags_marker: str = "-"
    arena_block_size: int = 4096  # 4 KB
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1 or len(self.quote) != 1:
            raise ValueError("delimiter and quote must be single characters")
        if self.delimiter == self.quote:
            raise ValueError("delimiter and quote must differ")
        if not self.flag_separator:
            raise ValueError("flag_separator must not be empty")
        if self.arena_block_size <= 0:
            raise ValueError(f"Invalid arena block size: {self.arena_block_size}")
