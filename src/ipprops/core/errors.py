"""Exception hierarchy for ipprops.

Defines all custom exceptions used throughout the implementation.
"""

from __future__ import annotations


class IPPropsError(Exception):
    """Base exception for all ipprops errors."""
    pass


class SchemaError(IPPropsError):
    """Raised when the table schema is misused."""
    pass


class ColumnNotBoundError(SchemaError):
    """Raised when a column's index or offset is read before it joins a table."""
    pass


class AddressParseError(IPPropsError, ValueError):
    """Raised when a query address cannot be parsed."""
    pass


class RangeParseError(IPPropsError):
    """Recorded when an input line has an invalid range field."""

    def __init__(self, text: str, line_no: int):
        self.text = text
        self.line_no = line_no
        super().__init__(f"{text!r} is not a valid range specification (line {line_no}).")


class ColumnParseError(IPPropsError):
    """Recorded when a token fails its column's validation."""

    def __init__(self, token: str, column: int | None = None, line_no: int | None = None, reason: str = ""):
        self.token = token
        self.column = column
        self.line_no = line_no
        self.reason = reason
        super().__init__(self._describe())

    def _describe(self) -> str:
        msg = f'Value "{self.token}" at index {self.column} on line {self.line_no} is invalid.'
        if self.reason:
            msg = f"{msg} {self.reason}"
        return msg

    def locate(self, column: int, line_no: int) -> ColumnParseError:
        """Attach the position of the failing token and return self."""
        self.column = column
        self.line_no = line_no
        self.args = (self._describe(),)
        return self


class VocabularyOverflowError(ColumnParseError):
    """Raised when a tag column runs out of distinct values."""
    pass
