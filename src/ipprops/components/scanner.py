"""Quote-aware field scanner for delimited input lines."""

from __future__ import annotations

import re
from collections.abc import Iterator


class TokenScanner:
    """Splits one line into delimiter-separated fields.

    Args:
        line: Text of the line (without the newline)
        delimiter: Field separator
        quote: Quote character

    Invariants:
        - A quote toggles the in-quote state and never ends a field
        - A delimiter inside quotes is literal content
        - Unbalanced quotes run to the end of the line without error
        - An exhausted scanner yields empty tokens
    """

    def __init__(self, line: str, delimiter: str = ",", quote: str = '"'):
        self._line = line
        self._pos = 0
        self.delimiter = delimiter
        self.quote = quote
        # Characters of interest.
        self._special = re.compile(f"[{re.escape(quote)}{re.escape(delimiter)}]")

    @property
    def remaining(self) -> str:
        """Unconsumed text of the line."""
        return self._line[self._pos:]

    def __bool__(self) -> bool:
        # A line ending in a delimiter still holds one empty field.
        return self._pos <= len(self._line)

    def next_token(self) -> str:
        """Extract and consume the next field.

        The field is trimmed of whitespace, then of one leading and one
        trailing quote.
        """
        line = self._line
        start = idx = self._pos
        in_quote = False
        end = len(line)

        while idx < len(line):
            m = self._special.search(line, idx)
            if m is None:
                break
            idx = m.start()
            if line[idx] == self.quote:
                in_quote = not in_quote
                idx += 1
            elif in_quote:
                idx += 1
            else:
                end = idx
                break

        # Skip the separator. Without one the line is exhausted.
        self._pos = end + 1 if end < len(line) else len(line) + 1
        return self._trim(line[start:end])

    def _trim(self, token: str) -> str:
        token = token.strip()
        if token.startswith(self.quote):
            token = token[1:]
        if token.endswith(self.quote):
            token = token[:-1]
        return token

    def __iter__(self) -> Iterator[str]:
        """Iterate the remaining fields, consuming them."""
        while self:
            yield self.next_token()


def split_fields(line: str, delimiter: str = ",", quote: str = '"') -> list[str]:
    """Return every field of line."""
    return list(TokenScanner(line, delimiter, quote))
