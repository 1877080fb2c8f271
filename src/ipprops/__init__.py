"""ipprops - IP address range property tables in Python."""

from .core.config import TableConfig
from .core.errors import (
    IPPropsError,
    SchemaError,
    ColumnNotBoundError,
    AddressParseError,
    RangeParseError,
    ColumnParseError,
    VocabularyOverflowError,
)
from .core.table import Row, Table
from .core.types import Address, IPRange, TextSpan, address_from_text, range_from_text
from .components.properties import (
    Property,
    FlagProperty,
    FlagGroupProperty,
    TagProperty,
    StringProperty,
)

__all__ = [
    "TableConfig",
    "IPPropsError",
    "SchemaError",
    "ColumnNotBoundError",
    "AddressParseError",
    "RangeParseError",
    "ColumnParseError",
    "VocabularyOverflowError",
    "Row",
    "Table",
    "Address",
    "IPRange",
    "TextSpan",
    "address_from_text",
    "range_from_text",
    "Property",
    "FlagProperty",
    "FlagGroupProperty",
    "TagProperty",
    "StringProperty",
]
