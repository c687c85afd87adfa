"""Unicode full case folding.

    >>> from unifold import fold, fold_equals, lookup_folding
    >>> fold("Straße")
    'strasse'
    >>> fold_equals("ΣΊΣΥΦΟΣ", "σίσυφος")
    True
    >>> lookup_folding(0x41)
    (97,)
"""

from .engine import (
    FoldingEngine,
    default_engine,
    default_table,
    fold,
    fold_equals,
    iter_folded,
    lookup_folding,
)
from .errors import (
    InvalidInputType,
    MalformedText,
    OutOfRangeCodePoint,
    TableError,
    UcdFetchError,
    UcdParseError,
    UnifoldError,
)
from .table import FoldingTable

__version__ = "0.1.0"

__all__ = [
    "FoldingEngine",
    "FoldingTable",
    "InvalidInputType",
    "MalformedText",
    "OutOfRangeCodePoint",
    "TableError",
    "UcdFetchError",
    "UcdParseError",
    "UnifoldError",
    "default_engine",
    "default_table",
    "fold",
    "fold_equals",
    "iter_folded",
    "lookup_folding",
]
