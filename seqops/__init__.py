"""seqops - generic helpers over ordered sequences"""

from seqops.lazy import LazyCollection
from seqops.ops import (
    all_match,
    any_match,
    batch,
    clamp,
    delete,
    filter_in_place,
    filter_values,
    first,
    if_else,
    limit,
    map_indexed,
    map_values,
    reduce,
    reverse,
    shuffle,
    to_opaque_slice,
    unique,
)

__version__ = "0.1.0"

__all__ = [
    "LazyCollection",
    "all_match",
    "any_match",
    "batch",
    "clamp",
    "delete",
    "filter_in_place",
    "filter_values",
    "first",
    "if_else",
    "limit",
    "map_indexed",
    "map_values",
    "reduce",
    "reverse",
    "shuffle",
    "to_opaque_slice",
    "unique",
]
