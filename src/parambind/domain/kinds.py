"""Supported field kinds and annotation resolution.

Records declare a field's kind through its type annotation. Plain Python
types map to their natural kind (``int`` is the platform-native signed
integer, ``float`` is 64-bit); the fixed-width aliases below carry the
kind inside ``typing.Annotated`` so they stay ordinary ``int``/``float``
for type checkers.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, get_args, get_origin


class Kind(StrEnum):
    """The closed set of kinds the scalar converter handles."""

    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOL = "bool"
    STRING = "string"
    LIST_INT64 = "list[int64]"
    LIST_STRING = "list[string]"


Int = Annotated[int, Kind.INT]
Int8 = Annotated[int, Kind.INT8]
Int16 = Annotated[int, Kind.INT16]
Int32 = Annotated[int, Kind.INT32]
Int64 = Annotated[int, Kind.INT64]
Uint = Annotated[int, Kind.UINT]
Uint8 = Annotated[int, Kind.UINT8]
Uint16 = Annotated[int, Kind.UINT16]
Uint32 = Annotated[int, Kind.UINT32]
Uint64 = Annotated[int, Kind.UINT64]
Float32 = Annotated[float, Kind.FLOAT32]
Float64 = Annotated[float, Kind.FLOAT64]

NATIVE_INT_BITS = 64

INT_WIDTHS: dict[Kind, int] = {
    Kind.INT: NATIVE_INT_BITS,
    Kind.INT8: 8,
    Kind.INT16: 16,
    Kind.INT32: 32,
    Kind.INT64: 64,
}

UINT_WIDTHS: dict[Kind, int] = {
    Kind.UINT: NATIVE_INT_BITS,
    Kind.UINT8: 8,
    Kind.UINT16: 16,
    Kind.UINT32: 32,
    Kind.UINT64: 64,
}

FLOAT_KINDS = frozenset({Kind.FLOAT32, Kind.FLOAT64})
LIST_KINDS = frozenset({Kind.LIST_INT64, Kind.LIST_STRING})

_PLAIN_TYPES: dict[type, Kind] = {
    bool: Kind.BOOL,
    int: Kind.INT,
    float: Kind.FLOAT64,
    str: Kind.STRING,
}

_ELEMENT_KINDS: dict[Kind, Kind] = {
    Kind.INT: Kind.LIST_INT64,
    Kind.INT64: Kind.LIST_INT64,
    Kind.STRING: Kind.LIST_STRING,
}


def int_bounds(kind: Kind) -> tuple[int, int]:
    """Return the inclusive ``(min, max)`` range of an integer kind.

    Examples:
        >>> int_bounds(Kind.INT8)
        (-128, 127)
        >>> int_bounds(Kind.UINT8)
        (0, 255)
    """
    if kind in INT_WIDTHS:
        bits = INT_WIDTHS[kind]
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    bits = UINT_WIDTHS[kind]
    return 0, (1 << bits) - 1


def resolve_kind(annotation: Any) -> Kind | None:
    """Map a field annotation to its :class:`Kind`, or None if unsupported."""
    if get_origin(annotation) is Annotated:
        base, *extras = get_args(annotation)
        for extra in extras:
            if isinstance(extra, Kind):
                return extra
        return resolve_kind(base)

    if get_origin(annotation) is list:
        args = get_args(annotation)
        if len(args) != 1:
            return None
        element = resolve_kind(args[0])
        return _ELEMENT_KINDS.get(element) if element is not None else None

    if isinstance(annotation, type):
        return _PLAIN_TYPES.get(annotation)
    return None


def zero_value(kind: Kind) -> Any:
    """Return a fresh zero value for *kind*."""
    if kind in LIST_KINDS:
        return []
    if kind in FLOAT_KINDS:
        return 0.0
    if kind is Kind.BOOL:
        return False
    if kind is Kind.STRING:
        return ""
    return 0
