"""Scalar converter — one textual value to one typed value.

Every parser is strict: no whitespace trimming, no digit separators,
no alternate bases. Failures raise :class:`InvalidParamError`.
"""

from __future__ import annotations

import math
import re
import struct
from collections.abc import Callable
from typing import Any

from parambind.domain.errors import InvalidParamError
from parambind.domain.kinds import INT_WIDTHS, UINT_WIDTHS, Kind, int_bounds

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")

TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

LIST_SEPARATOR = ","

# Digits needed for the widest kind (uint64); longer literals are out of range.
MAX_INT_DIGITS = 20


def parse_int(text: str, kind: Kind) -> int:
    """Parse a base-10 integer bounded by the width of *kind*.

    Signed kinds accept an optional leading sign; unsigned kinds accept
    digits only.
    """
    pattern = _SIGNED_RE if kind in INT_WIDTHS else _UNSIGNED_RE
    if pattern.fullmatch(text) is None:
        raise InvalidParamError(f"{text!r} is not a valid {kind} literal")
    low, high = int_bounds(kind)
    if len(text.lstrip("+-").lstrip("0")) > MAX_INT_DIGITS:
        raise InvalidParamError(f"{text[:24]!r}... is out of range for {kind} [{low}, {high}]")
    value = int(text, 10)
    if not low <= value <= high:
        raise InvalidParamError(f"{text!r} is out of range for {kind} [{low}, {high}]")
    return value


def parse_float(text: str, kind: Kind) -> float:
    """Parse a decimal floating literal, rounded to the width of *kind*."""
    if _FLOAT_RE.fullmatch(text) is None:
        raise InvalidParamError(f"{text!r} is not a valid {kind} literal")
    value = float(text)
    if kind is Kind.FLOAT32 and not math.isinf(value):
        try:
            value = struct.unpack("f", struct.pack("f", value))[0]
        except OverflowError as exc:
            raise InvalidParamError(f"{text!r} is out of range for {kind}") from exc
    if math.isinf(value):
        raise InvalidParamError(f"{text!r} is out of range for {kind}")
    return value


def parse_bool(text: str) -> bool:
    """Accept exactly the canonical boolean literals."""
    if text in TRUE_LITERALS:
        return True
    if text in FALSE_LITERALS:
        return False
    raise InvalidParamError(f"{text!r} is not a valid bool literal")


def parse_string(text: str) -> str:
    """Return *text* verbatim; an empty value is treated as missing."""
    if text == "":
        raise InvalidParamError("empty value for string field")
    return text


def parse_int_list(text: str) -> list[int]:
    """Split on commas and parse each piece as int64; empty pieces fail."""
    return [parse_int(piece, Kind.INT64) for piece in text.split(LIST_SEPARATOR)]


def parse_string_list(text: str) -> list[str]:
    """Split on commas, keeping empty pieces."""
    return text.split(LIST_SEPARATOR)


_CONVERTERS: dict[Kind, Callable[[str], Any]] = {
    **{kind: (lambda text, k=kind: parse_int(text, k)) for kind in INT_WIDTHS},
    **{kind: (lambda text, k=kind: parse_int(text, k)) for kind in UINT_WIDTHS},
    Kind.FLOAT32: lambda text: parse_float(text, Kind.FLOAT32),
    Kind.FLOAT64: lambda text: parse_float(text, Kind.FLOAT64),
    Kind.BOOL: parse_bool,
    Kind.STRING: parse_string,
    Kind.LIST_INT64: parse_int_list,
    Kind.LIST_STRING: parse_string_list,
}


def convert(text: str, kind: Kind) -> Any:
    """Convert *text* into a fresh value of *kind*.

    Raises:
        InvalidParamError: If *text* is not a valid literal for *kind*.
    """
    return _CONVERTERS[kind](text)
