"""Type-directed string-to-scalar coercion.

Purpose
-------
Convert a single raw ``.env`` value into the scalar type a dataclass field
declares. Parsing is strict: a value either parses completely as the requested
type or the call fails with :class:`CoercionError`.

Contents
--------
* :func:`coerce_scalar` – dispatch on the field annotation.
* :func:`parse_bool` / :func:`parse_int` / :func:`parse_float` /
  :func:`parse_complex` / :func:`parse_duration` – per-kind parsers.

System Role
-----------
Called by the assignment engine for leaf writes, mapping values, and sequence
elements. Holds no state.
"""

from __future__ import annotations

import enum
import math
import re
import struct
from datetime import timedelta
from decimal import Decimal
from typing import Any, get_origin

from ..domain.errors import CoercionError, UnsupportedKind
from ..domain.schema import split_annotated, unwrap_optional
from ..domain.types import FloatWidth, IntWidth

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")

_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_TERM = re.compile(r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)([^0-9.]*)")


def coerce_scalar(annotation: Any, raw: str) -> Any:
    """Return *raw* converted to the scalar type described by *annotation*.

    Optional references coerce into their referent; ``NewType`` aliases into
    their supertype; ``str``/``int``/``float``/``complex`` subclasses are
    constructed from the parsed builtin value.

    Raises
    ------
    CoercionError
        When *raw* does not parse as the requested type or overflows its width.
    UnsupportedKind
        When *annotation* has no coercion rule (records, containers, enums, ...).

    Examples
    --------
    >>> from lib_dotenv_decoder.domain.types import UInt8
    >>> coerce_scalar(int | None, "42"), coerce_scalar(bool, "T"), coerce_scalar(UInt8, "255")
    (42, True, 255)
    >>> coerce_scalar(timedelta, "1h30m")
    datetime.timedelta(seconds=5400)
    >>> coerce_scalar(UInt8, "256")
    Traceback (most recent call last):
    ...
    lib_dotenv_decoder.domain.errors.CoercionError: cannot parse '256' as uint8: value out of range
    """

    base, metadata = split_annotated(annotation)
    inner = unwrap_optional(base)
    if inner is not None:
        return coerce_scalar(inner, raw)
    if hasattr(base, "__supertype__"):
        return coerce_scalar(base.__supertype__, raw)
    if get_origin(base) is not None or not isinstance(base, type) or issubclass(base, enum.Enum):
        raise UnsupportedKind(f"unsupported kind {_label(base)} for value {raw!r}")
    if issubclass(base, timedelta):
        return parse_duration(raw)
    if issubclass(base, str):
        return raw if base is str else base(raw)
    if issubclass(base, bool):
        return parse_bool(raw)
    if issubclass(base, int):
        value = parse_int(raw, _marker(metadata, IntWidth))
        return value if base is int else base(value)
    if issubclass(base, float):
        parsed = parse_float(raw, _marker(metadata, FloatWidth))
        return parsed if base is float else base(parsed)
    if issubclass(base, complex):
        number = parse_complex(raw, _marker(metadata, FloatWidth))
        return number if base is complex else base(number)
    raise UnsupportedKind(f"unsupported kind {_label(base)} for value {raw!r}")


def parse_bool(raw: str) -> bool:
    """Parse the textual boolean forms ``1 t T TRUE true True`` and their false counterparts.

    Examples
    --------
    >>> parse_bool("TRUE"), parse_bool("0")
    (True, False)
    """

    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise CoercionError(f"cannot parse {raw!r} as bool: invalid syntax")


def parse_int(raw: str, width: IntWidth | None = None) -> int:
    """Parse a base-10 integer, range-checked against *width* when given.

    Unsigned widths accept digits only.

    Examples
    --------
    >>> parse_int("-17"), parse_int("+8")
    (-17, 8)
    >>> parse_int("1_000")
    Traceback (most recent call last):
    ...
    lib_dotenv_decoder.domain.errors.CoercionError: cannot parse '1_000' as int: invalid syntax
    """

    label = width.name if width is not None and width.name else "int"
    pattern = _UNSIGNED if width is not None and not width.signed else _SIGNED
    if not pattern.fullmatch(raw):
        raise CoercionError(f"cannot parse {raw!r} as {label}: invalid syntax")
    value = int(raw)
    if width is not None and not width.minimum <= value <= width.maximum:
        raise CoercionError(f"cannot parse {raw!r} as {label}: value out of range")
    return value


def parse_float(raw: str, width: FloatWidth | None = None) -> float:
    """Parse a floating point literal; 32-bit widths round to single precision.

    Examples
    --------
    >>> parse_float("2.5e3"), parse_float("-inf")
    (2500.0, -inf)
    """

    label = width.name if width is not None and width.name else "float"
    _reject_padding(raw, label)
    try:
        value = float(raw)
    except ValueError as exc:
        raise CoercionError(f"cannot parse {raw!r} as {label}: invalid syntax") from exc
    if width is not None and width.bits == 32:
        return _single_precision(value, raw, label)
    return value


def parse_complex(raw: str, width: FloatWidth | None = None) -> complex:
    """Parse a complex literal such as ``1+2j`` or ``(1+2j)``.

    Examples
    --------
    >>> parse_complex("(1+2j)"), parse_complex("3")
    ((1+2j), (3+0j))
    """

    label = width.name if width is not None and width.name else "complex"
    _reject_padding(raw, label)
    try:
        value = complex(raw)
    except ValueError as exc:
        raise CoercionError(f"cannot parse {raw!r} as {label}: invalid syntax") from exc
    if width is not None and width.bits == 32:
        return complex(_single_precision(value.real, raw, label), _single_precision(value.imag, raw, label))
    return value


def parse_duration(raw: str) -> timedelta:
    """Parse a duration such as ``"300ms"``, ``"-1.5h"`` or ``"2h45m"``.

    A duration is an optionally signed sequence of decimal numbers, each with
    a unit suffix (``ns``, ``us``/``µs``, ``ms``, ``s``, ``m``, ``h``). The bare
    string ``"0"`` is accepted. Sub-microsecond remainders are truncated.

    Examples
    --------
    >>> parse_duration("1h30m")
    datetime.timedelta(seconds=5400)
    >>> parse_duration("-1.5s")
    datetime.timedelta(days=-1, seconds=86398, microseconds=500000)
    >>> parse_duration("abc")
    Traceback (most recent call last):
    ...
    lib_dotenv_decoder.domain.errors.CoercionError: cannot parse 'abc' as duration: invalid duration 'abc'
    """

    text = raw
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise CoercionError(f"cannot parse {raw!r} as duration: invalid duration {raw!r}")

    total = Decimal(0)
    position = 0
    while position < len(text):
        match = _DURATION_TERM.match(text, position)
        if match is None:
            raise CoercionError(f"cannot parse {raw!r} as duration: invalid duration {raw!r}")
        number, unit = match.groups()
        if not unit:
            raise CoercionError(f"cannot parse {raw!r} as duration: missing unit in duration {raw!r}")
        scale = _NANOSECONDS.get(unit)
        if scale is None:
            raise CoercionError(f"cannot parse {raw!r} as duration: unknown unit {unit!r} in duration {raw!r}")
        total += Decimal(number) * scale
        position = match.end()

    microseconds = int(total / 1000)
    try:
        result = timedelta(microseconds=microseconds)
    except OverflowError as exc:
        raise CoercionError(f"cannot parse {raw!r} as duration: value out of range") from exc
    return -result if negative else result


def _reject_padding(raw: str, label: str) -> None:
    """Reject inputs Python's parsers accept but the strict grammar does not."""

    if not raw or raw != raw.strip() or "_" in raw:
        raise CoercionError(f"cannot parse {raw!r} as {label}: invalid syntax")


def _single_precision(value: float, raw: str, label: str) -> float:
    """Round *value* to single precision; finite inputs must stay finite."""

    try:
        rounded = struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError as exc:
        raise CoercionError(f"cannot parse {raw!r} as {label}: value out of range") from exc
    if math.isinf(rounded) and not math.isinf(value):
        raise CoercionError(f"cannot parse {raw!r} as {label}: value out of range")
    return rounded


def _marker(metadata: tuple[Any, ...], marker_type: type) -> Any:
    for marker in metadata:
        if isinstance(marker, marker_type):
            return marker
    return None


def _label(annotation: Any) -> str:
    name = getattr(annotation, "__name__", None)
    return name if isinstance(name, str) else repr(annotation)
