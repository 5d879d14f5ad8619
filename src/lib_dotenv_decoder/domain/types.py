"""Width-annotated scalar aliases for dataclass schemas.

Purpose
-------
Python's ``int``/``float``/``complex`` carry no storage width, yet ``.env``
consumers often need range checks that mirror fixed-width fields (ports fit in
``UInt16``, retry counters in ``Int8``). These aliases attach a width marker via
:data:`typing.Annotated` so the scalar coercer can range-check or round values
while the runtime type stays a plain builtin.

Contents
--------
* :class:`IntWidth` / :class:`FloatWidth` – marker objects read by the coercer.
* ``Int8`` … ``Int64``, ``UInt8`` … ``UInt64`` – bounded integer aliases.
* ``Float32`` / ``Float64`` – floating point aliases (``Float32`` rounds).
* ``Complex64`` / ``Complex128`` – complex aliases (``Complex64`` rounds both parts).
* ``Duration`` – alias of :class:`datetime.timedelta` for readability.

Examples
--------
>>> from dataclasses import dataclass
>>> @dataclass
... class Limits:
...     retries: Int8 = 0
...     port: UInt16 = 0
>>> Limits().port
0
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Annotated


@dataclass(frozen=True, slots=True)
class IntWidth:
    """Bit width and signedness of an integer field.

    Examples
    --------
    >>> IntWidth(8, signed=True, name="int8").minimum, IntWidth(8, signed=True, name="int8").maximum
    (-128, 127)
    >>> IntWidth(8, signed=False, name="uint8").maximum
    255
    """

    bits: int
    signed: bool = True
    name: str = ""

    @property
    def minimum(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def maximum(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


@dataclass(frozen=True, slots=True)
class FloatWidth:
    """Precision of a floating point (or complex component) field."""

    bits: int
    name: str = ""


Int8 = Annotated[int, IntWidth(8, True, "int8")]
Int16 = Annotated[int, IntWidth(16, True, "int16")]
Int32 = Annotated[int, IntWidth(32, True, "int32")]
Int64 = Annotated[int, IntWidth(64, True, "int64")]
UInt8 = Annotated[int, IntWidth(8, False, "uint8")]
UInt16 = Annotated[int, IntWidth(16, False, "uint16")]
UInt32 = Annotated[int, IntWidth(32, False, "uint32")]
UInt64 = Annotated[int, IntWidth(64, False, "uint64")]

Float32 = Annotated[float, FloatWidth(32, "float32")]
Float64 = Annotated[float, FloatWidth(64, "float64")]
Complex64 = Annotated[complex, FloatWidth(32, "complex64")]
Complex128 = Annotated[complex, FloatWidth(64, "complex128")]

Duration = timedelta


__all__ = [
    "IntWidth",
    "FloatWidth",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",
    "Complex64",
    "Complex128",
    "Duration",
]
