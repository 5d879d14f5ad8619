"""Decode `.env` files into nested dataclass instances.

Keys are ``_``-delimited paths (``DATABASE_REPLICAS_0_HOST``) that the decoder
matches against the shape of the target dataclass: nested records, optional
references, lists/tuples addressed by index, and string-keyed dicts. See
:mod:`lib_dotenv_decoder.core` for the entry points.
"""

from __future__ import annotations

from .core import (
    FORMAT_NAME,
    Decoder,
    decode_as,
    decode_environ,
    decode_mapping,
    default_env_prefix,
    load_dotenv_into,
    unmarshal,
)
from .domain.errors import (
    CoercionError,
    DescendError,
    DotEnvDecodeError,
    InaccessibleField,
    InvalidDestination,
    InvalidFormat,
    KeyDecodeError,
    MappingKeyTypeError,
    SequenceIndexError,
    UnsupportedKind,
)
from .domain.schema import normalize
from .domain.types import (
    Complex64,
    Complex128,
    Duration,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from .observability import bind_trace_id, get_logger

__all__ = [
    "FORMAT_NAME",
    "Decoder",
    "unmarshal",
    "decode_mapping",
    "decode_as",
    "load_dotenv_into",
    "decode_environ",
    "default_env_prefix",
    "normalize",
    "DotEnvDecodeError",
    "InvalidDestination",
    "InvalidFormat",
    "CoercionError",
    "UnsupportedKind",
    "DescendError",
    "SequenceIndexError",
    "MappingKeyTypeError",
    "InaccessibleField",
    "KeyDecodeError",
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
    "bind_trace_id",
    "get_logger",
]
