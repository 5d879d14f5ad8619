"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the assignment engine, the text
parser adapter, and the composition root. The hierarchy lives in the domain
layer so inner layers never depend on adapters for their failure vocabulary.

Contents
--------
* :class:`DotEnvDecodeError` – umbrella base class for every library failure.
* :class:`InvalidDestination` – the decode target is not a dataclass instance.
* :class:`InvalidFormat` – the ``.env`` text could not be tokenised.
* :class:`CoercionError` – a raw value does not parse as the field's scalar type.
* :class:`UnsupportedKind` – the leaf type has no coercion rule.
* :class:`DescendError` – leftover segments hit a field that cannot take them.
* :class:`SequenceIndexError` – a sequence index segment is not a non-negative integer.
* :class:`MappingKeyTypeError` – a mapping field does not use string keys.
* :class:`InaccessibleField` – a field write could not be forced through.
* :class:`KeyDecodeError` – wraps any of the above with the offending key.

System Role
-----------
The engine raises the specific types; :mod:`lib_dotenv_decoder.core` wraps
per-key failures in :class:`KeyDecodeError`. Callers catch
:class:`DotEnvDecodeError` to handle all library failures uniformly.
"""

from __future__ import annotations


class DotEnvDecodeError(Exception):
    """Base type for all exceptions emitted by ``lib_dotenv_decoder``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class InvalidDestination(DotEnvDecodeError):
    """Raised when the decode target is not a dataclass instance.

    Reported before any key is processed.
    """


class InvalidFormat(DotEnvDecodeError):
    """Raised when ``.env`` input cannot be parsed into key/value pairs.

    Typical Sources
    ---------------
    :func:`lib_dotenv_decoder.adapters.dotenv.default.parse_dotenv` for
    malformed lines, missing ``=`` separators, or undecodable bytes.
    """


class CoercionError(DotEnvDecodeError):
    """Raised when a raw string cannot be converted into the requested scalar type."""


class UnsupportedKind(DotEnvDecodeError):
    """Raised when the leaf annotation has no string coercion rule."""


class DescendError(DotEnvDecodeError):
    """Raised when leftover path segments cannot be applied to the matched field."""


class SequenceIndexError(DotEnvDecodeError):
    """Raised when the segment following a sequence field is not a valid index."""


class MappingKeyTypeError(DotEnvDecodeError):
    """Raised when a mapping field declares a key type other than ``str``."""


class InaccessibleField(DotEnvDecodeError):
    """Raised when a field cannot be written even through the force-set path."""


class KeyDecodeError(DotEnvDecodeError):
    """Associate a decoding failure with the raw key that triggered it.

    Why
    ----
    A single ``.env`` file can contain dozens of keys; the message must point
    operators at the offending line without a debugger.

    Attributes
    ----------
    key:
        Raw, un-normalised key as it appeared in the input.
    cause:
        The underlying :class:`DotEnvDecodeError`.

    Examples
    --------
    >>> error = KeyDecodeError("DB_PORT", CoercionError("cannot parse 'x' as int"))
    >>> str(error)
    "key 'DB_PORT': cannot parse 'x' as int"
    >>> error.key
    'DB_PORT'
    """

    def __init__(self, key: str, cause: DotEnvDecodeError) -> None:
        super().__init__(f"key {key!r}: {cause}")
        self.key = key
        self.cause = cause
