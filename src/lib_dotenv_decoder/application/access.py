"""Field read/write primitives.

Fields of frozen dataclasses and ``_private`` fields are not meant to be set
from outside, yet the decoder must populate them. Every such write goes through
:func:`force_set`; traversal code never calls ``object.__setattr__`` itself.
"""

from __future__ import annotations

from typing import Any

from ..domain.errors import InaccessibleField
from ..domain.schema import FieldSpec


def read_field(instance: Any, spec: FieldSpec) -> Any:
    """Return the current value of *spec* on *instance* (``None`` when unset)."""

    return getattr(instance, spec.name, None)


def write_field(instance: Any, spec: FieldSpec, value: Any) -> None:
    """Store *value* on *instance*, forcing the write for non-settable fields."""

    if not spec.accessible:
        force_set(instance, spec.name, value)
        return
    try:
        setattr(instance, spec.name, value)
    except AttributeError as exc:
        raise InaccessibleField(f"cannot set field {spec.name!r} on {type(instance).__name__}: {exc}") from exc


def force_set(instance: Any, name: str, value: Any) -> None:
    """Bypass ``__setattr__`` overrides (frozen dataclasses) to store *value*.

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> @dataclass(frozen=True)
    ... class Token:
    ...     value: str = ""
    >>> token = Token()
    >>> force_set(token, "value", "s3cret")
    >>> token.value
    's3cret'
    >>> force_set(("immutable",), "value", "x")
    Traceback (most recent call last):
    ...
    lib_dotenv_decoder.domain.errors.InaccessibleField: cannot set field 'value' on tuple (not writable)
    """

    try:
        object.__setattr__(instance, name, value)
    except (AttributeError, TypeError) as exc:
        raise InaccessibleField(f"cannot set field {name!r} on {type(instance).__name__} (not writable)") from exc
