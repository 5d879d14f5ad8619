"""Path assignment engine.

Purpose
-------
Place one raw value into a dataclass instance given the ``_``-split segments
of its key. The engine tries the longest segment prefix first; within a prefix
length the first declared field wins. A matched field either receives the
value (no leftover segments) or passes the leftover segments to the container
helpers, which recurse back here for nested records.

Contents
--------
* :func:`assign_value` – recursive entry point; returns whether the key landed.

System Role
-----------
Invoked by :func:`lib_dotenv_decoder.core.decode_mapping` once per key. Keys
that match no field at any prefix length are ignored, which is reported as
``False`` rather than an error.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..domain.errors import DescendError
from ..domain.schema import FieldSpec, Kind, describe, normalize
from .access import write_field
from .coerce import coerce_scalar
from .containers import assign_mapping, assign_sequence, descend_optional, descend_record
from .resolve import find_field


def assign_value(record: Any, parts: Sequence[str], raw: str) -> bool:
    """Assign *raw* to the field of *record* addressed by *parts*.

    Returns
    -------
    bool
        ``True`` when a leaf was written, ``False`` when the key was ignored.

    Examples
    --------
    >>> from dataclasses import dataclass, field
    >>> @dataclass
    ... class Settings:
    ...     db_port: int = 0
    ...     tags: dict[str, str] = field(default_factory=dict)
    >>> settings = Settings()
    >>> assign_value(settings, ["DB", "PORT"], "5432")
    True
    >>> assign_value(settings, ["TAGS", "Team", "Name"], "core")
    True
    >>> assign_value(settings, ["UNKNOWN"], "x")
    False
    >>> settings
    Settings(db_port=5432, tags={'Team_Name': 'core'})
    """

    if not parts:
        return False
    schema = describe(type(record))
    for prefix_len in range(len(parts), 0, -1):
        candidate = normalize("_".join(parts[:prefix_len]))
        spec = find_field(schema, candidate)
        if spec is None:
            continue
        leftover = parts[prefix_len:]
        if not leftover:
            write_field(record, spec, coerce_scalar(spec.annotation, raw))
            return True
        return _descend(record, spec, leftover, raw)
    return False


def _descend(record: Any, spec: FieldSpec, leftover: Sequence[str], raw: str) -> bool:
    """Dispatch leftover segments according to the field's composite kind."""

    if spec.kind is Kind.OPTIONAL:
        return descend_optional(record, spec, leftover, raw, assign_value)
    if spec.kind is Kind.RECORD:
        return descend_record(record, spec, leftover, raw, assign_value)
    if spec.kind is Kind.MAPPING:
        return assign_mapping(record, spec, leftover, raw)
    if spec.kind is Kind.SEQUENCE:
        return assign_sequence(record, spec, leftover, raw, assign_value)
    raise DescendError(f"cannot descend into field {spec.name!r} (kind {spec.kind.value}), leftover {list(leftover)}")
