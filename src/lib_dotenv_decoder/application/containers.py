"""Descent into optional references, nested records, mappings, and sequences.

Purpose
-------
Apply the leftover segments of a key once the engine has matched a field. Each
helper owns one composite kind: it allocates missing storage on demand, then
either writes the leaf value or hands the remaining segments back to the
engine through the ``recurse`` callable.

Contents
--------
* :func:`descend_optional` – ``X | None`` fields referencing a record.
* :func:`descend_record` – nested dataclass fields.
* :func:`assign_mapping` – ``dict[str, V]`` fields; the key keeps its raw case.
* :func:`assign_sequence` – ``list[T]`` / ``tuple[T, ...]`` fields addressed by index.
"""

from __future__ import annotations

import re
from collections.abc import MutableMapping
from typing import Any, Callable, Sequence

from ..domain.errors import DescendError, MappingKeyTypeError, SequenceIndexError
from ..domain.schema import (
    FieldSpec,
    Kind,
    accepts_any,
    classify,
    container_items,
    is_record_type,
    is_string_type,
    is_tuple_sequence,
    strip_optional,
    zero_value,
)
from .access import read_field, write_field
from .coerce import coerce_scalar

Recurse = Callable[[Any, Sequence[str], str], bool]

_INDEX = re.compile(r"[0-9]+")


def descend_optional(record: Any, spec: FieldSpec, leftover: Sequence[str], raw: str, recurse: Recurse) -> bool:
    """Allocate the referenced record when absent and continue inside it."""

    referent = strip_optional(spec.annotation)
    if not is_record_type(referent):
        raise DescendError(
            f"cannot descend into optional field {spec.name!r} (kind {classify(referent).value}), leftover {list(leftover)}"
        )
    current = read_field(record, spec)
    if current is None:
        current = zero_value(referent)
        write_field(record, spec, current)
    return recurse(current, leftover, raw)


def descend_record(record: Any, spec: FieldSpec, leftover: Sequence[str], raw: str, recurse: Recurse) -> bool:
    """Continue inside an embedded record, allocating it only if it holds ``None``."""

    current = read_field(record, spec)
    if current is None:
        current = zero_value(spec.annotation)
        write_field(record, spec, current)
    return recurse(current, leftover, raw)


def assign_mapping(record: Any, spec: FieldSpec, leftover: Sequence[str], raw: str) -> bool:
    """Store *raw* under the un-normalised leftover key of a string-keyed mapping.

    Values are coerced into the declared value type unless it is ``Any`` or
    ``object``, in which case the raw string is stored.
    """

    key_type, value_type = container_items(spec.annotation)
    if not is_string_type(key_type):
        raise MappingKeyTypeError(
            f"unsupported map key type {getattr(key_type, '__name__', key_type)} for field {spec.name!r}; "
            "only string keys allowed"
        )
    container = read_field(record, spec)
    if container is None:
        container = {}
        write_field(record, spec, container)
    elif not isinstance(container, MutableMapping):
        container = dict(container)
        write_field(record, spec, container)

    key: Any = "_".join(leftover)
    if strip_optional(key_type) is not str:
        key = coerce_scalar(key_type, key)
    container[key] = raw if accepts_any(value_type) else coerce_scalar(value_type, raw)
    return True


def assign_sequence(record: Any, spec: FieldSpec, leftover: Sequence[str], raw: str, recurse: Recurse) -> bool:
    """Grow the sequence to cover the index segment, then write or descend into the element.

    Growth pads with fresh zero values and keeps existing elements in place.
    ``tuple`` sequences are rebuilt and written back to the field.
    """

    (item_type,) = container_items(spec.annotation)
    index_text = leftover[0]
    if not _INDEX.fullmatch(index_text):
        raise SequenceIndexError(f"cannot parse sequence index {index_text!r} for field {spec.name!r}")
    index = int(index_text)

    current = read_field(record, spec)
    immutable = is_tuple_sequence(spec.annotation) or isinstance(current, tuple)
    if current is None:
        items: list[Any] = []
    elif isinstance(current, list):
        items = current
    else:
        items = list(current)
    if index >= len(items):
        items.extend(zero_value(item_type) for _ in range(index + 1 - len(items)))
    if items is not current:
        write_field(record, spec, tuple(items) if immutable else items)

    rest = leftover[1:]
    if not rest:
        items[index] = coerce_scalar(item_type, raw)
        if immutable:
            write_field(record, spec, tuple(items))
        return True

    element_type = strip_optional(item_type)
    if classify(item_type) not in (Kind.RECORD, Kind.OPTIONAL) or not is_record_type(element_type):
        raise DescendError(
            f"cannot descend into sequence element kind {classify(item_type).value} for field {spec.name!r}"
        )
    element = items[index]
    if element is None:
        element = zero_value(element_type)
        items[index] = element
        if immutable:
            write_field(record, spec, tuple(items))
    return recurse(element, rest, raw)
