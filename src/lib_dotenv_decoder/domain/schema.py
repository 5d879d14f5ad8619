"""Structural description of dataclass records.

Purpose
-------
Turn a dataclass type into the ordered field table the assignment engine walks:
each field's name, declared type name, composite kind, resolved annotation, and
whether it is normally settable from outside. The module is pure (no I/O, no
logging) and knows nothing about ``.env`` syntax.

Contents
--------
* :class:`Kind` – composite-kind classification governing descent.
* :class:`FieldSpec` / :class:`RecordSchema` – the schema-description objects.
* :func:`describe` – builds a :class:`RecordSchema` from a dataclass type.
* :func:`normalize` – case/underscore-insensitive matching key.
* :func:`classify`, :func:`type_name` – per-annotation classification helpers.
* :func:`split_annotated`, :func:`unwrap_optional`, :func:`container_items`,
  :func:`is_record_type`, :func:`is_string_type` – typing introspection helpers.
* :func:`zero_value` / :func:`new_record` – zero values used for lazy
  allocation and sequence growth.

System Role
-----------
Consumed by :mod:`lib_dotenv_decoder.application`. Schemas are rebuilt on each
visit to a record; nothing is cached between calls.
"""

from __future__ import annotations

import dataclasses
import enum
import types
import typing
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from dataclasses import dataclass
from datetime import timedelta
from typing import Annotated, Any, Union, get_args, get_origin

from .errors import UnsupportedKind

_MAPPING_ORIGINS = frozenset({dict, Mapping, MutableMapping})
_SEQUENCE_ORIGINS = frozenset({list, tuple, Sequence, MutableSequence})


class Kind(enum.Enum):
    """Composite-kind classification of a field."""

    SCALAR = "scalar"
    OPTIONAL = "optional"
    RECORD = "record"
    MAPPING = "mapping"
    SEQUENCE = "sequence"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One dataclass field as seen by the resolver.

    Attributes
    ----------
    name:
        Attribute name as declared.
    type_name:
        Name of the declared type (``""`` for generic containers).
    kind:
        :class:`Kind` used to decide how leftover segments are applied.
    annotation:
        Resolved annotation, ``Annotated`` metadata included.
    accessible:
        ``False`` for fields of frozen dataclasses and ``_private`` names; those
        are written through :func:`lib_dotenv_decoder.application.access.force_set`.
    """

    name: str
    type_name: str
    kind: Kind
    annotation: Any
    accessible: bool


@dataclass(frozen=True, slots=True)
class RecordSchema:
    """Ordered field table of a dataclass type."""

    record_type: type
    fields: tuple[FieldSpec, ...]


def normalize(value: str) -> str:
    """Return the matching key for *value*: lower-cased, underscores removed.

    Examples
    --------
    >>> normalize("DB_Host"), normalize("dbHost"), normalize(normalize("DB_HOST"))
    ('dbhost', 'dbhost', 'dbhost')
    """

    return value.lower().replace("_", "")


def describe(record_type: type) -> RecordSchema:
    """Build the :class:`RecordSchema` for the dataclass *record_type*.

    Why
    ----
    The engine must match arbitrary caller-defined records without code
    generation; dataclass introspection supplies names, annotations and
    mutability in declaration order.

    Raises
    ------
    UnsupportedKind
        When *record_type* is not a dataclass or its annotations cannot be
        resolved.

    Examples
    --------
    >>> @dataclass
    ... class Service:
    ...     host: str = ""
    ...     ports: list = dataclasses.field(default_factory=list)
    >>> [(spec.name, spec.type_name, spec.kind.value) for spec in describe(Service).fields]
    [('host', 'str', 'scalar'), ('ports', 'list', 'sequence')]
    """

    if not is_record_type(record_type):
        raise UnsupportedKind(f"{record_type!r} is not a dataclass type")
    hints = _resolve_hints(record_type)
    frozen = bool(getattr(record_type, "__dataclass_params__").frozen)
    specs = []
    for item in dataclasses.fields(record_type):
        annotation = hints.get(item.name, Any)
        specs.append(
            FieldSpec(
                name=item.name,
                type_name=type_name(annotation),
                kind=classify(annotation),
                annotation=annotation,
                accessible=not frozen and not item.name.startswith("_"),
            )
        )
    return RecordSchema(record_type=record_type, fields=tuple(specs))


def classify(annotation: Any) -> Kind:
    """Return the :class:`Kind` of *annotation*.

    ``Optional`` around a mapping or sequence keeps the container kind: an
    absent container is ``None`` and gets allocated like any other.

    Examples
    --------
    >>> classify(int), classify(int | None), classify(dict[str, int] | None)
    (<Kind.SCALAR: 'scalar'>, <Kind.OPTIONAL: 'optional'>, <Kind.MAPPING: 'mapping'>)
    >>> classify(tuple[int, ...]), classify(tuple[int, str])
    (<Kind.SEQUENCE: 'sequence'>, <Kind.SCALAR: 'scalar'>)
    """

    base, _ = split_annotated(annotation)
    inner = unwrap_optional(base)
    if inner is not None:
        inner_kind = classify(inner)
        if inner_kind in (Kind.MAPPING, Kind.SEQUENCE):
            return inner_kind
        return Kind.OPTIONAL
    if is_record_type(base):
        return Kind.RECORD
    origin = get_origin(base) or base
    if origin in _MAPPING_ORIGINS:
        return Kind.MAPPING
    if origin is tuple:
        args = get_args(base)
        if not args or (len(args) == 2 and args[1] is Ellipsis):
            return Kind.SEQUENCE
        return Kind.SCALAR
    if origin in _SEQUENCE_ORIGINS:
        return Kind.SEQUENCE
    return Kind.SCALAR


def type_name(annotation: Any) -> str:
    """Return the declared type name used for type-name matching.

    Width aliases report their own name; generic containers have none.

    Examples
    --------
    >>> from lib_dotenv_decoder.domain.types import UInt16
    >>> type_name(UInt16), type_name(timedelta | None), type_name(list[int])
    ('uint16', 'timedelta', '')
    """

    base, metadata = split_annotated(annotation)
    for marker in metadata:
        name = getattr(marker, "name", "")
        if isinstance(name, str) and name:
            return name
    inner = unwrap_optional(base)
    if inner is not None:
        return type_name(inner)
    if get_origin(base) is not None:
        return ""
    name = getattr(base, "__name__", "")
    return name if isinstance(name, str) else ""


def split_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Return ``(base, metadata)`` for ``Annotated`` types, ``(annotation, ())`` otherwise."""

    if get_origin(annotation) is Annotated:
        return annotation.__origin__, tuple(annotation.__metadata__)
    return annotation, ()


def unwrap_optional(annotation: Any) -> Any | None:
    """Return ``X`` for ``X | None`` / ``Optional[X]``, ``None`` for anything else.

    Unions with more than one non-``None`` member are not optional references.
    """

    base, _ = split_annotated(annotation)
    if get_origin(base) not in (Union, types.UnionType):
        return None
    members = get_args(base)
    if type(None) not in members:
        return None
    remaining = [member for member in members if member is not type(None)]
    if len(remaining) != 1:
        return None
    return remaining[0]


def strip_optional(annotation: Any) -> Any:
    """Drop ``Annotated`` and ``Optional`` wrappers from *annotation*."""

    base, _ = split_annotated(annotation)
    inner = unwrap_optional(base)
    if inner is None:
        return base
    return split_annotated(inner)[0]


def container_items(annotation: Any) -> tuple[Any, ...]:
    """Return the type arguments of a mapping or sequence annotation.

    Bare containers default to ``(str, Any)`` for mappings and ``(Any,)`` for
    sequences.

    Examples
    --------
    >>> container_items(dict[str, int] | None), container_items(tuple[float, ...]), container_items(list)
    ((<class 'str'>, <class 'int'>), (<class 'float'>,), (typing.Any,))
    """

    base = strip_optional(annotation)
    origin = get_origin(base) or base
    args = get_args(base)
    if origin in _MAPPING_ORIGINS:
        return args if len(args) == 2 else (str, Any)
    if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
        return (args[0],)
    return args[:1] if args else (Any,)


def is_tuple_sequence(annotation: Any) -> bool:
    """Return ``True`` when *annotation* declares an immutable ``tuple`` sequence."""

    base = strip_optional(annotation)
    return (get_origin(base) or base) is tuple


def is_record_type(candidate: Any) -> bool:
    """Return ``True`` when *candidate* is a dataclass type (not an instance)."""

    return isinstance(candidate, type) and dataclasses.is_dataclass(candidate)


def is_string_type(annotation: Any) -> bool:
    """Return ``True`` for ``str``, ``str`` subclasses, and ``NewType`` aliases of ``str``."""

    base = _resolve_supertype(split_annotated(annotation)[0])
    if get_origin(base) is not None or not isinstance(base, type):
        return False
    return issubclass(base, str) and not issubclass(base, enum.Enum)


def accepts_any(annotation: Any) -> bool:
    """Return ``True`` when *annotation* takes arbitrary values (``Any`` / ``object``)."""

    base, _ = split_annotated(annotation)
    return base is Any or base is object


def zero_value(annotation: Any) -> Any:
    """Return the zero value stored when storage for *annotation* is allocated.

    Examples
    --------
    >>> zero_value(int), zero_value(str | None), zero_value(list[int]), zero_value(timedelta)
    (0, None, [], datetime.timedelta(0))
    """

    base, _ = split_annotated(annotation)
    if unwrap_optional(base) is not None or accepts_any(base):
        return None
    base = _resolve_supertype(base)
    if is_record_type(base):
        return new_record(base)
    origin = get_origin(base) or base
    if origin in _MAPPING_ORIGINS:
        return {}
    if origin is tuple:
        return ()
    if origin in _SEQUENCE_ORIGINS:
        return []
    if get_origin(base) is not None or not isinstance(base, type) or issubclass(base, enum.Enum):
        return None
    try:
        return base()
    except TypeError:
        return None


def new_record(record_type: type) -> Any:
    """Instantiate *record_type*, filling fields that lack defaults with zero values.

    Examples
    --------
    >>> @dataclass
    ... class Endpoint:
    ...     host: str
    ...     port: int
    ...     tls: bool = True
    >>> new_record(Endpoint)
    Endpoint(host='', port=0, tls=True)
    """

    hints = _resolve_hints(record_type)
    kwargs: dict[str, Any] = {}
    for item in dataclasses.fields(record_type):
        if not item.init:
            continue
        if item.default is dataclasses.MISSING and item.default_factory is dataclasses.MISSING:
            kwargs[item.name] = zero_value(hints.get(item.name, Any))
    return record_type(**kwargs)


def _resolve_supertype(annotation: Any) -> Any:
    """Follow ``typing.NewType`` chains down to the runtime class."""

    while hasattr(annotation, "__supertype__"):
        annotation = annotation.__supertype__
    return annotation


def _resolve_hints(record_type: type) -> dict[str, Any]:
    """Resolve string annotations of *record_type*, keeping ``Annotated`` metadata."""

    try:
        return typing.get_type_hints(record_type, include_extras=True)
    except (NameError, TypeError) as exc:
        raise UnsupportedKind(f"cannot resolve annotations of {record_type.__name__}: {exc}") from exc


__all__ = [
    "Kind",
    "FieldSpec",
    "RecordSchema",
    "normalize",
    "describe",
    "classify",
    "type_name",
    "split_annotated",
    "unwrap_optional",
    "strip_optional",
    "container_items",
    "is_tuple_sequence",
    "is_record_type",
    "is_string_type",
    "accepts_any",
    "zero_value",
    "new_record",
]
