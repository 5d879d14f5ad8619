"""Composition root for ``lib_dotenv_decoder``.

Purpose
-------
Provide the entry points that validate the destination, obtain a flat
key/value mapping (from ``.env`` bytes, a discovered ``.env`` file, or the
process environment) and feed every pair into the path assignment engine.

Contents
--------
* :class:`Decoder` – format decoder (``format == "env"``) with :meth:`Decoder.unmarshal`.
* :func:`unmarshal` – decode ``.env`` bytes/text into a dataclass instance.
* :func:`decode_mapping` – decode an already-parsed flat mapping.
* :func:`decode_as` – build a zero-valued instance of a dataclass type and fill it.
* :func:`load_dotenv_into` – discover the nearest ``.env`` file and decode it.
* :func:`decode_environ` – decode prefixed environment variables.

System Role
-----------
Connects the adapters with the application layer while emitting structured
observability signals. Per-key failures are wrapped in :class:`KeyDecodeError`;
the first failure aborts the call.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Mapping, TypeVar

from .adapters.dotenv.default import DotEnvFileSource, parse_dotenv
from .adapters.env.default import EnvironSource, default_env_prefix
from .application.assign import assign_value
from .domain.errors import DotEnvDecodeError, InvalidDestination, KeyDecodeError
from .domain.schema import is_record_type, new_record
from .observability import log_debug, log_error, log_info, make_event

T = TypeVar("T")

FORMAT_NAME = "env"


class Decoder:
    """Decode ``.env`` payloads into caller-owned dataclass instances.

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Settings:
    ...     db_host: str = ""
    ...     debug: bool = False
    >>> settings = Settings()
    >>> decoder = Decoder()
    >>> decoder.format
    'env'
    >>> decoder.unmarshal(b"DB_HOST=db.internal\\nDEBUG=true\\nUNRELATED=1\\n", settings)
    >>> settings
    Settings(db_host='db.internal', debug=True)
    """

    def __init__(self, *, interpolate: bool = True) -> None:
        self._interpolate = interpolate

    @property
    def format(self) -> str:
        return FORMAT_NAME

    def unmarshal(self, data: bytes | str, target: Any) -> None:
        """Parse *data* as ``.env`` text and assign every recognised key into *target*.

        Raises
        ------
        InvalidDestination
            When *target* is not a dataclass instance; nothing is parsed.
        InvalidFormat
            When the text cannot be tokenised; no key is applied.
        KeyDecodeError
            For the first key whose value cannot be placed.
        """

        _ensure_destination(target)
        flat = parse_dotenv(data, interpolate=self._interpolate)
        _decode(flat, target, source="dotenv", path=None)


def unmarshal(data: bytes | str, target: Any, *, interpolate: bool = True) -> None:
    """Decode ``.env`` *data* into *target* using a default :class:`Decoder`."""

    Decoder(interpolate=interpolate).unmarshal(data, target)


def decode_mapping(flat: Mapping[str, str], target: Any) -> None:
    """Assign every pair of the already-parsed *flat* mapping into *target*.

    Examples
    --------
    >>> from dataclasses import dataclass, field
    >>> @dataclass
    ... class Cluster:
    ...     nodes: list[str] = field(default_factory=list)
    >>> cluster = Cluster()
    >>> decode_mapping({"NODES_2": "c"}, cluster)
    >>> cluster.nodes
    ['', '', 'c']
    """

    _ensure_destination(target)
    _decode(flat, target, source="mapping", path=None)


def decode_as(record_type: type[T], data: bytes | str, *, interpolate: bool = True) -> T:
    """Return a new zero-valued *record_type* instance filled from ``.env`` *data*.

    Fields without defaults start from their zero value (``""``, ``0``,
    ``None``, empty containers, nested zero records).
    """

    if not is_record_type(record_type):
        raise InvalidDestination(f"record_type must be a dataclass type, got {record_type!r}")
    target = new_record(record_type)
    unmarshal(data, target, interpolate=interpolate)
    return target


def load_dotenv_into(
    target: Any,
    *,
    start_dir: str | None = None,
    extras: Iterable[str] | None = None,
    interpolate: bool = True,
) -> str | None:
    """Decode the nearest ``.env`` file into *target* and return its path.

    Returns ``None`` (leaving *target* untouched) when no file is found.
    """

    _ensure_destination(target)
    source = DotEnvFileSource(extras=extras, interpolate=interpolate)
    flat = source.load(start_dir)
    if source.last_loaded_path is None:
        return None
    _decode(flat, target, source="dotenv", path=source.last_loaded_path)
    return source.last_loaded_path


def decode_environ(target: Any, prefix: str, *, environ: Mapping[str, str] | None = None) -> None:
    """Decode environment variables named ``<prefix>_<KEY>`` into *target*.

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Worker:
    ...     concurrency: int = 1
    >>> worker = Worker()
    >>> decode_environ(worker, "APP", environ={"APP_CONCURRENCY": "8"})
    >>> worker.concurrency
    8
    """

    _ensure_destination(target)
    flat = EnvironSource(environ=environ).load(prefix)
    _decode(flat, target, source="env", path=None)


def _ensure_destination(target: Any) -> None:
    """Reject anything but a dataclass instance before any key is processed."""

    if target is None or isinstance(target, type) or not dataclasses.is_dataclass(target):
        raise InvalidDestination(f"target must be a dataclass instance, got {type(target).__name__}")


def _decode(flat: Mapping[str, str], target: Any, *, source: str, path: str | None) -> None:
    """Feed each pair of *flat* into the engine, wrapping failures with the key."""

    assigned = 0
    ignored = 0
    for raw_key, raw_value in flat.items():
        parts = raw_key.split("_")
        if not parts:
            continue
        try:
            placed = assign_value(target, parts, raw_value)
        except DotEnvDecodeError as exc:
            log_error("decode_failed", **make_event(source, path, {"key": raw_key, "error": str(exc)}))
            raise KeyDecodeError(raw_key, exc) from exc
        if placed:
            assigned += 1
            log_debug("key_assigned", **make_event(source, path, {"key": raw_key}))
        else:
            ignored += 1
            log_debug("key_ignored", **make_event(source, path, {"key": raw_key}))
    log_info(
        "decode_completed",
        **make_event(source, path, {"record": type(target).__name__, "assigned": assigned, "ignored": ignored}),
    )


__all__ = [
    "Decoder",
    "FORMAT_NAME",
    "unmarshal",
    "decode_mapping",
    "decode_as",
    "load_dotenv_into",
    "decode_environ",
    "default_env_prefix",
]
