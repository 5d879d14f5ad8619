"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts the composition root relies on so that
format decoders and flat key/value sources can be swapped without touching the
assignment engine.

Contents
--------
* :class:`Decoder` – a named format decoder filling a record from raw bytes.
* :class:`DotEnvSource` – discovers and parses a ``.env`` file.
* :class:`EnvSource` – exposes process environment variables as a flat mapping.

System Role
-----------
These protocols enforce Dependency Inversion (DIP). Each adapter implements one
protocol; contract tests check them with ``isinstance``.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class Decoder(Protocol):
    """Decode a serialised payload into a caller-owned record.

    Why
    ----
    Configuration front-ends register decoders by :attr:`format` and call
    :meth:`unmarshal` without knowing the text syntax involved.
    """

    @property
    def format(self) -> str:
        """Short format identifier (``"env"``)."""

    def unmarshal(self, data: bytes | str, target: Any) -> None:
        """Parse *data* and assign every recognised key into *target*."""


@runtime_checkable
class DotEnvSource(Protocol):
    """Materialise the nearest ``.env`` file as a flat mapping."""

    def load(self, start_dir: str | None = None) -> Mapping[str, str]:
        """Search from *start_dir* upwards (plus extras) and return the first parsed file."""


@runtime_checkable
class EnvSource(Protocol):
    """Expose environment variables carrying a prefix as a flat mapping."""

    def load(self, prefix: str) -> Mapping[str, str]:
        """Return variables that start with *prefix*, prefix removed."""
