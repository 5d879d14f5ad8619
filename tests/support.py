"""Shared dataclass schemas used across the unit, adapter, and end-to-end suites.

The schemas live at module level so ``typing.get_type_hints`` can resolve their
string annotations, and so the CLI can import them as ``tests.support:AppSettings``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, NewType

from lib_dotenv_decoder import Complex64, Float32, Int8, UInt16

Hostname = NewType("Hostname", str)


class Region(str):
    """Named string subtype; decoded values keep the subtype."""


@dataclass
class Credentials:
    user: str = ""
    password: str = ""


@dataclass
class Replica:
    host: str = ""
    port: UInt16 = 0


@dataclass
class Database:
    host: Hostname = Hostname("")
    port: UInt16 = 5432
    credentials: Credentials | None = None
    replicas: list[Replica] = field(default_factory=list)
    standby: list[Replica | None] = field(default_factory=list)
    timeout: timedelta = timedelta(seconds=30)


@dataclass
class Inner:
    port: int = 0


@dataclass
class Outer:
    inner: Inner | None = None


@dataclass
class Retry:
    attempts: Int8 = 3
    backoff: timedelta = timedelta(0)


@dataclass(frozen=True)
class Secrets:
    api_key: str = ""


@dataclass
class AppSettings:
    name: str = ""
    debug: bool = False
    region: Region = Region("")
    ratio: Float32 = 0.0
    signal: Complex64 = 0j
    database: Database = field(default_factory=Database)
    outer: Outer = field(default_factory=Outer)
    retry: Retry | None = None
    tags: dict[str, str] = field(default_factory=dict)
    labels: dict[str, Any] | None = None
    limits: dict[str, int] = field(default_factory=dict)
    hosts: list[str] = field(default_factory=list)
    ports: tuple[int, ...] = ()
    weights: list[float | None] = field(default_factory=list)
    secrets: Secrets = field(default_factory=Secrets)
    _token: str = ""


@dataclass
class Letters:
    b: str = ""


@dataclass
class Shadowed:
    """``A_B`` normalises to ``ab`` at prefix length two before ``a`` is ever tried."""

    a: Letters = field(default_factory=Letters)
    ab: str = ""


@dataclass
class TieBreak:
    """Three fields whose names normalise to the same ``dbhost``."""

    db_host: str = ""
    dbhost: str = ""
    DBHost: str = ""


@dataclass
class Cache:
    size: int = 0


@dataclass
class NameBeatsType:
    primary: Cache = field(default_factory=Cache)
    cache: str = ""


@dataclass
class Port:
    number: int = 0


@dataclass
class TypeFirst:
    """An earlier field typed ``Port`` and a later field named ``port``."""

    primary: Port = field(default_factory=Port)
    port: str = ""


@dataclass
class ByTypeName:
    backend: Cache = field(default_factory=Cache)


@dataclass
class IntKeyed:
    codes: dict[int, str] = field(default_factory=dict)


@dataclass
class Required:
    host: str
    port: int
    inner: Inner
