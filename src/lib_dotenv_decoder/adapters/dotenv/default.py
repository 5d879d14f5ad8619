"""`.env` adapter.

Purpose
-------
Turn ``.env`` text into the flat ``str`` → ``str`` mapping the assignment
engine consumes, and discover ``.env`` files on disk. Tokenising (quoting,
comments, ``export`` prefixes, multi-line values, ``${VAR}`` expansion) is left
to ``python-dotenv``; this module adds strictness and keeps
single-quoted values literal.

Contents
--------
* :func:`parse_dotenv` – strict parser raising :class:`InvalidFormat`.
* :class:`DotEnvFileSource` – upward ``.env`` discovery with optional extras.
* :func:`_iter_candidates` – yields ``.env`` paths from a directory to the root.

System Role
-----------
Feeds :func:`lib_dotenv_decoder.core.decode_mapping`. Keys are returned
untouched; case folding happens only during field matching.
"""

from __future__ import annotations

import io
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Iterable

from dotenv.parser import parse_stream
from dotenv.variables import parse_variables

from ...domain.errors import InvalidFormat
from ...observability import log_debug, log_error


def parse_dotenv(data: bytes | str, *, interpolate: bool = True, source: str | None = None) -> dict[str, str]:
    """Parse ``.env`` *data* into a flat mapping, raising ``InvalidFormat`` on malformed lines.

    Why
    ----
    ``python-dotenv`` skips unparsable lines with a warning; a decoder that
    silently drops configuration is worse than one that refuses it.

    Parameters
    ----------
    data:
        Raw file contents (``bytes`` are decoded as UTF-8, BOM tolerated).
    interpolate:
        Expand ``${VAR}`` references against earlier keys and ``os.environ``.
        Single-quoted values are kept literal.
    source:
        Path used in error messages and log events.

    Examples
    --------
    >>> parse_dotenv(b"# comment\\nDB_HOST=localhost\\nexport DB_PORT='5432'\\n")
    {'DB_HOST': 'localhost', 'DB_PORT': '5432'}
    >>> parse_dotenv("BASE=/srv\\nDATA_DIR=${BASE}/data\\n")["DATA_DIR"]
    '/srv/data'
    >>> parse_dotenv("BASE=/srv\\nRAW='${BASE}'\\n")["RAW"]
    '${BASE}'
    >>> parse_dotenv("FLAG\\n")
    Traceback (most recent call last):
    ...
    lib_dotenv_decoder.domain.errors.InvalidFormat: Missing '=' for key 'FLAG' on line 1 in <input>
    """

    text = _decode_text(data, source)
    label = source or "<input>"
    values: dict[str, str] = {}
    for binding in parse_stream(io.StringIO(text)):
        line = binding.original.line
        if binding.error:
            log_error("dotenv_invalid_line", source="dotenv", path=source, line=line)
            raise InvalidFormat(f"Malformed line {line} in {label}")
        if binding.key is None:
            continue
        if binding.value is None:
            log_error("dotenv_invalid_line", source="dotenv", path=source, line=line)
            raise InvalidFormat(f"Missing '=' for key {binding.key!r} on line {line} in {label}")
        if interpolate and not _is_single_quoted(binding.original.string):
            values[binding.key] = _expand(binding.value, values)
        else:
            values[binding.key] = binding.value

    log_debug("dotenv_parsed", source="dotenv", path=source, keys=sorted(values))
    return values


class DotEnvFileSource:
    """Locate and parse the nearest ``.env`` file.

    Why
    ----
    Projects keep developer overrides in a ``.env`` next to (or above) the
    working directory; discovery must be deterministic.
    """

    def __init__(self, *, extras: Iterable[str] | None = None, interpolate: bool = True) -> None:
        """Initialise the source with optional *extras* searched after the upward walk.

        Parameters
        ----------
        extras:
            Additional file paths appended to the search order.
        interpolate:
            Forwarded to :func:`parse_dotenv`.
        """

        self._extras = [Path(p) for p in extras or []]
        self._interpolate = interpolate
        self.last_loaded_path: str | None = None

    def load(self, start_dir: str | None = None) -> Mapping[str, str]:
        """Return the first parsed ``.env`` file discovered in the search order.

        Side Effects
        ------------
        Sets :attr:`last_loaded_path` and emits structured logging events.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> path = Path(tmp.name) / '.env'
        >>> _ = path.write_text('SERVICE_TOKEN=secret', encoding='utf-8')
        >>> source = DotEnvFileSource()
        >>> source.load(tmp.name)["SERVICE_TOKEN"]
        'secret'
        >>> source.last_loaded_path == str(path)
        True
        >>> tmp.cleanup()
        """

        candidates = list(_iter_candidates(start_dir)) + self._extras
        self.last_loaded_path = None
        for candidate in candidates:
            if candidate.is_file():
                return self.load_path(candidate)
        log_debug("dotenv_not_found", source="dotenv", path=None)
        return {}

    def load_path(self, path: str | Path) -> Mapping[str, str]:
        """Parse the ``.env`` file at *path* regardless of the search order."""

        file_path = Path(path)
        try:
            payload = file_path.read_bytes()
        except OSError as exc:
            raise InvalidFormat(f"Cannot read {file_path}: {exc}") from exc
        self.last_loaded_path = str(file_path)
        data = parse_dotenv(payload, interpolate=self._interpolate, source=self.last_loaded_path)
        log_debug("dotenv_loaded", source="dotenv", path=self.last_loaded_path, keys=len(data))
        return data


def _iter_candidates(start_dir: str | None) -> Iterable[Path]:
    """Yield candidate ``.env`` paths walking from ``start_dir`` to the filesystem root.

    Examples
    --------
    >>> next(_iter_candidates('.')).name
    '.env'
    """

    base = Path(start_dir) if start_dir else Path.cwd()
    for directory in [base, *base.parents]:
        yield directory / ".env"


def _decode_text(data: bytes | str, source: str | None) -> str:
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        log_error("dotenv_invalid_encoding", source="dotenv", path=source, error=str(exc))
        raise InvalidFormat(f"{source or '<input>'} is not valid UTF-8: {exc}") from exc


_SINGLE_QUOTED_VALUE = re.compile(r"\s*(?:export\s+)?(?:'[^']*'|[^=#\s]+)\s*=[^\S\r\n]*'")


def _is_single_quoted(line: str) -> bool:
    """Return ``True`` when the binding's value is written in single quotes."""

    return _SINGLE_QUOTED_VALUE.match(line) is not None


def _expand(value: str, earlier: Mapping[str, str]) -> str:
    """Resolve ``${VAR}`` / ``${VAR:-default}`` against *earlier* keys, then ``os.environ``."""

    env: dict[str, str] = dict(os.environ)
    env.update(earlier)
    return "".join(atom.resolve(env) for atom in parse_variables(value))
