"""Field resolution by normalised name or declared type name."""

from __future__ import annotations

from ..domain.schema import FieldSpec, RecordSchema, normalize


def find_field(schema: RecordSchema, candidate: str) -> FieldSpec | None:
    """Return the field addressed by the normalised *candidate* prefix.

    Field names are tried first, in declaration order; declared type names
    second, so a field can also be addressed by its type. The two lookups are
    separate passes: a later field whose name matches beats an earlier field
    whose type name matches, rather than the first field matching either way.
    ``None`` means "try a shorter prefix", not an error.

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> from lib_dotenv_decoder.domain.schema import describe
    >>> @dataclass
    ... class Settings:
    ...     db_host: str = ""
    ...     dbHost: str = ""
    >>> find_field(describe(Settings), normalize("DB_HOST")).name
    'db_host'
    >>> find_field(describe(Settings), "str").name
    'db_host'
    >>> find_field(describe(Settings), "port") is None
    True
    """

    if not candidate:
        return None
    for spec in schema.fields:
        if normalize(spec.name) == candidate:
            return spec
    for spec in schema.fields:
        if spec.type_name and normalize(spec.type_name) == candidate:
            return spec
    return None
