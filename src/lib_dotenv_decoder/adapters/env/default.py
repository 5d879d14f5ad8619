"""Environment variable adapter.

Purpose
-------
Expose process environment variables as the same flat ``str`` → ``str``
mapping a parsed ``.env`` file produces, so one decoder can fill a record from
either source.

Key behaviours
--------------
* Enforces a prefix (``default_env_prefix``) so only relevant keys are captured.
* Strips the prefix and leaves the remaining key untouched; nesting is resolved
  later by the assignment engine, not here.
* Emits structured logging via :mod:`lib_dotenv_decoder.observability`.
"""

from __future__ import annotations

import os
from typing import Mapping

from ...observability import log_debug


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('billing-service')
    'BILLING_SERVICE'
    """

    return slug.replace("-", "_").upper()


class EnvironSource:
    """Collect environment variables that belong to the decoding namespace."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the source with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        """

        self._environ = environ if environ is not None else os.environ

    def load(self, prefix: str) -> dict[str, str]:
        """Return variables starting with *prefix*, with the prefix removed.

        Parameters
        ----------
        prefix:
            Prefix filter, matched case-sensitively. ``_`` is appended if
            missing; an empty prefix captures every variable.

        Examples
        --------
        >>> source = EnvironSource(environ={
        ...     'DEMO_DATABASE_PORT': '5432',
        ...     'DEMO_TAGS_Team': 'core',
        ...     'OTHER': 'ignored',
        ... })
        >>> source.load('DEMO')
        {'DATABASE_PORT': '5432', 'TAGS_Team': 'core'}
        """

        prefix = f"{prefix}_" if prefix and not prefix.endswith("_") else prefix
        collected: dict[str, str] = {}
        for key, value in self._environ.items():
            if prefix and not key.startswith(prefix):
                continue
            stripped = key[len(prefix) :] if prefix else key
            if not stripped:
                continue
            collected[stripped] = value
        log_debug("env_variables_loaded", source="env", path=None, keys=sorted(collected))
        return collected
