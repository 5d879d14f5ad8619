"""CLI adapter for ``lib_dotenv_decoder`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators check how a ``.env`` file (or a set of prefixed environment
variables) lands in an application's settings dataclass without writing
Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_normalize` – shows the matching form of a key.
* :func:`cli_env_prefix` – helper exposing :func:`lib_dotenv_decoder.core.default_env_prefix`.
* :func:`cli_decode` – decodes into ``module:Class`` and prints the result as JSON.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It calls the composition root and never
reaches into the assignment engine directly. ``lib_cli_exit_tools`` centralises
the exit code strategy so all commands behave consistently across shells.
"""

from __future__ import annotations

import dataclasses
import json
import sys
from datetime import timedelta
from importlib import import_module, metadata
from pathlib import Path
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.dotenv.default import DotEnvFileSource
from .core import decode_environ, decode_mapping, load_dotenv_into
from .core import default_env_prefix as _default_env_prefix
from .domain.schema import is_record_type, new_record, normalize

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when metadata is missing."""

    try:
        return metadata.version("lib_dotenv_decoder")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Decode .env files into nested dataclasses",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_dotenv_decoder",
    message="lib_dotenv_decoder version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_dotenv_decoder")
    except metadata.PackageNotFoundError:
        click.echo("lib_dotenv_decoder (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_dotenv_decoder')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("normalize", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
def cli_normalize(key: str) -> None:
    """Print the case- and underscore-insensitive form used to match *key*.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["normalize", "Db_Host"])
    >>> result.output.strip()
    'dbhost'
    """

    click.echo(normalize(key))


@cli.command("env-prefix", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("slug")
def cli_env_prefix(slug: str) -> None:
    """Compute the canonical environment prefix for *slug*."""

    click.echo(_default_env_prefix(slug))


@cli.command("decode", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--schema", "schema", required=True, help="Target dataclass as 'package.module:ClassName'")
@click.option(
    "--file",
    "file_path",
    type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
    default=None,
    help="Explicit .env file to decode (skips discovery)",
)
@click.option(
    "--env-prefix",
    "env_prefix",
    default=None,
    help="Decode environment variables carrying this prefix instead of a .env file",
)
@click.option(
    "--start-dir",
    type=click.Path(path_type=Path, exists=True, file_okay=False, dir_okay=True, readable=True),
    default=None,
    help="Starting directory for .env upward search (defaults to CWD)",
)
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
@click.option(
    "--interpolate/--no-interpolate",
    default=True,
    show_default=True,
    help="Expand ${VAR} references inside .env values",
)
def cli_decode(
    schema: str,
    file_path: Optional[Path],
    env_prefix: Optional[str],
    start_dir: Optional[Path],
    indent: Optional[int],
    interpolate: bool,
) -> None:
    """Decode into a zero-valued instance of ``--schema`` and print it as JSON.

    Durations are printed as seconds and complex numbers as strings.
    """

    if file_path is not None and env_prefix is not None:
        raise click.UsageError("--file and --env-prefix are mutually exclusive")
    record_type = _import_schema(schema)
    target = new_record(record_type)
    if env_prefix is not None:
        decode_environ(target, env_prefix)
    elif file_path is not None:
        decode_mapping(DotEnvFileSource(interpolate=interpolate).load_path(file_path), target)
    else:
        start_dir_str = str(start_dir) if start_dir is not None else None
        if load_dotenv_into(target, start_dir=start_dir_str, interpolate=interpolate) is None:
            click.echo("no .env file found; printing zero values", err=True)
    click.echo(json.dumps(dataclasses.asdict(target), indent=indent, separators=(",", ":"), default=_json_default))


def _import_schema(reference: str) -> type:
    """Import the dataclass named by ``package.module:ClassName``."""

    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise click.BadParameter("expected 'package.module:ClassName'", param_hint="--schema")
    try:
        module = import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(f"cannot import {module_name!r}: {exc}", param_hint="--schema") from exc
    candidate: Any = module
    for part in attribute.split("."):
        candidate = getattr(candidate, part, None)
    if not is_record_type(candidate):
        raise click.BadParameter(f"{reference!r} is not a dataclass type", param_hint="--schema")
    return candidate


def _json_default(value: Any) -> Any:
    """Serialise values ``json`` cannot represent natively."""

    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, complex):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_dotenv_decoder",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
