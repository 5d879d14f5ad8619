"""Adapter contract tests for the default ports implementation.

Purpose
-------
Verify the default adapters continue to satisfy the application-layer ports
defined in ``src/lib_dotenv_decoder/application/ports.py`` so that dependency
inversion remains enforceable through automated tests.
"""

from __future__ import annotations

from pathlib import Path

from lib_dotenv_decoder import Decoder, default_env_prefix
from lib_dotenv_decoder.adapters.dotenv.default import DotEnvFileSource
from lib_dotenv_decoder.adapters.env.default import EnvironSource
from lib_dotenv_decoder.application import ports
from tests.support import AppSettings


def test_decoder_contract() -> None:
    """Decoder must fulfil the Decoder protocol and fill records in place."""

    decoder = Decoder()
    assert isinstance(decoder, ports.Decoder)
    assert decoder.format == "env"

    settings = AppSettings()
    decoder.unmarshal(b"NAME=contract\n", settings)
    assert settings.name == "contract"


def test_environ_source_contract() -> None:
    """EnvironSource should satisfy EnvSource and return raw string values."""

    prefix = default_env_prefix("demo")
    environ = {f"{prefix}_SERVICE_RETRIES": "3", "IRRELEVANT": "ignored"}
    source = EnvironSource(environ=environ)

    assert isinstance(source, ports.EnvSource)
    assert source.load(prefix) == {"SERVICE_RETRIES": "3"}


def test_dotenv_file_source_contract(tmp_path: Path) -> None:
    """DotEnvFileSource must parse the first discovered file."""

    (tmp_path / ".env").write_text("SERVICE_TIMEOUT=15s\n", encoding="utf-8")

    source = DotEnvFileSource()
    assert isinstance(source, ports.DotEnvSource)
    assert source.load(str(tmp_path)) == {"SERVICE_TIMEOUT": "15s"}
