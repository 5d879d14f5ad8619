from __future__ import annotations

from types import MappingProxyType

import pytest

from lib_dotenv_decoder.application.access import force_set
from lib_dotenv_decoder.application.assign import assign_value
from lib_dotenv_decoder.domain.errors import (
    CoercionError,
    DescendError,
    InaccessibleField,
    MappingKeyTypeError,
    SequenceIndexError,
)
from tests.support import AppSettings, Credentials, IntKeyed, Replica


def test_tuple_sequence_is_rebuilt() -> None:
    record = AppSettings()
    assign_value(record, ["PORTS", "1"], "443")
    assert record.ports == (0, 443)
    assign_value(record, ["PORTS", "0"], "80")
    assert record.ports == (80, 443)
    assert isinstance(record.ports, tuple)


def test_optional_sequence_elements_pad_with_none() -> None:
    record = AppSettings()
    assign_value(record, ["WEIGHTS", "2"], "0.25")
    assert record.weights == [None, None, 0.25]


def test_record_elements_are_allocated_and_entered() -> None:
    record = AppSettings()
    assign_value(record, "DATABASE_REPLICAS_1_PORT".split("_"), "5433")
    assert record.database.replicas == [Replica(), Replica(port=5433)]
    assert record.database.replicas[0] is not record.database.replicas[1]


def test_optional_record_elements_are_allocated_on_descent() -> None:
    record = AppSettings()
    assign_value(record, "DATABASE_STANDBY_1_HOST".split("_"), "standby-b")
    assert record.database.standby == [None, Replica(host="standby-b")]


def test_growth_keeps_existing_elements() -> None:
    record = AppSettings(hosts=["a"])
    original = record.hosts
    assign_value(record, ["HOSTS", "3"], "d")
    assert record.hosts is original
    assert record.hosts == ["a", "", "", "d"]


@pytest.mark.parametrize("index", ["x", "-1", "1a", "+1"])
def test_malformed_sequence_index(index: str) -> None:
    with pytest.raises(SequenceIndexError, match="cannot parse sequence index"):
        assign_value(AppSettings(), ["HOSTS", index], "v")


def test_scalar_sequence_element_cannot_descend() -> None:
    with pytest.raises(DescendError, match="sequence element kind scalar"):
        assign_value(AppSettings(), ["HOSTS", "0", "NAME"], "v")


def test_sequence_element_coercion_failure() -> None:
    with pytest.raises(CoercionError, match="as uint16"):
        assign_value(AppSettings(), "DATABASE_REPLICAS_0_PORT".split("_"), "-1")


def test_any_valued_mapping_stores_raw_string() -> None:
    record = AppSettings()
    assert record.labels is None
    assign_value(record, ["LABELS", "Env"], "007")
    assert record.labels == {"Env": "007"}


def test_mapping_values_are_coerced() -> None:
    record = AppSettings()
    assign_value(record, ["LIMITS", "cpu"], "4")
    assert record.limits == {"cpu": 4}
    with pytest.raises(CoercionError):
        assign_value(record, ["LIMITS", "mem"], "lots")


def test_read_only_mapping_is_copied_before_write() -> None:
    record = AppSettings(tags=MappingProxyType({"a": "1"}))  # type: ignore[arg-type]
    assign_value(record, ["TAGS", "b"], "2")
    assert record.tags == {"a": "1", "b": "2"}
    assert isinstance(record.tags, dict)


def test_non_string_mapping_keys_are_rejected() -> None:
    with pytest.raises(MappingKeyTypeError, match="only string keys allowed"):
        assign_value(IntKeyed(), ["CODES", "404"], "not found")


def test_optional_record_descends_with_same_leftover() -> None:
    record = AppSettings()
    assign_value(record, "DATABASE_CREDENTIALS_USER".split("_"), "admin")
    assert record.database.credentials == Credentials(user="admin")


def test_optional_scalar_cannot_descend() -> None:
    with pytest.raises(DescendError, match="cannot descend"):
        assign_value(AppSettings(), ["WEIGHTS", "0", "X"], "1")


def test_force_set_on_non_writable_instance() -> None:
    with pytest.raises(InaccessibleField, match="not writable"):
        force_set(42, "real", 1.0)
