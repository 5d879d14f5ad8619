"""Behavioural tests for the path assignment engine.

Each test feeds ``_``-split key segments into :func:`assign_value` against the
shared schemas in :mod:`tests.support` and inspects the mutated record.
"""

from __future__ import annotations

import copy
from datetime import timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_dotenv_decoder.application.assign import assign_value
from lib_dotenv_decoder.domain.errors import CoercionError, DescendError, UnsupportedKind
from lib_dotenv_decoder.domain.schema import new_record
from tests.support import AppSettings, Inner, Letters, Outer, Retry, Secrets, Shadowed, TieBreak

FLAT = {
    "NAME": "billing",
    "DEBUG": "true",
    "DATABASE_HOST": "db.internal",
    "DATABASE_PORT": "6543",
    "DATABASE_TIMEOUT": "45s",
    "DATABASE_REPLICAS_1_HOST": "replica-b",
    "OUTER_INNER_PORT": "8080",
    "RETRY_ATTEMPTS": "5",
    "TAGS_Team": "core",
    "HOSTS_2": "c",
    "UNKNOWN_KEY": "ignored",
}


def _split(key: str) -> list[str]:
    return key.split("_")


def _decode(flat: dict[str, str]) -> AppSettings:
    record = AppSettings()
    for key, raw in flat.items():
        assign_value(record, _split(key), raw)
    return record


@pytest.mark.parametrize("key", ["DB_HOST", "dbhost", "Db_Host", "DBHOST", "d_b_h_o_s_t"])
def test_normalised_spellings_reach_the_same_field(key: str) -> None:
    record = TieBreak()
    assert assign_value(record, _split(key), "db.internal") is True
    assert record.db_host == "db.internal"


def test_longer_field_name_shadows_nested_path() -> None:
    record = Shadowed()
    assert assign_value(record, ["A", "B"], "flat") is True
    assert record == Shadowed(a=Letters(b=""), ab="flat")


def test_shadowed_nested_field_reachable_by_type_name() -> None:
    record = Shadowed()
    assert assign_value(record, ["LETTERS", "B"], "nested") is True
    assert record == Shadowed(a=Letters(b="nested"), ab="")


def test_scalar_field_with_leftover_cannot_descend() -> None:
    record = Shadowed()
    with pytest.raises(DescendError, match="cannot descend into field 'ab'"):
        assign_value(record, ["AB", "X"], "v")
    assert record == Shadowed()


def test_unknown_key_leaves_record_unchanged() -> None:
    record = AppSettings()
    snapshot = copy.deepcopy(record)
    assert assign_value(record, ["NOT", "A", "FIELD"], "v") is False
    assert record == snapshot


def test_unknown_key_below_existing_record_is_ignored() -> None:
    record = AppSettings()
    snapshot = copy.deepcopy(record)
    assert assign_value(record, ["DATABASE", "NOPE"], "v") is False
    assert record == snapshot


def test_empty_segment_list_is_a_no_op() -> None:
    assert assign_value(AppSettings(), [], "v") is False


def test_decoding_twice_into_fresh_records_is_idempotent() -> None:
    assert _decode(FLAT) == _decode(FLAT)


@given(st.permutations(sorted(FLAT)))
def test_key_order_does_not_change_the_result(order: list[str]) -> None:
    assert _decode({key: FLAT[key] for key in order}) == _decode(FLAT)


def test_sequence_growth_pads_with_zero_values() -> None:
    record = AppSettings()
    assert assign_value(record, ["HOSTS", "2"], "c") is True
    assert record.hosts == ["", "", "c"]
    assign_value(record, ["HOSTS", "0"], "a")
    assert record.hosts == ["a", "", "c"]


def test_mapping_key_keeps_case_and_separators() -> None:
    record = AppSettings()
    assert assign_value(record, ["TAGS", "Foo", "Bar"], "v") is True
    assert record.tags == {"Foo_Bar": "v"}


def test_deep_path_allocates_optional_inner_record() -> None:
    record = AppSettings()
    assert record.outer.inner is None
    assert assign_value(record, _split("OUTER_INNER_PORT"), "8080") is True
    assert record.outer == Outer(inner=Inner(port=8080))


def test_existing_nested_storage_is_reused() -> None:
    record = AppSettings()
    inner = Inner(port=1)
    record.outer.inner = inner
    assign_value(record, _split("OUTER_INNER_PORT"), "2")
    assert record.outer.inner is inner
    assert inner.port == 2


def test_optional_record_allocated_on_first_key() -> None:
    record = AppSettings()
    assign_value(record, _split("RETRY_BACKOFF"), "250ms")
    assert record.retry == Retry(attempts=3, backoff=timedelta(milliseconds=250))


def test_coercion_failure_propagates() -> None:
    record = AppSettings()
    with pytest.raises(CoercionError, match="as int8: value out of range"):
        assign_value(record, _split("RETRY_ATTEMPTS"), "300")


def test_record_field_cannot_take_a_leaf_value() -> None:
    with pytest.raises(UnsupportedKind):
        assign_value(AppSettings(), ["DATABASE"], "x")


def test_frozen_record_fields_are_force_set() -> None:
    record = AppSettings()
    assert assign_value(record, _split("SECRETS_API_KEY"), "k-123") is True
    assert record.secrets == Secrets(api_key="k-123")


def test_private_field_is_force_set() -> None:
    record = AppSettings()
    assert assign_value(record, ["TOKEN"], "t0k") is True
    assert record._token == "t0k"


def test_named_and_width_scalars_from_keys() -> None:
    record = new_record(AppSettings)
    assign_value(record, ["REGION"], "eu-west")
    assign_value(record, ["RATIO"], "0.5")
    assign_value(record, ["SIGNAL"], "1+1j")
    assert (record.region, record.ratio, record.signal) == ("eu-west", 0.5, 1 + 1j)


SEGMENT = st.text(alphabet="abcXYZ", min_size=1, max_size=6)


@given(st.lists(SEGMENT, min_size=1, max_size=4), st.text(max_size=10))
def test_mapping_keys_round_trip_raw_segments(segments: list[str], value: str) -> None:
    record = AppSettings()
    assert assign_value(record, ["TAGS", *segments], value) is True
    assert record.tags == {"_".join(segments): value}
