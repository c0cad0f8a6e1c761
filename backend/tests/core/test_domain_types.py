"""Domain Types — tests for enums and constants shared across the registry."""

from onsregistry.core.domain_types import (
    EntityType, EventKind, MAX_KEY_BYTES, MAX_RECORD_FLAGS, RecordFlag,
)


def test_record_flags_fit_in_one_byte():
    assert MAX_RECORD_FLAGS == 255
    assert all(0 <= f <= MAX_RECORD_FLAGS for f in RecordFlag)


def test_terminal_flag_values():
    assert RecordFlag.NON_TERMINAL == 0
    assert RecordFlag.TERMINAL == 1


def test_keys_are_32_bytes_wide():
    assert MAX_KEY_BYTES == 32


def test_enums_serialize_as_strings():
    assert EventKind.GS1_CODE_CREATED.value == "gs1_code_created"
    assert EntityType.ONS_RECORD.value == "ONS record"
