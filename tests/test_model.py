from __future__ import annotations

import dataclasses
import logging

import pytest

from otalink.core.errors import ConfigurationError, PayloadError
from otalink.core.model import (
    PAYLOAD_MAX_SIZE,
    ConfigurationProfile,
    Parity,
    PayloadKind,
    TransactionRequest,
)


def test_defaults_fill_unspecified_fields() -> None:
    profile = ConfigurationProfile(port=4)
    assert profile.port == 4
    assert profile.flash_page_size == 1024
    assert profile.bootloader_pages == 34
    assert profile.application_pages == 86
    assert profile.baud_rate == 115200
    assert profile.data_bits == 8
    assert profile.parity is Parity.NONE
    assert profile.stop_bits == 1
    assert profile.flow_control is False
    assert profile.send_delay_us == 1000
    assert profile.poll_delay_us == 500000
    assert profile.retry_delay_us == 9000000
    assert profile.bluetooth_address is None
    assert profile.connect_timeout_us == 11000000


def test_build_only_replaces_given_fields() -> None:
    profile = ConfigurationProfile.build(port=3, baud_rate=9600, parity="E", stop_bits=None)
    assert profile.baud_rate == 9600
    assert profile.parity is Parity.EVEN
    assert profile.stop_bits == 1
    assert profile.data_bits == 8


def test_all_enumerated_combinations_are_accepted() -> None:
    for data_bits in (5, 6, 7, 8):
        for parity in Parity:
            for stop_bits in (1, 2):
                profile = ConfigurationProfile(port=1, data_bits=data_bits, parity=parity, stop_bits=stop_bits)
                assert (profile.data_bits, profile.parity, profile.stop_bits) == (data_bits, parity, stop_bits)


@pytest.mark.parametrize(
    "field, value",
    [
        ("data_bits", 9),
        ("data_bits", 4),
        ("parity", "mark"),
        ("stop_bits", 3),
        ("stop_bits", 0),
        ("port", 0),
        ("baud_rate", 0),
        ("flash_page_size", -1),
        ("send_delay_us", -5),
        ("connect_timeout_us", -1),
        ("flow_control", 1),
    ],
)
def test_invalid_values_rejected(field: str, value: object) -> None:
    with pytest.raises(ConfigurationError):
        ConfigurationProfile.build(port=1, **{field: value})


def test_unknown_field_rejected() -> None:
    with pytest.raises(ConfigurationError):
        ConfigurationProfile.build(port=1, baudrate=9600)


def test_profile_is_immutable() -> None:
    profile = ConfigurationProfile(port=1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        profile.baud_rate = 9600  # type: ignore[misc]


def test_with_overrides_returns_copy() -> None:
    base = ConfigurationProfile(port=1)
    changed = base.with_overrides(baud_rate=9600, parity=None)
    assert base.baud_rate == 115200
    assert changed.baud_rate == 9600
    assert changed.parity is Parity.NONE


@pytest.mark.parametrize("address", ["0017EA09090", "0017EA0909090", "", "ZZ17EA090909"])
def test_malformed_bluetooth_address_rejected(address: str) -> None:
    with pytest.raises(ConfigurationError):
        ConfigurationProfile(port=1, bluetooth_address=address)


def test_bluetooth_address_normalized() -> None:
    profile = ConfigurationProfile(port=1, bluetooth_address="00:17:ea:09:09:09", connect_timeout_us=3000000)
    assert profile.bluetooth_address == "0017EA090909"


def test_connect_timeout_outside_range_only_warns(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="otalink.core.model"):
        profile = ConfigurationProfile(port=1, bluetooth_address="0017EA090909", connect_timeout_us=20_000_000)
    assert profile.connect_timeout_us == 20_000_000
    assert "recommended range" in caplog.text


def test_request_validation() -> None:
    request = TransactionRequest(kind=2, payload="hello", timeout_s=5)
    assert request.kind is PayloadKind.CUSTOM_DATA

    with pytest.raises(PayloadError):
        TransactionRequest(kind=PayloadKind.CUSTOM_DATA, payload="", timeout_s=5)
    with pytest.raises(PayloadError):
        TransactionRequest(kind=PayloadKind.APPLICATION_IMAGE, payload="a.bin", timeout_s=0)
    with pytest.raises(PayloadError):
        TransactionRequest(kind=7, payload="a.bin", timeout_s=5)
    with pytest.raises(PayloadError):
        TransactionRequest(kind=PayloadKind.CUSTOM_DATA, payload="x" * (PAYLOAD_MAX_SIZE + 1), timeout_s=5)


def test_payload_limit_leaves_room_for_terminator() -> None:
    request = TransactionRequest(kind=PayloadKind.CUSTOM_DATA, payload="x" * (PAYLOAD_MAX_SIZE - 1), timeout_s=5)
    assert len(request.payload) == 20479

    with pytest.raises(PayloadError, match="20480 bytes"):
        TransactionRequest(kind=PayloadKind.CUSTOM_DATA, payload="x" * PAYLOAD_MAX_SIZE, timeout_s=5)


def test_payload_limit_counts_encoded_bytes() -> None:
    TransactionRequest(kind=PayloadKind.CUSTOM_DATA, payload="é" * 10239, timeout_s=5)

    with pytest.raises(PayloadError):
        TransactionRequest(kind=PayloadKind.CUSTOM_DATA, payload="é" * 10240, timeout_s=5)
