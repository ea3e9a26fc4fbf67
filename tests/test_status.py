from __future__ import annotations

import pytest

from otalink.core.status import (
    DongleStatus,
    OtaStatus,
    decode_dongle_status,
    decode_ota_status,
    describe,
)


def test_every_ota_code_decodes_to_its_member() -> None:
    for code in range(26):
        assert decode_ota_status(str(code)) == OtaStatus(code)
        assert int(decode_ota_status(str(code))) == code


def test_ota_numbers_are_stable() -> None:
    assert OtaStatus.OK == 0
    assert OtaStatus.FAILED == 4
    assert OtaStatus.HEADER_NACK == 13
    assert OtaStatus.ABORT_LOOP_ERROR == 20
    assert OtaStatus.RADIO_CONNECT_ERROR == 25
    assert len(OtaStatus) == 26


def test_dongle_taxonomy_keeps_reserved_gaps() -> None:
    assert sorted(int(s) for s in DongleStatus) == [0, 1, 2, 3, 4, 5, 7, *range(21, 31)]
    assert DongleStatus.OPEN_PORT_ERROR == OtaStatus.OPEN_PORT_ERROR
    assert DongleStatus.RADIO_ROLE_ERROR == 27


def test_every_dongle_code_decodes_to_its_member() -> None:
    for status in DongleStatus:
        assert decode_dongle_status(str(int(status))) is status


@pytest.mark.parametrize("code", ["6", "8", "12", "20", "31"])
def test_reserved_dongle_codes_decode_to_failed(code: str) -> None:
    assert decode_dongle_status(code) is DongleStatus.FAILED


@pytest.mark.parametrize(
    "response",
    ["", "   ", "26", "-1", "abc", "0x0", "03", "+3", "1.0", "13 NACK", None],
)
def test_unknown_ota_responses_decode_to_failed(response: str | None) -> None:
    assert decode_ota_status(response) is OtaStatus.FAILED


def test_surrounding_whitespace_is_ignored() -> None:
    assert decode_ota_status("13\r\n") is OtaStatus.HEADER_NACK
    assert decode_dongle_status(" 27 ") is DongleStatus.RADIO_ROLE_ERROR


def test_taxonomies_are_not_interchangeable() -> None:
    assert decode_ota_status("27") is OtaStatus.FAILED
    assert decode_dongle_status("13") is DongleStatus.FAILED


def test_every_status_has_a_message() -> None:
    for status in [*OtaStatus, *DongleStatus]:
        assert describe(status) != status.name
    assert "NACK" in describe(OtaStatus.HEADER_NACK)
    assert "role" in describe(DongleStatus.RADIO_ROLE_ERROR)
