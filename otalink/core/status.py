"""Status taxonomies reported by the OTA and dongle-provisioning engines.

The numbers cross a process boundary and must never change. The dongle
taxonomy leaves 6 and 8-20 unassigned so that shared codes line up with the
OTA taxonomy.
"""

from __future__ import annotations

import re
from enum import IntEnum
from typing import Generic, TypeVar


class OtaStatus(IntEnum):
    OK = 0
    STOPPED = 1
    NO_RESPONSE = 2
    NOT_APPLICABLE = 3
    FAILED = 4
    INVALID_ARGUMENTS = 5
    UNRECOGNIZED_PAYLOAD = 6
    OPEN_PORT_ERROR = 7
    OPEN_FILE_ERROR = 8
    READ_FILE_ERROR = 9
    START_SEND_ERROR = 10
    START_NACK = 11
    HEADER_SEND_ERROR = 12
    HEADER_NACK = 13
    DATA_SEND_ERROR = 14
    DATA_NACK = 15
    END_SEND_ERROR = 16
    END_NACK = 17
    ABORT_SEND_ERROR = 18
    ABORT_NACK = 19
    ABORT_LOOP_ERROR = 20
    RADIO_INIT_ERROR = 21
    RADIO_AT_COMMAND_ERROR = 22
    RADIO_TYPE_COMMAND_ERROR = 23
    RADIO_RESET_ERROR = 24
    RADIO_CONNECT_ERROR = 25


class DongleStatus(IntEnum):
    OK = 0
    STOPPED = 1
    NO_RESPONSE = 2
    NOT_APPLICABLE = 3
    FAILED = 4
    INVALID_ARGUMENTS = 5
    OPEN_PORT_ERROR = 7
    RADIO_INIT_ERROR = 21
    RADIO_AT_COMMAND_ERROR = 22
    RADIO_TYPE_COMMAND_ERROR = 23
    RADIO_RESET_ERROR = 24
    RADIO_CONNECT_ERROR = 25
    RADIO_RENEW_ERROR = 26
    RADIO_ROLE_ERROR = 27
    RADIO_IMMEDIATE_ERROR = 28
    RADIO_NOTIFY_ERROR = 29
    RADIO_MODE_ERROR = 30


_CODE_RE = re.compile(r"^(?:0|[1-9][0-9]*)$")

StatusT = TypeVar("StatusT", bound=IntEnum)


class StatusDecoder(Generic[StatusT]):
    """Map one engine response line onto a closed status enumeration."""

    def __init__(self, taxonomy: type[StatusT], failed: StatusT) -> None:
        self.taxonomy = taxonomy
        self.failed = failed
        self._table: dict[int, StatusT] = {int(member): member for member in taxonomy}

    def decode(self, response: str | None) -> StatusT:
        text = (response or "").strip()
        if not _CODE_RE.match(text):
            return self.failed
        return self._table.get(int(text), self.failed)


OTA_DECODER: StatusDecoder[OtaStatus] = StatusDecoder(OtaStatus, OtaStatus.FAILED)
DONGLE_DECODER: StatusDecoder[DongleStatus] = StatusDecoder(DongleStatus, DongleStatus.FAILED)


def decode_ota_status(response: str | None) -> OtaStatus:
    return OTA_DECODER.decode(response)


def decode_dongle_status(response: str | None) -> DongleStatus:
    return DONGLE_DECODER.decode(response)


_SHARED_MESSAGES: dict[str, str] = {
    "OK": "Completed successfully",
    "STOPPED": "Stopped before completion",
    "NO_RESPONSE": "No response from the remote side",
    "NOT_APPLICABLE": "Request not applicable",
    "FAILED": "Failed",
    "INVALID_ARGUMENTS": "Engine rejected its command-line arguments",
    "OPEN_PORT_ERROR": "Could not open the serial port",
    "RADIO_INIT_ERROR": "Bluetooth dongle initialization failed (invalid port)",
    "RADIO_AT_COMMAND_ERROR": "Bluetooth dongle AT (disconnect) command failed",
    "RADIO_TYPE_COMMAND_ERROR": "Bluetooth dongle pin-code mode command failed",
    "RADIO_RESET_ERROR": "Bluetooth dongle reset command failed",
    "RADIO_CONNECT_ERROR": "Bluetooth dongle connect-to-address command failed",
}

_OTA_MESSAGES: dict[str, str] = {
    "UNRECOGNIZED_PAYLOAD": "Payload type not recognized",
    "OPEN_FILE_ERROR": "Could not open the payload file",
    "READ_FILE_ERROR": "Could not read the payload file",
    "START_SEND_ERROR": "Failed to send the start command",
    "START_NACK": "Target answered the start command with NACK",
    "HEADER_SEND_ERROR": "Failed to send the header packet",
    "HEADER_NACK": "Target answered the header packet with NACK",
    "DATA_SEND_ERROR": "Failed to send a data packet",
    "DATA_NACK": "Target answered a data packet with NACK",
    "END_SEND_ERROR": "Failed to send the end command",
    "END_NACK": "Target answered the end command with NACK",
    "ABORT_SEND_ERROR": "Failed to send the abort command",
    "ABORT_NACK": "Target answered the abort command with NACK",
    "ABORT_LOOP_ERROR": "Could not make the target leave a pending transaction",
}

_DONGLE_MESSAGES: dict[str, str] = {
    "RADIO_RENEW_ERROR": "Bluetooth dongle renew command failed",
    "RADIO_ROLE_ERROR": "Bluetooth dongle role command failed",
    "RADIO_IMMEDIATE_ERROR": "Bluetooth dongle IMME command failed",
    "RADIO_NOTIFY_ERROR": "Bluetooth dongle NOTI command failed",
    "RADIO_MODE_ERROR": "Bluetooth dongle MODE command failed",
}


def describe(status: IntEnum) -> str:
    """Short human-readable message for a status from either taxonomy."""
    specific = _DONGLE_MESSAGES if isinstance(status, DongleStatus) else _OTA_MESSAGES
    return specific.get(status.name) or _SHARED_MESSAGES.get(status.name, status.name)
