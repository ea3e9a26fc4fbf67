"""Core data models shared by the engine layer, transports, service, and CLI."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, fields, replace
from enum import Enum, IntEnum
from typing import Any

from otalink.core.errors import ConfigurationError, PayloadError

LOGGER = logging.getLogger(__name__)

BLUETOOTH_ADDRESS_SIZE = 12
# Size of the engines' payload buffer, terminating NUL included.
PAYLOAD_MAX_SIZE = 20 * 1024
CONNECT_TIMEOUT_RECOMMENDED_US = (3_000_000, 11_000_000)

_HEX_ADDRESS_RE = re.compile(r"^[0-9A-F]{12}$")
_ADDRESS_SEPARATORS_RE = re.compile(r"[:\-]")


class Parity(Enum):
    NONE = "N"
    ODD = "O"
    EVEN = "E"

    @classmethod
    def parse(cls, value: Parity | str) -> Parity:
        if isinstance(value, Parity):
            return value
        token = str(value).strip().upper()
        for member in cls:
            if token in (member.value, member.name):
                return member
        raise ConfigurationError(
            f"Unsupported parity '{value}'. Allowed: none, odd, even (or N, O, E)"
        )


class PayloadKind(IntEnum):
    """Payload type number understood by the OTA engine."""

    APPLICATION_IMAGE = 0
    BOOTLOADER_IMAGE = 1
    CUSTOM_DATA = 2

    @property
    def is_image(self) -> bool:
        return self is not PayloadKind.CUSTOM_DATA


class TransportKind(str, Enum):
    SERIAL = "serial"
    BLUETOOTH = "bluetooth"
    DONGLE = "dongle"


class InvocationOutcome(Enum):
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    SPAWN_FAILED = "spawn_failed"


def normalize_bluetooth_address(value: str) -> str:
    """Strip separators and upper-case an address like ``00:17:ea:09:09:09``."""
    return _ADDRESS_SEPARATORS_RE.sub("", value.strip()).upper()


@dataclass(frozen=True)
class ConfigurationProfile:
    """Transport and timing parameters for one engine invocation.

    Unspecified fields keep the defaults the engines were built against.
    Every delay and timeout is in microseconds, as the engines expect.
    """

    port: int
    flash_page_size: int = 1024
    bootloader_pages: int = 34
    application_pages: int = 86
    baud_rate: int = 115200
    data_bits: int = 8
    parity: Parity = Parity.NONE
    stop_bits: int = 1
    flow_control: bool = False
    send_delay_us: int = 1000
    poll_delay_us: int = 500000
    retry_delay_us: int = 9000000
    bluetooth_address: str | None = None
    connect_timeout_us: int = 11000000

    def __post_init__(self) -> None:
        if isinstance(self.port, bool) or not isinstance(self.port, int) or self.port < 1:
            raise ConfigurationError(f"Serial port index must be a positive integer, got {self.port!r}")

        for name in ("flash_page_size", "bootloader_pages", "application_pages", "baud_rate"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")

        if self.data_bits not in (5, 6, 7, 8) or isinstance(self.data_bits, bool):
            raise ConfigurationError(f"Unsupported data bits {self.data_bits!r}. Allowed: 5, 6, 7, 8")
        if self.stop_bits not in (1, 2) or isinstance(self.stop_bits, bool):
            raise ConfigurationError(f"Unsupported stop bits {self.stop_bits!r}. Allowed: 1, 2")
        object.__setattr__(self, "parity", Parity.parse(self.parity))
        if not isinstance(self.flow_control, bool):
            raise ConfigurationError(f"flow_control must be boolean true/false, got {self.flow_control!r}")

        for name in ("send_delay_us", "poll_delay_us", "retry_delay_us", "connect_timeout_us"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")

        if self.bluetooth_address is not None:
            address = normalize_bluetooth_address(self.bluetooth_address)
            if len(address) != BLUETOOTH_ADDRESS_SIZE:
                raise ConfigurationError(
                    f"Expected a Bluetooth address of {BLUETOOTH_ADDRESS_SIZE} characters, "
                    f"got '{self.bluetooth_address}'"
                )
            if not _HEX_ADDRESS_RE.match(address):
                raise ConfigurationError(
                    f"Bluetooth address '{self.bluetooth_address}' must contain only hex digits"
                )
            object.__setattr__(self, "bluetooth_address", address)

            low, high = CONNECT_TIMEOUT_RECOMMENDED_US
            if not low <= self.connect_timeout_us <= high:
                LOGGER.warning(
                    "Connect timeout %d us is outside the recommended range %d-%d us",
                    self.connect_timeout_us,
                    low,
                    high,
                )

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def build(cls, **values: Any) -> ConfigurationProfile:
        """Build from a partial mapping, dropping ``None`` so defaults apply."""
        unknown = set(values) - set(cls.field_names())
        if unknown:
            raise ConfigurationError(f"Unknown configuration field(s): {', '.join(sorted(unknown))}")
        return cls(**{key: value for key, value in values.items() if value is not None})

    def with_overrides(self, **values: Any) -> ConfigurationProfile:
        unknown = set(values) - set(self.field_names())
        if unknown:
            raise ConfigurationError(f"Unknown configuration field(s): {', '.join(sorted(unknown))}")
        return replace(self, **{key: value for key, value in values.items() if value is not None})


@dataclass(frozen=True)
class TransactionRequest:
    kind: PayloadKind
    payload: str
    timeout_s: float

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "kind", PayloadKind(self.kind))
        except ValueError as exc:
            raise PayloadError(f"Unrecognized payload kind {self.kind!r}") from exc
        if not self.payload:
            if self.kind is PayloadKind.CUSTOM_DATA:
                raise PayloadError("A custom data transaction requires data to send")
            raise PayloadError("A firmware image transaction requires a payload file path")
        size = len(self.payload.encode("utf-8"))
        if size >= PAYLOAD_MAX_SIZE:
            raise PayloadError(
                f"Payload of {size} bytes exceeds the engine limit of {PAYLOAD_MAX_SIZE - 1} bytes"
            )
        if self.timeout_s <= 0:
            raise PayloadError(f"Transaction timeout must be positive, got {self.timeout_s!r}")


@dataclass(frozen=True)
class TransactionResult:
    """Outcome of one engine invocation.

    ``status`` is always a member of the engine's status taxonomy. ``outcome``
    tells a timeout apart from a spawn failure even though both decode to the
    generic failure code.
    """

    status: IntEnum
    response: str
    outcome: InvocationOutcome
    command_line: str

    @property
    def ok(self) -> bool:
        return self.status == 0

    @property
    def timed_out(self) -> bool:
        return self.outcome is InvocationOutcome.TIMED_OUT
