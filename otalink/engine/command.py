"""Positional command-line protocols of the external engines.

The engines do no flag parsing: token position is the whole contract, so the
encoders below are the only place that decides argument order.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from otalink.core.errors import ConfigurationError
from otalink.core.model import ConfigurationProfile, TransactionRequest

UART_ENGINE_PATH = ("APIs", "uartPcToolAPI", "ETX_OTA_Protocol_UART_API")
BLE_ENGINE_PATH = ("APIs", "blePcToolAPI", "ETX_OTA_Protocol_BLE_API")
DONGLE_ENGINE_PATH = ("APIs", "dongleConfAPI", "Dongle_Configurator_API")

SERIAL_OTA_ARGUMENT_COUNT = 15
BLUETOOTH_OTA_ARGUMENT_COUNT = 17
DONGLE_ARGUMENT_COUNT = 8

# Position of the payload value in both OTA protocols.
OTA_PAYLOAD_INDEX = 2


class Platform(Enum):
    WINDOWS = "windows"
    POSIX = "posix"

    @classmethod
    def current(cls) -> Platform:
        return cls.WINDOWS if os.name == "nt" else cls.POSIX

    @property
    def separator(self) -> str:
        return "\\" if self is Platform.WINDOWS else "/"


EnginePath = tuple[str, ...] | str


@dataclass(frozen=True)
class EngineCommand:
    """A rendered-on-demand engine invocation.

    ``engine`` is either path parts relative to the engine root, rendered as
    ``./a/b/c`` or ``.\\a\\b\\c`` per platform, or an explicit path string
    used verbatim.
    """

    engine: EnginePath
    arguments: tuple[str, ...]
    quoted_index: int | None = None

    def executable(self, platform: Platform) -> str:
        if isinstance(self.engine, str):
            return self.engine
        return platform.separator.join((".", *self.engine))

    def render(self, platform: Platform) -> str:
        tokens = [self.executable(platform)]
        for index, token in enumerate(self.arguments):
            if platform is Platform.WINDOWS and index == self.quoted_index:
                token = f'"{token}"'
            tokens.append(token)
        return " ".join(tokens)


def _serial_link_tokens(profile: ConfigurationProfile) -> list[str]:
    return [
        str(profile.baud_rate),
        str(profile.data_bits),
        profile.parity.value,
        str(profile.stop_bits),
        "1" if profile.flow_control else "0",
        str(profile.send_delay_us),
        str(profile.poll_delay_us),
    ]


def serial_ota_arguments(profile: ConfigurationProfile, request: TransactionRequest) -> tuple[str, ...]:
    tokens = [
        str(profile.port),
        str(len(request.payload)),
        request.payload,
        str(int(request.kind)),
        str(profile.flash_page_size),
        str(profile.bootloader_pages),
        str(profile.application_pages),
        *_serial_link_tokens(profile),
        str(profile.retry_delay_us),
    ]
    return tuple(tokens)


def bluetooth_ota_arguments(profile: ConfigurationProfile, request: TransactionRequest) -> tuple[str, ...]:
    if profile.bluetooth_address is None:
        raise ConfigurationError("The Bluetooth transport requires a remote device address")
    # The engine does not act on the connect timeout yet; it is still sent to keep positions stable.
    return (
        *serial_ota_arguments(profile, request),
        str(profile.connect_timeout_us),
        profile.bluetooth_address,
    )


def dongle_arguments(profile: ConfigurationProfile) -> tuple[str, ...]:
    return (str(profile.port), *_serial_link_tokens(profile))
