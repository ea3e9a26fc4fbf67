"""Bluetooth-dongle transport variant.

The host talks to a BLE dongle over a serial port; the dongle connects to the
remote target by address. The dongle must already be in central role (see
``otalink.transports.dongle``).
"""

from __future__ import annotations

from otalink.core.errors import ConfigurationError
from otalink.core.model import ConfigurationProfile, TransactionRequest, TransportKind
from otalink.engine.command import BLE_ENGINE_PATH, EnginePath, Platform, bluetooth_ota_arguments
from otalink.transports.base import Invoker, ProtocolFactory, TransportSession


class BluetoothTransportSession(TransportSession):
    def arguments(self, request: TransactionRequest) -> tuple[str, ...]:
        return bluetooth_ota_arguments(self.profile, request)


class BluetoothTransportFactory(ProtocolFactory):
    kind = TransportKind.BLUETOOTH
    default_engine = BLE_ENGINE_PATH

    def __init__(
        self,
        profile: ConfigurationProfile,
        *,
        engine: EnginePath | None = None,
        invoker: Invoker | None = None,
        platform: Platform | None = None,
    ) -> None:
        if profile.bluetooth_address is None:
            raise ConfigurationError(
                "The Bluetooth transport requires the remote device address (12 hex characters)"
            )
        super().__init__(profile, engine=engine, invoker=invoker, platform=platform)

    def create_session(self) -> BluetoothTransportSession:
        return BluetoothTransportSession(
            self.profile,
            engine=self.engine,
            invoker=self.invoker,
            platform=self.platform,
        )
