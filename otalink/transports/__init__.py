"""Transport variants and the engine sessions behind them."""

from __future__ import annotations

from otalink.core.errors import ConfigurationError
from otalink.core.model import ConfigurationProfile, TransportKind
from otalink.engine.command import EnginePath, Platform
from otalink.transports.base import Invoker, ProtocolFactory
from otalink.transports.bluetooth import BluetoothTransportFactory
from otalink.transports.serial import SerialTransportFactory

_FACTORIES: dict[TransportKind, type[ProtocolFactory]] = {
    TransportKind.SERIAL: SerialTransportFactory,
    TransportKind.BLUETOOTH: BluetoothTransportFactory,
}


def factory_for(
    transport: TransportKind | str,
    profile: ConfigurationProfile,
    *,
    engine: EnginePath | None = None,
    invoker: Invoker | None = None,
    platform: Platform | None = None,
) -> ProtocolFactory:
    try:
        factory_cls = _FACTORIES[TransportKind(transport)]
    except (KeyError, ValueError):
        raise ConfigurationError(f"'{transport}' is not an OTA transport. Use serial or bluetooth.") from None
    return factory_cls(profile, engine=engine, invoker=invoker, platform=platform)
