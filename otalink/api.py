"""Stable public API for building tooling on top of otalink.

This module is the supported integration surface for third-party callers,
such as a GUI front end that collects the payload, transport and port and
shows the resulting status. Avoid importing from internal modules unless
intentionally depending on non-stable internals.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from otalink.core.errors import (
    ConfigurationError,
    OtalinkError,
    PayloadError,
    PortResolutionError,
    ProfileLoadError,
    ProfileValidationError,
    ScanError,
    SessionStateError,
)
from otalink.core.model import (
    ConfigurationProfile,
    InvocationOutcome,
    Parity,
    PayloadKind,
    TransactionRequest,
    TransactionResult,
    TransportKind,
)
from otalink.core.ports import SerialPortInfo, port_index
from otalink.core.profile_loader import Profile
from otalink.core.service import OtaService
from otalink.core.status import DongleStatus, OtaStatus, describe
from otalink.engine.command import Platform
from otalink.transports import factory_for
from otalink.transports.base import Invoker
from otalink.transports.ble_scan import BLEScanner, RemoteDevice
from otalink.transports.bluetooth import BluetoothTransportFactory
from otalink.transports.dongle import DongleProvisioningClient
from otalink.transports.serial import SerialTransportFactory

__all__ = [
    "OtalinkError",
    "ConfigurationError",
    "PayloadError",
    "PortResolutionError",
    "ProfileLoadError",
    "ProfileValidationError",
    "ScanError",
    "SessionStateError",
    "ConfigurationProfile",
    "InvocationOutcome",
    "Parity",
    "PayloadKind",
    "TransactionRequest",
    "TransactionResult",
    "TransportKind",
    "SerialPortInfo",
    "Profile",
    "RemoteDevice",
    "OtaStatus",
    "DongleStatus",
    "describe",
    "port_index",
    "factory_for",
    "SerialTransportFactory",
    "BluetoothTransportFactory",
    "DongleProvisioningClient",
    "Client",
]


class Client:
    """Public client for otalink core capabilities.

    A `Client` wraps profile loading, port naming, OTA transactions and dongle
    provisioning. Every transaction returns a `TransactionResult` whose
    `status` is the engine's verdict; invalid input raises an `OtalinkError`
    before any engine process is started.
    """

    def __init__(
        self,
        *,
        invoker: Invoker | None = None,
        scanner: BLEScanner | None = None,
        platform: Platform | None = None,
        engine_root: str | Path | None = None,
    ) -> None:
        self._service = OtaService(
            invoker=invoker,
            scanner=scanner,
            platform=platform,
            engine_root=engine_root,
        )

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_profiles(self) -> list[Profile]:
        return self._service.list_profiles()

    def list_ports(self) -> list[SerialPortInfo]:
        return self._service.list_ports()

    def scan_remotes(self, timeout_s: float = 5.0) -> list[RemoteDevice]:
        return self._service.scan_remotes(timeout_s)

    def send_payload(
        self,
        payload: str,
        kind: PayloadKind | int = PayloadKind.APPLICATION_IMAGE,
        *,
        port: int | str,
        profile_id: str = "serial",
        bluetooth_address: str | None = None,
        timeout_s: float | None = None,
        **overrides: Any,
    ) -> TransactionResult:
        return self._service.send_payload(
            payload,
            kind,
            port=port,
            profile_id=profile_id,
            bluetooth_address=bluetooth_address,
            timeout_s=timeout_s,
            **overrides,
        )

    def provision_dongle(
        self,
        *,
        port: int | str,
        profile_id: str = "dongle",
        timeout_s: float | None = None,
        **overrides: Any,
    ) -> TransactionResult:
        return self._service.provision_dongle(
            port=port,
            profile_id=profile_id,
            timeout_s=timeout_s,
            **overrides,
        )
