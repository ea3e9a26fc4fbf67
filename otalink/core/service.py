"""Service layer used by the CLI and the public API."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from otalink.core.errors import ConfigurationError, PayloadError
from otalink.core.model import PayloadKind, TransactionResult, TransportKind
from otalink.core.ports import SerialPortInfo, list_ports, resolve_port
from otalink.core.profile_loader import Profile, load_profiles
from otalink.engine.command import Platform
from otalink.engine.invoker import ExternalEngineInvoker
from otalink.transports import factory_for
from otalink.transports.base import Invoker
from otalink.transports.ble_scan import BLEScanner, RemoteDevice
from otalink.transports.dongle import DongleProvisioningClient

LOGGER = logging.getLogger(__name__)


class OtaService:
    def __init__(
        self,
        *,
        invoker: Invoker | None = None,
        scanner: BLEScanner | None = None,
        platform: Platform | None = None,
        engine_root: str | Path | None = None,
    ) -> None:
        loaded = load_profiles()
        self.profiles = loaded.profiles
        self.load_warnings = loaded.warnings
        self.invoker = invoker or ExternalEngineInvoker(engine_root)
        self.scanner = scanner or BLEScanner()
        self.platform = platform

    def list_profiles(self) -> list[Profile]:
        return sorted(self.profiles.values(), key=lambda p: p.id)

    def list_ports(self) -> list[SerialPortInfo]:
        return list_ports()

    def scan_remotes(self, timeout_s: float = 5.0) -> list[RemoteDevice]:
        return self.scanner.scan(timeout_s)

    def get_profile(self, profile_id: str, *, expected: tuple[TransportKind, ...]) -> Profile:
        profile = self.profiles.get(profile_id)
        if profile is None:
            available = ", ".join(sorted(self.profiles))
            raise ConfigurationError(f"Unknown profile '{profile_id}'. Available: {available}")
        if profile.transport not in expected:
            allowed = ", ".join(kind.value for kind in expected)
            raise ConfigurationError(
                f"Profile '{profile_id}' uses the {profile.transport.value} transport; expected {allowed}"
            )
        return profile

    def send_payload(
        self,
        payload: str,
        kind: PayloadKind | int = PayloadKind.APPLICATION_IMAGE,
        *,
        port: int | str,
        profile_id: str = TransportKind.SERIAL.value,
        bluetooth_address: str | None = None,
        timeout_s: float | None = None,
        **overrides: Any,
    ) -> TransactionResult:
        try:
            kind = PayloadKind(kind)
        except ValueError:
            raise PayloadError(f"Unrecognized payload kind {kind!r}") from None
        profile = self.get_profile(profile_id, expected=(TransportKind.SERIAL, TransportKind.BLUETOOTH))

        if kind.is_image:
            payload_path = Path(payload).expanduser()
            if not payload_path.is_file():
                raise PayloadError(f"The payload file '{payload}' does not exist")
            payload = str(payload_path.resolve())
        elif not payload:
            raise PayloadError("A custom data transaction requires data to send")

        configuration = profile.to_configuration(
            resolve_port(port),
            bluetooth_address=bluetooth_address,
            **overrides,
        )
        factory = factory_for(
            profile.transport,
            configuration,
            engine=profile.engine_path,
            invoker=self.invoker,
            platform=self.platform,
        )
        session, status = factory.send_payload(payload, kind, profile.timeout_s if timeout_s is None else timeout_s)
        LOGGER.debug("OTA transaction via profile '%s' finished with %s", profile.id, status.name)
        return session.result  # type: ignore[return-value]

    def provision_dongle(
        self,
        *,
        port: int | str,
        profile_id: str = TransportKind.DONGLE.value,
        timeout_s: float | None = None,
        **overrides: Any,
    ) -> TransactionResult:
        profile = self.get_profile(profile_id, expected=(TransportKind.DONGLE,))
        configuration = profile.to_configuration(resolve_port(port), **overrides)
        client = DongleProvisioningClient(
            configuration,
            engine=profile.engine_path,
            invoker=self.invoker,
            platform=self.platform,
        )
        session, status = client.provision(profile.timeout_s if timeout_s is None else timeout_s)
        LOGGER.debug("Dongle provisioning via profile '%s' finished with %s", profile.id, status.name)
        return session.result  # type: ignore[return-value]
