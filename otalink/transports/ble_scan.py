"""BLE discovery of remote targets for the Bluetooth transport."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from otalink.core.errors import ScanError
from otalink.core.model import BLUETOOTH_ADDRESS_SIZE, normalize_bluetooth_address


@dataclass(frozen=True)
class RemoteDevice:
    address: str
    name: str
    raw_address: str


class BLEScanner:
    def scan(self, timeout_s: float = 5.0) -> list[RemoteDevice]:
        try:
            from bleak import BleakScanner  # type: ignore
        except Exception as exc:  # pragma: no cover - import failure path
            raise ScanError("BLE scanning requires 'bleak'. Install dependency and retry.") from exc

        async def _run() -> list[RemoteDevice]:
            found = await BleakScanner.discover(timeout=timeout_s)
            devices: list[RemoteDevice] = []
            seen: set[str] = set()
            for device in found:
                address = normalize_bluetooth_address(device.address or "")
                # macOS reports UUIDs instead of MAC addresses; the dongle cannot use those.
                if len(address) != BLUETOOTH_ADDRESS_SIZE or address in seen:
                    continue
                seen.add(address)
                devices.append(
                    RemoteDevice(
                        address=address,
                        name=device.name or "<unknown-device>",
                        raw_address=device.address,
                    )
                )
            return sorted(devices, key=lambda d: d.address)

        try:
            return asyncio.run(_run())
        except ScanError:
            raise
        except Exception as exc:
            raise ScanError(f"BLE scan failed: {exc}") from exc
