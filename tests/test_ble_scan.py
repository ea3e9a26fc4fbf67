from __future__ import annotations

from types import SimpleNamespace

import bleak
import pytest

from otalink.core.errors import ScanError
from otalink.transports.ble_scan import BLEScanner


def test_scan_normalizes_and_filters(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_discover(timeout: float = 5.0):
        return [
            SimpleNamespace(address="00:17:ea:09:09:0b", name="Target B"),
            SimpleNamespace(address="00:17:EA:09:09:0A", name=None),
            SimpleNamespace(address="0017EA09090B", name="Target B again"),
            SimpleNamespace(address="6F1C2A3B-0000-4C5D-8E9F-0123456789AB", name="macOS UUID"),
        ]

    monkeypatch.setattr(bleak.BleakScanner, "discover", staticmethod(fake_discover))

    devices = BLEScanner().scan(1.0)

    assert [(d.address, d.name) for d in devices] == [
        ("0017EA09090A", "<unknown-device>"),
        ("0017EA09090B", "Target B"),
    ]
    assert devices[1].raw_address == "00:17:ea:09:09:0b"


def test_scan_failure_is_wrapped(monkeypatch: pytest.MonkeyPatch) -> None:
    async def failing_discover(timeout: float = 5.0):
        raise OSError("No Bluetooth adapters found.")

    monkeypatch.setattr(bleak.BleakScanner, "discover", staticmethod(failing_discover))

    with pytest.raises(ScanError, match="No Bluetooth adapters found"):
        BLEScanner().scan(1.0)
