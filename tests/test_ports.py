from __future__ import annotations

from types import SimpleNamespace

import pytest
import serial.tools.list_ports

from otalink.core.errors import PortResolutionError
from otalink.core.ports import list_ports, port_index, resolve_port


@pytest.mark.parametrize(
    "name, index",
    [
        ("COM1", 1),
        ("COM32", 32),
        ("ttyS0", 1),
        ("ttyS15", 16),
        ("ttyUSB0", 17),
        ("/dev/ttyUSB5", 22),
        ("ttyAMA1", 24),
        ("ttyACM0", 25),
        ("rfcomm1", 28),
        ("ircomm0", 29),
        ("cuau3", 34),
        ("cuaU0", 35),
        ("cuaU3", 38),
    ],
)
def test_port_index(name: str, index: int) -> None:
    assert port_index(name) == index


@pytest.mark.parametrize("name", ["COM0", "COM33", "ttyS16", "ttyUSB6", "cuau4", "tty.usbserial", "", "lpt1"])
def test_unsupported_port_names(name: str) -> None:
    with pytest.raises(PortResolutionError):
        port_index(name)


def test_resolve_port_accepts_index_or_name() -> None:
    assert resolve_port(7) == 7
    assert resolve_port("7") == 7
    assert resolve_port("ttyUSB1") == 18
    with pytest.raises(PortResolutionError):
        resolve_port(0)


def test_list_ports_maps_indexes(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        serial.tools.list_ports,
        "comports",
        lambda: [
            SimpleNamespace(device="/dev/ttyUSB0", name="ttyUSB0", description="CP2102"),
            SimpleNamespace(device="/dev/ttyXRUSB0", name="ttyXRUSB0", description=None),
        ],
    )

    ports = list_ports()
    assert [(p.device, p.index) for p in ports] == [("/dev/ttyUSB0", 17), ("/dev/ttyXRUSB0", None)]
    assert ports[0].description == "CP2102"
    assert ports[1].description == ""
