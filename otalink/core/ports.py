"""Serial port naming: OS port names to the engines' numeric port index."""

from __future__ import annotations

import re
from dataclasses import dataclass

from otalink.core.errors import PortResolutionError

_NUMBERED_PORT_RE = re.compile(r"^([A-Za-z]+)(\d+)$")

# prefix -> (first engine index, number of ports); ttyS0 is index 1.
_PORT_RANGES: dict[str, tuple[int, int]] = {
    "ttyS": (1, 16),
    "ttyUSB": (17, 6),
    "ttyAMA": (23, 2),
    "ttyACM": (25, 2),
    "rfcomm": (27, 2),
    "ircomm": (29, 2),
    "cuau": (31, 4),
    "cuaU": (35, 4),
}
_MAX_COM_PORT = 32


@dataclass(frozen=True)
class SerialPortInfo:
    device: str
    name: str
    description: str
    index: int | None


def port_index(name: str) -> int:
    """Return the engine port index for ``COM3``, ``ttyUSB0``, ``/dev/ttyACM1``..."""
    base = name.strip().rsplit("/", 1)[-1]
    match = _NUMBERED_PORT_RE.match(base)
    if match:
        prefix, number = match.group(1), int(match.group(2))
        if prefix.upper() == "COM" and 1 <= number <= _MAX_COM_PORT:
            return number
        if prefix in _PORT_RANGES:
            first, count = _PORT_RANGES[prefix]
            if number < count:
                return first + number
    raise PortResolutionError(f"Serial port '{name}' is not supported by the OTA engines")


def resolve_port(value: int | str) -> int:
    """Accept either an engine port index or an OS port name."""
    if isinstance(value, int):
        if value < 1:
            raise PortResolutionError(f"Serial port index must be positive, got {value}")
        return value
    text = value.strip()
    if text.isdigit():
        return resolve_port(int(text))
    return port_index(text)


def list_ports() -> list[SerialPortInfo]:
    import serial.tools.list_ports

    ports: list[SerialPortInfo] = []
    for port in sorted(serial.tools.list_ports.comports(), key=lambda p: p.device):
        name = port.name or port.device.rsplit("/", 1)[-1]
        try:
            index: int | None = port_index(name)
        except PortResolutionError:
            index = None
        ports.append(
            SerialPortInfo(
                device=port.device,
                name=name,
                description=port.description or "",
                index=index,
            )
        )
    return ports
