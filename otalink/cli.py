"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from enum import Enum

import typer

from otalink.core.errors import OtalinkError
from otalink.core.model import PayloadKind, TransactionResult
from otalink.core.service import OtaService
from otalink.core.status import DongleStatus, OtaStatus, describe

app = typer.Typer(help="Firmware and custom-data delivery to embedded targets via the ETX OTA engines")


class PayloadChoice(str, Enum):
    app = "app"
    bootloader = "bootloader"
    custom = "custom"


_PAYLOAD_KINDS = {
    PayloadChoice.app: PayloadKind.APPLICATION_IMAGE,
    PayloadChoice.bootloader: PayloadKind.BOOTLOADER_IMAGE,
    PayloadChoice.custom: PayloadKind.CUSTOM_DATA,
}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine command lines and diagnostics"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_service() -> OtaService:
    service = OtaService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _report(result: TransactionResult, taxonomy: str, success: str) -> None:
    if result.ok:
        typer.echo(success)
        return
    typer.echo(
        f"{taxonomy} exception code = {int(result.status)} ({describe(result.status)})",
        err=True,
    )
    if result.timed_out:
        typer.echo("The engine did not finish in time and was terminated.", err=True)
    raise typer.Exit(code=1)


@app.command("profiles")
def list_profiles() -> None:
    """List transport profiles and their settings."""
    try:
        service = _build_service()
        profiles = service.list_profiles()
        if not profiles:
            typer.echo("No profiles loaded")
            raise typer.Exit(code=1)

        for profile in profiles:
            typer.echo(f"{profile.id}: {profile.name} [{profile.transport.value}]")
            for key, value in sorted(profile.settings.items()):
                typer.echo(f"  {key}: {value}")
    except OtalinkError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("ports")
def list_ports() -> None:
    """List serial ports and the engine port index for each."""
    try:
        service = _build_service()
        ports = service.list_ports()
        if not ports:
            typer.echo("No serial ports found")
            return

        for port in ports:
            index = str(port.index) if port.index is not None else "<unsupported>"
            typer.echo(f"{port.device} -> {index} {port.description}".rstrip())
    except OtalinkError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("scan")
def scan(
    timeout: float = typer.Option(5.0, "--timeout", help="Scan duration in seconds"),
) -> None:
    """Scan for BLE targets and print addresses usable with --address."""
    try:
        service = _build_service()
        devices = service.scan_remotes(timeout)
        if not devices:
            typer.echo("No BLE devices found")
            return

        for device in devices:
            typer.echo(f"{device.address} {device.name}")
    except OtalinkError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("send")
def send(
    payload: str = typer.Argument(..., help="Firmware image path, or the data itself with --kind custom"),
    port: str = typer.Option(..., "--port", help="Serial port name (COM3, ttyUSB0) or engine port index"),
    kind: PayloadChoice = typer.Option(PayloadChoice.app, "--kind", help="Payload type"),
    profile: str = typer.Option("serial", "--profile", help="Transport profile ID"),
    address: str | None = typer.Option(None, "--address", help="Remote Bluetooth address (12 hex characters)"),
    timeout: float | None = typer.Option(None, "--timeout", help="Engine timeout in seconds"),
    baud: int | None = typer.Option(None, "--baud", help="Override the profile baud rate"),
) -> None:
    """Send a firmware image or custom data to the target."""
    try:
        service = _build_service()
        result = service.send_payload(
            payload,
            _PAYLOAD_KINDS[kind],
            port=port,
            profile_id=profile,
            bluetooth_address=address,
            timeout_s=timeout,
            baud_rate=baud,
        )
    except OtalinkError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    _report(result, "ETX OTA", "The payload has been sent to the target.")


@app.command("provision")
def provision(
    port: str = typer.Option(..., "--port", help="Serial port of the BLE dongle"),
    profile: str = typer.Option("dongle", "--profile", help="Dongle profile ID"),
    timeout: float | None = typer.Option(None, "--timeout", help="Engine timeout in seconds"),
) -> None:
    """Put the BLE dongle into the central role required for OTA over Bluetooth."""
    try:
        service = _build_service()
        result = service.provision_dongle(port=port, profile_id=profile, timeout_s=timeout)
    except OtalinkError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    _report(result, "Dongle configurator", "The BLE dongle has been provisioned.")


@app.command("codes")
def codes(
    dongle: bool = typer.Option(False, "--dongle", help="Show the dongle-provisioning codes"),
) -> None:
    """Print the engine status codes and their meaning."""
    taxonomy = DongleStatus if dongle else OtaStatus
    for status in taxonomy:
        typer.echo(f"{int(status):>2} {status.name}: {describe(status)}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
