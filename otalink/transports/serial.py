"""Wired serial (UART) transport variant."""

from __future__ import annotations

from otalink.core.model import TransactionRequest, TransportKind
from otalink.engine.command import UART_ENGINE_PATH, serial_ota_arguments
from otalink.transports.base import ProtocolFactory, TransportSession


class SerialTransportSession(TransportSession):
    def arguments(self, request: TransactionRequest) -> tuple[str, ...]:
        return serial_ota_arguments(self.profile, request)


class SerialTransportFactory(ProtocolFactory):
    kind = TransportKind.SERIAL
    default_engine = UART_ENGINE_PATH

    def create_session(self) -> SerialTransportSession:
        return SerialTransportSession(
            self.profile,
            engine=self.engine,
            invoker=self.invoker,
            platform=self.platform,
        )
