"""Engine sessions and the transport factory interface."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Generic, Protocol

from otalink.core.errors import SessionStateError
from otalink.core.model import (
    ConfigurationProfile,
    PayloadKind,
    TransactionRequest,
    TransactionResult,
    TransportKind,
)
from otalink.core.status import OTA_DECODER, OtaStatus, StatusDecoder, StatusT
from otalink.engine.command import EngineCommand, EnginePath, OTA_PAYLOAD_INDEX, Platform
from otalink.engine.invoker import ExternalEngineInvoker, InvocationResult

LOGGER = logging.getLogger(__name__)


class Invoker(Protocol):
    def run(self, command_line: str, timeout_s: float) -> InvocationResult:
        """Run a rendered command line and return its first output line."""


class SessionState(Enum):
    IDLE = "idle"
    INVOKING = "invoking"
    COMPLETED = "completed"


class EngineSession(ABC, Generic[StatusT]):
    """Single-use wrapper around one engine invocation.

    The session moves IDLE -> INVOKING -> COMPLETED exactly once and then
    keeps the result of that invocation.
    """

    def __init__(
        self,
        profile: ConfigurationProfile,
        *,
        engine: EnginePath,
        decoder: StatusDecoder[StatusT],
        invoker: Invoker | None = None,
        platform: Platform | None = None,
    ) -> None:
        self.profile = profile
        self.engine = engine
        self.decoder = decoder
        self.invoker = invoker or ExternalEngineInvoker()
        self.platform = platform or Platform.current()
        self.state = SessionState.IDLE
        self._result: TransactionResult | None = None

    @property
    def result(self) -> TransactionResult | None:
        return self._result

    @property
    def last_status(self) -> StatusT | None:
        return self._result.status if self._result else None  # type: ignore[return-value]

    def _run(self, command: EngineCommand, timeout_s: float) -> TransactionResult:
        if self.state is not SessionState.IDLE:
            raise SessionStateError(
                f"{type(self).__name__} is single-use and is already {self.state.value}"
            )
        self.state = SessionState.INVOKING
        command_line = command.render(self.platform)
        try:
            invocation = self.invoker.run(command_line, timeout_s)
        finally:
            self.state = SessionState.COMPLETED

        status = self.decoder.decode(invocation.response)
        if status != 0:
            LOGGER.info(
                "%s finished with %s (%d), response=%r, outcome=%s",
                type(self).__name__,
                status.name,
                int(status),
                invocation.response,
                invocation.outcome.value,
            )
        self._result = TransactionResult(
            status=status,
            response=invocation.response,
            outcome=invocation.outcome,
            command_line=command_line,
        )
        return self._result


class TransportSession(EngineSession[OtaStatus]):
    """OTA transaction session; subclasses supply the positional arguments."""

    def __init__(
        self,
        profile: ConfigurationProfile,
        *,
        engine: EnginePath,
        invoker: Invoker | None = None,
        platform: Platform | None = None,
    ) -> None:
        super().__init__(profile, engine=engine, decoder=OTA_DECODER, invoker=invoker, platform=platform)

    @abstractmethod
    def arguments(self, request: TransactionRequest) -> tuple[str, ...]:
        raise NotImplementedError

    def command(self, request: TransactionRequest) -> EngineCommand:
        return EngineCommand(
            engine=self.engine,
            arguments=self.arguments(request),
            quoted_index=OTA_PAYLOAD_INDEX,
        )

    def start(self, request: TransactionRequest) -> OtaStatus:
        command = self.command(request)
        return self._run(command, request.timeout_s).status  # type: ignore[return-value]


class ProtocolFactory(ABC):
    """Builds the session for one transport variant and drives a transaction."""

    kind: TransportKind
    default_engine: tuple[str, ...]

    def __init__(
        self,
        profile: ConfigurationProfile,
        *,
        engine: EnginePath | None = None,
        invoker: Invoker | None = None,
        platform: Platform | None = None,
    ) -> None:
        self.profile = profile
        self.engine = engine if engine is not None else self.default_engine
        self.invoker = invoker
        self.platform = platform

    @abstractmethod
    def create_session(self) -> TransportSession:
        raise NotImplementedError

    def send_payload(
        self,
        payload: str,
        kind: PayloadKind | int,
        timeout_s: float,
    ) -> tuple[TransportSession, OtaStatus]:
        request = TransactionRequest(kind=kind, payload=payload, timeout_s=timeout_s)
        session = self.create_session()
        status = session.start(request)
        return session, status
