"""Bluetooth dongle provisioning.

Before OTA transactions can run over the Bluetooth transport, the dongle must
be put into central role. A separate engine does that, following the same
single-line status contract as the OTA engine but with its own taxonomy.
Its serial settings come from the packaged ``dongle`` profile.
"""

from __future__ import annotations

from otalink.core.errors import ConfigurationError
from otalink.core.model import ConfigurationProfile
from otalink.core.status import DONGLE_DECODER, DongleStatus
from otalink.engine.command import DONGLE_ENGINE_PATH, EngineCommand, EnginePath, Platform, dongle_arguments
from otalink.transports.base import EngineSession, Invoker


class DongleSession(EngineSession[DongleStatus]):
    def __init__(
        self,
        profile: ConfigurationProfile,
        *,
        engine: EnginePath = DONGLE_ENGINE_PATH,
        invoker: Invoker | None = None,
        platform: Platform | None = None,
    ) -> None:
        super().__init__(profile, engine=engine, decoder=DONGLE_DECODER, invoker=invoker, platform=platform)

    def command(self) -> EngineCommand:
        return EngineCommand(engine=self.engine, arguments=dongle_arguments(self.profile))

    def start(self, timeout_s: float) -> DongleStatus:
        return self._run(self.command(), timeout_s).status  # type: ignore[return-value]


class DongleProvisioningClient:
    def __init__(
        self,
        profile: ConfigurationProfile,
        *,
        engine: EnginePath | None = None,
        invoker: Invoker | None = None,
        platform: Platform | None = None,
    ) -> None:
        self.profile = profile
        self.engine = engine if engine is not None else DONGLE_ENGINE_PATH
        self.invoker = invoker
        self.platform = platform

    def create_session(self) -> DongleSession:
        return DongleSession(self.profile, engine=self.engine, invoker=self.invoker, platform=self.platform)

    def provision(self, timeout_s: float) -> tuple[DongleSession, DongleStatus]:
        if timeout_s <= 0:
            raise ConfigurationError(f"Provisioning timeout must be positive, got {timeout_s!r}")
        session = self.create_session()
        status = session.start(timeout_s)
        return session, status
