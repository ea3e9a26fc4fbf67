"""Domain-specific errors for otalink."""


class OtalinkError(Exception):
    """Base error for otalink."""


class ConfigurationError(OtalinkError):
    """Raised when transport or timing parameters are invalid."""


class PayloadError(OtalinkError):
    """Raised when a transaction payload cannot be sent as given."""


class PortResolutionError(OtalinkError):
    """Raised when a serial port name has no engine port index."""


class ProfileLoadError(OtalinkError):
    """Raised when reading profile sources fails."""


class ProfileValidationError(OtalinkError):
    """Raised when a profile file does not conform to schema or semantics."""


class SessionStateError(OtalinkError):
    """Raised when an engine session is started more than once."""


class ScanError(OtalinkError):
    """Raised when BLE discovery of remote targets fails."""
