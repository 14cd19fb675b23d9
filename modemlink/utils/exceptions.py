"""
Custom exception classes for the modemlink command protocol.
"""


class ModemLinkException(Exception):
    """Base exception for all modemlink errors."""
    pass


class InvalidValueError(ModemLinkException):
    """Invalid field value on a command (negative address, version, etc.)."""
    pass


class ProtocolError(ModemLinkException):
    """Received frame could not be decoded. The frame must be discarded."""
    pass


class MalformedChecksumError(ProtocolError):
    """Trailing field is missing or is not exactly 4 hex digits."""
    pass


class ChecksumMismatchError(ProtocolError):
    """Checksum validation failed."""
    pass


class MalformedVersionError(ProtocolError):
    """First token does not match V<decimal>."""
    pass


class MalformedSourceError(ProtocolError):
    """Source address is not a non-negative decimal integer."""
    pass


class MalformedDestinationCountError(ProtocolError):
    """Destination count is not a non-negative decimal integer."""
    pass


class MalformedDestinationError(ProtocolError):
    """A destination address is not a non-negative decimal integer."""
    pass


class TruncatedMessageError(ProtocolError):
    """Frame ends before all announced fields are present."""
    pass


class LinkError(ModemLinkException):
    """Transport level error."""
    pass


class NotConnectedError(LinkError):
    """Raised when operation requires an open link but it is closed."""
    pass


class PortNotFoundError(LinkError):
    """Serial port does not exist."""
    pass


class PortInUseError(LinkError):
    """Serial port is already open by another application."""
    pass


class LinkTimeoutError(LinkError):
    """Write to the link did not complete in time."""
    pass
