"""
Map Python exceptions to API error numbers.
"""

from typing import Tuple
from modemlink.utils.exceptions import (
    ChecksumMismatchError,
    InvalidValueError,
    LinkError,
    LinkTimeoutError,
    MalformedChecksumError,
    MalformedDestinationCountError,
    MalformedDestinationError,
    MalformedSourceError,
    MalformedVersionError,
    NotConnectedError,
    PortInUseError,
    PortNotFoundError,
    ProtocolError,
    TruncatedMessageError,
)


ERROR_INVALID_VALUE = 0x402  # 1026
ERROR_NOT_CONNECTED = 0x407  # 1031
ERROR_DRIVER_ERROR = 0x500  # 1280

# Decode failures, one number per error kind
ERROR_PROTOCOL = 0x510
ERROR_MALFORMED_CHECKSUM = 0x511
ERROR_CHECKSUM_MISMATCH = 0x512
ERROR_MALFORMED_VERSION = 0x513
ERROR_MALFORMED_SOURCE = 0x514
ERROR_MALFORMED_DST_COUNT = 0x515
ERROR_MALFORMED_DESTINATION = 0x516
ERROR_TRUNCATED_MESSAGE = 0x517

# Link failures
ERROR_LINK = 0x520
ERROR_PORT_NOT_FOUND = 0x521
ERROR_PORT_IN_USE = 0x522
ERROR_LINK_TIMEOUT = 0x523

_PROTOCOL_ERRORS = {
    MalformedChecksumError: ERROR_MALFORMED_CHECKSUM,
    ChecksumMismatchError: ERROR_CHECKSUM_MISMATCH,
    MalformedVersionError: ERROR_MALFORMED_VERSION,
    MalformedSourceError: ERROR_MALFORMED_SOURCE,
    MalformedDestinationCountError: ERROR_MALFORMED_DST_COUNT,
    MalformedDestinationError: ERROR_MALFORMED_DESTINATION,
    TruncatedMessageError: ERROR_TRUNCATED_MESSAGE,
}

_LINK_ERRORS = {
    PortNotFoundError: ERROR_PORT_NOT_FOUND,
    PortInUseError: ERROR_PORT_IN_USE,
    LinkTimeoutError: ERROR_LINK_TIMEOUT,
}


def map_exception(exception: Exception) -> Tuple[int, str]:
    """
    Map exception to API error number and message.

    Args:
        exception: Python exception.

    Returns:
        Tuple of (ErrorNumber, ErrorMessage).
    """
    if isinstance(exception, NotConnectedError):
        return (ERROR_NOT_CONNECTED, str(exception))

    if isinstance(exception, (InvalidValueError, ValueError)):
        return (ERROR_INVALID_VALUE, str(exception))

    if isinstance(exception, ProtocolError):
        return (_PROTOCOL_ERRORS.get(type(exception), ERROR_PROTOCOL), str(exception))

    if isinstance(exception, LinkError):
        return (_LINK_ERRORS.get(type(exception), ERROR_LINK), str(exception))

    # Unknown exception
    return (ERROR_DRIVER_ERROR, f"Internal error: {type(exception).__name__}: {exception}")
