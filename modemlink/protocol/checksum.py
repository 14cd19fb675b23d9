"""
CRC-16 calculation and validation for command frames.

Frames end with ``,XXXX\\n`` where ``XXXX`` is the CRC-16/ARC (reflected
polynomial 0x8005, initial value 0) of every byte up to and including the
last comma, rendered as 4 uppercase hex digits.
"""

import re
from typing import Tuple, Union

import crcmod

from modemlink.utils.exceptions import MalformedChecksumError


FIELD_SEPARATOR = ","
TERMINATOR = "\n"
CHECKSUM_DIGITS = 4

_CHECKSUM_RE = re.compile(r"[0-9A-Fa-f]{4}")

# Generated once at import, read-only afterwards.
_crc16_arc = crcmod.mkCrcFun(0x18005, rev=True, initCrc=0x0000, xorOut=0x0000)


def crc16(data: Union[bytes, str]) -> int:
    """
    Calculate the frame checksum.

    Args:
        data: Bytes to checksum. Text is encoded as UTF-8 first.

    Returns:
        16-bit checksum (0-65535).

    Example:
        >>> crc16(b"123456789")
        47933
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return _crc16_arc(data)


def format_checksum(value: int) -> str:
    """Render a checksum as it appears on the wire (4 uppercase hex digits)."""
    return f"{value & 0xFFFF:04X}"


def extract_checksum(frame: str) -> Tuple[str, int]:
    """
    Split a frame into its checksummed body and the transmitted checksum.

    A single trailing line terminator is ignored.

    Args:
        frame: Received frame text.

    Returns:
        Tuple of (body, checksum) where body runs up to and including the
        last comma.

    Raises:
        MalformedChecksumError: If there is no comma or the trailing field
            is not exactly 4 hex digits.
    """
    if frame.endswith(TERMINATOR):
        frame = frame[:-1]

    idx = frame.rfind(FIELD_SEPARATOR)
    if idx == -1:
        raise MalformedChecksumError("No field separator in frame")

    field = frame[idx + 1:]
    if not _CHECKSUM_RE.fullmatch(field):
        raise MalformedChecksumError(
            f"Checksum field must be {CHECKSUM_DIGITS} hex digits, got {field!r}"
        )

    return frame[:idx + 1], int(field, 16)


def validate_checksum(frame: str) -> bool:
    """
    Validate checksum of a received frame.

    Args:
        frame: Received frame text.

    Returns:
        True if checksum is valid, False otherwise.

    Raises:
        MalformedChecksumError: If the checksum field cannot be parsed.

    Example:
        >>> validate_checksum("V0,0,1,2,PING,8573\\n")
        True
    """
    body, received = extract_checksum(frame)
    return crc16(body) == received
