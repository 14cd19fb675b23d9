"""
Command encoding and decoding for the modem link protocol.

Frame layout (one line)::

    V<version>,<source>,<count>,<dst1>,...,<dstN>,<name>,<arg1>,...,<argM>,<CRC>\\n

The CRC is 4 uppercase hex digits computed over everything before it,
including the comma that precedes it.
"""

import re
from typing import List, Union

from .checksum import (
    FIELD_SEPARATOR,
    TERMINATOR,
    crc16,
    extract_checksum,
    format_checksum,
)
from .command import Command
from modemlink.utils.exceptions import (
    ChecksumMismatchError,
    MalformedDestinationCountError,
    MalformedDestinationError,
    MalformedSourceError,
    MalformedVersionError,
    TruncatedMessageError,
)


# Token offsets
OFFS_VERSION = 0
OFFS_SRC = 1
OFFS_DST_COUNT = 2
OFFS_DST = 3

_UNSIGNED_RE = re.compile(r"[0-9]+")


def encode_command(command: Command) -> str:
    """
    Encode command as a single-line frame.

    Args:
        command: Command to encode.

    Returns:
        Frame text, terminated by a line feed.

    Example:
        >>> encode_command(Command("PING").add_destination(2))
        'V0,0,1,2,PING,8573\\n'
    """
    fields = [
        f"V{command.version}",
        str(command.source),
        str(len(command.destinations)),
    ]
    fields.extend(str(addr) for addr in command.sorted_destinations)
    fields.append(command.name)
    fields.extend(command.arguments)

    # Every field is followed by a separator, including the last one
    body = "".join(f + FIELD_SEPARATOR for f in fields)

    return body + format_checksum(crc16(body)) + TERMINATOR


def _token(parts: List[str], index: int, end: int, what: str) -> str:
    if index >= end:
        raise TruncatedMessageError(f"Frame ends before {what} (token {index})")
    return parts[index]


def _parse_unsigned(token: str, error, what: str) -> int:
    if not _UNSIGNED_RE.fullmatch(token):
        raise error(f"Invalid {what}: {token!r}")
    try:
        return int(token)
    except ValueError:
        # Exceeds the interpreter's integer string conversion limit
        raise error(f"Invalid {what}: {len(token)} digit number") from None


def decode_command(frame: Union[str, bytes]) -> Command:
    """
    Decode a received frame into a new command.

    The checksum is verified before any other field is trusted. Nothing is
    returned unless every step succeeds.

    Args:
        frame: Frame text as delivered by the link, with or without the
            trailing line feed. Bytes are decoded as UTF-8.

    Returns:
        Decoded command.

    Raises:
        MalformedChecksumError: Checksum field missing or not 4 hex digits.
        ChecksumMismatchError: Checksum does not match frame content.
        MalformedVersionError: First token is not ``V<decimal>``.
        MalformedSourceError: Source is not a non-negative integer.
        MalformedDestinationCountError: Count is not a non-negative integer.
        MalformedDestinationError: A destination is not a non-negative integer.
        TruncatedMessageError: Fewer tokens than the header announces.
    """
    if isinstance(frame, (bytes, bytearray)):
        frame = bytes(frame).decode("utf-8", errors="replace")

    # Validate CRC
    body, received = extract_checksum(frame)
    computed = crc16(body)
    if computed != received:
        raise ChecksumMismatchError(
            f"Checksum mismatch (got {format_checksum(received)}, "
            f"expected {format_checksum(computed)})"
        )

    if frame.endswith(TERMINATOR):
        frame = frame[:-1]
    parts = frame.split(FIELD_SEPARATOR)

    # Last token is the CRC, nothing past this index is a field
    end = len(parts) - 1

    token = _token(parts, OFFS_VERSION, end, "version")
    if not token.startswith("V"):
        raise MalformedVersionError(f"Invalid version: {token!r}")
    version = _parse_unsigned(token[1:], MalformedVersionError, "version")

    source = _parse_unsigned(
        _token(parts, OFFS_SRC, end, "source"), MalformedSourceError, "source"
    )
    dst_count = _parse_unsigned(
        _token(parts, OFFS_DST_COUNT, end, "destination count"),
        MalformedDestinationCountError,
        "destination count",
    )

    # Destinations and name must all sit before the CRC token
    name_index = OFFS_DST + dst_count
    if name_index >= end:
        raise TruncatedMessageError(
            f"Frame announces {dst_count} destinations but ends before the command name"
        )

    destinations = {
        _parse_unsigned(parts[i], MalformedDestinationError, "destination")
        for i in range(OFFS_DST, name_index)
    }

    return Command(
        name=parts[name_index],
        version=version,
        source=source,
        destinations=destinations,
        arguments=parts[name_index + 1:end],
    )
