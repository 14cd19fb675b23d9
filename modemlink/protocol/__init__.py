"""
Protocol package for the modem command codec and link transports.
"""

from modemlink.protocol.checksum import (
    crc16,
    extract_checksum,
    format_checksum,
    validate_checksum,
)
from modemlink.protocol.command import Command
from modemlink.protocol.encoder import encode_command, decode_command
from modemlink.protocol.interface import LinkInterface
from modemlink.protocol.link import CommandLink
from modemlink.protocol.logger import ProtocolLogger, get_protocol_logger
from modemlink.protocol.serial_link import SerialLink

__all__ = [
    "crc16",
    "extract_checksum",
    "format_checksum",
    "validate_checksum",
    "Command",
    "encode_command",
    "decode_command",
    "LinkInterface",
    "CommandLink",
    "ProtocolLogger",
    "get_protocol_logger",
    "SerialLink",
]
