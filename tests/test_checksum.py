"""Tests for CRC-16 calculation and checksum field handling."""

import pytest

from modemlink.protocol.checksum import (
    crc16,
    extract_checksum,
    format_checksum,
    validate_checksum,
)
from modemlink.utils.exceptions import MalformedChecksumError


def test_crc16_check_value():
    """CRC-16/ARC check value for the standard '123456789' input."""
    assert crc16(b"123456789") == 0xBB3D


def test_crc16_empty():
    """CRC of empty data is the initial value."""
    assert crc16(b"") == 0x0000


def test_crc16_known_frame_body():
    """Body of a PING frame to node 2, separator included."""
    assert crc16(b"V0,0,1,2,PING,") == 0x8573


def test_crc16_accepts_text():
    """Text input is checksummed as its UTF-8 bytes."""
    assert crc16("V1,3,1,7,PING,") == crc16(b"V1,3,1,7,PING,") == 0x402B


def test_crc16_deterministic():
    data = b"V0,1,3,2,5,9,GOTO,10,20,"
    assert crc16(data) == crc16(data) == 0xAEA2


def test_crc16_different_inputs():
    assert crc16(b"V0,0,1,2,PING,hello,") != crc16(b"V0,0,1,2,PING,hellp,")


def test_format_checksum_pads_and_uppercases():
    assert format_checksum(0xBF91) == "BF91"
    assert format_checksum(0x1A) == "001A"
    assert format_checksum(0) == "0000"


def test_extract_checksum():
    """Body keeps the trailing comma; terminator is ignored."""
    body, value = extract_checksum("V0,0,1,2,PING,8573\n")
    assert body == "V0,0,1,2,PING,"
    assert value == 0x8573


def test_extract_checksum_without_terminator():
    body, value = extract_checksum("V0,0,1,2,PING,8573")
    assert body == "V0,0,1,2,PING,"
    assert value == 0x8573


def test_extract_checksum_lowercase_hex():
    _, value = extract_checksum("V1,3,1,7,PING,402b\n")
    assert value == 0x402B


@pytest.mark.parametrize(
    "frame",
    [
        "V0,0,1,2,PING,857\n",     # 3 digits
        "V0,0,1,2,PING,85730\n",   # 5 digits
        "V0,0,1,2,PING,85G3\n",    # not hex
        "V0,0,1,2,PING,\n",        # empty field
        "no separator at all\n",
        "",
    ],
)
def test_extract_checksum_malformed(frame):
    with pytest.raises(MalformedChecksumError):
        extract_checksum(frame)


def test_validate_checksum():
    assert validate_checksum("V0,0,1,2,PING,8573\n") is True
    assert validate_checksum("V0,0,1,3,PING,8573\n") is False
