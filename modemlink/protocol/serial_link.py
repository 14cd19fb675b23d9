"""
Serial line transport for acoustic and radio modems.

Implements LinkInterface using pyserial. Each frame is one ASCII/UTF-8 line
terminated by a line feed.
"""

import logging
import threading
from typing import Optional

import serial

from modemlink.config.models import SerialConfig
from modemlink.protocol.checksum import TERMINATOR
from modemlink.protocol.interface import LinkInterface
from modemlink.utils.exceptions import (
    LinkTimeoutError,
    NotConnectedError,
    PortInUseError,
    PortNotFoundError,
)


logger = logging.getLogger(__name__)


class SerialLink(LinkInterface):
    """Modem attached to a serial port."""

    DATA_BITS = serial.EIGHTBITS
    PARITY = serial.PARITY_NONE
    STOP_BITS = serial.STOPBITS_ONE

    # Upper bound for a single line
    MAX_LINE_BYTES = 4096

    def __init__(self, config: SerialConfig):
        """
        Initialize serial transport.

        Args:
            config: Serial port configuration.
        """
        self._config = config
        self._port: Optional[serial.Serial] = None
        self._port_lock = threading.Lock()
        self._read_lock = threading.Lock()
        self._write_lock = threading.Lock()

    @property
    def port_name(self) -> str:
        return self._config.port

    def connect(self) -> None:
        """Open serial port."""
        if self.is_connected():
            logger.warning("Already connected")
            return

        port_name = self._config.port
        timeout = self._config.timeout_seconds

        logger.info(f"Opening serial port {port_name} at {self._config.baud} baud")

        try:
            port = serial.Serial(
                port=port_name,
                baudrate=self._config.baud,
                bytesize=self.DATA_BITS,
                parity=self.PARITY,
                stopbits=self.STOP_BITS,
                timeout=timeout,
                write_timeout=timeout,
            )
        except serial.SerialException as e:
            error_msg = str(e).lower()
            if "access" in error_msg or "permission" in error_msg or "in use" in error_msg or "busy" in error_msg:
                raise PortInUseError(f"{port_name} is already in use by another application") from e
            raise PortNotFoundError(f"Failed to open {port_name}: {e}") from e

        port.reset_input_buffer()
        port.reset_output_buffer()

        with self._port_lock:
            self._port = port

    def disconnect(self) -> None:
        """Close serial port connection."""
        with self._port_lock:
            port, self._port = self._port, None

        if port is not None and port.is_open:
            port.close()
            logger.info("Serial port closed")

    def is_connected(self) -> bool:
        port = self._port
        return port is not None and port.is_open

    def _open_port(self) -> serial.Serial:
        # Readers and writers keep their own reference; disconnect() only
        # detaches it
        with self._port_lock:
            port = self._port
        if port is None or not port.is_open:
            raise NotConnectedError("Serial link not open")
        return port

    def write_line(self, frame: str) -> None:
        port = self._open_port()

        if not frame.endswith(TERMINATOR):
            frame += TERMINATOR

        with self._write_lock:
            try:
                port.write(frame.encode("utf-8"))
                port.flush()
            except serial.SerialTimeoutException as e:
                raise LinkTimeoutError(f"Timed out writing to {self.port_name}") from e
            except serial.PortNotOpenError as e:
                raise NotConnectedError("Serial link closed during write") from e

    def read_line(self) -> Optional[str]:
        port = self._open_port()

        with self._read_lock:
            try:
                data = port.readline(self.MAX_LINE_BYTES)
            except serial.PortNotOpenError as e:
                raise NotConnectedError("Serial link closed during read") from e

        if not data:
            return None

        if not data.endswith(b"\n"):
            # Timeout or size limit hit mid-line; hand it on so it gets
            # logged and rejected by the decoder
            logger.debug(f"Partial line from {self.port_name}: {data!r}")

        return data.decode("utf-8", errors="replace")
