"""
Command-level link: encodes outgoing commands and decodes incoming frames.
"""

import logging
import threading
from typing import Optional

from modemlink.config.models import LinkConfig
from modemlink.protocol.command import Command
from modemlink.protocol.encoder import decode_command, encode_command
from modemlink.protocol.interface import LinkInterface
from modemlink.protocol.logger import ProtocolLogger, get_protocol_logger
from modemlink.utils.exceptions import LinkError, ProtocolError


logger = logging.getLogger(__name__)


class CommandLink:
    """
    Send and receive commands over a line transport.

    A received frame that fails to decode is logged and dropped; the link
    stays usable for the next frame. There is no retry or acknowledgement.
    """

    def __init__(
        self,
        transport: LinkInterface,
        config: Optional[LinkConfig] = None,
        protocol_logger: Optional[ProtocolLogger] = None,
    ):
        """
        Args:
            transport: Line transport carrying the frames.
            config: Addressing behaviour. Defaults accept every command.
            protocol_logger: Frame log. Defaults to the global instance.
        """
        self.transport = transport
        self._config = config or LinkConfig()
        self._protocol_logger = protocol_logger or get_protocol_logger()
        self._lock = threading.Lock()
        self._sent = 0
        self._received = 0
        self._discarded = 0

    @property
    def address(self) -> Optional[int]:
        return self._config.address

    def connect(self) -> None:
        self.transport.connect()

    def disconnect(self) -> None:
        self.transport.disconnect()

    def is_connected(self) -> bool:
        return self.transport.is_connected()

    def send_command(self, command: Command) -> str:
        """
        Encode and transmit a command.

        Returns:
            The frame that was written.

        Raises:
            NotConnectedError: If the transport is closed.
            LinkTimeoutError: If the transport could not take the frame in time.
        """
        frame = encode_command(command)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"TX: {frame!r}")

        try:
            self.transport.write_line(frame)
        except LinkError as e:
            logger.error(f"Send of {command.name} failed: {e}")
            self._protocol_logger.log_error(str(e), frame)
            raise

        self._protocol_logger.log_tx(frame, command)

        with self._lock:
            self._sent += 1
        return frame

    def receive_command(self) -> Optional[Command]:
        """
        Read and decode one frame.

        Returns:
            The decoded command, or None if nothing arrived, the frame was
            malformed, or it was addressed to another node.

        Raises:
            NotConnectedError: If the transport is closed.
        """
        frame = self.transport.read_line()
        if not frame:
            return None

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"RX: {frame!r}")

        try:
            command = decode_command(frame)
        except ProtocolError as e:
            self._protocol_logger.log_rx(frame, error=e)
            logger.warning(f"Discarding frame ({type(e).__name__}): {e}")
            with self._lock:
                self._discarded += 1
            return None

        self._protocol_logger.log_rx(frame, command=command)

        if (
            self.address is not None
            and not self._config.accept_foreign
            and not command.is_addressed_to(self.address)
        ):
            logger.debug(
                f"Ignoring {command.name} for {command.sorted_destinations} "
                f"(local address {self.address})"
            )
            with self._lock:
                self._discarded += 1
            return None

        with self._lock:
            self._received += 1
        return command

    def get_stats(self) -> dict:
        with self._lock:
            return {
                "connected": self.is_connected(),
                "address": self.address,
                "sent": self._sent,
                "received": self._received,
                "discarded": self._discarded,
            }
