"""
Loopback link for running without a modem.

Every frame written is queued and handed back by the next read, optionally
delayed and corrupted to exercise the checksum path.
"""

import logging
import random
import threading
import time
from collections import deque
from typing import Optional

from modemlink.config.models import SimulatorConfig
from modemlink.protocol.checksum import FIELD_SEPARATOR, TERMINATOR
from modemlink.protocol.interface import LinkInterface
from modemlink.utils.exceptions import NotConnectedError


logger = logging.getLogger(__name__)


class LoopbackLink(LinkInterface):
    """
    In-memory implementation of LinkInterface.
    """

    def __init__(self, config: Optional[SimulatorConfig] = None):
        """
        Initialize simulator.

        Args:
            config: Simulator configuration.
        """
        self.config = config or SimulatorConfig()
        self._connected = False
        self._lock = threading.Lock()
        self._queue: deque = deque()
        self._random = random.Random(self.config.seed)
        self.corrupted_count = 0

    def connect(self) -> None:
        with self._lock:
            if self._connected:
                logger.warning("Already connected")
                return
            self._connected = True
            logger.info("Loopback link connected")

    def disconnect(self) -> None:
        with self._lock:
            if not self._connected:
                return
            self._connected = False
            self._queue.clear()
            logger.info("Loopback link disconnected")

    def is_connected(self) -> bool:
        return self._connected

    def write_line(self, frame: str) -> None:
        if not self._connected:
            raise NotConnectedError("Loopback link not connected")

        if self.config.response_latency_ms > 0:
            time.sleep(self.config.response_latency_ms / 1000.0)

        if not frame.endswith(TERMINATOR):
            frame += TERMINATOR

        with self._lock:
            if self._random.random() < self.config.inject_corruption_rate:
                frame = self._corrupt(frame)
                self.corrupted_count += 1
            self._queue.append(frame)

    def read_line(self) -> Optional[str]:
        if not self._connected:
            raise NotConnectedError("Loopback link not connected")

        with self._lock:
            if not self._queue:
                return None
            return self._queue.popleft()

    def inject(self, frame: str) -> None:
        """Queue a raw frame as if it had been received from a peer."""
        with self._lock:
            self._queue.append(frame)

    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    def _corrupt(self, frame: str) -> str:
        """Flip one bit of one character in front of the checksum separator."""
        end = frame.rfind(FIELD_SEPARATOR)
        if end <= 0:
            return frame
        idx = self._random.randrange(end)
        flipped = chr(ord(frame[idx]) ^ 0x01)
        logger.debug(f"Corrupting frame at offset {idx}: {frame[idx]!r} -> {flipped!r}")
        return frame[:idx] + flipped + frame[idx + 1:]
