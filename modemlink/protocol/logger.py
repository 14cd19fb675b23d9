"""
Protocol frame logger for debugging link traffic.

Captures TX/RX frames with timestamps and their decoded content.
"""

import threading
from collections import deque
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from modemlink.protocol.command import Command
from modemlink.protocol.encoder import decode_command
from modemlink.utils.exceptions import ProtocolError


@dataclass
class ProtocolMessage:
    """A single protocol message (TX, RX or ERR)."""
    timestamp: str
    direction: str  # "TX", "RX" or "ERR"
    raw: str
    decoded: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


class ProtocolLogger:
    """
    Thread-safe logger for protocol frames.

    Maintains a circular buffer of messages with configurable max size.
    """

    DEFAULT_MAX_MESSAGES = 500

    def __init__(self, max_messages: int = DEFAULT_MAX_MESSAGES):
        """
        Initialize protocol logger.

        Args:
            max_messages: Maximum number of messages to keep in buffer.
        """
        self._messages: deque = deque(maxlen=max_messages)
        self._lock = threading.Lock()
        self._enabled = True
        self._tx_count = 0
        self._rx_count = 0
        self._error_count = 0

    @property
    def enabled(self) -> bool:
        """Check if logging is enabled."""
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        """Enable or disable logging."""
        self._enabled = value

    @staticmethod
    def _now() -> str:
        return datetime.now().isoformat(timespec='milliseconds')

    def log_tx(self, frame: str, command: Optional[Command] = None) -> None:
        """
        Log a transmitted frame.

        Args:
            frame: Encoded frame sent.
            command: Command the frame was encoded from, if known.
        """
        if not self._enabled:
            return

        with self._lock:
            self._tx_count += 1
            self._messages.append(ProtocolMessage(
                timestamp=self._now(),
                direction="TX",
                raw=frame,
                decoded=command.to_dict() if command is not None else None,
            ))

    def log_rx(
        self,
        frame: str,
        command: Optional[Command] = None,
        error: Optional[ProtocolError] = None,
    ) -> None:
        """
        Log a received frame with its decoded content.

        Callers that already decoded the frame pass the outcome as
        ``command`` or ``error``; otherwise the frame is decoded here.
        Frames that fail to decode are recorded with the error kind and
        counted as errors.

        Args:
            frame: Frame text received.
            command: Command decoded from the frame.
            error: Decode failure for the frame.
        """
        if not self._enabled:
            return

        decoded = None
        error_msg = None
        error_kind = None

        if not frame:
            error_msg = "Empty frame (timeout?)"
        else:
            if command is None and error is None:
                try:
                    command = decode_command(frame)
                except ProtocolError as e:
                    error = e
            if error is not None:
                error_msg = str(error)
                error_kind = type(error).__name__
            else:
                decoded = command.to_dict()

        with self._lock:
            self._rx_count += 1
            if error_msg is not None:
                self._error_count += 1
            self._messages.append(ProtocolMessage(
                timestamp=self._now(),
                direction="RX",
                raw=frame or "",
                decoded=decoded,
                error=error_msg,
                error_kind=error_kind,
            ))

    def log_error(self, error_msg: str, frame: Optional[str] = None) -> None:
        """
        Log an error message.

        Args:
            error_msg: Error description.
            frame: Optional frame text associated with error.
        """
        if not self._enabled:
            return

        with self._lock:
            self._error_count += 1
            self._messages.append(ProtocolMessage(
                timestamp=self._now(),
                direction="ERR",
                raw=frame or "",
                error=error_msg,
            ))

    def get_messages(self, limit: int = 100) -> List[dict]:
        """
        Get recent messages.

        Args:
            limit: Maximum number of messages to return.

        Returns:
            List of message dictionaries, oldest first (chronological order).
        """
        with self._lock:
            messages = list(self._messages)
            if len(messages) > limit:
                messages = messages[-limit:]
            return [m.to_dict() for m in messages]

    def get_stats(self) -> dict:
        """Get logging statistics."""
        with self._lock:
            return {
                "total_messages": len(self._messages),
                "tx_count": self._tx_count,
                "rx_count": self._rx_count,
                "error_count": self._error_count,
                "max_messages": self._messages.maxlen,
                "enabled": self._enabled,
            }

    def clear(self) -> None:
        """Clear all logged messages."""
        with self._lock:
            self._messages.clear()
            self._tx_count = 0
            self._rx_count = 0
            self._error_count = 0


# Global instance
_logger: Optional[ProtocolLogger] = None
_logger_lock = threading.Lock()


def get_protocol_logger() -> ProtocolLogger:
    """Get or create the global protocol logger."""
    global _logger
    if _logger is None:
        with _logger_lock:
            if _logger is None:
                _logger = ProtocolLogger()
    return _logger


def init_protocol_logger(max_messages: int = ProtocolLogger.DEFAULT_MAX_MESSAGES,
                         enabled: bool = True) -> ProtocolLogger:
    """Replace the global protocol logger, e.g. with a configured size."""
    global _logger
    configured = ProtocolLogger(max_messages)
    configured.enabled = enabled
    with _logger_lock:
        _logger = configured
    return configured
