"""
Abstract interface for line-oriented link transports.

This interface allows transparent substitution between a real modem and the
loopback simulator.
"""

from abc import ABC, abstractmethod
from typing import Optional


class LinkInterface(ABC):
    """Abstract base class for transports that carry one frame per line."""

    @abstractmethod
    def connect(self) -> None:
        """
        Open the link.

        Raises:
            PortNotFoundError: If serial port does not exist.
            PortInUseError: If port is already open.
        """
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close the link."""
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """
        Check if the link is open.

        Returns:
            True if connected, False otherwise.
        """
        pass

    @abstractmethod
    def write_line(self, frame: str) -> None:
        """
        Transmit one complete frame, line terminator included.

        Raises:
            NotConnectedError: If not connected.
            LinkTimeoutError: If the write does not complete in time.
        """
        pass

    @abstractmethod
    def read_line(self) -> Optional[str]:
        """
        Receive one complete frame.

        Returns:
            Frame text including its terminator, or None if nothing arrived
            before the timeout.

        Raises:
            NotConnectedError: If not connected.
        """
        pass
