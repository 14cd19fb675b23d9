"""
Addressed command carried by the modem link protocol.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Set

from modemlink.utils.exceptions import InvalidValueError


def _check_non_negative(what: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidValueError(f"{what} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidValueError(f"{what} must be non-negative, got {value}")
    return value


@dataclass
class Command:
    """
    A named command sent from one node to a set of destination nodes.

    Setters and adders return the command so calls can be chained::

        cmd = Command("GOTO").set_source(1).add_destination(5).add_argument("10")

    Text fields (name and arguments) must not contain ``,`` or ``\\n``;
    they are written to the wire unescaped.
    """

    name: str = ""
    version: int = 0
    source: int = 0
    destinations: Set[int] = field(default_factory=set)
    arguments: List[str] = field(default_factory=list)

    def __post_init__(self):
        _check_non_negative("version", self.version)
        _check_non_negative("source", self.source)
        self.destinations = {
            _check_non_negative("destination", addr) for addr in self.destinations
        }
        self.arguments = list(self.arguments)

    def clear(self) -> "Command":
        """
        Clear name, destinations and arguments.

        Version and source are kept.
        """
        self.name = ""
        self.destinations.clear()
        self.arguments.clear()
        return self

    def set_version(self, version: int) -> "Command":
        self.version = _check_non_negative("version", version)
        return self

    def set_name(self, name: str) -> "Command":
        self.name = name
        return self

    def set_source(self, addr: int) -> "Command":
        self.source = _check_non_negative("source", addr)
        return self

    def add_destination(self, addr: int) -> "Command":
        """Add a destination address. Adding the same address twice is a no-op."""
        self.destinations.add(_check_non_negative("destination", addr))
        return self

    def add_argument(self, arg: str) -> "Command":
        """Append an argument. Arguments keep insertion order."""
        self.arguments.append(arg)
        return self

    @property
    def sorted_destinations(self) -> List[int]:
        """Destinations in wire order (ascending)."""
        return sorted(self.destinations)

    def is_addressed_to(self, addr: int) -> bool:
        return addr in self.destinations

    def encode(self) -> str:
        """Encode to a frame. See :func:`modemlink.protocol.encoder.encode_command`."""
        from modemlink.protocol.encoder import encode_command
        return encode_command(self)

    @classmethod
    def decode(cls, frame) -> "Command":
        """Decode a frame. See :func:`modemlink.protocol.encoder.decode_command`."""
        from modemlink.protocol.encoder import decode_command
        return decode_command(frame)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "version": self.version,
            "source": self.source,
            "destinations": self.sorted_destinations,
            "arguments": list(self.arguments),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Command":
        """
        Build a command from a mapping shaped like :meth:`to_dict` output.

        Missing keys take their defaults.

        Raises:
            InvalidValueError: If a numeric field is negative or not an integer.
        """
        return cls(
            name=data.get("name", ""),
            version=data.get("version", 0),
            source=data.get("source", 0),
            destinations=set(data.get("destinations", ())),
            arguments=list(data.get("arguments", ())),
        )
