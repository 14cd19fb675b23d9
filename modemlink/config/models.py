"""
Configuration models using Pydantic for validation.

All configuration is loaded from config.json and validated at startup.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    ip: str = Field(default="127.0.0.1", description="IP address to bind to")
    port: int = Field(default=5000, ge=1, le=65535, description="HTTP port")


class SerialConfig(BaseModel):
    """Serial port configuration for the modem."""

    port: str = Field(default="", description="Serial port name (e.g., /dev/ttyUSB0)")
    baud: int = Field(default=9600, ge=1, description="Baud rate")
    timeout_seconds: float = Field(
        default=5.0, gt=0, le=120, description="Read/write timeout in seconds"
    )


class LinkConfig(BaseModel):
    """Command link behaviour."""

    address: Optional[int] = Field(
        default=None, ge=0, description="Local node address (None accepts every command)"
    )
    accept_foreign: bool = Field(
        default=False,
        description="Keep received commands that are not addressed to the local node"
    )


class ProtocolLogConfig(BaseModel):
    """In-memory frame log configuration."""

    enabled: bool = Field(default=True, description="Record TX/RX frames")
    max_messages: int = Field(
        default=500, ge=1, le=100000, description="Ring buffer size"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    file: Optional[str] = Field(
        default=None,
        description="Log file path (None for console only)"
    )
    file_max_bytes: int = Field(
        default=10 * 1024 * 1024, ge=1024, description="Rotate the log file at this size"
    )
    file_backup_count: int = Field(
        default=5, ge=0, le=100, description="Rotated log files to keep"
    )
    trace_frames: bool = Field(
        default=False,
        description="Log every TX/RX frame at DEBUG whatever the root level"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class SimulatorConfig(BaseModel):
    """Loopback link simulator configuration."""

    enabled: bool = Field(default=False, description="Use loopback link instead of a serial port")
    response_latency_ms: int = Field(
        default=0, ge=0, le=5000, description="Artificial delay per written frame (ms)"
    )
    inject_corruption_rate: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Probability of corrupting a frame (0.0-1.0)"
    )
    seed: Optional[int] = Field(
        default=None, description="Random seed for reproducible corruption"
    )


class AppConfig(BaseModel):
    """
    Root configuration model.

    Validated with ``context={"require_serial_port": True}``, a config that
    would open the serial link must name its port. Construction without
    that context (defaults, tests, --simulate) skips the check.
    """

    model_config = ConfigDict(extra="forbid")  # Raise error on unknown fields

    server: ServerConfig = Field(default_factory=ServerConfig)
    # Ahead of serial, whose check reads it
    simulator: SimulatorConfig = Field(default_factory=SimulatorConfig)
    serial: SerialConfig = Field(default_factory=SerialConfig, validate_default=True)
    link: LinkConfig = Field(default_factory=LinkConfig)
    protocol_log: ProtocolLogConfig = Field(default_factory=ProtocolLogConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("serial")
    @classmethod
    def validate_serial_port(cls, v: SerialConfig, info: ValidationInfo) -> SerialConfig:
        if not (info.context or {}).get("require_serial_port"):
            return v
        simulator = info.data.get("simulator")
        if simulator is not None and not simulator.enabled and not v.port:
            raise ValueError(
                "port is required unless simulator.enabled is true (or run with --simulate)"
            )
        return v
