"""
Pydantic models for API requests and responses.
"""

from typing import Annotated, Any, List, Optional
from pydantic import BaseModel, Field, field_validator

from modemlink.protocol.command import Command


_RESERVED = (",", "\n", "\r")


class ApiResponse(BaseModel):
    """
    Standard response envelope.

    All API endpoints return this format.
    """
    Value: Any = Field(description="Response value (type varies by endpoint)")
    ServerTransactionID: int = Field(description="Server transaction ID (auto-incremented)")
    ErrorNumber: int = Field(0, description="Error code (0 = success, non-zero = error)")
    ErrorMessage: str = Field("", description="Error message (empty string if no error)")
    ErrorKind: str = Field("", description="Exception class name for protocol errors")


class CommandModel(BaseModel):
    """Command as exchanged over the API."""
    name: str = Field(description="Command name (no commas or line feeds)")
    version: int = Field(0, ge=0)
    source: int = Field(0, ge=0)
    destinations: List[Annotated[int, Field(ge=0)]] = Field(default_factory=list)
    arguments: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Reject characters that would break framing."""
        if any(c in v for c in _RESERVED):
            raise ValueError("name must not contain ',' or line breaks")
        return v

    @field_validator("arguments")
    @classmethod
    def validate_arguments(cls, v):
        for arg in v:
            if any(c in arg for c in _RESERVED):
                raise ValueError(f"argument {arg!r} must not contain ',' or line breaks")
        return v

    def to_command(self) -> Command:
        return Command.from_dict(self.model_dump())


class DecodeRequest(BaseModel):
    """Frame to decode."""
    frame: str = Field(description="Frame text, line feed optional")


def make_response(
    value: Any,
    server_id: int = 0,
    error: Optional[Exception] = None
) -> ApiResponse:
    """
    Helper to create an API response.

    Args:
        value: Response value (None if error).
        server_id: Server transaction ID.
        error: Exception (if any).

    Returns:
        ApiResponse instance.
    """
    if error is None:
        return ApiResponse(
            Value=value,
            ServerTransactionID=server_id,
        )

    from modemlink.api.error_mapper import map_exception

    error_number, error_message = map_exception(error)
    return ApiResponse(
        Value=None,
        ServerTransactionID=server_id,
        ErrorNumber=error_number,
        ErrorMessage=error_message,
        ErrorKind=type(error).__name__,
    )
