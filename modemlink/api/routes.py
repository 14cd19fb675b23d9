"""
API endpoints for the codec, the command link and the frame log.
"""

import logging
from fastapi import APIRouter, Depends, Query, Request

from modemlink.api.app import get_next_transaction_id
from modemlink.api.models import ApiResponse, CommandModel, DecodeRequest, make_response
from modemlink.protocol.encoder import decode_command, encode_command
from modemlink.protocol.link import CommandLink
from modemlink.protocol.logger import get_protocol_logger
from modemlink.utils.exceptions import NotConnectedError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["modemlink"])


def get_link(request: Request) -> CommandLink:
    """Dependency to get the command link from app.state."""
    link = getattr(request.app.state, 'link', None)
    if link is None:
        raise NotConnectedError("No command link configured")
    return link


@router.get("/health")
async def health_check():
    """Simple health check endpoint (no dependencies)."""
    return {"status": "ok", "message": "Server is running"}


# Codec

@router.post("/codec/encode", response_model=ApiResponse)
async def encode(body: CommandModel):
    """Encode a command into a frame."""
    try:
        frame = encode_command(body.to_command())
        logger.debug(f"POST /codec/encode -> {frame!r}")
        return make_response(frame, get_next_transaction_id())
    except Exception as e:
        logger.error(f"Error in /codec/encode: {e}")
        return make_response(None, get_next_transaction_id(), e)


@router.post("/codec/decode", response_model=ApiResponse)
async def decode(body: DecodeRequest):
    """Decode a frame into a command."""
    try:
        command = decode_command(body.frame)
        logger.debug(f"POST /codec/decode -> {command.name}")
        return make_response(command.to_dict(), get_next_transaction_id())
    except Exception as e:
        logger.info(f"Rejected frame in /codec/decode: {e}")
        return make_response(None, get_next_transaction_id(), e)


# Link

@router.post("/link/send", response_model=ApiResponse)
def link_send(body: CommandModel, link: CommandLink = Depends(get_link)):
    """Encode a command and transmit it."""
    try:
        frame = link.send_command(body.to_command())
        return make_response(frame, get_next_transaction_id())
    except Exception as e:
        logger.error(f"Error in /link/send: {e}")
        return make_response(None, get_next_transaction_id(), e)


@router.get("/link/receive", response_model=ApiResponse)
def link_receive(link: CommandLink = Depends(get_link)):
    """Read one command from the link (null if none or discarded)."""
    try:
        command = link.receive_command()
        value = command.to_dict() if command is not None else None
        return make_response(value, get_next_transaction_id())
    except Exception as e:
        logger.error(f"Error in /link/receive: {e}")
        return make_response(None, get_next_transaction_id(), e)


@router.get("/link/status", response_model=ApiResponse)
def link_status(link: CommandLink = Depends(get_link)):
    """Connection state and counters."""
    return make_response(link.get_stats(), get_next_transaction_id())


# Frame log

@router.get("/protocol/log", response_model=ApiResponse)
async def protocol_log(limit: int = Query(100, ge=1, le=10000)):
    """Most recent frames, oldest first."""
    return make_response(get_protocol_logger().get_messages(limit), get_next_transaction_id())


@router.get("/protocol/stats", response_model=ApiResponse)
async def protocol_stats():
    return make_response(get_protocol_logger().get_stats(), get_next_transaction_id())


@router.delete("/protocol/log", response_model=ApiResponse)
async def protocol_log_clear():
    get_protocol_logger().clear()
    return make_response(True, get_next_transaction_id())
