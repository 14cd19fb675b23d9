"""
FastAPI application factory.
"""

import itertools
import logging
import threading
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from modemlink import __version__
from modemlink.api.models import make_response
from modemlink.protocol.link import CommandLink
from modemlink.utils.exceptions import ModemLinkException


logger = logging.getLogger(__name__)

# Global server transaction ID counter (thread-safe)
_transaction_counter = itertools.count(1)
_transaction_lock = threading.Lock()


def get_next_transaction_id() -> int:
    """
    Get next server transaction ID (thread-safe).

    Returns:
        Incremented transaction ID.
    """
    with _transaction_lock:
        return next(_transaction_counter)


def create_app(link: Optional[CommandLink] = None) -> FastAPI:
    """
    Create FastAPI application instance.

    Args:
        link: Command link used by the /link endpoints. Codec endpoints
            work without one.

    Returns:
        Configured FastAPI app with all routers included.
    """
    from modemlink.api.routes import router

    app = FastAPI(
        title="modemlink",
        description="Encode, decode and exchange checksum-framed modem commands",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.state.link = link

    @app.exception_handler(ModemLinkException)
    async def modemlink_exception_handler(request: Request, exc: ModemLinkException):
        """Errors raised outside a route body (e.g. dependencies) still get an envelope."""
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc}")

        response = make_response(
            value=None,
            server_id=get_next_transaction_id(),
            error=exc
        )

        return JSONResponse(status_code=200, content=response.model_dump())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch all unhandled exceptions and return an error envelope."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)

        response = make_response(
            value=None,
            server_id=get_next_transaction_id(),
            error=exc
        )

        return JSONResponse(
            status_code=500,
            content=response.model_dump()
        )

    app.include_router(router)

    return app
