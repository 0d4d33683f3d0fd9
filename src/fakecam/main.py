"""
fakecam Main Application
========================

FastAPI application exposing the fake camera stream.

Each request gets its own FrameSource cycle and MultipartEncoder; the
only state shared between requests is the frozen CameraSettings.

Endpoints:
    GET  /  - Endless multipart/x-mixed-replace image stream
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import StreamingResponse

from fakecam import __version__
from fakecam.config import CameraSettings
from fakecam.stream import (
    BOUNDARY,
    FrameReadError,
    FrameSource,
    MultipartEncoder,
    content_type_header,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Streaming Session
# =============================================================================

async def stream_session(settings: CameraSettings) -> AsyncIterator[bytes]:
    """
    Run one streaming session.

    Builds a fresh frame cycle and encoder, yields encoded parts, and
    closes both generators when the client goes away or a read fails.
    """
    source = FrameSource(
        settings.images,
        interval=settings.stream.interval_seconds,
    )
    encoder = MultipartEncoder(boundary=BOUNDARY)
    frames = source.frames()
    parts = encoder.encode(frames)
    started = time.monotonic()
    error = None

    logger.info("Stream session opened")
    try:
        async for chunk in parts:
            yield chunk
    except FrameReadError as e:
        error = e
        raise
    finally:
        await parts.aclose()
        await frames.aclose()
        summary = (
            f"after {time.monotonic() - started:.1f}s: "
            f"parts={encoder.parts_sent}, bytes={encoder.bytes_sent}"
        )
        if error is not None:
            logger.error(f"Stream session terminated {summary}: {error}")
        else:
            logger.info(f"Stream session closed {summary}")


def stream_response(settings: CameraSettings) -> StreamingResponse:
    """Build the streaming response for one request."""
    return StreamingResponse(
        stream_session(settings),
        status_code=200,
        media_type=content_type_header(BOUNDARY),
        headers={"Cache-Control": "no-cache"},
    )


# =============================================================================
# FastAPI Application
# =============================================================================

def create_app(settings: CameraSettings) -> FastAPI:
    """
    Create the FastAPI application for a camera configuration.

    Args:
        settings: Validated, immutable settings shared by all requests

    Returns:
        FastAPI app with the single streaming route
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Log startup and shutdown."""
        logger.info(
            f"Starting fakecam {__version__} on {settings.server.addr} "
            f"with {len(settings.images)} image(s), "
            f"interval={settings.stream.interval_seconds}s"
        )
        for path in settings.images:
            if not path.is_file():
                logger.warning(f"Image not readable yet: {path}")

        yield

        logger.info("Shutdown complete")

    app = FastAPI(
        title="fakecam",
        description="Fake MJPEG camera for testing",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    @app.get("/")
    async def stream(request: Request) -> StreamingResponse:
        """Endless multipart image stream."""
        return stream_response(request.app.state.settings)

    return app
