"""
Multipart Stream Encoder
========================

Serializes a Frame sequence as a multipart/x-mixed-replace body.

Each frame becomes one part:

    --<boundary>\\r\\n
    Content-Type: image/jpeg\\r\\n
    Content-Length: 1234\\r\\n
    \\r\\n
    <payload>\\r\\n

Design Rules:
    - Strict one-in-one-out: one part per frame, in order, nothing buffered
    - Failures from the frame sequence propagate unchanged
    - Payloads are not scanned for the boundary token
"""

import logging
from typing import AsyncIterable, AsyncIterator

from fakecam.stream.frame import Frame


logger = logging.getLogger(__name__)


BOUNDARY = "foo"

_CRLF = b"\r\n"


def content_type_header(boundary: str = BOUNDARY) -> str:
    """Top-level response Content-Type for a given boundary."""
    return f"multipart/x-mixed-replace; boundary={boundary}"


def encode_part(frame: Frame, boundary: str = BOUNDARY) -> bytes:
    """
    Serialize one frame as a multipart body part.

    Args:
        frame: Frame to serialize
        boundary: Boundary token, without the leading dashes

    Returns:
        Delimiter line, header lines, blank line, payload and trailing CRLF
    """
    head = [f"--{boundary}"]
    head.extend(f"{name}: {value}" for name, value in frame.headers.items())
    return "\r\n".join(head).encode("latin-1") + _CRLF + _CRLF + frame.payload + _CRLF


class MultipartEncoder:
    """
    One-session multipart encoder.

    Wraps a frame sequence and yields the bytes of each part as soon as
    its frame arrives. Keeps simple counters for session logging.

    Attributes:
        boundary: Boundary token
        parts_sent: Parts yielded so far
        bytes_sent: Bytes yielded so far

    Example:
        encoder = MultipartEncoder(boundary="foo")
        async for chunk in encoder.encode(source.frames()):
            await write(chunk)
    """

    def __init__(self, boundary: str = BOUNDARY) -> None:
        if not boundary:
            raise ValueError("boundary must not be empty")

        self.boundary = boundary
        self.parts_sent: int = 0
        self.bytes_sent: int = 0

    @property
    def content_type(self) -> str:
        """Response Content-Type matching this encoder's boundary."""
        return content_type_header(self.boundary)

    async def encode(self, frames: AsyncIterable[Frame]) -> AsyncIterator[bytes]:
        """
        Encode frames into multipart parts, one chunk per frame.

        Args:
            frames: Frame sequence, usually FrameSource.frames()

        Yields:
            Encoded part bytes
        """
        async for frame in frames:
            chunk = encode_part(frame, self.boundary)
            self.parts_sent += 1
            self.bytes_sent += len(chunk)
            logger.debug(f"Encoded part {self.parts_sent}: {frame!r}")
            yield chunk
