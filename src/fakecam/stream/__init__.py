"""
Stream Module
=============

Frame production and multipart framing for the fake camera.

This module provides the streaming pipeline:
    - Frame: Typed frame data model (part headers + raw bytes)
    - FrameSource: Endless, paced frame producer cycling an image list
    - MultipartEncoder: One-in-one-out multipart/x-mixed-replace serializer

Example:
    from fakecam.stream import FrameSource, MultipartEncoder

    source = FrameSource(["a.jpeg", "b.png"], interval=1.0)
    encoder = MultipartEncoder(boundary="foo")

    async for chunk in encoder.encode(source.frames()):
        await send(chunk)
"""

from fakecam.stream.frame import Frame
from fakecam.stream.source import (
    CONTENT_TYPES,
    FALLBACK_CONTENT_TYPE,
    FrameReadError,
    FrameSource,
    content_type_for,
)
from fakecam.stream.encoder import (
    BOUNDARY,
    MultipartEncoder,
    content_type_header,
    encode_part,
)


__all__ = [
    "BOUNDARY",
    "CONTENT_TYPES",
    "FALLBACK_CONTENT_TYPE",
    "Frame",
    "FrameReadError",
    "FrameSource",
    "MultipartEncoder",
    "content_type_for",
    "content_type_header",
    "encode_part",
]
