"""
Frame Data Model
================

Internal frame representation for the streaming pipeline.

A Frame is what the FrameSource hands to the MultipartEncoder: the part
headers for one image plus its raw bytes.

Design Rules:
    - This is the ONLY frame format passed to the encoder
    - Does NOT decode or transcode image data
    - Header order is preserved when the part is serialized
"""

from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True, slots=True)
class Frame:
    """
    One image of the simulated camera feed.

    Immutable (frozen) so a frame cannot change between being read and
    being written to the response. FrameSource hands in a read-only
    mapping for the headers.

    Attributes:
        headers: Part headers, at minimum Content-Type and Content-Length
        payload: Raw file contents, sent unchanged
    """

    headers: Mapping[str, str]
    payload: bytes

    @property
    def content_type(self) -> str:
        return self.headers["Content-Type"]

    @property
    def content_length(self) -> int:
        return int(self.headers["Content-Length"])

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the full image."""
        return (
            f"Frame(content_type={self.content_type!r}, "
            f"content_length={self.content_length})"
        )
