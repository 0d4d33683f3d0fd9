"""
Frame Source
============

Turns the configured image list into an endless, paced sequence of Frames.

This module provides:
    - content_type_for: extension -> media type lookup
    - FrameSource: async generator that cycles the image list forever

Design Rules:
    - Content type comes from the file extension only (no content probing)
    - Every call to frames() starts a fresh cycle at the first image
    - A file that cannot be read ends the sequence; it is never skipped
    - Holds no per-session state; the cursor lives in the generator
"""

import asyncio
import logging
from pathlib import Path
from types import MappingProxyType
from typing import AsyncIterator, Dict, Iterable, Tuple, Union

from fakecam.stream.frame import Frame


logger = logging.getLogger(__name__)


FALLBACK_CONTENT_TYPE = "image/*"

CONTENT_TYPES: Dict[str, str] = {
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
}


class FrameReadError(OSError):
    """Raised when a configured image cannot be read at stream time."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"cannot read image {path}: {cause.strerror or cause}")
        self.errno = cause.errno
        self.path = path


def content_type_for(path: Union[str, Path]) -> str:
    """
    Resolve the part Content-Type for an image path.

    The extension is matched exactly as written, so ``a.JPEG`` and
    ``a.jpg`` both fall back to ``image/*``.

    Args:
        path: Image file path

    Returns:
        Media type string, never empty
    """
    extension = Path(path).suffix[1:]
    return CONTENT_TYPES.get(extension, FALLBACK_CONTENT_TYPE)


class FrameSource:
    """
    Endless, paced frame producer for one camera configuration.

    The image list is copied into a tuple on construction and never
    modified, so one FrameSource can serve any number of concurrent
    sessions. Each session calls frames() and owns the resulting
    generator.

    Attributes:
        images: Image paths in cycle order
        interval: Seconds to wait after each emitted frame

    Example:
        source = FrameSource(["a.jpeg", "b.png"], interval=1.0)

        async for frame in source.frames():
            send(frame)
    """

    def __init__(
        self,
        images: Iterable[Union[str, Path]],
        interval: float = 1.0,
    ) -> None:
        """
        Initialize frame source.

        Args:
            images: Image paths to cycle. Must not be empty.
            interval: Pacing interval in seconds. Must be >= 0.
        """
        self._images: Tuple[Path, ...] = tuple(Path(p) for p in images)
        if not self._images:
            raise ValueError("images must contain at least one path")
        if interval < 0:
            raise ValueError("interval must be >= 0")

        self._interval = interval

    @property
    def images(self) -> Tuple[Path, ...]:
        """Image paths in cycle order."""
        return self._images

    @property
    def interval(self) -> float:
        """Pacing interval in seconds."""
        return self._interval

    async def read_frame(self, path: Path) -> Frame:
        """
        Read one image and build its Frame.

        The whole file is read in a worker thread before the frame is
        built, so a partially read file is never emitted.

        Args:
            path: Image file to read

        Returns:
            Frame with Content-Type, Content-Length and the file bytes

        Raises:
            FrameReadError: If the file is missing or unreadable
        """
        try:
            payload = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise FrameReadError(path, e) from e

        headers = MappingProxyType({
            "Content-Type": content_type_for(path),
            "Content-Length": str(len(payload)),
        })
        logger.debug(f"Read {path} ({len(payload)} bytes)")
        return Frame(headers=headers, payload=payload)

    async def frames(self) -> AsyncIterator[Frame]:
        """
        Yield frames forever, cycling the image list in order.

        Sleeps for the pacing interval after every frame. Stops only
        when the consumer closes the generator or a read fails.

        Raises:
            FrameReadError: If an image cannot be read
        """
        while True:
            for path in self._images:
                frame = await self.read_frame(path)
                yield frame
                await asyncio.sleep(self._interval)
