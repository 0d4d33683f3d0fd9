"""
Test Configuration
==================

Pytest fixtures and test configuration for fakecam.
"""

import asyncio

import pytest


JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg\xff\xd9"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png-data"
WEBP_BYTES = b"RIFF\x10\x00\x00\x00WEBPVP8 fake"


@pytest.fixture
def image_files(tmp_path):
    """Write a.jpeg, b.png and c.webp and return their paths in order."""
    paths = []
    for name, data in (
        ("a.jpeg", JPEG_BYTES),
        ("b.png", PNG_BYTES),
        ("c.webp", WEBP_BYTES),
    ):
        path = tmp_path / name
        path.write_bytes(data)
        paths.append(path)
    return paths


@pytest.fixture
def take():
    """Return a helper that collects the first n items of an async iterator."""

    def _take(agen, n):
        async def _collect():
            items = []
            try:
                async for item in agen:
                    items.append(item)
                    if len(items) >= n:
                        break
            finally:
                await agen.aclose()
            return items

        return asyncio.run(_collect())

    return _take


@pytest.fixture
def settings_factory():
    """Build CameraSettings for a list of images with no pacing delay."""
    from fakecam.config import CameraSettings

    def _make(images, interval=0.0):
        return CameraSettings.model_validate({
            "images": [str(p) for p in images],
            "stream": {"interval_seconds": interval},
        })

    return _make
