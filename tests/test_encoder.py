"""
Multipart Encoder Tests
=======================

Part framing, ordering and error propagation.
"""

import asyncio

import pytest

from fakecam.stream import (
    BOUNDARY,
    Frame,
    FrameReadError,
    FrameSource,
    MultipartEncoder,
    content_type_header,
    encode_part,
)


def make_frame(payload, content_type="image/jpeg"):
    return Frame(
        headers={"Content-Type": content_type, "Content-Length": str(len(payload))},
        payload=payload,
    )


def parse_parts(body, boundary=BOUNDARY):
    """Split a multipart body into (headers, payload) using Content-Length."""
    parts = []
    delimiter = f"--{boundary}\r\n".encode()
    pos = 0
    while pos < len(body):
        assert body[pos:pos + len(delimiter)] == delimiter
        pos += len(delimiter)
        head_end = body.index(b"\r\n\r\n", pos)
        headers = {}
        for line in body[pos:head_end].decode("latin-1").split("\r\n"):
            name, _, value = line.partition(": ")
            headers[name] = value
        pos = head_end + 4
        length = int(headers["Content-Length"])
        payload = body[pos:pos + length]
        pos += length
        assert body[pos:pos + 2] == b"\r\n"
        pos += 2
        parts.append((headers, payload))
    return parts


class TestEncodePart:
    """Tests for single-part serialization."""

    def test_exact_bytes(self):
        frame = make_frame(b"abc", "image/png")

        assert encode_part(frame, "foo") == (
            b"--foo\r\n"
            b"Content-Type: image/png\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"abc\r\n"
        )

    def test_payload_round_trip(self):
        payload = bytes(range(256)) * 4
        parts = parse_parts(encode_part(make_frame(payload)))

        assert len(parts) == 1
        headers, body = parts[0]
        assert headers["Content-Type"] == "image/jpeg"
        assert body == payload

    def test_response_content_type(self):
        assert content_type_header() == "multipart/x-mixed-replace; boundary=foo"
        assert MultipartEncoder("bar").content_type == (
            "multipart/x-mixed-replace; boundary=bar"
        )

    def test_rejects_empty_boundary(self):
        with pytest.raises(ValueError):
            MultipartEncoder("")


class TestMultipartEncoder:
    """Tests for the streaming encoder."""

    def test_one_chunk_per_frame_in_order(self, take):
        frames = [make_frame(bytes([i]) * (i + 1)) for i in range(5)]

        async def source():
            for frame in frames:
                yield frame

        encoder = MultipartEncoder()
        chunks = take(encoder.encode(source()), 5)

        assert chunks == [encode_part(f) for f in frames]
        assert encoder.parts_sent == 5
        assert encoder.bytes_sent == sum(len(c) for c in chunks)

    def test_does_not_read_ahead(self):
        """The next frame is not pulled until the previous part is consumed."""
        pulled = []

        async def source():
            for i in range(3):
                pulled.append(i)
                yield make_frame(bytes([i]))

        async def run():
            agen = MultipartEncoder().encode(source())
            await agen.__anext__()
            seen = list(pulled)
            await agen.aclose()
            return seen

        assert asyncio.run(run()) == [0]

    def test_stream_parses_back_to_files(self, image_files, take):
        source = FrameSource(image_files, interval=0)
        body = b"".join(take(MultipartEncoder().encode(source.frames()), 3))

        parts = parse_parts(body)
        assert [h["Content-Type"] for h, _ in parts] == [
            "image/jpeg", "image/png", "image/webp",
        ]
        assert [p for _, p in parts] == [p.read_bytes() for p in image_files]

    def test_source_error_propagates(self, tmp_path):
        good = tmp_path / "a.jpeg"
        good.write_bytes(b"jpeg")
        missing = tmp_path / "b.png"
        source = FrameSource([good, missing], interval=0)
        encoder = MultipartEncoder()

        async def run():
            chunks = []
            with pytest.raises(FrameReadError):
                async for chunk in encoder.encode(source.frames()):
                    chunks.append(chunk)
            return chunks

        chunks = asyncio.run(run())
        assert len(chunks) == 1
        assert encoder.parts_sent == 1
