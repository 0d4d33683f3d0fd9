"""
fakecam
=======

Fake MJPEG network camera for testing camera clients.

Serves a fixed list of image files over HTTP as an endless
multipart/x-mixed-replace stream, one image per second, cycling the
list forever.

Components:
    - stream: Frame source and multipart encoder
    - config: Pydantic settings loaded from YAML, environment and CLI
    - main: FastAPI application with the streaming endpoint
    - cli: Command-line entry point (uvicorn)

Example:
    fakecam --addr 0.0.0.0:8080 a.jpeg b.png
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
