"""
Command-Line Entry Point
========================

Parses arguments, builds settings and runs the app under uvicorn.

Usage:
    fakecam a.jpeg b.png
    fakecam --addr 0.0.0.0:9000 --interval 0.5 frames/*.jpeg
    python -m fakecam --config fakecam.yaml a.jpeg
"""

import argparse
import logging
from typing import List, Optional

import uvicorn
import yaml
from pydantic import ValidationError

from fakecam import __version__
from fakecam.config import load_config, setup_logging
from fakecam.main import create_app


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fakecam",
        description="Fake MJPEG camera, for testing purposes",
    )
    parser.add_argument(
        "images",
        nargs="*",
        help="Images to display, cycled in order",
    )
    parser.add_argument(
        "-a", "--addr",
        default=None,
        help="HTTP server listen address (default: localhost:8080)",
    )
    parser.add_argument(
        "-i", "--interval",
        type=float,
        default=None,
        help="Seconds between frames (default: 1.0)",
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="YAML config file",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments and serve until terminated.

    Returns:
        Process exit code. Argument and configuration errors exit with
        status 2 via the parser; bind failures exit 1 inside uvicorn.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_config(
            config_path=args.config,
            images=args.images or None,
            addr=args.addr,
            interval=args.interval,
            log_level=args.log_level,
        )
    except ValidationError as e:
        parser.error(f"invalid configuration:\n{e}")
    except (OSError, ValueError, yaml.YAMLError) as e:
        parser.error(str(e))

    setup_logging(settings)
    logger.info(
        f"Serving {len(settings.images)} image(s) at http://{settings.server.addr}/"
    )

    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.logging.level.lower(),
    )
    return 0
