"""
Entry point — start the StretchCat engine.

Usage:
    python -m stretchcat.main
    python -m stretchcat.main --port 9000 --log-level debug
    uvicorn stretchcat.api.app:app --host 127.0.0.1 --port 8766 --reload
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from .config import config


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="StretchCat work/break timer engine")
    parser.add_argument("--host", default=config.api_host, help="Bind address")
    parser.add_argument("--port", type=int, default=config.api_port, help="Bind port")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Log level for the engine and uvicorn",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    # uvicorn only configures its own loggers
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "stretchcat.api.app:app",
        host=args.host,
        port=args.port,
        reload=False,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
