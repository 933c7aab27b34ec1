"""
Run the portfolio backend under uvicorn.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from portfolio.config import get_settings


def main() -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Portfolio backend server")
    parser.add_argument(
        "--host",
        type=str,
        default=settings.host,
        help="Interface to bind",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=settings.port,
        help="Port to listen on (defaults to $PORT)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart on code changes (development only)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )
    logging.getLogger(__name__).info("Server listening on port %d", args.port)

    uvicorn.run(
        "portfolio.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
