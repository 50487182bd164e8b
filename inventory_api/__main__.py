"""
Run the inventory API with uvicorn.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from inventory_api.config import get_settings

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Inventory API server")
    parser.add_argument(
        "--host",
        default=settings.host,
        help="Interface to bind (default: %(default)s)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help="Port to listen on (default: %(default)s)",
    )
    args = parser.parse_args()

    from inventory_api.app import app

    logger.info("Servidor rodando em http://%s:%s", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
