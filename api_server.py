"""API server entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys

import uvicorn

from director_studio.api.routes import create_app
from director_studio.services.local_storage import FileLocalStorage

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    stream=sys.stderr,
)
log = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the Director Studio REST API.")
    parser.add_argument("--host", default=os.environ.get("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")))
    parser.add_argument(
        "--storage",
        default=None,
        help="Key/value storage file (default: $DSVB_STORAGE_PATH or data/local_storage.json).",
    )
    return parser.parse_args()


def main() -> None:
    """Run the API server."""
    args = parse_args()
    storage = FileLocalStorage(args.storage)
    log.info(f"Using storage file {storage.path}")
    app = create_app(storage)
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
