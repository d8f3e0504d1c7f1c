"""
File: cli.py
Purpose: Command line entry point.

  valsearch serve [--host H] [--port P]   run the HTTP service
  valsearch sync  [--db PATH]             run one blocking sync pass and exit
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from .clients import make_http_client
from .config import settings
from .db import open_index
from .logging_setup import configure_logging
from .pipeline import IngestionPipeline, PassResult

log = logging.getLogger("valsearch.cli")


async def run_sync(db_path: Optional[str] = None) -> PassResult:
    """Open the index, run one pass against the remote API, close everything."""
    index = await asyncio.to_thread(open_index, db_path)
    try:
        async with make_http_client() as http:
            return await IngestionPipeline(index, http).run_once()
    finally:
        index.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="valsearch", description="Val Town full-text search")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP service")
    serve.add_argument("--host", default=settings.HOST)
    serve.add_argument("--port", type=int, default=settings.PORT)

    sync = sub.add_parser("sync", help="run one sync pass and exit")
    sync.add_argument("--db", default=settings.DB_PATH, help="SQLite index path")

    args = parser.parse_args(argv)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("valsearch.main:app", host=args.host, port=args.port)
        return 0

    configure_logging()
    try:
        result = asyncio.run(run_sync(args.db))
    except Exception:
        log.exception("Sync failed")
        return 1
    log.info(f"Synced {result.records} vals from {result.pages} pages", extra={"purged": result.purged})
    return 0


if __name__ == "__main__":
    sys.exit(main())
