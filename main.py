#!/usr/bin/env python3
"""
Bookshelf API -- user accounts and a personal book collection over HTTP.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 0.0.0.0 --reload

Environment variables (or .env):
  SECRET_KEY         Token signing secret, at least 32 characters. Required
                     unless DEBUG=true.
  DATABASE_URL       SQLAlchemy URL, e.g. postgresql+psycopg://user:pw@localhost/bookcollectiondb
  TOKEN_TTL_SECONDS  Bearer token lifetime (default 900).
  BCRYPT_ROUNDS      Password hashing work factor (default 10).
  HOST / PORT        Defaults for --host / --port (127.0.0.1:4000).
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Run the Bookshelf API server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    args = parser.parse_args()

    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
