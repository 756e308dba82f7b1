from __future__ import annotations

import argparse
import logging
import os

import uvicorn


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve KnownOrigin NFTs, accounts and orders over HTTP.")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL")
    parser.add_argument(
        "--reload",
        action="store_true",
        default=os.getenv("UVICORN_RELOAD", "0").lower() in {"1", "true", "yes"},
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)
    uvicorn.run(
        "knownorigin_backend.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=os.getenv("UVICORN_LOG_LEVEL", "info"),
    )


if __name__ == "__main__":
    main()
