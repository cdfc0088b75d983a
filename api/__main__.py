import argparse
import logging

import uvicorn

from utils.config import get_settings


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the multi-database users CRUD API.")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    parser.add_argument("--port", type=int, default=settings.port, help="TCP port (PORT env, default 3000).")
    parser.add_argument("--log-level", default=settings.log_level, help="uvicorn log level.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    print(f"\nServer running at http://localhost:{args.port}")
    for engine, label in (("mongo", "MongoDB"), ("mysql", "MySQL"), ("sqlite", "SQLite")):
        print(f"{label:<8} CRUD -> http://localhost:{args.port}/{engine}.html")
    print()
    uvicorn.run("api.main:app", host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
