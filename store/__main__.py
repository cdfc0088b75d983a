import argparse
import logging

import uvicorn

from utils.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the Mini Online Store API.")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    parser.add_argument("--port", type=int, default=settings.port, help="TCP port (PORT env, default 3000).")
    parser.add_argument("--log-level", default=settings.log_level, help="uvicorn log level.")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print(f"Mini Online Store API is running on http://localhost:{args.port}")
    print("=" * 60)
    print("Available endpoints:")
    print(f"  GET    http://localhost:{args.port}/products")
    print(f"  GET    http://localhost:{args.port}/users/:id   (token required)")
    print(f"  POST   http://localhost:{args.port}/users       (token required)")
    print(f"  Browser client: http://localhost:{args.port}/index.html")
    print("=" * 60)
    uvicorn.run("store.main:app", host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
