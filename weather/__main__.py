import argparse
import logging
import sys

import uvicorn

from utils.config import get_settings
from weather.report import WeatherError, fetch_current_weather, format_report, save_report
from weather.server import create_application

logger = logging.getLogger("weather")


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Fetch current weather, log it to a file and serve a dashboard.")
    parser.add_argument("--url", default=settings.weather_api_url, help="Open-Meteo forecast URL with current_weather=true.")
    parser.add_argument("--log-file", default=settings.weather_log_file, help="Text file the report is written to.")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    parser.add_argument("--port", type=int, default=settings.port, help="TCP port (PORT env, default 3000).")
    parser.add_argument("--timeout", type=float, default=10.0, help="Weather API timeout in seconds.")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    print("\n--- Weather Logger - starting up ---\n")
    try:
        logger.info("Fetching weather data from %s", args.url)
        report = format_report(fetch_current_weather(args.url, timeout_sec=args.timeout))
        print(report)
        path = save_report(report, args.log_file)
        logger.info("Weather report saved to %s", path)
    except (WeatherError, OSError) as exc:
        print(f"[ERR] Something went wrong: {exc}", file=sys.stderr)
        sys.exit(1)

    print("=" * 50)
    print(f"[OK] Server is running at http://localhost:{args.port}")
    print("=" * 50)
    uvicorn.run(create_application(args.log_file), host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
