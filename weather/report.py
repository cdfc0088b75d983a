from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
from urllib import error, request

LOCATION = "Vehari, Pakistan"
RULE = "=" * 40

REPORT_LABELS = {
    "time": "Time",
    "temperature": "Temperature",
    "wind_speed": "Wind Speed",
    "wind_direction": "Wind Dir.",
    "weather_code": "Weather Code",
    "generated": "Report generated",
}


class WeatherError(RuntimeError):
    pass


@dataclass(frozen=True)
class CurrentWeather:
    time: str
    temperature: float
    windspeed: float
    winddirection: float
    weathercode: int

    @classmethod
    def from_api(cls, body: Dict[str, Any]) -> "CurrentWeather":
        current = body.get("current_weather")
        if not isinstance(current, dict):
            raise WeatherError("Weather API response has no current_weather block")
        try:
            return cls(
                time=str(current["time"]),
                temperature=float(current["temperature"]),
                windspeed=float(current["windspeed"]),
                winddirection=float(current["winddirection"]),
                weathercode=int(current["weathercode"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise WeatherError(f"Malformed current_weather block: {exc}") from exc


def fetch_current_weather(url: str, timeout_sec: float = 10.0) -> CurrentWeather:
    http_request = request.Request(url=url, headers={"Accept": "application/json"}, method="GET")
    try:
        with request.urlopen(http_request, timeout=timeout_sec) as response:
            body = json.loads(response.read().decode("utf-8"))
    except (error.URLError, TimeoutError, json.JSONDecodeError) as exc:
        raise WeatherError(f"Weather request failed: {exc}") from exc
    return CurrentWeather.from_api(body)


def _fmt(value: float) -> str:
    return f"{value:g}"


def format_report(weather: CurrentWeather, generated_at: Optional[datetime] = None) -> str:
    generated_at = generated_at or datetime.now()
    lines = [
        RULE,
        f"  Weather Report - {LOCATION}",
        RULE,
        f"  Time         : {weather.time}",
        f"  Temperature  : {_fmt(weather.temperature)} °C",
        f"  Wind Speed   : {_fmt(weather.windspeed)} km/h",
        f"  Wind Dir.    : {_fmt(weather.winddirection)}°",
        f"  Weather Code : {weather.weathercode}",
        RULE,
        f"  Report generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        RULE,
    ]
    return "\n".join(lines)


def parse_report(text: str) -> Dict[str, str]:
    """Field values keyed like REPORT_LABELS; absent lines come back empty."""
    fields = {key: "" for key in REPORT_LABELS}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or "===" in line or ":" not in line:
            continue
        label, value = line.split(":", 1)
        label = label.strip()
        for key, expected in REPORT_LABELS.items():
            if label == expected:
                fields[key] = value.strip()
                break
    return fields


def save_report(text: str, log_file: str) -> Path:
    path = Path(log_file)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
