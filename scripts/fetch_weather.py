#!/usr/bin/env python3
"""Fetch current weather for one or more locations from the command line.

Reads ``OPENWEATHER_API_KEY`` (and optional ``WEATHER_*`` variables).
Each positional location is typed into the client as if by a user;
only the last one survives the debounce unless ``--no-debounce`` is
given, in which case every location is fetched in turn.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyweatherfetch import WeatherClient, WeatherConfig, WeatherConfigError  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch current weather via pyweatherfetch")
    parser.add_argument("locations", nargs="+", help="Location names, e.g. 'Berlin' 'Paris,FR'")
    parser.add_argument("--units", default=None, help="metric, imperial or standard")
    parser.add_argument("--no-debounce", action="store_true", help="Fetch every location immediately")
    parser.add_argument("--raw", action="store_true", help="Print the provider JSON instead of a summary")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    overrides = {"units": args.units} if args.units else {}
    try:
        config = WeatherConfig.from_env(**overrides)
    except WeatherConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    async with WeatherClient(config) as client:
        if args.no_debounce:
            for location in args.locations:
                await client.fetch_weather(location)
                _report(client, location, raw=args.raw)
            return 0 if client.error is None and not client.fallback else 1

        for location in args.locations:
            client.set_location(location)
        task = client.engine.debouncer.flush()
        if task is not None:
            await task
        _report(client, client.location, raw=args.raw)
        return 0 if client.error is None and not client.fallback else 1


def _report(client: WeatherClient, location: str, *, raw: bool) -> None:
    if client.fallback:
        print(f"{location}: weather service unavailable, try again later")
        return
    if client.error is not None:
        print(f"{location}: {client.error}")
        return
    if raw:
        print(json.dumps(client.data, indent=2, ensure_ascii=False))
        return
    summary = client.summary
    if summary is None:
        print(f"{location}: no displayable data")
        return
    print(
        f"{summary.location_label}: {summary.temp:.1f}°, {summary.description}, "
        f"humidity {summary.humidity:.0f}%, wind {summary.wind_speed:.1f}"
    )


def main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
