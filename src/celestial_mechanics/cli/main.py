"""CLI entry point: celestial-mechanics tables|position|events subcommands."""

from __future__ import annotations

import argparse
import logging
import math
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import NoReturn, cast

from celestial_mechanics.angles import format_sexagesimal, parse_angle
from celestial_mechanics.bodies import body_by_name, spherical_position
from celestial_mechanics.config import get_log_level
from celestial_mechanics.constants import DEGREES_PER_HOUR_RA
from celestial_mechanics.coordinates import (
    B1950_FRAME,
    GALACTIC,
    ICRS,
    J2000_FRAME,
    CoordinateFrame,
    GeographicLocation,
    equatorial,
    mean_ecliptic,
    true_ecliptic,
)
from celestial_mechanics.frame_tables import build_frame_tables
from celestial_mechanics.load import FRAME_FILES, load_context, write_series
from celestial_mechanics.solver import body_events
from celestial_mechanics.time_utils import Instant, format_instant

logger = logging.getLogger(__name__)

# Frame names accepted by --frame; the '-of-date' frames use the --date epoch
FRAME_CHOICES: dict[str, Callable[[Instant], CoordinateFrame]] = {
    'icrs': lambda _t: ICRS,
    'j2000': lambda _t: J2000_FRAME,
    'b1950': lambda _t: B1950_FRAME,
    'galactic': lambda _t: GALACTIC,
    'equatorial-of-date': equatorial,
    'ecliptic-of-date': mean_ecliptic,
    'true-ecliptic-of-date': true_ecliptic,
}


def _configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI (stderr, level from --verbose or CELESTIAL_MECHANICS_LOG)."""
    level = logging.DEBUG if verbose else logging.WARNING
    env_level = get_log_level()
    if env_level is not None:
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )


def _parse_degrees(text: str) -> float:
    """argparse type: decimal or sexagesimal degrees."""
    value = parse_angle(text)
    if value is None:
        raise argparse.ArgumentTypeError(f'invalid angle {text!r}')
    return value


def _tables_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Generate rotation tables into --output-dir (tables subcommand).

    Parameters:
        parser: Argument parser (unused).
        args: Parsed args; output_dir, start, stop, step.

    Returns:
        Exit code 0 on success.
    """
    start = Instant.parse(args.start)
    stop = Instant.parse(args.stop)
    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    for frame_type, series in build_frame_tables(start, stop, args.step).items():
        path = out_dir / FRAME_FILES[frame_type]
        write_series(series, path)
        print(f'{path}: {len(series)} rows')
    return 0


def _position_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Print a body's position (position subcommand)."""
    body = body_by_name(args.body)
    instant = Instant.parse(args.date)
    frame = FRAME_CHOICES[args.frame](instant)
    context = load_context(args.data_dir)
    coords = spherical_position(body, instant, frame, context)
    lon_deg = math.degrees(coords.longitude)
    lat_deg = math.degrees(coords.latitude)
    print(f'{body.name}  {format_instant(instant)} UT')
    print(coords)
    if frame.type.is_equatorial:
        ra = format_sexagesimal(lon_deg / DEGREES_PER_HOUR_RA, 'hms', 2)
        dec = format_sexagesimal(lat_deg, 'dms', 1)
        print(f'RA {ra}  Dec {dec}')
    return 0


def _events_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Print a body's rising, culmination, setting and twilight times (events subcommand)."""
    body = body_by_name(args.body)
    instant = Instant.parse(args.date)
    location = GeographicLocation.from_degrees(args.latitude, args.longitude, args.elevation)
    context = load_context(args.data_dir)
    for event in body_events(body, instant, location, context):
        print(f'{format_instant(event.instant)}  {event.type.value}')
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for celestial-mechanics CLI (tables | position | events).

    Returns:
        Exit code 0 on success, 1 on failure.
    """
    parser = argparse.ArgumentParser(
        prog='celestial-mechanics',
        description='Rotation tables, body positions, and rise/transit/set events.',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    tables_parser = subparsers.add_parser('tables', help='Generate frame rotation tables')
    tables_parser.add_argument('--output-dir', required=True, help='Directory for the tables')
    tables_parser.add_argument('--start', default='1990-01-01', help='First table date')
    tables_parser.add_argument('--stop', default='2030-01-01', help='Last table date')
    tables_parser.add_argument('--step', type=float, default=10.0, help='Row spacing in days')
    tables_parser.set_defaults(func=_tables_cmd)

    pos_parser = subparsers.add_parser('position', help='Position of a body')
    pos_parser.add_argument('--body', required=True, help='Body name, e.g. Saturn')
    pos_parser.add_argument('--date', required=True, help='Date and time (UT)')
    pos_parser.add_argument(
        '--frame', default='icrs', choices=sorted(FRAME_CHOICES), help='Output frame'
    )
    pos_parser.add_argument(
        '--data-dir', default=None, help='Ephemeris tables; env: CELESTIAL_EPHEMERIS_PATH'
    )
    pos_parser.set_defaults(func=_position_cmd)

    ev_parser = subparsers.add_parser('events', help='Rise, transit, set and twilight times')
    ev_parser.add_argument('--body', required=True, help='Body name, e.g. Sun')
    ev_parser.add_argument('--date', required=True, help='UT date')
    ev_parser.add_argument(
        '--latitude', type=_parse_degrees, required=True, help='Degrees, north positive'
    )
    ev_parser.add_argument(
        '--longitude', type=_parse_degrees, required=True, help='Degrees, east positive'
    )
    ev_parser.add_argument('--elevation', type=float, default=None, help='Metres')
    ev_parser.add_argument(
        '--data-dir', default=None, help='Ephemeris tables; env: CELESTIAL_EPHEMERIS_PATH'
    )
    ev_parser.set_defaults(func=_events_cmd)

    for sub in (tables_parser, pos_parser, ev_parser):
        sub.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')

    args = parser.parse_args(argv)
    _configure_logging(verbose=args.verbose)
    try:
        return cast(int, args.func(parser, args))
    except (ValueError, RuntimeError, KeyError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1


def cli_main() -> NoReturn:
    """Entry point for console_scripts; calls main() and exits with its return code."""
    sys.exit(main())


if __name__ == '__main__':
    sys.exit(main())
