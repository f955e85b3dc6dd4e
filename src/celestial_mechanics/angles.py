"""Angle normalisation, sexagesimal parsing and formatting."""

from __future__ import annotations

import math
import re

TWOPI = 2.0 * math.pi


def normalize_angle(angle: float) -> float:
    """Return angle reduced to [0, 2pi)."""
    result = math.fmod(angle, TWOPI)
    if result < 0.0:
        result += TWOPI
    # fmod of a tiny negative number can round up to exactly 2pi
    if result >= TWOPI:
        result = 0.0
    return result


def wrap_turn(fraction: float) -> float:
    """Return a fraction of a turn reduced to [0, 1)."""
    result = fraction - math.floor(fraction)
    if result >= 1.0:
        result = 0.0
    return result


def parse_angle(string: str) -> float | None:
    """Parse an angle given as degrees (or hours), minutes and seconds.

    Accepts one, two or three whitespace or colon separated numbers. Minutes
    and seconds must be non-negative; a leading minus makes the result
    negative (so '-0 30' is -0.5).

    Parameters:
        string: Text such as '60 19 51.6', '-5:30' or '11.263'.

    Returns:
        Angle in the units of the first number, or None on parse failure.
    """
    s = string.strip()
    if not s:
        return None
    parts = re.split(r'[\s:]+', s)
    if len(parts) > 3:
        return None
    try:
        numbers = [float(p) for p in parts]
    except ValueError:
        return None
    if any(n < 0 for n in numbers[1:]):
        return None
    angle = abs(numbers[0])
    for scale, n in zip((60.0, 3600.0), numbers[1:]):
        angle += n / scale
    if s.startswith('-'):
        angle = -angle
    return angle


def format_sexagesimal(value: float, separators: str = 'dms', ndecimal: int = 1) -> str:
    """Format degrees (or hours) as a sexagesimal string.

    Parameters:
        value: Angle in degrees, or hours for right ascension.
        separators: Three characters placed after each field (e.g. 'hms').
        ndecimal: Decimal places of the seconds field.

    Returns:
        Formatted string, e.g. '-28d56m10.2s'.
    """
    sign = '-' if value < 0 else ''
    scale = 10**ndecimal
    ticks = round(abs(value) * 3600.0 * scale)
    whole, frac = divmod(ticks, scale)
    minutes, seconds = divmod(whole, 60)
    degrees, minutes = divmod(minutes, 60)
    sep1, sep2, sep3 = (separators + '   ')[:3]
    if ndecimal > 0:
        sec_text = f'{seconds:02d}.{frac:0{ndecimal}d}'
    else:
        sec_text = f'{seconds:02d}'
    return f'{sign}{degrees:d}{sep1}{minutes:02d}{sep2}{sec_text}{sep3}'.rstrip()
