"""Time model: Julian Day backed instants, epochs, sidereal time, rms-julian parsing."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass

import julian

from celestial_mechanics.angles import normalize_angle
from celestial_mechanics.config import get_leapsecs_path
from celestial_mechanics.constants import (
    DAYS_PER_BESSELIAN_YEAR,
    DAYS_PER_JULIAN_CENTURY,
    DAYS_PER_JULIAN_YEAR,
    DEGREE,
    JD_B1900,
    JD_B1950,
    JD_J2000,
    JD_J2000_MIDNIGHT,
    JD_J2050,
    JD_UNIX_EPOCH,
    SECONDS_PER_DAY,
)

logger = logging.getLogger(__name__)

# Leap seconds loaded once at first use.
_leapsecs_loaded = False


@dataclass(frozen=True, order=True)
class Instant:
    """A point in time, stored as a Julian Day on the UT scale.

    Leap seconds and Delta T are not modelled: one day is always 86400 s.
    Instances are immutable, hashable and ordered by time.
    """

    jd: float

    @classmethod
    def from_jd(cls, jd: float) -> Instant:
        """Return the instant for a Julian Day."""
        return cls(float(jd))

    @classmethod
    def from_julian_epoch(cls, epoch: float) -> Instant:
        """Return the instant for a Julian epoch (e.g. 2000.0 for J2000.0)."""
        return cls(JD_J2000 + (epoch - 2000.0) * DAYS_PER_JULIAN_YEAR)

    @classmethod
    def from_besselian_epoch(cls, epoch: float) -> Instant:
        """Return the instant for a Besselian epoch (e.g. 1950.0 for B1950.0)."""
        return cls(JD_B1900 + (epoch - 1900.0) * DAYS_PER_BESSELIAN_YEAR)

    @classmethod
    def from_day_sec(cls, day: int, sec: float) -> Instant:
        """Return the instant for rms-julian (day, sec): days since 2000-01-01 and seconds."""
        return cls(JD_J2000_MIDNIGHT + day + sec / SECONDS_PER_DAY)

    @classmethod
    def from_unix_seconds(cls, seconds: float) -> Instant:
        """Return the instant for seconds since 1970-01-01 0h UT."""
        return cls(JD_UNIX_EPOCH + seconds / SECONDS_PER_DAY)

    @classmethod
    def parse(cls, string: str) -> Instant:
        """Parse a date/time string (formats accepted by rms-julian) as UT.

        Raises:
            ValueError: If the string cannot be parsed.
        """
        parsed = parse_datetime(string)
        if parsed is None:
            raise ValueError(f'Invalid date/time {string!r}')
        return cls.from_day_sec(*parsed)

    @property
    def unix_seconds(self) -> float:
        return (self.jd - JD_UNIX_EPOCH) * SECONDS_PER_DAY

    @property
    def julian_century(self) -> float:
        """Julian centuries since J2000.0 (Meeus' T)."""
        return (self.jd - JD_J2000) / DAYS_PER_JULIAN_CENTURY

    @property
    def julian_epoch(self) -> float:
        return 2000.0 + (self.jd - JD_J2000) / DAYS_PER_JULIAN_YEAR

    @property
    def besselian_epoch(self) -> float:
        return 1900.0 + (self.jd - JD_B1900) / DAYS_PER_BESSELIAN_YEAR

    @property
    def start_of_ut_day(self) -> Instant:
        """0h UT of the UT date containing this instant."""
        return Instant(math.floor(self.jd - 0.5) + 0.5)

    @property
    def midnight_ut(self) -> Instant:
        """Nearest 0h UT: the following midnight after noon, the previous one before."""
        return Instant(round(self.jd - 0.5) + 0.5)

    @property
    def noon_ut(self) -> Instant:
        """12h UT of the UT date nearest to this instant."""
        return Instant(float(round(self.jd)))

    def plus_days(self, days: float) -> Instant:
        return Instant(self.jd + days)

    def plus_seconds(self, seconds: float) -> Instant:
        return Instant(self.jd + seconds / SECONDS_PER_DAY)

    def seconds_since(self, other: Instant) -> float:
        """Signed number of seconds from other to self."""
        return (self.jd - other.jd) * SECONDS_PER_DAY

    def __str__(self) -> str:
        return f'JD {self.jd:.6f}'


B1900 = Instant(JD_B1900)
B1950 = Instant(JD_B1950)
J2000 = Instant(JD_J2000)
J2050 = Instant(JD_J2050)


def greenwich_mean_sidereal_time(instant: Instant) -> float:
    """Mean sidereal time at Greenwich in radians, [0, 2pi) (Meeus 12.4, no nutation).

    Parameters:
        instant: Time of interest.

    Returns:
        Greenwich mean sidereal time in radians.
    """
    t = instant.julian_century
    theta = (
        280.46061837
        + 360.98564736629 * (instant.jd - JD_J2000)
        + 0.000387933 * t * t
        - t * t * t / 38710000.0
    )
    return normalize_angle(theta * DEGREE)


def local_mean_sidereal_time(instant: Instant, longitude: float) -> float:
    """Mean sidereal time in radians at an east-positive longitude (radians)."""
    return normalize_angle(greenwich_mean_sidereal_time(instant) + longitude)


def _ensure_leapsecs() -> None:
    """Load the leap seconds kernel once, falling back to rms-julian's bundled LSK."""
    global _leapsecs_loaded
    if _leapsecs_loaded:
        return
    julian.set_ut_model('SPICE')
    path = get_leapsecs_path()
    if path is not None:
        try:
            julian.load_lsk(path)
            _leapsecs_loaded = True
            return
        except (OSError, KeyError, ValueError) as e:
            logger.info('Leap seconds from %s not used (%s); using bundled LSK.', path, e)
    julian.load_lsk()
    _leapsecs_loaded = True


def parse_datetime(string: str) -> tuple[int, float] | None:
    """Parse a date/time string to UTC (day, sec).

    Parameters:
        string: Date/time string (format accepted by rms-julian). A trailing
            ISO 'Z' and the 'YYYY HH:MM:SS' form are accepted as well.

    Returns:
        (day, sec) where day counts days since 2000-01-01; None on parse failure.
    """
    _ensure_leapsecs()
    stripped = string.strip()
    candidates = [stripped]
    if stripped.endswith(('Z', 'z')):
        candidates.append(stripped[:-1])
    year_hms = re.fullmatch(r'(\d{4})\s+(\d{1,2}:\d{2}:\d{2})', stripped)
    if year_hms is not None:
        year, hms = year_hms.groups()
        candidates.append(f'{year}-01-01 {hms}')
    for candidate in candidates:
        try:
            day, sec = julian.day_sec_from_string(candidate)[:2]
            return (int(day), float(sec))
        except (ValueError, TypeError, LookupError, OSError):
            continue
    return None


def format_instant(instant: Instant) -> str:
    """Format an instant as 'YYYY-MM-DD HH:MM:SS' UT.

    Parameters:
        instant: Time to format.

    Returns:
        Formatted string, rounded to the nearest second.
    """
    seconds = round((instant.jd - JD_J2000_MIDNIGHT) * SECONDS_PER_DAY)
    day, sec = divmod(seconds, int(SECONDS_PER_DAY))
    year, month, mday = julian.ymd_from_day(day)
    hour, minute, second = julian.hms_from_sec(sec)
    return f'{year:04d}-{month:02d}-{mday:02d} {int(hour):02d}:{int(minute):02d}:{int(second):02d}'
