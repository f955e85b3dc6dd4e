"""Shared fixtures: generated rotation tables and synthetic body tables."""

from __future__ import annotations

import math

import numpy as np
import pytest

from celestial_mechanics.constants import AU, DEGREE, JD_J2000
from celestial_mechanics.context import EphemerisContext
from celestial_mechanics.coordinates import FrameType
from celestial_mechanics.frame_tables import build_context, frame_matrix
from celestial_mechanics.interpolation import EphemerisSeries
from celestial_mechanics.time_utils import Instant

# Wide enough for B1950 and J2050 lookups
TABLE_START = Instant.from_julian_epoch(1930.0)
TABLE_STOP = Instant.from_julian_epoch(2070.0)
TABLE_STEP = 30.0


def low_precision_sun(instant: Instant) -> np.ndarray:
    """Geocentric ICRS position of the Sun in metres (about 0.01 degree accuracy)."""
    n = instant.jd - JD_J2000
    mean_lon = (280.460 + 0.9856474 * n) * DEGREE
    anomaly = (357.528 + 0.9856003 * n) * DEGREE
    lam = mean_lon + (1.915 * math.sin(anomaly) + 0.020 * math.sin(2.0 * anomaly)) * DEGREE
    eps = (23.439 - 0.0000004 * n) * DEGREE
    r = (1.00014 - 0.01671 * math.cos(anomaly) - 0.00014 * math.cos(2.0 * anomaly)) * AU
    of_date = r * np.array(
        [math.cos(lam), math.cos(eps) * math.sin(lam), math.sin(eps) * math.sin(lam)]
    )
    to_icrs = frame_matrix(FrameType.ICRF, instant) @ frame_matrix(FrameType.FK5, instant).T
    return to_icrs @ of_date


def sun_series(start: Instant, days: int) -> EphemerisSeries:
    times = [start.jd + i for i in range(days + 1)]
    return EphemerisSeries(times, [low_precision_sun(Instant(t)) for t in times], name='sun')


def constant_series(vector, centre: Instant, name: str = '', half_rows: int = 20) -> EphemerisSeries:
    """Series holding the same vector on a 5-day grid around centre."""
    times = [centre.jd + 5.0 * i for i in range(-half_rows, half_rows + 1)]
    return EphemerisSeries(times, [list(vector)] * len(times), name=name)


@pytest.fixture(scope='session')
def frame_context() -> EphemerisContext:
    """Rotation tables only, 1930 to 2070."""
    return build_context(TABLE_START, TABLE_STOP, TABLE_STEP)


@pytest.fixture(scope='session')
def sun_context(frame_context: EphemerisContext) -> EphemerisContext:
    """Rotation tables plus a daily low-precision Sun table for 1990."""
    return frame_context.with_bodies({'sun': sun_series(Instant(2447892.5), 365)})
