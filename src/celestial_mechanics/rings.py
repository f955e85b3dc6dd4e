"""Saturn ring opening and apparent size (Meeus, Astronomical Algorithms, ch. 45)."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from celestial_mechanics.angles import normalize_angle
from celestial_mechanics.bodies import SATURN, SUN
from celestial_mechanics.constants import (
    AU,
    DEGREE,
    HALFPI,
    LIGHT_TIME_PER_AU_DAYS,
    SATURN_RING_MAJOR_AXIS_AU,
)
from celestial_mechanics.context import EphemerisContext
from celestial_mechanics.coordinates import (
    ICRS,
    RectangularCoordinates,
    SphericalCoordinates,
    equatorial,
    mean_ecliptic,
)
from celestial_mechanics.time_utils import Instant

logger = logging.getLogger(__name__)


@dataclass
class RingGeometry:
    """Ring opening and apparent size of Saturn's ring system.

    All angles in radians.

    Attributes:
        earth_latitude: Saturnicentric latitude of Earth referred to the ring
            plane (B); positive when the northern face is visible.
        sun_latitude: Saturnicentric latitude of the Sun (B').
        longitude_difference: Difference between the Saturnicentric longitudes
            of Sun and Earth measured in the ring plane (delta U), [0, pi].
        position_angle: Position angle of Saturn's north pole (P), [0, 2pi).
        major_axis: Apparent semi-major axis of the outer edge of ring A.
        minor_axis: Apparent semi-minor axis of the same ellipse.
        distance: Earth-Saturn distance in metres, at the light-time-corrected
            instant.
        is_dark: True if the visible face of the rings is the unlit one.
    """

    earth_latitude: float
    sun_latitude: float
    longitude_difference: float
    position_angle: float
    major_axis: float
    minor_axis: float
    distance: float
    is_dark: bool


def ring_plane_elements(instant: Instant) -> tuple[float, float]:
    """Inclination and ascending node of the ring plane on the ecliptic of date."""
    t = instant.julian_century
    inclination = (28.075216 - 0.012998 * t + 0.000004 * t * t) * DEGREE
    node = (169.508470 + 1.394681 * t + 0.000412 * t * t) * DEGREE
    return inclination, node


def _ecliptic_vector(v: np.ndarray, instant: Instant, context: EphemerisContext) -> np.ndarray:
    coords = RectangularCoordinates(float(v[0]), float(v[1]), float(v[2]), ICRS)
    return coords.transform(mean_ecliptic(instant), context).vector()


def _lon_lat(v: np.ndarray) -> tuple[float, float]:
    return math.atan2(v[1], v[0]), math.atan2(v[2], math.hypot(v[0], v[1]))


def saturn_ring_geometry(instant: Instant, context: EphemerisContext) -> RingGeometry:
    """Geometry of Saturn's rings seen from the geocentre.

    Saturn's position is corrected for light time; nutation and aberration
    are neglected.

    Raises:
        OutOfRangeError: If the instant (or the light-time-corrected instant)
            is outside the Saturn, Sun or rotation tables.
        MissingTableError: If the context lacks the Saturn or Sun table.
    """
    inclination, node = ring_plane_elements(instant)
    saturn_series = context.body_series(SATURN.series_name or 'saturn')
    sun_series = context.body_series(SUN.series_name or 'sun')
    sun_now = np.array(sun_series.interpolate(instant)[:3])

    # Heliocentric Saturn at the emission time, Earth at the reception time
    tau = 0.0
    for _ in range(3):
        emitted = instant.plus_days(-tau)
        helio = np.array(saturn_series.interpolate(emitted)[:3]) - np.array(
            sun_series.interpolate(emitted)[:3]
        )
        geo = helio + sun_now
        tau = LIGHT_TIME_PER_AU_DAYS * float(np.linalg.norm(geo)) / AU
    delta = float(np.linalg.norm(geo))
    logger.debug('Saturn light time %.6f d, distance %.6f AU', tau, delta / AU)

    lam, beta = _lon_lat(_ecliptic_vector(geo, instant, context))
    helio_ecl = _ecliptic_vector(helio, instant, context)
    l_helio, b_helio = _lon_lat(helio_ecl)
    r_au = float(np.linalg.norm(helio_ecl)) / AU

    si, ci = math.sin(inclination), math.cos(inclination)
    earth_b = math.asin(si * math.cos(beta) * math.sin(lam - node) - ci * math.sin(beta))

    n = (113.6655 + 0.8771 * instant.julian_century) * DEGREE
    l_sun = l_helio - 0.01759 * DEGREE / r_au
    b_sun = b_helio - 0.000764 * DEGREE * math.cos(l_helio - n) / r_au
    sun_b = math.asin(si * math.cos(b_sun) * math.sin(l_sun - node) - ci * math.sin(b_sun))

    u1 = math.atan2(
        si * math.sin(b_sun) + ci * math.cos(b_sun) * math.sin(l_sun - node),
        math.cos(b_sun) * math.cos(l_sun - node),
    )
    u2 = math.atan2(
        si * math.sin(beta) + ci * math.cos(beta) * math.sin(lam - node),
        math.cos(beta) * math.cos(lam - node),
    )
    du = normalize_angle(u1 - u2)
    if du > math.pi:
        du = 2.0 * math.pi - du

    frame = mean_ecliptic(instant)
    pole = SphericalCoordinates(node - HALFPI, HALFPI - inclination, None, frame)
    centre = SphericalCoordinates(lam, beta, None, frame)
    of_date = equatorial(instant)
    pole_eq = pole.transform(of_date, context)
    p = pole_eq.position_angle(centre.transform(of_date, context), context)

    major = SATURN_RING_MAJOR_AXIS_AU / (delta / AU)
    return RingGeometry(
        earth_latitude=earth_b,
        sun_latitude=sun_b,
        longitude_difference=du,
        position_angle=p,
        major_axis=major,
        minor_axis=major * math.sin(abs(earth_b)),
        distance=delta,
        is_dark=earth_b * sun_b < 0.0,
    )
