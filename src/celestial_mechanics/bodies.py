"""Solar-system bodies: descriptors, tabulated positions and illumination geometry."""

from __future__ import annotations

import enum
import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from celestial_mechanics.constants import (
    ASTRONOMICAL_TWILIGHT,
    CIVIL_TWILIGHT,
    EARTH_EQUATORIAL_RADIUS,
    EARTH_ORIGIN_PROXY,
    MEAN_ATMOSPHERIC_REFRACTION,
    MIN_KNOWN_DISTANCE,
    MOON_PARALLAX_FACTOR,
    NAUTICAL_TWILIGHT,
    SUN_STANDARD_ALTITUDE,
)
from celestial_mechanics.context import EphemerisContext
from celestial_mechanics.coordinates import (
    ICRS,
    CoordinateFrame,
    OriginKind,
    RectangularCoordinates,
    SphericalCoordinates,
)
from celestial_mechanics.events import EventType
from celestial_mechanics.time_utils import Instant
from celestial_mechanics.transforms import origin_offset, transform


class BodyKind(enum.Enum):
    SUN = 'sun'
    MOON = 'moon'
    PLANET = 'planet'


class Capability(enum.Flag):
    """What a body is, as combinable flags."""

    POINT_SOURCE = enum.auto()
    EXTENDED = enum.auto()
    SOLAR_SYSTEM = enum.auto()
    STAR = enum.auto()
    SATELLITE = enum.auto()
    PLANET = enum.auto()


@dataclass(frozen=True)
class Body:
    """A body whose geocentric ICRS position is tabulated in the context.

    Attributes:
        name: Display name, e.g. 'Saturn'.
        kind: Selects the rise/set altitude and event policy.
        series_name: Key of the position table; None for Earth itself.
        capabilities: Classification flags.
    """

    name: str
    kind: BodyKind
    series_name: str | None
    capabilities: Capability = Capability.SOLAR_SYSTEM

    def __str__(self) -> str:
        return self.name


def _planet(name: str, series: str | None) -> Body:
    return Body(name, BodyKind.PLANET, series, Capability.SOLAR_SYSTEM | Capability.PLANET)


SUN = Body(
    'Sun',
    BodyKind.SUN,
    'sun',
    Capability.SOLAR_SYSTEM | Capability.STAR | Capability.POINT_SOURCE | Capability.EXTENDED,
)
MOON = Body(
    'Moon', BodyKind.MOON, 'moon', Capability.SOLAR_SYSTEM | Capability.SATELLITE | Capability.EXTENDED
)
MERCURY = _planet('Mercury', 'mercury')
VENUS = _planet('Venus', 'venus')
EARTH = _planet('Earth', None)
MARS = _planet('Mars', 'mars')
JUPITER = _planet('Jupiter', 'jupiter')
SATURN = _planet('Saturn', 'saturn')
URANUS = _planet('Uranus', 'uranus')
NEPTUNE = _planet('Neptune', 'neptune')
PLUTO = _planet('Pluto', 'pluto')

STANDARD_BODIES = (SUN, MOON, MERCURY, VENUS, EARTH, MARS, JUPITER, SATURN, URANUS, NEPTUNE, PLUTO)


def body_by_name(name: str) -> Body:
    """Return a standard body by case-insensitive name.

    Raises:
        ValueError: If the name is not a standard body.
    """
    key = name.strip().lower()
    for body in STANDARD_BODIES:
        if body.name.lower() == key:
            return body
    choices = ', '.join(b.name for b in STANDARD_BODIES)
    raise ValueError(f'Unknown body {name!r} (expected one of {choices})')


def _geocentric_icrs(body: Body, instant: Instant, context: EphemerisContext) -> np.ndarray:
    if body.series_name is None:
        return np.zeros(3)
    return np.array(context.body_series(body.series_name).interpolate(instant)[:3])


def position(
    body: Body, instant: Instant, frame: CoordinateFrame, context: EphemerisContext
) -> RectangularCoordinates:
    """Rectangular position of a body at an instant in any frame.

    Earth seen from the geocentre is the origin proxy, a tiny vector with no
    usable distance.

    Raises:
        OutOfRangeError: If the instant is outside the body's table.
        MissingTableError: If the context holds no table for the body.
    """
    if body.series_name is None:
        if frame.origin.kind is OriginKind.GEOCENTRIC:
            proxy = RectangularCoordinates(*EARTH_ORIGIN_PROXY, frame=ICRS)
            return transform(proxy, frame, context)
        shift = -origin_offset(frame.origin, instant, context)
        if float(np.linalg.norm(shift)) < MIN_KNOWN_DISTANCE:
            shift = np.array(EARTH_ORIGIN_PROXY)
        local = RectangularCoordinates(
            *(float(x) for x in shift), frame=ICRS.with_origin(frame.origin)
        )
        return transform(local, frame, context)
    x, y, z = _geocentric_icrs(body, instant, context)
    coords = RectangularCoordinates(float(x), float(y), float(z), ICRS)
    return transform(coords, frame, context, epoch=instant)


def spherical_position(
    body: Body, instant: Instant, frame: CoordinateFrame, context: EphemerisContext
) -> SphericalCoordinates:
    return position(body, instant, frame, context).spherical()


def _angle_between(u: np.ndarray, v: np.ndarray) -> float:
    return math.atan2(float(np.linalg.norm(np.cross(u, v))), float(np.dot(u, v)))


def elongation(body: Body, instant: Instant, context: EphemerisContext) -> float:
    """Geocentric angular distance between a body and the Sun, radians."""
    return _angle_between(
        _geocentric_icrs(body, instant, context), _geocentric_icrs(SUN, instant, context)
    )


def phase_angle(body: Body, instant: Instant, context: EphemerisContext) -> float:
    """Sun-body-Earth angle, radians (0 at full phase)."""
    p = _geocentric_icrs(body, instant, context)
    s = _geocentric_icrs(SUN, instant, context)
    return _angle_between(s - p, -p)


def illuminated_fraction(body: Body, instant: Instant, context: EphemerisContext) -> float:
    """Fraction of the disk lit by the Sun as seen from Earth, (1 + cos i) / 2."""
    return (1.0 + math.cos(phase_angle(body, instant, context))) / 2.0


def equatorial_horizontal_parallax(body: Body, instant: Instant, context: EphemerisContext) -> float:
    """asin(Earth radius / distance) in radians."""
    d = float(np.linalg.norm(_geocentric_icrs(body, instant, context)))
    return math.asin(min(1.0, EARTH_EQUATORIAL_RADIUS / d))


# Angle of the body's centre below the horizon at apparent rising and setting
AltitudePolicy = Callable[[Body, Instant, EphemerisContext], float]


def standard_altitude(body: Body, instant: Instant, context: EphemerisContext) -> float:
    return MEAN_ATMOSPHERIC_REFRACTION


def sun_altitude(body: Body, instant: Instant, context: EphemerisContext) -> float:
    return SUN_STANDARD_ALTITUDE


def moon_altitude(body: Body, instant: Instant, context: EphemerisContext) -> float:
    """Refraction less the parallax-dependent term; negative when the limb rule lifts it."""
    parallax = equatorial_horizontal_parallax(body, instant, context)
    return MEAN_ATMOSPHERIC_REFRACTION - MOON_PARALLAX_FACTOR * parallax


@dataclass(frozen=True)
class Twilight:
    depression: float
    dawn: EventType
    dusk: EventType


TWILIGHTS = (
    Twilight(CIVIL_TWILIGHT, EventType.CIVIL_DAWN, EventType.CIVIL_DUSK),
    Twilight(NAUTICAL_TWILIGHT, EventType.NAUTICAL_DAWN, EventType.NAUTICAL_DUSK),
    Twilight(ASTRONOMICAL_TWILIGHT, EventType.ASTRONOMICAL_DAWN, EventType.ASTRONOMICAL_DUSK),
)


@dataclass(frozen=True)
class EventPolicy:
    """How events are computed for one kind of body."""

    altitude: AltitudePolicy
    lower_culmination: bool = True
    twilights: tuple[Twilight, ...] = ()


EVENT_POLICIES: dict[BodyKind, EventPolicy] = {
    BodyKind.SUN: EventPolicy(sun_altitude, True, TWILIGHTS),
    BodyKind.MOON: EventPolicy(moon_altitude, False),
    BodyKind.PLANET: EventPolicy(standard_altitude, False),
}
