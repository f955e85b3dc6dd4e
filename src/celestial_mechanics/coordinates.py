"""Coordinate frames, origins, observer locations and spherical/rectangular positions."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from celestial_mechanics.angles import normalize_angle
from celestial_mechanics.constants import (
    DEGREE,
    HALFPI,
    MEAN_ATMOSPHERIC_REFRACTION,
    MIN_KNOWN_DISTANCE,
)
from celestial_mechanics.time_utils import B1900, B1950, J2000, J2050, Instant

if TYPE_CHECKING:
    import numpy as np

    from celestial_mechanics.context import EphemerisContext


@dataclass(frozen=True)
class GeographicLocation:
    """A place on Earth.

    Latitude is north-positive and longitude east-positive, both in radians;
    elevation above sea level is in metres and optional.
    """

    latitude: float
    longitude: float
    elevation: float | None = None

    @classmethod
    def from_degrees(
        cls, latitude_deg: float, longitude_deg: float, elevation: float | None = None
    ) -> GeographicLocation:
        return cls(latitude_deg * DEGREE, longitude_deg * DEGREE, elevation)

    def mean_sidereal_time(self, instant: Instant) -> float:
        """Local mean sidereal time in radians (no nutation)."""
        from celestial_mechanics.time_utils import local_mean_sidereal_time

        return local_mean_sidereal_time(instant, self.longitude)


class FrameType(enum.Enum):
    """Kinds of coordinate frame.

    ICRF, FK4 and FK5 are equatorial realisations; FK4 and FK5 are tied to an
    equinox. The ecliptic frames use the ecliptic of their equinox, the true
    one with the (low-order) nutation in longitude applied. Galactic is fixed.
    Horizontal frames belong to an observer at an epoch of observation.
    """

    ICRF = 'icrf'
    FK4 = 'fk4'
    FK5 = 'fk5'
    MEAN_ECLIPTIC = 'mean-ecliptic'
    TRUE_ECLIPTIC = 'true-ecliptic'
    GALACTIC = 'galactic'
    HORIZONTAL = 'horizontal'

    @property
    def requires_equinox(self) -> bool:
        return self not in (FrameType.ICRF, FrameType.GALACTIC)

    @property
    def is_equatorial(self) -> bool:
        return self in (FrameType.ICRF, FrameType.FK4, FrameType.FK5)

    @property
    def is_ecliptic(self) -> bool:
        return self in (FrameType.MEAN_ECLIPTIC, FrameType.TRUE_ECLIPTIC)


class OriginKind(enum.Enum):
    GEOCENTRIC = 'geocentric'
    HELIOCENTRIC = 'heliocentric'
    TOPOCENTRIC = 'topocentric'


@dataclass(frozen=True)
class Origin:
    """Centre of a coordinate frame; topocentric origins carry the observer's location."""

    kind: OriginKind
    location: GeographicLocation | None = None

    def __post_init__(self) -> None:
        if (self.kind is OriginKind.TOPOCENTRIC) != (self.location is not None):
            raise ValueError('a location is required for, and only for, topocentric origins')

    @classmethod
    def topocentric(cls, location: GeographicLocation) -> Origin:
        return cls(OriginKind.TOPOCENTRIC, location)

    def __str__(self) -> str:
        return self.kind.value


GEOCENTRIC = Origin(OriginKind.GEOCENTRIC)
HELIOCENTRIC = Origin(OriginKind.HELIOCENTRIC)


@dataclass(frozen=True)
class CoordinateFrame:
    """Orientation (type and equinox) plus origin of a set of coordinates.

    The equinox is required exactly for frame types that depend on it and must
    be None otherwise; for horizontal frames it is the epoch of observation,
    and the origin must be topocentric.
    """

    type: FrameType
    equinox: Instant | None = None
    origin: Origin = field(default=GEOCENTRIC)

    def __post_init__(self) -> None:
        if self.type.requires_equinox and self.equinox is None:
            raise ValueError(f'{self.type.value} frames require an equinox')
        if not self.type.requires_equinox and self.equinox is not None:
            raise ValueError(f'{self.type.value} frames have no equinox')
        if self.type is FrameType.HORIZONTAL and self.origin.kind is not OriginKind.TOPOCENTRIC:
            raise ValueError('horizontal frames require a topocentric origin')

    def with_origin(self, origin: Origin) -> CoordinateFrame:
        return replace(self, origin=origin)

    @property
    def label(self) -> str:
        """Short name such as 'ICRS', 'J2000.0', 'B1950.0' or 'J2021.3'."""
        if self.equinox is None:
            return 'ICRS' if self.type is FrameType.ICRF else self.type.value
        for name, epoch in _NAMED_EPOCHS:
            if self.equinox == epoch:
                return name
        if self.type is FrameType.FK4:
            return f'B{self.equinox.besselian_epoch:.1f}'
        return f'J{self.equinox.julian_epoch:.1f}'

    def __str__(self) -> str:
        return f'{self.type.value} {self.label} {self.origin}'


_NAMED_EPOCHS = (('J2000.0', J2000), ('J2050.0', J2050), ('B1900.0', B1900), ('B1950.0', B1950))

ICRS = CoordinateFrame(FrameType.ICRF)
GALACTIC = CoordinateFrame(FrameType.GALACTIC)
B1900_FRAME = CoordinateFrame(FrameType.FK4, B1900)
B1950_FRAME = CoordinateFrame(FrameType.FK4, B1950)
J2000_FRAME = CoordinateFrame(FrameType.FK5, J2000)
J2050_FRAME = CoordinateFrame(FrameType.FK5, J2050)


def equatorial(epoch: Instant, origin: Origin = GEOCENTRIC) -> CoordinateFrame:
    """FK5 equatorial frame for the equator and equinox of an epoch."""
    return CoordinateFrame(FrameType.FK5, epoch, origin)


def fk4(epoch: Instant, origin: Origin = GEOCENTRIC) -> CoordinateFrame:
    return CoordinateFrame(FrameType.FK4, epoch, origin)


def mean_ecliptic(epoch: Instant, origin: Origin = GEOCENTRIC) -> CoordinateFrame:
    return CoordinateFrame(FrameType.MEAN_ECLIPTIC, epoch, origin)


def true_ecliptic(epoch: Instant, origin: Origin = GEOCENTRIC) -> CoordinateFrame:
    return CoordinateFrame(FrameType.TRUE_ECLIPTIC, epoch, origin)


def horizontal(location: GeographicLocation, epoch: Instant) -> CoordinateFrame:
    """Horizontal (azimuth from north through east, altitude) frame of an observer."""
    return CoordinateFrame(FrameType.HORIZONTAL, epoch, Origin.topocentric(location))


_LABELS = {
    FrameType.ICRF: ('α', 'δ'),
    FrameType.FK4: ('α', 'δ'),
    FrameType.FK5: ('α', 'δ'),
    FrameType.MEAN_ECLIPTIC: ('λ', 'β'),
    FrameType.TRUE_ECLIPTIC: ('λ', 'β'),
    FrameType.GALACTIC: ('l', 'b'),
    FrameType.HORIZONTAL: ('A', 'h'),
}


@dataclass(frozen=True)
class SphericalCoordinates:
    """Longitude/latitude (radians) with optional distance (metres) in a frame.

    Longitude is normalised to [0, 2pi) on construction. Latitude is clamped
    to [-pi/2, pi/2], never wrapped, so callers must pass a value in range.
    A distance of None marks a direction only.
    """

    longitude: float
    latitude: float
    distance: float | None = None
    frame: CoordinateFrame = field(default=ICRS)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'longitude', normalize_angle(self.longitude))
        object.__setattr__(self, 'latitude', min(HALFPI, max(-HALFPI, self.latitude)))
        if self.distance is not None and not self.distance > 0.0:
            raise ValueError(f'distance must be positive, got {self.distance}')

    @property
    def distance_is_known(self) -> bool:
        return self.distance is not None

    def rectangular(self) -> RectangularCoordinates:
        """Rectangular equivalent; unit vector when the distance is unknown."""
        d = self.distance if self.distance is not None else 1.0
        r = math.cos(self.latitude) * d
        return RectangularCoordinates(
            math.cos(self.longitude) * r,
            math.sin(self.longitude) * r,
            math.sin(self.latitude) * d,
            self.frame,
        )

    def transform(
        self, frame: CoordinateFrame, context: EphemerisContext, epoch: Instant | None = None
    ) -> SphericalCoordinates:
        """These coordinates expressed in another frame (see transforms.transform)."""
        from celestial_mechanics.transforms import transform

        return transform(self, frame, context, epoch=epoch)

    def angular_separation(self, other: SphericalCoordinates, context: EphemerisContext) -> float:
        """Angle in radians between these coordinates and other, in [0, pi].

        Raises:
            OutOfRangeError: If other must be transformed with an equinox outside
                the loaded rotation tables.
        """
        o = other.transform(self.frame, context)
        dlon = o.longitude - self.longitude
        x = math.cos(self.latitude) * math.sin(o.latitude) - math.sin(self.latitude) * math.cos(
            o.latitude
        ) * math.cos(dlon)
        y = math.cos(o.latitude) * math.sin(dlon)
        z = math.sin(self.latitude) * math.sin(o.latitude) + math.cos(self.latitude) * math.cos(
            o.latitude
        ) * math.cos(dlon)
        return math.atan2(math.hypot(x, y), z)

    def position_angle(self, other: SphericalCoordinates, context: EphemerisContext) -> float:
        """Position angle of these coordinates as seen from other, in [0, 2pi).

        Zero when these coordinates are due north of other, pi/2 when due east.
        """
        o = other.transform(self.frame, context)
        dlon = self.longitude - o.longitude
        p = math.atan2(
            math.sin(dlon),
            math.cos(o.latitude) * math.tan(self.latitude) - math.sin(o.latitude) * math.cos(dlon),
        )
        return normalize_angle(p)

    def is_circumpolar(self, location: GeographicLocation) -> bool:
        """True if a body at these (equatorial) coordinates never sets at the location."""
        if location.latitude > 0.0:
            return self.latitude >= HALFPI - location.latitude - MEAN_ATMOSPHERIC_REFRACTION
        if location.latitude < 0.0:
            return self.latitude <= -HALFPI - location.latitude + MEAN_ATMOSPHERIC_REFRACTION
        return False

    def is_never_above_horizon(self, location: GeographicLocation) -> bool:
        """True if a body at these (equatorial) coordinates never rises at the location."""
        if location.latitude > 0.0:
            return self.latitude < -HALFPI + location.latitude - MEAN_ATMOSPHERIC_REFRACTION
        if location.latitude < 0.0:
            return self.latitude > HALFPI + location.latitude + MEAN_ATMOSPHERIC_REFRACTION
        return False

    def __str__(self) -> str:
        lon_name, lat_name = _LABELS[self.frame.type]
        text = (
            f'({self.frame.label})  {lon_name} = {math.degrees(self.longitude)}°  '
            f'{lat_name} = {math.degrees(self.latitude)}°'
        )
        if self.distance is not None:
            text = f'{text}  d = {self.distance}m'
        return text


@dataclass(frozen=True)
class RectangularCoordinates:
    """Cartesian position (metres) or direction in a frame.

    Horizontal frames use (north, east, zenith) axes; all other frames use the
    usual right-handed axes with x towards longitude 0.
    """

    x: float
    y: float
    z: float
    frame: CoordinateFrame = field(default=ICRS)

    @property
    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    @property
    def distance(self) -> float | None:
        """Length of the vector, or None when below the origin-proxy threshold."""
        d = self.norm
        if d < MIN_KNOWN_DISTANCE:
            return None
        return d

    @property
    def distance_is_known(self) -> bool:
        return self.distance is not None

    def vector(self) -> np.ndarray:
        import numpy as np

        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def spherical(self) -> SphericalCoordinates:
        latitude = math.atan2(self.z, math.hypot(self.x, self.y))
        longitude = math.atan2(self.y, self.x)
        return SphericalCoordinates(longitude, latitude, self.distance, self.frame)

    def transform(
        self, frame: CoordinateFrame, context: EphemerisContext, epoch: Instant | None = None
    ) -> RectangularCoordinates:
        """These coordinates expressed in another frame (see transforms.transform)."""
        from celestial_mechanics.transforms import transform

        return transform(self, frame, context, epoch=epoch)

    def __str__(self) -> str:
        d = self.distance
        if d is None:
            text = f'(x={self.x}, y={self.y}, z={self.z})'
        else:
            text = f'(x={self.x}m, y={self.y}m, z={self.z}m)  d = {d}m'
        return f'({self.frame.label})  {text}'
