"""Frame rotations through the galactic hub, horizontal frames and origin shifts.

Every frame's orientation is stored as three Z-Y-Z angles taking galactic
vectors into the frame, v_frame = Rz(c) Ry(b) Rz(a) v_galactic, tabulated
against time as (cos a, sin a, cos b, sin b, cos c, sin c). Converting between
two frames is a rotation into galactic coordinates followed by a rotation out
of them.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, TypeVar

import cspyce
import numpy as np

from celestial_mechanics.constants import EARTH_EQUATORIAL_RADIUS, EARTH_FLATTENING, HALFPI
from celestial_mechanics.coordinates import (
    ICRS,
    CoordinateFrame,
    FrameType,
    GeographicLocation,
    Origin,
    OriginKind,
    RectangularCoordinates,
    SphericalCoordinates,
    equatorial,
)
from celestial_mechanics.time_utils import J2000, Instant, local_mean_sidereal_time

if TYPE_CHECKING:
    from celestial_mechanics.context import EphemerisContext

logger = logging.getLogger(__name__)

Coords = TypeVar('Coords', SphericalCoordinates, RectangularCoordinates)

_IDENTITY_FACTORS = (1.0, 0.0, 1.0, 0.0, 1.0, 0.0)


def rotate_z(v: np.ndarray, cos_a: float, sin_a: float, sign: float = 1.0) -> np.ndarray:
    """Rotate a vector about the z axis by +a (sign 1) or -a (sign -1)."""
    s = sign * sin_a
    return np.array([v[0] * cos_a - v[1] * s, v[0] * s + v[1] * cos_a, v[2]])


def rotate_y(v: np.ndarray, cos_a: float, sin_a: float, sign: float = 1.0) -> np.ndarray:
    """Rotate a vector about the y axis by +a (sign 1) or -a (sign -1)."""
    s = sign * sin_a
    return np.array([v[0] * cos_a + v[2] * s, v[1], -v[0] * s + v[2] * cos_a])


def rotation_factors(frame: CoordinateFrame, context: EphemerisContext) -> tuple[float, ...]:
    """Interpolated (cos a, sin a, cos b, sin b, cos c, sin c) of a frame.

    Frames without an equinox are looked up at J2000. Each cosine/sine pair
    is renormalised after interpolation.

    Raises:
        OutOfRangeError: If the equinox is outside the rotation table.
        MissingTableError: If the context has no table for the frame type.
    """
    if frame.type is FrameType.GALACTIC:
        return _IDENTITY_FACTORS
    series = context.rotation_series(frame.type)
    instant = frame.equinox if frame.equinox is not None else J2000
    values = series.interpolate(instant)
    factors: list[float] = []
    for i in range(0, 6, 2):
        c, s = values[i], values[i + 1]
        r = math.hypot(c, s)
        factors.extend((c / r, s / r))
    return tuple(factors)


def _local_angles(frame: CoordinateFrame) -> tuple[float, float]:
    location = frame.origin.location
    if location is None or frame.equinox is None:
        raise ValueError(f'{frame} has no observer location or epoch')
    lst = local_mean_sidereal_time(frame.equinox, location.longitude)
    return lst, location.latitude - HALFPI


def _to_horizontal(v: np.ndarray, frame: CoordinateFrame) -> np.ndarray:
    """Equator-of-date vector to (north, east, zenith) axes."""
    lst, tilt = _local_angles(frame)
    v = rotate_z(v, math.cos(lst), math.sin(lst), -1.0)
    v = rotate_y(v, math.cos(tilt), math.sin(tilt))
    v = rotate_z(v, -1.0, 0.0)
    return np.array([v[0], -v[1], v[2]])


def _from_horizontal(v: np.ndarray, frame: CoordinateFrame) -> np.ndarray:
    lst, tilt = _local_angles(frame)
    v = np.array([v[0], -v[1], v[2]])
    v = rotate_z(v, -1.0, 0.0)
    v = rotate_y(v, math.cos(tilt), math.sin(tilt), -1.0)
    return rotate_z(v, math.cos(lst), math.sin(lst))


def rotate_to_galactic(
    v: np.ndarray, frame: CoordinateFrame, context: EphemerisContext
) -> np.ndarray:
    """Express a vector given in a frame's axes in galactic axes."""
    if frame.type is FrameType.GALACTIC:
        return np.asarray(v, dtype=np.float64)
    if frame.type is FrameType.HORIZONTAL:
        v = _from_horizontal(v, frame)
    ca, sa, cb, sb, cc, sc = rotation_factors(frame, context)
    v = rotate_z(v, cc, sc, -1.0)
    v = rotate_y(v, cb, sb, -1.0)
    return rotate_z(v, ca, sa, -1.0)


def rotate_from_galactic(
    v: np.ndarray, frame: CoordinateFrame, context: EphemerisContext
) -> np.ndarray:
    """Express a galactic vector in a frame's axes."""
    if frame.type is FrameType.GALACTIC:
        return np.asarray(v, dtype=np.float64)
    ca, sa, cb, sb, cc, sc = rotation_factors(frame, context)
    v = rotate_z(v, ca, sa)
    v = rotate_y(v, cb, sb)
    v = rotate_z(v, cc, sc)
    if frame.type is FrameType.HORIZONTAL:
        v = _to_horizontal(v, frame)
    return v


def rotate(
    v: np.ndarray,
    from_frame: CoordinateFrame,
    to_frame: CoordinateFrame,
    context: EphemerisContext,
) -> np.ndarray:
    """Rotate a vector from one frame's axes to another's (origins are ignored)."""
    return rotate_from_galactic(rotate_to_galactic(v, from_frame, context), to_frame, context)


def observer_geocentric_position(location: GeographicLocation, instant: Instant) -> np.ndarray:
    """Observer position in metres relative to Earth's centre, equator and equinox of date.

    Uses the GRS 80 figure with the local mean sidereal time in place of the
    longitude, so the x axis points to the equinox.
    """
    lst = local_mean_sidereal_time(instant, location.longitude)
    elevation = location.elevation or 0.0
    return np.asarray(
        cspyce.georec(
            lst, location.latitude, elevation, EARTH_EQUATORIAL_RADIUS, EARTH_FLATTENING
        ),
        dtype=np.float64,
    )


def origin_offset(origin: Origin, instant: Instant, context: EphemerisContext) -> np.ndarray:
    """Geocentric ICRS position (metres) of a frame origin at an instant.

    Raises:
        MissingTableError: For heliocentric origins when the context has no Sun table.
    """
    if origin.kind is OriginKind.GEOCENTRIC:
        return np.zeros(3)
    if origin.kind is OriginKind.HELIOCENTRIC:
        return np.array(context.body_series('sun').interpolate(instant)[:3])
    if origin.location is None:
        raise ValueError('topocentric origin without a location')
    local = observer_geocentric_position(origin.location, instant)
    return rotate(local, equatorial(instant), ICRS, context)


def _offset_epoch(
    source: CoordinateFrame, target: CoordinateFrame, epoch: Instant | None
) -> Instant:
    if epoch is not None:
        return epoch
    for frame in (target, source):
        if frame.type is FrameType.HORIZONTAL or frame.origin.kind is OriginKind.TOPOCENTRIC:
            if frame.equinox is not None:
                return frame.equinox
    raise ValueError(
        f'an epoch is required to move coordinates from {source.origin} to {target.origin}'
    )


def transform(
    coords: Coords,
    frame: CoordinateFrame,
    context: EphemerisContext,
    epoch: Instant | None = None,
) -> Coords:
    """Express spherical or rectangular coordinates in another frame.

    Parameters:
        coords: Coordinates to convert; the result has the same kind.
        frame: Target frame.
        context: Rotation tables (and the Sun table for heliocentric origins).
        epoch: Instant at which origins are evaluated; defaults to the equinox
            of a topocentric or horizontal frame involved.

    Returns:
        The input object itself when its frame equals the target frame,
        otherwise new coordinates in the target frame. Coordinates without a
        known distance are rotated only, never translated.

    Raises:
        OutOfRangeError: If a rotation or origin table lookup is out of range.
        ValueError: If origins differ, the distance is known and no epoch is
            available.
    """
    if coords.frame == frame:
        return coords
    source = coords.frame
    rect = coords.rectangular() if isinstance(coords, SphericalCoordinates) else coords
    v = rotate(rect.vector(), source, frame, context)
    if source.origin != frame.origin and coords.distance is not None:
        when = _offset_epoch(source, frame, epoch)
        shift = origin_offset(source.origin, when, context) - origin_offset(
            frame.origin, when, context
        )
        logger.debug('Shifting origin %s -> %s at %s', source.origin, frame.origin, when)
        v = v + rotate(shift, ICRS, frame, context)
    result = RectangularCoordinates(float(v[0]), float(v[1]), float(v[2]), frame)
    if isinstance(coords, SphericalCoordinates):
        if coords.distance is None:
            return SphericalCoordinates(
                *_direction(result), distance=None, frame=frame
            )
        return result.spherical()
    return result


def _direction(rect: RectangularCoordinates) -> tuple[float, float]:
    return math.atan2(rect.y, rect.x), math.atan2(rect.z, math.hypot(rect.x, rect.y))
