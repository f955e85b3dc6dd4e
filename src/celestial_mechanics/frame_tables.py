"""Generation of rotation-angle tables for the equatorial and ecliptic frames.

Each table row holds (cos a, sin a, cos b, sin b, cos c, sin c) for the Z-Y-Z
angles of the matrix M with v_frame = M v_galactic. The galactic reference
matrices come from the SPICE built-in inertial frames, so no kernels need to
be loaded.
"""

from __future__ import annotations

import functools
import logging
import math

import cspyce
import numpy as np

from celestial_mechanics.constants import ARCSEC, DEGREE, JD_J2000
from celestial_mechanics.context import EphemerisContext
from celestial_mechanics.coordinates import FrameType
from celestial_mechanics.interpolation import EphemerisSeries
from celestial_mechanics.time_utils import Instant

logger = logging.getLogger(__name__)

# Frame types with a table of their own; horizontal frames reuse FK5.
TABULATED_FRAMES = (
    FrameType.ICRF,
    FrameType.FK4,
    FrameType.FK5,
    FrameType.MEAN_ECLIPTIC,
    FrameType.TRUE_ECLIPTIC,
)

# FK5 (J2000) to ICRS offsets of the Hipparcos catalogue, milliarcseconds
_ETA0 = -19.9
_XI0 = 9.1
_DA0 = -22.9


def rotation_x(angle: float) -> np.ndarray:
    """Active rotation matrix about x."""
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def rotation_y(angle: float) -> np.ndarray:
    """Active rotation matrix about y."""
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def rotation_z(angle: float) -> np.ndarray:
    """Active rotation matrix about z."""
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


@functools.lru_cache(maxsize=None)
def galactic_matrix(target: str = 'J2000') -> np.ndarray:
    """Rotation from galactic to 'J2000' (FK5) or 'FK4' (B1950) axes.

    Parameters:
        target: SPICE name of the inertial frame.

    Returns:
        Read-only 3x3 matrix M with v_target = M v_galactic.
    """
    matrix = np.array(cspyce.pxform('GALACTIC', target, 0.0), dtype=np.float64)
    matrix.flags.writeable = False
    return matrix


def precession_matrix_fk5(instant: Instant) -> np.ndarray:
    """IAU 1976 (Lieske) precession from the mean equator and equinox of J2000 to date."""
    t = (instant.jd - JD_J2000) / 36525.0
    zeta = t * (2306.2181 + t * (0.30188 + t * 0.017998)) * ARCSEC
    z = t * (2306.2181 + t * (1.09468 + t * 0.018203)) * ARCSEC
    theta = t * (2004.3109 + t * (-0.42665 - t * 0.041833)) * ARCSEC
    return rotation_z(z) @ rotation_y(-theta) @ rotation_z(zeta)


def precession_matrix_fk4(from_epoch: float, to_epoch: float) -> np.ndarray:
    """Newcomb precession between two Besselian epochs (FK4 system).

    Parameters:
        from_epoch: Starting Besselian epoch, e.g. 1950.0.
        to_epoch: Final Besselian epoch.
    """
    t1 = (from_epoch - 1850.0) / 1000.0
    dt = (to_epoch - from_epoch) / 1000.0
    rate = 23035.545 + 139.720 * t1 + 0.060 * t1 * t1
    zeta = dt * (rate + dt * ((30.240 - 0.27 * t1) + dt * 17.995)) * ARCSEC
    z = dt * (rate + dt * ((109.480 + 0.39 * t1) + dt * 18.325)) * ARCSEC
    theta = (
        dt
        * ((20051.12 - 85.29 * t1 - 0.37 * t1 * t1) + dt * ((-42.65 - 0.37 * t1) - dt * 41.8))
        * ARCSEC
    )
    return rotation_z(z) @ rotation_y(-theta) @ rotation_z(zeta)


def frame_bias() -> np.ndarray:
    """Matrix B with v_fk5(J2000) = B v_icrs."""
    mas = ARCSEC / 1000.0
    return rotation_x(_ETA0 * mas) @ rotation_y(-_XI0 * mas) @ rotation_z(-_DA0 * mas)


def mean_obliquity(instant: Instant) -> float:
    """Mean obliquity of the ecliptic in radians (IAU 1980 polynomial)."""
    t = (instant.jd - JD_J2000) / 36525.0
    seconds = np.polyval((0.001813, -0.00059, -46.8150, 84381.448), t)
    return float(seconds) * ARCSEC


def nutation_in_longitude(instant: Instant) -> float:
    """Nutation in longitude in radians from the four largest terms (about 0.5" accuracy)."""
    t = (instant.jd - JD_J2000) / 36525.0
    omega = (125.04452 - 1934.136261 * t + 0.0020708 * t * t + t**3 / 450000.0) * DEGREE
    sun = (280.4665 + 36000.7698 * t) * DEGREE
    moon = (218.3165 + 481267.8813 * t) * DEGREE
    dpsi = (
        -17.20 * math.sin(omega)
        - 1.32 * math.sin(2.0 * sun)
        - 0.23 * math.sin(2.0 * moon)
        + 0.21 * math.sin(2.0 * omega)
    )
    return dpsi * ARCSEC


def frame_matrix(frame_type: FrameType, instant: Instant) -> np.ndarray:
    """Matrix taking galactic vectors into a frame with the equinox of an instant.

    Raises:
        ValueError: For frame types that have no table of their own.
    """
    if frame_type is FrameType.FK5:
        return precession_matrix_fk5(instant) @ galactic_matrix('J2000')
    if frame_type is FrameType.ICRF:
        return frame_bias().T @ galactic_matrix('J2000')
    if frame_type is FrameType.FK4:
        return precession_matrix_fk4(1950.0, instant.besselian_epoch) @ galactic_matrix('FK4')
    if frame_type is FrameType.MEAN_ECLIPTIC:
        return rotation_x(-mean_obliquity(instant)) @ frame_matrix(FrameType.FK5, instant)
    if frame_type is FrameType.TRUE_ECLIPTIC:
        return rotation_z(nutation_in_longitude(instant)) @ frame_matrix(
            FrameType.MEAN_ECLIPTIC, instant
        )
    raise ValueError(f'{frame_type.value} frames have no rotation table')


def zyz_angles(matrix: np.ndarray) -> tuple[float, float, float]:
    """Angles (a, b, c) with matrix = Rz(c) Ry(b) Rz(a); b is in [0, pi]."""
    m = np.asarray(matrix, dtype=np.float64)
    b = math.atan2(math.hypot(m[0, 2], m[1, 2]), m[2, 2])
    c = math.atan2(m[1, 2], m[0, 2])
    a = math.atan2(m[2, 1], -m[2, 0])
    return a, b, c


def rotation_row(matrix: np.ndarray) -> tuple[float, ...]:
    """Table row (cos a, sin a, cos b, sin b, cos c, sin c) for a rotation matrix."""
    row: list[float] = []
    for angle in zyz_angles(matrix):
        row.extend((math.cos(angle), math.sin(angle)))
    return tuple(row)


def build_frame_series(
    frame_type: FrameType, start: Instant, stop: Instant, step_days: float
) -> EphemerisSeries:
    """Tabulate a frame's rotation angles from start to stop inclusive.

    Parameters:
        frame_type: One of TABULATED_FRAMES.
        start: First row instant.
        stop: Last row instant (included when it falls on the grid).
        step_days: Row spacing in days.

    Raises:
        ValueError: If the step is not positive, stop precedes start, or the
            frame type has no table.
    """
    if step_days <= 0.0:
        raise ValueError(f'step must be positive, got {step_days}')
    if stop < start:
        raise ValueError(f'table end {stop} precedes start {start}')
    count = int(math.floor((stop.jd - start.jd) / step_days + 1e-9)) + 1
    times = start.jd + step_days * np.arange(count)
    rows = [rotation_row(frame_matrix(frame_type, Instant(float(t)))) for t in times]
    logger.info(
        'Generated %d rows of %s rotation angles from %s to %s',
        count, frame_type.value, start, Instant(float(times[-1])),
    )
    return EphemerisSeries(times, rows, name=frame_type.value)


def build_frame_tables(
    start: Instant, stop: Instant, step_days: float
) -> dict[FrameType, EphemerisSeries]:
    """Tabulate every frame type that has a table."""
    return {ft: build_frame_series(ft, start, stop, step_days) for ft in TABULATED_FRAMES}


def build_context(
    start: Instant,
    stop: Instant,
    step_days: float,
    bodies: dict[str, EphemerisSeries] | None = None,
) -> EphemerisContext:
    """Context holding freshly generated rotation tables and optional body tables."""
    return EphemerisContext(build_frame_tables(start, stop, step_days), bodies)
