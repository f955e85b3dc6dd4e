"""Tests for rotation-table generation."""

from __future__ import annotations

import math

import numpy as np
import pytest

from celestial_mechanics import frame_tables
from celestial_mechanics.constants import ARCSEC
from celestial_mechanics.coordinates import FrameType
from celestial_mechanics.frame_tables import (
    build_frame_series,
    frame_bias,
    frame_matrix,
    galactic_matrix,
    mean_obliquity,
    nutation_in_longitude,
    precession_matrix_fk4,
    precession_matrix_fk5,
    rotation_row,
    rotation_y,
    rotation_z,
    zyz_angles,
)
from celestial_mechanics.time_utils import J2000, Instant


def test_galactic_matrix_is_a_rotation() -> None:
    for target in ('J2000', 'FK4'):
        m = galactic_matrix(target)
        assert np.allclose(m @ m.T, np.eye(3), atol=1e-12)
        assert np.linalg.det(m) == pytest.approx(1.0)
        assert not m.flags.writeable


def test_galactic_euler_angles_in_j2000() -> None:
    """North galactic pole at 192.85948, +27.12825; celestial pole at l = 122.93192."""
    a, b, c = (math.degrees(x) for x in zyz_angles(galactic_matrix('J2000')))
    assert a == pytest.approx(180.0 - 122.93192, abs=1e-3)
    assert b == pytest.approx(90.0 - 27.12825, abs=1e-3)
    assert c % 360.0 == pytest.approx(192.85948, abs=1e-3)


def test_zyz_angles_round_trip() -> None:
    a, b, c = 0.4, 1.1, -2.3
    m = rotation_z(c) @ rotation_y(b) @ rotation_z(a)
    assert zyz_angles(m) == pytest.approx((a, b, c), abs=1e-12)
    row = rotation_row(m)
    assert row == pytest.approx(
        (math.cos(a), math.sin(a), math.cos(b), math.sin(b), math.cos(c), math.sin(c)), abs=1e-12
    )


def test_precession_is_identity_at_reference_epochs() -> None:
    assert np.allclose(precession_matrix_fk5(J2000), np.eye(3), atol=1e-15)
    assert np.allclose(precession_matrix_fk4(1950.0, 1950.0), np.eye(3), atol=1e-15)


def test_fk4_precession_inverts() -> None:
    forward = precession_matrix_fk4(1950.0, 1990.0)
    backward = precession_matrix_fk4(1990.0, 1950.0)
    assert np.allclose(forward @ backward, np.eye(3), atol=1e-7)


def test_frame_bias_is_small() -> None:
    off_diagonal = frame_bias() - np.eye(3)
    assert np.max(np.abs(off_diagonal)) < 0.05 * ARCSEC
    assert np.max(np.abs(off_diagonal)) > 0.005 * ARCSEC


def test_mean_obliquity_at_j2000() -> None:
    assert mean_obliquity(J2000) == pytest.approx(84381.448 * ARCSEC)
    later = Instant.from_julian_epoch(2100.0)
    assert mean_obliquity(later) == pytest.approx((84381.448 - 46.8150) * ARCSEC, abs=0.01 * ARCSEC)


def test_nutation_in_longitude_bounds() -> None:
    for year in range(1990, 2010):
        dpsi = nutation_in_longitude(Instant.from_julian_epoch(float(year)))
        assert abs(dpsi) < 19.0 * ARCSEC


def test_horizontal_and_galactic_have_no_table() -> None:
    with pytest.raises(ValueError, match='no rotation table'):
        frame_matrix(FrameType.HORIZONTAL, J2000)
    with pytest.raises(ValueError, match='no rotation table'):
        frame_matrix(FrameType.GALACTIC, J2000)


def test_build_frame_series_rows() -> None:
    start = Instant(2451545.0)
    series = build_frame_series(FrameType.FK5, start, start.plus_days(100.0), 10.0)
    assert len(series) == 11
    assert series.ncolumns == 6
    assert series.name == 'fk5'
    assert series.times[-1] == pytest.approx(start.jd + 100.0)
    cos_a, sin_a = series.values[0][:2]
    assert cos_a * cos_a + sin_a * sin_a == pytest.approx(1.0)


def test_build_frame_series_rejects_bad_ranges() -> None:
    with pytest.raises(ValueError, match='step'):
        build_frame_series(FrameType.FK5, J2000, J2000.plus_days(10.0), 0.0)
    with pytest.raises(ValueError, match='precedes'):
        build_frame_series(FrameType.FK5, J2000, J2000.plus_days(-10.0), 1.0)


def test_build_context_has_every_tabulated_frame() -> None:
    context = frame_tables.build_context(J2000, J2000.plus_days(200.0), 20.0)
    assert set(context.frames) == set(frame_tables.TABULATED_FRAMES)
    assert not context.bodies
