"""Tests for Saturn's ring geometry on synthetic tables."""

from __future__ import annotations

import math

import numpy as np
import pytest
from conftest import constant_series

from celestial_mechanics.constants import ARCSEC, AU, DEGREE
from celestial_mechanics.context import EphemerisContext, MissingTableError
from celestial_mechanics.coordinates import ICRS, SphericalCoordinates, mean_ecliptic
from celestial_mechanics.rings import ring_plane_elements, saturn_ring_geometry
from celestial_mechanics.time_utils import J2000, Instant

WHEN = Instant.from_julian_epoch(2021.4)


def _saturn_direction(context: EphemerisContext) -> np.ndarray:
    """ICRS unit vector of ecliptic longitude node + 90 deg, latitude 0 (of date)."""
    _, node = ring_plane_elements(WHEN)
    coords = SphericalCoordinates(node + math.pi / 2, 0.0, None, mean_ecliptic(WHEN))
    return coords.transform(ICRS, context).rectangular().vector()


def _context(frame_context: EphemerisContext, sun_factor: float) -> EphemerisContext:
    u = _saturn_direction(frame_context)
    return frame_context.with_bodies(
        {
            'saturn': constant_series((9.0 * AU * u).tolist(), WHEN, 'saturn'),
            'sun': constant_series((sun_factor * AU * u).tolist(), WHEN, 'sun'),
        }
    )


def test_ring_plane_elements_at_j2000() -> None:
    inclination, node = ring_plane_elements(J2000)
    assert inclination == pytest.approx(28.075216 * DEGREE)
    assert node == pytest.approx(169.508470 * DEGREE)


def test_rings_fully_open(frame_context: EphemerisContext) -> None:
    """Saturn 90 degrees past the ring node, Sun behind Earth: B and B' equal the inclination."""
    geometry = saturn_ring_geometry(WHEN, _context(frame_context, -1.0))
    inclination, _ = ring_plane_elements(WHEN)
    assert geometry.earth_latitude == pytest.approx(inclination, abs=1e-9)
    assert geometry.sun_latitude == pytest.approx(inclination, abs=1e-4)
    assert geometry.longitude_difference < 1e-3
    assert geometry.distance == pytest.approx(9.0 * AU, rel=1e-9)
    assert geometry.major_axis == pytest.approx(375.35 * ARCSEC / 9.0, rel=1e-9)
    assert geometry.minor_axis == pytest.approx(geometry.major_axis * math.sin(inclination))
    assert not geometry.is_dark
    assert 0.0 <= geometry.position_angle < 2.0 * math.pi


def test_unlit_face_is_dark(frame_context: EphemerisContext) -> None:
    """Sun placed so Saturn is seen from the opposite side of the ring plane."""
    geometry = saturn_ring_geometry(WHEN, _context(frame_context, 19.0))
    assert geometry.earth_latitude > 0.0
    assert geometry.sun_latitude < 0.0
    assert geometry.is_dark


def test_missing_saturn_table(frame_context: EphemerisContext) -> None:
    with pytest.raises(MissingTableError):
        saturn_ring_geometry(WHEN, frame_context)
