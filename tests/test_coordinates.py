"""Tests for frames, origins and coordinate value types."""

from __future__ import annotations

import math

import pytest

from celestial_mechanics.constants import AU
from celestial_mechanics.coordinates import (
    B1950_FRAME,
    GALACTIC,
    GEOCENTRIC,
    HELIOCENTRIC,
    ICRS,
    J2000_FRAME,
    CoordinateFrame,
    FrameType,
    GeographicLocation,
    Origin,
    OriginKind,
    RectangularCoordinates,
    SphericalCoordinates,
    equatorial,
    horizontal,
    mean_ecliptic,
)
from celestial_mechanics.time_utils import J2000, Instant

PARIS = GeographicLocation.from_degrees(48.8566, 2.3522, 35.0)


def test_equinox_required_exactly_where_needed() -> None:
    with pytest.raises(ValueError, match='require an equinox'):
        CoordinateFrame(FrameType.FK5)
    with pytest.raises(ValueError, match='have no equinox'):
        CoordinateFrame(FrameType.GALACTIC, J2000)
    with pytest.raises(ValueError, match='have no equinox'):
        CoordinateFrame(FrameType.ICRF, J2000)
    assert CoordinateFrame(FrameType.MEAN_ECLIPTIC, J2000).equinox == J2000


def test_horizontal_frame_requires_topocentric_origin() -> None:
    with pytest.raises(ValueError, match='topocentric'):
        CoordinateFrame(FrameType.HORIZONTAL, J2000, GEOCENTRIC)
    frame = horizontal(PARIS, J2000)
    assert frame.origin.kind is OriginKind.TOPOCENTRIC
    assert frame.origin.location == PARIS


def test_topocentric_origin_needs_location() -> None:
    with pytest.raises(ValueError):
        Origin(OriginKind.TOPOCENTRIC)
    with pytest.raises(ValueError):
        Origin(OriginKind.GEOCENTRIC, PARIS)


def test_frame_equality_includes_origin() -> None:
    assert equatorial(J2000) == J2000_FRAME
    assert J2000_FRAME.with_origin(HELIOCENTRIC) != J2000_FRAME
    assert mean_ecliptic(J2000) != J2000_FRAME


def test_frame_labels() -> None:
    assert ICRS.label == 'ICRS'
    assert J2000_FRAME.label == 'J2000.0'
    assert B1950_FRAME.label == 'B1950.0'
    assert equatorial(Instant.from_julian_epoch(2021.3)).label == 'J2021.3'
    assert GALACTIC.label == 'galactic'


def test_frame_type_properties() -> None:
    assert not FrameType.ICRF.requires_equinox
    assert FrameType.HORIZONTAL.requires_equinox
    assert FrameType.FK4.is_equatorial
    assert FrameType.TRUE_ECLIPTIC.is_ecliptic


def test_spherical_normalisation() -> None:
    coords = SphericalCoordinates(-math.pi / 2, 2.0)
    assert coords.longitude == pytest.approx(1.5 * math.pi)
    assert coords.latitude == math.pi / 2
    assert SphericalCoordinates(0.0, -3.0).latitude == -math.pi / 2


def test_non_positive_distance_rejected() -> None:
    with pytest.raises(ValueError, match='positive'):
        SphericalCoordinates(0.0, 0.0, 0.0)
    with pytest.raises(ValueError, match='positive'):
        SphericalCoordinates(0.0, 0.0, -1.0)


def test_spherical_rectangular_round_trip() -> None:
    coords = SphericalCoordinates(math.radians(123.4), math.radians(-41.2), 2.5 * AU, J2000_FRAME)
    rect = coords.rectangular()
    assert rect.frame == J2000_FRAME
    assert rect.distance == pytest.approx(2.5 * AU)
    back = rect.spherical()
    assert back.longitude == pytest.approx(coords.longitude, abs=1e-12)
    assert back.latitude == pytest.approx(coords.latitude, abs=1e-12)
    assert back.distance == pytest.approx(coords.distance)


def test_direction_only_uses_unit_vector() -> None:
    rect = SphericalCoordinates(0.0, math.pi / 2).rectangular()
    assert rect.x == pytest.approx(0.0, abs=1e-15)
    assert rect.z == pytest.approx(1.0)
    assert rect.distance is None
    assert rect.spherical().distance is None


def test_tiny_rectangular_vector_has_no_distance() -> None:
    assert RectangularCoordinates(0.0, 0.0, 1e-11).distance is None
    assert RectangularCoordinates(0.0, 0.0, 1.0).distance is None
    assert RectangularCoordinates(0.0, 1.2, 0.0).distance == pytest.approx(1.2)


def test_circumpolar_and_never_visible() -> None:
    location = GeographicLocation.from_degrees(60.0, 10.0)
    high = SphericalCoordinates(0.0, math.radians(80.0))
    low = SphericalCoordinates(0.0, math.radians(-80.0))
    mid = SphericalCoordinates(0.0, math.radians(10.0))
    assert high.is_circumpolar(location)
    assert not high.is_never_above_horizon(location)
    assert low.is_never_above_horizon(location)
    assert not low.is_circumpolar(location)
    assert not mid.is_circumpolar(location)
    assert not mid.is_never_above_horizon(location)
    south = GeographicLocation.from_degrees(-60.0, 10.0)
    assert low.is_circumpolar(south)
    assert high.is_never_above_horizon(south)
    equator = GeographicLocation(0.0, 0.0)
    assert not high.is_circumpolar(equator)


def test_string_forms() -> None:
    text = str(SphericalCoordinates(0.0, 0.0, 1.0e9, J2000_FRAME))
    assert 'J2000.0' in text
    assert 'α' in text
    assert 'd = ' in text
    assert str(GALACTIC).startswith('galactic')
