"""Positions, reference-frame transformations and rise/set events from tabulated ephemerides.

The package has three cores:
- Interpolation: five-point central differences over time-ordered tables
- Frames: equatorial, ecliptic, galactic and horizontal frames linked through galactic axes
- Events: rising, culmination, setting and twilight refined to self-consistency

Tables are held in an EphemerisContext that is loaded or generated once and
passed to every computation.
"""

from celestial_mechanics.bodies import Body, BodyKind, Capability, position
from celestial_mechanics.context import EphemerisContext, MissingTableError
from celestial_mechanics.coordinates import (
    CoordinateFrame,
    FrameType,
    GeographicLocation,
    Origin,
    RectangularCoordinates,
    SphericalCoordinates,
)
from celestial_mechanics.events import AstronomicalEvent, EventType
from celestial_mechanics.interpolation import (
    EphemerisSample,
    EphemerisSeries,
    OutOfRangeError,
    interpolate,
)
from celestial_mechanics.load import load_context
from celestial_mechanics.rings import RingGeometry, saturn_ring_geometry
from celestial_mechanics.solver import ConvergenceError, body_events, solve_rise_transit_set
from celestial_mechanics.time_utils import Instant
from celestial_mechanics.transforms import transform

__all__ = [
    'AstronomicalEvent',
    'Body',
    'BodyKind',
    'Capability',
    'ConvergenceError',
    'CoordinateFrame',
    'EphemerisContext',
    'EphemerisSample',
    'EphemerisSeries',
    'EventType',
    'FrameType',
    'GeographicLocation',
    'Instant',
    'MissingTableError',
    'Origin',
    'OutOfRangeError',
    'RectangularCoordinates',
    'RingGeometry',
    'SphericalCoordinates',
    'body_events',
    'interpolate',
    'load_context',
    'position',
    'saturn_ring_geometry',
    'solve_rise_transit_set',
    'transform',
]
