"""Rising, culmination, setting and twilight times, refined to self-consistency.

The single pass follows Meeus (Astronomical Algorithms, ch. 15) for a body at
fixed coordinates. Moving bodies are handled by re-running the single pass
with the position evaluated at the latest estimate until successive estimates
agree to within a second.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass

from celestial_mechanics.angles import wrap_turn
from celestial_mechanics.bodies import EVENT_POLICIES, Body, position
from celestial_mechanics.constants import (
    CONVERGENCE_SECONDS,
    DEFAULT_MAX_ITERATIONS,
    HALF_SIDEREAL_DAY,
    MEAN_ATMOSPHERIC_REFRACTION,
    SIDEREAL_DAY,
    SIDEREAL_RATE,
    TWOPI,
)
from celestial_mechanics.context import EphemerisContext
from celestial_mechanics.coordinates import (
    ICRS,
    GeographicLocation,
    Origin,
    RectangularCoordinates,
    SphericalCoordinates,
    equatorial,
)
from celestial_mechanics.events import (
    AstronomicalEvent,
    EventType,
    remove_duplicates,
    sort_events,
)
from celestial_mechanics.time_utils import Instant, greenwich_mean_sidereal_time
from celestial_mechanics.transforms import transform

logger = logging.getLogger(__name__)

PositionFn = Callable[[Instant], SphericalCoordinates | RectangularCoordinates]
# Depression at rising and setting: fixed, or evaluated at each estimate
Depression = float | Callable[[Instant], float]

RISE_TRANSIT_SET_TYPES = (
    EventType.RISING,
    EventType.UPPER_CULMINATION,
    EventType.SETTING,
    EventType.LOWER_CULMINATION,
)


class ConvergenceError(RuntimeError):
    """Event refinement did not settle within the iteration limit."""


@dataclass(frozen=True)
class RiseTransitSet:
    """Result of one rise/transit/set pass.

    Rising and setting are None when the body stays above (cos_h0 < -1) or
    below (cos_h0 > 1) the given altitude all day.
    """

    rising: Instant | None
    transit: Instant
    setting: Instant | None
    antitransit: Instant
    coordinates: SphericalCoordinates
    cos_h0: float

    @property
    def is_circumpolar(self) -> bool:
        return self.cos_h0 < -1.0

    @property
    def never_rises(self) -> bool:
        return self.cos_h0 > 1.0

    def get(self, event_type: EventType) -> Instant | None:
        """Instant of one of the four rise/transit/set event types."""
        if event_type is EventType.RISING:
            return self.rising
        if event_type is EventType.UPPER_CULMINATION:
            return self.transit
        if event_type is EventType.SETTING:
            return self.setting
        if event_type is EventType.LOWER_CULMINATION:
            return self.antitransit
        raise ValueError(f'{event_type.value} is not a rise/transit/set event')


def _equatorial_of_date(
    position_fn: PositionFn, instant: Instant, context: EphemerisContext
) -> SphericalCoordinates:
    coords = transform(position_fn(instant), equatorial(instant), context)
    if isinstance(coords, RectangularCoordinates):
        return coords.spherical()
    return coords


def rise_transit_set(
    position_fn: PositionFn,
    date: Instant,
    location: GeographicLocation,
    context: EphemerisContext,
    angle_below_horizon: Depression = MEAN_ATMOSPHERIC_REFRACTION,
) -> RiseTransitSet:
    """Single-pass rising, transit, setting and antitransit on the UT day of date.

    Parameters:
        position_fn: Geocentric position of the body at an instant, any frame.
        date: Any instant of the UT day of interest; the position is evaluated here.
        location: Observer.
        context: Tables for the frame rotations (and the body's position).
        angle_below_horizon: Depression of the body's centre at rising and
            setting, radians, or a function of the instant returning it.

    Returns:
        Event instants as fractions of the day after 0h UT.
    """
    coords = _equatorial_of_date(position_fn, date, context)
    depression = (
        angle_below_horizon(date) if callable(angle_below_horizon) else angle_below_horizon
    )
    phi = location.latitude
    delta = coords.latitude
    cos_h0 = (math.sin(-depression) - math.sin(phi) * math.sin(delta)) / (
        math.cos(phi) * math.cos(delta)
    )
    day = date.start_of_ut_day
    theta0 = greenwich_mean_sidereal_time(day)
    r0 = wrap_turn((coords.longitude - location.longitude - theta0) / TWOPI)
    rising = setting = None
    if abs(cos_h0) <= 1.0:
        h0 = math.acos(cos_h0) / TWOPI
        rising = day.plus_days(wrap_turn(r0 - h0) / SIDEREAL_RATE)
        setting = day.plus_days(wrap_turn(r0 + h0) / SIDEREAL_RATE)
    m0 = r0 / SIDEREAL_RATE
    ma = m0 - HALF_SIDEREAL_DAY if m0 > 0.5 else m0 + HALF_SIDEREAL_DAY
    return RiseTransitSet(
        rising=rising,
        transit=day.plus_days(m0),
        setting=setting,
        antitransit=day.plus_days(ma),
        coordinates=coords,
        cos_h0=cos_h0,
    )


def refine(
    event_type: EventType,
    seed: Instant,
    position_fn: PositionFn,
    location: GeographicLocation,
    context: EphemerisContext,
    angle_below_horizon: Depression = MEAN_ATMOSPHERIC_REFRACTION,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Instant | None:
    """Iterate the single pass until an event time is consistent with the position at that time.

    Each step evaluates the position at the current estimate and takes the
    new event of the same type nearest to it (on the same day or one
    sidereal day either side).

    Returns:
        The converged instant, or None if the event ceases to occur (the body
        becomes circumpolar or never rises).

    Raises:
        ConvergenceError: If the estimate still moves by more than a second
            after max_iterations steps.
    """
    current = seed
    for iteration in range(1, max_iterations + 1):
        rts = rise_transit_set(position_fn, current, location, context, angle_below_horizon)
        candidate = rts.get(event_type)
        if candidate is None:
            logger.debug('%s vanished during refinement at %s', event_type.value, current)
            return None
        nearest = min(
            (candidate.plus_days(k * SIDEREAL_DAY) for k in (-1, 0, 1)),
            key=lambda t: abs(t.jd - current.jd),
        )
        change = abs(nearest.seconds_since(current))
        logger.debug('%s iteration %d: %s (moved %.3f s)', event_type.value, iteration, nearest, change)
        current = nearest
        if change <= CONVERGENCE_SECONDS:
            return current
    raise ConvergenceError(
        f'{event_type.value} did not converge within {max_iterations} iterations (last {current})'
    )


def solve_rise_transit_set(
    position_fn: PositionFn,
    date: Instant,
    location: GeographicLocation,
    context: EphemerisContext,
    angle_below_horizon: Depression = MEAN_ATMOSPHERIC_REFRACTION,
    bodies: Iterable[Hashable] | None = None,
    event_types: Iterable[EventType] = RISE_TRANSIT_SET_TYPES,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> list[AstronomicalEvent]:
    """Refined rising, upper culmination, setting and lower culmination events.

    Parameters:
        position_fn: Geocentric position of the body at an instant.
        date: Any instant of the UT day of interest.
        location: Observer.
        context: Ephemeris tables.
        angle_below_horizon: Depression at rising and setting, radians, or a
            function of the instant re-evaluated at every refinement step.
        bodies: Bodies the events refer to.
        event_types: Subset of the four event types to compute.
        max_iterations: Refinement limit per event.

    Returns:
        Events sorted by time. Each event is seeded from the single pass on
        the given day and refined independently, so it can end up slightly
        outside that day.

    Raises:
        OutOfRangeError: If a position or rotation lookup leaves its table.
        ConvergenceError: If an event does not converge.
    """
    body_set = frozenset(bodies) if bodies is not None else None
    origin = Origin.topocentric(location)
    first = rise_transit_set(position_fn, date, location, context, angle_below_horizon)
    events = []
    for event_type in event_types:
        seed = first.get(event_type)
        if seed is None:
            continue
        instant = refine(
            event_type, seed, position_fn, location, context, angle_below_horizon, max_iterations
        )
        if instant is None:
            continue
        coords = _equatorial_of_date(position_fn, instant, context)
        events.append(AstronomicalEvent(event_type, instant, body_set, coords, origin))
    return sort_events(events)


def body_events(
    body: Body,
    date: Instant,
    location: GeographicLocation,
    context: EphemerisContext,
) -> list[AstronomicalEvent]:
    """Rise/transit/set events of a standard body, with twilight for the Sun.

    The body's kind selects the altitude used for rising and setting, whether
    lower culminations are reported, and which twilight depressions add dawn
    and dusk events.
    """
    policy = EVENT_POLICIES[body.kind]

    def position_fn(instant: Instant) -> RectangularCoordinates:
        return position(body, instant, ICRS, context)

    event_types = [
        t
        for t in RISE_TRANSIT_SET_TYPES
        if policy.lower_culmination or t is not EventType.LOWER_CULMINATION
    ]

    def angle(instant: Instant) -> float:
        return policy.altitude(body, instant, context)

    events = solve_rise_transit_set(
        position_fn, date, location, context, angle, bodies=(body,), event_types=event_types
    )
    for twilight in policy.twilights:
        found = solve_rise_transit_set(
            position_fn,
            date,
            location,
            context,
            twilight.depression,
            bodies=(body,),
            event_types=(EventType.RISING, EventType.SETTING),
        )
        for event in found:
            label = twilight.dawn if event.type is EventType.RISING else twilight.dusk
            events.append(
                AstronomicalEvent(label, event.instant, event.bodies, event.coordinates, event.origin)
            )
    logger.debug('%d events for %s on %s', len(events), body.name, date.start_of_ut_day)
    return remove_duplicates(sort_events(events))
