"""Astronomical events (rising, culminations, setting, twilight) and list helpers."""

from __future__ import annotations

import enum
from collections.abc import Hashable, Iterable
from dataclasses import dataclass

from celestial_mechanics.constants import EVENT_TOLERANCE_SECONDS
from celestial_mechanics.coordinates import GEOCENTRIC, Origin, SphericalCoordinates
from celestial_mechanics.time_utils import Instant, format_instant


class EventType(enum.Enum):
    RISING = 'rising'
    UPPER_CULMINATION = 'upper culmination'
    SETTING = 'setting'
    LOWER_CULMINATION = 'lower culmination'
    ASTRONOMICAL_DAWN = 'astronomical dawn'
    NAUTICAL_DAWN = 'nautical dawn'
    CIVIL_DAWN = 'civil dawn'
    CIVIL_DUSK = 'civil dusk'
    NAUTICAL_DUSK = 'nautical dusk'
    ASTRONOMICAL_DUSK = 'astronomical dusk'


@dataclass(frozen=True, eq=False)
class AstronomicalEvent:
    """An event at an instant, optionally tied to a set of bodies.

    Two events are equal when they have the same type, the same bodies and
    origin, and instants no more than two seconds apart. This equality is not
    transitive, so events are not hashable.
    """

    type: EventType
    instant: Instant
    bodies: frozenset[Hashable] | None = None
    coordinates: SphericalCoordinates | None = None
    origin: Origin = GEOCENTRIC

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AstronomicalEvent):
            return NotImplemented
        return (
            self.type is other.type
            and self.bodies == other.bodies
            and self.origin == other.origin
            and abs(self.instant.seconds_since(other.instant)) <= EVENT_TOLERANCE_SECONDS
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.bodies:
            names = ', '.join(sorted(str(getattr(b, 'name', b)) for b in self.bodies))
        elif self.coordinates is not None:
            names = f'[{self.coordinates}]'
        else:
            names = ''
        return f'{names}\t{self.type.value}\t{format_instant(self.instant)}'


def filter_by_type(
    events: Iterable[AstronomicalEvent], types: Iterable[EventType]
) -> list[AstronomicalEvent]:
    """Events whose type is one of types, in their original order."""
    wanted = set(types)
    return [e for e in events if e.type in wanted]


def filter_by_bodies(
    events: Iterable[AstronomicalEvent], bodies: Iterable[Hashable]
) -> list[AstronomicalEvent]:
    """Events involving at least one of bodies; events without bodies are dropped."""
    wanted = set(bodies)
    return [e for e in events if e.bodies is not None and not wanted.isdisjoint(e.bodies)]


def remove_duplicates(events: Iterable[AstronomicalEvent]) -> list[AstronomicalEvent]:
    """Drop events equal (within tolerance) to an earlier one; order is kept."""
    kept: list[AstronomicalEvent] = []
    for event in events:
        if event not in kept:
            kept.append(event)
    return kept


def sort_events(events: Iterable[AstronomicalEvent]) -> list[AstronomicalEvent]:
    return sorted(events, key=lambda e: e.instant)
