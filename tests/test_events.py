"""Tests for event equality, filtering and duplicate removal."""

from __future__ import annotations

import pytest

from celestial_mechanics.bodies import MOON, SUN
from celestial_mechanics.coordinates import GEOCENTRIC, GeographicLocation, Origin
from celestial_mechanics.events import (
    AstronomicalEvent,
    EventType,
    filter_by_bodies,
    filter_by_type,
    remove_duplicates,
    sort_events,
)
from celestial_mechanics.time_utils import J2000

HERE = Origin.topocentric(GeographicLocation.from_degrees(52.0, 4.5))


def _event(
    event_type: EventType = EventType.RISING,
    seconds: float = 0.0,
    bodies: frozenset | None = frozenset({SUN}),
    origin: Origin = HERE,
) -> AstronomicalEvent:
    return AstronomicalEvent(event_type, J2000.plus_seconds(seconds), bodies, None, origin)


def test_equality_within_two_seconds() -> None:
    assert _event() == _event(seconds=1.9)
    assert _event() == _event(seconds=-2.0)
    assert _event() != _event(seconds=3.0)


def test_equality_needs_same_type_bodies_and_origin() -> None:
    assert _event() != _event(EventType.SETTING)
    assert _event() != _event(bodies=frozenset({MOON}))
    assert _event() != _event(bodies=None)
    assert _event() != _event(origin=GEOCENTRIC)
    assert _event(bodies=frozenset({SUN, MOON})) == _event(bodies=frozenset({MOON, SUN}))


def test_events_are_unhashable() -> None:
    with pytest.raises(TypeError):
        hash(_event())


def test_filter_by_type() -> None:
    events = [_event(), _event(EventType.SETTING, 100.0), _event(EventType.CIVIL_DAWN, -900.0)]
    kept = filter_by_type(events, [EventType.SETTING, EventType.CIVIL_DAWN])
    assert [e.type for e in kept] == [EventType.SETTING, EventType.CIVIL_DAWN]


def test_filter_by_bodies() -> None:
    both = _event(bodies=frozenset({SUN, MOON}))
    events = [_event(), _event(bodies=frozenset({MOON})), _event(bodies=None), both]
    kept = filter_by_bodies(events, [MOON])
    assert len(kept) == 2
    assert kept[1] is both


def test_remove_duplicates_keeps_first() -> None:
    first = _event()
    events = [first, _event(seconds=1.0), _event(EventType.SETTING), _event(seconds=10.0)]
    kept = remove_duplicates(events)
    assert len(kept) == 3
    assert kept[0] is first


def test_sort_and_str() -> None:
    events = sort_events([_event(seconds=60.0), _event(EventType.SETTING, -60.0)])
    assert events[0].type is EventType.SETTING
    assert str(events[1]) == 'Sun\trising\t2000-01-01 12:01:00'
