"""Read-only set of ephemeris tables shared by interpolation, transforms and solver.

An EphemerisContext is built once (from a data directory with
load.load_context, or from generated tables with frame_tables.build_context)
and passed explicitly to every computation. It is never modified afterwards;
derived contexts are new objects.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from celestial_mechanics.coordinates import FrameType
    from celestial_mechanics.interpolation import EphemerisSeries


class MissingTableError(KeyError):
    """The context holds no table for a requested frame type or body."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else 'missing table'


class EphemerisContext:
    """Immutable mapping of frame rotation tables and body position tables.

    Parameters:
        frames: Rotation-angle series keyed by FrameType (six columns: cos/sin
            of the three Z-Y-Z angles taking galactic vectors into the frame).
        bodies: Position series keyed by lower-case body name (three columns:
            geocentric ICRS x, y, z in metres).
    """

    def __init__(
        self,
        frames: Mapping[FrameType, EphemerisSeries] | None = None,
        bodies: Mapping[str, EphemerisSeries] | None = None,
    ) -> None:
        self._frames = MappingProxyType(dict(frames or {}))
        self._bodies = MappingProxyType({k.lower(): v for k, v in (bodies or {}).items()})
        for frame_type, series in self._frames.items():
            if series.ncolumns != 6:
                raise ValueError(
                    f'rotation table for {frame_type} needs 6 columns, has {series.ncolumns}'
                )
        for name, series in self._bodies.items():
            if series.ncolumns < 3:
                raise ValueError(f'position table for {name!r} needs 3 columns')

    @property
    def frames(self) -> Mapping[FrameType, EphemerisSeries]:
        return self._frames

    @property
    def bodies(self) -> Mapping[str, EphemerisSeries]:
        return self._bodies

    def rotation_series(self, frame_type: FrameType) -> EphemerisSeries:
        """Return the rotation-angle table for a frame type.

        Horizontal frames share the FK5 table (equator and equinox of date).

        Raises:
            MissingTableError: If no table is loaded for the frame type.
        """
        from celestial_mechanics.coordinates import FrameType

        key = FrameType.FK5 if frame_type is FrameType.HORIZONTAL else frame_type
        try:
            return self._frames[key]
        except KeyError:
            raise MissingTableError(f'no rotation table loaded for {key.value} frames') from None

    def body_series(self, name: str) -> EphemerisSeries:
        """Return the position table of a body by name (case-insensitive).

        Raises:
            MissingTableError: If the body has no table in this context.
        """
        try:
            return self._bodies[name.lower()]
        except KeyError:
            raise MissingTableError(f'no ephemeris table loaded for body {name!r}') from None

    def has_body(self, name: str) -> bool:
        return name.lower() in self._bodies

    def with_bodies(self, bodies: Mapping[str, EphemerisSeries]) -> EphemerisContext:
        """Return a new context with additional (or replaced) body tables."""
        merged = dict(self._bodies)
        merged.update({k.lower(): v for k, v in bodies.items()})
        return EphemerisContext(self._frames, merged)

    def with_frames(self, frames: Mapping[FrameType, EphemerisSeries]) -> EphemerisContext:
        """Return a new context with additional (or replaced) rotation tables."""
        merged = dict(self._frames)
        merged.update(frames)
        return EphemerisContext(merged, self._bodies)

    def __repr__(self) -> str:
        frames = ', '.join(sorted(f.value for f in self._frames))
        bodies = ', '.join(sorted(self._bodies))
        return f'EphemerisContext(frames=[{frames}], bodies=[{bodies}])'
