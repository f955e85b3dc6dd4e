"""Tabulated ephemeris series and five-point central-difference interpolation.

A series is a time-ordered table of value rows. Values between rows are
obtained with the five-point Stirling/Bessel formula over the five rows
centred on the row nearest in time. Lookups never extrapolate: a request too
close to either end of the table raises OutOfRangeError.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from celestial_mechanics.time_utils import Instant

logger = logging.getLogger(__name__)

# Rows required on each side of the bracketing row
_HALF_WINDOW = 2
_GUARD = 2


class OutOfRangeError(ValueError):
    """Requested instant lies outside the interpolable span of a series."""

    def __init__(self, instant: Instant, span: tuple[Instant, Instant] | None) -> None:
        self.instant = instant
        self.span = span
        if span is None:
            msg = f'{instant} is outside the ephemeris range (series too short to interpolate)'
        else:
            msg = f'{instant} is outside the ephemeris range [{span[0]}, {span[1]}]'
        super().__init__(msg)


@dataclass(frozen=True)
class EphemerisSample:
    """One row of a tabulated series."""

    instant: Instant
    values: tuple[float, ...]


class EphemerisSeries:
    """Read-only table of samples with strictly increasing times.

    Times (Julian Days) and values are held in numpy arrays that are flagged
    non-writeable, so a series can be shared by any number of callers.
    """

    def __init__(self, times: Sequence[float] | np.ndarray, values: Sequence[Sequence[float]] | np.ndarray,
                 name: str = '') -> None:
        t = np.array(times, dtype=np.float64)
        v = np.array(values, dtype=np.float64)
        if t.ndim != 1:
            raise ValueError('series times must be one-dimensional')
        if t.size == 0:
            v = v.reshape(0, 0)
        elif v.ndim == 1:
            v = v.reshape(len(t), -1)
        if v.ndim != 2 or v.shape[0] != t.shape[0]:
            raise ValueError(
                f'series {name!r}: {t.shape[0]} times but values of shape {v.shape}'
            )
        if t.size > 1 and not np.all(np.diff(t) > 0.0):
            raise ValueError(f'series {name!r}: times must be strictly increasing')
        t.flags.writeable = False
        v.flags.writeable = False
        self._times = t
        self._values = v
        self.name = name

    @classmethod
    def from_samples(cls, samples: Iterable[EphemerisSample], name: str = '') -> EphemerisSeries:
        """Build a series from EphemerisSample rows (all rows must have equal length)."""
        rows = list(samples)
        widths = {len(s.values) for s in rows}
        if len(widths) > 1:
            raise ValueError(f'series {name!r}: rows have differing lengths {sorted(widths)}')
        return cls([s.instant.jd for s in rows], [s.values for s in rows], name=name)

    @property
    def times(self) -> np.ndarray:
        return self._times

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def ncolumns(self) -> int:
        return int(self._values.shape[1]) if self._values.ndim == 2 else 0

    def __len__(self) -> int:
        return int(self._times.shape[0])

    def __getitem__(self, index: int) -> EphemerisSample:
        return EphemerisSample(
            Instant(float(self._times[index])),
            tuple(float(x) for x in self._values[index]),
        )

    def __iter__(self):
        for i in range(len(self)):
            yield self[i]

    def __repr__(self) -> str:
        if len(self) == 0:
            return f'EphemerisSeries({self.name!r}, empty)'
        return (
            f'EphemerisSeries({self.name!r}, {len(self)} rows, '
            f'JD {self._times[0]}..{self._times[-1]})'
        )

    def valid_span(self) -> tuple[Instant, Instant] | None:
        """Half-open span [first, end) of instants that can be interpolated, or None."""
        lo = _HALF_WINDOW + _GUARD
        hi = len(self) - 1 - _HALF_WINDOW - _GUARD
        if hi < lo:
            return None
        # The bracketing row of the last valid instant is hi, so the span ends at row hi+1.
        return (Instant(float(self._times[lo])), Instant(float(self._times[hi + 1])))

    def find_index(self, instant: Instant) -> int:
        """Index of the last sample at or before the instant (binary search); -1 if before all."""
        return int(np.searchsorted(self._times, instant.jd, side='right')) - 1

    def interpolate(self, instant: Instant) -> tuple[float, ...]:
        """Interpolated values at an instant.

        Parameters:
            instant: Time of interest.

        Returns:
            One value per column.

        Raises:
            OutOfRangeError: If fewer than two rows precede or follow the
                five-row window around the instant.
        """
        n_rows = len(self)
        index = self.find_index(instant)
        start = index - _HALF_WINDOW
        end = index + _HALF_WINDOW
        if start < _GUARD or end > n_rows - 1 - _GUARD:
            raise OutOfRangeError(instant, self.valid_span())
        window = self._times[start:end + 1]
        closest = start + int(np.argmin(np.abs(window - instant.jd)))
        t_closest = self._times[closest]
        n = (instant.jd - t_closest) / (self._times[closest + 1] - t_closest)
        rows = self._values[closest - _HALF_WINDOW:closest + _HALF_WINDOW + 1]
        result = five_point(n, rows)
        return tuple(float(x) for x in result)


def five_point(n: float, rows: np.ndarray) -> np.ndarray:
    """Five-point central-difference interpolation, column by column.

    Parameters:
        n: Interpolation factor relative to the middle row (0 at the middle
            row, 1 at the next one).
        rows: Array of shape (5, ncolumns) holding y1..y5.

    Returns:
        Array of ncolumns interpolated values.
    """
    y1, y2, y3, y4, y5 = rows
    a = y2 - y1
    b = y3 - y2
    c = y4 - y3
    d = y5 - y4
    e = b - a
    f = c - b
    g = d - c
    h = f - e
    j = g - f
    k = j - h
    n2 = n * n
    return (
        y3
        + n / 2.0 * (b + c)
        + n2 / 2.0 * f
        + n * (n2 - 1.0) / 12.0 * (h + j)
        + n2 * (n2 - 1.0) / 24.0 * k
    )


def interpolate(series: EphemerisSeries, instant: Instant) -> tuple[float, ...]:
    """Interpolate a series at an instant (see EphemerisSeries.interpolate)."""
    return series.interpolate(instant)
