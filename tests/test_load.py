"""Tests for pipe-delimited table I/O and data directory loading."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import numpy as np
import pytest

from celestial_mechanics.context import EphemerisContext
from celestial_mechanics.coordinates import FrameType
from celestial_mechanics.frame_tables import build_frame_series
from celestial_mechanics.interpolation import EphemerisSeries
from celestial_mechanics.load import (
    FRAME_FILES,
    load_context,
    parse_series,
    read_series,
    save_context,
    write_series,
)
from celestial_mechanics.time_utils import J2000


def _body_series() -> EphemerisSeries:
    times = [2451545.0 + i for i in range(12)]
    return EphemerisSeries(times, [[1.0e11 + i, -2.0e10, 3.5e9 / 7.0] for i in range(12)])


def test_parse_skips_short_lines() -> None:
    text = 'header\n\n2451545.0|1.0|2.0\n2451546.0|3.0|4.0\n'
    series = parse_series(io.StringIO(text))
    assert len(series) == 2
    assert series.values.tolist() == [[1.0, 2.0], [3.0, 4.0]]


def test_empty_fields_are_dropped() -> None:
    """Trailing or doubled separators add no columns; 'jd|' alone is a short line."""
    text = '2451545.0|1.0|2.0|\n2451546.0||3.0|4.0\n2451547.0|\n2451548.0| 5.0 |6.0\n'
    series = parse_series(io.StringIO(text))
    assert series.times.tolist() == [2451545.0, 2451546.0, 2451548.0]
    assert series.values.tolist() == [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]]


def test_malformed_number_names_the_line() -> None:
    text = '2451545.0|1.0\n2451546.0|2.0\n2451547.0|x\n'
    with pytest.raises(ValueError, match='line 3'):
        parse_series(io.StringIO(text), 'bad')


def test_ragged_rows_rejected() -> None:
    with pytest.raises(ValueError, match='field counts'):
        parse_series(io.StringIO('1|2|3\n2|3\n'))


def test_write_then_read_is_exact() -> None:
    series = _body_series()
    buffer = io.StringIO()
    write_series(series, buffer)
    assert buffer.getvalue().count('\n') == len(series)
    buffer.seek(0)
    again = read_series(buffer, 'copy')
    assert np.array_equal(again.times, series.times)
    assert np.array_equal(again.values, series.values)


def test_read_series_from_path_uses_stem(tmp_path: Path) -> None:
    path = tmp_path / 'mars.ephem'
    write_series(_body_series(), path)
    assert read_series(path).name == 'mars'


def test_load_context_reads_frames_and_bodies(tmp_path: Path) -> None:
    fk5 = build_frame_series(FrameType.FK5, J2000, J2000.plus_days(100.0), 10.0)
    write_series(fk5, tmp_path / FRAME_FILES[FrameType.FK5])
    write_series(_body_series(), tmp_path / 'Moon.ephem')
    (tmp_path / 'notes.txt').write_text('ignored')
    context = load_context(tmp_path)
    assert set(context.frames) == {FrameType.FK5}
    assert set(context.bodies) == {'moon'}
    assert np.array_equal(context.frames[FrameType.FK5].values, fk5.values)


def test_missing_frame_files_are_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger='celestial_mechanics.load'):
        context = load_context(tmp_path)
    assert not context.frames
    assert sum('not found' in r.getMessage() for r in caplog.records) == len(FRAME_FILES)


def test_load_context_uses_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    write_series(_body_series(), tmp_path / 'venus.ephem')
    monkeypatch.setenv('CELESTIAL_EPHEMERIS_PATH', str(tmp_path))
    assert load_context().has_body('venus')


def test_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match='does not exist'):
        load_context(tmp_path / 'absent')


def test_save_context_round_trip(tmp_path: Path) -> None:
    fk4 = build_frame_series(FrameType.FK4, J2000, J2000.plus_days(50.0), 10.0)
    context = EphemerisContext({FrameType.FK4: fk4}, {'sun': _body_series()})
    written = save_context(context, tmp_path / 'out')
    assert sorted(p.name for p in written) == ['fk4.ephem', 'sun.ephem']
    loaded = load_context(tmp_path / 'out')
    assert np.array_equal(loaded.frames[FrameType.FK4].values, fk4.values)
    assert np.array_equal(loaded.body_series('sun').values, context.body_series('sun').values)
