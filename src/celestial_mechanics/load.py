"""Reading and writing pipe-delimited ephemeris tables, and loading a data directory."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from celestial_mechanics.config import get_ephemeris_path
from celestial_mechanics.context import EphemerisContext
from celestial_mechanics.coordinates import FrameType
from celestial_mechanics.interpolation import EphemerisSeries

logger = logging.getLogger(__name__)

FRAME_FILES = {
    FrameType.ICRF: 'icrs.ephem',
    FrameType.FK4: 'fk4.ephem',
    FrameType.FK5: 'fk5.ephem',
    FrameType.MEAN_ECLIPTIC: 'meanecliptic.ephem',
    FrameType.TRUE_ECLIPTIC: 'trueecliptic.ephem',
}

TABLE_SUFFIX = '.ephem'


def parse_series(lines: Iterable[str], name: str = '') -> EphemerisSeries:
    """Parse table lines: 'jd|v1|v2|...' per row.

    Lines with fewer than two fields (blank lines, headers without a '|')
    are skipped.

    Raises:
        ValueError: On a malformed number (message names the line number) or
            on unordered/ragged rows.
    """
    times: list[float] = []
    rows: list[list[float]] = []
    for line_no, line in enumerate(lines, start=1):
        parts = [p for p in line.split('|') if p.strip()]
        if len(parts) < 2:
            continue
        try:
            numbers = [float(p) for p in parts]
        except ValueError:
            label = name or 'table'
            raise ValueError(f'{label} line {line_no}: malformed number in {line.strip()!r}') from None
        times.append(numbers[0])
        rows.append(numbers[1:])
    widths = {len(r) for r in rows}
    if len(widths) > 1:
        raise ValueError(f'{name or "table"}: rows have differing field counts {sorted(widths)}')
    return EphemerisSeries(times, rows, name=name)


def read_series(source: str | Path | TextIO, name: str | None = None) -> EphemerisSeries:
    """Read a table from a path or an open text stream.

    Parameters:
        source: File path or stream.
        name: Series name; defaults to the file stem.
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        with path.open() as f:
            series = parse_series(f, name or path.stem)
        logger.info('Read %d rows from %s', len(series), path)
        return series
    return parse_series(source, name or '')


def write_series(series: EphemerisSeries, dest: str | Path | TextIO) -> None:
    """Write a table in the format read by read_series (full float precision)."""
    if isinstance(dest, (str, Path)):
        with Path(dest).open('w') as f:
            write_series(series, f)
        return
    for t, row in zip(series.times, series.values):
        dest.write('|'.join(repr(float(x)) for x in (t, *row)))
        dest.write('\n')


def load_context(directory: str | Path | None = None) -> EphemerisContext:
    """Load every frame and body table found in a data directory.

    Parameters:
        directory: Directory holding the tables; defaults to
            CELESTIAL_EPHEMERIS_PATH.

    Returns:
        Context with the frame tables found and one body table per other
        '*.ephem' file, keyed by file stem. Missing frame tables are logged
        and skipped.

    Raises:
        ValueError: If the directory does not exist or a table is malformed.
    """
    base = Path(directory if directory is not None else get_ephemeris_path())
    if not base.is_dir():
        raise ValueError(f'Ephemeris directory does not exist: {base}')
    frames: dict[FrameType, EphemerisSeries] = {}
    for frame_type, filename in FRAME_FILES.items():
        path = base / filename
        if not path.exists():
            logger.warning('Rotation table not found, skipping: %s', path)
            continue
        frames[frame_type] = read_series(path, frame_type.value)
    frame_names = set(FRAME_FILES.values())
    bodies: dict[str, EphemerisSeries] = {}
    for path in sorted(base.glob(f'*{TABLE_SUFFIX}')):
        if path.name in frame_names:
            continue
        bodies[path.stem.lower()] = read_series(path)
    logger.debug('Loaded %d frame tables and %d body tables from %s', len(frames), len(bodies), base)
    return EphemerisContext(frames, bodies)


def save_context(context: EphemerisContext, directory: str | Path) -> list[Path]:
    """Write every table of a context to a directory; returns the paths written."""
    base = Path(directory)
    base.mkdir(parents=True, exist_ok=True)
    written = []
    for frame_type, series in context.frames.items():
        path = base / FRAME_FILES[frame_type]
        write_series(series, path)
        written.append(path)
    for name, series in context.bodies.items():
        path = base / f'{name}{TABLE_SUFFIX}'
        write_series(series, path)
        written.append(path)
    return written
