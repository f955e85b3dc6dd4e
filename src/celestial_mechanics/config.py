"""Configuration: ephemeris data directory and leap-seconds kernel from environment."""

import os
from pathlib import Path

# Env var overrides with sensible defaults.
DEFAULT_EPHEMERIS_PATH = '/usr/local/share/celestial-mechanics/'
LOG_LEVEL_ENV = 'CELESTIAL_MECHANICS_LOG'


def get_ephemeris_path() -> str:
    """Return the ephemeris table directory (CELESTIAL_EPHEMERIS_PATH or default).

    Returns:
        Path string.
    """
    return os.environ.get('CELESTIAL_EPHEMERIS_PATH', DEFAULT_EPHEMERIS_PATH)


def get_log_level() -> str | None:
    """Return the log level name requested through CELESTIAL_MECHANICS_LOG, if valid."""
    level = os.environ.get(LOG_LEVEL_ENV, '').strip().upper()
    if level in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        return level
    return None


def get_leapsecs_path() -> str | None:
    """Return path to a NAIF LSK leap seconds file for rms-julian.

    Prefers JULIAN_LEAPSECS, then a .tls kernel in the ephemeris directory.

    Returns:
        Path string, or None to use the kernel bundled with rms-julian.
    """
    path = os.environ.get('JULIAN_LEAPSECS', '').strip()
    if path:
        return path
    base = Path(get_ephemeris_path())
    for name in ('naif0012.tls', 'naif0011.tls', 'leapseconds.tls'):
        p = base / name
        if p.exists():
            return str(p)
    return None
