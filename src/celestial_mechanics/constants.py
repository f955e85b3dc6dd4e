"""Fixed constants: standard epochs, time and angle units, Earth figure, altitudes.

Lengths are in metres and angles in radians unless a name says otherwise.
"""

import math

# Standard epochs as Julian Days
JD_B1900 = 2415020.3135
JD_B1950 = 2433282.42344
JD_J2000 = 2451545.0
JD_J2050 = 2469807.5
JD_UNIX_EPOCH = 2440587.5  # 1970-01-01 0h UT
JD_J2000_MIDNIGHT = 2451544.5  # 2000-01-01 0h UT, day 0 of rms-julian

# Time: seconds per unit
SECONDS_PER_MINUTE = 60.0
SECONDS_PER_HOUR = 3600.0
SECONDS_PER_DAY = 86400.0
DAYS_PER_JULIAN_CENTURY = 36525.0
DAYS_PER_JULIAN_YEAR = 365.25
DAYS_PER_BESSELIAN_YEAR = 365.2421988

# Sidereal day in solar days and its reciprocal rate
SIDEREAL_DAY = 0.9972695671
HALF_SIDEREAL_DAY = 0.4986347859
SIDEREAL_RATE = 1.00273790935

# Angle
TWOPI = 2.0 * math.pi
HALFPI = 0.5 * math.pi
DEGREE = math.pi / 180.0
ARCMIN = DEGREE / 60.0
ARCSEC = DEGREE / 3600.0
DEGREES_PER_HOUR_RA = 15.0

# Distances
AU = 149597870700.0
PARSEC = 30856775814913673.0
SPEED_OF_LIGHT = 299792458.0  # m/s
LIGHT_TIME_PER_AU_DAYS = AU / SPEED_OF_LIGHT / SECONDS_PER_DAY

# Earth figure (GRS 80, as used for observatory offsets)
EARTH_EQUATORIAL_RADIUS = 6378137.0
EARTH_FLATTENING = 1.0 / 298.257222

# Rectangular positions closer than this to the origin have no usable distance.
# Earth's own position is stored as a tiny non-zero vector to keep the
# trigonometry well defined.
MIN_KNOWN_DISTANCE = 1.1
EARTH_ORIGIN_PROXY = (0.0, 0.0, 1e-11)

# Standard altitudes below the horizon for rising/setting
MEAN_ATMOSPHERIC_REFRACTION = 34.0 * ARCMIN
SUN_STANDARD_ALTITUDE = 50.0 * ARCMIN
MOON_PARALLAX_FACTOR = 0.7275

# Twilight thresholds (depth of the Sun's centre below the horizon)
CIVIL_TWILIGHT = 6.0 * DEGREE
NAUTICAL_TWILIGHT = 12.0 * DEGREE
ASTRONOMICAL_TWILIGHT = 18.0 * DEGREE

# Event solver
EVENT_TOLERANCE_SECONDS = 2.0
CONVERGENCE_SECONDS = 1.0
DEFAULT_MAX_ITERATIONS = 20

# Saturn ring system (Meeus, Astronomical Algorithms, ch. 45)
SATURN_RING_MAJOR_AXIS_AU = 375.35 * ARCSEC  # outer edge of ring A seen from 1 AU
