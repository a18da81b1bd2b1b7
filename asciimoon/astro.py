import math
from datetime import datetime, timezone
from typing import Optional

from pymeeus.Angle import Angle

from asciimoon.types import Language, MoonStatus, PhaseModel, PhaseName

# Mean new moon to new moon period in days (used for "age" and the simple model)
SYNODIC_MONTH = 29.53058867

# 2000-01-06 18:14:00 UTC, a well known new moon
KNOWN_NEW_MOON_SEC = 947182440

SECONDS_PER_DAY = 86400.0

# J2000.0 epoch, 2000-01-01 12:00 UTC (TT offset ignored)
J2000_UTC = datetime(2000, 1, 1, 12, tzinfo=timezone.utc)

# (coefficient in degrees, multipliers of (Mm, D, F, g)) for the Moon's longitude
MOON_LONGITUDE_TERMS = (
    (6.289, (1, 0, 0, 0)),
    (1.274, (-1, 2, 0, 0)),
    (0.658, (0, 2, 0, 0)),
    (0.214, (2, 0, 0, 0)),
    (-0.186, (0, 0, 0, 1)),
    (-0.059, (-2, 2, 0, 0)),
    (-0.057, (-1, 2, 0, -1)),
    (0.053, (1, 2, 0, 0)),
    (0.046, (0, 2, 0, -1)),
    (0.041, (1, 0, 0, -1)),
    (-0.035, (0, 1, 0, 0)),
    (-0.031, (1, 0, 0, 1)),
    (-0.015, (0, -2, 2, 0)),
    (0.011, (-4, 2, 0, 0)),
)

def normalize_degrees(deg: float) -> float:
    return float(Angle(deg).to_positive())

def to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

def days_since_j2000(dt_utc: datetime) -> float:
    # Proleptic Gregorian throughout, like datetime itself
    return (to_utc(dt_utc) - J2000_UTC).total_seconds() / SECONDS_PER_DAY

def sun_longitude(d: float) -> tuple:
    """
    Apparent ecliptic longitude of the Sun (low precision).

    Returns
    -------
    tuple
        (longitude, mean anomaly g), both in degrees
    """
    l0 = normalize_degrees(280.460 + 0.9856474 * d)
    g = normalize_degrees(357.528 + 0.9856003 * d)
    g_rad = math.radians(g)
    return normalize_degrees(l0 + 1.915 * math.sin(g_rad) + 0.020 * math.sin(2 * g_rad)), g

def moon_longitude(d: float, g: float) -> float:
    """
    Ecliptic longitude of the Moon from its mean longitude plus the
    major periodic terms.

    Parameters
    ----------
    d : float
        Days since J2000.0
    g : float
        Sun mean anomaly in degrees
    """
    l = normalize_degrees(218.316 + 13.176396 * d)
    mm = normalize_degrees(134.963 + 13.064993 * d)
    elong = normalize_degrees(297.850 + 12.190749 * d)
    f = normalize_degrees(93.272 + 13.229350 * d)

    lon = l
    for coeff, (k_mm, k_d, k_f, k_g) in MOON_LONGITUDE_TERMS:
        arg = k_mm * mm + k_d * elong + k_f * f + k_g * g
        lon += coeff * math.sin(math.radians(arg))
    return normalize_degrees(lon)

def meeus_elongation(dt_utc: datetime) -> float:
    """Sun-Moon elongation in degrees, 0 = new, 180 = full."""
    d = days_since_j2000(dt_utc)
    lambda_sun, g = sun_longitude(d)
    lambda_moon = moon_longitude(d, g)
    return normalize_degrees(lambda_moon - lambda_sun)

def simple_phase_fraction(dt_utc: datetime) -> float:
    elapsed_days = (to_utc(dt_utc).timestamp() - KNOWN_NEW_MOON_SEC) / SECONDS_PER_DAY
    return (elapsed_days % SYNODIC_MONTH) / SYNODIC_MONTH

def phase_name_for(phase_fraction: float) -> PhaseName:
    # Round half away from zero, Python's round() would go to even
    segment = int(math.floor(phase_fraction * 8.0 + 0.5)) % 8
    return PhaseName(segment)

def illumination_for(phase_fraction: float) -> float:
    return 50.0 * (1.0 - math.cos(phase_fraction * 2.0 * math.pi))

def calculate_moon_phase(dt_utc: datetime, model: PhaseModel = PhaseModel.MEEUS) -> MoonStatus:
    """
    Calculate the Moon phase for a given time.

    Parameters
    ----------
    dt_utc : datetime
        Time of observation. Naive values are taken as UTC.
    model : PhaseModel
        MEEUS computes the Sun-Moon elongation from ecliptic longitudes,
        SIMPLE assumes a constant synodic month since a reference new moon.

    Returns
    -------
    MoonStatus
        Containing:
        - phase: discretized phase name
        - phase_fraction: 0 = new, 0.5 = full, wraps at 1
        - age_days: phase_fraction expressed in mean synodic days
        - illumination: illuminated percentage of the disk
    """
    if model == PhaseModel.SIMPLE:
        phase_fraction = simple_phase_fraction(dt_utc)
    else:
        phase_fraction = meeus_elongation(dt_utc) / 360.0
    phase_fraction %= 1.0

    return MoonStatus(
        phase=phase_name_for(phase_fraction),
        phase_fraction=phase_fraction,
        age_days=phase_fraction * SYNODIC_MONTH,
        illumination=illumination_for(phase_fraction)
    )

def format_moon_info(status: MoonStatus, language: Optional[Language] = None, dt_utc: Optional[datetime] = None) -> str:
    """Details block printed next to the Moon."""

    lines = []
    if dt_utc is not None:
        lines.append(f"Date: {to_utc(dt_utc):%Y-%m-%d}")
    lines.append(f"Phase: {status.phase.label}")
    lines.append(f"Age: {status.age_days:.1f} days")
    lines.append(f"Illumination: {status.illumination:.1f}%")
    if language is not None:
        lines.append(f"Language: {language.display_name}")
    return "\n".join(lines)
