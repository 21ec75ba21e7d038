"""
Speed ↔ pace conversions and pace formatting utilities.

Speeds arrive from the activity parser in km/h. Charts display pace in
minutes per kilometer, formatted as "M:SS".
"""
from typing import Optional

_KMH_PER_MS = 3.6


def speed_kmh_from_ms(speed_ms: float) -> float:
    """Convert meters per second to kilometers per hour."""
    return speed_ms * _KMH_PER_MS


def pace_from_speed_kmh(speed_kmh: float) -> Optional[float]:
    """
    Convert speed in km/h to pace in minutes per kilometer.

    Args:
        speed_kmh: speed in kilometers per hour

    Returns:
        Pace in min/km, or None if speed is zero or negative.
    """
    if speed_kmh <= 0:
        return None
    return 60.0 / speed_kmh


def format_minutes(minutes: float) -> str:
    """
    Format a fractional minute count as "M:SS".

    Rounds to the nearest whole second first, so 4.999 → "5:00" rather than
    "4:60".
    """
    total_seconds = int(round(minutes * 60))
    sign = "-" if total_seconds < 0 else ""
    total_seconds = abs(total_seconds)
    return f"{sign}{total_seconds // 60}:{total_seconds % 60:02d}"


def format_pace(pace_min_per_km: float, unit: str = "min/km") -> str:
    """
    Format a pace (min/km) as a human-readable string.

    Returns:
        Formatted string like "5:17 min/km"
    """
    return f"{format_minutes(pace_min_per_km)} {unit}"
