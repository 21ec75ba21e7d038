"""
FIT file loader: decodes a .fit file with fitparse into the workout shape the
charting pipeline consumes.

Output shape:
  {
    "fileName": "morning_run.fit",
    "records":  [ {<every record field>, "timestamp": datetime}, ... ],
    "sessions": [ {<session summary fields>, "laps": [ {<lap fields>}, ... ]} ],
  }

Conversions applied to record fields:
  speed / enhanced_speed          m/s → km/h (the pace transform expects km/h)
  position_lat / position_long    semicircles → degrees
Everything else is passed through as decoded, including unknown fields.
"""
import logging
from pathlib import Path
from typing import Any, Dict

import fitparse

from fitchart.analysis.pace import speed_kmh_from_ms

logger = logging.getLogger(__name__)

# Garmin stores lat/lon as 32-bit signed integers in "semicircles"
# Degrees = semicircles * (180 / 2^31)
_SEMICIRCLE_TO_DEGREES = 180.0 / (2**31)

_SPEED_FIELDS = ("speed", "enhanced_speed", "avg_speed", "max_speed",
                 "enhanced_avg_speed", "enhanced_max_speed")
_POSITION_FIELDS = ("position_lat", "position_long", "start_position_lat",
                    "start_position_long", "end_position_lat", "end_position_long")


class FitParseError(Exception):
    """Raised when a FIT file cannot be parsed."""


def _convert_values(values: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(values)
    for name in _SPEED_FIELDS:
        raw = out.get(name)
        if isinstance(raw, (int, float)):
            out[name] = speed_kmh_from_ms(float(raw))
    for name in _POSITION_FIELDS:
        raw = out.get(name)
        if isinstance(raw, (int, float)):
            out[name] = raw * _SEMICIRCLE_TO_DEGREES
    return out


def _within(message: Dict[str, Any], start: Any, end: Any) -> bool:
    ts = message.get("timestamp")
    return ts is not None and start is not None and end is not None and start <= ts <= end


def load_fit_workout(path: Path) -> Dict[str, Any]:
    """
    Decode a .fit file into a workout dict.

    Laps are attached to the session whose [start_time, timestamp] window
    contains the lap's end timestamp; with a single session every lap goes to
    it.

    Raises:
        FitParseError: if the file doesn't exist or cannot be parsed as FIT
    """
    path = Path(path)
    if not path.exists():
        raise FitParseError(f"FIT file not found: {path}")

    try:
        fit = fitparse.FitFile(str(path))
        records = [_convert_values(m.get_values()) for m in fit.get_messages("record")]
        laps = [_convert_values(m.get_values()) for m in fit.get_messages("lap")]
        sessions = [_convert_values(m.get_values()) for m in fit.get_messages("session")]
    except Exception as exc:
        raise FitParseError(f"Failed to parse FIT file {path}: {exc}") from exc

    for session in sessions:
        session["laps"] = []
    for lap in laps:
        owner = next(
            (s for s in sessions if _within(lap, s.get("start_time"), s.get("timestamp"))),
            sessions[0] if len(sessions) == 1 else None,
        )
        if owner is not None:
            owner["laps"].append(lap)

    logger.info(
        "Loaded %s: %d records, %d sessions, %d laps",
        path.name, len(records), len(sessions), len(laps),
    )
    workout: Dict[str, Any] = {"fileName": path.name, "records": records}
    if sessions:
        workout["sessions"] = sessions
    return workout
