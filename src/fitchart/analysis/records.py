"""
Record source resolution.

A parsed workout can carry its per-second samples in several places depending
on the device and parser mode:

  workout["activity"]["records"]            nested activity object
  workout["records"]                        flat record list
  workout["sessions"][i]["records"]         per-session records, or
  workout["sessions"][i]["laps"][*]["records"]  concatenated per-lap records

Exactly one of these is treated as canonical: the one with the most records.
Ties go to whichever source is enumerated first (order above).
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

logger = logging.getLogger(__name__)

RawRecord = Mapping[str, Any]
Workout = Mapping[str, Any]


@dataclass
class RecordSource:
    name: str                 # "activity", "direct", "session_0", ...
    records: List[RawRecord]


def _as_list(value: Any) -> Optional[List[RawRecord]]:
    return value if isinstance(value, list) else None


def _workout_sessions(workout: Workout) -> List[Mapping[str, Any]]:
    sessions = _as_list(workout.get("sessions"))
    if sessions is None:
        activity = workout.get("activity")
        if isinstance(activity, Mapping):
            sessions = _as_list(activity.get("sessions"))
    return [s for s in sessions or [] if isinstance(s, Mapping)]


def _session_records(session: Mapping[str, Any]) -> Optional[List[RawRecord]]:
    """Session's own records, else its laps' records concatenated."""
    records = _as_list(session.get("records"))
    if records is not None:
        return records

    laps = _as_list(session.get("laps"))
    if not laps:
        return None
    combined: List[RawRecord] = []
    for lap in laps:
        if isinstance(lap, Mapping):
            combined.extend(_as_list(lap.get("records")) or [])
    return combined


def enumerate_record_sources(workout: Workout) -> List[RecordSource]:
    """List every record container present on the workout, in priority order."""
    sources: List[RecordSource] = []

    activity = workout.get("activity")
    if isinstance(activity, Mapping):
        records = _as_list(activity.get("records"))
        if records is not None:
            sources.append(RecordSource("activity", records))

    records = _as_list(workout.get("records"))
    if records is not None:
        sources.append(RecordSource("direct", records))

    for i, session in enumerate(_workout_sessions(workout)):
        records = _session_records(session)
        if records is not None:
            sources.append(RecordSource(f"session_{i}", records))

    return sources


def resolve_records(workout: Workout) -> List[RawRecord]:
    """
    Return the canonical record list for a workout.

    Returns an empty list (and logs a warning) when no source has records;
    downstream charts then render their "no data" state.
    """
    sources = enumerate_record_sources(workout)
    best: Optional[RecordSource] = None
    for source in sources:
        # strict > keeps the first-enumerated source on ties
        if best is None or len(source.records) > len(best.records):
            best = source

    logger.debug(
        "Record sources for %s: %s",
        workout.get("fileName"),
        {s.name: len(s.records) for s in sources},
    )

    if best is None or not best.records:
        logger.warning("No records found in workout %s", workout.get("fileName"))
        return []

    logger.debug("Selected record source %s (%d records)", best.name, len(best.records))
    return best.records
