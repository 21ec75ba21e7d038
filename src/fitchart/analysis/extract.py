"""
Channel extraction: raw records → ChannelSeries.

Field names vary between devices and parser modes ("speed" vs
"enhanced_speed", "altitude" vs "enhanced_altitude"). A channel lists its
candidate field names in order; the first candidate that yields at least one
valid sample is used for the whole series. Candidates are never merged, and
later candidates are not consulted once one succeeds.

A record contributes a sample only if:
  - its timestamp parses (epoch seconds, datetime, or ISO-8601 string)
  - the field holds a finite number (bools excluded)
  - the channel's validator accepts the raw value (e.g. speed > 0)
  - the transformed value is finite
Anything else is skipped silently; one bad record never aborts a channel.
"""
import logging
import math
from datetime import datetime, timezone
from numbers import Real
from typing import Any, List, Mapping, Optional, Sequence

from fitchart.analysis.channels import ChannelConfig, Transform, Validator
from fitchart.analysis.records import RawRecord
from fitchart.analysis.timeseries import ChannelPoint, ChannelSeries

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Normalise a record timestamp to a timezone-aware UTC datetime.

    Numbers are unix epoch seconds. Naive datetimes are taken as UTC (that is
    what FIT decoders produce). Returns None for anything unparseable.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, Real):
        seconds = float(value)
        if not math.isfinite(seconds):
            return None
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        return parse_timestamp(parsed)
    return None


def _numeric(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def _extract_field(
    records: Sequence[RawRecord],
    field: str,
    transform: Optional[Transform],
    validator: Optional[Validator],
    keep_original: bool,
) -> ChannelSeries:
    series: ChannelSeries = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        raw = _numeric(record.get(field))
        if raw is None:
            continue
        if validator is not None and not validator(raw):
            continue
        timestamp = parse_timestamp(record.get("timestamp"))
        if timestamp is None:
            continue
        value = transform(raw) if transform is not None else raw
        if not math.isfinite(value):
            continue
        series.append(ChannelPoint(
            timestamp=timestamp,
            value=value,
            original_value=raw if keep_original else None,
        ))
    return series


def extract_series(
    records: Sequence[RawRecord],
    fields: Sequence[str],
    transform: Optional[Transform] = None,
    validator: Optional[Validator] = None,
    keep_original: bool = False,
) -> ChannelSeries:
    """
    Build a series from the first field candidate that yields data.

    Returns an empty list when no candidate has a single valid sample.
    Record order is preserved (records are assumed chronological).
    """
    for field in fields:
        series = _extract_field(records, field, transform, validator, keep_original)
        if series:
            logger.debug("Field %s yielded %d samples", field, len(series))
            return series
    return []


def extract_channel(records: Sequence[RawRecord], config: ChannelConfig) -> ChannelSeries:
    """Extract one channel using its table entry."""
    return extract_series(
        records,
        config.fields,
        transform=config.transform,
        validator=config.validator,
        keep_original=config.keep_original,
    )


def sample_field_names(records: Sequence[RawRecord], sample_size: int = 10) -> List[str]:
    """Sorted field names seen in the first few records, for diagnostics."""
    names = set()
    for record in records[:sample_size]:
        if isinstance(record, Mapping):
            names.update(record.keys())
    return sorted(names)
