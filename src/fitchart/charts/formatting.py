"""Text formatting for chart titles, axis ticks and tooltips."""
from datetime import datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from fitchart.analysis.channels import ChannelConfig
from fitchart.analysis.pace import format_minutes, format_pace
from fitchart.analysis.timeseries import ChannelPoint


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """ZoneInfo for an IANA name; None means the host's local zone."""
    return ZoneInfo(name) if name else None


def format_time_of_day(moment: datetime, tz: Optional[tzinfo] = None,
                       with_seconds: bool = False) -> str:
    local = moment.astimezone(tz)
    return local.strftime("%H:%M:%S" if with_seconds else "%H:%M")


def format_tick_value(value: float, config: ChannelConfig) -> str:
    """Y tick label: M:SS on inverted (pace) axes, a rounded number otherwise."""
    if config.invert_y:
        return format_minutes(value)
    return str(int(round(value)))


def _with_unit(number: str, unit: str) -> str:
    return f"{number} {unit}" if unit else number


def format_value(point: ChannelPoint, config: ChannelConfig) -> str:
    """Channel-aware value text used in tooltips."""
    v = point.value
    if config.value_format == "bpm":
        return f"{int(round(v))} bpm"
    if config.value_format == "pace":
        text = format_pace(v)
        if point.original_value is not None:
            text += f" ({point.original_value:.2f} km/h)"
        return text
    if config.value_format == "integer":
        return _with_unit(str(int(round(v))), config.unit)
    return _with_unit(f"{v:.1f}", config.unit)


def chart_title(config: ChannelConfig, removed_count: int = 0,
                filter_enabled: bool = False) -> str:
    title = config.label
    if filter_enabled and removed_count > 0:
        title += f" (filtered: {removed_count})"
    return title


def no_data_message(config: ChannelConfig) -> str:
    return f"No {config.title.lower()} data"


def points_caption(point_count: int, removed_count: int, filter_enabled: bool) -> str:
    """Caption shown under a chart: "Data points: 98 (filtered: 2)"."""
    caption = f"Data points: {point_count}"
    if filter_enabled:
        caption += f" (filtered: {removed_count})"
    return caption
