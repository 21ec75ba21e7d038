"""
Static table of recognised channels.

Each entry says where to find the channel in a raw record (ordered field-name
candidates), how to convert it for display, and how to draw it. Lookup is a
plain dict access, no per-channel classes.

Value formats (used by tooltips):
  "bpm"      → rounded integer + " bpm"
  "pace"     → "M:SS min/km", plus the original km/h when known
  "integer"  → rounded integer + unit
  "decimal"  → one decimal place + unit
"""
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from fitchart.analysis.pace import pace_from_speed_kmh

Transform = Callable[[float], float]
Validator = Callable[[float], bool]


class UnknownChannelError(KeyError):
    """Raised when a channel key is not in the channel table."""


@dataclass(frozen=True)
class ChannelConfig:
    key: str
    fields: Tuple[str, ...]           # tried in order, first yielding data wins
    title: str
    unit: str
    color: str
    invert_y: bool = False
    transform: Optional[Transform] = None
    validator: Optional[Validator] = None
    keep_original: bool = False       # store the raw reading on each point
    value_format: str = "decimal"
    pin_floor: bool = False           # clamp low values up to mean - 2σ
    sigma_threshold: Optional[float] = None   # overrides settings when set
    smoothing_window: Optional[int] = None    # overrides settings when set

    @property
    def label(self) -> str:
        return f"{self.title} ({self.unit})" if self.unit else self.title


def _positive(value: float) -> bool:
    return value > 0


def _speed_to_pace(speed_kmh: float) -> float:
    pace = pace_from_speed_kmh(speed_kmh)
    return pace if pace is not None else math.nan


def _strides_to_steps(cadence: float) -> float:
    return cadence * 2


def _pace_channel(key: str, fields: Tuple[str, ...], title: str) -> ChannelConfig:
    return ChannelConfig(
        key=key,
        fields=fields,
        title=title,
        unit="min/km",
        color="#ff6b81",
        invert_y=True,
        transform=_speed_to_pace,
        validator=_positive,
        keep_original=True,
        value_format="pace",
    )


def _field_candidates(key: str) -> Tuple[str, ...]:
    """key, enhanced_key, avg_key and key_rate, the spellings devices use."""
    candidates = (key, f"enhanced_{key}", f"avg_{key}")
    if not key.endswith("_rate"):
        candidates += (f"{key}_rate",)
    return candidates


def _plain(key: str, title: str, unit: str, color: str,
           value_format: str = "decimal", fields: Optional[Tuple[str, ...]] = None) -> ChannelConfig:
    return ChannelConfig(
        key=key,
        fields=fields or _field_candidates(key),
        title=title,
        unit=unit,
        color=color,
        value_format=value_format,
    )


_TABLE = [
    _pace_channel("speed", ("speed", "enhanced_speed"), "Pace"),
    _plain("heart_rate", "Heart Rate", "bpm", "#ff4757", "bpm",
           fields=("heart_rate", "enhanced_heart_rate", "avg_heart_rate")),
    _plain("power", "Power", "W", "#3742fa", "integer",
           fields=("power", "enhanced_power", "avg_power")),
    ChannelConfig(
        key="cadence",
        fields=("cadence", "enhanced_cadence", "avg_cadence"),
        title="Cadence",
        unit="spm",
        color="#1e90ff",
        transform=_strides_to_steps,
        value_format="integer",
        pin_floor=True,
    ),
    _plain("altitude", "Altitude", "m", "#2ed573", "integer",
           fields=("altitude", "enhanced_altitude")),
    _plain("vertical_speed", "Vertical Speed", "m/s", "#dfe6e9"),
    _plain("grade", "Grade", "%", "#fd79a8"),
    _plain("temperature", "Temperature", "°C", "#ff7f50"),
    # running dynamics
    _plain("step_length", "Step Length", "mm", "#00d2d3", "integer"),
    _plain("stance_time", "Stance Time", "ms", "#ff9ff3", "integer"),
    _plain("stance_time_balance", "Stance Time Balance", "%", "#54a0ff"),
    _plain("vertical_oscillation", "Vertical Oscillation", "mm", "#5f27cd"),
    _plain("vertical_ratio", "Vertical Ratio", "%", "#00d8d6"),
    _plain("ground_contact_time", "Ground Contact Time", "ms", "#ff9ff3", "integer"),
    _plain("ground_contact_balance", "Ground Contact Balance", "%", "#54a0ff"),
    _pace_channel("enhanced_speed", ("enhanced_speed",), "Enhanced Pace"),
    _plain("enhanced_altitude", "Enhanced Altitude", "m", "#2ed573", "integer"),
    _plain("fractional_cadence", "Fractional Cadence", "rpm", "#1e90ff"),
    _plain("left_right_balance", "Left Right Balance", "%", "#ffa726"),
    _plain("gct_balance", "GCT Balance", "%", "#ab47bc"),
    _plain("running_smoothness", "Running Smoothness", "%", "#26a69a"),
    _plain("respiration_rate", "Respiration Rate", "brpm", "#ef5350"),
    # swimming
    _plain("stroke_type", "Stroke Type", "", "#42a5f5", "integer"),
    _plain("strokes", "Strokes", "strokes", "#66bb6a", "integer"),
    # cycling
    _plain("left_pedal_smoothness", "Left Pedal Smoothness", "%", "#ffca28"),
    _plain("right_pedal_smoothness", "Right Pedal Smoothness", "%", "#ffa726"),
    _plain("left_torque_effectiveness", "Left Torque Effectiveness", "%", "#8d6e63"),
    _plain("right_torque_effectiveness", "Right Torque Effectiveness", "%", "#a1887f"),
]

CHANNELS: Dict[str, ChannelConfig] = {c.key: c for c in _TABLE}


def get_channel(key: str) -> ChannelConfig:
    try:
        return CHANNELS[key]
    except KeyError:
        raise UnknownChannelError(key) from None
