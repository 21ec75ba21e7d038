"""Shared test fixtures."""
from typing import Any, Dict, List, Optional

import pytest

from fitchart.config import Settings

# 2025-02-18 07:00:00 UTC
START_EPOCH = 1739862000


class RecordingCanvas:
    """Canvas that records every draw call as (method, args) for assertions."""

    def __init__(self, width: float = 300, height: float = 200):
        self.width = float(width)
        self.height = float(height)
        self.calls: List[tuple] = []
        self.clear_count = 0

    def clear(self) -> None:
        self.calls = []
        self.clear_count += 1

    def line(self, x0, y0, x1, y1, color, width=1.0) -> None:
        self.calls.append(("line", (x0, y0, x1, y1), {"color": color, "width": width}))

    def bezier_path(self, start, segments, color, width=2.0) -> None:
        self.calls.append(("bezier_path", (start, list(segments)), {"color": color, "width": width}))

    def circle(self, x, y, radius, fill, stroke, stroke_width=2.0) -> None:
        self.calls.append(("circle", (x, y, radius), {"fill": fill, "stroke": stroke}))

    def text(self, x, y, text, color, size=12.0, align="left",
             baseline="alphabetic", bold=False) -> None:
        self.calls.append(("text", (x, y, text), {"color": color, "align": align, "bold": bold}))

    def of(self, method: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == method]

    def texts(self) -> List[str]:
        return [c[1][2] for c in self.of("text")]


def _records(field: str, values: List[Any], start: int = START_EPOCH,
             step: int = 1, **extra: Any) -> List[Dict[str, Any]]:
    """One record per value at `step`-second intervals."""
    return [
        {"timestamp": start + i * step, field: v, **extra}
        for i, v in enumerate(values)
    ]


def _hr_workout(n: int = 100, spike_at: Optional[int] = 50,
                spike_value: int = 250) -> Dict[str, Any]:
    """
    HR oscillating 140–180 bpm at 1 s intervals (triangle wave, period 8 s),
    with one injected spike.
    """
    pattern = [140, 150, 160, 170, 180, 170, 160, 150]
    values = [pattern[i % len(pattern)] for i in range(n)]
    if spike_at is not None:
        values[spike_at] = spike_value
    return {"fileName": "hr_test.fit", "records": _records("heart_rate", values)}


@pytest.fixture(name="canvas")
def canvas_fixture() -> RecordingCanvas:
    return RecordingCanvas()


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    """Deterministic settings: UTC labels, defaults everywhere else."""
    return Settings(display_timezone="UTC", _env_file=None)


@pytest.fixture(name="make_hr_workout")
def make_hr_workout_fixture():
    """Factory for the synthetic HR workout: `make_hr_workout(spike_at=None)`."""
    return _hr_workout
