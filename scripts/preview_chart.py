"""
Local chart preview.

Renders every channel of a workout to PNGs in an output directory. With no
arguments a synthetic 10-minute run is used (no FIT file needed).

Usage:
    python scripts/preview_chart.py                       # synthetic run
    python scripts/preview_chart.py path/to/activity.fit  # real file
    python scripts/preview_chart.py activity.fit --out /tmp/charts --no-filter
"""
import argparse
import logging
import math
import sys
from pathlib import Path

# Allow running directly from repo root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fitchart.charts.renderer import make_workout_charts
from fitchart.parsers.fit_loader import load_fit_workout

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)

START_EPOCH = 1739862000  # 2025-02-18 07:00 UTC


def synthetic_workout(seconds: int = 600) -> dict:
    """Steady run with a slow HR climb, a few HR spikes and GPS speed dropouts."""
    records = []
    for t in range(seconds):
        hr = 140 + 20 * math.sin(t / 40) + t / 60
        if t in (120, 360):
            hr = 230  # strap glitch
        speed_kmh = 11.5 + 0.8 * math.sin(t / 25)
        if t % 97 == 0:
            speed_kmh = 0.0  # GPS dropout
        records.append({
            "timestamp": START_EPOCH + t,
            "heart_rate": round(hr),
            "speed": speed_kmh,
            "cadence": 84 + (t % 5) - (40 if t % 150 == 0 else 0),
            "altitude": 50 + 8 * math.sin(t / 90),
            "power": 250 + 30 * math.sin(t / 15),
        })
    return {"fileName": "synthetic_run.fit", "records": records}


def main() -> None:
    parser = argparse.ArgumentParser(description="Render workout channel charts to PNG")
    parser.add_argument("fit_file", nargs="?", type=Path)
    parser.add_argument("--out", type=Path, default=Path("/tmp/fitchart_preview"))
    parser.add_argument("--no-filter", action="store_true", help="keep outliers")
    args = parser.parse_args()

    workout = load_fit_workout(args.fit_file) if args.fit_file else synthetic_workout()
    charts = make_workout_charts(workout, filter_outliers=not args.no_filter)

    args.out.mkdir(parents=True, exist_ok=True)
    for key, (png, title) in charts.items():
        path = args.out / f"{key}.png"
        path.write_bytes(png)
        logger.info("%-28s → %s", title, path)

    if not charts:
        logger.warning("No chartable channels in %s", workout.get("fileName"))


if __name__ == "__main__":
    main()
