"""Tests for workout → prepared channel series."""
import logging

import pytest

import fitchart.analysis.pipeline as pipeline
from fitchart.analysis.channels import CHANNELS
from fitchart.analysis.pipeline import prepare_channel, prepare_workout


def make_records(field, values, **extra):
    return [{"timestamp": 1739862000 + i, field: v, **extra} for i, v in enumerate(values)]


# ─── prepare_channel ──────────────────────────────────────────────────────────

class TestPrepareChannel:
    def test_no_data_returns_none(self):
        records = make_records("power", [200, 210])
        assert prepare_channel(records, CHANNELS["heart_rate"]) is None

    def test_spike_removed_when_filtering(self, make_hr_workout):
        records = make_hr_workout()["records"]
        prepared = prepare_channel(records, CHANNELS["heart_rate"], filter_outliers=True)
        assert prepared.original_count == 100
        assert prepared.removed_count == 1
        assert len(prepared.points) == 99
        assert prepared.outlier_count == 1

    def test_spike_marked_when_not_filtering(self, make_hr_workout):
        records = make_hr_workout()["records"]
        prepared = prepare_channel(records, CHANNELS["heart_rate"], filter_outliers=False)
        assert prepared.removed_count == 0
        assert len(prepared.points) == 100
        assert prepared.points[50].is_outlier
        assert prepared.outlier_count == 1

    def test_clean_series_keeps_everything(self, make_hr_workout):
        records = make_hr_workout(spike_at=None)["records"]
        prepared = prepare_channel(records, CHANNELS["heart_rate"])
        assert prepared.removed_count == 0
        assert len(prepared.points) == 100

    def test_smoothing_applied(self):
        records = make_records("heart_rate", [100, 200, 100, 200, 100, 200, 100])
        prepared = prepare_channel(records, CHANNELS["heart_rate"], filter_outliers=False)
        # centre sample averages 200, 100, 200, 100, 200
        assert prepared.points[3].value == pytest.approx(160)

    def test_cadence_pins_axis_floor(self):
        values = [85, 86, 84, 85, 86, 85, 84, 85, 10]
        prepared = prepare_channel(make_records("cadence", values), CHANNELS["cadence"],
                                   window=1)
        assert prepared.axis_range is not None
        assert prepared.axis_range.max == 172
        # the dropout was raised to the floor, not discarded
        assert prepared.original_count == len(values)
        assert min(p.value for p in prepared.points) >= prepared.axis_range.min - 1e-9

    def test_pace_keeps_original_speed(self):
        prepared = prepare_channel(make_records("speed", [12.0] * 6), CHANNELS["speed"])
        assert all(p.value == pytest.approx(5.0) for p in prepared.points)
        assert all(p.original_value == 12.0 for p in prepared.points)

    def test_enhanced_respiration_charted(self):
        records = make_records("enhanced_respiration_rate", [30.5, 31.0, 30.8, 31.2, 30.9, 31.1])
        prepared = prepare_channel(records, CHANNELS["respiration_rate"])
        assert prepared is not None
        assert prepared.original_count == 6

    def test_avg_step_length_charted(self, settings):
        workout = {"records": make_records("avg_step_length", [1180, 1190, 1185, 1200, 1195])}
        charts = prepare_workout(workout, ["step_length"], settings=settings)
        assert len(charts.series["step_length"].points) == 5


# ─── prepare_workout ──────────────────────────────────────────────────────────

class TestPrepareWorkout:
    def test_only_channels_with_data_present(self, settings):
        workout = {"records": [
            {"timestamp": 1739862000 + i, "heart_rate": 150 + i, "power": 200}
            for i in range(10)
        ]}
        charts = prepare_workout(workout, settings=settings)
        assert set(charts.series) == {"heart_rate", "power"}
        assert charts.record_count == 10

    def test_file_name_carried(self, settings, make_hr_workout):
        charts = prepare_workout(make_hr_workout(), ["heart_rate"], settings=settings)
        assert charts.file_name == "hr_test.fit"

    def test_filter_defaults_to_settings(self, settings, make_hr_workout):
        settings.filter_outliers = False
        charts = prepare_workout(make_hr_workout(), ["heart_rate"], settings=settings)
        assert charts.series["heart_rate"].removed_count == 0

    def test_explicit_filter_flag_wins(self, settings, make_hr_workout):
        settings.filter_outliers = False
        charts = prepare_workout(make_hr_workout(), ["heart_rate"], settings=settings,
                                 filter_outliers=True)
        assert charts.series["heart_rate"].removed_count == 1

    def test_empty_workout(self, settings):
        charts = prepare_workout({}, settings=settings)
        assert charts.series == {}
        assert charts.record_count == 0

    def test_unknown_channel_skipped(self, settings, caplog, make_hr_workout):
        with caplog.at_level(logging.WARNING, logger="fitchart.analysis.pipeline"):
            charts = prepare_workout(make_hr_workout(), ["warp_speed", "heart_rate"],
                                     settings=settings)
        assert list(charts.series) == ["heart_rate"]
        assert "warp_speed" in caplog.text

    def test_failing_channel_does_not_stop_others(self, settings, monkeypatch, caplog):
        real = pipeline.prepare_channel

        def flaky(records, config, **kwargs):
            if config.key == "power":
                raise RuntimeError("boom")
            return real(records, config, **kwargs)

        monkeypatch.setattr(pipeline, "prepare_channel", flaky)
        workout = {"records": make_records("heart_rate", [150] * 10, power=250)}
        with caplog.at_level(logging.ERROR, logger="fitchart.analysis.pipeline"):
            charts = prepare_workout(workout, ["power", "heart_rate"], settings=settings)
        assert list(charts.series) == ["heart_rate"]
        assert "power" in caplog.text
