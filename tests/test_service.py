"""
Frame Query Service Tests
=========================

End-to-end queries over recordings written to tmp_path.
"""

import os

import numpy as np
import pytest

from pressure_engine.analysis.metrics_calculator import MetricsCalculator
from pressure_engine.cache.file_cache import FileCache
from pressure_engine.config import Settings
from pressure_engine.errors import EmptyFrameSequenceError, FileNotReadableError
from pressure_engine.models.metrics import RiskLevel
from pressure_engine.service import FrameQueryService, clamp_index

from conftest import make_frame


def bump_mtime(path, seconds=10):
    stat = os.stat(path)
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + seconds * 1_000_000_000))


class TestClampIndex:

    @pytest.mark.parametrize(
        "index, count, expected",
        [(-5, 4, 0), (0, 4, 0), (3, 4, 3), (104, 4, 3), (7, 1, 0)],
    )
    def test_clamp(self, index, count, expected):
        assert clamp_index(index, count) == expected


class TestSingleFrameQueries:
    """total_frames, load_frame, frame_metrics."""

    def test_round_trip_two_frames(self, service, write_recording):
        """64 lines -> 2 frames with hand-computed metrics."""
        first = make_frame(10.0)
        first[0, 0] = 30.0
        first[20, 20] = 99.0
        second = np.zeros((32, 32))
        path = write_recording([first, second])

        assert service.total_frames(path) == 2

        m0 = service.frame_metrics(path, 0)
        assert m0.peak_pressure == 99.0
        assert m0.peak_pressure_index == 30.0
        assert m0.contact_area_percent == pytest.approx(11 / 1024 * 100)
        assert m0.risk_level is RiskLevel.MEDIUM

        m1 = service.frame_metrics(path, 1)
        assert m1.peak_pressure == 0.0
        assert m1.peak_pressure_index == 0.0
        assert m1.contact_area_percent == 0.0
        assert m1.risk_level is RiskLevel.LOW

        np.testing.assert_array_equal(service.load_frame(path, 0), first)

    @pytest.mark.parametrize("index, expected", [(-5, 0), (4 + 100, 3)])
    def test_out_of_range_index_is_clamped(self, service, risk_sequence_path, index, expected):
        expected_matrix = service.load_frame(risk_sequence_path, expected)
        assert service.load_frame(risk_sequence_path, index) is expected_matrix
        assert service.frame_metrics(risk_sequence_path, index) is service.frame_metrics(
            risk_sequence_path, expected
        )

    def test_requery_returns_identical_objects(self, service, risk_sequence_path):
        metrics = service.frame_metrics(risk_sequence_path, 2)
        matrix = service.load_frame(risk_sequence_path, 2)

        assert service.frame_metrics(risk_sequence_path, 2) is metrics
        assert service.load_frame(risk_sequence_path, 2) is matrix
        assert service.cache_metrics()["misses"] == 1

    def test_requery_does_not_reread_content(self, risk_sequence_path, monkeypatch):
        from pressure_engine import service as service_module

        calls = []
        original = service_module.parse_file

        def counting_parse(*args, **kwargs):
            calls.append(args[0])
            return original(*args, **kwargs)

        monkeypatch.setattr(service_module, "parse_file", counting_parse)
        service = FrameQueryService()

        for index in range(4):
            service.frame_metrics(risk_sequence_path, index)
        service.peak_history(risk_sequence_path, 10)
        service.max_risk_up_to_frame(risk_sequence_path, 3)

        assert len(calls) == 1

    def test_modified_file_is_reloaded(self, service, write_recording, low_frame, high_frame):
        path = write_recording([low_frame])
        assert service.frame_metrics(path, 0).risk_level is RiskLevel.LOW

        write_recording([high_frame, low_frame])
        bump_mtime(path)

        assert service.total_frames(path) == 2
        assert service.frame_metrics(path, 0).risk_level is RiskLevel.HIGH

    def test_missing_file(self, service, tmp_path):
        with pytest.raises(FileNotReadableError):
            service.total_frames(tmp_path / "nope.csv")


class TestEmptyRecording:
    """Files shorter than one frame."""

    @pytest.fixture
    def empty_path(self, write_recording):
        return write_recording([], extra_lines=["1,2,3"] * 10)

    def test_zero_frames(self, service, empty_path):
        assert service.total_frames(empty_path) == 0
        assert service.peak_history(empty_path, 60) == []

    def test_single_frame_queries_raise(self, service, empty_path):
        with pytest.raises(EmptyFrameSequenceError):
            service.load_frame(empty_path, 0)
        with pytest.raises(EmptyFrameSequenceError):
            service.frame_metrics(empty_path, 0)
        with pytest.raises(EmptyFrameSequenceError):
            service.max_risk_up_to_frame(empty_path, 0)
        with pytest.raises(LookupError):
            service.frame_snapshot(empty_path, 0)


class TestAggregateQueries:
    """peak_history and max_risk_up_to_frame."""

    def test_peak_history(self, service, risk_sequence_path):
        assert service.peak_history(risk_sequence_path, 10) == [0.0, 25.0, 45.0, 0.0]
        assert service.peak_history(risk_sequence_path, 2) == [0.0, 25.0]
        assert service.peak_history(risk_sequence_path, 0) == []
        assert service.peak_history(risk_sequence_path, -3) == []

    def test_max_risk_stops_at_high(self, service, risk_sequence_path):
        peak = service.max_risk_up_to_frame(risk_sequence_path, 3)

        assert peak.risk_level is RiskLevel.HIGH
        assert peak.frame_index == 2
        assert peak.metrics.peak_pressure_index == 45.0
        assert peak.as_tuple() == (RiskLevel.HIGH, 2, peak.metrics)

    @pytest.mark.parametrize(
        "index, level, frame",
        [(0, RiskLevel.LOW, 0), (1, RiskLevel.MEDIUM, 1), (-9, RiskLevel.LOW, 0), (500, RiskLevel.HIGH, 2)],
    )
    def test_max_risk_respects_index(self, service, risk_sequence_path, index, level, frame):
        peak = service.max_risk_up_to_frame(risk_sequence_path, index)
        assert peak.risk_level is level
        assert peak.frame_index == frame

    def test_ties_keep_earliest_frame(self, service, write_recording, medium_frame, low_frame):
        path = write_recording([low_frame, medium_frame, medium_frame, low_frame])
        peak = service.max_risk_up_to_frame(path, 3)
        assert peak.risk_level is RiskLevel.MEDIUM
        assert peak.frame_index == 1


class TestViewerQueries:
    """frame_window and frame_snapshot."""

    @pytest.fixture
    def per_minute_service(self):
        return FrameQueryService(frames_per_minute=2)

    def test_window_truncated(self, per_minute_service, risk_sequence_path):
        window = per_minute_service.frame_window(risk_sequence_path, 5)
        assert window.total_frames == 4
        assert window.requested_frames == 10
        assert window.effective_frames == 4
        assert window.is_truncated is True
        assert window.available_minutes == 2.0

    def test_window_within_recording(self, per_minute_service, risk_sequence_path):
        window = per_minute_service.frame_window(risk_sequence_path, 1)
        assert window.effective_frames == 2
        assert window.is_truncated is False

    def test_default_rate_is_one_frame_per_second(self, service, risk_sequence_path):
        window = service.frame_window(risk_sequence_path, 60)
        assert window.requested_frames == 3600

    def test_snapshot_payload(self, service, risk_sequence_path):
        snapshot = service.frame_snapshot(risk_sequence_path, 2)
        payload = snapshot.model_dump(mode="json")

        assert payload["frame_index"] == 2
        assert payload["risk_level"] == "High"
        assert payload["peak_pressure_index"] == 45.0
        assert len(payload["matrix"]) == 1024
        assert payload["matrix"][:5] == [45.0] * 5
        assert payload["matrix"][32:37] == [45.0] * 5
        assert payload["matrix"][5] == 0.0

    def test_snapshot_clamped_to_window(self, per_minute_service, risk_sequence_path):
        snapshot = per_minute_service.frame_snapshot(risk_sequence_path, 3, range_minutes=1)
        assert snapshot.frame_index == 1
        assert snapshot.risk_level is RiskLevel.MEDIUM

    def test_snapshot_zero_range(self, service, risk_sequence_path):
        with pytest.raises(EmptyFrameSequenceError):
            service.frame_snapshot(risk_sequence_path, 0, range_minutes=0)


class TestServiceConstruction:
    """Settings wiring and cache control."""

    def test_from_settings(self, write_recording):
        settings = Settings.model_validate(
            {
                "metrics": {"lower_threshold": 50.0, "min_cluster_size": 2},
                "cache": {"max_entries": 1},
                "viewer": {"frames_per_minute": 30},
            }
        )
        service = FrameQueryService.from_settings(settings)

        assert service.calculator.lower_threshold == 50.0
        assert service.calculator.min_cluster_size == 2
        assert service.cache.max_entries == 1
        assert service.frames_per_minute == 30

        path = write_recording([make_frame(45.0)])
        assert service.frame_metrics(path, 0).contact_area_percent == 0.0

    def test_invalidate_and_clear(self, service, risk_sequence_path):
        service.total_frames(risk_sequence_path)
        assert service.invalidate(risk_sequence_path) is True
        service.total_frames(risk_sequence_path)
        assert service.clear_cache() == 1
        assert service.cache_metrics()["size"] == 0
        assert service.cache_metrics()["misses"] == 2

    def test_invalid_frame_rate(self):
        with pytest.raises(ValueError):
            FrameQueryService(frames_per_minute=0)

    def test_injected_empty_cache_is_kept(self, risk_sequence_path):
        """An empty cache has len() == 0 but must still be used."""
        calls = []

        def counting_loader(path):
            calls.append(path)
            return ()

        injected = FileCache(loader=counting_loader)
        assert len(injected) == 0

        service = FrameQueryService(cache=injected)

        assert service.cache is injected
        assert service.total_frames(risk_sequence_path) == 0
        assert calls == [str(risk_sequence_path)]

    def test_injected_calculator_is_kept(self):
        calculator = MetricsCalculator(lower_threshold=7.0)
        service = FrameQueryService(calculator=calculator)
        assert service.calculator is calculator

    @pytest.mark.parametrize("range_minutes", [None, 1])
    def test_snapshot_looks_up_cache_once(self, risk_sequence_path, range_minutes):
        service = FrameQueryService(frames_per_minute=2)

        service.frame_snapshot(risk_sequence_path, 1, range_minutes=range_minutes)

        metrics = service.cache_metrics()
        assert metrics["misses"] == 1
        assert metrics["hits"] == 0
