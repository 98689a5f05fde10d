"""
Frame Query Service
===================

Query façade over cached, analysed pressure recordings.

Every query goes through the FileCache, so a recording is parsed and
analysed once per modification time no matter how many viewer
requests hit it. Frame indices are clamped into [0, frame_count - 1];
an out-of-range request is served the nearest valid frame rather than
failing.

Queries:
    total_frames(path)                 - number of complete frames
    load_frame(path, index)            - read-only 32x32 matrix
    frame_metrics(path, index)         - FrameMetrics
    peak_history(path, max_frames)     - PPI per frame, for trend charts
    max_risk_up_to_frame(path, index)  - worst risk in frames 0..index
    frame_window(path, range_minutes)  - frames covered by a time range
    frame_snapshot(path, index, ...)   - flattened frame + metrics payload

Example:
    from pressure_engine import FrameQueryService

    service = FrameQueryService.from_settings()
    if service.total_frames(path):
        peak = service.max_risk_up_to_frame(path, 120)
        print(peak.risk_level, peak.frame_index)
"""

import logging
import os
from typing import List, Optional, Tuple, Union

import numpy as np

from pressure_engine.analysis.metrics_calculator import MetricsCalculator
from pressure_engine.cache.file_cache import FileCache
from pressure_engine.config import Settings
from pressure_engine.errors import EmptyFrameSequenceError
from pressure_engine.models.frame import FRAME_COLS, FRAME_ROWS, CacheEntry, Frame
from pressure_engine.models.metrics import MAX_RISK_RANK, FrameMetrics, RiskPeak
from pressure_engine.models.window import FrameSnapshot, FrameWindow
from pressure_engine.parsing.frame_parser import parse_file


logger = logging.getLogger(__name__)


PathLike = Union[str, os.PathLike]

DEFAULT_FRAMES_PER_MINUTE = 60


def clamp_index(index: int, frame_count: int) -> int:
    """Clamp index into [0, frame_count - 1]. frame_count must be > 0."""
    return max(0, min(index, frame_count - 1))


class FrameQueryService:
    """
    Answers frame and aggregate queries for pressure recordings.

    Safe to share across threads: the only mutable state is the
    FileCache, which guards itself.

    Attributes:
        calculator: Metrics calculator applied to every parsed frame
        cache: Recording cache
        frames_per_minute: Capture rate used for time-window queries
    """

    def __init__(
        self,
        calculator: Optional[MetricsCalculator] = None,
        max_cache_entries: int = 64,
        rows: int = FRAME_ROWS,
        cols: int = FRAME_COLS,
        delimiter: str = ",",
        frames_per_minute: int = DEFAULT_FRAMES_PER_MINUTE,
        cache: Optional[FileCache] = None,
    ) -> None:
        """
        Initialize query service.

        Args:
            calculator: Metrics calculator (defaults: threshold 5.0,
                minimum cluster 10)
            max_cache_entries: LRU bound for the default cache
            rows: Lines per frame
            cols: Fields per line
            delimiter: Field separator
            frames_per_minute: Capture rate for frame_window()
            cache: Pre-built cache. When given, max_cache_entries is
                ignored and the cache's own loader is used.
        """
        if frames_per_minute < 1:
            raise ValueError("frames_per_minute must be >= 1")

        self.calculator = calculator if calculator is not None else MetricsCalculator()
        self.rows = rows
        self.cols = cols
        self.delimiter = delimiter
        self.frames_per_minute = frames_per_minute
        if cache is None:
            cache = FileCache(loader=self.load_frames, max_entries=max_cache_entries)
        self.cache = cache

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "FrameQueryService":
        """Build a service from loaded configuration (global settings by default)."""
        if settings is None:
            from pressure_engine.config import settings

        return cls(
            calculator=MetricsCalculator(
                lower_threshold=settings.metrics.lower_threshold,
                min_cluster_size=settings.metrics.min_cluster_size,
            ),
            max_cache_entries=settings.cache.max_entries,
            rows=settings.grid.rows,
            cols=settings.grid.cols,
            delimiter=settings.grid.delimiter,
            frames_per_minute=settings.viewer.frames_per_minute,
        )

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load_frames(self, path: str) -> Tuple[Frame, ...]:
        """
        Parse a recording and compute metrics for every frame.

        This is the cache's loader; callers normally go through the
        cache instead.
        """
        matrices = parse_file(path, rows=self.rows, cols=self.cols, delimiter=self.delimiter)
        return tuple(
            Frame(index=i, matrix=matrix, metrics=self.calculator.compute(matrix))
            for i, matrix in enumerate(matrices)
        )

    def _entry(self, path: PathLike) -> CacheEntry:
        return self.cache.get_or_load(path)

    def _frame(self, path: PathLike, index: int) -> Frame:
        entry = self._entry(path)
        if entry.frame_count == 0:
            raise EmptyFrameSequenceError(path)
        return entry.frames[clamp_index(index, entry.frame_count)]

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def total_frames(self, path: PathLike) -> int:
        """Number of complete frames in the recording."""
        return self._entry(path).frame_count

    def load_frame(self, path: PathLike, index: int) -> np.ndarray:
        """
        Get the matrix of one frame.

        Args:
            path: Recording path
            index: Frame index; clamped into [0, frame_count - 1]

        Returns:
            Read-only (rows, cols) float64 array

        Raises:
            EmptyFrameSequenceError: If the recording has no frames
        """
        return self._frame(path, index).matrix

    def frame_metrics(self, path: PathLike, index: int) -> FrameMetrics:
        """Metrics of one frame. Index is clamped like load_frame()."""
        return self._frame(path, index).metrics

    def peak_history(self, path: PathLike, max_frames: int) -> List[float]:
        """
        Peak pressure index of frames [0, min(max_frames, frame_count)).

        Returns:
            PPI values in frame order; empty for max_frames <= 0
        """
        entry = self._entry(path)
        n = max(0, min(max_frames, entry.frame_count))
        return [frame.metrics.peak_pressure_index for frame in entry.frames[:n]]

    def max_risk_up_to_frame(self, path: PathLike, index: int) -> RiskPeak:
        """
        Find the worst risk level in frames 0..index (inclusive).

        The earliest frame reaching the highest rank wins ties. The
        scan stops at the first High frame since no rank exceeds it.

        Args:
            path: Recording path
            index: Last frame to scan; clamped into [0, frame_count - 1]

        Returns:
            RiskPeak with the risk level, frame index and metrics

        Raises:
            EmptyFrameSequenceError: If the recording has no frames
        """
        entry = self._entry(path)
        if entry.frame_count == 0:
            raise EmptyFrameSequenceError(path)
        last = clamp_index(index, entry.frame_count)

        best = entry.frames[0]
        best_rank = -1
        for frame in entry.frames[:last + 1]:
            rank = frame.metrics.risk_level.rank
            if rank > best_rank:
                best, best_rank = frame, rank
                if rank == MAX_RISK_RANK:
                    break

        return RiskPeak(
            risk_level=best.metrics.risk_level,
            frame_index=best.index,
            metrics=best.metrics,
        )

    def frame_window(self, path: PathLike, range_minutes: int) -> FrameWindow:
        """
        Frames covered by the first range_minutes of a recording.

        Args:
            path: Recording path
            range_minutes: Requested time range; negative counts as 0

        Returns:
            FrameWindow; is_truncated is set when the file holds less
            data than requested
        """
        return self._window(self._entry(path), range_minutes)

    def _window(self, entry: CacheEntry, range_minutes: int) -> FrameWindow:
        total = entry.frame_count
        requested = max(0, range_minutes) * self.frames_per_minute
        effective = min(total, requested)
        return FrameWindow(
            total_frames=total,
            requested_frames=requested,
            effective_frames=effective,
            is_truncated=effective < requested,
            available_minutes=effective / self.frames_per_minute,
        )

    def frame_snapshot(
        self,
        path: PathLike,
        index: int,
        range_minutes: Optional[int] = None,
    ) -> FrameSnapshot:
        """
        Flattened frame payload for heatmap rendering.

        Args:
            path: Recording path
            index: Frame index; clamped into the window (or the whole
                recording when range_minutes is None)
            range_minutes: Optional time range limiting the frames served

        Raises:
            EmptyFrameSequenceError: If the recording (or window) has
                no frames
        """
        entry = self._entry(path)
        if range_minutes is None:
            limit = entry.frame_count
        else:
            limit = self._window(entry, range_minutes).effective_frames
        if limit == 0:
            raise EmptyFrameSequenceError(path)

        frame = entry.frames[clamp_index(index, limit)]
        metrics = frame.metrics
        return FrameSnapshot(
            frame_index=frame.index,
            peak_pressure=metrics.peak_pressure,
            peak_pressure_index=metrics.peak_pressure_index,
            contact_area_percent=metrics.contact_area_percent,
            risk_level=metrics.risk_level,
            matrix=frame.matrix.ravel().tolist(),
        )

    # -------------------------------------------------------------------------
    # Cache control
    # -------------------------------------------------------------------------

    def invalidate(self, path: PathLike) -> bool:
        """Drop the cached entry for path. Returns True if one existed."""
        return self.cache.invalidate(path)

    def clear_cache(self) -> int:
        """Drop all cached entries. Returns the number removed."""
        return self.cache.clear()

    def cache_metrics(self) -> dict:
        """Cache metrics for observability."""
        return self.cache.metrics()
