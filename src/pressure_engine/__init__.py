"""
Pressure Engine
===============

Frame analysis engine for pressure monitoring mat recordings.

A recording is a text file of 32x32 pressure grids, one grid row per
line. The engine parses recordings into frames, computes clinical
metrics per frame, and serves single-frame and aggregate queries from
a modification-time keyed cache.

Components:
    - parsing: Text recording -> frame matrices
    - analysis: Peak pressure, clustered peak pressure index,
      contact area and risk level
    - cache: Thread-safe LRU cache of analysed recordings
    - service: Query façade used by viewers and dashboards

Example:
    from pressure_engine import FrameQueryService

    service = FrameQueryService()
    metrics = service.frame_metrics("/data/2025-01-14.csv", 30)
    print(metrics.peak_pressure_index, metrics.risk_level.value)
"""

__version__ = "0.1.0"

from pressure_engine.errors import (
    EmptyFrameSequenceError,
    FileNotReadableError,
    PressureEngineError,
)
from pressure_engine.models import FrameMetrics, RiskLevel, RiskPeak
from pressure_engine.service import FrameQueryService

__all__ = [
    "__version__",
    "FrameQueryService",
    "FrameMetrics",
    "RiskLevel",
    "RiskPeak",
    "PressureEngineError",
    "FileNotReadableError",
    "EmptyFrameSequenceError",
]
