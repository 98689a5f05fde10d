"""
Data Models
===========

Data models for the pressure frame engine.

This module re-exports all data models for convenient access.

Models:
    Metrics:
        - RiskLevel: Low / Medium / High classification
        - FrameMetrics: Per-frame peak, PPI, contact area and risk
        - RiskPeak: Worst risk found in a frame range

    Frames:
        - Frame: One parsed matrix plus its metrics
        - CacheEntry: All frames of one file at one modification time

    Viewer:
        - FrameWindow: Frame range covered by a time window
        - FrameSnapshot: Flattened single-frame payload
"""

from pressure_engine.models.metrics import FrameMetrics, RiskLevel, RiskPeak
from pressure_engine.models.frame import FRAME_COLS, FRAME_ROWS, CacheEntry, Frame
from pressure_engine.models.window import FrameSnapshot, FrameWindow

__all__ = [
    # Metrics
    "RiskLevel",
    "FrameMetrics",
    "RiskPeak",
    # Frames
    "FRAME_ROWS",
    "FRAME_COLS",
    "Frame",
    "CacheEntry",
    # Viewer
    "FrameWindow",
    "FrameSnapshot",
]
