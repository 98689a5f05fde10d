"""
Viewer Models
=============

Plain-data payloads for the interactive viewer.

The viewer shows a time range of a day's recording. The mat captures
one frame per second, so a range of N minutes covers N * 60 frames.
Recordings shorter than the requested range are truncated, and the
viewer is told how much data is actually available.

Payload Contract (FrameSnapshot.model_dump(mode="json")):
    {
        "frame_index": 42,
        "peak_pressure": 61.0,
        "peak_pressure_index": 48.5,
        "contact_area_percent": 17.3,
        "risk_level": "High",
        "matrix": [0.0, 0.0, ...]     # 1024 values, row-major
    }
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from pressure_engine.models.metrics import RiskLevel


class FrameWindow(BaseModel):
    """
    Frame range available for a requested time window.

    Attributes:
        total_frames: Complete frames in the file
        requested_frames: Frames the requested time range would cover
        effective_frames: min(total_frames, requested_frames)
        is_truncated: True when the file is shorter than requested
        available_minutes: effective_frames expressed in minutes
    """

    model_config = ConfigDict(frozen=True)

    total_frames: int = Field(..., ge=0)
    requested_frames: int = Field(..., ge=0)
    effective_frames: int = Field(..., ge=0)
    is_truncated: bool
    available_minutes: float = Field(..., ge=0.0)


class FrameSnapshot(BaseModel):
    """
    Single-frame payload for rendering a heatmap.

    Attributes:
        frame_index: Index actually served (after clamping)
        peak_pressure: See FrameMetrics
        peak_pressure_index: See FrameMetrics
        contact_area_percent: See FrameMetrics
        risk_level: See FrameMetrics
        matrix: Frame readings flattened row-major
    """

    model_config = ConfigDict(frozen=True)

    frame_index: int = Field(..., ge=0)
    peak_pressure: float
    peak_pressure_index: float = Field(..., ge=0.0)
    contact_area_percent: float = Field(..., ge=0.0, le=100.0)
    risk_level: RiskLevel
    matrix: List[float]
