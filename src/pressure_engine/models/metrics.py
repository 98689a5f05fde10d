"""
Metrics Models
==============

Per-frame clinical metrics and risk classification.

Core Concepts:
    - RiskLevel: Discrete risk classes (Low, Medium, High)
    - FrameMetrics: The four values computed for every frame
    - RiskPeak: Result of scanning a frame range for the worst risk

Risk Classification:
    The risk level is a pure function of the peak pressure index (PPI):

        PPI < 20         -> Low
        20 <= PPI < 40   -> Medium
        PPI >= 40        -> High

Example:
    from pressure_engine.models.metrics import RiskLevel

    RiskLevel.from_peak_pressure_index(27.5)   # RiskLevel.MEDIUM
    RiskLevel.HIGH.rank                        # 2
"""

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


# PPI cutoffs for risk classification
MEDIUM_RISK_PPI = 20.0
HIGH_RISK_PPI = 40.0


class RiskLevel(str, Enum):
    """
    Pressure injury risk classes, ordered by severity.

    Attributes:
        LOW: PPI below the medium cutoff
        MEDIUM: PPI in [20, 40)
        HIGH: PPI at or above 40
    """

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        """Severity ordinal: Low=0, Medium=1, High=2."""
        return _RISK_RANKS[self]

    @classmethod
    def from_peak_pressure_index(cls, ppi: float) -> "RiskLevel":
        """Classify a peak pressure index against the fixed cutoffs."""
        if ppi < MEDIUM_RISK_PPI:
            return cls.LOW
        if ppi < HIGH_RISK_PPI:
            return cls.MEDIUM
        return cls.HIGH


_RISK_RANKS = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
}

MAX_RISK_RANK = max(_RISK_RANKS.values())


class FrameMetrics(BaseModel):
    """
    Metrics derived from one pressure frame.

    Values are deterministic for a given matrix and calculator
    parameters. Instances are immutable and shared between callers.

    Attributes:
        peak_pressure: Highest raw reading in the frame
        peak_pressure_index: Highest reading among sufficiently large
            contiguous clusters (noise-filtered peak)
        contact_area_percent: Share of cells at or above the contact
            threshold, in percent
        risk_level: Classification derived from peak_pressure_index
    """

    model_config = ConfigDict(frozen=True)

    peak_pressure: float = Field(
        ...,
        description="Unfiltered maximum cell value",
    )

    peak_pressure_index: float = Field(
        ...,
        ge=0.0,
        description="Maximum over qualifying clusters (0.0 if none qualify)",
    )

    contact_area_percent: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="Percentage of cells at or above the contact threshold",
    )

    risk_level: RiskLevel = Field(
        ...,
        description="Risk class derived from the peak pressure index",
    )


class RiskPeak(BaseModel):
    """
    Worst risk observed in a frame range.

    ``as_tuple()`` gives the plain
    ``(risk_level, frame_index, metrics)`` triple.

    Attributes:
        risk_level: Highest risk level seen in the scanned range
        frame_index: Earliest frame where that level was first reached
        metrics: Metrics of that frame
    """

    model_config = ConfigDict(frozen=True)

    risk_level: RiskLevel
    frame_index: int = Field(..., ge=0)
    metrics: FrameMetrics

    def as_tuple(self) -> Tuple[RiskLevel, int, FrameMetrics]:
        return (self.risk_level, self.frame_index, self.metrics)
