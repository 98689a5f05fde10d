"""
Frame Data Models
=================

Internal representation of parsed pressure frames and cache entries.

Design Rules:
    - Frames are created once at parse time and never mutated
    - Matrices are read-only numpy arrays (writeable flag cleared)
    - A CacheEntry is replaced as a whole when its file changes
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from pressure_engine.models.metrics import FrameMetrics


# Fixed mat geometry: 32 rows x 32 columns per frame
FRAME_ROWS = 32
FRAME_COLS = 32


@dataclass(frozen=True, slots=True, eq=False)
class Frame:
    """
    One pressure-grid snapshot with its computed metrics.

    Identity is the frame's position within its file.

    Attributes:
        index: Zero-based position in the file's frame sequence
        matrix: Read-only (rows, cols) float64 array of readings
        metrics: Metrics computed from matrix
    """

    index: int
    matrix: np.ndarray
    metrics: FrameMetrics

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the full matrix."""
        return (
            f"Frame(index={self.index}, "
            f"ppi={self.metrics.peak_pressure_index:.2f}, "
            f"risk={self.metrics.risk_level.value})"
        )


@dataclass(frozen=True, slots=True, eq=False)
class CacheEntry:
    """
    Fully parsed and metric-annotated contents of one recording file.

    Frames always correspond to the file content as of
    last_modified_ns. A changed file produces a new entry.

    Attributes:
        path: Path the entry was loaded from
        last_modified_ns: File modification time (ns) at load
        frames: Ordered frame sequence
    """

    path: str
    last_modified_ns: int
    frames: Tuple[Frame, ...]

    @property
    def frame_count(self) -> int:
        """Number of complete frames in the file."""
        return len(self.frames)

    def __repr__(self) -> str:
        return (
            f"CacheEntry(path={self.path!r}, "
            f"mtime_ns={self.last_modified_ns}, "
            f"frames={self.frame_count})"
        )
