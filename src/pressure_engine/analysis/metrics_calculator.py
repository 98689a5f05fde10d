"""
Metrics Calculator
==================

Computes clinical metrics for a single pressure frame.

Metrics:
    peak_pressure:
        Unfiltered maximum reading over the whole matrix.

    contact_area_percent:
        count(cells >= lower_threshold) / cell_count * 100

    peak_pressure_index (PPI):
        Maximum reading among clusters of at least min_cluster_size
        4-connected loaded cells. 0.0 when no cluster qualifies.
        Isolated hot cells and small artifacts are ignored: a
        clinically meaningful peak must cover a minimum contiguous area.

    risk_level:
        Derived from PPI (see RiskLevel.from_peak_pressure_index).

Invariant:
    peak_pressure >= peak_pressure_index whenever any reading is >= 0,
    since PPI is drawn from a subset of the cells peak_pressure scans.
"""

import logging
import math

import numpy as np

from pressure_engine.analysis.clustering import find_clusters
from pressure_engine.models.metrics import FrameMetrics, RiskLevel


logger = logging.getLogger(__name__)


DEFAULT_LOWER_THRESHOLD = 5.0
DEFAULT_MIN_CLUSTER_SIZE = 10


class MetricsCalculator:
    """
    Per-frame metrics with tunable contact threshold and cluster size.

    The calculator is stateless between calls and safe to share
    across threads.

    Attributes:
        lower_threshold: Minimum reading for a cell to count as contact
        min_cluster_size: Minimum cluster size contributing to PPI

    Example:
        calculator = MetricsCalculator(lower_threshold=5.0, min_cluster_size=10)
        metrics = calculator.compute(matrix)
        print(metrics.peak_pressure_index, metrics.risk_level)
    """

    def __init__(
        self,
        lower_threshold: float = DEFAULT_LOWER_THRESHOLD,
        min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE,
    ) -> None:
        """
        Initialize metrics calculator.

        Args:
            lower_threshold: Contact threshold (finite)
            min_cluster_size: Minimum qualifying cluster size (>= 1)
        """
        if not math.isfinite(lower_threshold):
            raise ValueError("lower_threshold must be finite")
        if min_cluster_size < 1:
            raise ValueError("min_cluster_size must be >= 1")

        self.lower_threshold = float(lower_threshold)
        self.min_cluster_size = int(min_cluster_size)

        logger.info(
            f"MetricsCalculator initialized: lower_threshold={self.lower_threshold}, "
            f"min_cluster_size={self.min_cluster_size}"
        )

    def compute(self, matrix: np.ndarray) -> FrameMetrics:
        """
        Compute all metrics for one frame.

        Args:
            matrix: 2-D array of readings

        Returns:
            FrameMetrics for the matrix
        """
        return compute_metrics(matrix, self.lower_threshold, self.min_cluster_size)


def peak_pressure_index(
    matrix: np.ndarray,
    lower_threshold: float,
    min_cluster_size: int,
) -> float:
    """Maximum over qualifying clusters, or 0.0 if none qualify."""
    ppi = 0.0
    for cluster in find_clusters(matrix, lower_threshold):
        if cluster.size >= min_cluster_size and cluster.max_value > ppi:
            ppi = cluster.max_value
    return ppi


def contact_area_percent(matrix: np.ndarray, lower_threshold: float) -> float:
    """Percentage of cells at or above the contact threshold."""
    if matrix.size == 0:
        return 0.0
    contact = int(np.count_nonzero(matrix >= lower_threshold))
    return contact / matrix.size * 100.0


def compute_metrics(
    matrix: np.ndarray,
    lower_threshold: float = DEFAULT_LOWER_THRESHOLD,
    min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE,
) -> FrameMetrics:
    """Compute FrameMetrics for one matrix without building a calculator."""
    ppi = peak_pressure_index(matrix, lower_threshold, min_cluster_size)
    return FrameMetrics(
        peak_pressure=float(matrix.max()) if matrix.size else 0.0,
        peak_pressure_index=ppi,
        contact_area_percent=contact_area_percent(matrix, lower_threshold),
        risk_level=RiskLevel.from_peak_pressure_index(ppi),
    )
