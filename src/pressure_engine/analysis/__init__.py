"""
Analysis Module
===============

Per-frame clinical metrics for pressure mat recordings.

Components:
    - find_clusters: 4-connected flood fill over loaded cells
    - MetricsCalculator: peak pressure, PPI, contact area, risk level
"""

from pressure_engine.analysis.clustering import PressureCluster, find_clusters
from pressure_engine.analysis.metrics_calculator import (
    DEFAULT_LOWER_THRESHOLD,
    DEFAULT_MIN_CLUSTER_SIZE,
    MetricsCalculator,
    compute_metrics,
)

__all__ = [
    "PressureCluster",
    "find_clusters",
    "MetricsCalculator",
    "compute_metrics",
    "DEFAULT_LOWER_THRESHOLD",
    "DEFAULT_MIN_CLUSTER_SIZE",
]
