"""
Pressure Clustering
===================

Partitions the loaded cells of a pressure matrix into 4-connected
clusters.

A cell is "loaded" when its reading is at or above the contact
threshold. Two loaded cells belong to the same cluster when they are
adjacent up, down, left or right (diagonals do not connect).

Algorithm:
    Breadth-first flood fill driven by an explicit deque and a visited
    bitmap the size of the matrix. Each cell is enqueued at most once,
    so the whole pass is O(rows * cols) with bounded stack depth.
"""

from collections import deque
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np


# Up, down, left, right
_NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(frozen=True, slots=True)
class PressureCluster:
    """
    One contiguous region of loaded cells.

    Attributes:
        size: Number of cells in the cluster
        max_value: Highest reading in the cluster
        seed: (row, col) of the first cell reached in row-major order
    """

    size: int
    max_value: float
    seed: Tuple[int, int]


def find_clusters(matrix: np.ndarray, lower_threshold: float) -> List[PressureCluster]:
    """
    Find all 4-connected clusters of cells >= lower_threshold.

    Clusters are returned in the row-major order of their seed cells.

    Args:
        matrix: 2-D array of readings
        lower_threshold: Minimum reading for a cell to count as loaded

    Returns:
        List of PressureCluster, possibly empty
    """
    if matrix.ndim != 2:
        raise ValueError(f"Expected a 2-D matrix, got shape {matrix.shape}")

    rows, cols = matrix.shape
    loaded = matrix >= lower_threshold
    visited = np.zeros((rows, cols), dtype=bool)
    clusters: List[PressureCluster] = []

    for r, c in zip(*np.nonzero(loaded)):
        r, c = int(r), int(c)
        if visited[r, c]:
            continue

        size = 0
        cluster_max = float(matrix[r, c])
        visited[r, c] = True
        queue = deque([(r, c)])

        while queue:
            cr, cc = queue.popleft()
            size += 1
            value = float(matrix[cr, cc])
            if value > cluster_max:
                cluster_max = value

            for dr, dc in _NEIGHBOR_OFFSETS:
                nr, nc = cr + dr, cc + dc
                if nr < 0 or nr >= rows or nc < 0 or nc >= cols:
                    continue
                if visited[nr, nc] or not loaded[nr, nc]:
                    continue
                visited[nr, nc] = True
                queue.append((nr, nc))

        clusters.append(PressureCluster(size=size, max_value=cluster_max, seed=(r, c)))

    return clusters
