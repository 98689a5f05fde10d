"""
Test Configuration
==================

Pytest fixtures and test configuration for the pressure frame engine.
"""

import numpy as np
import pytest


ROWS = 32
COLS = 32


def make_frame(block_value: float = 0.0, block_shape=(2, 5), origin=(0, 0)) -> np.ndarray:
    """Zero frame with a rectangular block of block_value."""
    matrix = np.zeros((ROWS, COLS), dtype=np.float64)
    r0, c0 = origin
    rows, cols = block_shape
    matrix[r0:r0 + rows, c0:c0 + cols] = block_value
    return matrix


def frame_lines(matrix: np.ndarray) -> list:
    """Render a matrix as recording lines."""
    return [",".join(f"{v:g}" for v in row) for row in matrix]


@pytest.fixture
def write_recording(tmp_path):
    """Factory writing matrices (and optional extra lines) to a recording file."""

    def _write(matrices, name="recording.csv", extra_lines=()):
        lines = []
        for matrix in matrices:
            lines.extend(frame_lines(matrix))
        lines.extend(extra_lines)
        path = tmp_path / name
        path.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def low_frame():
    """PPI 0 -> Low."""
    return make_frame(0.0)


@pytest.fixture
def medium_frame():
    """10-cell cluster at 25 -> Medium."""
    return make_frame(25.0)


@pytest.fixture
def high_frame():
    """10-cell cluster at 45 -> High."""
    return make_frame(45.0)


@pytest.fixture
def risk_sequence_path(write_recording, low_frame, medium_frame, high_frame):
    """Recording with frames [Low, Medium, High, Low]."""
    return write_recording([low_frame, medium_frame, high_frame, low_frame])


@pytest.fixture
def service():
    """Fresh query service with default parameters."""
    from pressure_engine.service import FrameQueryService

    return FrameQueryService(max_cache_entries=8)
