"""
Frame Parser
============

Converts a raw delimited-text recording into an ordered sequence of
fixed-size pressure matrices.

File Format:
    - One matrix row per line, `cols` comma-separated decimal fields
    - Every `rows` consecutive lines form one frame
    - Frames are concatenated with no separator
    - '.' is the decimal point regardless of locale

Tolerance Rules:
    - Trailing lines that do not complete a frame are dropped
    - A field that fails to parse (or is non-finite) reads as 0.0
    - A short row leaves its missing cells at 0.0
    - Fewer than `rows` lines yields an empty list, not an error
"""

import logging
import math
import os
import re
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from pressure_engine.errors import FileNotReadableError
from pressure_engine.models.frame import FRAME_COLS, FRAME_ROWS


logger = logging.getLogger(__name__)


# Locale-invariant decimal: optional sign, digits with optional fraction,
# optional exponent, surrounding whitespace allowed
_NUMBER_RE = re.compile(
    r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*$",
    re.ASCII,
)


def parse_cell(text: str) -> Optional[float]:
    """
    Parse one numeric field.

    Returns:
        The value, or None if the field is not a finite decimal number.
    """
    if not _NUMBER_RE.match(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def _parse_block(
    lines: Sequence[str],
    rows: int,
    cols: int,
    delimiter: str,
) -> Tuple[np.ndarray, int]:
    """Parse one frame's worth of lines. Returns (matrix, malformed_count)."""
    matrix = np.zeros((rows, cols), dtype=np.float64)
    malformed = 0
    for r, line in enumerate(lines):
        fields = line.split(delimiter)
        for c, field in enumerate(fields[:cols]):
            value = parse_cell(field)
            if value is None:
                malformed += 1
                continue
            matrix[r, c] = value
        if len(fields) < cols:
            malformed += cols - len(fields)
    matrix.flags.writeable = False
    return matrix, malformed


def parse_lines(
    lines: Sequence[str],
    rows: int = FRAME_ROWS,
    cols: int = FRAME_COLS,
    delimiter: str = ",",
) -> List[np.ndarray]:
    """
    Parse recording lines into frame matrices.

    Args:
        lines: File content as text lines (without line terminators)
        rows: Lines per frame
        cols: Fields per line
        delimiter: Field separator

    Returns:
        List of read-only (rows, cols) float64 arrays, in file order.
        Length is floor(len(lines) / rows).
    """
    if rows < 1 or cols < 1:
        raise ValueError("rows and cols must be >= 1")

    frame_count = len(lines) // rows
    frames: List[np.ndarray] = []
    total_malformed = 0

    for f in range(frame_count):
        start = f * rows
        matrix, malformed = _parse_block(lines[start:start + rows], rows, cols, delimiter)
        frames.append(matrix)
        total_malformed += malformed

    dropped = len(lines) - frame_count * rows
    if dropped:
        logger.debug(f"Dropped {dropped} trailing line(s) not forming a complete frame")
    if total_malformed:
        logger.warning(
            f"Substituted 0.0 for {total_malformed} malformed or missing cell(s) "
            f"across {frame_count} frame(s)"
        )

    return frames


def read_lines(path: Union[str, os.PathLike]) -> List[str]:
    """
    Read a recording file as text lines.

    Handles a UTF-8 byte order mark and any newline convention.

    Raises:
        FileNotReadableError: If the file cannot be opened or read
    """
    try:
        with open(path, "r", encoding="utf-8-sig", errors="replace") as handle:
            return [line.rstrip("\r\n") for line in handle]
    except OSError as e:
        raise FileNotReadableError(path, e.strerror or str(e)) from e


def parse_file(
    path: Union[str, os.PathLike],
    rows: int = FRAME_ROWS,
    cols: int = FRAME_COLS,
    delimiter: str = ",",
) -> List[np.ndarray]:
    """
    Read and parse a recording file.

    The file handle is released before this function returns.

    Raises:
        FileNotReadableError: If the file cannot be opened or read
    """
    lines = read_lines(path)
    frames = parse_lines(lines, rows=rows, cols=cols, delimiter=delimiter)
    logger.debug(f"Parsed {len(frames)} frame(s) from {os.fspath(path)}")
    return frames
