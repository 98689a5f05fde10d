"""
Engine Errors
=============

Exception hierarchy for the pressure frame engine.

Error Kinds:
    - FileNotReadableError: path missing or inaccessible (propagated)
    - EmptyFrameSequenceError: single-frame query on a file with no frames

Malformed cells are NOT errors. The parser substitutes 0.0 for any
field it cannot read and carries on.
"""

import os
from typing import Optional, Union


class PressureEngineError(Exception):
    """Base class for all engine errors."""


class FileNotReadableError(PressureEngineError, OSError):
    """
    Recording file is missing, inaccessible, or not a regular file.

    Raised by the file cache and the frame parser. The original OSError
    is chained as __cause__. No retry is attempted inside the engine.

    Attributes:
        path: The path that could not be read
    """

    def __init__(
        self,
        path: Union[str, os.PathLike],
        reason: Optional[str] = None,
    ) -> None:
        self.path = os.fspath(path)
        message = f"Cannot read pressure recording: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class EmptyFrameSequenceError(PressureEngineError, LookupError):
    """
    A single-frame query was made against a file with zero frames.

    Callers are expected to check total_frames() == 0 first.
    """

    def __init__(self, path: Union[str, os.PathLike]) -> None:
        self.path = os.fspath(path)
        super().__init__(f"Recording has no complete frames: {self.path}")
