#!/usr/bin/env python3
"""
Recording Inspection Script
===========================

Standalone script to summarize a pressure mat recording.

This script:
    1. Loads the recording through the query service
    2. Reports frame count and the viewer time window
    3. Reports the worst risk reached up to a given frame
    4. Optionally dumps the PPI history and one frame snapshot

Output is a single JSON document on stdout, tagged with the engine
name and version from config.

Usage:
    python scripts/inspect_recording.py data/2025-01-14.csv
    python scripts/inspect_recording.py data/2025-01-14.csv --frame 300 --range-minutes 10
    python scripts/inspect_recording.py data/2025-01-14.csv --history --snapshot
"""

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from pressure_engine import FrameQueryService, PressureEngineError
from pressure_engine.config import Settings, load_config, setup_logging


logger = logging.getLogger(__name__)


def summarize(
    service: FrameQueryService,
    path: str,
    frame: int,
    range_minutes: int,
    include_history: bool,
    include_snapshot: bool,
) -> dict:
    """
    Build the summary document for one recording.

    Args:
        service: Query service
        path: Recording path
        frame: Frame to report max risk up to
        range_minutes: Viewer time range
        include_history: Include PPI history for the window
        include_snapshot: Include the flattened frame payload

    Returns:
        JSON-serializable dict
    """
    window = service.frame_window(path, range_minutes)
    summary = {
        "path": path,
        "window": window.model_dump(mode="json"),
    }

    if window.effective_frames == 0:
        logger.warning(f"No frames available in {path}")
        return summary

    index = max(0, min(frame, window.effective_frames - 1))
    peak = service.max_risk_up_to_frame(path, index)
    summary["frame"] = index
    summary["frame_metrics"] = service.frame_metrics(path, index).model_dump(mode="json")
    summary["max_risk"] = peak.model_dump(mode="json")

    if include_history:
        summary["peak_history"] = service.peak_history(path, window.effective_frames)
    if include_snapshot:
        summary["snapshot"] = service.frame_snapshot(
            path, index, range_minutes
        ).model_dump(mode="json")

    return summary


def resolve_range_minutes(requested: Optional[int], settings: Settings) -> int:
    """Use the requested range, falling back to the configured default when omitted."""
    if requested is not None:
        return requested
    return settings.viewer.default_range_minutes


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Summarize a pressure mat recording"
    )
    parser.add_argument("path", help="Recording file (32 lines x 32 values per frame)")
    parser.add_argument(
        "--frame",
        type=int,
        default=0,
        help="Frame to report metrics and max risk up to (default: 0)",
    )
    parser.add_argument(
        "--range-minutes",
        type=int,
        default=None,
        help="Viewer time range in minutes (default: from config)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="Include the peak pressure index history",
    )
    parser.add_argument(
        "--snapshot",
        action="store_true",
        help="Include the flattened frame payload",
    )

    args = parser.parse_args(argv)

    settings = load_config(args.config)
    setup_logging(settings)
    service = FrameQueryService.from_settings(settings)

    range_minutes = resolve_range_minutes(args.range_minutes, settings)

    try:
        summary = summarize(
            service,
            args.path,
            frame=args.frame,
            range_minutes=range_minutes,
            include_history=args.history,
            include_snapshot=args.snapshot,
        )
    except PressureEngineError as e:
        logger.error(str(e))
        return 1

    summary["engine"] = settings.engine.model_dump(mode="json")

    json.dump(summary, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
