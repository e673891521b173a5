"""
Test helper functions for curve validation.

These functions can be imported by test modules for curve analysis.
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from curvesmith.types import CurveSegment, UnscheduledSegment


def total_percent(segments: list[CurveSegment]) -> float:
    """Sum of goal percentages across all segments."""
    return sum(segment.goal_percent for segment in segments)


def descriptions(segments: list[CurveSegment]) -> list[str]:
    """Segment descriptions in curve order."""
    return [segment.description for segment in segments]


def filler_segments(segments: list[CurveSegment]) -> list[UnscheduledSegment]:
    """Only the unscheduled (filler) segments."""
    return [segment for segment in segments if isinstance(segment, UnscheduledSegment)]


def assert_valid_curve(segments: list[CurveSegment]) -> None:
    """
    Check the invariants every generated curve must hold.

    - At least one segment
    - Segment starts strictly increase
    - Goals total 100%
    """
    assert segments, "Curve has no segments"

    starts = [segment.start for segment in segments]
    assert starts == sorted(starts), f"Segment starts out of order: {starts}"
    assert len(set(starts)) == len(starts), f"Duplicate segment starts: {starts}"

    assert abs(total_percent(segments) - 100) < 1e-9, (
        f"Curve totals {total_percent(segments)}, expected 100"
    )
