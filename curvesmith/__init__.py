"""
Curvesmith Custom Delivery Curves

Distributes a flight's impression goal across scheduled events and the
unscheduled time around them, producing a curve that totals exactly 100%.

Main entry point: CurveTemplate (or generate_curve_segments)
"""

from .curve_template import CurveTemplate, generate_curve_segments
from .errors import (
    CurveError,
    EventPlacementError,
    InvalidEventError,
    InvalidFlightError,
    InvalidGoalTypeError,
    InvalidInstantError,
    InvalidTimeRangeError,
    OverAllocationError,
    ReconciliationError,
    UnreachableRemainderError,
)
from .pacing import build_pacing_curve, preview_curve, to_custom_pacing_curve
from .time_range import Flight, ScheduledEvent, TimeRange, hours_between, parse_instant
from .types import (
    CurvePreview,
    CurveSegment,
    CustomPacingCurve,
    CustomPacingGoal,
    GoalContext,
    GoalType,
    ScheduledEventSegment,
    SegmentPreview,
    UnscheduledSegment,
    parse_goal_type,
)

__all__ = [
    # Time ranges
    "TimeRange",
    "Flight",
    "ScheduledEvent",
    "parse_instant",
    "hours_between",
    # Types
    "GoalType",
    "GoalContext",
    "CurveSegment",
    "ScheduledEventSegment",
    "UnscheduledSegment",
    "SegmentPreview",
    "CurvePreview",
    "CustomPacingGoal",
    "CustomPacingCurve",
    "parse_goal_type",
    # Generator
    "CurveTemplate",
    "generate_curve_segments",
    # Pacing
    "preview_curve",
    "build_pacing_curve",
    "to_custom_pacing_curve",
    # Errors
    "CurveError",
    "InvalidInstantError",
    "InvalidTimeRangeError",
    "InvalidFlightError",
    "InvalidGoalTypeError",
    "InvalidEventError",
    "EventPlacementError",
    "OverAllocationError",
    "UnreachableRemainderError",
    "ReconciliationError",
]
