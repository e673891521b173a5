"""
Curve conversions for display and for serving-side custom pacing.

A generated curve is expressed in floating point percentages. Previews add
the impressions each segment represents; pacing curves convert percentages to
integer milli-percent amounts that total exactly 100000.
"""

import math
from datetime import datetime

import pytz

from .curve_template import CurveTemplate
from .errors import InvalidInstantError
from .time_range import Flight
from .types import (
    CurvePreview,
    CurveSegment,
    CustomPacingCurve,
    CustomPacingGoal,
    SegmentPreview,
)

TOTAL_MILLIPERCENT_REQUIRED = 100_000  # Serving side rejects any other total
MILLIPERCENT_PER_PERCENT = 1000


def to_millipercent(goal_percent: float) -> int:
    """Convert a percentage to milli-percent, rounding halves up."""
    return math.floor(goal_percent * MILLIPERCENT_PER_PERCENT + 0.5)


def to_network_datetime(instant: datetime, time_zone_id: str) -> dict:
    """
    Break an instant into the date/time parts of a network DateTime.

    Timezone-aware instants are converted to the network timezone. Naive
    instants are assumed to already be network wall time.

    Args:
        instant: Datetime to convert
        time_zone_id: IANA timezone of the network (e.g., "America/New_York")

    Returns:
        {"date": {"year", "month", "day"}, "hour", "minute", "second", "timeZoneId"}
    """
    if instant.tzinfo is not None:
        try:
            instant = instant.astimezone(pytz.timezone(time_zone_id))
        except pytz.UnknownTimeZoneError as e:
            raise InvalidInstantError(f"Unknown time zone: {time_zone_id}") from e

    return {
        "date": {"year": instant.year, "month": instant.month, "day": instant.day},
        "hour": instant.hour,
        "minute": instant.minute,
        "second": instant.second,
        "timeZoneId": time_zone_id,
    }


def preview_segments(flight: Flight, segments: list[CurveSegment]) -> list[SegmentPreview]:
    """Express each segment's goal as both a percentage and impressions."""
    return [
        SegmentPreview(
            description=segment.description,
            start_date=segment.start.isoformat(),
            goal_percent=segment.goal_percent,
            impression_goal=flight.impression_goal * (segment.goal_percent / 100),
        )
        for segment in segments
    ]


def preview_curve(flight: Flight, template: CurveTemplate) -> CurvePreview:
    """
    Generate a curve for the flight and describe it for review.

    Raises:
        CurveError: If a curve could not be generated for this flight
    """
    segments = template.generate_curve_segments(flight)

    return CurvePreview(
        start_date=flight.start.isoformat(),
        end_date=flight.end.isoformat(),
        impression_goal=flight.impression_goal,
        goal_type=template.goal_type,
        segments=preview_segments(flight, segments),
    )


def to_custom_pacing_curve(
    flight: Flight, segments: list[CurveSegment], time_zone_id: str
) -> CustomPacingCurve:
    """
    Convert curve segments into milli-percent pacing goals.

    Rounding each segment can leave the total a few units off, so the
    difference is added to the last goal to make it exactly 100000.
    """
    pacing_goals: list[CustomPacingGoal] = []
    total_amount = 0

    for segment in segments:
        amount = to_millipercent(segment.goal_percent)
        pacing_goals.append(
            CustomPacingGoal(
                start_datetime=to_network_datetime(segment.start, time_zone_id),
                use_line_item_start_datetime=segment.start == flight.start,
                amount=amount,
            )
        )
        total_amount += amount

    pacing_goals[-1].amount += TOTAL_MILLIPERCENT_REQUIRED - total_amount

    return CustomPacingCurve(custom_pacing_goals=pacing_goals)


def build_pacing_curve(
    flight: Flight, template: CurveTemplate, time_zone_id: str
) -> CustomPacingCurve:
    """
    Generate a curve for the flight as a serving-ready custom pacing curve.

    Args:
        flight: Flight to partition
        template: Scheduled events and goal type to apply
        time_zone_id: IANA timezone of the serving network

    Returns:
        CustomPacingCurve whose amounts total exactly 100000 milli-percent
    """
    segments = template.generate_curve_segments(flight)
    return to_custom_pacing_curve(flight, segments, time_zone_id)
