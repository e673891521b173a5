"""
Data structures for curve generation.

Includes the goal context shared by one generation pass, the two curve
segment variants, and the preview and pacing shapes built from a curve.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Literal

from .errors import InvalidGoalTypeError

# =============================================================================
# Goal Types
# =============================================================================

GoalType = Literal[
    "TOTAL",  # Event goals are percentages of the whole flight goal
    "DAY",  # Event goals are percentages of an even day's share of the goal
]

GOAL_TYPES: tuple[GoalType, ...] = ("TOTAL", "DAY")
DEFAULT_GOAL_TYPE: GoalType = "TOTAL"


def parse_goal_type(value: str | None) -> GoalType:
    """
    Resolve a goal type name (case-insensitive). None means the default.

    Raises:
        InvalidGoalTypeError: If the name is not TOTAL or DAY
    """
    if value is None:
        return DEFAULT_GOAL_TYPE

    name = str(value).strip().upper()
    if name not in GOAL_TYPES:
        raise InvalidGoalTypeError(f"Unknown goal type: {value}")
    return name  # type: ignore[return-value]


@dataclass
class GoalContext:
    """
    Running totals for one curve generation pass.

    Goals for unscheduled time can only be calculated once the flight has been
    partitioned, so these totals are accumulated first and read afterwards.
    Never shared across calls.
    """

    goal_type: GoalType
    impression_goal: float

    unscheduled_hours: float = 0  # Hours not covered by a scheduled event
    unscheduled_impressions: float = 0  # Impressions left for unscheduled time (DAY)
    unscheduled_percent: float = 100  # Percent left for unscheduled time


# =============================================================================
# Curve Segments
# =============================================================================


@dataclass
class ScheduledEventSegment:
    """A curve segment for a user-defined event with a fixed goal."""

    description: str
    start: datetime
    goal_percent: float

    def calculate_goal(self, context: GoalContext) -> float:
        """Scheduled goals are known up front."""
        return self.goal_percent


@dataclass
class UnscheduledSegment:
    """
    A curve segment for flight time not claimed by any scheduled event.

    Its goal is a share of what remains after scheduled events, in proportion
    to how much of the total unscheduled time it covers.
    """

    description: str
    start: datetime
    hours: float
    goal_percent: float = 0

    def calculate_goal(self, context: GoalContext) -> float:
        """
        Update and return this segment's goal as a percentage of the flight.

        Args:
            context: Totals accumulated while partitioning the flight

        Returns:
            Goal percentage between 0 and 100
        """
        time_proportion = self.hours / context.unscheduled_hours

        if context.goal_type == "DAY":
            impressions = time_proportion * context.unscheduled_impressions
            # Normalize into a percentage of the total impression goal
            self.goal_percent = impressions * 100 / context.impression_goal
        else:
            self.goal_percent = time_proportion * context.unscheduled_percent

        return self.goal_percent


CurveSegment = ScheduledEventSegment | UnscheduledSegment


# =============================================================================
# Preview and Pacing Output
# =============================================================================


@dataclass
class SegmentPreview:
    """One curve segment with its share expressed in impressions."""

    description: str
    start_date: str  # ISO 8601
    goal_percent: float
    impression_goal: float


@dataclass
class CurvePreview:
    """A flight and the curve generated for it."""

    start_date: str  # ISO 8601
    end_date: str  # ISO 8601
    impression_goal: float
    goal_type: GoalType
    segments: list[SegmentPreview] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CustomPacingGoal:
    """
    A single point of a serving-side custom pacing curve.

    `amount` is in milli-percent (thousandths of a percent).
    """

    start_datetime: dict[str, Any]  # {"date": {...}, "hour", "minute", "second", "timeZoneId"}
    use_line_item_start_datetime: bool
    amount: int


@dataclass
class CustomPacingCurve:
    """Custom pacing goals whose amounts total exactly 100000 milli-percent."""

    custom_pacing_goal_unit: Literal["MILLI_PERCENT"] = "MILLI_PERCENT"
    custom_pacing_goals: list[CustomPacingGoal] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "customPacingGoalUnit": self.custom_pacing_goal_unit,
            "customPacingGoals": [
                {
                    "startDateTime": goal.start_datetime,
                    "useLineItemStartDateTime": goal.use_line_item_start_datetime,
                    "amount": goal.amount,
                }
                for goal in self.custom_pacing_goals
            ],
        }
