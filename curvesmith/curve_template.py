"""
Custom delivery curve generation.

Partitions a flight into scheduled event segments and unscheduled filler
segments, then assigns each a share of the flight goal so that the curve
totals exactly 100%.

Pipeline:
1. Validate event placement against the flight (bounds, order, overlap)
2. Partition the flight by goal type (TOTAL or DAY)
3. Resolve filler goals from the accumulated GoalContext
4. Reconcile floating point drift onto the last segment
"""

from datetime import datetime, time

from loguru import logger

from .errors import (
    CurveError,
    EventPlacementError,
    OverAllocationError,
    ReconciliationError,
    UnreachableRemainderError,
)
from .time_range import Flight, ScheduledEvent, hours_between
from .types import (
    DEFAULT_GOAL_TYPE,
    CurveSegment,
    GoalContext,
    GoalType,
    ScheduledEventSegment,
    UnscheduledSegment,
    parse_goal_type,
)

TOTAL_PERCENT_REQUIRED = 100  # Serving side rejects any other total
PERCENT_ERROR_THRESHOLD = 0.001  # Max drift from 100% before the curve is rejected
HOURS_PER_DAY = 24

POST_EVENTS_DESCRIPTION = "Post-Events"


def pre_event_description(event: ScheduledEvent) -> str:
    """Label for the unscheduled time leading up to an event."""
    return f"Pre-Event [{event.title_for_curve}]"


class CurveTemplate:
    """
    A reusable set of scheduled events that can be applied to any flight.

    Events must be sorted by start and must not overlap. They are validated
    against each flight rather than sorted here, so callers see their own
    mistakes.
    """

    def __init__(self, events: list[ScheduledEvent], goal_type: GoalType = DEFAULT_GOAL_TYPE):
        self.events = list(events)
        self.goal_type = parse_goal_type(goal_type)

    def generate_curve_segments(self, flight: Flight) -> list[CurveSegment]:
        """
        Generate a custom curve for the flight based on this template.

        Outside of the explicit skews requested by scheduled events, the
        remaining goal is distributed evenly across unscheduled time.

        Args:
            flight: Flight to partition

        Returns:
            Ordered curve segments whose goal percentages total exactly 100

        Raises:
            CurveError: If a curve could not be generated for this flight
        """
        self._check_date_ranges(flight)

        goal_context = GoalContext(self.goal_type, flight.impression_goal)

        if self.goal_type == "DAY":
            segments = self._process_events_by_day(flight, goal_context)
        else:
            segments = self._process_events_by_total(flight, goal_context)

        logger.debug(
            "Partitioned flight into curve segments",
            goal_type=self.goal_type,
            segment_count=len(segments),
            unscheduled_hours=goal_context.unscheduled_hours,
            unscheduled_percent=goal_context.unscheduled_percent,
            unscheduled_impressions=goal_context.unscheduled_impressions,
        )

        total_goal_percent = sum(segment.calculate_goal(goal_context) for segment in segments)

        difference = TOTAL_PERCENT_REQUIRED - total_goal_percent

        # Written so that a NaN total is rejected too
        if not abs(difference) <= PERCENT_ERROR_THRESHOLD:
            logger.error(
                "Curve goals do not total 100 percent",
                goal_type=self.goal_type,
                total_goal_percent=total_goal_percent,
                flight_start=flight.start.isoformat(),
                flight_end=flight.end.isoformat(),
            )
            raise ReconciliationError("total goal percent must equal 100")

        # Absorb precision drift so the stored total is exactly 100
        segments[-1].goal_percent += difference

        logger.info(
            "Generated curve",
            goal_type=self.goal_type,
            event_count=len(self.events),
            segment_count=len(segments),
        )

        return segments

    def flight_bounds(self, now: datetime | None = None) -> tuple[datetime, datetime]:
        """
        Bounds a flight must satisfy to carry every event in this template.

        The flight must start no later than the first event. It must end no
        earlier than the last event, and never before the end of today, since
        flights that have already ended cannot take a new curve.

        Args:
            now: Current time (defaults to now, in the events' timezone)

        Returns:
            Tuple of (latest_start, earliest_end)

        Raises:
            CurveError: If the template has no events
        """
        if not self.events:
            raise CurveError("no scheduled events are specified")

        latest_start = self.events[0].start
        last_end = self.events[-1].end

        if now is None:
            now = datetime.now(last_end.tzinfo)

        end_of_today = datetime.combine(now.date(), time.max)
        if now.tzinfo is not None:
            if hasattr(now.tzinfo, "localize"):
                # pytz offsets can change during the day (DST)
                end_of_today = now.tzinfo.localize(end_of_today)
            else:
                end_of_today = end_of_today.replace(tzinfo=now.tzinfo)

        return latest_start, max(last_end, end_of_today)

    def _check_date_ranges(self, flight: Flight) -> None:
        """
        Validate event placement against the flight.

        - All events must be within the flight range
        - All events must be ordered by start
        - No events may overlap

        Raises:
            EventPlacementError: On the first violation found
        """
        previous: ScheduledEvent | None = None

        for event in self.events:
            if not flight.contains(event):
                raise EventPlacementError("event outside flight range")

            if previous is not None:
                if event.start < previous.start:
                    raise EventPlacementError("events must be ordered by date")

                if event.overlaps(previous):
                    raise EventPlacementError("event ranges must never overlap")

            previous = event

    def _process_events_by_total(
        self, flight: Flight, goal_context: GoalContext
    ) -> list[CurveSegment]:
        """
        Partition the flight reading event goals as shares of the whole flight.

        A flight with a 100k goal and an event at 30% delivers 30k impressions
        during that event. Event goals must total no more than 100%.
        """
        segments: list[CurveSegment] = []
        current_start = flight.start

        for event in self.events:
            hours_before_event = hours_between(current_start, event.start)

            if hours_before_event > 0:
                goal_context.unscheduled_hours += hours_before_event
                segments.append(
                    UnscheduledSegment(
                        pre_event_description(event), current_start, hours_before_event
                    )
                )

            segments.append(
                ScheduledEventSegment(event.title_for_curve, event.start, event.goal_percent)
            )

            current_start = event.end
            goal_context.unscheduled_percent -= event.goal_percent

            if goal_context.unscheduled_percent < 0:
                raise OverAllocationError("total goal percent is greater than 100")
            elif goal_context.unscheduled_percent == 0 and event.end < flight.end:
                raise UnreachableRemainderError("curve cannot end with a 0 percent goal")

        self._append_post_events(segments, flight, current_start, goal_context)

        return segments

    def _process_events_by_day(
        self, flight: Flight, goal_context: GoalContext
    ) -> list[CurveSegment]:
        """
        Partition the flight reading event goals as shares of an even day.

        A flight with a 100k goal over 10 days delivers 10k a day if paced
        evenly. An event at 300% wants three times that daily share, so 30k
        impressions during its timeframe. Event goals may exceed 100%.
        """
        segments: list[CurveSegment] = []

        # Start from the total goal and subtract scheduled events
        goal_context.unscheduled_impressions = flight.impression_goal

        current_start = flight.start
        even_daily_goal = flight.impression_goal / flight.duration_hours * HOURS_PER_DAY

        for event in self.events:
            relative_goal = (event.goal_percent / 100) * even_daily_goal
            hours_before_event = hours_between(current_start, event.start)

            goal_context.unscheduled_impressions -= relative_goal

            if goal_context.unscheduled_impressions <= 0:
                raise OverAllocationError("goal is too large")

            normalized_percent = relative_goal / flight.impression_goal * 100

            if hours_before_event > 0:
                goal_context.unscheduled_hours += hours_before_event
                segments.append(
                    UnscheduledSegment(
                        pre_event_description(event), current_start, hours_before_event
                    )
                )

            segments.append(
                ScheduledEventSegment(event.title_for_curve, event.start, normalized_percent)
            )

            # Bookkeeping only; DAY mode is bounded by impressions instead
            goal_context.unscheduled_percent -= normalized_percent
            current_start = event.end

        if hours_between(current_start, flight.end) > 0 and goal_context.unscheduled_impressions <= 0:
            # Trailing time with no impressions left; a curve cannot end on 0
            raise UnreachableRemainderError("goal is too large")

        self._append_post_events(segments, flight, current_start, goal_context)

        return segments

    def _append_post_events(
        self,
        segments: list[CurveSegment],
        flight: Flight,
        current_start: datetime,
        goal_context: GoalContext,
    ) -> None:
        """Fill any time between the last event and the end of the flight."""
        hours_after_last_event = hours_between(current_start, flight.end)

        if hours_after_last_event > 0:
            goal_context.unscheduled_hours += hours_after_last_event
            segments.append(
                UnscheduledSegment(POST_EVENTS_DESCRIPTION, current_start, hours_after_last_event)
            )


def generate_curve_segments(
    flight: Flight,
    events: list[ScheduledEvent],
    goal_type: GoalType = DEFAULT_GOAL_TYPE,
) -> list[CurveSegment]:
    """
    Convenience function to generate curve segments for a single flight.

    Args:
        flight: Flight to partition
        events: Scheduled events, sorted by start and non-overlapping
        goal_type: "TOTAL" or "DAY"

    Returns:
        Ordered curve segments whose goal percentages total exactly 100
    """
    template = CurveTemplate(events, goal_type)
    return template.generate_curve_segments(flight)
