"""Domain-specific errors for curve generation.

Every failure is raised eagerly and aborts the whole call. Nothing here is
retryable: the flight/template combination must be corrected first.

Error codes:
- INVALID_INSTANT: A bound could not be resolved to a point in time
- INVALID_TIME_RANGE: Start does not strictly precede end
- INVALID_FLIGHT: Flight impression goal is negative or not finite
- INVALID_EVENT: Event goal percent is not finite
- INVALID_GOAL_TYPE: Goal type is neither TOTAL nor DAY
- EVENT_PLACEMENT: Event outside the flight, out of order, or overlapping
- OVER_ALLOCATION: Scheduled goals claim more than the flight can deliver
- UNREACHABLE_REMAINDER: Flight time remains with no goal left to fund it
- RECONCILIATION: Segment goals do not add up to 100%
"""


class CurveError(Exception):
    """Base exception for all curve errors.

    Attributes:
        code: Stable error code (e.g., "EVENT_PLACEMENT")
        message: Human-readable message, surfaced verbatim to the caller
    """

    code = "CURVE_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInstantError(CurveError, TypeError):
    """Raised when a time range bound is not a valid date or time."""

    code = "INVALID_INSTANT"


class InvalidTimeRangeError(CurveError, ValueError):
    """Raised when a time range start does not strictly precede its end."""

    code = "INVALID_TIME_RANGE"


class InvalidFlightError(CurveError, ValueError):
    """Raised when flight details are unusable (e.g., negative goal)."""

    code = "INVALID_FLIGHT"


class InvalidEventError(CurveError, ValueError):
    """Raised when a scheduled event is unusable (e.g., non-finite goal)."""

    code = "INVALID_EVENT"


class InvalidGoalTypeError(CurveError, ValueError):
    """Raised when a goal type name is not recognized."""

    code = "INVALID_GOAL_TYPE"


class EventPlacementError(CurveError):
    """Raised when scheduled events do not fit the flight."""

    code = "EVENT_PLACEMENT"


class OverAllocationError(CurveError):
    """Raised when scheduled events claim more than the whole goal."""

    code = "OVER_ALLOCATION"


class UnreachableRemainderError(CurveError):
    """Raised when flight time is left over without any goal to deliver."""

    code = "UNREACHABLE_REMAINDER"


class ReconciliationError(CurveError):
    """Raised when the final curve does not total 100%."""

    code = "RECONCILIATION"
