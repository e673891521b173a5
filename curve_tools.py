"""
Tool implementations for custom delivery curves.

Provides three tools:
1. preview_curve - Curve segments with percent and impression goals
2. build_pacing_curve - Milli-percent custom pacing goals for a flight
3. get_flight_bounds - Latest start / earliest end a flight needs for a template

Each tool takes a plain dict of arguments and returns a JSON-ready dict.
"""

from typing import Any

from curvesmith import pacing
from curvesmith.curve_template import CurveTemplate
from curvesmith.errors import CurveError, InvalidInstantError
from curvesmith.time_range import Flight, ScheduledEvent, parse_instant
from curvesmith.types import parse_goal_type

EVENT_FIELDS = ("start", "end", "goal_percent", "title")


def events_from_rows(rows: list[Any], time_zone: str | None = None) -> list[ScheduledEvent]:
    """
    Build scheduled events from template rows.

    Rows are [start, end, goal_percent, title] lists or dicts with those keys.
    Rows without a start are ignored. Order is preserved as given.

    Args:
        rows: Template rows
        time_zone: IANA timezone for naive start/end values

    Returns:
        List of ScheduledEvent objects
    """
    events = []

    for row in rows:
        if isinstance(row, dict):
            row = [row.get(name) for name in EVENT_FIELDS]

        start, end, goal_percent, title = (list(row) + [None] * 4)[:4]

        if start is None or start == "":
            continue  # Ignore empty rows

        try:
            start = parse_instant(start, time_zone)
            end = parse_instant(end, time_zone)
        except InvalidInstantError as e:
            raise InvalidInstantError("scheduled event start and end must both be dates") from e

        try:
            goal_percent = float(goal_percent)
        except (TypeError, ValueError) as e:
            raise CurveError(f"Invalid goal percent: {goal_percent}") from e

        events.append(
            ScheduledEvent(start, end, goal_percent, "" if title is None else str(title))
        )

    return events


def flight_from_dict(data: dict[str, Any], time_zone: str | None = None) -> Flight:
    """Build a Flight from {"start", "end", "impression_goal"}."""
    return Flight(
        parse_instant(data["start"], time_zone),
        parse_instant(data["end"], time_zone),
        float(data["impression_goal"]),
    )


def template_from_params(params: dict[str, Any]) -> CurveTemplate:
    """Build a CurveTemplate from tool arguments."""
    time_zone = params.get("time_zone")
    events = events_from_rows(params.get("events", []), time_zone)
    return CurveTemplate(events, parse_goal_type(params.get("goal_type")))


def get_curve_preview(params: dict[str, Any]) -> dict[str, Any]:
    """
    Preview the curve a template produces for a flight.

    Takes {"flight", "events", "goal_type", "time_zone"} and returns the
    flight details with one entry per curve segment.
    """
    template = template_from_params(params)
    flight = flight_from_dict(params["flight"], params.get("time_zone"))

    return pacing.preview_curve(flight, template).to_dict()


def get_pacing_curve(params: dict[str, Any]) -> dict[str, Any]:
    """
    Build the milli-percent custom pacing curve for a flight.

    `time_zone` is required: pacing goal start times are expressed in the
    serving network's timezone.
    """
    time_zone = params["time_zone"]
    template = template_from_params(params)
    flight = flight_from_dict(params["flight"], time_zone)

    return pacing.build_pacing_curve(flight, template, time_zone).to_dict()


def get_flight_bounds(params: dict[str, Any]) -> dict[str, Any]:
    """Return the latest start and earliest end a flight needs for the template."""
    template = template_from_params(params)
    now = params.get("now")
    if now is not None:
        now = parse_instant(now, params.get("time_zone"))

    latest_start, earliest_end = template.flight_bounds(now)

    return {
        "latest_start_date": latest_start.isoformat(),
        "earliest_end_date": earliest_end.isoformat(),
    }


def invoke_tool(tool_name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Router function for CLI/subprocess invocation."""
    if tool_name == "preview_curve":
        return get_curve_preview(arguments)
    elif tool_name == "build_pacing_curve":
        return get_pacing_curve(arguments)
    elif tool_name == "get_flight_bounds":
        return get_flight_bounds(arguments)
    else:
        raise ValueError(f"Unknown tool: {tool_name}")
