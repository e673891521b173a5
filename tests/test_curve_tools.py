"""Tests for curve tool implementations and the request script."""

import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
import time_machine

import generate_curve
from curve_tools import (
    events_from_rows,
    flight_from_dict,
    get_curve_preview,
    get_flight_bounds,
    get_pacing_curve,
    invoke_tool,
)
from curvesmith.curve_template import CurveTemplate
from curvesmith.errors import (
    CurveError,
    InvalidEventError,
    InvalidGoalTypeError,
    InvalidInstantError,
)


@pytest.fixture
def preview_params() -> dict:
    """Twelve-hour flight with one 20% event at 06:00-09:00."""
    return {
        "flight": {
            "start": "2024-03-27T00:00:00",
            "end": "2024-03-27T12:00:00",
            "impression_goal": 1200,
        },
        "events": [
            ["2024-03-27T06:00:00", "2024-03-27T09:00:00", 20, "A"],
        ],
        "goal_type": "TOTAL",
    }


class TestEventsFromRows:
    """Tests for building events from template rows."""

    def test_list_rows(self) -> None:
        events = events_from_rows([["2024-03-27T06:00:00", "2024-03-27T09:00:00", "20", "A"]])

        assert len(events) == 1
        assert events[0].goal_percent == 20.0
        assert events[0].title == "A"

    def test_dict_rows(self) -> None:
        events = events_from_rows(
            [{"start": "2024-03-27T06:00:00", "end": "2024-03-27T09:00:00", "goal_percent": 20}]
        )

        assert events[0].title == ""
        assert events[0].title_for_curve == "Untitled"

    def test_empty_rows_ignored(self) -> None:
        rows = [
            ["", "", "", ""],
            ["2024-03-27T06:00:00", "2024-03-27T09:00:00", 20, "A"],
            [None, None, None, None],
        ]

        assert len(events_from_rows(rows)) == 1

    def test_order_preserved(self) -> None:
        rows = [
            ["2024-03-27T06:00:00", "2024-03-27T07:00:00", 10, "Later"],
            ["2024-03-27T01:00:00", "2024-03-27T02:00:00", 10, "Earlier"],
        ]

        assert [e.title for e in events_from_rows(rows)] == ["Later", "Earlier"]

    def test_non_date_bounds_rejected(self) -> None:
        rows = [["2024-03-27T06:00:00", "next tuesday", 20, "A"]]

        with pytest.raises(InvalidInstantError, match="must both be dates"):
            events_from_rows(rows)

    def test_non_numeric_goal_rejected(self) -> None:
        rows = [["2024-03-27T06:00:00", "2024-03-27T09:00:00", "lots", "A"]]

        with pytest.raises(CurveError, match="Invalid goal percent"):
            events_from_rows(rows)

    @pytest.mark.parametrize("goal_percent", ["NaN", "inf", float("nan")])
    def test_non_finite_goal_rejected(self, goal_percent: object) -> None:
        rows = [["2024-03-27T06:00:00", "2024-03-27T09:00:00", goal_percent, "A"]]

        with pytest.raises(InvalidEventError, match="finite"):
            events_from_rows(rows)

    def test_time_zone_applied(self) -> None:
        rows = [["2024-03-27T06:00:00", "2024-03-27T09:00:00", 20, "A"]]
        event = events_from_rows(rows, "America/New_York")[0]

        assert event.start.utcoffset().total_seconds() == -4 * 3600


class TestFlightFromDict:
    """Tests for building flights from dicts."""

    def test_goal_converted_to_number(self) -> None:
        flight = flight_from_dict(
            {"start": "2024-03-27T00:00:00", "end": "2024-03-27T12:00:00", "impression_goal": "500"}
        )

        assert flight.impression_goal == 500.0
        assert flight.duration_hours == 12

    def test_missing_field(self) -> None:
        with pytest.raises(KeyError):
            flight_from_dict({"start": "2024-03-27T00:00:00", "end": "2024-03-27T12:00:00"})


class TestCurveTools:
    """Tests for the tool functions."""

    def test_preview(self, preview_params: dict) -> None:
        result = get_curve_preview(preview_params)

        assert result["goal_type"] == "TOTAL"
        assert [s["description"] for s in result["segments"]] == [
            "Pre-Event [A]",
            "A",
            "Post-Events",
        ]
        assert [s["impression_goal"] for s in result["segments"]] == pytest.approx(
            [640, 240, 320]
        )

    def test_preview_defaults_to_total(self, preview_params: dict) -> None:
        del preview_params["goal_type"]

        assert get_curve_preview(preview_params)["goal_type"] == "TOTAL"

    def test_preview_day_goals(self, preview_params: dict) -> None:
        preview_params["goal_type"] = "day"
        preview_params["events"] = [["2024-03-27T00:00:00", "2024-03-27T01:00:00", 25, "Burst"]]

        result = get_curve_preview(preview_params)

        assert result["goal_type"] == "DAY"
        assert result["segments"][0]["goal_percent"] == pytest.approx(50)

    def test_preview_invalid_goal_type(self, preview_params: dict) -> None:
        preview_params["goal_type"] = "HOURLY"

        with pytest.raises(InvalidGoalTypeError):
            get_curve_preview(preview_params)

    def test_pacing_curve(self, preview_params: dict) -> None:
        preview_params["time_zone"] = "America/New_York"

        result = get_pacing_curve(preview_params)

        amounts = [g["amount"] for g in result["customPacingGoals"]]
        assert amounts == [53_333, 20_000, 26_667]
        assert result["customPacingGoals"][0]["startDateTime"]["timeZoneId"] == "America/New_York"

    def test_pacing_curve_requires_time_zone(self, preview_params: dict) -> None:
        with pytest.raises(KeyError):
            get_pacing_curve(preview_params)

    def test_flight_bounds_with_explicit_now(self) -> None:
        params = {
            "events": [
                ["2024-03-05T00:00:00Z", "2024-03-06T00:00:00Z", 20, "A"],
                ["2024-03-10T00:00:00Z", "2024-03-12T00:00:00Z", 20, "B"],
            ],
            "now": "2024-03-01T09:00:00Z",
        }

        assert get_flight_bounds(params) == {
            "latest_start_date": "2024-03-05T00:00:00+00:00",
            "earliest_end_date": "2024-03-12T00:00:00+00:00",
        }

    @time_machine.travel("2024-03-20T09:00:00+00:00", tick=False)
    def test_flight_bounds_never_end_before_today(self) -> None:
        """Flights that ended already cannot take a curve."""
        params = {
            "events": [["2024-03-05T00:00:00Z", "2024-03-06T00:00:00Z", 20, "A"]],
        }

        assert get_flight_bounds(params) == {
            "latest_start_date": "2024-03-05T00:00:00+00:00",
            "earliest_end_date": "2024-03-20T23:59:59.999999+00:00",
        }

    def test_flight_bounds_end_of_today_across_dst(self) -> None:
        """The end of a spring-forward day carries the daylight offset."""
        params = {
            "events": [["2024-03-05T00:00:00", "2024-03-06T00:00:00", 20, "A"]],
            "time_zone": "America/New_York",
            "now": "2024-03-10T01:00:00",
        }

        assert get_flight_bounds(params) == {
            "latest_start_date": "2024-03-05T00:00:00-05:00",
            "earliest_end_date": "2024-03-10T23:59:59.999999-04:00",
        }

    def test_flight_bounds_without_events(self) -> None:
        with pytest.raises(CurveError, match="no scheduled events are specified"):
            CurveTemplate([]).flight_bounds()

    def test_unknown_tool(self) -> None:
        with pytest.raises(ValueError, match="Unknown tool"):
            invoke_tool("delete_everything", {})

    def test_router(self, preview_params: dict) -> None:
        assert invoke_tool("preview_curve", preview_params) == get_curve_preview(preview_params)


class TestGenerateCurveScript:
    """Tests for the JSON request script."""

    def run_script(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture, *args: str
    ) -> tuple[dict, int]:
        monkeypatch.setattr(sys, "argv", ["generate_curve.py", *args])
        exit_code = 0
        try:
            generate_curve.main()
        except SystemExit as e:
            exit_code = e.code
        return json.loads(capsys.readouterr().out), exit_code

    def test_preview_request(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture,
        preview_params: dict,
    ) -> None:
        request_file = tmp_path / "request.json"
        request_file.write_text(json.dumps(preview_params))

        result, exit_code = self.run_script(monkeypatch, capsys, str(request_file))

        assert exit_code == 0
        assert len(result["segments"]) == 3

    def test_pacing_request(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture,
        preview_params: dict,
    ) -> None:
        request_file = tmp_path / "request.json"
        request_file.write_text(
            json.dumps({**preview_params, "tool": "build_pacing_curve", "time_zone": "UTC"})
        )

        result, exit_code = self.run_script(monkeypatch, capsys, str(request_file))

        assert exit_code == 0
        assert sum(g["amount"] for g in result["customPacingGoals"]) == 100_000

    def test_curve_error_reported(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture,
        preview_params: dict,
    ) -> None:
        preview_params["events"][0][2] = 100
        request_file = tmp_path / "request.json"
        request_file.write_text(json.dumps(preview_params))

        result, exit_code = self.run_script(monkeypatch, capsys, str(request_file))

        assert exit_code == 1
        assert result == {
            "error": "curve cannot end with a 0 percent goal",
            "code": "UNREACHABLE_REMAINDER",
        }

    def test_missing_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
    ) -> None:
        result, exit_code = self.run_script(monkeypatch, capsys, str(tmp_path / "missing.json"))

        assert exit_code == 1
        assert "Request file not found" in result["error"]

    def test_missing_field(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
    ) -> None:
        request_file = tmp_path / "request.json"
        request_file.write_text(json.dumps({"events": []}))

        result, exit_code = self.run_script(monkeypatch, capsys, str(request_file))

        assert exit_code == 1
        assert result["error"] == "Missing required field: 'flight'"

    def test_usage(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
        result, exit_code = self.run_script(monkeypatch, capsys)

        assert exit_code == 1
        assert "Usage" in result["error"]
