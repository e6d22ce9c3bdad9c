from __future__ import annotations

import datetime
import json

from typer.testing import CliRunner

from schoolcal.cli import app
from schoolcal.events import EventStore

runner = CliRunner()


class TestHolidaysCommand:
    def test_holidays_default(self) -> None:
        result = runner.invoke(app, ["holidays", "--year", "2025"])
        assert result.exit_code == 0
        assert "United States federal holidays" in result.output
        assert "New Year" in result.output
        assert "Christmas" in result.output

    def test_holidays_shows_actual_date(self) -> None:
        result = runner.invoke(app, ["holidays", "--year", "2021"])
        assert result.exit_code == 0
        assert "Fri, Dec 24 2021  Christmas Day (observed; actual Sat, Dec 25 2021)" in result.output

    def test_holidays_json(self) -> None:
        result = runner.invoke(app, ["holidays", "--year", "2022", "--country", "us", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["year"] == 2022
        assert data["country"] == "US"
        assert len(data["holidays"]) == 11
        assert data["holidays"][0] == {
            "name": "New Year's Day",
            "date": "2021-12-31",
            "actualDate": "2022-01-01",
        }

    def test_holidays_invalid_country(self) -> None:
        result = runner.invoke(app, ["holidays", "--country", "zz"])
        assert result.exit_code == 1
        assert "Unsupported country" in result.output


class TestEventCommands:
    def test_add_and_calendar(self, tmp_path) -> None:
        path = tmp_path / "events.json"
        result = runner.invoke(
            app,
            [
                "add",
                "Science test",
                "--date",
                "2025-03-12",
                "--type",
                "test",
                "--time",
                "09:15",
                "--events",
                str(path),
            ],
        )
        assert result.exit_code == 0
        assert "Added test-2025-03-12-Science test-" in result.output

        result = runner.invoke(
            app, ["calendar", "--year", "2025", "--month", "3", "--events", str(path)]
        )
        assert result.exit_code == 0
        assert "March 2025" in result.output
        assert " 12*" in result.output
        assert "09:15  [test] Science test" in result.output

    def test_events_path_from_env(self, tmp_path) -> None:
        path = tmp_path / "env-events.json"
        result = runner.invoke(
            app,
            ["add", "Party", "--date", "2025-05-11", "--type", "birthday"],
            env={"SCHOOLCAL_EVENTS": str(path)},
        )
        assert result.exit_code == 0
        assert EventStore(path).load()[0].title == "Party"

    def test_add_invalid_date(self, tmp_path) -> None:
        result = runner.invoke(
            app, ["add", "X", "--date", "2025-13-01", "--events", str(tmp_path / "e.json")]
        )
        assert result.exit_code != 0
        assert "Invalid date format" in result.output

    def test_add_invalid_time(self, tmp_path) -> None:
        result = runner.invoke(
            app,
            ["add", "X", "--date", "2025-01-01", "--time", "25:00", "--events", str(tmp_path / "e.json")],
        )
        assert result.exit_code != 0
        assert "Invalid time format" in result.output

    def test_add_holiday_type_rejected(self, tmp_path) -> None:
        result = runner.invoke(
            app,
            ["add", "X", "--date", "2025-01-01", "--type", "holiday", "--events", str(tmp_path / "e.json")],
        )
        assert result.exit_code == 1
        assert "cannot be created" in result.output

    def test_delete(self, tmp_path) -> None:
        path = tmp_path / "events.json"
        runner.invoke(app, ["add", "Essay", "--date", "2025-04-01", "--events", str(path)])
        event_id = EventStore(path).load()[0].id

        result = runner.invoke(app, ["delete", event_id, "--events", str(path)])
        assert result.exit_code == 0
        assert EventStore(path).load() == []

    def test_delete_holiday_refused(self, tmp_path) -> None:
        result = runner.invoke(
            app, ["delete", "holiday-2025-07-04", "--events", str(tmp_path / "e.json")]
        )
        assert result.exit_code == 1
        assert "cannot be deleted" in result.output

    def test_delete_unknown(self, tmp_path) -> None:
        result = runner.invoke(app, ["delete", "nope", "--events", str(tmp_path / "e.json")])
        assert result.exit_code == 1
        assert "No event with id" in result.output

    def test_calendar_december_shows_next_new_year(self, tmp_path) -> None:
        result = runner.invoke(
            app,
            ["calendar", "--year", "2021", "--month", "12", "--events", str(tmp_path / "e.json")],
        )
        assert result.exit_code == 0
        assert " 24H" in result.output
        assert " 31H" in result.output
        assert "New Year's Day" in result.output

    def test_calendar_no_holidays(self, tmp_path) -> None:
        result = runner.invoke(
            app,
            ["calendar", "-y", "2025", "-m", "7", "--no-holidays", "--events", str(tmp_path / "e.json")],
        )
        assert result.exit_code == 0
        assert "Independence Day" not in result.output

    def test_calendar_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "events.json"
        path.write_text("not json{{{")
        result = runner.invoke(app, ["calendar", "--events", str(path)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_upcoming(self, tmp_path) -> None:
        path = tmp_path / "events.json"
        tomorrow = datetime.date.today() + datetime.timedelta(days=1)
        runner.invoke(
            app, ["add", "Field trip", "--date", tomorrow.isoformat(), "--events", str(path)]
        )
        result = runner.invoke(app, ["upcoming", "--events", str(path)])
        assert result.exit_code == 0
        assert "Field trip" in result.output

    def test_calendar_malformed_entries(self, tmp_path) -> None:
        path = tmp_path / "events.json"
        path.write_text('["x"]')
        result = runner.invoke(app, ["calendar", "--events", str(path)])
        assert result.exit_code == 1
        assert "Malformed event file" in result.output

    def test_calendar_type_filter(self, tmp_path) -> None:
        path = tmp_path / "events.json"
        runner.invoke(
            app, ["add", "Quiz", "--date", "2025-07-08", "-t", "test", "--events", str(path)]
        )
        runner.invoke(
            app, ["add", "Reading", "--date", "2025-07-09", "-t", "homework", "--events", str(path)]
        )
        result = runner.invoke(
            app,
            ["calendar", "-y", "2025", "-m", "7", "-t", "test", "--events", str(path)],
        )
        assert result.exit_code == 0
        assert "[test] Quiz" in result.output
        assert "Reading" not in result.output
        assert "Independence Day" not in result.output

    def test_calendar_repeatable_type(self, tmp_path) -> None:
        path = tmp_path / "events.json"
        runner.invoke(
            app, ["add", "Quiz", "--date", "2025-07-08", "-t", "test", "--events", str(path)]
        )
        result = runner.invoke(
            app,
            ["calendar", "-y", "2025", "-m", "7", "-t", "test", "-t", "holiday", "--events", str(path)],
        )
        assert result.exit_code == 0
        assert "[test] Quiz" in result.output
        assert "Independence Day" in result.output

    def test_upcoming_type_filter(self, tmp_path) -> None:
        path = tmp_path / "events.json"
        tomorrow = datetime.date.today() + datetime.timedelta(days=1)
        runner.invoke(
            app, ["add", "Exam", "--date", tomorrow.isoformat(), "-t", "test", "--events", str(path)]
        )
        runner.invoke(
            app,
            ["add", "Worksheet", "--date", tomorrow.isoformat(), "-t", "homework", "--events", str(path)],
        )
        result = runner.invoke(app, ["upcoming", "--type", "test", "--events", str(path)])
        assert result.exit_code == 0
        assert "Exam" in result.output
        assert "Worksheet" not in result.output
        assert "[holiday]" not in result.output


class TestYearRange:
    def test_holidays_year_too_large(self) -> None:
        result = runner.invoke(app, ["holidays", "-y", "10000"])
        assert result.exit_code == 2
        assert not isinstance(result.exception, ValueError)

    def test_holidays_year_too_small(self) -> None:
        result = runner.invoke(app, ["holidays", "--year", "0"])
        assert result.exit_code == 2

    def test_calendar_year_too_large(self, tmp_path) -> None:
        result = runner.invoke(
            app, ["calendar", "-y", "10000", "-m", "1", "--events", str(tmp_path / "e.json")]
        )
        assert result.exit_code == 2

    def test_calendar_last_december(self, tmp_path) -> None:
        result = runner.invoke(
            app, ["calendar", "-y", "9999", "-m", "12", "--events", str(tmp_path / "e.json")]
        )
        assert result.exit_code == 0
        assert "Christmas Day" in result.output

    def test_holidays_first_year(self) -> None:
        result = runner.invoke(app, ["holidays", "-y", "1", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["year"] == 1
