"""Tests for ``hdb logs`` (cli/logs.py)."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from hdb_helper.cli import exit_codes
from hdb_helper.cli.logs import run_logs
from hdb_helper.exceptions import ApiConnectionError


def _entries(*messages: str) -> list[dict[str, str]]:
    return [
        {"level": "info", "timestamp": f"2024-01-01T00:00:0{i}.000Z", "message": message}
        for i, message in enumerate(messages)
    ]


class TestRunLogs:
    def test_single_fetch(self, capsys: pytest.CaptureFixture[str]) -> None:
        client = MagicMock()
        client.run.return_value = _entries("started", "request failed")

        code = run_logs(client, ["--filter", "failed", "--lookback", "5", "--level", "error"])

        assert code == exit_codes.SUCCESS
        operation, params = client.run.call_args.args
        assert operation == "read_log"
        assert params["order"] == "asc"
        assert params["level"] == "error"
        assert params["from"] < params["until"]
        err = capsys.readouterr().err
        assert "request failed" in err
        assert "started" not in err

    def test_tail_reports_new_entries_once(self, capsys: pytest.CaptureFixture[str]) -> None:
        client = MagicMock()
        client.run.side_effect = [_entries("one"), _entries("one", "two"), _entries("one", "two")]
        sleeps: list[float] = []

        run_logs(client, ["--tail"], sleep=sleeps.append, max_polls=3)

        err = capsys.readouterr().err
        assert err.count("message: one") == 1
        assert err.count("message: two") == 1
        assert len(sleeps) == 2

    def test_tail_survives_failed_poll(self, caplog: pytest.LogCaptureFixture) -> None:
        client = MagicMock()
        client.run.side_effect = [ApiConnectionError("down"), _entries("back")]

        code = run_logs(client, ["--tail"], sleep=lambda _: None, max_polls=2)

        assert code == exit_codes.SUCCESS
        assert "Error occurred while retrieving logs" in caplog.text

    def test_single_fetch_propagates_errors(self) -> None:
        client = MagicMock()
        client.run.side_effect = ApiConnectionError("down")

        with pytest.raises(ApiConnectionError):
            run_logs(client, [])

    def test_non_list_response_is_empty(self, capsys: pytest.CaptureFixture[str]) -> None:
        client = MagicMock()
        client.run.return_value = {"message": "nothing"}

        run_logs(client, [])

        assert "All logs: 0" in capsys.readouterr().err
