"""Tests for CLI commands with a mocked flight source."""

from unittest.mock import MagicMock, patch

import pytest

from conftest import make_snapshot
from flighttrack import cli
from flighttrack.context import AppContext
from flighttrack.config import load_config
from flighttrack.ingestion.source import FlightSourceError


@pytest.fixture
def source() -> MagicMock:
    return MagicMock()


@pytest.fixture
def run_cli(source, store):
    def _run(*argv):
        context = AppContext.create(config=load_config(), source=source, store=store)
        with patch.object(cli.AppContext, "create", return_value=context), \
                patch.object(context, "close"):
            with pytest.raises(SystemExit) as exc:
                cli.main(list(argv))
        return exc.value.code

    return _run


class TestCli:
    """Tests for cli.main."""

    def test_ingest_success(self, run_cli, source, store, capsys) -> None:
        source.fetch_by_route.return_value = [make_snapshot("AA1"), make_snapshot("AA2", arr_scheduled="bad")]

        assert run_cli("ingest") == 0

        assert "inserted 1, skipped 1" in capsys.readouterr().out
        assert store.count() == 1

    def test_ingest_failure_exit_code(self, run_cli, source, capsys) -> None:
        source.fetch_by_route.side_effect = FlightSourceError("boom")

        assert run_cli("ingest") == 1
        assert "Ingestion failed: boom" in capsys.readouterr().err

    def test_route(self, run_cli, source, capsys) -> None:
        source.fetch_by_route.return_value = [make_snapshot("AA1")]

        assert run_cli("route", "lax", "jfk") == 0

        out = capsys.readouterr().out
        assert "LAX -> JFK" in out
        assert "Average Flight Duration: 150.00 minutes" in out

    def test_route_no_data(self, run_cli, source, capsys) -> None:
        source.fetch_by_route.return_value = []

        assert run_cli("route", "LAX", "JFK") == 0
        assert "No flight data found." in capsys.readouterr().err

    def test_history_empty(self, run_cli, capsys) -> None:
        assert run_cli("history", "LAX", "JFK", "--days", "7") == 0
        out = capsys.readouterr().out
        assert "No history available for this route." in out
        assert "No records in the past 7 days." in out
