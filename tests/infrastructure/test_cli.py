"""End-to-end tests for the ``ire`` command line against a temp data dir."""

import pytest
from click.testing import CliRunner

from ire.infrastructure.cli.main import cli


@pytest.fixture
def invoke(tmp_path):
    runner = CliRunner()
    env = {"IRE_DATA_DIR": str(tmp_path), "IRE_LOG_LEVEL": "ERROR"}

    def _invoke(*args):
        return runner.invoke(cli, list(args), env=env)

    return _invoke


class TestStockCommands:

    def test_init_and_show(self, invoke):
        result = invoke("stock", "init", "--product", "P1", "--stock", "100",
                        "--threshold", "20", "--reorder", "50")
        assert result.exit_code == 0, result.output
        assert "Tracking 'P1': 100 on hand (in_stock)" in result.output

        result = invoke("stock", "show")
        assert result.exit_code == 0
        assert "P1" in result.output
        assert "in_stock" in result.output

    def test_duplicate_init_fails(self, invoke):
        invoke("stock", "init", "--product", "P1", "--stock", "1",
               "--threshold", "0", "--reorder", "0")
        result = invoke("stock", "init", "--product", "P1", "--stock", "1",
                        "--threshold", "0", "--reorder", "0")
        assert result.exit_code == 1
        assert "already has a stock record" in result.output

    def test_adjust_and_history(self, invoke):
        invoke("stock", "init", "--product", "P1", "--stock", "10",
               "--threshold", "0", "--reorder", "5")
        result = invoke("stock", "adjust", "--product", "P1", "--delta", "-3",
                        "--type", "damage", "--reason", "dropped")
        assert result.exit_code == 0, result.output
        assert "now 7 on hand" in result.output

        result = invoke("stock", "history", "--product", "P1")
        assert "damage" in result.output
        assert "dropped" in result.output

    def test_adjust_rejects_reservation_types(self, invoke):
        result = invoke("stock", "adjust", "--product", "P1", "--delta", "1",
                        "--type", "reservation_hold")
        assert result.exit_code == 2

    def test_show_unknown_product(self, invoke):
        result = invoke("stock", "show", "--product", "ghost")
        assert result.exit_code == 1
        assert "No stock record" in result.output


class TestReservationCommands:

    def test_reserve_commit_reconcile(self, invoke):
        invoke("stock", "init", "--product", "P1", "--stock", "100",
               "--threshold", "20", "--reorder", "50")
        result = invoke("reservation", "create", "--product", "P1", "--quantity", "90")
        assert result.exit_code == 0, result.output
        reservation_id = result.output.split()[1].rstrip(":")

        result = invoke("reservation", "commit", reservation_id, "--quantity", "85")
        assert result.exit_code == 0, result.output
        assert "shipped 85 of 90" in result.output

        result = invoke("stock", "reconcile")
        assert result.exit_code == 0, result.output
        assert "ok" in result.output

    def test_oversell_rejected(self, invoke):
        invoke("stock", "init", "--product", "P1", "--stock", "5",
               "--threshold", "0", "--reorder", "5")
        result = invoke("reservation", "create", "--product", "P1", "--quantity", "6")
        assert result.exit_code == 1
        assert "Insufficient stock" in result.output


class TestAlertAndForecastCommands:

    def test_alert_raised_and_acknowledged(self, invoke):
        invoke("stock", "init", "--product", "P1", "--stock", "100",
               "--threshold", "20", "--reorder", "50")
        invoke("reservation", "create", "--product", "P1", "--quantity", "90")

        result = invoke("alert", "list")
        assert result.exit_code == 0
        assert "low_stock" in result.output
        alert_id = result.output.splitlines()[2].split()[0]

        result = invoke("alert", "ack", alert_id, "--user", "seller-1")
        assert result.exit_code == 0, result.output
        assert "acknowledged by seller-1" in result.output
        assert "No alerts found." in invoke("alert", "list").output

    def test_forecast_without_sales(self, invoke):
        invoke("stock", "init", "--product", "P1", "--stock", "10",
               "--threshold", "0", "--reorder", "25")
        result = invoke("forecast", "run")
        assert result.exit_code == 0, result.output
        assert "skipped, no sales history" in result.output

        result = invoke("forecast", "advise", "--product", "P1")
        assert result.exit_code == 0, result.output
        assert "Reorder:            25" in result.output
