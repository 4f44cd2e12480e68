"""Tests for the Simfolio CLI and interactive session.

**Feature: simulated-portfolio**
"""

import io
from pathlib import Path

import pytest
from click.testing import CliRunner
from rich.console import Console

from simfolio.cli.main import cli
from simfolio.cli.play import PlaySession, run_script
from simfolio.feed import BasePriceFeed, StaticPriceFeed
from simfolio.ledger import Ledger
from simfolio.models import FixedIncomeInstrument, MarketInstrument


SNAPSHOT = [
    MarketInstrument(symbol="AAPL", name="Apple Inc.", category="equity", current_price=100.0),
    MarketInstrument(symbol="BTC", name="Bitcoin", category="crypto", current_price=40000.0),
    FixedIncomeInstrument(
        symbol="SBI-FD", name="SBI Fixed Deposit", category="fixed-deposit",
        interest_rate=7.1, tenure="1 year", minimum_investment=1000,
    ),
]


class BrokenFeed(BasePriceFeed):
    def fetch_snapshot(self):
        raise ConnectionError("feed down")


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def session(output: io.StringIO) -> PlaySession:
    ledger = Ledger(starting_balance=10000.0)
    ledger.reprice(SNAPSHOT)
    return PlaySession(ledger, StaticPriceFeed(SNAPSHOT), output=Console(file=output, width=200))


# ============================================================================
# PlaySession
# ============================================================================

class TestPlaySession:

    def test_buy_and_sell_all(self, session: PlaySession, output: io.StringIO):
        assert session.execute("buy aapl 1000")
        assert session.ledger.get_position("AAPL").quantity == 10

        assert session.execute("sell AAPL all")
        assert session.ledger.get_position("AAPL") is None
        assert session.ledger.cash_balance == 10000.0
        assert "Closed AAPL" in output.getvalue()

    def test_amount_with_thousands_separator(self, session: PlaySession):
        session.execute("buy BTC 2,000")

        assert session.ledger.get_position("BTC").quantity == pytest.approx(0.05)

    def test_undo(self, session: PlaySession, output: io.StringIO):
        session.execute("buy AAPL 500")
        session.execute("undo")

        assert session.ledger.get_position("AAPL") is None
        assert session.ledger.cash_balance == 10000.0
        assert "Reverted buy" in output.getvalue()

    def test_undo_with_nothing_to_revert(self, session: PlaySession, output: io.StringIO):
        assert session.execute("revert")
        assert "Rejected" in output.getvalue()

    def test_rejected_buy_keeps_session(self, session: PlaySession, output: io.StringIO):
        assert session.execute("buy AAPL 20000")
        assert session.ledger.cash_balance == 10000.0
        assert "Not enough credits" in output.getvalue()

    def test_below_minimum(self, session: PlaySession, output: io.StringIO):
        session.execute("buy SBI-FD 500")

        assert session.ledger.get_position("SBI-FD") is None
        assert "minimum investment" in output.getvalue()

    def test_unknown_symbol(self, session: PlaySession, output: io.StringIO):
        session.execute("buy NOPE 100")

        assert "not in the market" in output.getvalue()

    def test_sell_all_without_position(self, session: PlaySession, output: io.StringIO):
        session.execute("sell AAPL all")

        assert "do not hold" in output.getvalue()

    def test_bad_number(self, session: PlaySession, output: io.StringIO):
        assert session.execute("buy AAPL lots")
        assert "must be a number" in output.getvalue()
        assert session.ledger.get_transactions() == []

    def test_usage_hint(self, session: PlaySession, output: io.StringIO):
        session.execute("sell AAPL")

        assert "Usage: sell" in output.getvalue()

    @pytest.mark.parametrize("line", ["quit", "exit", "QUIT"])
    def test_quit_ends_session(self, session: PlaySession, line: str):
        assert session.execute(line) is False

    @pytest.mark.parametrize("line", ["", "   ", "# comment"])
    def test_blank_lines_ignored(self, session: PlaySession, line: str):
        assert session.execute(line) is True

    def test_unknown_command(self, session: PlaySession, output: io.StringIO):
        assert session.execute("short AAPL 10")
        assert "Unknown command" in output.getvalue()

    @pytest.mark.parametrize("line", ["buy [/x] 100", "[/x]", "buy AAPL [/red]", "sell [b]X[/b] 1"])
    def test_markup_in_input_is_printed_literally(self, session: PlaySession, output: io.StringIO, line: str):
        assert session.execute(line) is True
        assert "[/" in output.getvalue()
        assert session.ledger.cash_balance == 10000.0

    def test_unbalanced_quotes(self, session: PlaySession, output: io.StringIO):
        assert session.execute('buy "AAPL 100')
        assert "Could not parse" in output.getvalue()

    def test_status_history_analytics(self, session: PlaySession, output: io.StringIO):
        session.execute("buy AAPL 1000")
        session.execute("buy BTC 4000")

        session.execute("status")
        session.execute("history")
        session.execute("analytics")

        text = output.getvalue()
        assert "Open Positions" in text
        assert "Transaction History" in text
        assert "Allocation by Category" in text
        assert "Risk level: High" in text

    def test_empty_views(self, session: PlaySession, output: io.StringIO):
        session.execute("status")
        session.execute("history")
        session.execute("analytics")

        text = output.getvalue()
        assert "No open positions" in text
        assert "No transactions yet" in text

    def test_market_filter(self, session: PlaySession, output: io.StringIO):
        session.execute("market crypto")

        text = output.getvalue()
        assert "BTC" in text
        assert "AAPL" not in text

    def test_refresh(self, session: PlaySession, output: io.StringIO):
        session.execute("buy AAPL 1000")
        session.feed.set_snapshot([
            MarketInstrument(symbol="AAPL", name="Apple Inc.", category="equity", current_price=120.0),
        ])

        session.execute("refresh")

        assert session.ledger.get_position("AAPL").value == pytest.approx(1200.0)
        assert "Prices updated" in output.getvalue()

    def test_refresh_failure_keeps_session(self, output: io.StringIO):
        ledger = Ledger()
        session = PlaySession(ledger, BrokenFeed(), output=Console(file=output, width=200))

        assert session.execute("refresh")
        assert "Price refresh failed" in output.getvalue()

    def test_run_script_stops_at_quit(self, session: PlaySession):
        executed = run_script(session, ["buy AAPL 100\n", "quit\n", "buy AAPL 100\n"])

        assert executed == 2
        assert session.ledger.get_position("AAPL").quantity == 1


# ============================================================================
# Click commands
# ============================================================================

@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text("[feed]\nlatency_seconds = 0\nseed = 11\n")
    return path


class TestCommands:

    def test_help_lists_commands(self):
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        for name in ("market", "play", "config"):
            assert name in result.output

    def test_market_category(self, config_file: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "market", "-c", "bond"])

        assert result.exit_code == 0
        assert "UST-10Y" in result.output
        assert "AAPL" not in result.output

    def test_play_script(self, config_file: Path, tmp_path: Path):
        script = tmp_path / "trades.txt"
        script.write_text("buy SPY 1000\nbuy SBI-FD 1000\nundo\nquit\n")

        result = CliRunner().invoke(cli, ["--config", str(config_file), "play", "--script", str(script)])

        assert result.exit_code == 0, result.output
        assert "Starting credits" in result.output
        assert "Reverted buy" in result.output

    def test_play_rejects_negative_balance(self, config_file: Path, tmp_path: Path):
        script = tmp_path / "trades.txt"
        script.write_text("quit\n")

        result = CliRunner().invoke(
            cli, ["--config", str(config_file), "play", "--balance", "-5", "--script", str(script)]
        )

        assert result.exit_code != 0

    def test_config_show(self, config_file: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "config", "show"])

        assert result.exit_code == 0
        assert "latency_seconds" in result.output
        assert "[feed]" in result.output

    def test_bare_config_shows(self, config_file: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "config"])

        assert result.exit_code == 0
        assert "Configuration" in result.output

    def test_config_init(self, tmp_path: Path):
        path = tmp_path / "new" / "config.toml"
        runner = CliRunner()

        first = runner.invoke(cli, ["--config", str(path), "config", "init"])
        second = runner.invoke(cli, ["--config", str(path), "config", "init"])

        assert first.exit_code == 0
        assert path.exists()
        assert "already exists" in second.output

    def test_invalid_config_warns(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[feed]\nrefresh_interval = -1\n")

        result = CliRunner().invoke(cli, ["--config", str(path), "config", "show"])

        assert result.exit_code == 0
        assert "Using defaults" in result.output
