"""
Unit tests for CLI interface functionality.
"""

import pytest
import argparse
from datetime import datetime, timedelta
from unittest.mock import Mock, patch

from bell_curve.cli.cli import (
    create_parser,
    format_analysis_result,
    format_cache_info,
    format_initial_state,
    main,
    parse_horizon,
)
from bell_curve.analysis import AnalysisEngine
from bell_curve.config.models import BellCurveConfig
from bell_curve.exceptions import SourceUnavailable
from bell_curve.models import InitialState, PricePoint


def make_state(closes=(100.0, 102.0, 101.0, 103.0)):
    points = [
        PricePoint(
            timestamp=datetime(2024, 1, 2) + timedelta(days=i),
            open=c, high=c, low=c, close=c, volume=1.0
        )
        for i, c in enumerate(closes)
    ]
    return InitialState(
        ticker="SPY",
        current_price=103.0,
        target_price=113.3,
        horizon_days=30,
        price_history=points,
        mean_daily_return=0.0007,
        std_daily_return=0.015,
        mean_annual_return=0.19,
        std_annual_return=0.238,
    )


class TestHorizonParsing:
    """Test horizon parsing functionality."""

    def test_parse_plain_days(self):
        assert parse_horizon("30") == 30
        assert parse_horizon(" 5 ") == 5

    def test_parse_days_suffix(self):
        assert parse_horizon("30d") == 30
        assert parse_horizon("90D") == 90

    def test_parse_months_and_years(self):
        """Test that months and years convert to trading days."""
        assert parse_horizon("6m") == 126
        assert parse_horizon("1y") == 252
        assert parse_horizon("2Y") == 504

    def test_parse_invalid_format(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_horizon("invalid")

        with pytest.raises(argparse.ArgumentTypeError):
            parse_horizon("d")

        with pytest.raises(argparse.ArgumentTypeError):
            parse_horizon("abc30d")

    def test_parse_non_positive(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_horizon("0")

        with pytest.raises(argparse.ArgumentTypeError):
            parse_horizon("-5d")


class TestParser:
    """Test argument parser configuration."""

    def test_parser_arguments(self):
        parser = create_parser()
        args = parser.parse_args(["--ticker", "AAPL", "--days", "3m", "--target", "250"])

        assert args.ticker == "AAPL"
        assert args.days == 63
        assert args.target == 250.0
        assert args.log_level == "INFO"

    def test_parser_defaults(self):
        args = create_parser().parse_args([])

        assert args.ticker is None
        assert args.days is None
        assert args.target is None
        assert args.cache_info is None


class TestFormatting:
    """Test output formatting."""

    def test_format_initial_state(self):
        output = format_initial_state(make_state())

        assert "SPY" in output
        assert "Current Price: $103.00" in output
        assert "4 days (2024-01-02 to 2024-01-05)" in output
        assert "Annual Volatility: 23.80%" in output

    def test_format_analysis_result(self):
        state = make_state()
        result = AnalysisEngine().analyze(103.0, 113.3, 30, state.price_history)

        output = format_analysis_result(result, 103.0, 113.3, 30)

        assert "30 trading days" in output
        assert "Target Price: $113.30 (+10.00%)" in output
        assert "Expected Move" in output
        assert "at or above" in output

    def test_format_analysis_result_below(self):
        state = make_state()
        result = AnalysisEngine().analyze(103.0, 95.0, 30, state.price_history)

        assert "at or below" in format_analysis_result(result, 103.0, 95.0, 30)

    def test_format_cache_info(self):
        info = {
            "ticker": "SPY",
            "cached": True,
            "records": {
                "priceHistory": {"cached": True, "fetched_at": "2024-01-02T00:00:00", "payload_lines": 253},
                "currentPrice": {"cached": False},
            },
        }

        output = format_cache_info(info)

        assert "priceHistory: fetched 2024-01-02T00:00:00 (253 lines)" in output
        assert "currentPrice: not cached" in output


class TestMain:
    """Test the CLI entry point."""

    @pytest.fixture
    def config(self, tmp_path):
        return BellCurveConfig(cache_dir=str(tmp_path))

    @pytest.fixture
    def load_config(self, config):
        with patch("bell_curve.cli.cli.ConfigurationManager") as manager_cls:
            manager_cls.return_value.load_config.return_value = config
            yield manager_cls

    def test_main_analyzes_ticker(self, load_config, capsys):
        state = make_state()
        system = Mock()
        system.initialize.return_value = state
        system.analyze_state.return_value = AnalysisEngine().analyze(
            103.0, 120.0, 30, state.price_history
        )

        with patch("bell_curve.cli.cli.AnalysisSystem", return_value=system):
            main(["--ticker", "spy", "--days", "30", "--target", "120"])

        system.initialize.assert_called_once_with("spy", 30)
        system.analyze_state.assert_called_once_with(state, target_price=120.0)
        output = capsys.readouterr().out
        assert "OUTCOME ANALYSIS" in output
        assert "Target Price: $120.00" in output

    def test_main_uses_default_target(self, load_config):
        state = make_state()
        system = Mock()
        system.initialize.return_value = state
        system.analyze_state.return_value = AnalysisEngine().analyze(
            103.0, 113.3, 30, state.price_history
        )

        with patch("bell_curve.cli.cli.AnalysisSystem", return_value=system):
            main(["--ticker", "SPY"])

        system.analyze_state.assert_called_once_with(state, target_price=113.3)

    def test_main_exits_on_error(self, load_config):
        system = Mock()
        system.initialize.side_effect = SourceUnavailable("Error: 500")

        with patch("bell_curve.cli.cli.AnalysisSystem", return_value=system):
            with pytest.raises(SystemExit) as exc_info:
                main(["--ticker", "SPY"])

        assert exc_info.value.code == 1

    def test_main_cache_info(self, load_config, capsys):
        main(["--cache-info", "spy"])

        output = capsys.readouterr().out
        assert "CACHE INFO - SPY" in output
        assert "priceHistory: not cached" in output

    def test_main_without_ticker_prints_help(self, load_config, capsys):
        main([])

        assert "usage" in capsys.readouterr().out.lower()
