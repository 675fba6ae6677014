"""
Command-line interface implementation.
"""

import argparse
import logging
import sys
from typing import Optional

from ..analysis_system import AnalysisSystem
from ..config import ConfigurationManager
from ..exceptions import BellCurveError
from ..models import AnalysisResult, InitialState
from ..persistence import RecordStore


def setup_logging(level: str = "INFO") -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def parse_horizon(horizon_str: str) -> int:
    """Parse a horizon string ('30', '30d', '6m', '1y') into trading days."""
    horizon_str = horizon_str.lower().strip()
    raw = horizon_str

    multipliers = {'d': 1, 'm': 21, 'y': 252}
    multiplier = 1
    if horizon_str and horizon_str[-1] in multipliers:
        multiplier = multipliers[horizon_str[-1]]
        horizon_str = horizon_str[:-1]

    try:
        days = int(horizon_str) * multiplier
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid horizon format: {raw}. Use format like '30', '30d', '6m', '1y'"
        )

    if days <= 0:
        raise argparse.ArgumentTypeError("Horizon must be a positive number of days")
    return days


def format_initial_state(state: InitialState) -> str:
    """Format the loaded state for display."""
    first = state.price_history[0].timestamp.date()
    last = state.price_history[-1].timestamp.date()

    lines = []
    lines.append(f"\n📈 {state.ticker}")
    lines.append("=" * 50)
    lines.append(f"Current Price: ${state.current_price:.2f}")
    lines.append(f"Price History: {len(state.price_history)} days ({first} to {last})")
    lines.append(f"Mean Daily Return: {state.mean_daily_return:.4%}")
    lines.append(f"Daily Volatility: {state.std_daily_return:.4%}")
    lines.append(f"Mean Annual Return: {state.mean_annual_return:.2%}")
    lines.append(f"Annual Volatility: {state.std_annual_return:.2%}")
    return "\n".join(lines)


def format_analysis_result(result: AnalysisResult, current_price: float, target_price: float,
                           horizon_days: int) -> str:
    """Format analysis result for display."""
    low, high = result.expected_move
    direction = "at or above" if target_price > current_price else "at or below"

    lines = []
    lines.append("")
    lines.append(f"🎯 OUTCOME ANALYSIS - {horizon_days} trading days")
    lines.append("=" * 50)
    lines.append(f"Target Price: ${target_price:.2f} ({result.implied_return:+.2%})")
    lines.append(f"Expected Move (1σ): ${low:.2f} - ${high:.2f}")
    lines.append(f"Horizon Volatility: {result.std_periodic_return:.2%}")
    lines.append(f"Probability of finishing {direction} target: {result.probability_of_outcome:.1%}")
    return "\n".join(lines)


def format_cache_info(info: dict) -> str:
    """Format record store information for display."""
    lines = [f"\n🗄️  CACHE INFO - {info['ticker']}", "=" * 50]
    for kind, record in info['records'].items():
        if record['cached']:
            lines.append(f"{kind}: fetched {record['fetched_at']} ({record['payload_lines']} lines)")
        else:
            lines.append(f"{kind}: not cached")
    return "\n".join(lines)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="BellCurve - Probability of a stock reaching a target price"
    )

    parser.add_argument(
        "--ticker",
        type=str,
        help="Ticker symbol to analyze (e.g., SPY)"
    )

    parser.add_argument(
        "--days",
        type=parse_horizon,
        help="Horizon in trading days (e.g., '30', '30d', '6m', '1y')"
    )

    parser.add_argument(
        "--target",
        type=float,
        help="Target price (defaults to current price plus the configured target return)"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file"
    )

    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate configuration file and exit"
    )

    parser.add_argument(
        "--cache-info",
        type=str,
        help="Show cache information for a specific ticker"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level"
    )

    return parser


def main(argv: Optional[list] = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    config = ConfigurationManager().load_config(args.config)

    if args.validate_config:
        print(f"Configuration is valid: {config.model_dump(exclude={'api_key'})}")
        return

    if args.cache_info:
        info = RecordStore(config.cache_dir).get_cache_info(args.cache_info)
        print(format_cache_info(info))
        return

    if not args.ticker:
        parser.print_help()
        return

    try:
        system = AnalysisSystem(config)
        state = system.initialize(args.ticker, args.days)

        target_price = args.target if args.target is not None else state.target_price
        result = system.analyze_state(state, target_price=target_price)

        print(format_initial_state(state))
        print(format_analysis_result(result, state.current_price, target_price, state.horizon_days))

    except BellCurveError as e:
        logger.error(f"Analysis of {args.ticker} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
