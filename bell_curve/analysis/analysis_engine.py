"""
Analysis engine turning a daily price history into an outcome probability.

Returns are assumed normally distributed. Volatility scales with the square
root of time and mean returns compound over TRADING_DAYS_PER_YEAR.
"""

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.stats import norm

from ..exceptions import InsufficientData, InvalidInput
from ..models import AnalysisResult, DistributionPoint, PricePoint, ReturnPoint


logger = logging.getLogger(__name__)

TRADING_DAYS_PER_YEAR = 252
DISTRIBUTION_POINTS = 101
DISTRIBUTION_WIDTH_SIGMAS = 3.0


def returns_history(price_history: Sequence[PricePoint]) -> List[ReturnPoint]:
    """
    Calculate daily returns from a price history.

    The history is sorted ascending by timestamp first; the first return is 0.

    Args:
        price_history: Daily price points in any order

    Returns:
        One ReturnPoint per price point
    """
    ordered = sorted(price_history, key=lambda point: point.timestamp)
    closes = pd.Series([point.close for point in ordered], dtype=float)
    returns = (closes / closes.shift(1) - 1).fillna(0.0)

    return [
        ReturnPoint(date=point.timestamp, return_=float(value))
        for point, value in zip(ordered, returns)
    ]


def mean_return(history: Sequence[ReturnPoint]) -> float:
    """Mean of daily returns."""
    return float(np.mean([point.return_ for point in history]))


def std_return(history: Sequence[ReturnPoint]) -> float:
    """Sample standard deviation (ddof=1) of daily returns."""
    return float(pd.Series([point.return_ for point in history], dtype=float).std(ddof=1))


def scale_return(daily_return: float, days: float) -> float:
    """Compound a daily return over the given number of days."""
    return (1 + daily_return) ** days - 1


def scale_volatility(daily_volatility: float, days: float) -> float:
    """Scale a daily volatility to the given number of days."""
    return daily_volatility * math.sqrt(days)


def return_distribution(annual_volatility: float, days: int) -> List[Tuple[float, float]]:
    """
    Sample the normal distribution of returns over a horizon.

    The distribution is centered on zero: only dispersion is charted, not drift.

    Args:
        annual_volatility: Annualized standard deviation of returns
        days: Horizon in trading days

    Returns:
        DISTRIBUTION_POINTS (observation, probability density) pairs spanning ±3 sigma
    """
    mean = 0.0
    sigma = annual_volatility * math.sqrt(days / TRADING_DAYS_PER_YEAR)

    observations = np.linspace(
        mean - DISTRIBUTION_WIDTH_SIGMAS * sigma,
        mean + DISTRIBUTION_WIDTH_SIGMAS * sigma,
        DISTRIBUTION_POINTS
    )
    densities = norm.pdf(observations, loc=mean, scale=sigma)

    return [(float(x), float(y)) for x, y in zip(observations, densities)]


def price_distribution(
    current_price: float,
    distribution: Sequence[Tuple[float, float]]
) -> List[DistributionPoint]:
    """Map a return distribution onto prices relative to the current price."""
    return [
        DistributionPoint(
            observation=observation,
            probability_density=density,
            price=current_price * (1 + observation)
        )
        for observation, density in distribution
    ]


def expected_move(current_price: float, annual_volatility: float, days: int) -> Tuple[float, float]:
    """
    Calculate the one standard deviation price band over a horizon.

    Args:
        current_price: Current price of the security
        annual_volatility: Annualized standard deviation of returns
        days: Horizon in trading days

    Returns:
        (low, high) price band
    """
    move = annual_volatility * math.sqrt(days / TRADING_DAYS_PER_YEAR)
    return current_price * (1 - move), current_price * (1 + move)


def probability_of_outcome(current_price: float, target_price: float, periodic_volatility: float) -> float:
    """
    Probability of moving at least as far as the target in its direction.

    Above the mean (zero return) this is the upper tail, otherwise the lower tail.

    Args:
        current_price: Current price of the security
        target_price: Target price
        periodic_volatility: Standard deviation of returns over the horizon

    Returns:
        Probability in [0, 1]
    """
    mean = 0.0
    implied_return = target_price / current_price - 1
    prob = float(norm.cdf(implied_return, loc=mean, scale=periodic_volatility))

    if implied_return > mean:
        return 1 - prob
    return prob


class AnalysisEngine:
    """Engine for calculating return statistics and outcome probabilities."""

    def analyze(
        self,
        current_price: float,
        target_price: float,
        horizon_days: int,
        price_history: Sequence[PricePoint]
    ) -> AnalysisResult:
        """
        Analyze the probability of reaching a target price within a horizon.

        Args:
            current_price: Current price of the security
            target_price: Target price
            horizon_days: Horizon in trading days
            price_history: Daily price points in any order

        Returns:
            AnalysisResult with distribution, expected move and probability

        Raises:
            InvalidInput: If a price or the horizon is not finite and positive
            InsufficientData: If fewer than 2 price points are given or prices never move
        """
        for name, value in (("Current price", current_price), ("Target price", target_price),
                            ("Horizon", horizon_days)):
            if not math.isfinite(value):
                raise InvalidInput(f"{name} must be finite, got {value}")
        if current_price <= 0:
            raise InvalidInput(f"Current price must be positive, got {current_price}")
        if target_price <= 0:
            raise InvalidInput(f"Target price must be positive, got {target_price}")
        if horizon_days <= 0:
            raise InvalidInput(f"Horizon must be a positive number of days, got {horizon_days}")
        if len(price_history) < 2:
            raise InsufficientData(
                f"At least 2 price points are required, got {len(price_history)}"
            )
        if any(point.close <= 0 for point in price_history):
            raise InvalidInput("Closing prices must be positive")

        history = returns_history(price_history)
        stats = self.daily_statistics(history)

        if stats["std_daily_return"] == 0:
            raise InsufficientData("Price history has no variation in closing prices")

        std_annual_return = stats["std_annual_return"]
        std_periodic_return = scale_volatility(stats["std_daily_return"], horizon_days)
        implied_return = target_price / current_price - 1

        distribution = return_distribution(std_annual_return, horizon_days)

        result = AnalysisResult(
            price_distribution=price_distribution(current_price, distribution),
            expected_move=expected_move(current_price, std_annual_return, horizon_days),
            probability_of_outcome=probability_of_outcome(current_price, target_price, std_periodic_return),
            implied_return=implied_return,
            std_periodic_return=std_periodic_return,
            returns_history=history,
            **stats
        )

        logger.debug(
            f"Analysis: {len(price_history)} points, horizon {horizon_days}d, "
            f"implied return {implied_return:.2%}, probability {result.probability_of_outcome:.2%}"
        )
        return result

    def daily_statistics(self, history: Sequence[ReturnPoint]) -> dict:
        """
        Calculate daily and annualized return statistics.

        Args:
            history: Daily returns

        Returns:
            Dictionary with mean/std daily and annual returns
        """
        mean_daily = mean_return(history)
        std_daily = std_return(history)

        return {
            "mean_daily_return": mean_daily,
            "std_daily_return": std_daily,
            "mean_annual_return": scale_return(mean_daily, TRADING_DAYS_PER_YEAR),
            "std_annual_return": scale_volatility(std_daily, TRADING_DAYS_PER_YEAR),
        }
