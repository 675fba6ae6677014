"""
Core system that loads price data for a ticker and analyzes target outcomes.
"""

import logging
from typing import Optional, Sequence

from .analysis import AnalysisEngine
from .analysis.analysis_engine import returns_history
from .config.models import BellCurveConfig
from .exceptions import InsufficientData, InvalidInput
from .models import AnalysisResult, InitialState, PricePoint
from .persistence import RecordKind, RecordStore
from .price_source import PriceSource, build_price_source
from .retrieval import RetrievalCache

logger = logging.getLogger(__name__)


class AnalysisSystem:
    """Consumer interface combining the retrieval cache and the analysis engine."""

    def __init__(
        self,
        config: Optional[BellCurveConfig] = None,
        retrieval_cache: Optional[RetrievalCache] = None,
        analysis_engine: Optional[AnalysisEngine] = None,
        price_source: Optional[PriceSource] = None
    ):
        """
        Initialize the analysis system.

        Args:
            config: Configuration (optional, uses defaults if None)
            retrieval_cache: Retrieval cache (optional, built from config if None)
            analysis_engine: Analysis engine (optional, creates default if None)
            price_source: Remote source used when building the retrieval cache
        """
        self.config = config or BellCurveConfig()

        if retrieval_cache is None:
            retrieval_cache = RetrievalCache(
                source=price_source or build_price_source(self.config),
                store=RecordStore(self.config.cache_dir),
                config=self.config
            )

        self.retrieval_cache = retrieval_cache
        self.analysis_engine = analysis_engine or AnalysisEngine()

    def initialize(self, ticker: str, horizon_days: Optional[int] = None) -> InitialState:
        """
        Load price history and current price for a ticker.

        Args:
            ticker: Stock ticker symbol
            horizon_days: Horizon in trading days (defaults to the configured horizon)

        Returns:
            InitialState with statistics and a default target price
        """
        ticker = ticker.upper()
        if horizon_days is None:
            horizon_days = self.config.default_horizon_days
        if horizon_days <= 0:
            raise InvalidInput(f"Horizon must be a positive number of days, got {horizon_days}")

        history = self.retrieval_cache.retrieve(ticker, RecordKind.PRICE_HISTORY)
        if len(history.points) < 2:
            raise InsufficientData(f"Not enough price history for {ticker}")

        current = self.retrieval_cache.retrieve(ticker, RecordKind.CURRENT_PRICE)
        current_price = current.latest_close
        if current_price <= 0:
            raise InvalidInput(f"Current price for {ticker} must be positive, got {current_price}")

        if history.stale or current.stale:
            logger.warning(f"Serving stale price data for {ticker}")

        stats = self.analysis_engine.daily_statistics(returns_history(history.points))

        state = InitialState(
            ticker=ticker,
            current_price=current_price,
            target_price=current_price * (1 + self.config.initial_target_return),
            horizon_days=horizon_days,
            price_history=history.points,
            **stats
        )

        logger.info(
            f"Initialized {ticker}: current price {current_price:.2f}, "
            f"{len(history.points)} history points"
        )
        return state

    def analyze(
        self,
        current_price: float,
        target_price: float,
        horizon_days: int,
        price_history: Sequence[PricePoint]
    ) -> AnalysisResult:
        """Analyze the probability of reaching a target price within a horizon."""
        return self.analysis_engine.analyze(current_price, target_price, horizon_days, price_history)

    def analyze_state(
        self,
        state: InitialState,
        target_price: Optional[float] = None,
        horizon_days: Optional[int] = None
    ) -> AnalysisResult:
        """
        Re-analyze a loaded state for a new target price or horizon without refetching.

        Args:
            state: State returned by initialize
            target_price: Overrides the state's target price
            horizon_days: Overrides the state's horizon

        Returns:
            AnalysisResult for the loaded price history
        """
        return self.analyze(
            state.current_price,
            target_price if target_price is not None else state.target_price,
            horizon_days if horizon_days is not None else state.horizon_days,
            state.price_history
        )
