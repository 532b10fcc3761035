"""Threshold-based rebalancing: react as soon as any asset drifts too far."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Optional

from ..config import Complexity, StrategyKey
from ..models import AnalysisResult, StrategyInfo
from .base import RebalanceStrategy

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD_PERCENT = Decimal("5.0")
DEFAULT_REVIEW_INTERVAL_DAYS = 90


@dataclass(frozen=True)
class ThresholdStrategy(RebalanceStrategy):
    """Triggers when the largest absolute deviation exceeds ``threshold_percent``.

    Stateless; elapsed time is ignored.
    """

    threshold_percent: Decimal = DEFAULT_THRESHOLD_PERCENT
    review_interval_days: int = DEFAULT_REVIEW_INTERVAL_DAYS

    key = StrategyKey.THRESHOLD_BASED
    info = StrategyInfo(
        key=StrategyKey.THRESHOLD_BASED,
        name="Threshold-based",
        description=(
            "Recommends rebalancing when any asset drifts from its target weight "
            "by more than the configured threshold (default 5%). Responds quickly "
            "to market moves and keeps risk close to the intended profile."
        ),
        pros=(
            "Reacts immediately to market moves",
            "Efficient risk management",
            "Trades only when drift matters",
        ),
        cons=(
            "Requires frequent monitoring",
            "More trades in volatile markets",
        ),
        suitable_for=(
            "Active investors",
            "Investors who value responsiveness",
            "Large portfolios",
        ),
        complexity=Complexity.MEDIUM,
    )

    def should_rebalance(
        self,
        analysis: AnalysisResult,
        elapsed: Optional[timedelta] = None,
    ) -> bool:
        triggered = analysis.max_deviation > self.threshold_percent
        if triggered:
            logger.info(
                "Threshold trigger: %s deviates %s%% (threshold %s%%)",
                analysis.max_deviation_symbol,
                analysis.max_deviation,
                self.threshold_percent,
            )
        return triggered
