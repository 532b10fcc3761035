"""Hybrid rebalancing: threshold OR calendar trigger."""

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Optional

from ..config import Complexity, StrategyKey
from ..models import AnalysisResult, StrategyInfo
from .base import RebalanceStrategy
from .threshold import DEFAULT_THRESHOLD_PERCENT, ThresholdStrategy
from .time_based import DEFAULT_REVIEW_INTERVAL_DAYS, TimeStrategy


@dataclass(frozen=True)
class HybridStrategy(RebalanceStrategy):
    """Triggers when either the threshold leg or the time leg triggers.

    Without a last-rebalance timestamp only the threshold leg is evaluated.
    """

    threshold_percent: Decimal = DEFAULT_THRESHOLD_PERCENT
    review_interval_days: int = DEFAULT_REVIEW_INTERVAL_DAYS

    key = StrategyKey.HYBRID
    info = StrategyInfo(
        key=StrategyKey.HYBRID,
        name="Hybrid",
        description=(
            "Combines the time-based and threshold-based strategies: rebalances "
            "at every scheduled review (default 3 months) and in between whenever "
            "drift exceeds the threshold, balancing stability and responsiveness."
        ),
        pros=(
            "Balanced approach",
            "Flexible response",
            "Good timing",
        ),
        cons=(
            "More complex logic",
            "Parameters need tuning",
        ),
        suitable_for=(
            "Balanced investors",
            "Investors who want tailored management",
            "Mid-sized portfolios",
        ),
        complexity=Complexity.HIGH,
    )

    @property
    def threshold_leg(self) -> ThresholdStrategy:
        return ThresholdStrategy(
            threshold_percent=self.threshold_percent,
            review_interval_days=self.review_interval_days,
        )

    @property
    def time_leg(self) -> TimeStrategy:
        return TimeStrategy(review_interval_days=self.review_interval_days)

    def should_rebalance(
        self,
        analysis: AnalysisResult,
        elapsed: Optional[timedelta] = None,
    ) -> bool:
        if self.threshold_leg.should_rebalance(analysis):
            return True
        if elapsed is None:
            return False
        return self.time_leg.should_rebalance(analysis, elapsed)
