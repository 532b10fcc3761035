"""Calendar rebalancing: rebalance on a fixed review interval."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from ..config import Complexity, StrategyKey
from ..exceptions import ConfigurationError
from ..models import AnalysisResult, StrategyInfo
from .base import RebalanceStrategy

logger = logging.getLogger(__name__)

DEFAULT_REVIEW_INTERVAL_DAYS = 90


@dataclass(frozen=True)
class TimeStrategy(RebalanceStrategy):
    """Triggers once ``review_interval_days`` have passed since the last rebalance.

    Deviation magnitude is ignored. The engine does not track rebalance
    history, so the caller must supply the elapsed time.
    """

    review_interval_days: int = DEFAULT_REVIEW_INTERVAL_DAYS

    key = StrategyKey.TIME_BASED
    info = StrategyInfo(
        key=StrategyKey.TIME_BASED,
        name="Time-based",
        description=(
            "Rebalances on a fixed schedule (default every 3 months). A predictable "
            "calendar keeps emotion out of investment decisions and suits "
            "long-term investors."
        ),
        pros=(
            "Predictable schedule",
            "Avoids emotional decisions",
            "Simple to manage",
        ),
        cons=(
            "Can miss market timing",
            "Slow to respond to sharp moves",
        ),
        suitable_for=(
            "Long-term investors",
            "Investors who prefer low-maintenance management",
            "Conservative investors",
        ),
        complexity=Complexity.LOW,
    )

    @property
    def review_interval(self) -> timedelta:
        return timedelta(days=self.review_interval_days)

    def should_rebalance(
        self,
        analysis: AnalysisResult,
        elapsed: Optional[timedelta] = None,
    ) -> bool:
        if elapsed is None:
            raise ConfigurationError(
                f"{self.name} strategy requires the last rebalance timestamp"
            )

        triggered = elapsed >= self.review_interval
        logger.info(
            "Time trigger: %d days since last rebalance (interval %d days) -> %s",
            elapsed.days,
            self.review_interval_days,
            triggered,
        )
        return triggered
