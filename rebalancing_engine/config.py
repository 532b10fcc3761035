"""Configuration constants for the rebalancing engine."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class StrategyKey(Enum):
    """Built-in rebalancing strategies."""

    THRESHOLD_BASED = "THRESHOLD_BASED"
    TIME_BASED = "TIME_BASED"
    HYBRID = "HYBRID"


class Complexity(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ActionType(Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class AnalysisStatus(Enum):
    """Portfolio-level drift classification, most severe first."""

    URGENT = "URGENT"
    NEEDED = "NEEDED"
    OPTIONAL = "OPTIONAL"
    BALANCED = "BALANCED"


# Drift classification thresholds (percentage points of max deviation)
URGENT_THRESHOLD = Decimal("15.0")
NEEDED_THRESHOLD = Decimal("10.0")
OPTIONAL_THRESHOLD = Decimal("5.0")
ATTENTION_THRESHOLD = NEEDED_THRESHOLD

# Target allocations should sum to 100 within this tolerance
ALLOCATION_SUM_TOLERANCE = Decimal("0.01")
FULL_ALLOCATION = Decimal("100")

# Zero-change actions below this |deviation| are dropped as noise
HOLD_EPSILON = Decimal("0.01")

NEUTRAL_PRIORITY = 5


@dataclass(frozen=True)
class EngineConfig:
    """Per-deployment settings injected into the recommendation generator."""

    ATTENTION_THRESHOLD: Decimal = ATTENTION_THRESHOLD
    FEE_RATE: Decimal = Decimal("0")
    MIN_TRADE_AMOUNT: Decimal = Decimal("0")
    HOLD_EPSILON: Decimal = HOLD_EPSILON
    NEUTRAL_PRIORITY: int = NEUTRAL_PRIORITY
    SMALL_PORTFOLIO_VALUE: Decimal = Decimal("100000000")
    LONG_HORIZON_MONTHS: int = 60
