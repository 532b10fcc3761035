"""Rebalancing strategy implementations."""

from .base import RebalanceStrategy
from .catalog import (
    DEFAULT_STRATEGY,
    STRATEGY_CATALOG,
    get_strategy,
    list_strategies,
    recommend_strategy,
    resolve_key,
)
from .hybrid import HybridStrategy
from .threshold import ThresholdStrategy
from .time_based import TimeStrategy

__all__ = [
    "RebalanceStrategy",
    "ThresholdStrategy",
    "TimeStrategy",
    "HybridStrategy",
    "STRATEGY_CATALOG",
    "DEFAULT_STRATEGY",
    "get_strategy",
    "list_strategies",
    "recommend_strategy",
    "resolve_key",
]
