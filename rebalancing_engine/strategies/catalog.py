"""Process-wide catalog of the built-in strategies."""

import logging
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Union

from ..allocation import to_decimal
from ..config import EngineConfig, StrategyKey
from ..exceptions import ConfigurationError
from ..models import StrategyInfo
from .base import RebalanceStrategy
from .hybrid import HybridStrategy
from .threshold import ThresholdStrategy
from .time_based import TimeStrategy

logger = logging.getLogger(__name__)

STRATEGY_CATALOG: Mapping[StrategyKey, RebalanceStrategy] = MappingProxyType(
    {
        StrategyKey.THRESHOLD_BASED: ThresholdStrategy(),
        StrategyKey.TIME_BASED: TimeStrategy(),
        StrategyKey.HYBRID: HybridStrategy(),
    }
)

DEFAULT_STRATEGY = StrategyKey.THRESHOLD_BASED


def resolve_key(key: Union[StrategyKey, str, None]) -> StrategyKey:
    """Parse a strategy key; strings are matched case-insensitively.

    Raises:
        ConfigurationError: If the key is empty or unknown.
    """
    if isinstance(key, StrategyKey):
        return key
    if key is None or not str(key).strip():
        raise ConfigurationError("No strategy specified")

    try:
        return StrategyKey(str(key).strip().upper())
    except ValueError:
        valid = ", ".join(k.value for k in StrategyKey)
        raise ConfigurationError(
            f"Unknown strategy: '{key}'. Valid strategies are: {valid}"
        ) from None


def get_strategy(key: Union[StrategyKey, str, None]) -> RebalanceStrategy:
    strategy = STRATEGY_CATALOG[resolve_key(key)]
    logger.debug("Selected strategy %s", strategy.name)
    return strategy


def list_strategies() -> dict[str, StrategyInfo]:
    return {key.value: strategy.info for key, strategy in STRATEGY_CATALOG.items()}


def recommend_strategy(
    portfolio_value: object,
    risk_tolerance: int = 3,
    investment_horizon_months: int = 36,
    config: EngineConfig = EngineConfig(),
) -> StrategyKey:
    """Suggest a strategy from portfolio size and investor profile.

    Args:
        portfolio_value: Total portfolio value.
        risk_tolerance: 1 (conservative) to 5 (aggressive).
        investment_horizon_months: Expected holding period.
        config: Supplies the small-portfolio and long-horizon cut-offs.

    Returns:
        The recommended StrategyKey.
    """
    if not 1 <= risk_tolerance <= 5:
        raise ConfigurationError(f"risk_tolerance must be between 1 and 5, got {risk_tolerance}")

    value: Decimal = to_decimal(portfolio_value, "portfolio_value")

    if value < config.SMALL_PORTFOLIO_VALUE and risk_tolerance <= 2:
        recommended = StrategyKey.TIME_BASED
    elif investment_horizon_months >= config.LONG_HORIZON_MONTHS and risk_tolerance <= 3:
        recommended = StrategyKey.HYBRID
    elif risk_tolerance >= 4:
        recommended = StrategyKey.THRESHOLD_BASED
    else:
        recommended = StrategyKey.HYBRID

    logger.info(
        "Recommended %s for value=%s risk=%d horizon=%d months",
        recommended.value,
        value,
        risk_tolerance,
        investment_horizon_months,
    )
    return recommended
