"""Entry points consumed by the presentation layer."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Union

from .allocation import ZERO, allocation_from_holdings, normalize_allocation, normalize_holdings
from .analyzer import analyze
from .config import ATTENTION_THRESHOLD, EngineConfig, StrategyKey
from .generator import RecommendationGenerator
from .models import AnalysisResult, Holding, Recommendation, StrategyInfo
from .strategies import get_strategy, list_strategies, recommend_strategy

logger = logging.getLogger(__name__)


def quick_analysis(
    current: Mapping[str, object],
    target: Mapping[str, object],
    attention_threshold: Decimal = ATTENTION_THRESHOLD,
) -> AnalysisResult:
    """Cheap drift check: no holdings, prices or strategy needed."""
    return analyze(current, target, attention_threshold)


def quick_analysis_from_holdings(
    holdings: Iterable[Holding],
    target: Mapping[str, object],
    attention_threshold: Decimal = ATTENTION_THRESHOLD,
) -> AnalysisResult:
    """Drift check with weights measured against the holdings' own market value.

    Holdings are validated the same way as for a full recommendation, so
    quantities and prices may be ints, floats, strings or Decimals. An empty
    (or zero-valued) set of holdings analyzes as 0% everywhere.
    """
    target_map, _ = normalize_allocation(target)
    positions = normalize_holdings(holdings, target_map)
    total = sum((h.market_value for h in positions.values()), start=ZERO)
    current = allocation_from_holdings(positions.values(), total) if total > 0 else {}
    return analyze(current, target, attention_threshold)


class RebalancingService:
    """Facade over the analyzer, the strategy catalog and the generator."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        generator: Optional[RecommendationGenerator] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.generator = generator or RecommendationGenerator(self.config)

    def analyze(self, current: Mapping[str, object], target: Mapping[str, object]) -> AnalysisResult:
        return analyze(current, target, self.config.ATTENTION_THRESHOLD)

    def quick_analysis(self, current: Mapping[str, object], target: Mapping[str, object]) -> AnalysisResult:
        return quick_analysis(current, target, self.config.ATTENTION_THRESHOLD)

    def quick_analysis_from_holdings(
        self, holdings: Iterable[Holding], target: Mapping[str, object]
    ) -> AnalysisResult:
        return quick_analysis_from_holdings(holdings, target, self.config.ATTENTION_THRESHOLD)

    def generate_recommendation(
        self,
        strategy_key: Union[StrategyKey, str],
        holdings: Iterable[Holding],
        target_allocation: Mapping[str, object],
        portfolio_total_value: object,
        **kwargs: Any,
    ) -> Recommendation:
        return self.generator.generate(
            strategy_key, holdings, target_allocation, portfolio_total_value, **kwargs
        )

    def is_rebalancing_needed(
        self,
        strategy_key: Union[StrategyKey, str],
        holdings: Iterable[Holding],
        target_allocation: Mapping[str, object],
        portfolio_total_value: object,
        last_rebalance: Optional[datetime] = None,
        strategy_parameters: Optional[Mapping[str, object]] = None,
    ) -> bool:
        """Evaluate only the strategy trigger, without sizing any trades."""
        recommendation = self.generator.generate(
            strategy_key,
            holdings,
            target_allocation,
            portfolio_total_value,
            last_rebalance=last_rebalance,
            price_lookup=None,
            strategy_parameters=strategy_parameters,
            build_actions=False,
        )
        logger.info("Rebalancing needed under %s: %s", recommendation.strategy_name, recommendation.rebalancing_needed)
        return recommendation.rebalancing_needed

    def list_strategies(self) -> dict[str, StrategyInfo]:
        return list_strategies()

    def strategy_infos(self) -> dict[str, dict[str, Any]]:
        return {key: info.to_dict() for key, info in list_strategies().items()}

    def recommend_strategy(
        self,
        portfolio_value: object,
        risk_tolerance: int = 3,
        investment_horizon_months: int = 36,
    ) -> dict[str, Any]:
        key = recommend_strategy(
            portfolio_value, risk_tolerance, investment_horizon_months, self.config
        )
        return {
            "recommendedStrategy": key.value,
            "strategyDescription": get_strategy(key).info.description,
            "portfolioValue": float(Decimal(str(portfolio_value))),
            "allStrategies": self.strategy_infos(),
        }
