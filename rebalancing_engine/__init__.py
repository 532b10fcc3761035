"""
Rebalancing Engine - Drift analysis and buy/sell/hold recommendations for portfolios.

Exports:
    Holding: Dataclass representing a priced position
    AnalysisResult: Drift analysis of current vs target allocation
    Recommendation: Priced, prioritized rebalancing recommendation
    RecommendationAction: A single BUY/SELL/HOLD action
    analyze: Deviation analyzer
    quick_analysis: Drift check without holdings or strategy
    RecommendationGenerator: Strategy-driven recommendation builder
    RebalancingService: Facade used by the presentation layer
    StrategyKey: THRESHOLD_BASED, TIME_BASED or HYBRID
    ConfigurationError, ComputationError: Fatal engine errors
"""

from .analyzer import analyze, classify
from .config import ActionType, AnalysisStatus, Complexity, EngineConfig, StrategyKey
from .exceptions import ComputationError, ConfigurationError, RebalancingError
from .generator import RecommendationGenerator
from .models import (
    AnalysisResult,
    DeviationEntry,
    Holding,
    Recommendation,
    RecommendationAction,
    StrategyInfo,
    ValidationWarning,
)
from .service import RebalancingService, quick_analysis, quick_analysis_from_holdings
from .sizing import FloorSizer, QuantitySizer, TrackingErrorSizer
from .strategies import (
    HybridStrategy,
    RebalanceStrategy,
    ThresholdStrategy,
    TimeStrategy,
    get_strategy,
    list_strategies,
    recommend_strategy,
)

__all__ = [
    "Holding",
    "DeviationEntry",
    "AnalysisResult",
    "ValidationWarning",
    "StrategyInfo",
    "Recommendation",
    "RecommendationAction",
    "ActionType",
    "AnalysisStatus",
    "Complexity",
    "EngineConfig",
    "StrategyKey",
    "RebalancingError",
    "ConfigurationError",
    "ComputationError",
    "analyze",
    "classify",
    "quick_analysis",
    "quick_analysis_from_holdings",
    "RecommendationGenerator",
    "RebalancingService",
    "QuantitySizer",
    "FloorSizer",
    "TrackingErrorSizer",
    "RebalanceStrategy",
    "ThresholdStrategy",
    "TimeStrategy",
    "HybridStrategy",
    "get_strategy",
    "list_strategies",
    "recommend_strategy",
]
