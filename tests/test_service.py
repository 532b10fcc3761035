import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from rebalancing_engine.analyzer import analyze
from rebalancing_engine.config import EngineConfig
from rebalancing_engine.exceptions import ComputationError, ConfigurationError
from rebalancing_engine.models import Holding
from rebalancing_engine.service import (
    RebalancingService,
    quick_analysis,
    quick_analysis_from_holdings,
)

CURRENT = {"AAPL": 35.5, "MSFT": 28.2, "GOOGL": 18.3, "TSLA": 12.0, "NVDA": 6.0}
TARGET = {"AAPL": 30, "MSFT": 25, "GOOGL": 20, "TSLA": 15, "NVDA": 10}


class TestQuickAnalysis:
    def test_same_as_analyzer(self):
        assert quick_analysis(CURRENT, TARGET) == analyze(CURRENT, TARGET)

    def test_from_holdings(self):
        holdings = [
            Holding("AAPL", Decimal("30"), Decimal("100")),
            Holding("MSFT", Decimal("10"), Decimal("100")),
        ]
        result = quick_analysis_from_holdings(holdings, {"AAPL": 50, "MSFT": 50})
        assert result.current_allocation == {"AAPL": Decimal("75"), "MSFT": Decimal("25")}
        assert result.max_deviation == Decimal("25")
        assert result.needs_attention is True

    def test_from_holdings_with_plain_numbers(self):
        holdings = [Holding("AAPL", 30, 100.0), Holding("msft", "10", 100)]
        result = quick_analysis_from_holdings(holdings, {"AAPL": 50, "MSFT": 50})
        assert result.current_allocation == {"AAPL": Decimal("75"), "MSFT": Decimal("25")}
        assert result.max_deviation == Decimal("25")

    def test_from_holdings_negative_quantity(self):
        holdings = [Holding("AAPL", -1, 100.0)]
        with pytest.raises(ComputationError, match="non-negative"):
            quick_analysis_from_holdings(holdings, {"AAPL": 100})

    def test_from_holdings_duplicate_symbol(self):
        holdings = [Holding("AAPL", 1, 100), Holding("aapl", 2, 100)]
        with pytest.raises(ConfigurationError, match="Duplicate"):
            quick_analysis_from_holdings(holdings, {"AAPL": 100})

    def test_from_no_holdings(self):
        result = quick_analysis_from_holdings([], {"AAPL": 100})
        assert result.current_allocation == {}
        assert result.deviations == {"AAPL": Decimal("-100")}


class TestRebalancingService:
    def test_generate_recommendation(self):
        service = RebalancingService()
        holdings = [
            Holding("AAPL", Decimal("10"), Decimal("100")),
            Holding("MSFT", Decimal("5"), Decimal("200")),
        ]
        rec = service.generate_recommendation(
            "HYBRID", holdings, {"AAPL": 70, "MSFT": 30}, 2000, portfolio_id="p-1"
        )
        assert rec.portfolio_id == "p-1"
        assert rec.strategy_name == "HYBRID"
        assert len(rec.actions) == 2

    def test_is_rebalancing_needed_without_prices(self):
        service = RebalancingService()
        holdings = [Holding("AAPL", Decimal("10"), Decimal("100"))]
        # NVDA has no price, but no trades are sized
        assert service.is_rebalancing_needed(
            "THRESHOLD_BASED", holdings, {"AAPL": 50, "NVDA": 50}, 1000
        ) is True

    def test_is_rebalancing_needed_time_based(self):
        service = RebalancingService()
        holdings = [Holding("AAPL", Decimal("10"), Decimal("100"))]
        last = datetime.now(timezone.utc) - timedelta(days=10)
        assert service.is_rebalancing_needed(
            "TIME_BASED", holdings, {"AAPL": 100}, 1000, last_rebalance=last
        ) is False

    def test_custom_attention_threshold(self):
        service = RebalancingService(EngineConfig(ATTENTION_THRESHOLD=Decimal("5")))
        assert service.analyze(CURRENT, TARGET).needs_attention is True
        assert service.quick_analysis(CURRENT, TARGET).needs_attention is True
        # the module-level function keeps the canonical threshold
        assert quick_analysis(CURRENT, TARGET).needs_attention is False

    def test_strategy_infos(self):
        infos = RebalancingService().strategy_infos()
        assert set(infos) == {"THRESHOLD_BASED", "TIME_BASED", "HYBRID"}
        assert infos["TIME_BASED"]["complexity"] == "LOW"
        assert isinstance(infos["HYBRID"]["pros"], list)

    def test_recommend_strategy(self):
        result = RebalancingService().recommend_strategy(50_000_000, risk_tolerance=1)
        assert result["recommendedStrategy"] == "TIME_BASED"
        assert result["portfolioValue"] == 50_000_000.0
        assert set(result["allStrategies"]) == {"THRESHOLD_BASED", "TIME_BASED", "HYBRID"}

    def test_recommend_strategy_invalid_risk(self):
        with pytest.raises(ConfigurationError):
            RebalancingService().recommend_strategy(1000, risk_tolerance=9)
