"""Priced, prioritized rebalancing recommendations."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional, Union

from .allocation import (
    ZERO,
    allocation_from_holdings,
    normalize_allocation,
    normalize_holdings,
    normalize_symbol,
    to_decimal,
)
from .analyzer import analyze
from .config import ActionType, AnalysisStatus, EngineConfig, StrategyKey
from .exceptions import ComputationError, ConfigurationError
from .models import AnalysisResult, Holding, Recommendation, RecommendationAction
from .sizing import FloorSizer, QuantitySizer
from .strategies import RebalanceStrategy, get_strategy

logger = logging.getLogger(__name__)

URGENCY_NOTES: dict[AnalysisStatus, str] = {
    AnalysisStatus.URGENT: "Immediate rebalancing recommended",
    AnalysisStatus.NEEDED: "Rebalancing review needed",
    AnalysisStatus.OPTIONAL: "Optional rebalancing",
    AnalysisStatus.BALANCED: "Optional rebalancing",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _elapsed(now: datetime, last_rebalance: datetime) -> timedelta:
    # Naive timestamps are taken to be in the same zone as the clock (UTC by default)
    if now.tzinfo is not None and last_rebalance.tzinfo is None:
        last_rebalance = last_rebalance.replace(tzinfo=now.tzinfo)
    elif now.tzinfo is None and last_rebalance.tzinfo is not None:
        now = now.replace(tzinfo=last_rebalance.tzinfo)
    return now - last_rebalance


class RecommendationGenerator:
    """Builds a Recommendation from holdings, a target allocation and a strategy.

    Stateless between calls: the configuration, sizer, clock and id factory
    are fixed at construction and every input arrives with the request.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        sizer: Optional[QuantitySizer] = None,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self.config = config or EngineConfig()
        self.sizer = sizer or FloorSizer()
        self.clock = clock
        self.id_factory = id_factory

    def generate(
        self,
        strategy_key: Union[StrategyKey, str],
        holdings: Iterable[Holding],
        target_allocation: Mapping[str, object],
        portfolio_total_value: object,
        last_rebalance: Optional[datetime] = None,
        portfolio_id: Optional[str] = None,
        price_lookup: Optional[Mapping[str, object]] = None,
        strategy_parameters: Optional[Mapping[str, object]] = None,
        build_actions: bool = True,
    ) -> Recommendation:
        """Decide whether to rebalance and, if so, which trades to make.

        Args:
            strategy_key: THRESHOLD_BASED, TIME_BASED or HYBRID.
            holdings: Current positions with prices.
            target_allocation: Target weights in percent by symbol.
            portfolio_total_value: Value that weights are measured against.
            last_rebalance: When the portfolio was last rebalanced. Required
                by TIME_BASED; HYBRID ignores its time leg without it.
            portfolio_id: Echoed back on the recommendation.
            price_lookup: Prices for target symbols that are not held.
            strategy_parameters: Overrides for the strategy's trigger
                parameters (``threshold_percent``, ``review_interval_days``).
            build_actions: When False only the trigger is evaluated and no
                trades are sized, so prices of unheld symbols are not needed.

        Returns:
            Recommendation with actions sorted by priority.

        Raises:
            ConfigurationError: Empty target, unknown strategy, invalid
                parameters, missing price or missing last rebalance time.
            ComputationError: Non-positive portfolio value, invalid price or
                negative quantity.
        """
        target_map, _ = normalize_allocation(target_allocation)
        if not target_map:
            raise ConfigurationError("No target allocation set")

        total_value = to_decimal(portfolio_total_value, "portfolio_total_value")
        if total_value <= 0:
            raise ComputationError(f"Portfolio total value must be positive, got {total_value}")

        strategy = get_strategy(strategy_key).with_parameters(**(strategy_parameters or {}))
        positions = normalize_holdings(holdings, target_map)

        logger.info(
            "Generating recommendation for portfolio %s with %s (%d holdings)",
            portfolio_id,
            strategy.name,
            len(positions),
        )

        current = allocation_from_holdings(positions.values(), total_value)
        analysis = analyze(current, target_allocation, self.config.ATTENTION_THRESHOLD)

        now = self.clock()
        elapsed = _elapsed(now, last_rebalance) if last_rebalance is not None else None
        rebalancing_needed = strategy.should_rebalance(analysis, elapsed)

        actions: tuple[RecommendationAction, ...] = ()
        if rebalancing_needed and build_actions:
            prices = self._resolve_prices(analysis, positions, price_lookup or {})
            actions = self._build_actions(analysis, positions, prices, total_value)

        recommendation = Recommendation(
            recommendation_id=self.id_factory(),
            portfolio_id=portfolio_id,
            strategy_name=strategy.name,
            rebalancing_needed=rebalancing_needed,
            analysis=analysis,
            actions=actions,
            estimated_transaction_cost=self._transaction_cost(actions),
            created_at=now,
            next_review_date=now + timedelta(days=strategy.review_interval_days),
            strategy_details=strategy.parameters,
            priority=min((a.priority for a in actions), default=self.config.NEUTRAL_PRIORITY),
            notes=self._notes(strategy, analysis, actions, rebalancing_needed, elapsed),
        )

        logger.info(
            "Recommendation %s: rebalancing needed=%s, %d actions",
            recommendation.recommendation_id,
            rebalancing_needed,
            len(actions),
        )
        return recommendation

    def _resolve_prices(
        self,
        analysis: AnalysisResult,
        positions: dict[str, Holding],
        price_lookup: Mapping[str, object],
    ) -> dict[str, Decimal]:
        """Price every symbol that is held or has to be traded."""
        lookup = {normalize_symbol(s): p for s, p in price_lookup.items()}
        prices: dict[str, Decimal] = {}

        for entry in analysis.entries:
            symbol = entry.symbol
            if symbol in positions:
                prices[symbol] = positions[symbol].current_price
                continue
            if entry.abs_deviation == 0:
                continue
            if symbol not in lookup:
                raise ConfigurationError(
                    f"Symbol {symbol} in target allocation but not in holdings "
                    f"and no price provided in price_lookup"
                )

            price = to_decimal(lookup[symbol], f"price for {symbol}")
            if price <= 0 and entry.target_weight != 0:
                raise ComputationError(f"Price for {symbol} must be positive, got {price}")
            prices[symbol] = price

        return prices

    def _build_actions(
        self,
        analysis: AnalysisResult,
        positions: dict[str, Holding],
        prices: dict[str, Decimal],
        total_value: Decimal,
    ) -> tuple[RecommendationAction, ...]:
        target_quantities = self.sizer.target_quantities(
            prices, analysis.target_allocation, total_value
        )

        candidates: list[tuple[ActionType, str, Decimal, Decimal]] = []
        # analysis.entries is already ordered by |deviation| desc, symbol asc
        for entry in analysis.entries:
            if entry.abs_deviation == 0:
                continue

            symbol = entry.symbol
            current_qty = positions[symbol].quantity if symbol in positions else ZERO
            target_qty = target_quantities[symbol]
            change = target_qty - current_qty

            if change > 0:
                action_type = ActionType.BUY
            elif change < 0:
                action_type = ActionType.SELL
            else:
                if entry.abs_deviation <= self.config.HOLD_EPSILON:
                    continue
                action_type = ActionType.HOLD

            amount = abs(change) * prices[symbol]
            if action_type is not ActionType.HOLD and amount < self.config.MIN_TRADE_AMOUNT:
                logger.debug("Skipping %s %s: %s below minimum trade amount", action_type.value, symbol, amount)
                continue

            candidates.append((action_type, symbol, current_qty, target_qty))

        return tuple(
            RecommendationAction(
                action_type=action_type,
                symbol=symbol,
                current_quantity=current_qty,
                target_quantity=target_qty,
                current_price=prices[symbol],
                current_weight=analysis.current_allocation.get(symbol, ZERO),
                target_weight=analysis.target_allocation.get(symbol, ZERO),
                priority=rank,
            )
            for rank, (action_type, symbol, current_qty, target_qty) in enumerate(candidates, start=1)
        )

    def _transaction_cost(self, actions: tuple[RecommendationAction, ...]) -> Decimal:
        return sum(
            (
                action.estimated_amount * self.config.FEE_RATE
                for action in actions
                if action.action_type is not ActionType.HOLD
            ),
            start=ZERO,
        )

    def _notes(
        self,
        strategy: RebalanceStrategy,
        analysis: AnalysisResult,
        actions: tuple[RecommendationAction, ...],
        rebalancing_needed: bool,
        elapsed: Optional[timedelta],
    ) -> str:
        parts = []
        if elapsed is not None and strategy.key is not StrategyKey.THRESHOLD_BASED:
            parts.append(f"{elapsed.days} days since last rebalance")

        if not rebalancing_needed:
            parts.append(
                f"Max deviation {analysis.max_deviation:.2f}%"
                + (f" on {analysis.max_deviation_symbol}" if analysis.max_deviation_symbol else "")
            )
            return ", ".join(parts) + f" - no rebalancing required under {strategy.info.name} strategy"

        parts.append(f"Total deviation: {analysis.total_deviation:.2f}%")
        parts.append(f"{len(actions)} action(s)")
        return ", ".join(parts) + f" - {URGENCY_NOTES[analysis.status]}"
