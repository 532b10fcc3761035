"""Data models for the rebalancing engine."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .config import ActionType, AnalysisStatus, Complexity, StrategyKey

AllocationMap = dict[str, Decimal]


def _frozen_map(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


def _num(value: Decimal) -> float:
    return float(value)


def _alloc_dict(allocation: Mapping[str, Decimal]) -> dict[str, float]:
    return {symbol: _num(weight) for symbol, weight in allocation.items()}


@dataclass(frozen=True)
class Holding:
    """A position supplied by the caller at recommendation time."""

    symbol: str
    quantity: Decimal
    current_price: Decimal

    @property
    def market_value(self) -> Decimal:
        return Decimal(self.quantity) * self.current_price


@dataclass(frozen=True)
class ValidationWarning:
    """Non-fatal input problem returned alongside a result."""

    code: str
    message: str
    symbol: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "symbol": self.symbol}


@dataclass(frozen=True)
class DeviationEntry:
    symbol: str
    current_weight: Decimal
    target_weight: Decimal

    @property
    def deviation(self) -> Decimal:
        """Positive when over-allocated (sell), negative when under-allocated (buy)."""
        return self.current_weight - self.target_weight

    @property
    def abs_deviation(self) -> Decimal:
        return abs(self.deviation)

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "currentWeight": _num(self.current_weight),
            "targetWeight": _num(self.target_weight),
            "deviation": _num(self.deviation),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Drift analysis of a current allocation against a target allocation."""

    current_allocation: Mapping[str, Decimal]
    target_allocation: Mapping[str, Decimal]
    entries: tuple[DeviationEntry, ...]
    max_deviation: Decimal
    max_deviation_symbol: Optional[str]
    needs_attention: bool
    status: AnalysisStatus
    target_total: Decimal
    warnings: tuple[ValidationWarning, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "current_allocation", _frozen_map(self.current_allocation))
        object.__setattr__(self, "target_allocation", _frozen_map(self.target_allocation))

    @property
    def deviations(self) -> AllocationMap:
        return {entry.symbol: entry.deviation for entry in self.entries}

    @property
    def total_deviation(self) -> Decimal:
        return sum((entry.abs_deviation for entry in self.entries), start=Decimal("0"))

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentAllocation": _alloc_dict(self.current_allocation),
            "targetAllocation": _alloc_dict(self.target_allocation),
            "deviations": _alloc_dict(self.deviations),
            "maxDeviation": _num(self.max_deviation),
            "maxDeviationSymbol": self.max_deviation_symbol,
            "needsAttention": self.needs_attention,
            "status": self.status.value,
            "totalDeviation": _num(self.total_deviation),
            "targetTotal": _num(self.target_total),
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass(frozen=True)
class StrategyInfo:
    """Human-readable strategy metadata, returned verbatim by the catalog."""

    key: StrategyKey
    name: str
    description: str
    pros: tuple[str, ...]
    cons: tuple[str, ...]
    suitable_for: tuple[str, ...]
    complexity: Complexity

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "pros": list(self.pros),
            "cons": list(self.cons),
            "suitableFor": list(self.suitable_for),
            "complexity": self.complexity.value,
        }


@dataclass(frozen=True)
class RecommendationAction:
    """A single priced trade (or hold) for one symbol."""

    action_type: ActionType
    symbol: str
    current_quantity: Decimal
    target_quantity: Decimal
    current_price: Decimal
    current_weight: Decimal
    target_weight: Decimal
    priority: int

    @property
    def quantity_change(self) -> Decimal:
        return self.target_quantity - self.current_quantity

    @property
    def estimated_amount(self) -> Decimal:
        return abs(self.quantity_change) * self.current_price

    @property
    def deviation(self) -> Decimal:
        return self.current_weight - self.target_weight

    def __str__(self) -> str:
        return (
            f"{self.action_type.value} {abs(self.quantity_change)} {self.symbol} "
            f"(${self.estimated_amount:.2f}, deviation: {self.deviation:+.2f}%)"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "actionType": self.action_type.value,
            "symbol": self.symbol,
            "currentQuantity": _num(self.current_quantity),
            "targetQuantity": _num(self.target_quantity),
            "quantityChange": _num(self.quantity_change),
            "currentPrice": _num(self.current_price),
            "estimatedAmount": _num(self.estimated_amount),
            "currentWeight": _num(self.current_weight),
            "targetWeight": _num(self.target_weight),
            "deviation": _num(self.deviation),
            "priority": self.priority,
        }


@dataclass(frozen=True)
class Recommendation:
    """Complete output of one ``generate`` call. Never mutated after construction."""

    recommendation_id: str
    portfolio_id: Optional[str]
    strategy_name: str
    rebalancing_needed: bool
    analysis: AnalysisResult
    actions: tuple[RecommendationAction, ...]
    estimated_transaction_cost: Decimal
    created_at: datetime
    next_review_date: datetime
    strategy_details: Mapping[str, Any]
    priority: int
    notes: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategy_details", _frozen_map(self.strategy_details))

    @property
    def current_allocation(self) -> Mapping[str, Decimal]:
        return self.analysis.current_allocation

    @property
    def target_allocation(self) -> Mapping[str, Decimal]:
        return self.analysis.target_allocation

    @property
    def deviations(self) -> AllocationMap:
        return self.analysis.deviations

    @property
    def total_deviation_percent(self) -> Decimal:
        return self.analysis.total_deviation

    @property
    def status(self) -> AnalysisStatus:
        return self.analysis.status

    @property
    def warnings(self) -> tuple[ValidationWarning, ...]:
        return self.analysis.warnings

    def to_dict(self) -> dict[str, Any]:
        return {
            "recommendationId": self.recommendation_id,
            "portfolioId": self.portfolio_id,
            "strategyName": self.strategy_name,
            "rebalancingNeeded": self.rebalancing_needed,
            "totalDeviationPercent": _num(self.total_deviation_percent),
            "currentAllocation": _alloc_dict(self.current_allocation),
            "targetAllocation": _alloc_dict(self.target_allocation),
            "deviations": _alloc_dict(self.deviations),
            "actions": [action.to_dict() for action in self.actions],
            "estimatedTransactionCost": _num(self.estimated_transaction_cost),
            "createdAt": self.created_at.isoformat(),
            "nextReviewDate": self.next_review_date.isoformat(),
            "strategyDetails": {
                k: _num(v) if isinstance(v, Decimal) else v
                for k, v in self.strategy_details.items()
            },
            "priority": self.priority,
            "notes": self.notes,
            "status": self.status.value,
            "warnings": [w.to_dict() for w in self.warnings],
        }
