"""Allocation maps: normalization, validation and per-asset deviation."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Iterable, Mapping, Optional

from .config import ALLOCATION_SUM_TOLERANCE, FULL_ALLOCATION
from .exceptions import ComputationError, ConfigurationError
from .models import AllocationMap, DeviationEntry, Holding, ValidationWarning

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def to_decimal(value: object, name: str = "value") -> Decimal:
    """Convert ints, floats, strings and Decimals to a finite Decimal.

    Floats go through ``str`` so 35.5 stays 35.5 rather than its binary
    expansion.

    Raises:
        ConfigurationError: If the value is not a finite number.
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise ConfigurationError(f"{name} must be numeric, got {value!r}") from e

    if not result.is_finite():
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    return result


def normalize_symbol(symbol: str) -> str:
    return str(symbol).strip().upper()


def normalize_allocation(
    allocation: Mapping[str, object] | None,
) -> tuple[AllocationMap, list[ValidationWarning]]:
    """Normalize symbols and weights of an allocation map.

    Empty symbols and non-numeric weights are dropped, and symbols that
    collide after case normalization are summed; all are reported as
    warnings.

    Returns:
        The normalized map (insertion order preserved) and any warnings.
    """
    normalized: AllocationMap = {}
    warnings: list[ValidationWarning] = []

    for raw_symbol, raw_weight in (allocation or {}).items():
        symbol = normalize_symbol(raw_symbol)
        try:
            weight = to_decimal(raw_weight, f"weight for {raw_symbol!r}")
        except ConfigurationError as e:
            warnings.append(
                ValidationWarning("INVALID_WEIGHT", f"Dropped {raw_symbol!r}: {e}", symbol or None)
            )
            continue

        if not symbol:
            warnings.append(
                ValidationWarning("EMPTY_SYMBOL", f"Dropped weight {weight} with empty symbol")
            )
            continue

        if symbol in normalized:
            warnings.append(
                ValidationWarning(
                    "DUPLICATE_SYMBOL",
                    f"Symbol {symbol} appears more than once; weights were summed",
                    symbol,
                )
            )
            normalized[symbol] += weight
        else:
            normalized[symbol] = weight

    return normalized, warnings


def allocation_total(allocation: AllocationMap) -> Decimal:
    return sum(allocation.values(), start=ZERO)


def validate_allocation(
    allocation: AllocationMap, expect_total: bool = True
) -> list[ValidationWarning]:
    """Report out-of-range weights and, optionally, a total that is not 100%.

    Nothing is clamped or rejected; callers decide whether to proceed.
    """
    warnings: list[ValidationWarning] = []

    for symbol, weight in allocation.items():
        if weight < 0:
            warnings.append(
                ValidationWarning("NEGATIVE_WEIGHT", f"{symbol} has negative weight {weight}", symbol)
            )
        elif weight > FULL_ALLOCATION:
            warnings.append(
                ValidationWarning(
                    "WEIGHT_OUT_OF_RANGE", f"{symbol} weight {weight} exceeds 100%", symbol
                )
            )

    if expect_total:
        total = allocation_total(allocation)
        if abs(total - FULL_ALLOCATION) > ALLOCATION_SUM_TOLERANCE:
            warnings.append(
                ValidationWarning(
                    "TOTAL_MISMATCH", f"Allocations should sum to 100%, got {total}%"
                )
            )

    return warnings


def compute_deviations(current: AllocationMap, target: AllocationMap) -> list[DeviationEntry]:
    """One entry per symbol in either map, largest |deviation| first.

    A symbol missing from one side counts as 0% there. Ties are broken by
    symbol so the order is deterministic.
    """
    symbols = set(current) | set(target)
    entries = [
        DeviationEntry(
            symbol=symbol,
            current_weight=current.get(symbol, ZERO),
            target_weight=target.get(symbol, ZERO),
        )
        for symbol in symbols
    ]
    return sorted(entries, key=lambda e: (-e.abs_deviation, e.symbol))


def normalize_holdings(
    holdings: Iterable[Holding], target: Optional[Mapping[str, Decimal]] = None
) -> dict[str, Holding]:
    """Validate caller holdings and convert their numbers to Decimal.

    A zero price is accepted only for symbols with no (or a zero) weight in
    ``target``.

    Returns:
        Holdings keyed by normalized symbol, in input order.

    Raises:
        ConfigurationError: Empty symbol, duplicate symbol or non-numeric value.
        ComputationError: Negative quantity, negative price, or zero price for
            a targeted symbol.
    """
    target = target or {}
    positions: dict[str, Holding] = {}

    for holding in holdings:
        symbol = normalize_symbol(holding.symbol)
        if not symbol:
            raise ConfigurationError("Holding with empty symbol")
        if symbol in positions:
            raise ConfigurationError(f"Duplicate holding for {symbol}")

        quantity = to_decimal(holding.quantity, f"quantity for {symbol}")
        price = to_decimal(holding.current_price, f"price for {symbol}")

        if quantity < 0:
            raise ComputationError(f"Quantity for {symbol} must be non-negative, got {quantity}")
        if price < 0 or (price == 0 and target.get(symbol, ZERO) != 0):
            raise ComputationError(f"Price for {symbol} must be positive, got {price}")

        positions[symbol] = Holding(symbol=symbol, quantity=quantity, current_price=price)

    return positions


def allocation_from_holdings(holdings: Iterable[Holding], total_value: Decimal) -> AllocationMap:
    """Percentage weight of each holding relative to ``total_value``.

    Holdings of the same symbol are combined.
    """
    allocation: AllocationMap = {}
    for holding in holdings:
        weight = holding.market_value / total_value * FULL_ALLOCATION
        allocation[holding.symbol] = allocation.get(holding.symbol, ZERO) + weight
    return allocation
