"""Floor-division sizing: never commit more capital than the target weight."""

from decimal import ROUND_FLOOR, Decimal

from ..models import AllocationMap
from .base import QuantitySizer


class FloorSizer(QuantitySizer):
    """Whole shares by floor division of the target dollar value by price.

    A zero or negative target weight sizes to zero shares (no shorting).
    """

    def target_quantities(
        self,
        prices: dict[str, Decimal],
        target_allocation: AllocationMap,
        total_value: Decimal,
    ) -> dict[str, Decimal]:
        quantities: dict[str, Decimal] = {}

        for symbol, price in prices.items():
            target_value = self._target_value(target_allocation, symbol, total_value)

            if target_value <= 0 or price <= 0:
                quantities[symbol] = Decimal("0")
                continue

            quantities[symbol] = (target_value / price).to_integral_value(rounding=ROUND_FLOOR)

        return quantities
