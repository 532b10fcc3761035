"""Abstract base class for whole-share target quantity sizing."""

from abc import ABC, abstractmethod
from decimal import Decimal

import numpy as np

from ..config import FULL_ALLOCATION
from ..models import AllocationMap


class QuantitySizer(ABC):
    """Turns target weights into target share quantities."""

    @abstractmethod
    def target_quantities(
        self,
        prices: dict[str, Decimal],
        target_allocation: AllocationMap,
        total_value: Decimal,
    ) -> dict[str, Decimal]:
        """Calculate the quantity of each symbol to hold after rebalancing.

        Args:
            prices: Price per share for every symbol to size.
            target_allocation: Target weights in percent (0-100) by symbol.
                Symbols missing here are sized to zero.
            total_value: Total portfolio value to distribute.

        Returns:
            Target quantity by symbol, for every symbol in ``prices``.
        """
        pass

    @staticmethod
    def _target_value(target_allocation: AllocationMap, symbol: str, total_value: Decimal) -> Decimal:
        return target_allocation.get(symbol, Decimal("0")) / FULL_ALLOCATION * total_value

    def _collect_symbol_data(
        self,
        symbols: list[str],
        prices: dict[str, Decimal],
        target_allocation: AllocationMap,
        total_value: Decimal,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Extract prices and target dollar values as numpy arrays, ordered by symbols."""
        price_array = np.array([float(prices[symbol]) for symbol in symbols])
        target_values = np.array(
            [float(self._target_value(target_allocation, symbol, total_value)) for symbol in symbols]
        )
        return price_array, target_values
