"""Tracking error minimization sizing using MILP optimization.

Mathematical Formulation (L1 norm minimization):

    minimize: sum(e_plus[i] + e_minus[i])

    subject to:
        x[i] * p[i] - w[i] * V = e_plus[i] - e_minus[i]   (deviation balance)
        sum(x[i] * p[i]) <= V                              (budget constraint)
        x[i] >= 0, integer                                 (whole shares, no shorting)
        e_plus[i], e_minus[i] >= 0                         (slack variables)

    where:
        x[i]     = shares of asset i (decision variable)
        p[i]     = price per share of asset i
        w[i]     = target weight for asset i (fraction of 1)
        V        = total portfolio value

Floor sizing can leave a large cash remainder when prices are high relative
to the portfolio; this sizer spends it on whichever assets bring the
portfolio closest to target while respecting the budget.
"""

import logging
from decimal import Decimal

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp

from ..models import AllocationMap
from .base import QuantitySizer
from .floor import FloorSizer

logger = logging.getLogger(__name__)


class TrackingErrorSizer(QuantitySizer):
    """Minimize L1 dollar deviation from target using whole shares."""

    def target_quantities(
        self,
        prices: dict[str, Decimal],
        target_allocation: AllocationMap,
        total_value: Decimal,
    ) -> dict[str, Decimal]:
        quantities = {symbol: Decimal("0") for symbol in prices}

        # Only assets with a positive target and price take part in the solve
        symbols = sorted(
            symbol
            for symbol, price in prices.items()
            if price > 0 and target_allocation.get(symbol, Decimal("0")) > 0
        )
        if not symbols or total_value <= 0:
            return quantities

        n = len(symbols)
        price_array, target_values = self._collect_symbol_data(
            symbols, prices, target_allocation, total_value
        )
        V = float(total_value)

        # Variables: [x_1, ..., x_n, e_plus_1, ..., e_plus_n, e_minus_1, ..., e_minus_n]
        c = np.zeros(3 * n)
        c[n:] = 1.0

        # p[i] * x[i] - e_plus[i] + e_minus[i] = target[i]
        A_eq = np.zeros((n, 3 * n))
        for i in range(n):
            A_eq[i, i] = price_array[i]
            A_eq[i, n + i] = -1.0
            A_eq[i, 2 * n + i] = 1.0
        deviation_constraint = LinearConstraint(A_eq, target_values, target_values)

        A_budget = np.zeros((1, 3 * n))
        A_budget[0, :n] = price_array
        budget_constraint = LinearConstraint(A_budget, -np.inf, V)

        bounds = Bounds(np.zeros(3 * n), np.full(3 * n, np.inf))

        integrality = np.zeros(3 * n, dtype=int)
        integrality[:n] = 1

        result = milp(
            c=c,
            constraints=[deviation_constraint, budget_constraint],
            integrality=integrality,
            bounds=bounds,
        )

        if not result.success:
            logger.warning("Tracking error solve failed (%s); using floor sizing", result.message)
            return FloorSizer().target_quantities(prices, target_allocation, total_value)

        x_optimal = np.round(result.x[:n]).astype(int)
        for i, symbol in enumerate(symbols):
            quantities[symbol] = Decimal(int(x_optimal[i]))

        return quantities
