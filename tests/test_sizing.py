"""Tests for target quantity sizing."""

from decimal import Decimal

from rebalancing_engine.sizing import FloorSizer, TrackingErrorSizer


def _l1_deviation(quantities, prices, target, total_value):
    return sum(
        abs(target.get(s, Decimal("0")) / 100 * total_value - quantities[s] * prices[s])
        for s in prices
    )


class TestFloorSizer:
    def test_floor_division(self):
        prices = {"AAPL": Decimal("185"), "META": Decimal("580")}
        target = {"AAPL": Decimal("60"), "META": Decimal("40")}

        quantities = FloorSizer().target_quantities(prices, target, Decimal("9635"))

        # 5781 / 185 = 31.2..., 3854 / 580 = 6.6...
        assert quantities == {"AAPL": Decimal("31"), "META": Decimal("6")}

    def test_exact_division(self):
        quantities = FloorSizer().target_quantities(
            {"AAPL": Decimal("100")}, {"AAPL": Decimal("100")}, Decimal("1000")
        )
        assert quantities["AAPL"] == Decimal("10")

    def test_untargeted_symbol_sized_to_zero(self):
        quantities = FloorSizer().target_quantities(
            {"AAPL": Decimal("100"), "GOOG": Decimal("200")},
            {"AAPL": Decimal("100")},
            Decimal("1000"),
        )
        assert quantities["GOOG"] == Decimal("0")

    def test_price_above_target_value(self):
        quantities = FloorSizer().target_quantities(
            {"META": Decimal("580")}, {"META": Decimal("10")}, Decimal("1000")
        )
        assert quantities["META"] == Decimal("0")

    def test_negative_weight_not_shorted(self):
        quantities = FloorSizer().target_quantities(
            {"AAPL": Decimal("100")}, {"AAPL": Decimal("-10")}, Decimal("1000")
        )
        assert quantities["AAPL"] == Decimal("0")


class TestTrackingErrorSizer:
    def test_exact_fit(self):
        prices = {"AAPL": Decimal("100"), "META": Decimal("100")}
        target = {"AAPL": Decimal("50"), "META": Decimal("50")}

        quantities = TrackingErrorSizer().target_quantities(prices, target, Decimal("2000"))

        assert quantities == {"AAPL": Decimal("10"), "META": Decimal("10")}

    def test_whole_shares_within_budget(self):
        prices = {"AAPL": Decimal("300"), "META": Decimal("100")}
        target = {"AAPL": Decimal("50"), "META": Decimal("50")}
        total_value = Decimal("1000")

        quantities = TrackingErrorSizer().target_quantities(prices, target, total_value)

        for qty in quantities.values():
            assert qty == qty.to_integral_value()
            assert qty >= 0
        assert sum(quantities[s] * prices[s] for s in prices) <= total_value

    def test_no_worse_than_floor(self):
        prices = {"AAPL": Decimal("300"), "META": Decimal("70"), "NVDA": Decimal("45")}
        target = {"AAPL": Decimal("40"), "META": Decimal("35"), "NVDA": Decimal("25")}
        total_value = Decimal("1500")

        optimized = TrackingErrorSizer().target_quantities(prices, target, total_value)
        floored = FloorSizer().target_quantities(prices, target, total_value)

        assert _l1_deviation(optimized, prices, target, total_value) <= _l1_deviation(
            floored, prices, target, total_value
        ) + Decimal("0.0001")

    def test_untargeted_symbols_sized_to_zero(self):
        quantities = TrackingErrorSizer().target_quantities(
            {"AAPL": Decimal("100"), "GOOG": Decimal("200")},
            {"AAPL": Decimal("100")},
            Decimal("1000"),
        )
        assert quantities == {"AAPL": Decimal("10"), "GOOG": Decimal("0")}
