"""
Unit Tests for Payout Calculator

Tests verify breakdowns against known expected values.
"""

from decimal import Decimal

import pytest

from brokerage_engine.calculators.payout import (
    PayoutCalculator,
    compute_breakdown_exact,
    floor_money,
    quantize_money,
)
from brokerage_engine.models import (
    BrokerageTransaction,
    SharingConfig,
    TransactionStatus,
)
from brokerage_engine.validators import InvalidAmount


def make_config(expense, levels) -> SharingConfig:
    return SharingConfig(
        company_expense_pct=Decimal(str(expense)),
        levels={k: Decimal(str(v)) for k, v in levels.items()},
    )


STANDARD_LEVELS = {0: 20, 1: 15, 2: 15, 3: 15, 4: 15, 5: 15, 6: 5}


class TestMoneyHelpers:
    """Test the rounding and flooring utilities."""

    def test_quantize_rounds_half_up(self):
        assert quantize_money(Decimal("0.005")) == Decimal("0.01")

    def test_quantize_rounds_down_below_half(self):
        assert quantize_money(Decimal("0.004")) == Decimal("0.00")

    def test_quantize_negative_half_rounds_away_from_zero(self):
        assert quantize_money(Decimal("-0.005")) == Decimal("-0.01")

    def test_floor_truncates_positive(self):
        assert floor_money(Decimal("28.0533")) == Decimal("28.05")
        assert floor_money(Decimal("28.059")) == Decimal("28.05")

    def test_floor_negative_goes_down(self):
        assert floor_money(Decimal("-1.231")) == Decimal("-1.24")

    def test_floor_preserves_exact_cents(self):
        assert floor_money(Decimal("127.50")) == Decimal("127.50")


class TestComputeBreakdown:
    """Test the exact allocation algorithm."""

    @pytest.fixture
    def calculator(self):
        return PayoutCalculator()

    def test_standard_scenario(self, calculator):
        """1000 gross, 15% expense, standard levels."""
        result = calculator.compute_breakdown(1000, make_config(15, STANDARD_LEVELS))

        assert result.gross == Decimal("1000")
        assert result.expense_amount == Decimal("150.00")
        assert result.net_pool == Decimal("850.00")
        assert result.level_payouts[2] == Decimal("127.50")
        assert result.level_payouts[3] == Decimal("127.50")
        assert result.level_payouts[4] == Decimal("127.50")
        assert result.level_payouts[5] == Decimal("127.50")
        assert result.level_payouts[6] == Decimal("42.50")
        # Level 1 also carries the unpersisted level 0 share
        assert result.level_payouts[1] == Decimal("297.50")

    def test_level_payouts_only_cover_levels_one_to_six(self, calculator):
        result = calculator.compute_breakdown(1000, make_config(15, STANDARD_LEVELS))
        assert sorted(result.level_payouts) == [1, 2, 3, 4, 5, 6]

    def test_zero_gross(self, calculator):
        result = calculator.compute_breakdown(0, make_config(15, STANDARD_LEVELS))

        assert result.expense_amount == Decimal("0")
        assert result.net_pool == Decimal("0")
        assert all(amount == Decimal("0") for amount in result.level_payouts.values())

    def test_expense_is_rounded_half_up(self, calculator):
        """333.33 × 15% = 49.9995 → 50.00"""
        result = calculator.compute_breakdown(Decimal("333.33"), make_config(15, STANDARD_LEVELS))
        assert result.expense_amount == Decimal("50.00")
        assert result.net_pool == Decimal("283.33")

    def test_level_one_absorbs_truncation(self, calculator):
        """Levels 2-4 are floored; level 1 gets what is left, not 1% of the pool."""
        config = make_config(0, {1: 1, 2: 33, 3: 33, 4: 33, 5: 0, 6: 0})
        result = calculator.compute_breakdown(Decimal("100.01"), config)

        # 100.01 × 33% = 33.0033 → 33.00
        assert result.level_payouts[2] == Decimal("33.00")
        assert result.level_payouts[3] == Decimal("33.00")
        assert result.level_payouts[4] == Decimal("33.00")
        assert result.level_payouts[1] == Decimal("1.01")
        assert result.level_payouts[1] != quantize_money(result.net_pool * Decimal("0.01"))

    def test_missing_levels_count_as_zero(self, calculator):
        result = calculator.compute_breakdown(1000, make_config(10, {2: 50}))

        assert result.level_payouts[2] == Decimal("450.00")
        for level in (3, 4, 5, 6):
            assert result.level_payouts[level] == Decimal("0.00")
        assert result.level_payouts[1] == Decimal("450.00")

    def test_levels_over_one_hundred_make_level_one_negative(self, calculator):
        config = make_config(0, {1: 0, 2: 60, 3: 60})
        result = calculator.compute_breakdown(100, config)

        assert result.level_payouts[1] == Decimal("-20.00")
        assert result.is_balanced()

    def test_expense_over_one_hundred_is_computed_literally(self, calculator):
        result = calculator.compute_breakdown(100, make_config(120, STANDARD_LEVELS))

        assert result.expense_amount == Decimal("120.00")
        assert result.net_pool == Decimal("-20.00")
        assert result.is_balanced()

    def test_negative_expense_is_computed_literally(self, calculator):
        result = calculator.compute_breakdown(100, make_config(-10, STANDARD_LEVELS))
        assert result.net_pool == Decimal("110.00")

    def test_level_zero_is_ignored(self, calculator):
        with_zero = calculator.compute_breakdown(1000, make_config(15, STANDARD_LEVELS))
        levels = dict(STANDARD_LEVELS)
        levels[0] = 0
        without_zero = calculator.compute_breakdown(1000, make_config(15, levels))

        assert with_zero == without_zero

    def test_deterministic(self, calculator):
        config = make_config(17.5, {1: 13, 2: 11.11, 3: 17, 4: 19.9, 5: 23, 6: 16})
        first = calculator.compute_breakdown(Decimal("98765.43"), config)
        second = calculator.compute_breakdown(Decimal("98765.43"), config)

        assert first == second
        assert repr(first) == repr(second)

    def test_float_input_has_no_drift(self, calculator):
        """0.1 + 0.2 style inputs are converted through their string form."""
        result = calculator.compute_breakdown(0.3, make_config(0, {2: 100}))
        assert result.net_pool == Decimal("0.30")
        assert result.level_payouts[2] == Decimal("0.30")
        assert result.level_payouts[1] == Decimal("0.00")

    def test_named_entry_point(self):
        result = compute_breakdown_exact(1000, make_config(15, STANDARD_LEVELS))
        assert result.level_payouts[1] == Decimal("297.50")

    @pytest.mark.parametrize("bad", [None, "abc", float("nan"), float("inf"), True])
    def test_invalid_amount_rejected(self, calculator, bad):
        with pytest.raises(InvalidAmount):
            calculator.compute_breakdown(bad, make_config(15, STANDARD_LEVELS))


class TestExactSumInvariant:
    """Level payouts must sum to the net pool to the cent."""

    @pytest.fixture
    def calculator(self):
        return PayoutCalculator()

    @pytest.mark.parametrize("gross", ["0", "0.01", "1", "99.99", "333.33", "1234.57", "100000.07", "7"])
    @pytest.mark.parametrize(
        "expense,levels",
        [
            (15, STANDARD_LEVELS),
            (12.5, {1: 10, 2: 33.33, 3: 33.33, 4: 23.34}),
            (0, {2: 70, 3: 70}),
            (3, {}),
            (18, {1: 0, 2: 7.77, 3: 7.77, 4: 7.77, 5: 7.77, 6: 7.77}),
        ],
    )
    def test_payouts_sum_to_net_pool(self, calculator, gross, expense, levels):
        result = calculator.compute_breakdown(Decimal(gross), make_config(expense, levels))

        assert result.is_balanced()
        assert sum(result.level_payouts.values()) == result.net_pool

    def test_expense_matches_formula(self, calculator):
        gross = Decimal("4567.89")
        result = calculator.compute_breakdown(gross, make_config(13.7, STANDARD_LEVELS))
        assert result.expense_amount == quantize_money(gross * Decimal("13.7") / 100)


class TestComputeForBatch:
    """Test batch allocation."""

    @pytest.fixture
    def calculator(self):
        return PayoutCalculator()

    @pytest.fixture
    def config(self):
        return make_config(15, STANDARD_LEVELS)

    def test_mapped_transaction_gets_breakdown(self, calculator, config):
        tx = BrokerageTransaction(id="t1", gross_amount=Decimal("1000"), mapped_client_id="c_001")
        [result] = calculator.compute_for_batch([tx], config)

        assert result.breakdown is not None
        assert result.breakdown.level_payouts[1] == Decimal("297.50")
        assert result.status == TransactionStatus.VALIDATED

    def test_unmapped_transaction_passes_through(self, calculator, config):
        tx = BrokerageTransaction(id="t1", gross_amount=Decimal("1000"))
        [result] = calculator.compute_for_batch([tx], config)

        assert result is tx
        assert result.breakdown is None
        assert result.status == TransactionStatus.DRAFT

    def test_input_not_mutated(self, calculator, config):
        tx = BrokerageTransaction(id="t1", gross_amount=Decimal("1000"), mapped_client_id="c_001")
        calculator.compute_for_batch([tx], config)

        assert tx.breakdown is None
        assert tx.status == TransactionStatus.DRAFT

    def test_order_preserved(self, calculator, config):
        txs = [
            BrokerageTransaction(id="a", gross_amount=Decimal("10"), mapped_client_id="c1"),
            BrokerageTransaction(id="b", gross_amount=Decimal("20")),
            BrokerageTransaction(id="c", gross_amount=Decimal("30"), mapped_client_id="c2"),
        ]
        result = calculator.compute_for_batch(txs, config)
        assert [tx.id for tx in result] == ["a", "b", "c"]

    def test_empty_batch(self, calculator, config):
        assert calculator.compute_for_batch([], config) == []
