"""
Payout Calculator

Splits a transaction's gross brokerage across hierarchy levels 1-6 after the
company expense is deducted.
"""

import logging
from dataclasses import replace
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Iterable

from ..models import BrokerageTransaction, PayoutBreakdown, SharingConfig, TransactionStatus
from ..validators import ensure_finite_amount

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, halves away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def floor_money(value: Decimal) -> Decimal:
    """Floor to 2 decimal places (toward negative infinity)."""
    return value.quantize(CENT, rounding=ROUND_FLOOR)


class PayoutCalculator:
    """Calculates the persisted payout breakdown for a gross amount."""

    # Computed from their own percentage, in this order. Level 1 takes the remainder.
    PERCENTAGE_LEVELS = (2, 3, 4, 5, 6)
    BALANCING_LEVEL = 1

    def compute_breakdown(self, gross, config: SharingConfig) -> PayoutBreakdown:
        """
        Compute the breakdown for one gross amount.

        Expense = round(gross × expense%)
        Net Pool = round(gross - expense)
        Levels 2..6 = floor(net pool × level%)
        Level 1 = net pool - sum(levels 2..6)

        Level 1 absorbs every rounding and truncation difference, and also
        whatever share the configured percentages leave unassigned (or
        over-assign), so the payouts always sum to the net pool exactly.
        """
        gross = ensure_finite_amount(gross)

        expense_amount = quantize_money(gross * config.company_expense_pct / HUNDRED)
        net_pool = quantize_money(gross - expense_amount)

        payouts = {}
        distributed_total = Decimal("0")
        for level in self.PERCENTAGE_LEVELS:
            amount = floor_money(net_pool * config.level_pct(level) / HUNDRED)
            payouts[level] = amount
            distributed_total += amount

        payouts[self.BALANCING_LEVEL] = quantize_money(net_pool - distributed_total)

        return PayoutBreakdown(
            gross=gross,
            expense_amount=expense_amount,
            net_pool=net_pool,
            level_payouts={level: payouts[level] for level in sorted(payouts)},
        )

    def compute_for_batch(
        self,
        transactions: Iterable[BrokerageTransaction],
        config: SharingConfig,
    ) -> list[BrokerageTransaction]:
        """
        Attach a breakdown to every mapped transaction and mark it validated.

        Unmapped transactions are returned untouched. The input objects are not
        modified; callers persist the returned list.
        """
        result = []
        unmapped = 0
        for tx in transactions:
            if not tx.is_mapped:
                unmapped += 1
                result.append(tx)
                continue
            result.append(
                replace(
                    tx,
                    breakdown=self.compute_breakdown(tx.gross_amount, config),
                    status=TransactionStatus.VALIDATED,
                )
            )

        logger.info(
            "Computed payouts for %d transactions (%d unmapped skipped)",
            len(result) - unmapped,
            unmapped,
        )
        return result


# Named entry point for the exact (stored) allocation path.
_default_calculator = PayoutCalculator()
compute_breakdown_exact = _default_calculator.compute_breakdown
