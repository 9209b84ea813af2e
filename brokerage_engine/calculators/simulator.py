"""
Payout Simulator

Previews a sharing configuration against a test amount before it is saved.
"""

from decimal import Decimal

from ..models import ALL_LEVELS, SharingConfig, SimulationPreview
from .payout import HUNDRED, PayoutCalculator, floor_money


class PayoutSimulator:
    """Builds the what-if preview shown while editing sharing rules."""

    DEFAULT_TEST_AMOUNT = Decimal("1000")

    def __init__(self, payout_calculator: PayoutCalculator | None = None):
        self.payout_calculator = payout_calculator or PayoutCalculator()

    def simulate(self, test_amount, config: SharingConfig) -> SimulationPreview:
        """
        Run the real allocation and add the level 0 "super holding" figure.

        The level 0 amount is for display only; it is not taken out of the
        pool and never appears in the breakdown's level payouts.
        """
        breakdown = self.payout_calculator.compute_breakdown(test_amount, config)
        level0_amount = floor_money(breakdown.net_pool * config.level_pct(0) / HUNDRED)

        return SimulationPreview(
            breakdown=breakdown,
            level0_amount=level0_amount,
            level_names={level: config.level_name(level) for level in ALL_LEVELS},
            total_share_pct=config.total_share_pct,
        )
