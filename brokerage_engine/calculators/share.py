"""
Share Calculator

Answers "how much of this transaction belongs to this member" for dashboards
and statements. Uses the stored breakdown when one exists and otherwise
estimates the share directly from the configured percentages.
"""

import logging
from decimal import Decimal

from ..models import BrokerageTransaction, SharingConfig, TeamMember
from ..validators import ensure_finite_amount

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def resolve_level_pct(member: TeamMember, config: SharingConfig) -> Decimal:
    """Member's own override for their level, else the global level, else 0%."""
    if member.custom_levels is not None and member.level in member.custom_levels:
        return member.custom_levels[member.level]
    return config.level_pct(member.level)


def resolve_expense_pct(config: SharingConfig) -> Decimal:
    """Company expense always comes from the global configuration."""
    return config.company_expense_pct


class ShareCalculator:
    """Reads a member's share of a transaction."""

    def user_share_of(
        self,
        tx: BrokerageTransaction,
        member: TeamMember,
        fallback_config: SharingConfig,
    ) -> Decimal:
        """
        Return the member's share of one transaction.

        Stored breakdown present: the payout recorded for the member's level.
        Level 0 has no persisted bucket and reads as 0.

        No stored breakdown: proportional estimate, see estimate_share_proportional.
        Level 0 is estimated from its configured percentage like any other level.
        The two paths can disagree by a few paise for the same configuration;
        historical reports depend on both, so they stay separate.
        """
        if tx.breakdown is not None:
            return tx.breakdown.payout_for(member.level)

        logger.debug("No stored breakdown for transaction %s, estimating share", tx.id)
        return self.estimate_share_proportional(tx.gross_amount, member, fallback_config)

    def estimate_share_proportional(
        self,
        gross,
        member: TeamMember,
        config: SharingConfig,
    ) -> Decimal:
        """
        Net Pool = gross × (1 - expense% / 100)
        Share = Net Pool × member% / 100

        No rounding, flooring or remainder balancing is applied.
        """
        gross = ensure_finite_amount(gross)
        user_pct = resolve_level_pct(member, config)
        expense_pct = resolve_expense_pct(config)

        net_pool = gross * (1 - expense_pct / HUNDRED)
        return net_pool * (user_pct / HUNDRED)


_default_calculator = ShareCalculator()
estimate_share_proportional = _default_calculator.estimate_share_proportional
user_share_of = _default_calculator.user_share_of
