"""
BROKERAGE PAYOUT ENGINE
Allocates brokerage across a 7-level referral hierarchy.
"""

from .models import BrokerageTransaction, PayoutBreakdown, SharingConfig, TeamMember
from .processor import PayoutProcessor
from .validators import InvalidAmount

__all__ = [
    'PayoutProcessor',
    'SharingConfig',
    'TeamMember',
    'BrokerageTransaction',
    'PayoutBreakdown',
    'InvalidAmount',
]
