"""
Calculators Package

Provides the allocation, share and simulation components.
"""

from .payout import PayoutCalculator, compute_breakdown_exact
from .share import ShareCalculator, estimate_share_proportional, user_share_of
from .simulator import PayoutSimulator

__all__ = [
    "PayoutCalculator",
    "ShareCalculator",
    "PayoutSimulator",
    "compute_breakdown_exact",
    "estimate_share_proportional",
    "user_share_of",
]
