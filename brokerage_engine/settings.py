"""
Default sharing rules and environment settings.
"""

import os
from decimal import Decimal

from .models import ConfigScope, SharingConfig

ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

DEFAULT_COMPANY_EXPENSE_PCT = Decimal(os.environ.get("COMPANY_EXPENSE_PCT", "15"))

DEFAULT_LEVELS = {
    0: Decimal("20"),
    1: Decimal("15"),
    2: Decimal("15"),
    3: Decimal("15"),
    4: Decimal("15"),
    5: Decimal("15"),
    6: Decimal("5"),
}

DEFAULT_LEVEL_NAMES = {
    0: "Super Holding",
    1: "Corporate House",
    2: "Partner Level 2",
    3: "Regional Level 3",
    4: "Zonal Level 4",
    5: "Manager Level 5",
    6: "Relationship Manager (L6)",
}


def default_global_config() -> SharingConfig:
    """Fresh copy of the system default configuration."""
    return SharingConfig(
        company_expense_pct=DEFAULT_COMPANY_EXPENSE_PCT,
        levels=dict(DEFAULT_LEVELS),
        level_names=dict(DEFAULT_LEVEL_NAMES),
        scope=ConfigScope.GLOBAL,
    )
