"""
Input Validation for the Brokerage Payout Engine

The calculator itself accepts any finite amount and any percentages. The checks
here cover the two places where input is rejected: non-numeric amounts, and
sharing configurations being saved by an administrator.
"""

from decimal import Decimal, InvalidOperation

from .models import ALL_LEVELS, SharingConfig, _level_map


class InvalidAmount(ValueError):
    """Raised when a monetary amount is not a finite number."""


def ensure_finite_amount(value) -> Decimal:
    """
    Convert an amount to Decimal. Raises InvalidAmount for anything that is
    not a finite number (None, booleans, free text, NaN, infinity).
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmount(f"Amount must be a number, got: {value!r}")

    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmount(f"Amount must be a number, got: {value!r}") from None

    if not amount.is_finite():
        raise InvalidAmount(f"Amount must be finite, got: {value!r}")
    return amount


class ConfigValidator:
    """Validates sharing configurations before they are saved."""

    REQUIRED_TOTAL = Decimal("100")

    def validate_for_save(self, config: SharingConfig) -> None:
        """
        Run all validations for a global configuration. Raises ValueError if any check fails.
        """
        if config.company_expense_pct < 0 or config.company_expense_pct > 100:
            raise ValueError(
                f"companyExpensePct must be between 0 and 100, got: {config.company_expense_pct}"
            )
        self._validate_levels(config.levels)

    def validate_override(self, levels: dict) -> dict[int, Decimal]:
        """
        Validate a per-user override before it replaces the global levels.
        Returns the parsed {level: pct} mapping.
        """
        if not isinstance(levels, dict):
            raise ValueError(f"Override levels must be an object, got: {levels!r}")
        parsed = _level_map(levels)
        self._validate_levels(parsed)
        return parsed

    def _validate_levels(self, levels: dict[int, Decimal]) -> None:
        for level, pct in levels.items():
            if level not in ALL_LEVELS:
                raise ValueError(f"Invalid level: {level}. Must be between 0 and 6")
            if pct < 0:
                raise ValueError(f"Level {level} percentage cannot be negative, got: {pct}")

        total = sum(levels.values(), Decimal("0"))
        if total != self.REQUIRED_TOTAL:
            raise ValueError(f"Total percentage must equal 100%. Current total: {total}%")
