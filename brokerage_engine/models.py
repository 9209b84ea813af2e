"""
Domain Models for the Brokerage Payout Engine

These dataclasses provide type-safe representations of all business entities.
All monetary values and percentages use Decimal for precision.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from enum import Enum

# Levels that receive a persisted payout. Level 0 is simulator-only.
PAYOUT_LEVELS = (1, 2, 3, 4, 5, 6)
ALL_LEVELS = (0, 1, 2, 3, 4, 5, 6)


def _to_decimal(value) -> Decimal:
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}") from None
    if not number.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return number


def _level_map(data: dict | None) -> dict[int, Decimal]:
    """Parse a {level: pct} mapping; JSON documents carry the keys as strings."""
    if not data:
        return {}
    return {int(level): _to_decimal(pct) for level, pct in data.items() if pct is not None}


class TransactionStatus(str, Enum):
    DRAFT = "DRAFT"
    VALIDATED = "VALIDATED"
    APPROVED = "APPROVED"
    PAID = "PAID"


class TransactionSource(str, Enum):
    CAMS = "CAMS"
    KFINTECH = "KFINTECH"


class ConfigScope(str, Enum):
    GLOBAL = "GLOBAL"
    CLIENT = "CLIENT"
    CATEGORY = "CATEGORY"
    USER = "USER"


class InvoiceStatus(str, Enum):
    UNBILLED = "UNBILLED"
    SUBMITTED = "SUBMITTED"
    PAID = "PAID"
    REJECTED = "REJECTED"


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass
class SharingConfig:
    """The allocation policy in effect at computation time."""

    company_expense_pct: Decimal
    levels: dict[int, Decimal] = field(default_factory=dict)
    level_names: dict[int, str] = field(default_factory=dict)
    scope: ConfigScope = ConfigScope.GLOBAL
    scope_id: str | None = None
    id: str = "global_config"
    name: str = "Standard Payout Rules"

    def level_pct(self, level: int) -> Decimal:
        """Percentage of the net pool for a level; missing levels count as 0%."""
        return self.levels.get(level, Decimal("0"))

    def level_name(self, level: int) -> str:
        return self.level_names.get(level, f"Level {level}")

    @property
    def total_share_pct(self) -> Decimal:
        return sum(self.levels.values(), Decimal("0"))

    @classmethod
    def from_dict(cls, data: dict) -> "SharingConfig":
        return cls(
            company_expense_pct=_to_decimal(data["companyExpensePct"]),
            levels=_level_map(data.get("levels")),
            level_names={int(k): v for k, v in (data.get("levelNames") or {}).items()},
            scope=ConfigScope(data.get("scope", ConfigScope.GLOBAL.value)),
            scope_id=data.get("scopeId"),
            id=data.get("id", "global_config"),
            name=data.get("name", "Standard Payout Rules"),
        )

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "name": self.name,
            "companyExpensePct": float(self.company_expense_pct),
            "levels": {str(k): float(v) for k, v in sorted(self.levels.items())},
            "levelNames": {str(k): v for k, v in sorted(self.level_names.items())},
            "scope": self.scope.value,
        }
        if self.scope_id:
            result["scopeId"] = self.scope_id
        return result


@dataclass
class TeamMember:
    """A person placed on one rung of the hierarchy."""

    id: str
    name: str
    level: int
    code: str = ""
    custom_levels: dict[int, Decimal] | None = None  # None = use global levels

    @property
    def has_override(self) -> bool:
        return self.custom_levels is not None

    def with_override(self, levels: dict) -> "TeamMember":
        """Return a copy carrying a per-user sharing override."""
        return replace(self, custom_levels={int(k): _to_decimal(v) for k, v in levels.items()})

    def without_override(self) -> "TeamMember":
        """Return a copy that falls back to the global sharing levels."""
        return replace(self, custom_levels=None)

    @classmethod
    def from_dict(cls, data: dict) -> "TeamMember":
        custom = data.get("customLevels")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            level=int(data["level"]),
            code=data.get("code", ""),
            custom_levels=_level_map(custom) if custom is not None else None,
        )

    def to_dict(self) -> dict:
        result = {"id": self.id, "name": self.name, "level": self.level, "code": self.code}
        if self.custom_levels is not None:
            result["customLevels"] = {str(k): float(v) for k, v in sorted(self.custom_levels.items())}
        return result


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class PayoutBreakdown:
    """
    Result of one allocation, attached to a transaction once computed.

    level_payouts only ever holds levels 1-6. Breakdowns written by the older
    allocator also floored a level 0 share out of the pool before level 1 took
    the remainder; that amount is kept apart in level0_amount so the payouts
    plus level0_amount still sum to net_pool.
    """

    gross: Decimal
    expense_amount: Decimal
    net_pool: Decimal
    level_payouts: dict[int, Decimal]
    level0_amount: Decimal = Decimal("0")

    @property
    def distributed_total(self) -> Decimal:
        return sum(self.level_payouts.values(), Decimal("0"))

    def is_balanced(self) -> bool:
        return self.distributed_total + self.level0_amount == self.net_pool

    def payout_for(self, level: int) -> Decimal:
        return self.level_payouts.get(level, Decimal("0"))

    @classmethod
    def from_dict(cls, data: dict) -> "PayoutBreakdown":
        payouts = _level_map(data["levelPayouts"])
        unexpected = set(payouts) - set(ALL_LEVELS)
        if unexpected:
            raise ValueError(f"levelPayouts may only contain levels 0-6, got: {sorted(unexpected)}")
        level0 = payouts.pop(0, None)
        if level0 is None:
            level0 = _to_decimal(data.get("level0Amount", 0))
        breakdown = cls(
            gross=_to_decimal(data["gross"]),
            expense_amount=_to_decimal(data["expenseAmount"]),
            net_pool=_to_decimal(data["netPool"]),
            level_payouts={level: payouts.get(level, Decimal("0")) for level in PAYOUT_LEVELS},
            level0_amount=level0,
        )
        if not breakdown.is_balanced():
            raise ValueError(
                f"Corrupt breakdown: level payouts sum to "
                f"{breakdown.distributed_total + breakdown.level0_amount}, "
                f"net pool is {breakdown.net_pool}"
            )
        return breakdown


@dataclass
class BrokerageTransaction:
    """A single imported brokerage line."""

    id: str
    gross_amount: Decimal
    batch_id: str = ""
    source: TransactionSource = TransactionSource.CAMS
    transaction_date: str = ""
    brokerage_period: str = ""  # YYYY-MM
    folio: str = ""
    pan: str = ""
    investor_name: str = ""
    amc_name: str = ""
    scheme_name: str = ""
    category: str = ""
    mapped_client_id: str | None = None  # None = unmapped
    status: TransactionStatus = TransactionStatus.DRAFT
    breakdown: PayoutBreakdown | None = None
    remarks: str | None = None

    @property
    def is_mapped(self) -> bool:
        return bool(self.mapped_client_id)

    @property
    def period(self) -> str:
        """Accounting month; falls back to the transaction date's month."""
        return self.brokerage_period or self.transaction_date[:7]

    @classmethod
    def from_dict(cls, data: dict) -> "BrokerageTransaction":
        breakdown = data.get("breakdown")
        return cls(
            id=data["id"],
            gross_amount=_to_decimal(data["grossAmount"]),
            batch_id=data.get("batchId", ""),
            source=TransactionSource(data.get("source", TransactionSource.CAMS.value)),
            transaction_date=data.get("transactionDate", ""),
            brokerage_period=data.get("brokeragePeriod", ""),
            folio=data.get("folio", ""),
            pan=data.get("pan", ""),
            investor_name=data.get("investorName", ""),
            amc_name=data.get("amcName", ""),
            scheme_name=data.get("schemeName", ""),
            category=data.get("category", ""),
            mapped_client_id=data.get("mappedClientId") or None,
            status=TransactionStatus(data.get("status", TransactionStatus.DRAFT.value)),
            breakdown=PayoutBreakdown.from_dict(breakdown) if breakdown else None,
            remarks=data.get("remarks"),
        )


@dataclass
class SimulationPreview:
    """What-if preview shown next to the sharing configuration editor."""

    breakdown: PayoutBreakdown
    level0_amount: Decimal  # display only, never persisted
    level_names: dict[int, str]
    total_share_pct: Decimal

    @property
    def is_config_balanced(self) -> bool:
        return self.total_share_pct == Decimal("100")


@dataclass
class MonthlySummary:
    """One row of a member's monthly statement."""

    month: str
    count: int = 0
    gross: Decimal = Decimal("0")
    my_share: Decimal = Decimal("0")


@dataclass
class PayoutInvoice:
    """A member's claim for one month of payouts."""

    id: str
    user_id: str
    user_name: str
    month: str
    amount: Decimal
    transaction_count: int
    status: InvoiceStatus = InvoiceStatus.UNBILLED


@dataclass
class BatchSummary:
    """Totals for one import batch after allocation."""

    total_lines: int = 0
    total_gross: Decimal = Decimal("0")
    unmapped_count: int = 0
    validated_count: int = 0


@dataclass
class ClientSummary:
    """One row of the client-wise view of a member's shares."""

    client_id: str
    name: str
    pan: str
    count: int = 0
    gross: Decimal = Decimal("0")
    my_share: Decimal = Decimal("0")


@dataclass
class DashboardTotals:
    """
    Headline numbers for a member's dashboard.

    The top_* entries are (name, share) pairs; ("None", 0) when there is
    nothing to rank. monthly_series is oldest month first.
    """

    total_tx: int = 0
    total_my_net: Decimal = Decimal("0")
    total_gross_volume: Decimal = Decimal("0")
    top_amc: tuple[str, Decimal] = ("None", Decimal("0"))
    top_client: tuple[str, Decimal] = ("None", Decimal("0"))
    top_scheme: tuple[str, Decimal] = ("None", Decimal("0"))
    monthly_series: list[tuple[str, Decimal]] = field(default_factory=list)
