"""
Report Builder

Turns breakdowns and transactions into statement rows, invoices and the
JSON-ready shapes returned by the API.
"""

from decimal import Decimal
from typing import Iterable

from .calculators.payout import quantize_money
from .calculators.share import ShareCalculator
from .models import (
    BatchSummary,
    BrokerageTransaction,
    ClientSummary,
    DashboardTotals,
    MonthlySummary,
    PayoutBreakdown,
    PayoutInvoice,
    SharingConfig,
    SimulationPreview,
    TeamMember,
    TransactionStatus,
)


UNMAPPED = "Unmapped"
UNKNOWN = "Unknown"


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return round(float(value), 2)


def breakdown_to_dict(breakdown: PayoutBreakdown) -> dict:
    """Persisted breakdown shape."""
    result = {
        "gross": to_money(breakdown.gross),
        "expenseAmount": to_money(breakdown.expense_amount),
        "netPool": to_money(breakdown.net_pool),
        "levelPayouts": {str(level): to_money(amount) for level, amount in breakdown.level_payouts.items()},
    }
    if breakdown.level0_amount:
        result["level0Amount"] = to_money(breakdown.level0_amount)
    return result


def _top(agg: dict[str, Decimal]) -> tuple[str, Decimal]:
    """Largest entry; the first one seen wins a tie."""
    if not agg:
        return ("None", Decimal("0"))
    return max(agg.items(), key=lambda item: item[1])


def transaction_to_dict(tx: BrokerageTransaction) -> dict:
    result = {
        "id": tx.id,
        "batchId": tx.batch_id,
        "source": tx.source.value,
        "transactionDate": tx.transaction_date,
        "brokeragePeriod": tx.brokerage_period,
        "folio": tx.folio,
        "pan": tx.pan,
        "investorName": tx.investor_name,
        "amcName": tx.amc_name,
        "schemeName": tx.scheme_name,
        "category": tx.category,
        "grossAmount": to_money(tx.gross_amount),
        "status": tx.status.value,
    }
    if tx.mapped_client_id:
        result["mappedClientId"] = tx.mapped_client_id
    if tx.breakdown is not None:
        result["breakdown"] = breakdown_to_dict(tx.breakdown)
    if tx.remarks:
        result["remarks"] = tx.remarks
    return result


class ReportBuilder:
    """Builds member statements, invoices and batch totals."""

    def __init__(self, share_calculator: ShareCalculator | None = None):
        self.share_calculator = share_calculator or ShareCalculator()

    def total_share(
        self,
        transactions: Iterable[BrokerageTransaction],
        member: TeamMember,
        fallback_config: SharingConfig,
    ) -> Decimal:
        total = Decimal("0")
        for tx in transactions:
            total += self.share_calculator.user_share_of(tx, member, fallback_config)
        return total

    def monthly_summary(
        self,
        transactions: Iterable[BrokerageTransaction],
        member: TeamMember,
        fallback_config: SharingConfig,
    ) -> list[MonthlySummary]:
        """Group a member's shares by brokerage month, newest month first."""
        summary: dict[str, MonthlySummary] = {}
        for tx in transactions:
            month = tx.period
            row = summary.setdefault(month, MonthlySummary(month=month))
            row.count += 1
            row.gross += tx.gross_amount
            row.my_share += self.share_calculator.user_share_of(tx, member, fallback_config)

        return sorted(summary.values(), key=lambda row: row.month, reverse=True)

    def draft_invoice(
        self,
        transactions: Iterable[BrokerageTransaction],
        member: TeamMember,
        month: str,
        fallback_config: SharingConfig,
    ) -> PayoutInvoice:
        """Draft an unbilled invoice for one member and one month."""
        in_month = [tx for tx in transactions if tx.period == month]
        amount = self.total_share(in_month, member, fallback_config)

        return PayoutInvoice(
            id=f"inv_{member.id}_{month}",
            user_id=member.id,
            user_name=member.name,
            month=month,
            amount=quantize_money(amount),
            transaction_count=len(in_month),
        )

    def client_summary(
        self,
        transactions: Iterable[BrokerageTransaction],
        member: TeamMember,
        fallback_config: SharingConfig,
    ) -> list[ClientSummary]:
        """Group a member's shares by mapped client, largest share first."""
        summary: dict[str, ClientSummary] = {}
        for tx in transactions:
            client_id = tx.mapped_client_id or UNMAPPED
            row = summary.get(client_id)
            if row is None:
                row = summary[client_id] = ClientSummary(
                    client_id=client_id,
                    name=tx.investor_name or UNKNOWN,
                    pan=tx.pan or "N/A",
                )
            row.count += 1
            row.gross += tx.gross_amount
            row.my_share += self.share_calculator.user_share_of(tx, member, fallback_config)

        return sorted(summary.values(), key=lambda row: row.my_share, reverse=True)

    def dashboard_totals(
        self,
        transactions: Iterable[BrokerageTransaction],
        member: TeamMember,
        fallback_config: SharingConfig,
    ) -> DashboardTotals:
        totals = DashboardTotals()
        by_amc: dict[str, Decimal] = {}
        by_client: dict[str, Decimal] = {}
        by_scheme: dict[str, Decimal] = {}
        by_month: dict[str, Decimal] = {}

        for tx in transactions:
            share = self.share_calculator.user_share_of(tx, member, fallback_config)
            totals.total_tx += 1
            totals.total_my_net += share
            totals.total_gross_volume += tx.gross_amount

            for agg, key in (
                (by_amc, tx.amc_name or UNKNOWN),
                (by_client, tx.investor_name or UNKNOWN),
                (by_scheme, tx.scheme_name or UNKNOWN),
                (by_month, tx.period),
            ):
                agg[key] = agg.get(key, Decimal("0")) + share

        totals.top_amc = _top(by_amc)
        totals.top_client = _top(by_client)
        totals.top_scheme = _top(by_scheme)
        totals.monthly_series = sorted(by_month.items())
        return totals

    def batch_summary(self, transactions: Iterable[BrokerageTransaction]) -> BatchSummary:
        summary = BatchSummary()
        for tx in transactions:
            summary.total_lines += 1
            summary.total_gross += tx.gross_amount
            if not tx.is_mapped:
                summary.unmapped_count += 1
            if tx.status == TransactionStatus.VALIDATED:
                summary.validated_count += 1
        return summary

    # -------------------------------------------------------------------------
    # JSON rendering
    # -------------------------------------------------------------------------

    def summary_to_dict(self, rows: list[MonthlySummary]) -> list[dict]:
        return [
            {
                "month": row.month,
                "count": row.count,
                "gross": to_money(row.gross),
                "myShare": to_money(row.my_share),
            }
            for row in rows
        ]

    def client_summary_to_dict(self, rows: list[ClientSummary]) -> list[dict]:
        return [
            {
                "id": row.client_id,
                "name": row.name,
                "pan": row.pan,
                "count": row.count,
                "gross": to_money(row.gross),
                "myShare": to_money(row.my_share),
            }
            for row in rows
        ]

    def dashboard_to_dict(self, totals: DashboardTotals) -> dict:
        def top(entry):
            name, value = entry
            return {"name": name, "value": to_money(value)}

        return {
            "totalTx": totals.total_tx,
            "totalMyNet": to_money(totals.total_my_net),
            "totalGrossVolume": to_money(totals.total_gross_volume),
            "topAmc": top(totals.top_amc),
            "topClient": top(totals.top_client),
            "topScheme": top(totals.top_scheme),
            "monthlySeries": [
                {"month": month, "myNet": to_money(amount)} for month, amount in totals.monthly_series
            ],
        }

    def invoice_to_dict(self, invoice: PayoutInvoice) -> dict:
        return {
            "id": invoice.id,
            "userId": invoice.user_id,
            "userName": invoice.user_name,
            "month": invoice.month,
            "amount": to_money(invoice.amount),
            "transactionCount": invoice.transaction_count,
            "status": invoice.status.value,
        }

    def batch_summary_to_dict(self, summary: BatchSummary) -> dict:
        return {
            "totalLines": summary.total_lines,
            "totalGross": to_money(summary.total_gross),
            "unmappedCount": summary.unmapped_count,
            "validatedCount": summary.validated_count,
        }

    def preview_to_dict(self, preview: SimulationPreview) -> dict:
        rows = [
            {
                "level": 0,
                "name": preview.level_names[0],
                "amount": to_money(preview.level0_amount),
                "displayOnly": True,
            }
        ]
        for level, amount in preview.breakdown.level_payouts.items():
            rows.append(
                {
                    "level": level,
                    "name": preview.level_names[level],
                    "amount": to_money(amount),
                    "displayOnly": False,
                }
            )
        return {
            "breakdown": breakdown_to_dict(preview.breakdown),
            "levels": rows,
            "totalSharePct": float(preview.total_share_pct),
            "isConfigBalanced": preview.is_config_balanced,
        }
