"""
Payout Processor - Main Orchestrator

Accepts raw dictionaries (API payloads), routes them through the calculators
and returns JSON-ready dictionaries.
"""

import json
import logging
from typing import Any, Dict

from .calculators import PayoutCalculator, PayoutSimulator, ShareCalculator
from .models import BrokerageTransaction, SharingConfig, TeamMember
from .reports import ReportBuilder, breakdown_to_dict, to_money, transaction_to_dict
from .settings import default_global_config
from .validators import ConfigValidator, ensure_finite_amount

logger = logging.getLogger(__name__)


class PayoutProcessor:
    """
    Main orchestrator for payout processing.

    Every entry point follows the same steps:
    1. Parse input (config defaults to the global configuration)
    2. Run the calculator
    3. Build output
    """

    def __init__(self):
        self.payout_calculator = PayoutCalculator()
        self.share_calculator = ShareCalculator()
        self.simulator = PayoutSimulator(self.payout_calculator)
        self.config_validator = ConfigValidator()
        self.report_builder = ReportBuilder(self.share_calculator)

    def process_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Compute the breakdown for a single gross amount."""
        gross = ensure_finite_amount(data.get("gross"))
        config = self._config_from(data)
        breakdown = self.payout_calculator.compute_breakdown(gross, config)
        return breakdown_to_dict(breakdown)

    def batch_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Allocate a batch of transactions and summarise it."""
        transactions = [BrokerageTransaction.from_dict(tx) for tx in data.get("transactions", [])]
        config = self._config_from(data)

        processed = self.payout_calculator.compute_for_batch(transactions, config)
        summary = self.report_builder.batch_summary(processed)

        return {
            "transactions": [transaction_to_dict(tx) for tx in processed],
            "summary": self.report_builder.batch_summary_to_dict(summary),
        }

    def simulate_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Preview a configuration against a test amount."""
        amount = data.get("amount", PayoutSimulator.DEFAULT_TEST_AMOUNT)
        config = self._config_from(data)
        preview = self.simulator.simulate(amount, config)
        return self.report_builder.preview_to_dict(preview)

    def statement_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Statement for one member: monthly rows, client-wise rows and dashboard
        totals, plus an invoice draft when a month is given.
        """
        transactions = [BrokerageTransaction.from_dict(tx) for tx in data.get("transactions", [])]
        member = TeamMember.from_dict(data["member"])
        config = self._config_from(data)

        rows = self.report_builder.monthly_summary(transactions, member, config)
        result = {
            "memberId": member.id,
            "level": member.level,
            "months": self.report_builder.summary_to_dict(rows),
            "totalShare": to_money(self.report_builder.total_share(transactions, member, config)),
            "clients": self.report_builder.client_summary_to_dict(
                self.report_builder.client_summary(transactions, member, config)
            ),
            "dashboard": self.report_builder.dashboard_to_dict(
                self.report_builder.dashboard_totals(transactions, member, config)
            ),
        }

        month = data.get("month")
        if month:
            invoice = self.report_builder.draft_invoice(transactions, member, month, config)
            result["invoice"] = self.report_builder.invoice_to_dict(invoice)
        return result

    def validate_config_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Check a configuration the way the admin save action does."""
        config = SharingConfig.from_dict(data["config"])
        self.config_validator.validate_for_save(config)
        return {"status": "ok", "config": config.to_dict()}

    def validate_override_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Check a per-user override the way the admin override editor does and
        return the member with it applied. "levels": null resets the member to
        the global levels.
        """
        member = TeamMember.from_dict(data["member"])
        levels = data.get("levels")
        if levels is None:
            member = member.without_override()
        else:
            member = member.with_override(self.config_validator.validate_override(levels))
        return {"status": "ok", "member": member.to_dict()}

    def _config_from(self, data: Dict[str, Any]) -> SharingConfig:
        if data.get("config"):
            return SharingConfig.from_dict(data["config"])
        return default_global_config()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def compute_breakdown_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """Compute a single breakdown from a Python dict and return a Python dict."""
    processor = PayoutProcessor()
    return processor.process_from_dict(input_data)


def process_batch_from_json(json_input: str) -> str:
    """
    Allocate a batch from a JSON string and return a JSON string.
    Errors are reported in the returned document rather than raised.
    """
    try:
        input_data = json.loads(json_input)
        processor = PayoutProcessor()
        result = processor.batch_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        logger.warning("Batch rejected: %s", e)
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        logger.exception("Batch processing failed")
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
