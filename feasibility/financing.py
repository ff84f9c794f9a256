"""Flat loan amortization.

Unlike the other modules this one only reacts to direct edits of the five
financing inputs; a bulk load leaves the stored installment figures alone.
Markup is captured on the form but not applied to the installment.
"""

from __future__ import annotations

from feasibility.calculation import CalculationModule, FieldWrite
from feasibility.convergence import round_whole, to_number


LOAN_INPUT_FIELDS = (
    "tenor_years",
    "loan_amount_requested",
    "markup_rate_percent",
    "owner_equity_contribution",
    "grace_period_months",
)


def loan_schedule(record: dict) -> dict[str, int]:
    total_months = to_number(record.get("tenor_years")) * 12
    repayment_months = max(0.0, total_months - to_number(record.get("grace_period_months")))
    installment = 0.0
    if repayment_months > 0:
        installment = to_number(record.get("loan_amount_requested")) / repayment_months
    return {
        "total_tenor_months": int(round_whole(total_months)),
        "num_installments": int(round_whole(repayment_months)),
        "installment_amount": int(round_whole(installment)),
    }


class LoanAmortizationModule(CalculationModule):
    name = "financing"
    trigger_fields = frozenset(LOAN_INPUT_FIELDS)
    output_fields = frozenset({"total_tenor_months", "num_installments", "installment_amount"})
    on_bulk_load = False
    tolerance_gated = False

    def triggered_by(self, path):
        return path is not None and len(path) == 1 and path[0] in self.trigger_fields

    def compute(self, record, path):
        schedule = loan_schedule(record)
        return [FieldWrite.at(key, schedule[key]) for key in ("total_tenor_months", "num_installments", "installment_amount")]
