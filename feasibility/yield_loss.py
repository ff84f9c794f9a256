"""Process yield: total loss across sorting, washing and grinding."""

from __future__ import annotations

from feasibility.calculation import CalculationModule, FieldWrite
from feasibility.convergence import to_number


LOSS_STAGE_FIELDS = (
    "sorting_wastage_percent",
    "washing_loss_percent",
    "grinding_sieving_loss_percent",
)


def total_process_loss(record: dict) -> float:
    # No clamping; sums above 100 are surfaced by advisory_warnings.
    return sum(to_number(record.get(key)) for key in LOSS_STAGE_FIELDS)


class YieldLossModule(CalculationModule):
    name = "yield"
    trigger_fields = frozenset(LOSS_STAGE_FIELDS)
    output_fields = frozenset({"total_process_loss_percent"})

    def compute(self, record, path):
        return [FieldWrite.cents("total_process_loss_percent", total_process_loss(record))]
