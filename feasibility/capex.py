"""Capital expenditure totals."""

from __future__ import annotations

from feasibility.calculation import CalculationModule, FieldWrite
from feasibility.convergence import to_number


def capex_row_total(item: dict) -> float:
    return to_number(item.get("quantity")) * to_number(item.get("rate_per_unit"))


class CapexModule(CalculationModule):
    name = "capex"
    trigger_fields = frozenset({"capex_items", "preoperating_cost_lump_sum", "contingency_percent"})
    output_fields = frozenset({"capex_subtotal", "contingency_amount", "total_capex"})
    row_outputs = {"capex_items": frozenset({"total_cost"})}

    def compute(self, record, path):
        writes: list[FieldWrite] = []
        subtotal = 0.0
        for idx, item in enumerate(record.get("capex_items") or []):
            if not isinstance(item, dict):
                continue
            row_total = capex_row_total(item)
            writes.append(FieldWrite.at(("capex_items", idx, "total_cost"), row_total))
            subtotal += row_total
        contingency = subtotal * to_number(record.get("contingency_percent")) / 100.0
        total = subtotal + contingency + to_number(record.get("preoperating_cost_lump_sum"))
        writes.append(FieldWrite.at("capex_subtotal", subtotal))
        writes.append(FieldWrite.at("contingency_amount", contingency))
        writes.append(FieldWrite.at("total_capex", total))
        return writes
