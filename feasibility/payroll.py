from __future__ import annotations

from feasibility.calculation import CalculationModule, FieldWrite
from feasibility.convergence import to_number


def payroll_totals(record: dict) -> tuple[float, float, float]:
    """Return ``(total, direct, indirect)`` monthly payroll."""
    total = 0.0
    direct = 0.0
    for member in record.get("staff") or []:
        if not isinstance(member, dict):
            continue
        cost = to_number(member.get("count")) * to_number(member.get("monthly_salary_per_person"))
        total += cost
        if member.get("is_direct_labor"):
            direct += cost
    return total, direct, total - direct


class PayrollModule(CalculationModule):
    name = "payroll"
    trigger_fields = frozenset({"staff"})
    output_fields = frozenset(
        {"monthly_payroll_total", "monthly_direct_labor_total", "monthly_indirect_labor_total"}
    )

    def compute(self, record, path):
        total, direct, indirect = payroll_totals(record)
        return [
            FieldWrite.at("monthly_payroll_total", total),
            FieldWrite.at("monthly_direct_labor_total", direct),
            FieldWrite.at("monthly_indirect_labor_total", indirect),
        ]
