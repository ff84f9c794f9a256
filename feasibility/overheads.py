"""Monthly overheads, including the rent mirrored from the premises section."""

from __future__ import annotations

from feasibility.calculation import CalculationModule, FieldWrite
from feasibility.convergence import to_number


RENTED_STATUSES = ("Rented", "Leased")

OVERHEAD_LINE_FIELDS = (
    "electricity_cost_monthly",
    "water_cost_monthly",
    "fuel_transport_monthly",
    "maintenance_cost_monthly",
    "rent_monthly",
    "admin_expenses_monthly",
    "sales_marketing_monthly",
    "qc_lab_consumables_monthly",
    "export_marketing_cost_monthly",
    "misc_monthly",
)


def synced_rent(record: dict) -> float:
    if record.get("premises_status") in RENTED_STATUSES:
        return to_number(record.get("rent_per_month"))
    return 0.0


def monthly_overheads_total(record: dict) -> float:
    rent = synced_rent(record)
    lines = sum(rent if key == "rent_monthly" else to_number(record.get(key)) for key in OVERHEAD_LINE_FIELDS)
    return lines + to_number(record.get("monthly_indirect_labor_total"))


class OverheadsModule(CalculationModule):
    name = "overheads"
    trigger_fields = frozenset(
        {"premises_status", "rent_per_month", "monthly_indirect_labor_total", *OVERHEAD_LINE_FIELDS}
    )
    output_fields = frozenset({"monthly_overheads_total"})
    synced_fields = frozenset({"rent_monthly"})

    def compute(self, record, path):
        return [
            FieldWrite.at("rent_monthly", synced_rent(record)),
            FieldWrite.at("monthly_overheads_total", monthly_overheads_total(record)),
        ]
