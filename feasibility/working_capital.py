"""Working capital requirement from day-count rules."""

from __future__ import annotations

from feasibility.calculation import CalculationModule, FieldWrite
from feasibility.convergence import to_number


DAYS_PER_MONTH = 30.0

DAY_COUNT_FIELDS = (
    "raw_material_inventory_days",
    "packaging_inventory_days",
    "finished_goods_inventory_days",
    "domestic_receivables_days",
    "export_receivables_days",
    "payables_days",
    "cash_buffer_days",
)

WORKING_CAPITAL_OUTPUTS = (
    "daily_cogs",
    "daily_sales",
    "inventory_investment",
    "receivables_investment",
    "payables_credit",
    "cash_buffer",
    "working_capital_required",
)


def weighted_receivable_days(record: dict) -> float:
    domestic = to_number(record.get("domestic_receivables_days"))
    export = to_number(record.get("export_receivables_days"))
    if record.get("exporting_enabled") and export > 0:
        return (domestic + export) / 2.0
    return domestic


def working_capital(record: dict) -> dict[str, float]:
    daily_cogs = to_number(record.get("monthly_cogs_total")) / DAYS_PER_MONTH
    daily_sales = to_number(record.get("monthly_revenue_total")) / DAYS_PER_MONTH
    inventory_days = sum(
        to_number(record.get(key))
        for key in ("raw_material_inventory_days", "packaging_inventory_days", "finished_goods_inventory_days")
    )
    inventory = daily_cogs * inventory_days
    receivables = daily_sales * weighted_receivable_days(record)
    payables = daily_cogs * to_number(record.get("payables_days"))
    buffer = to_number(record.get("monthly_overheads_total")) / DAYS_PER_MONTH * to_number(record.get("cash_buffer_days"))
    return {
        "daily_cogs": daily_cogs,
        "daily_sales": daily_sales,
        "inventory_investment": inventory,
        "receivables_investment": receivables,
        "payables_credit": payables,
        "cash_buffer": buffer,
        "working_capital_required": inventory + receivables + buffer - payables,
    }


class WorkingCapitalModule(CalculationModule):
    name = "working_capital"
    trigger_fields = frozenset(
        {
            "monthly_cogs_total",
            "monthly_revenue_total",
            "monthly_overheads_total",
            "products",
            "exporting_enabled",
            *DAY_COUNT_FIELDS,
        }
    )
    output_fields = frozenset(WORKING_CAPITAL_OUTPUTS)

    def compute(self, record, path):
        figures = working_capital(record)
        return [FieldWrite.at(key, figures[key]) for key in WORKING_CAPITAL_OUTPUTS]
