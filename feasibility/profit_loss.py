"""Monthly profit consolidation across product lines."""

from __future__ import annotations

from feasibility.calculation import CalculationModule, FieldWrite
from feasibility.convergence import to_number
from feasibility.product_costing import PRODUCT_ROW_OUTPUTS, gross_units, line_revenue


def profit_figures(record: dict) -> dict[str, float]:
    """Gross and net profit before finance from the current product lines.

    Line COGS uses the unit variable cost already derived on each line.
    """
    revenue = 0.0
    cogs = 0.0
    for product in record.get("products") or []:
        if not isinstance(product, dict):
            continue
        revenue += line_revenue(product, record)
        cogs += gross_units(product) * to_number(product.get("unit_variable_cost"))
    gross_profit = revenue - cogs
    net_profit = (
        gross_profit
        - to_number(record.get("monthly_overheads_total"))
        - to_number(record.get("monthly_export_logistics_cost"))
    )
    return {"revenue": revenue, "cogs": cogs, "gross_profit": gross_profit, "net_profit": net_profit}


class ProfitLossModule(CalculationModule):
    name = "profit_loss"
    trigger_fields = frozenset(
        {
            "products",
            "monthly_overheads_total",
            "monthly_export_logistics_cost",
            "exporting_enabled",
            # FX moves line revenue without touching any product row.
            "monthly_revenue_total",
            "monthly_cogs_total",
        }
    )
    output_fields = frozenset({"monthly_gross_profit", "monthly_net_profit_before_finance"})
    row_outputs = {"products": frozenset({"gross_units", "good_units"})}
    ignored_row_fields = {"products": PRODUCT_ROW_OUTPUTS - {"unit_variable_cost"}}

    def compute(self, record, path):
        writes: list[FieldWrite] = []
        for idx, product in enumerate(record.get("products") or []):
            if not isinstance(product, dict):
                continue
            units = gross_units(product)
            writes.append(FieldWrite.at(("products", idx, "gross_units"), units))
            # No reject rate is modelled yet.
            writes.append(FieldWrite.at(("products", idx, "good_units"), units))
        figures = profit_figures(record)
        writes.append(FieldWrite.at("monthly_gross_profit", figures["gross_profit"]))
        writes.append(FieldWrite.at("monthly_net_profit_before_finance", figures["net_profit"]))
        return writes
