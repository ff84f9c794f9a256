"""Tabular product summary and headline feasibility metrics."""

from __future__ import annotations

import numpy as np
import pandas as pd

from feasibility.convergence import to_number
from feasibility.product_costing import gross_units, net_selling_price


PRODUCT_COLUMNS = [
    "SKU",
    "Target Market",
    "Gross Units",
    "Net Price",
    "Unit Variable Cost",
    "Unit Margin",
    "Monthly Revenue",
    "Monthly COGS",
    "Monthly Gross Profit",
]


def _safe_div(a: float, b: float) -> float:
    return float(a / b) if b else 0.0


def product_lines_frame(record: dict) -> pd.DataFrame:
    rows = []
    for product in record.get("products") or []:
        if not isinstance(product, dict):
            continue
        units = gross_units(product)
        price = net_selling_price(product, record)
        unit_cost = to_number(product.get("unit_variable_cost"))
        revenue = to_number(product.get("monthly_revenue_sku"))
        cogs = to_number(product.get("monthly_cogs_sku"))
        rows.append(
            {
                "SKU": product.get("sku_name") or "",
                "Target Market": product.get("target_market") or "",
                "Gross Units": units,
                "Net Price": price,
                "Unit Variable Cost": unit_cost,
                "Unit Margin": price - unit_cost,
                "Monthly Revenue": revenue,
                "Monthly COGS": cogs,
                "Monthly Gross Profit": revenue - cogs,
            }
        )
    return pd.DataFrame(rows, columns=PRODUCT_COLUMNS)


def compute_metrics(record: dict) -> dict:
    df = product_lines_frame(record)
    revenue = to_number(record.get("monthly_revenue_total"))
    gross_profit = to_number(record.get("monthly_gross_profit"))
    net_profit = to_number(record.get("monthly_net_profit_before_finance"))
    fixed_costs = to_number(record.get("monthly_overheads_total")) + to_number(record.get("monthly_export_logistics_cost"))

    cm_pct = _safe_div(gross_profit, revenue)
    installment = to_number(record.get("installment_amount"))
    loan = to_number(record.get("loan_amount_requested"))
    equity = to_number(record.get("owner_equity_contribution"))
    project_cost = to_number(record.get("total_capex")) + to_number(record.get("working_capital_required"))

    if df.empty:
        revenue_share = pd.Series(dtype=float)
    else:
        revenue_share = (df.set_index("SKU")["Monthly Revenue"] / (df["Monthly Revenue"].sum() or np.nan)).fillna(0.0)

    return {
        "product_lines": df,
        "revenue_share_by_sku": revenue_share,
        "gross_margin": cm_pct,
        "net_margin_before_finance": _safe_div(net_profit, revenue),
        "break_even_revenue": _safe_div(fixed_costs, cm_pct),
        "dscr_monthly": _safe_div(net_profit, installment) if installment else np.nan,
        "debt_to_equity": _safe_div(loan, equity),
        "project_cost": project_cost,
        "funding_gap": project_cost - loan - equity,
        "annual_net_profit_before_finance": net_profit * 12,
        "payback_years": _safe_div(to_number(record.get("total_capex")), net_profit * 12) if net_profit > 0 else np.nan,
    }
