"""Accounting identity checks over a converged record."""

from __future__ import annotations

from typing import Any

import numpy as np

from feasibility.convergence import to_number
from feasibility.overheads import OVERHEAD_LINE_FIELDS
from feasibility.product_costing import gross_units, line_revenue


def _finding(check: str, max_abs_delta: float, location: str, lhs_name: str, rhs_name: str) -> dict[str, Any]:
    return {
        "Check": check,
        "Max Abs Delta": float(max_abs_delta),
        "Location": location,
        "LHS": lhs_name,
        "RHS": rhs_name,
    }


def _check_identity(
    findings: list[dict[str, Any]],
    check_name: str,
    lhs_name: str,
    rhs_name: str,
    lhs,
    rhs,
    tol: float,
    labels: list[str] | None = None,
) -> None:
    delta = np.nan_to_num(np.atleast_1d(np.asarray(lhs, dtype=float) - np.asarray(rhs, dtype=float)), nan=0.0)
    if len(delta) == 0:
        return
    abs_delta = np.abs(delta)
    max_abs = float(np.max(abs_delta))
    if max_abs > float(tol):
        idx = int(np.argmax(abs_delta))
        location = labels[idx] if labels and idx < len(labels) else ""
        findings.append(_finding(check_name, max_abs, location, lhs_name, rhs_name))


def _rows(record: dict, key: str) -> list[dict]:
    return [row for row in (record.get(key) or []) if isinstance(row, dict)]


def _column(rows: list[dict], key: str) -> np.ndarray:
    return np.array([to_number(row.get(key)) for row in rows], dtype=float)


def run_integrity_checks(record: dict, tol: float = 1.0) -> list[dict[str, Any]]:
    """Return identity findings; an empty list means every check passed.

    Stored currency figures are whole-unit rounded, so sums over ``n`` rounded
    terms are allowed an extra half unit per term on top of ``tol``.
    """
    if not isinstance(record, dict):
        return [{"Check": "Record not available", "Max Abs Delta": np.nan, "Location": "", "LHS": "", "RHS": ""}]

    findings: list[dict[str, Any]] = []

    def val(key: str) -> float:
        return to_number(record.get(key))

    products = _rows(record, "products")
    labels = [f"products[{idx}]" for idx in range(len(products))]
    slack = tol + 0.5 * (len(products) + 1)

    # Product lines.
    _check_identity(
        findings,
        "Line revenue",
        "monthly_revenue_sku",
        "gross units x net price",
        _column(products, "monthly_revenue_sku"),
        [line_revenue(p, record) for p in products],
        tol,
        labels,
    )
    _check_identity(
        findings,
        "Line COGS",
        "monthly_cogs_sku",
        "gross units x unit_variable_cost",
        _column(products, "monthly_cogs_sku"),
        [gross_units(p) * to_number(p.get("unit_variable_cost")) for p in products],
        tol,
        labels,
    )
    _check_identity(
        findings,
        "Revenue total",
        "monthly_revenue_total",
        "sum(monthly_revenue_sku)",
        val("monthly_revenue_total"),
        _column(products, "monthly_revenue_sku").sum(),
        slack,
    )
    _check_identity(
        findings,
        "COGS total",
        "monthly_cogs_total",
        "sum(monthly_cogs_sku)",
        val("monthly_cogs_total"),
        _column(products, "monthly_cogs_sku").sum(),
        slack,
    )

    # Profit.
    _check_identity(
        findings,
        "Gross profit",
        "monthly_gross_profit",
        "monthly_revenue_total - monthly_cogs_total",
        val("monthly_gross_profit"),
        val("monthly_revenue_total") - val("monthly_cogs_total"),
        tol + 1.5,
    )
    _check_identity(
        findings,
        "Net profit before finance",
        "monthly_net_profit_before_finance",
        "gross profit - overheads - export logistics",
        val("monthly_net_profit_before_finance"),
        val("monthly_gross_profit") - val("monthly_overheads_total") - val("monthly_export_logistics_cost"),
        tol + 1.5,
    )

    # Capex.
    capex_items = _rows(record, "capex_items")
    _check_identity(
        findings,
        "Capex rows",
        "total_cost",
        "quantity x rate_per_unit",
        _column(capex_items, "total_cost"),
        _column(capex_items, "quantity") * _column(capex_items, "rate_per_unit"),
        tol,
        [f"capex_items[{idx}]" for idx in range(len(capex_items))],
    )
    _check_identity(
        findings,
        "Capex subtotal",
        "capex_subtotal",
        "sum(total_cost)",
        val("capex_subtotal"),
        _column(capex_items, "total_cost").sum(),
        tol + 0.5 * (len(capex_items) + 1),
    )
    _check_identity(
        findings,
        "Total capex",
        "total_capex",
        "subtotal + contingency + pre-operating",
        val("total_capex"),
        val("capex_subtotal") + val("contingency_amount") + val("preoperating_cost_lump_sum"),
        tol + 1.5,
    )

    # Payroll and overheads.
    _check_identity(
        findings,
        "Payroll split",
        "monthly_payroll_total",
        "direct + indirect labor",
        val("monthly_payroll_total"),
        val("monthly_direct_labor_total") + val("monthly_indirect_labor_total"),
        tol + 1.0,
    )
    _check_identity(
        findings,
        "Overheads total",
        "monthly_overheads_total",
        "sum(overhead lines) + indirect labor",
        val("monthly_overheads_total"),
        sum(val(key) for key in OVERHEAD_LINE_FIELDS) + val("monthly_indirect_labor_total"),
        tol + 0.5 * (len(OVERHEAD_LINE_FIELDS) + 2),
    )

    # Working capital.
    _check_identity(
        findings,
        "Working capital",
        "working_capital_required",
        "inventory + receivables + cash buffer - payables",
        val("working_capital_required"),
        val("inventory_investment") + val("receivables_investment") + val("cash_buffer") - val("payables_credit"),
        tol + 2.5,
    )

    # Installments only exist once a financing input has been edited.
    installments = val("num_installments")
    if installments > 0:
        _check_identity(
            findings,
            "Loan repayment",
            "installment_amount x num_installments",
            "loan_amount_requested",
            val("installment_amount") * installments,
            val("loan_amount_requested"),
            tol + 0.5 * installments,
        )

    return findings
