from __future__ import annotations

from copy import deepcopy

import pytest

from feasibility.session import FeasibilitySession


def test_export_logistics_total_and_disable(blank_record):
    record = deepcopy(blank_record)
    record.update(
        {
            "exporting_enabled": True,
            "shipment_frequency_per_month": 2,
            "avg_export_order_size_kg": 1000,
            "freight_cost_per_kg_or_container": 3,
            "insurance_cost_monthly": 500,
            "clearing_forwarding_cost_per_shipment": 250,
        }
    )
    session = FeasibilitySession(record, log_events=False)
    # 2 x 1000 x 3 + 500 + 2 x 250
    assert session.get("monthly_export_logistics_cost") == 7000

    session.edit("exporting_enabled", False)
    assert session.get("monthly_export_logistics_cost") == 0


def test_capex_totals(blank_record):
    record = deepcopy(blank_record)
    record.update(
        {
            "capex_items": [
                {"item_name": "Washing line", "category": "Machinery", "quantity": 1, "rate_per_unit": 6500000},
                {"item_name": "Sorter", "category": "Machinery", "quantity": 1, "rate_per_unit": 2500000},
            ],
            "contingency_percent": 5,
            "preoperating_cost_lump_sum": 500000,
        }
    )
    session = FeasibilitySession(record, log_events=False)
    assert session.get("capex_items[0].total_cost") == 6500000
    assert session.get("capex_subtotal") == 9000000
    assert session.get("contingency_amount") == 450000
    assert session.get("total_capex") == 9950000

    session.edit("capex_items[1].quantity", 2)
    assert session.get("capex_items[1].total_cost") == 5000000
    assert session.get("total_capex") == 12575000


def test_capex_new_row_is_totalled(blank_record):
    session = FeasibilitySession(blank_record, log_events=False)
    session.edit("capex_items[1].rate_per_unit", 1000)
    session.edit("capex_items[1].quantity", 3)
    assert session.get("capex_items[1].total_cost") == 3000
    assert session.get("capex_subtotal") == 3000


def test_payroll_split_by_direct_labor_flag(blank_record):
    record = deepcopy(blank_record)
    record.update(
        {
            "staff": [
                {"role": "Manager", "count": 1, "monthly_salary_per_person": 150000, "is_direct_labor": False},
                {"role": "Operators", "count": 4, "monthly_salary_per_person": 45000, "is_direct_labor": True},
            ]
        }
    )
    session = FeasibilitySession(record, log_events=False)
    assert session.get("monthly_payroll_total") == 330000
    assert session.get("monthly_direct_labor_total") == 180000
    assert session.get("monthly_indirect_labor_total") == 150000

    session.edit("staff[0].is_direct_labor", True)
    assert session.get("monthly_indirect_labor_total") == 0


def test_rent_sync_follows_premises_status(blank_record):
    record = deepcopy(blank_record)
    record.update({"premises_status": "Owned", "rent_per_month": 250000, "electricity_cost_monthly": 1000})
    session = FeasibilitySession(record, log_events=False)
    assert session.get("rent_monthly") == 0
    assert session.get("monthly_overheads_total") == 1000

    session.edit("premises_status", "Rented")
    assert session.get("rent_monthly") == 250000
    assert session.get("monthly_overheads_total") == 251000

    session.edit("premises_status", "Leased")
    session.edit("rent_per_month", 100000)
    assert session.get("rent_monthly") == 100000

    # A manual rent edit is overwritten by the sync.
    session.edit("rent_monthly", 5)
    assert session.get("rent_monthly") == 100000


def test_overheads_include_indirect_labor(blank_record):
    record = deepcopy(blank_record)
    record.update(
        {
            "water_cost_monthly": 25000,
            "misc_monthly": 5000,
            "staff": [{"role": "Accountant", "count": 1, "monthly_salary_per_person": 55000, "is_direct_labor": False}],
        }
    )
    session = FeasibilitySession(record, log_events=False)
    assert session.get("monthly_overheads_total") == 85000

    session.edit("staff[0].count", 2)
    assert session.get("monthly_overheads_total") == 140000


def test_profit_and_loss_consolidation(blank_record):
    record = deepcopy(blank_record)
    record.update(
        {
            "raw_salt_purchase_price_per_kg": 0,
            "exporting_enabled": True,
            "shipment_frequency_per_month": 1,
            "avg_export_order_size_kg": 100,
            "freight_cost_per_kg_or_container": 10,
            "electricity_cost_monthly": 20000,
            "products": [
                {
                    "uom": "kg",
                    "target_market": "Domestic",
                    "installed_capacity_per_month": 2000,
                    "year1_capacity_utilization_percent": 50,
                    "domestic_selling_price_per_unit": 100,
                    "net_salt_content_per_unit_kg": 1,
                    "packaging_cost_per_unit": 40,
                    "product_bom": [],
                }
            ],
        }
    )
    session = FeasibilitySession(record, log_events=False)
    assert session.get("products[0].gross_units") == 1000
    assert session.get("products[0].good_units") == 1000
    assert session.get("monthly_revenue_total") == 100000
    assert session.get("monthly_cogs_total") == 40000
    assert session.get("monthly_gross_profit") == 60000
    # 60000 - 20000 overheads - 1000 export logistics
    assert session.get("monthly_net_profit_before_finance") == 39000

    session.edit("electricity_cost_monthly", 30000)
    assert session.get("monthly_net_profit_before_finance") == 29000


def test_working_capital_requirement(blank_record):
    record = deepcopy(blank_record)
    record.update(
        {
            "raw_salt_purchase_price_per_kg": 0,
            "exporting_enabled": True,
            "electricity_cost_monthly": 30000,
            "raw_material_inventory_days": 30,
            "packaging_inventory_days": 30,
            "finished_goods_inventory_days": 15,
            "domestic_receivables_days": 30,
            "export_receivables_days": 60,
            "payables_days": 15,
            "cash_buffer_days": 10,
            "products": [
                {
                    "uom": "kg",
                    "target_market": "Domestic",
                    "installed_capacity_per_month": 3000,
                    "year1_capacity_utilization_percent": 100,
                    "domestic_selling_price_per_unit": 100,
                    "net_salt_content_per_unit_kg": 1,
                    "packaging_cost_per_unit": 60,
                    "product_bom": [],
                }
            ],
        }
    )
    session = FeasibilitySession(record, log_events=False)
    # Revenue 300000, COGS 180000, overheads 30000.
    assert session.get("daily_cogs") == 6000
    assert session.get("daily_sales") == 10000
    assert session.get("inventory_investment") == 450000
    # Weighted receivable days (30 + 60) / 2 while exporting.
    assert session.get("receivables_investment") == 450000
    assert session.get("payables_credit") == 90000
    assert session.get("cash_buffer") == 10000
    assert session.get("working_capital_required") == 820000

    session.edit("exporting_enabled", False)
    assert session.get("receivables_investment") == 300000
    assert session.get("working_capital_required") == 670000


@pytest.fixture
def loan_session(blank_record):
    record = deepcopy(blank_record)
    record.update({"loan_amount_requested": 3000000, "tenor_years": 5, "grace_period_months": 6})
    return FeasibilitySession(record, log_events=False)


def test_loan_is_not_computed_on_bulk_load(loan_session):
    assert loan_session.get("installment_amount") == ""
    assert loan_session.get("num_installments") == ""


def test_loan_installment_after_financing_edit(loan_session):
    loan_session.edit("grace_period_months", 6)
    assert loan_session.get("total_tenor_months") == 60
    assert loan_session.get("num_installments") == 54
    assert loan_session.get("installment_amount") == 55556

    # Markup is not applied to the flat installment.
    loan_session.edit("markup_rate_percent", 18)
    assert loan_session.get("installment_amount") == 55556


def test_loan_zero_repayment_months_gives_zero_installment(loan_session):
    loan_session.edit("tenor_years", 0.5)
    assert loan_session.get("total_tenor_months") == 6
    assert loan_session.get("num_installments") == 0
    assert loan_session.get("installment_amount") == 0


def test_loan_writes_even_when_unchanged(loan_session):
    first = loan_session.edit("loan_amount_requested", 3000000)
    second = loan_session.edit("loan_amount_requested", 3000000)
    assert first.commits == second.commits == 4
    assert second.derived_written == ["total_tenor_months", "num_installments", "installment_amount"]


def test_loan_ignores_unrelated_edits(loan_session):
    loan_session.edit("electricity_cost_monthly", 1000)
    assert loan_session.get("installment_amount") == ""
