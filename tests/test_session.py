from __future__ import annotations

from copy import deepcopy
from itertools import combinations

import pytest

import feasibility.runtime_logging as runtime_logging
from feasibility.paths import format_path
from feasibility.session import FeasibilitySession, build_modules, derived_paths
from feasibility.store import ConvergenceError


def test_bulk_load_of_sample_draft_is_bounded(sample_record):
    session = FeasibilitySession(log_events=False)
    result = session.load(sample_record)
    assert result.is_bulk_load
    assert result.trigger is None
    assert 1 < result.commits < 200


def _scaled(record: dict, copies: int) -> dict:
    big = deepcopy(record)
    for key in ("products", "capex_items", "staff"):
        big[key] = [deepcopy(row) for _ in range(copies) for row in record[key]]
    return big


def _with_bom(record: dict) -> dict:
    record = deepcopy(record)
    record["costing_mode"] = "Detailed_BOM"
    for product in record["products"]:
        product["product_bom"] = [
            {"component_type": "Input", "component_name": "Raw Pink Salt Rock", "consumption_per_unit": 1.07, "scrap_percent": 0},
            {"component_type": "Packaging", "component_name": "Standup Pouch 1kg", "consumption_per_unit": 1, "scrap_percent": 2},
            {"component_type": "Packaging", "component_name": "Corrugated Master Carton", "consumption_per_unit": 0.05, "scrap_percent": 0},
        ]
    return record


@pytest.mark.parametrize("copies", [30, 60])
def test_bulk_load_of_large_record_settles_with_bounded_commits(sample_record, copies):
    small = FeasibilitySession(log_events=False)
    small.load(sample_record)

    session = FeasibilitySession(log_events=False)
    result = session.load(_scaled(sample_record, copies))
    record = session.snapshot()
    assert len(record["products"]) == 2 * copies
    assert result.commits < 3 * len(derived_paths(record))
    assert record["monthly_revenue_total"] == pytest.approx(copies * small.get("monthly_revenue_total"), abs=copies)
    assert record["monthly_payroll_total"] == copies * small.get("monthly_payroll_total")
    assert {p["unit_variable_cost"] for p in record["products"][::2]} == {small.get("products[0].unit_variable_cost")}

    again = session.load(deepcopy(record))
    assert again.commits == 1
    assert session.snapshot() == record


def test_bulk_load_of_large_bom_record_costs_every_line(sample_record):
    session = FeasibilitySession(log_events=False)
    result = session.load(_with_bom(_scaled(sample_record, 25)))
    record = session.snapshot()
    lines = [line for p in record["products"] for line in p["product_bom"]]
    assert len(lines) == 150
    assert all(line["calculated_cost_contribution"] > 0 for line in lines)
    assert result.commits < 3 * len(derived_paths(record))

    again = session.load(deepcopy(record))
    assert again.commits == 1
    assert again.derived_written == []


def test_bulk_load_only_writes_owned_derived_paths(sample_record):
    session = FeasibilitySession(log_events=False)
    result = session.load(sample_record)
    owned = set(derived_paths(session.snapshot()))
    assert result.derived_written
    assert set(result.derived_written) <= owned


def test_converged_record_is_a_fixed_point(sample_record):
    session = FeasibilitySession(log_events=False)
    session.load(sample_record)
    converged = session.snapshot()

    again = session.load(deepcopy(converged))
    assert again.commits == 1
    assert again.derived_written == []
    assert session.snapshot() == converged

    fresh = FeasibilitySession(deepcopy(converged), log_events=False)
    assert fresh.store.commit_count == 0


def test_sample_draft_headline_figures(sample_record):
    session = FeasibilitySession(log_events=False)
    session.load(sample_record)
    assert session.get("total_process_loss_percent") == pytest.approx(6.5)
    assert session.get("products[0].net_salt_content_per_unit_kg") == pytest.approx(1.0)
    assert session.get("products[1].net_salt_content_per_unit_kg") == pytest.approx(0.2)
    assert session.get("products[0].unit_variable_cost") == pytest.approx(74.09)
    assert session.get("total_capex") == 16565000
    assert session.get("rent_monthly") == 250000
    assert session.get("monthly_payroll_total") == 915000
    assert session.get("monthly_direct_labor_total") == 650000
    assert session.get("monthly_indirect_labor_total") == 265000
    # Freight is priced per kg: 4 x 24000 x 450000 + 25000 + 4 x 35000.
    assert session.get("monthly_export_logistics_cost") == 43200165000


def test_derived_paths_have_a_single_owner(sample_record):
    session = FeasibilitySession(log_events=False)
    session.load(sample_record)
    record = session.snapshot()
    owned = {m.name: {format_path(p) for p in m.derived_paths(record)} for m in build_modules()}
    for (a, paths_a), (b, paths_b) in combinations(owned.items(), 2):
        assert not paths_a & paths_b, f"{a} and {b} both own {paths_a & paths_b}"


def test_edit_cascade_reaches_working_capital(sample_record):
    session = FeasibilitySession(log_events=False)
    session.load(sample_record)
    before = session.get("working_capital_required")
    result = session.edit("raw_salt_purchase_price_per_kg", 12)
    assert result.trigger == "raw_salt_purchase_price_per_kg"
    assert "monthly_cogs_total" in result.derived_written
    assert "working_capital_required" in result.derived_written
    assert session.get("working_capital_required") > before


def test_edit_returns_pass_result_without_derived_writes_for_plain_fields(sample_record):
    session = FeasibilitySession(log_events=False)
    session.load(sample_record)
    result = session.edit("project_title", "Renamed")
    assert result.commits == 1
    assert result.derived_written == []


def test_session_logs_bulk_load_and_edits(sample_record):
    session = FeasibilitySession()
    session.load(sample_record)
    session.edit("misc_monthly", 25000)
    loads = runtime_logging.read_runtime_events(event="bulk_load")
    edits = runtime_logging.read_runtime_events(event="field_edit")
    assert len(loads) == 1
    assert loads[0]["context"]["commits"] > 1
    assert edits[-1]["message"] == "Edited misc_monthly."
    assert "monthly_overheads_total" in edits[-1]["context"]["derived_written"]


def test_convergence_failure_is_logged_and_raised(sample_record):
    session = FeasibilitySession(log_events=False)
    session.store.max_depth = 2
    with pytest.raises(ConvergenceError):
        session.load(sample_record)
    failures = runtime_logging.read_runtime_events(event="convergence_failure")
    assert len(failures) == 1
    assert failures[0]["level"] == "ERROR"
    assert failures[0]["exception_type"] == "ConvergenceError"
    assert failures[0]["context"]["kind"] == "depth"


def test_close_detaches_every_module(blank_record):
    session = FeasibilitySession(blank_record, log_events=False)
    assert session.store.subscriber_count == 9
    session.close()
    assert session.store.subscriber_count == 0
    session.edit("sorting_wastage_percent", 10)
    assert session.get("total_process_loss_percent") == pytest.approx(3.5)
