from __future__ import annotations

from feasibility.integrity_checks import run_integrity_checks
from feasibility.session import FeasibilitySession


def _converged(record: dict) -> FeasibilitySession:
    session = FeasibilitySession(log_events=False)
    session.load(record)
    return session


def test_integrity_checks_pass_for_sample_draft(sample_record):
    session = _converged(sample_record)
    assert run_integrity_checks(session.snapshot()) == []


def test_integrity_checks_pass_after_financing_and_bom_edits(sample_record):
    session = _converged(sample_record)
    session.edit("grace_period_months", 6)
    session.edit("costing_mode", "Detailed_BOM")
    session.edit("products[0].product_bom[0].component_type", "Input")
    session.edit("products[0].product_bom[0].component_name", "Raw Pink Salt Rock")
    session.edit("products[0].product_bom[0].consumption_per_unit", 1.07)
    session.edit("premises_status", "Owned")
    assert session.get("installment_amount") == 55556
    assert run_integrity_checks(session.snapshot()) == []


def test_integrity_checks_detect_identity_break(sample_record):
    broken = _converged(sample_record).snapshot()
    broken["monthly_revenue_total"] += 1000
    broken["capex_items"][0]["total_cost"] += 10
    findings = run_integrity_checks(broken)
    check_names = {f["Check"] for f in findings}
    assert "Revenue total" in check_names
    assert "Gross profit" in check_names
    assert "Capex rows" in check_names
    capex = next(f for f in findings if f["Check"] == "Capex rows")
    assert capex["Location"] == "capex_items[0]"
    assert capex["Max Abs Delta"] == 10


def test_integrity_checks_reject_non_record():
    findings = run_integrity_checks(None)
    assert findings[0]["Check"] == "Record not available"
