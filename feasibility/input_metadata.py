"""Input guidance metadata and advisory range checks."""

from __future__ import annotations

from typing import Any

from feasibility.convergence import to_number
from feasibility.product_costing import COSTING_BOM, MIN_LOSS_FACTOR, costing_mode, resolve_component_rate
from feasibility.yield_loss import total_process_loss


INPUT_GUIDANCE: dict[str, dict[str, Any]] = {
    "fx_usd_to_pkr": {"min": 150.0, "max": 450.0, "note": "Blank rates fall back to 280 PKR per USD."},
    "sorting_wastage_percent": {"min": 0.0, "max": 10.0, "note": "Hand sorting of raw rock typically rejects a few percent."},
    "washing_loss_percent": {"min": 0.0, "max": 5.0, "note": "Brine washing dissolves a small share of the salt."},
    "grinding_sieving_loss_percent": {"min": 0.0, "max": 5.0, "note": "Fines and dust lost during grinding and sieving."},
    "raw_salt_purchase_price_per_kg": {"min": 2.0, "max": 40.0, "note": "Mine-gate rock salt price per kg."},
    "contingency_percent": {"min": 0.0, "max": 15.0, "note": "Banks usually expect 5 to 10 percent capex contingency."},
    "shifts_per_day": {"min": 1, "max": 3, "note": "Production shifts run per working day."},
    "working_days_per_month": {"min": 20, "max": 30, "note": "Plant operating days per month."},
    "raw_material_inventory_days": {"min": 0.0, "max": 120.0, "note": "Days of raw rock held in stock."},
    "packaging_inventory_days": {"min": 0.0, "max": 120.0, "note": "Days of packaging material held in stock."},
    "finished_goods_inventory_days": {"min": 0.0, "max": 90.0, "note": "Days of packed goods awaiting dispatch."},
    "domestic_receivables_days": {"min": 0.0, "max": 90.0, "note": "Collection period for local buyers."},
    "export_receivables_days": {"min": 0.0, "max": 120.0, "note": "Collection period for export buyers, longer under LC terms."},
    "payables_days": {"min": 0.0, "max": 90.0, "note": "Credit period taken from suppliers."},
    "cash_buffer_days": {"min": 0.0, "max": 60.0, "note": "Days of overheads kept as a cash cushion."},
    "markup_rate_percent": {"min": 0.0, "max": 25.0, "note": "Annual markup on the term finance facility."},
    "grace_period_months": {"min": 0, "max": 24, "note": "Months before principal repayment starts."},
    "tenor_years": {"min": 1, "max": 10, "note": "Term finance tenor including the grace period."},
}

PRODUCT_GUIDANCE: dict[str, dict[str, Any]] = {
    "year1_capacity_utilization_percent": {"min": 10.0, "max": 100.0, "note": "First-year utilization of installed capacity."},
    "expected_discount_or_commission_percent": {"min": 0.0, "max": 30.0, "note": "Trade discount or agent commission."},
}


def _fmt(v: float) -> str:
    if abs(v - round(v)) < 1e-9:
        return f"{int(round(v))}"
    return f"{v:.3f}".rstrip("0").rstrip(".")


def help_with_guidance(key: str, base_help: str) -> str:
    g = INPUT_GUIDANCE.get(key) or PRODUCT_GUIDANCE.get(key)
    if not g:
        return base_help
    return f"{base_help} Reasonable range: {_fmt(g['min'])} to {_fmt(g['max'])}. {g['note']}"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _range_warning(label: str, value: Any, g: dict[str, Any]) -> str | None:
    if _is_blank(value):
        return None
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    if v < g["min"] or v > g["max"]:
        return f"{label}={v:.3f} is outside the recommended range [{_fmt(g['min'])}, {_fmt(g['max'])}]."
    return None


def advisory_warnings(record: dict) -> list[str]:
    """Non-blocking warnings for values the engine accepts silently."""
    warnings: list[str] = []
    for key, g in INPUT_GUIDANCE.items():
        if key not in record:
            continue
        msg = _range_warning(key, record[key], g)
        if msg:
            warnings.append(msg)

    products = record.get("products") or []
    for idx, product in enumerate(products):
        if not isinstance(product, dict):
            continue
        for key, g in PRODUCT_GUIDANCE.items():
            msg = _range_warning(f"products[{idx}].{key}", product.get(key), g)
            if msg:
                warnings.append(msg)

    loss = total_process_loss(record)
    if 1.0 - loss / 100.0 <= MIN_LOSS_FACTOR:
        warnings.append(
            f"Total process loss is {_fmt(loss)}%; gross salt requirement falls back to net content."
        )

    if costing_mode(record) == COSTING_BOM:
        for idx, product in enumerate(products):
            if not isinstance(product, dict):
                continue
            for b_idx, component in enumerate(product.get("product_bom") or []):
                if not isinstance(component, dict):
                    continue
                if resolve_component_rate(record, component) is None:
                    name = str(component.get("component_name") or "").strip() or "<blank>"
                    warnings.append(
                        f"products[{idx}].product_bom[{b_idx}] component '{name}' not found in "
                        f"{'inputs' if component.get('component_type') == 'Input' else 'packaging materials'}; costed at 0."
                    )

    if record.get("premises_status") in ("Rented", "Leased") and to_number(record.get("rent_per_month")) <= 0:
        warnings.append("Premises are rented or leased but rent_per_month is blank.")
    return warnings
