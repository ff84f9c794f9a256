"""Record schema constants and draft migration utilities."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

import pandas as pd

from feasibility.defaults import DEFAULTS


SCHEMA_VERSION = 1
DRAFT_TYPE = "pink_salt_feasibility_draft"
DRAFT_TYPE_ID = "45"

COSTING_MODES = {"Simple", "Detailed_BOM"}
PREMISES_STATUSES = {"Owned", "Rented", "Leased"}
TARGET_MARKETS = {"Domestic", "Export", "Both"}
PRODUCT_UOMS = {"kg", "piece", "pack"}
COMPONENT_TYPES = {"Input", "Packaging"}
INSTALLMENT_TYPES = {"EMI", "Equal Principal", "Custom"}

LIST_FIELDS = (
    "products",
    "inputs",
    "packaging_materials",
    "capex_items",
    "staff",
    "certifications",
    "risks",
)

# Enumerated scalars that reset to their default when the stored value is unknown.
SCALAR_ENUMS = {
    "costing_mode": COSTING_MODES,
    "premises_status": PREMISES_STATUSES,
    "installment_type": INSTALLMENT_TYPES,
}

_TRUE_STRINGS = {"1", "true", "yes", "y", "on"}
_FALSE_STRINGS = {"0", "false", "no", "n", "off"}


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return None


def _sanitize_rows(raw_rows: Any, warnings: list[str], key_name: str) -> list[dict]:
    if raw_rows is None:
        return []
    if isinstance(raw_rows, pd.DataFrame):
        records = raw_rows.to_dict(orient="records")
    elif isinstance(raw_rows, list):
        records = raw_rows
    else:
        warnings.append(f"{key_name} ignored because it is not a list/table.")
        return []
    sanitized: list[dict] = []
    for idx, item in enumerate(records):
        if not isinstance(item, dict):
            warnings.append(f"{key_name}[{idx}] ignored because entry is not an object.")
            continue
        sanitized.append(deepcopy(item))
    return sanitized


def _sanitize_product(product: dict, idx: int, warnings: list[str]) -> dict:
    market = product.get("target_market")
    if market not in (None, "") and market not in TARGET_MARKETS:
        warnings.append(f"products[{idx}].target_market invalid; reset to Domestic.")
        product["target_market"] = "Domestic"
    uom = product.get("uom")
    if uom not in (None, "") and uom not in PRODUCT_UOMS:
        warnings.append(f"products[{idx}].uom invalid; cleared.")
        product["uom"] = ""
    product["product_bom"] = _sanitize_rows(
        product.get("product_bom"), warnings, f"products[{idx}].product_bom"
    )
    for b_idx, component in enumerate(product["product_bom"]):
        if component.get("component_type") not in COMPONENT_TYPES:
            warnings.append(f"products[{idx}].product_bom[{b_idx}].component_type invalid; reset to Packaging.")
            component["component_type"] = "Packaging"
    return product


def migrate_record(raw_record: dict) -> tuple[dict, list[str], list[str]]:
    """Merge an incoming record onto the blank form.

    Returns ``(record, warnings, unknown_keys)``. Nothing here raises; bad
    list rows are dropped, unknown enums reset and boolean-like strings
    coerced, each with a warning.
    """
    warnings: list[str] = []
    unknown_keys: list[str] = []
    record = deepcopy(DEFAULTS)
    payload = raw_record if isinstance(raw_record, dict) else {}
    if not isinstance(raw_record, dict):
        warnings.append("Record is not a JSON object; starting from a blank form.")

    for k, v in payload.items():
        if k in record:
            record[k] = deepcopy(v)
        else:
            unknown_keys.append(k)

    for key in LIST_FIELDS:
        record[key] = _sanitize_rows(record.get(key), warnings, key)
    record["products"] = [_sanitize_product(p, idx, warnings) for idx, p in enumerate(record["products"])]

    for key, allowed in SCALAR_ENUMS.items():
        value = record.get(key)
        if value in (None, "") or value in allowed:
            continue
        reset_to = DEFAULTS[key]
        warnings.append(f"{key} invalid; reset to {reset_to or 'blank'}.")
        record[key] = reset_to

    bool_keys = [k for k, v in DEFAULTS.items() if isinstance(v, bool)]
    for key in bool_keys:
        coerced = _coerce_bool(record.get(key))
        if coerced is None:
            record[key] = DEFAULTS[key]
            warnings.append(f"{key} invalid and reset to default.")
        else:
            record[key] = coerced

    for idx, member in enumerate(record["staff"]):
        coerced = _coerce_bool(member.get("is_direct_labor", False))
        if coerced is None:
            warnings.append(f"staff[{idx}].is_direct_labor invalid; reset to false.")
            coerced = False
        member["is_direct_labor"] = coerced

    return record, warnings, sorted(unknown_keys)


def migrate_import_payload(payload: dict) -> tuple[dict, str | None, list[str], list[str]]:
    """Parse an imported draft bundle or bare record.

    Returns ``(record, draft_name, warnings, unknown_keys)``.
    """
    if not isinstance(payload, dict):
        return deepcopy(DEFAULTS), None, ["Import payload is not a JSON object."], []

    if payload.get("type") == DRAFT_TYPE:
        record, warnings, unknown = migrate_record(payload.get("record", {}))
        version = payload.get("schema_version")
        if version != SCHEMA_VERSION:
            warnings.append(f"Imported schema_version={version}; migrated to schema_version={SCHEMA_VERSION}.")
        name = payload.get("name")
        return record, (str(name) if name else None), warnings, unknown

    record, warnings, unknown = migrate_record(payload)
    warnings.append("Imported bare record JSON without draft metadata.")
    return record, None, warnings, unknown
