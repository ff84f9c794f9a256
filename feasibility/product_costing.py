"""Per-SKU unit costing and monthly revenue.

The revenue helpers here are the single source for line revenue; profit and
working-capital figures build on the totals written by this module.
"""

from __future__ import annotations

from typing import Any, Optional

from feasibility.calculation import CalculationModule, FieldWrite
from feasibility.convergence import round_cents, to_number
from feasibility.paths import Path, row_index


DEFAULT_FX_USD_TO_PKR = 280.0
DEFAULT_UTILIZATION_PERCENT = 50.0
MIN_LOSS_FACTOR = 0.01

COSTING_SIMPLE = "Simple"
COSTING_BOM = "Detailed_BOM"

PRODUCT_ROW_OUTPUTS = frozenset(
    {
        "gross_salt_required_per_unit_kg",
        "raw_salt_cost_per_unit",
        "calculated_cost_contribution",
        "unit_material_cost",
        "unit_variable_cost",
        "monthly_revenue_sku",
        "monthly_cogs_sku",
    }
)

# Row paths that re-derive a pack's net content.
_NET_CONTENT_SOURCES = ("pack_size_g", "uom")


def _rows(record: dict, key: str) -> list[dict]:
    return [row for row in (record.get(key) or []) if isinstance(row, dict)]


def _normalize(name: Any) -> str:
    return str(name or "").strip().lower()


def gross_units(product: dict) -> float:
    capacity = to_number(product.get("installed_capacity_per_month"))
    utilization = to_number(product.get("year1_capacity_utilization_percent")) or DEFAULT_UTILIZATION_PERCENT
    return capacity * (utilization / 100.0)


def fx_rate(record: dict) -> float:
    return to_number(record.get("fx_usd_to_pkr")) or DEFAULT_FX_USD_TO_PKR


def net_selling_price(product: dict, record: dict) -> float:
    if product.get("target_market") == "Export":
        price = to_number(product.get("export_selling_price_per_unit")) * fx_rate(record)
    else:
        price = to_number(product.get("domestic_selling_price_per_unit"))
    discount = to_number(product.get("expected_discount_or_commission_percent"))
    return price * (1.0 - discount / 100.0)


def line_revenue(product: dict, record: dict) -> float:
    return gross_units(product) * net_selling_price(product, record)


def resolve_component_rate(record: dict, component: dict) -> Optional[float]:
    """Master unit cost for a BOM line, or ``None`` when the name is unknown."""
    name = _normalize(component.get("component_name"))
    if component.get("component_type") == "Input":
        masters, key = _rows(record, "inputs"), "input_name"
    else:
        masters, key = _rows(record, "packaging_materials"), "material_name"
    for master in masters:
        if _normalize(master.get(key)) == name:
            return to_number(master.get("unit_cost"))
    return None


def bom_line_cost(record: dict, component: dict) -> float:
    rate = resolve_component_rate(record, component) or 0.0
    consumption = to_number(component.get("consumption_per_unit"))
    scrap = to_number(component.get("scrap_percent"))
    return consumption * rate * (1.0 + scrap / 100.0)


def costing_mode(record: dict) -> str:
    return record.get("costing_mode") or COSTING_SIMPLE


class ProductCostingModule(CalculationModule):
    name = "product_costing"
    trigger_fields = frozenset(
        {
            "products",
            "costing_mode",
            "raw_salt_purchase_price_per_kg",
            "fx_usd_to_pkr",
            "total_process_loss_percent",
            "inputs",
            "packaging_materials",
        }
    )
    output_fields = frozenset({"monthly_revenue_total", "monthly_cogs_total"})
    row_outputs = {"products": PRODUCT_ROW_OUTPUTS}
    # Written by profit & loss.
    ignored_row_fields = {"products": frozenset({"gross_units", "good_units"})}

    def _overwrite_net_content(self, product: dict, idx: int, path: Optional[Path]) -> bool:
        if product.get("uom") != "pack" or to_number(product.get("pack_size_g")) <= 0:
            return False
        if path is None:
            return True
        return row_index(path, "products") == idx and len(path) == 3 and path[2] in _NET_CONTENT_SOURCES

    def derived_paths(self, record):
        mode = costing_mode(record)
        out: list[Path] = []
        for idx, product in enumerate(record.get("products") or []):
            if not isinstance(product, dict):
                continue
            prefix = ("products", idx)
            if self._overwrite_net_content(product, idx, None):
                out.append(prefix + ("net_salt_content_per_unit_kg",))
            if mode == COSTING_SIMPLE:
                out.append(prefix + ("gross_salt_required_per_unit_kg",))
                out.append(prefix + ("raw_salt_cost_per_unit",))
            elif mode == COSTING_BOM:
                for b_idx, component in enumerate(product.get("product_bom") or []):
                    if isinstance(component, dict):
                        out.append(prefix + ("product_bom", b_idx, "calculated_cost_contribution"))
                out.append(prefix + ("unit_material_cost",))
            out.extend(prefix + (field,) for field in ("unit_variable_cost", "monthly_revenue_sku", "monthly_cogs_sku"))
        out.extend([("monthly_revenue_total",), ("monthly_cogs_total",)])
        return out

    def compute(self, record, path):
        writes: list[FieldWrite] = []
        mode = costing_mode(record)
        loss = to_number(record.get("total_process_loss_percent"))
        raw_price = to_number(record.get("raw_salt_purchase_price_per_kg"))
        total_revenue = 0.0
        total_cogs = 0.0

        for idx, product in enumerate(record.get("products") or []):
            if not isinstance(product, dict):
                continue
            prefix = ("products", idx)
            net_salt = to_number(product.get("net_salt_content_per_unit_kg"))
            if self._overwrite_net_content(product, idx, path):
                net_salt = to_number(product.get("pack_size_g")) / 1000.0
                writes.append(FieldWrite.cents(prefix + ("net_salt_content_per_unit_kg",), net_salt))

            units = gross_units(product)
            unit_cost = 0.0
            if mode == COSTING_SIMPLE:
                loss_factor = 1.0 - loss / 100.0
                gross_salt = net_salt / loss_factor if loss_factor > MIN_LOSS_FACTOR else net_salt
                raw_cost = gross_salt * raw_price
                writes.append(FieldWrite.cents(prefix + ("gross_salt_required_per_unit_kg",), gross_salt))
                writes.append(FieldWrite.cents(prefix + ("raw_salt_cost_per_unit",), raw_cost))
                unit_cost = (
                    raw_cost
                    + to_number(product.get("packaging_cost_per_unit"))
                    + to_number(product.get("direct_labor_cost_per_unit"))
                    + to_number(product.get("qc_testing_cost_per_unit"))
                    + to_number(product.get("other_variable_cost_per_unit"))
                )
            elif mode == COSTING_BOM:
                material = 0.0
                for b_idx, component in enumerate(product.get("product_bom") or []):
                    if not isinstance(component, dict):
                        continue
                    line_cost = bom_line_cost(record, component)
                    writes.append(
                        FieldWrite.cents(prefix + ("product_bom", b_idx, "calculated_cost_contribution"), line_cost)
                    )
                    material += line_cost
                writes.append(FieldWrite.cents(prefix + ("unit_material_cost",), material))
                unit_cost = (
                    material
                    + to_number(product.get("qc_testing_cost_per_unit"))
                    + to_number(product.get("other_variable_cost_per_unit"))
                )
            # COGS is priced at the displayed per-unit figure.
            unit_cost = round_cents(unit_cost)
            writes.append(FieldWrite.cents(prefix + ("unit_variable_cost",), unit_cost))

            revenue = units * net_selling_price(product, record)
            cogs = units * unit_cost
            writes.append(FieldWrite.at(prefix + ("monthly_revenue_sku",), revenue))
            writes.append(FieldWrite.at(prefix + ("monthly_cogs_sku",), cogs))
            total_revenue += revenue
            total_cogs += cogs

        writes.append(FieldWrite.at(("monthly_revenue_total",), total_revenue))
        writes.append(FieldWrite.at(("monthly_cogs_total",), total_cogs))
        return writes
