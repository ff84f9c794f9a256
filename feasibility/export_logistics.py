from __future__ import annotations

from feasibility.calculation import CalculationModule, FieldWrite
from feasibility.convergence import to_number


def monthly_export_logistics_cost(record: dict) -> float:
    if not record.get("exporting_enabled"):
        return 0.0
    frequency = to_number(record.get("shipment_frequency_per_month"))
    quantity_kg = frequency * to_number(record.get("avg_export_order_size_kg"))
    freight = quantity_kg * to_number(record.get("freight_cost_per_kg_or_container"))
    clearing = frequency * to_number(record.get("clearing_forwarding_cost_per_shipment"))
    return freight + to_number(record.get("insurance_cost_monthly")) + clearing


class ExportLogisticsModule(CalculationModule):
    name = "export_logistics"
    trigger_fields = frozenset(
        {
            "exporting_enabled",
            "shipment_frequency_per_month",
            "avg_export_order_size_kg",
            "freight_cost_per_kg_or_container",
            "insurance_cost_monthly",
            "clearing_forwarding_cost_per_shipment",
        }
    )
    output_fields = frozenset({"monthly_export_logistics_cost"})

    def compute(self, record, path):
        return [FieldWrite.at("monthly_export_logistics_cost", monthly_export_logistics_cost(record))]
