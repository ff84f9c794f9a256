"""Blank-form defaults and the bundled sample draft."""

from __future__ import annotations


DEFAULTS: dict = {
    # Project & scheme
    "project_title": "",
    "scheme_name": "",
    "bank_name": "",
    "report_currency": "PKR",
    "fx_usd_to_pkr": "",
    "report_horizon_years": 5,
    "project_summary": "",
    "exporting_enabled": True,
    # Promoter
    "promoter_name": "",
    "cnic": "",
    "phone": "",
    "email": "",
    "business_legal_form": "",
    "ntn": "",
    "strn": "",
    "experience_years": "",
    "relevant_experience_notes": "",
    "existing_business": False,
    "existing_turnover_monthly": "",
    # Location & premises
    "province": "",
    "district_city": "",
    "site_address": "",
    "nearby_salt_source": "",
    "distance_to_source_km": "",
    "nearest_dry_port_or_seaport": "",
    "distance_to_port_km": "",
    "premises_status": "",
    "covered_area_sqft": "",
    "processing_area_sqft": "",
    "warehouse_area_sqft": "",
    "packing_area_sqft": "",
    "lab_qc_area_sqft": "",
    "rent_per_month": "",
    "utilities_available": [],
    "power_backup_required": False,
    # Raw material & yield
    "raw_salt_source_type": "",
    "supplier_name": "",
    "source_location": "",
    "raw_salt_grade": "",
    "monthly_raw_salt_available_tons": "",
    "raw_salt_purchase_price_per_kg": "",
    "inbound_transport_cost_per_ton": "",
    "sorting_wastage_percent": 2,
    "washing_loss_percent": 1,
    "grinding_sieving_loss_percent": 0.5,
    "total_process_loss_percent": 0,
    # Products & costing
    "costing_mode": "",
    "products": [
        {
            "sku_name": "",
            "product_category": "",
            "uom": "",
            "pack_size_g": "",
            "target_market": "",
            "installed_capacity_per_month": "",
            "year1_capacity_utilization_percent": 50,
            "year2_capacity_utilization_percent": 60,
            "year3_capacity_utilization_percent": 70,
            "domestic_selling_price_per_unit": "",
            "export_selling_price_per_unit": "",
            "export_price_currency": "",
            "expected_discount_or_commission_percent": 0,
            "net_salt_content_per_unit_kg": "",
            "packaging_cost_per_unit": "",
            "direct_labor_cost_per_unit": "",
            "qc_testing_cost_per_unit": 0,
            "other_variable_cost_per_unit": 0,
            "product_bom": [],
        }
    ],
    "inputs": [],
    "packaging_materials": [],
    # Operations
    "process_flow_overview": "",
    "shifts_per_day": 1,
    "working_days_per_month": 26,
    "maintenance_days_per_month": 1,
    "batch_traceability": "",
    "quality_checks": [],
    # Compliance
    "food_authority_registration": "",
    "psqca_applicable": False,
    "halal_cert_required": False,
    "export_target_regions": [],
    "hs_code_primary": "",
    "labeling_language_requirements": "",
    "third_party_inspection_required": False,
    "certifications": [],
    "export_docs_needed": [],
    # Export logistics
    "export_mode": "",
    "incoterm": "",
    "shipment_frequency_per_month": "",
    "avg_export_order_size_kg": "",
    "port_of_loading": "",
    "freight_cost_per_kg_or_container": "",
    "insurance_cost_monthly": 0,
    "clearing_forwarding_cost_per_shipment": 0,
    "export_payment_term": "",
    "expected_export_receivables_days": 45,
    "monthly_export_logistics_cost": 0,
    # Capex
    "capex_items": [{"item_name": "", "category": "", "quantity": "", "rate_per_unit": "", "total_cost": 0}],
    "preoperating_cost_lump_sum": "",
    "contingency_percent": 5,
    "capex_subtotal": 0,
    "contingency_amount": 0,
    "total_capex": 0,
    # HR & payroll
    "staff": [{"role": "", "count": 1, "monthly_salary_per_person": "", "is_direct_labor": False}],
    "monthly_payroll_total": 0,
    "monthly_direct_labor_total": 0,
    "monthly_indirect_labor_total": 0,
    # Overheads
    "electricity_cost_monthly": "",
    "water_cost_monthly": "",
    "fuel_transport_monthly": "",
    "maintenance_cost_monthly": "",
    "rent_monthly": 0,
    "admin_expenses_monthly": "",
    "sales_marketing_monthly": "",
    "qc_lab_consumables_monthly": "",
    "export_marketing_cost_monthly": "",
    "misc_monthly": "",
    "monthly_overheads_total": 0,
    # Revenue & profit
    "monthly_revenue_total": 0,
    "monthly_cogs_total": 0,
    "monthly_gross_profit": 0,
    "monthly_net_profit_before_finance": 0,
    # Working capital
    "raw_material_inventory_days": 30,
    "packaging_inventory_days": 30,
    "finished_goods_inventory_days": 15,
    "domestic_receivables_days": 30,
    "export_receivables_days": 45,
    "payables_days": 15,
    "cash_buffer_days": 10,
    "daily_cogs": 0,
    "daily_sales": 0,
    "inventory_investment": 0,
    "receivables_investment": 0,
    "payables_credit": 0,
    "cash_buffer": 0,
    "working_capital_required": 0,
    # Financing
    "loan_amount_requested": "",
    "owner_equity_contribution": "",
    "markup_rate_percent": 0,
    "grace_period_months": 0,
    "tenor_years": 5,
    "installment_type": "EMI",
    "total_tenor_months": "",
    "num_installments": "",
    "installment_amount": "",
    # Risks, ESG, conclusion
    "risks": [{"risk_title": "", "impact_description": "", "mitigation_strategy": "", "severity_level": ""}],
    "dust_control_measures": "",
    "worker_safety_measures": "",
    "waste_management_plan": "",
    "sustainability_notes": "",
    "project_objectives_custom": "",
    "conclusion_custom_notes": "",
}


def _sample_product(**overrides) -> dict:
    row = {
        "sku_name": "",
        "product_category": "",
        "uom": "pack",
        "pack_size_g": "",
        "target_market": "Domestic",
        "installed_capacity_per_month": 0,
        "year1_capacity_utilization_percent": 50,
        "year2_capacity_utilization_percent": 60,
        "year3_capacity_utilization_percent": 70,
        "domestic_selling_price_per_unit": "",
        "export_selling_price_per_unit": "",
        "export_price_currency": "",
        "expected_discount_or_commission_percent": 0,
        "net_salt_content_per_unit_kg": "",
        "packaging_cost_per_unit": 0,
        "direct_labor_cost_per_unit": 0,
        "qc_testing_cost_per_unit": 0,
        "other_variable_cost_per_unit": 0,
        "product_bom": [],
        "gross_salt_required_per_unit_kg": 0,
        "raw_salt_cost_per_unit": 0,
        "unit_variable_cost": 0,
        "gross_units": 0,
        "good_units": 0,
        "monthly_revenue_sku": 0,
        "monthly_cogs_sku": 0,
    }
    row.update(overrides)
    return row


SAMPLE_DRAFT: dict = {
    **DEFAULTS,
    "project_title": "Himalayan Pink Salt Export Expansion",
    "scheme_name": "SME Modernization Fund",
    "bank_name": "Meezan Bank",
    "fx_usd_to_pkr": 278.50,
    "project_summary": (
        "Establishment of a modern salt processing unit aimed at exporting high-quality edible pink salt "
        "to European and North American markets. The facility will have a processing capacity of 500 tons per month."
    ),
    "promoter_name": "Muhammad Ali Raza",
    "business_legal_form": "Sole Proprietorship",
    "experience_years": 12,
    "existing_business": True,
    "existing_turnover_monthly": 4500000,
    "province": "Punjab",
    "district_city": "Lahore",
    "site_address": "Plot 45-B, Sundar Industrial Estate, Lahore",
    "nearby_salt_source": "Khewra",
    "distance_to_source_km": 185,
    "nearest_dry_port_or_seaport": "Lahore Dry Port (Prem Nagar)",
    "distance_to_port_km": 35,
    "premises_status": "Rented",
    "covered_area_sqft": 8000,
    "processing_area_sqft": 5000,
    "warehouse_area_sqft": 2000,
    "packing_area_sqft": 800,
    "lab_qc_area_sqft": 200,
    "rent_per_month": 250000,
    "utilities_available": ["Electricity", "Water", "Internet"],
    "power_backup_required": True,
    "raw_salt_source_type": "Direct from Mine",
    "supplier_name": "Khewra Salt Miners Coop",
    "source_location": "Khewra, Jhelum",
    "raw_salt_grade": "Food-grade suitable",
    "monthly_raw_salt_available_tons": 600,
    "raw_salt_purchase_price_per_kg": 8.5,
    "inbound_transport_cost_per_ton": 2500,
    "sorting_wastage_percent": 3,
    "washing_loss_percent": 2,
    "grinding_sieving_loss_percent": 1.5,
    "total_process_loss_percent": 0,
    "costing_mode": "Simple",
    "products": [
        _sample_product(
            sku_name="Edible Pink Salt Fine (1kg Pouch)",
            product_category="Edible Fine",
            pack_size_g=1000,
            target_market="Export",
            installed_capacity_per_month=100000,
            year2_capacity_utilization_percent=65,
            year3_capacity_utilization_percent=80,
            domestic_selling_price_per_unit=150,
            export_selling_price_per_unit=1.85,
            export_price_currency="USD",
            expected_discount_or_commission_percent=2,
            net_salt_content_per_unit_kg=1,
            packaging_cost_per_unit=45,
            direct_labor_cost_per_unit=12,
            qc_testing_cost_per_unit=3,
            other_variable_cost_per_unit=5,
        ),
        _sample_product(
            sku_name="Pink Salt Coarse Grinder (200g)",
            product_category="Edible Coarse",
            pack_size_g=200,
            installed_capacity_per_month=50000,
            year1_capacity_utilization_percent=40,
            year3_capacity_utilization_percent=60,
            domestic_selling_price_per_unit=350,
            expected_discount_or_commission_percent=10,
            net_salt_content_per_unit_kg=0.2,
            packaging_cost_per_unit=120,
            direct_labor_cost_per_unit=15,
            qc_testing_cost_per_unit=2,
            other_variable_cost_per_unit=5,
        ),
    ],
    "inputs": [{"input_name": "Raw Pink Salt Rock", "uom": "kg", "unit_cost": 11}],
    "packaging_materials": [
        {"material_name": "Standup Pouch 1kg", "uom": "piece", "unit_cost": 45},
        {"material_name": "Corrugated Master Carton", "uom": "piece", "unit_cost": 150},
    ],
    "process_flow_overview": (
        "Raw Stone Sorting -> Washing (Brine) -> Drying -> Crushing -> Grinding -> Sieving -> "
        "Optical Sorting -> Packing -> Metal Detection -> Palletizing"
    ),
    "shifts_per_day": 2,
    "maintenance_days_per_month": 2,
    "batch_traceability": "Batch Codes",
    "quality_checks": ["Moisture", "NaCl%", "Foreign matter", "Packaging integrity", "Particle size"],
    "food_authority_registration": "In Process",
    "psqca_applicable": True,
    "halal_cert_required": True,
    "export_target_regions": ["USA", "UK/EU"],
    "hs_code_primary": "2501.0010",
    "third_party_inspection_required": True,
    "certifications": [
        {"cert_name": "ISO 22000", "status": "Planned", "one_time_cost": 350000, "annual_cost": 50000},
        {"cert_name": "HACCP", "status": "Certified", "one_time_cost": 150000, "annual_cost": 25000},
        {"cert_name": "Organic", "status": "In Process", "one_time_cost": 500000, "annual_cost": 100000},
    ],
    "export_docs_needed": ["Commercial Invoice", "Packing List", "Certificate of Origin", "GD (WeBOC)", "Inspection cert"],
    "export_mode": "Sea",
    "incoterm": "FOB",
    "shipment_frequency_per_month": 4,
    "avg_export_order_size_kg": 24000,
    "port_of_loading": "Karachi Port / Port Qasim",
    "freight_cost_per_kg_or_container": 450000,
    "insurance_cost_monthly": 25000,
    "clearing_forwarding_cost_per_shipment": 35000,
    "export_payment_term": "LC",
    "expected_export_receivables_days": 60,
    "capex_items": [
        {"item_name": "Salt Washing & Crushing Line", "category": "Machinery", "quantity": 1, "rate_per_unit": 6500000, "total_cost": 0},
        {"item_name": "Optical Color Sorter", "category": "Machinery", "quantity": 1, "rate_per_unit": 2500000, "total_cost": 0},
        {"item_name": "Plant Civil Works & Renovation", "category": "Building/Renovation", "quantity": 1, "rate_per_unit": 2000000, "total_cost": 0},
        {"item_name": "Laboratory Equipment (Spectrometer etc)", "category": "Lab/QC", "quantity": 1, "rate_per_unit": 800000, "total_cost": 0},
        {"item_name": "Forklift 3-Ton", "category": "Forklift/Handling", "quantity": 1, "rate_per_unit": 3500000, "total_cost": 0},
    ],
    "contingency_percent": 5,
    "preoperating_cost_lump_sum": 500000,
    "staff": [
        {"role": "Plant Manager", "count": 1, "monthly_salary_per_person": 150000, "is_direct_labor": False},
        {"role": "Production Supervisor", "count": 2, "monthly_salary_per_person": 75000, "is_direct_labor": True},
        {"role": "Machine Operators", "count": 4, "monthly_salary_per_person": 45000, "is_direct_labor": True},
        {"role": "Helpers / Packers", "count": 10, "monthly_salary_per_person": 32000, "is_direct_labor": True},
        {"role": "QC Analyst", "count": 1, "monthly_salary_per_person": 60000, "is_direct_labor": False},
        {"role": "Accountant", "count": 1, "monthly_salary_per_person": 55000, "is_direct_labor": False},
    ],
    "electricity_cost_monthly": 350000,
    "water_cost_monthly": 25000,
    "fuel_transport_monthly": 50000,
    "maintenance_cost_monthly": 40000,
    "admin_expenses_monthly": 60000,
    "sales_marketing_monthly": 150000,
    "qc_lab_consumables_monthly": 15000,
    "export_marketing_cost_monthly": 200000,
    "misc_monthly": 20000,
    "raw_material_inventory_days": 45,
    "packaging_inventory_days": 60,
    "finished_goods_inventory_days": 15,
    "domestic_receivables_days": 30,
    "export_receivables_days": 60,
    "payables_days": 20,
    "cash_buffer_days": 15,
    "loan_amount_requested": 3000000,
    "owner_equity_contribution": 3000000,
    "markup_rate_percent": 0,
    "grace_period_months": 6,
    "tenor_years": 5,
    "risks": [
        {
            "risk_title": "Exchange Rate Volatility",
            "impact_description": "PKR depreciation raises imported packaging and freight costs but lifts export revenue.",
            "mitigation_strategy": "Maintain an FCY account to retain export proceeds against import payments.",
            "severity_level": "High",
        },
        {
            "risk_title": "Shipping Freight Hikes",
            "impact_description": "Global logistics disruptions can double container costs.",
            "mitigation_strategy": "Sell FOB where possible or sign annual contracts with shipping lines.",
            "severity_level": "Medium",
        },
    ],
}
