"""Shared fixtures for moveout-core tests."""

import json
from typing import Any

import pytest

from moveout_core import AssignmentSchema, Constants, get_default_constants, load_schema


@pytest.fixture
def constants() -> Constants:
    """Built-in constants (rates 12% / 5.95% / 1.66% / 1%, 4.33 weeks/month)."""
    return get_default_constants()


@pytest.fixture
def schema_document() -> dict[str, Any]:
    """A trimmed assignment schema covering every field role and type."""
    return {
        "schema_version": "1.0.0",
        "title": "Moving Out Project",
        "sections": [
            {"id": "income", "title": "Income"},
            {"id": "housing", "title": "Housing"},
            {"id": "transportation", "title": "Transportation"},
            {"id": "essentials", "title": "Essentials"},
            {"id": "reflection", "title": "Reflection"},
        ],
        "fields": [
            {"id": "income_mode", "section_id": "income", "label": "Income mode", "type": "select", "role": "input", "required": True},
            {"id": "hourly_wage", "section_id": "income", "label": "Hourly wage", "type": "number", "role": "input"},
            {"id": "hours_per_week", "section_id": "income", "label": "Hours per week", "type": "number", "role": "input"},
            {"id": "net_pay_per_cheque", "section_id": "income", "label": "Net pay per cheque", "type": "number", "role": "input"},
            {"id": "paycheques_per_month", "section_id": "income", "label": "Paycheques per month", "type": "number", "role": "input"},
            {"id": "housing_option_label", "section_id": "housing", "label": "Housing option", "type": "text", "role": "input", "required": True},
            {"id": "rent_monthly", "section_id": "housing", "label": "Monthly rent", "type": "number", "role": "input", "required": True},
            {"id": "utilities_monthly", "section_id": "housing", "label": "Utilities", "type": "number", "role": "input", "required": True},
            {"id": "transport_option_label", "section_id": "transportation", "label": "Transportation option", "type": "text", "role": "input", "required": True},
            {"id": "transport_mode", "section_id": "transportation", "label": "Transportation mode", "type": "select", "role": "input", "required": True},
            {"id": "vehicle_price", "section_id": "transportation", "label": "Vehicle price", "type": "number", "role": "input", "required": True},
            {"id": "fuel_economy_l_per_100km", "section_id": "transportation", "label": "Fuel economy", "type": "number", "role": "input", "required": True},
            {"id": "transit_monthly_pass", "section_id": "transportation", "label": "Transit pass", "type": "number", "role": "input"},
            {"id": "transit_source_url", "section_id": "transportation", "label": "Transit fare source", "type": "url", "role": "input", "ui": {"source_for_field_id": "transit_monthly_pass"}},
            {"id": "vehicle_listing_url", "section_id": "transportation", "label": "Vehicle listing", "type": "url", "role": "input", "ui": {"source_for_field_id": "vehicle_price"}},
            {"id": "food_table_weekly", "section_id": "essentials", "label": "Weekly grocery plan", "type": "food_table", "role": "input", "required": True},
            {"id": "clothing_table_annual", "section_id": "essentials", "label": "Clothing plan", "type": "expense_table", "role": "input", "required": True},
            {"id": "housing_monthly_total", "section_id": "housing", "label": "Housing total", "type": "number", "role": "derived", "required": True, "compute_key": "housing_monthly_total"},
            {"id": "reflection_budget", "section_id": "reflection", "label": "Budget reflection", "type": "textarea", "role": "reflection", "required": True},
        ],
        "evidence_requirements": [
            {"id": "rental_ad", "label": "Rental ad", "required": True, "section_id": "housing"},
            {"id": "vehicle_ad", "label": "Vehicle ad", "required": True, "section_id": "transportation"},
            {"id": "other", "label": "Other evidence", "required": False, "section_id": "essentials"},
        ],
        "pinning": {
            "categories": [
                {
                    "id": "housing",
                    "section_id": "housing",
                    "label_field_id": "housing_option_label",
                    "snapshot_field_ids": ["rent_monthly", "utilities_monthly", "housing_monthly_total"],
                },
                {
                    "id": "transportation",
                    "section_id": "transportation",
                    "label_field_id": "transport_option_label",
                    "snapshot_field_ids": ["transport_mode", "vehicle_price"],
                },
            ]
        },
    }


@pytest.fixture
def schema(schema_document: dict[str, Any]) -> AssignmentSchema:
    return load_schema(schema_document)


@pytest.fixture
def base_inputs() -> dict[str, Any]:
    """A complete hourly-wage worksheet with a financed car.

    Expected results with the built-in constants:
        gross 3049.76, net 2421.20, housing 1370.00,
        transportation 568.94, essentials 298.38, surplus 183.88
    """
    return {
        "income_mode": "hourly_estimate",
        "hourly_wage": 24,
        "hours_per_week": 28,
        "other_monthly_income": 140,
        "income_source_url": "https://example.com/job-posting",
        "housing_option_label": "Basement suite",
        "rent_monthly": 1100,
        "utilities_monthly": 170,
        "renter_insurance_monthly": 20,
        "internet_phone_monthly": 80,
        "other_housing_monthly": 0,
        "transport_option_label": "Used compact",
        "transport_mode": "car",
        "vehicle_price": 12000,
        "km_per_month": 1000,
        "fuel_economy_l_per_100km": 8,
        "gas_price_per_litre": 1.5,
        "maintenance_monthly": 50,
        "transport_insurance_monthly": 180,
        "food_table_weekly": json.dumps([
            {"id": "f1", "item": "Bread", "estimated_cost": 5.5},
            {"id": "f2", "item": "Milk", "estimated_cost": 6.25, "source_url": "https://example.com/grocer"},
        ]),
        "clothing_table_annual": json.dumps([
            {"item": "Jeans", "quantity_per_year": 2, "average_cost": 60},
            {"item": "Boots", "annual_total": 150},
        ]),
        "clothing_monthly": 99,
        "health_hygiene_monthly": 40,
        "recreation_table_annual": "not json",
        "misc_table_monthly": json.dumps([{"item": "Phone case", "monthly_total": 15}]),
        "household_maintenance_monthly": 20,
        "savings_monthly": 150,
    }
