from __future__ import annotations

import pytest

from feasibility.paths import format_path, get_in, parse_path, row_index, set_in


def test_parse_path_handles_brackets_and_dotted_indexes():
    assert parse_path("products[0].uom") == ("products", 0, "uom")
    assert parse_path("products.0.uom") == ("products", 0, "uom")
    assert parse_path("products[1].product_bom[2].scrap_percent") == ("products", 1, "product_bom", 2, "scrap_percent")
    assert parse_path("tenor_years") == ("tenor_years",)


def test_parse_path_rejects_malformed_input():
    for bad in ("", "products[", "products[x].uom", ".uom", "products..uom"):
        with pytest.raises(ValueError):
            parse_path(bad)


def test_format_path_is_inverse_of_parse():
    text = "products[1].product_bom[0].calculated_cost_contribution"
    assert format_path(parse_path(text)) == text
    assert format_path(None) == ""


def test_structured_matching_does_not_confuse_similar_names():
    # "products_notes" shares a prefix with "products" but is not a product row.
    assert row_index(parse_path("products_notes"), "products") is None
    assert row_index(parse_path("products[3].uom"), "products") == 3


def test_get_and_set_nested_rows():
    record = {"products": [{"uom": "kg"}]}
    set_in(record, ("products", 0, "product_bom", 1, "scrap_percent"), 5)
    assert get_in(record, ("products", 0, "product_bom", 1, "scrap_percent")) == 5
    assert get_in(record, ("products", 0, "product_bom", 0)) == {}
    assert get_in(record, ("products", 4, "uom"), default="missing") == "missing"
    set_in(record, ("products", 2, "uom"), "pack")
    assert len(record["products"]) == 3
    assert record["products"][2] == {"uom": "pack"}
