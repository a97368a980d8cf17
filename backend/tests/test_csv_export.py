import csv
import io
from decimal import Decimal

import pytest

from app.errors import InvalidProfile
from app.services.csv_export import generate_csv, normalize_field_name, validate_mappings


def _rows(text):
    return list(csv.reader(io.StringIO(text)))


def test_field_and_static_columns(make_item):
    mappings = [
        {"csvHeader": "h1", "type": "field", "value": "sku"},
        {"csvHeader": "h2", "type": "static", "value": "X"},
    ]
    text = generate_csv([make_item(sku="A"), make_item(sku="B")], mappings)
    assert text == "h1,h2\nA,X\nB,X\n"


def test_photos_are_pipe_joined_in_order(make_item):
    item = make_item(sku="A", photos=["p1.url", "p2.url"])
    text = generate_csv([item], [{"csvHeader": "Pics", "type": "field", "value": "photos"}])
    assert _rows(text) == [["Pics"], ["p1.url|p2.url"]]


def test_missing_values_and_typed_cells(make_item):
    item = make_item(sku="A", list_price=Decimal("89.50"), power_test=True, brand=None)
    mappings = [
        {"csvHeader": "Price", "type": "field", "value": "list_price"},
        {"csvHeader": "Powers on", "type": "field", "value": "power_test"},
        {"csvHeader": "Brand", "type": "field", "value": "brand"},
    ]
    assert _rows(generate_csv([item], mappings))[1] == ["89.50", "true", ""]


def test_camel_case_field_names_are_accepted(make_item):
    item = make_item(sku="A", ebay_category_id="177", list_price=Decimal("10.00"))
    mappings = [
        {"csvHeader": "Category", "type": "field", "value": "ebayCategoryId"},
        {"csvHeader": "Price", "type": "field", "value": "listPrice"},
    ]
    assert _rows(generate_csv([item], mappings))[1] == ["177", "10.00"]
    assert normalize_field_name("magicOctopusRun") == "magic_octopus_run"
    assert normalize_field_name("sku") == "sku"


def test_cells_with_delimiters_survive_round_trip(make_item):
    item = make_item(sku="A", listing_title='15" screen, i5', intake_notes="line one\nline two")
    mappings = [
        {"csvHeader": "Title, full", "type": "field", "value": "listing_title"},
        {"csvHeader": "Notes", "type": "field", "value": "intake_notes"},
    ]
    assert _rows(generate_csv([item], mappings)) == [
        ["Title, full", "Notes"],
        ['15" screen, i5', "line one\nline two"],
    ]


def test_no_items_yields_header_only():
    assert generate_csv([], [{"csvHeader": "SKU", "type": "field", "value": "sku"}]) == "SKU\n"


@pytest.mark.parametrize(
    "mappings",
    [
        None,
        {"csvHeader": "SKU", "type": "field", "value": "sku"},
        ["sku"],
        [{"csvHeader": "SKU", "type": "lookup", "value": "sku"}],
        [{"type": "field", "value": "sku"}],
        [{"csvHeader": "Colour", "type": "field", "value": "colour"}],
    ],
)
def test_malformed_profiles_fail_before_output(make_item, mappings):
    with pytest.raises(InvalidProfile):
        generate_csv([make_item(sku="A")], mappings)


def test_validate_mappings_normalizes_field_values():
    rules = validate_mappings([{"csvHeader": "Price", "type": "field", "value": "listPrice"}])
    assert rules[0].value == "list_price"
    assert rules[0].csv_header == "Price"


def test_static_values_may_be_numbers_or_booleans(make_item):
    mappings = [
        {"csvHeader": "Quantity", "type": "static", "value": 5},
        {"csvHeader": "Price", "type": "static", "value": 9.5},
        {"csvHeader": "BestOffer", "type": "static", "value": True},
        {"csvHeader": "Blank", "type": "static", "value": None},
    ]
    assert generate_csv([make_item(sku="A")], mappings) == "Quantity,Price,BestOffer,Blank\n5,9.5,true,\n"
