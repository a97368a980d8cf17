import csv
import io
from datetime import datetime
from decimal import Decimal

import pytest

from app.services.csv_table import CsvTable, escape_cell, format_cell


def test_format_cell():
    assert format_cell(None) == ""
    assert format_cell(True) == "true"
    assert format_cell(False) == "false"
    assert format_cell(Decimal("199.90")) == "199.90"
    assert format_cell(3) == "3"
    assert format_cell(datetime(2025, 1, 2, 3, 4, 5)) == "2025-01-02T03:04:05"


def test_escape_cell():
    assert escape_cell("plain") == "plain"
    assert escape_cell("") == ""
    assert escape_cell("a,b") == '"a,b"'
    assert escape_cell('say "hi"') == '"say ""hi"""'
    assert escape_cell("line\nbreak") == '"line\nbreak"'
    assert escape_cell("<p>html</p>") == "<p>html</p>"


def test_render_round_trips_through_csv_reader():
    table = CsvTable(["sku", "notes"], preamble=[["#INFO", ""]])
    table.add_row(["A-1", 'Dented, "as is"\nno charger'])
    table.add_row(["B-2", None])

    text = table.render()
    assert text.endswith("\n")
    assert list(csv.reader(io.StringIO(text))) == [
        ["#INFO", ""],
        ["sku", "notes"],
        ["A-1", 'Dented, "as is"\nno charger'],
        ["B-2", ""],
    ]


def test_row_width_is_checked():
    table = CsvTable(["a", "b"])
    with pytest.raises(ValueError):
        table.add_row(["only one"])
