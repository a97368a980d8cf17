"""Tabular CSV builder shared by every export."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, List, Sequence

DELIMITER = ","
QUOTE = '"'
LINE_TERMINATOR = "\n"
_NEEDS_QUOTING = (DELIMITER, QUOTE, "\r", "\n")


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def escape_cell(value: Any) -> str:
    """RFC 4180 quoting: wrap when the text holds a delimiter, quote or line break."""
    text = format_cell(value)
    if any(token in text for token in _NEEDS_QUOTING):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


class CsvTable:
    def __init__(self, header: Sequence[Any], preamble: Iterable[Sequence[Any]] = ()):
        self.header = list(header)
        self.preamble: List[List[Any]] = [list(row) for row in preamble]
        self.rows: List[List[Any]] = []

    @property
    def width(self) -> int:
        return len(self.header)

    def add_row(self, cells: Sequence[Any]) -> None:
        if len(cells) != self.width:
            raise ValueError(f"Row has {len(cells)} cells, expected {self.width}")
        self.rows.append(list(cells))

    def __len__(self) -> int:
        return len(self.rows)

    def render(self) -> str:
        lines = [*self.preamble, self.header, *self.rows]
        return "".join(
            DELIMITER.join(escape_cell(cell) for cell in line) + LINE_TERMINATOR for line in lines
        )
