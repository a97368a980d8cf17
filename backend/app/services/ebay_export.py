"""eBay Seller Hub draft-listing CSV export."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from markupsafe import escape

from ..errors import NoEligibleItems
from .csv_export import join_photo_urls
from .csv_table import CsvTable, format_cell

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 80
DEFAULT_FORMAT = "FixedPrice"
DRAFT_ACTION = "Draft"

HEADER = [
    "Action(SiteID=US|Country=US|Currency=USD|Version=1193|CC=UTF-8)",
    "Custom label (SKU)",
    "Category ID",
    "Title",
    "UPC",
    "Price",
    "Quantity",
    "Item photo URL",
    "Condition ID",
    "Description",
    "Format",
]


def _info_row(*cells: str) -> List[str]:
    return list(cells) + [""] * (len(HEADER) - len(cells))


INFO_ROWS = [
    _info_row("#INFO", "Version=0.0.2", "Template= eBay-draft-listings-template_US"),
    _info_row(
        "#INFO Action and Category ID are required fields. 1) Set Action to Draft "
        "2) Please find the category ID for your listings here: "
        "https://pages.ebay.com/sellerinformation/news/categorychanges.html"
    ),
    _info_row(
        "#INFO After you've successfully uploaded your draft from the Seller Hub Reports tab, "
        "complete your drafts to active listings here: https://www.ebay.com/sh/lst/drafts"
    ),
    _info_row("#INFO"),
]


@dataclass
class EbayExport:
    csv: str
    exported_count: int
    skipped_skus: List[str] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_skus)


def _text(value: Any) -> str:
    return format_cell(value).strip()


def is_eligible(item: Any) -> bool:
    return bool(_text(item.ebay_category_id) and _text(item.ebay_condition_id))


def build_listing_title(item: Any) -> str:
    parts = [_text(item.brand), _text(item.model), _text(item.cpu), _text(item.ram)]
    storage_size, storage_type = _text(item.storage_size), _text(item.storage_type)
    if storage_size:
        parts.append(f"{storage_size} {storage_type}".strip())
    parts = [part for part in parts if part]
    if not parts:
        return _text(item.sku) or "Item"
    return " ".join(parts)[:TITLE_MAX_LENGTH]


def _joined(*values: Any) -> str:
    return " ".join(text for text in (_text(value) for value in values) if text)


def build_listing_description(item: Any) -> str:
    lines = []
    heading = _joined(item.brand, item.model)
    if heading:
        lines.append(f"<h3>{escape(heading)}</h3>")

    lines.append("<p><strong>Specifications:</strong></p>")
    lines.append("<ul>")
    specs = [
        ("CPU", _text(item.cpu)),
        ("RAM", _text(item.ram)),
        ("Storage", _joined(item.storage_size, item.storage_type)),
        ("Battery Health", _text(item.battery_health)),
        ("Charger Included", _text(item.charger_included)),
    ]
    for label, value in specs:
        if value:
            lines.append(f"<li>{label}: {escape(value)}</li>")
    lines.append("</ul>")

    testing = _joined(item.test_notes, item.bench_notes)
    if testing:
        lines.append("<p><strong>Testing Notes:</strong></p>")
        lines.append(f"<p>{escape(testing)}</p>")

    condition = _text(item.intake_notes)
    if condition:
        lines.append("<p><strong>Condition Notes:</strong></p>")
        lines.append(f"<p>{escape(condition)}</p>")

    return "".join(lines)


def _quantity(value: Optional[int]) -> str:
    return str(value) if value else "1"


def build_row(item: Any) -> List[str]:
    return [
        DRAFT_ACTION,
        _text(item.sku),
        _text(item.ebay_category_id),
        _text(item.listing_title)[:TITLE_MAX_LENGTH] or build_listing_title(item),
        _text(item.upc),
        format_cell(item.list_price),
        _quantity(item.quantity),
        join_photo_urls(item),
        _text(item.ebay_condition_id),
        format_cell(item.listing_description) or build_listing_description(item),
        _text(item.listing_format) or DEFAULT_FORMAT,
    ]


def generate_ebay_draft_csv(items: Sequence[Any]) -> EbayExport:
    """Build the draft-listing upload file, skipping items without category/condition.

    Raises :class:`NoEligibleItems` when every item is skipped.
    """
    table = CsvTable(HEADER, preamble=INFO_ROWS)
    skipped: List[str] = []
    for item in items:
        if not is_eligible(item):
            skipped.append(_text(item.sku))
            continue
        table.add_row(build_row(item))

    if skipped:
        logger.warning("Skipped %d items missing category/condition: %s", len(skipped), ", ".join(skipped))
    if not len(table):
        raise NoEligibleItems(
            "No items have both an eBay Category ID and Condition ID", skipped_skus=skipped
        )

    logger.info("Generated eBay draft CSV with %d items", len(table))
    return EbayExport(csv=table.render(), exported_count=len(table), skipped_skus=skipped)
