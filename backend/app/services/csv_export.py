"""Profile-driven CSV export."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Sequence

from pydantic import ValidationError

from ..errors import InvalidProfile
from ..models import Item
from ..schemas import MappingRule
from .csv_table import CsvTable

logger = logging.getLogger(__name__)

PHOTOS_FIELD = "photos"
PHOTO_URL_SEPARATOR = "|"


def _field_getter(key: str) -> Callable[[Any], Any]:
    def getter(item: Any) -> Any:
        return getattr(item, key, None)

    return getter


FIELD_ACCESSORS: Dict[str, Callable[[Any], Any]] = {
    column.key: _field_getter(column.key) for column in Item.__table__.columns
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def normalize_field_name(name: str) -> str:
    """``listPrice`` and ``list_price`` both resolve to ``list_price``."""
    name = name.strip()
    if name == PHOTOS_FIELD or name in FIELD_ACCESSORS:
        return name
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def join_photo_urls(item: Any) -> str:
    return PHOTO_URL_SEPARATOR.join(photo.url for photo in (getattr(item, "photos", None) or []))


def validate_mappings(mappings: Any) -> List[MappingRule]:
    if not isinstance(mappings, list):
        raise InvalidProfile("Export profile mappings must be a list", field="mappings")
    rules = []
    for index, raw in enumerate(mappings):
        try:
            rule = raw if isinstance(raw, MappingRule) else MappingRule.model_validate(raw)
        except ValidationError as exc:
            raise InvalidProfile(
                f"Mapping #{index + 1} is malformed: {exc.errors()[0]['msg']}", field="mappings"
            ) from exc
        if rule.type == "field":
            field = normalize_field_name(rule.value)
            if field != PHOTOS_FIELD and field not in FIELD_ACCESSORS:
                raise InvalidProfile(
                    f"Mapping {rule.csv_header!r} refers to unknown item field {rule.value!r}",
                    field="mappings",
                )
            rule = rule.model_copy(update={"value": field})
        rules.append(rule)
    return rules


def _cell(item: Any, rule: MappingRule) -> Any:
    if rule.type == "static":
        return rule.value
    if rule.value == PHOTOS_FIELD:
        return join_photo_urls(item)
    return FIELD_ACCESSORS[rule.value](item)


def generate_csv(items: Sequence[Any], mappings: Any) -> str:
    """Render ``items`` with one column per mapping rule, in rule order."""
    rules = validate_mappings(mappings)
    table = CsvTable([rule.csv_header for rule in rules])
    for item in items:
        table.add_row([_cell(item, rule) for rule in rules])
    logger.info("Generated profile CSV with %d rows and %d columns", len(table), table.width)
    return table.render()
