"""Item status workflow and listing filters."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import and_, not_, or_

from .errors import ValidationFailed
from .models import Item


class Status(str, Enum):
    INTAKE = "intake"
    PROCESSING = "processing"
    DRAFTED = "drafted"
    REVIEW = "review"
    READY = "ready"
    LISTED = "listed"
    SOLD = "sold"
    SCRAP = "scrap"


NEXT_STATUS: Dict[Status, Optional[Status]] = {
    Status.INTAKE: Status.PROCESSING,
    Status.PROCESSING: Status.DRAFTED,
    Status.DRAFTED: Status.REVIEW,
    Status.REVIEW: Status.READY,
    Status.READY: Status.LISTED,
    Status.LISTED: Status.SOLD,
    Status.SOLD: None,
    Status.SCRAP: None,
}

STATUS_LABELS = [
    (Status.INTAKE, "Intake"),
    (Status.PROCESSING, "Processing"),
    (Status.DRAFTED, "Drafted"),
    (Status.REVIEW, "Review"),
    (Status.READY, "Ready to List"),
    (Status.LISTED, "Listed"),
    (Status.SOLD, "Sold"),
    (Status.SCRAP, "Scrap"),
]

ARCHIVED_STATUSES = frozenset({Status.LISTED, Status.SOLD, Status.SCRAP})
ACTIVE_FILTER = "active"
ARCHIVED_FILTER = "archived"
ALL_FILTER = "all"

# Intake decision -> initial status
INTAKE_DECISIONS = {"research": Status.INTAKE, "scrap": Status.SCRAP}

CONFIRMATION_FIELDS = (
    "intake_confirmed_by",
    "processing_confirmed_by",
    "listing_confirmed_by",
    "review_confirmed_by",
)

SEARCH_FIELDS = ("sku", "brand", "model", "category")

# ready and everything after it in the forward chain
_SIGNOFF_REQUIRED = frozenset({Status.READY, Status.LISTED, Status.SOLD})


def parse_status(value: Any) -> Status:
    try:
        return Status(value)
    except ValueError:
        raise ValidationFailed(f"Unknown status {value!r}", field="status") from None


def next_status(current: Any) -> Optional[Status]:
    """Return the successor of ``current`` or ``None`` for terminal states."""
    return NEXT_STATUS[parse_status(current)]


def initial_status(decision: str) -> Status:
    try:
        return INTAKE_DECISIONS[decision]
    except KeyError:
        raise ValidationFailed(f"Unknown intake decision {decision!r}", field="decision") from None


def is_archived(status: Any) -> bool:
    return parse_status(status) in ARCHIVED_STATUSES


def matches_status(status: Any, status_filter: Optional[str]) -> bool:
    if not status_filter or status_filter == ALL_FILTER:
        return True
    if status_filter == ACTIVE_FILTER:
        return not is_archived(status)
    if status_filter == ARCHIVED_FILTER:
        return is_archived(status)
    return status == status_filter


def matches_search(item: Any, search: Optional[str]) -> bool:
    if not search:
        return True
    needle = search.lower()
    for field in SEARCH_FIELDS:
        value = getattr(item, field, None)
        if value and needle in value.lower():
            return True
    return False


def matches_filter(item: Any, status_filter: Optional[str] = None, search: Optional[str] = None) -> bool:
    """In-memory twin of :func:`filter_clause`."""
    return matches_status(item.status, status_filter) and matches_search(item, search)


def filter_clause(status_filter: Optional[str] = None, search: Optional[str] = None):
    """Build the SQL ``WHERE`` clause for an item listing, or ``None``."""
    clauses = []
    archived = [s.value for s in ARCHIVED_STATUSES]
    if status_filter and status_filter != ALL_FILTER:
        if status_filter == ACTIVE_FILTER:
            clauses.append(not_(Item.status.in_(archived)))
        elif status_filter == ARCHIVED_FILTER:
            clauses.append(Item.status.in_(archived))
        else:
            clauses.append(Item.status == status_filter)
    if search:
        # literal substring match; % and _ in the search text are escaped
        clauses.append(
            or_(*(getattr(Item, field).icontains(search, autoescape=True) for field in SEARCH_FIELDS))
        )
    if not clauses:
        return None
    return and_(*clauses)


def missing_confirmations(item: Any) -> List[str]:
    return [field for field in CONFIRMATION_FIELDS if not getattr(item, field, None)]


def check_ready_policy(item: Any, target: Status, enforce: bool) -> None:
    """Sign-offs are advisory unless ``enforce`` is set."""
    if not enforce or target not in _SIGNOFF_REQUIRED:
        return
    missing = missing_confirmations(item)
    if missing:
        raise ValidationFailed(
            f"Item {item.sku} cannot move to {target.value} without sign-off: {', '.join(missing)}",
            field="status",
        )


def partition(items: Iterable[Any]):
    """Split items into (active, archived) lists."""
    active, archived = [], []
    for item in items:
        (archived if is_archived(item.status) else active).append(item)
    return active, archived
