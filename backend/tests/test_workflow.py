from types import SimpleNamespace

import pytest

from app.errors import ValidationFailed
from app.workflow import (
    ARCHIVED_STATUSES,
    NEXT_STATUS,
    Status,
    check_ready_policy,
    initial_status,
    matches_filter,
    missing_confirmations,
    next_status,
    partition,
)


def test_forward_chain():
    assert next_status("intake") == Status.PROCESSING
    assert next_status("processing") == Status.DRAFTED
    assert next_status("drafted") == Status.REVIEW
    assert next_status("review") == Status.READY
    assert next_status("ready") == Status.LISTED
    assert next_status("listed") == Status.SOLD


def test_terminal_states_have_no_successor():
    assert next_status("sold") is None
    assert next_status(Status.SCRAP) is None


def test_every_status_has_an_entry():
    assert set(NEXT_STATUS) == set(Status)
    assert Status.SCRAP not in NEXT_STATUS.values()


def test_unknown_status_is_rejected():
    with pytest.raises(ValidationFailed):
        next_status("shipped")


def test_intake_decision():
    assert initial_status("research") == Status.INTAKE
    assert initial_status("scrap") == Status.SCRAP
    with pytest.raises(ValidationFailed):
        initial_status("recycle")


def _item(status, **fields):
    values = dict(sku="SKU-1", brand=None, model=None, category=None)
    values.update(fields)
    return SimpleNamespace(status=status, **values)


def test_active_and_archived_partition_every_status():
    items = [_item(status.value) for status in Status]
    active = [item for item in items if matches_filter(item, "active")]
    archived = [item for item in items if matches_filter(item, "archived")]

    assert not set(map(id, active)) & set(map(id, archived))
    assert len(active) + len(archived) == len(items)
    assert {item.status for item in archived} == {status.value for status in ARCHIVED_STATUSES}
    assert partition(items) == (active, archived)


def test_all_and_exact_filters():
    items = [_item(status.value) for status in Status]
    assert all(matches_filter(item, "all") for item in items)
    assert all(matches_filter(item, None) for item in items)
    assert [item.status for item in items if matches_filter(item, "review")] == ["review"]


def test_search_is_case_insensitive_across_fields():
    laptop = _item("intake", sku="DELL-01", brand="Dell", model="Latitude 7420", category="Laptop")
    assert matches_filter(laptop, search="latitude")
    assert matches_filter(laptop, search="dell-0")
    assert matches_filter(laptop, search="LAPTOP")
    assert not matches_filter(laptop, search="monitor")
    assert not matches_filter(laptop, status_filter="archived", search="dell")


def test_ready_policy_is_advisory_by_default():
    item = _item("review", intake_confirmed_by="u1")
    check_ready_policy(item, Status.READY, enforce=False)


def test_ready_policy_when_enforced():
    item = _item("review", intake_confirmed_by="u1", processing_confirmed_by=None,
                 listing_confirmed_by="u2", review_confirmed_by=None)
    assert missing_confirmations(item) == ["processing_confirmed_by", "review_confirmed_by"]
    with pytest.raises(ValidationFailed):
        check_ready_policy(item, Status.READY, enforce=True)
    # earlier stages are never gated
    check_ready_policy(item, Status.REVIEW, enforce=True)
