"""Inventory item API."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from .. import schemas
from ..dependencies import get_actor_id, get_storage
from ..services.storage import InventoryStorage
from ..workflow import NEXT_STATUS, STATUS_LABELS

router = APIRouter(prefix="/api/items", tags=["Items"])


@router.get("/", response_model=schemas.PaginatedItems)
def list_items(
    status_filter: Optional[str] = Query(None, alias="status", description="active, archived, all or a status"),
    search: Optional[str] = Query(None, max_length=128),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    storage: InventoryStorage = Depends(get_storage),
):
    total = storage.count_items(status_filter, search)
    items = storage.get_items(status_filter, search, limit=limit, offset=offset)
    return schemas.PaginatedItems(total=total, items=items)


@router.get("/stats", response_model=schemas.StatusSummary)
def item_stats(storage: InventoryStorage = Depends(get_storage)):
    return storage.summary()


@router.get("/workflow", response_model=List[dict])
def workflow():
    """Each status with its label and successor (``None`` when terminal)."""
    return [
        {
            "status": value.value,
            "label": label,
            "next": NEXT_STATUS[value].value if NEXT_STATUS[value] else None,
        }
        for value, label in STATUS_LABELS
    ]


@router.post("/", response_model=schemas.ItemOut, status_code=status.HTTP_201_CREATED)
def create_item(
    payload: schemas.ItemCreate,
    storage: InventoryStorage = Depends(get_storage),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    return storage.create_item(payload, actor_id=actor_id)


@router.get("/{item_id}", response_model=schemas.ItemOut)
def get_item(item_id: int, storage: InventoryStorage = Depends(get_storage)):
    return storage.require_item(item_id)


@router.put("/{item_id}", response_model=schemas.ItemOut)
@router.patch("/{item_id}", response_model=schemas.ItemOut)
def update_item(
    item_id: int,
    payload: schemas.ItemUpdate,
    storage: InventoryStorage = Depends(get_storage),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    updates = payload.model_dump(exclude_unset=True)
    return storage.update_item(item_id, updates, actor_id=actor_id)


@router.post("/{item_id}/advance", response_model=schemas.AdvanceResult)
def advance_item(
    item_id: int,
    storage: InventoryStorage = Depends(get_storage),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    item, previous, advanced = storage.advance_item(item_id, actor_id=actor_id)
    return schemas.AdvanceResult(item=item, previous_status=previous, advanced=advanced)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    storage: InventoryStorage = Depends(get_storage),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    storage.delete_item(item_id, actor_id=actor_id)
