"""Item photo API."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from .. import schemas
from ..dependencies import get_actor_id, get_storage
from ..services.storage import InventoryStorage

router = APIRouter(prefix="/api", tags=["Photos"])


@router.get("/items/{item_id}/photos", response_model=List[schemas.PhotoOut])
def list_photos(item_id: int, storage: InventoryStorage = Depends(get_storage)):
    return storage.get_photos(item_id)


@router.post(
    "/items/{item_id}/photos",
    response_model=schemas.PhotoOut,
    status_code=status.HTTP_201_CREATED,
)
def add_photo(
    item_id: int,
    payload: schemas.PhotoCreate,
    storage: InventoryStorage = Depends(get_storage),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    return storage.add_photo(item_id, payload, actor_id=actor_id)


@router.patch("/items/{item_id}/photos/reorder", response_model=List[schemas.PhotoOut])
def reorder_photos(
    item_id: int,
    payload: schemas.PhotoReorder,
    storage: InventoryStorage = Depends(get_storage),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    return storage.reorder_photos(item_id, payload.photo_ids, actor_id=actor_id)


@router.delete("/photos/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_photo(
    photo_id: int,
    storage: InventoryStorage = Depends(get_storage),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    storage.delete_photo(photo_id, actor_id=actor_id)
