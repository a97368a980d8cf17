"""Export profiles and CSV downloads."""

import re
from datetime import date
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response, status

from .. import schemas
from ..dependencies import get_actor_id, get_storage
from ..errors import NoEligibleItems, NotFound
from ..services.csv_export import generate_csv
from ..services.ebay_export import generate_ebay_draft_csv
from ..services.storage import InventoryStorage

router = APIRouter(prefix="/api", tags=["Exports"])

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-") or "export"


def _csv_response(content: str, filename: str, headers: Optional[dict] = None) -> Response:
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"', **(headers or {})},
    )


def _load_items(storage: InventoryStorage, item_ids: List[int]):
    items = storage.get_items_by_ids(item_ids)
    missing = sorted(set(item_ids) - {item.id for item in items})
    if missing:
        raise NotFound(f"Items not found: {', '.join(str(i) for i in missing)}")
    return items


@router.get("/export-profiles", response_model=List[schemas.ExportProfileOut])
def list_export_profiles(storage: InventoryStorage = Depends(get_storage)):
    return storage.get_export_profiles()


@router.post(
    "/export-profiles",
    response_model=schemas.ExportProfileOut,
    status_code=status.HTTP_201_CREATED,
)
def create_export_profile(
    payload: schemas.ExportProfileCreate,
    storage: InventoryStorage = Depends(get_storage),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    return storage.create_export_profile(payload, actor_id=actor_id)


@router.get("/export-profiles/{profile_id}", response_model=schemas.ExportProfileOut)
def get_export_profile(profile_id: int, storage: InventoryStorage = Depends(get_storage)):
    return storage.get_export_profile(profile_id)


@router.delete("/export-profiles/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_export_profile(
    profile_id: int,
    storage: InventoryStorage = Depends(get_storage),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    storage.delete_export_profile(profile_id, actor_id=actor_id)


@router.post("/csv/generate")
def generate_profile_csv(
    payload: schemas.CsvGenerateRequest,
    storage: InventoryStorage = Depends(get_storage),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    profile = storage.get_export_profile(payload.profile_id)
    items = _load_items(storage, payload.item_ids)
    content = generate_csv(items, profile.mappings)
    storage.record_export(
        "profile",
        {"profile_id": profile.id, "item_ids": payload.item_ids, "rows": len(items)},
        actor_id=actor_id,
    )
    filename = f"{_slug(profile.name)}-{date.today().isoformat()}.csv"
    return _csv_response(content, filename, {"X-Exported-Count": str(len(items))})


@router.post("/csv/ebay-export")
def ebay_export(
    payload: schemas.EbayExportRequest,
    storage: InventoryStorage = Depends(get_storage),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    items = _load_items(storage, payload.item_ids)
    try:
        export = generate_ebay_draft_csv(items)
    except NoEligibleItems as exc:
        storage.record_export("ebay", {"exported": 0, "skipped": exc.skipped_skus}, actor_id=actor_id)
        raise
    storage.record_export(
        "ebay",
        {"exported": export.exported_count, "skipped": export.skipped_skus},
        actor_id=actor_id,
    )
    filename = f"ebay-draft-listing-{date.today().isoformat()}.csv"
    return _csv_response(
        export.csv,
        filename,
        {
            "X-Exported-Count": str(export.exported_count),
            "X-Skipped-Count": str(export.skipped_count),
            # header values must be latin-1; SKUs are percent-encoded UTF-8
            "X-Skipped-Skus": ",".join(quote(sku, safe="") for sku in export.skipped_skus),
        },
    )
