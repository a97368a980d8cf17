"""Read-only eBay reference data for filling listing fields."""

from typing import List

from fastapi import APIRouter

from .. import schemas
from ..ebay_catalog import CATEGORIES, CONDITIONS, get_category
from ..errors import NotFound

router = APIRouter(prefix="/api/ebay", tags=["eBay"])


@router.get("/categories", response_model=List[schemas.EbayCategoryOut])
def list_categories():
    return CATEGORIES


@router.get("/categories/{category_id}", response_model=schemas.EbayCategoryOut)
def get_category_by_id(category_id: str):
    category = get_category(category_id)
    if category is None:
        raise NotFound(f"eBay category {category_id} not found")
    return category


@router.get("/conditions", response_model=List[schemas.EbayConditionOut])
def list_conditions():
    return CONDITIONS
