"""Pydantic schemas for request/response bodies."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .workflow import Status


class ItemFields(BaseModel):
    # Intake
    source: Optional[str] = Field(None, max_length=255)
    source_location: Optional[str] = Field(None, max_length=255)
    dropoff_type: Optional[str] = Field(None, max_length=32, description="dropoff, pickup, shipment")
    category: Optional[str] = Field(None, max_length=64, description="Laptop, Desktop, Monitor, ...")
    power_test: Optional[bool] = None
    intake_notes: Optional[str] = None

    # Specs
    brand: Optional[str] = Field(None, max_length=128)
    model: Optional[str] = Field(None, max_length=128)
    cpu: Optional[str] = Field(None, max_length=128)
    ram: Optional[str] = Field(None, max_length=64)
    storage_type: Optional[str] = Field(None, max_length=32, description="SSD, HDD")
    storage_size: Optional[str] = Field(None, max_length=64)
    battery_health: Optional[str] = Field(None, max_length=64)
    charger_included: Optional[str] = Field(None, max_length=32, description="Yes, No, Unknown")
    resolution: Optional[str] = Field(None, max_length=64)
    os: Optional[str] = Field(None, max_length=128)
    gpu: Optional[str] = Field(None, max_length=128)

    # Testing
    bench_tested: Optional[bool] = None
    test_tool: Optional[str] = Field(None, max_length=128)
    magic_octopus_run: Optional[bool] = None
    data_destruction: Optional[bool] = None
    bench_notes: Optional[str] = None
    test_notes: Optional[str] = None

    # Listing
    ebay_category_id: Optional[str] = Field(None, max_length=32)
    ebay_condition_id: Optional[str] = Field(None, max_length=32)
    listing_format: Optional[Literal["FixedPrice", "Auction"]] = None
    list_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    research_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    quantity: Optional[int] = Field(None, ge=1)
    upc: Optional[str] = Field(None, max_length=64)
    storage_location: Optional[str] = Field(None, max_length=128)
    listing_title: Optional[str] = Field(None, max_length=255, description="Trimmed to 80 chars on export")
    listing_description: Optional[str] = Field(None, description="HTML allowed")
    source_vendor: Optional[str] = Field(None, max_length=255)

    # Chain of custody
    intake_confirmed_by: Optional[str] = Field(None, max_length=64)
    processing_confirmed_by: Optional[str] = Field(None, max_length=64)
    listing_confirmed_by: Optional[str] = Field(None, max_length=64)
    review_confirmed_by: Optional[str] = Field(None, max_length=64)


class ItemCreate(ItemFields):
    sku: str = Field(..., min_length=1, max_length=64)
    status: Optional[Status] = Field(None, description="Defaults from the intake decision")
    decision: Literal["research", "scrap"] = Field("research", description="Intake decision")
    intake_date: Optional[datetime] = None
    quantity: Optional[int] = Field(1, ge=1)
    created_by: Optional[str] = Field(None, max_length=64)


class ItemUpdate(ItemFields):
    sku: Optional[str] = Field(None, min_length=1, max_length=64)
    status: Optional[Status] = None
    intake_date: Optional[datetime] = None


class PhotoCreate(BaseModel):
    type: Literal["intake", "listing"] = "intake"
    url: str = Field(..., min_length=1)
    storage_key: Optional[str] = Field(None, max_length=255)
    sort_order: Optional[int] = None


class PhotoOut(BaseModel):
    id: int
    item_id: int
    type: str
    url: str
    storage_key: Optional[str] = None
    sort_order: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PhotoReorder(BaseModel):
    photo_ids: List[int] = Field(..., description="Photo ids in their new display order")


class ItemOut(ItemFields):
    id: int
    sku: str
    status: Status
    intake_date: datetime
    quantity: Optional[int] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    photos: List[PhotoOut] = []

    model_config = ConfigDict(from_attributes=True)


class PaginatedItems(BaseModel):
    total: int
    items: List[ItemOut]


class AdvanceResult(BaseModel):
    item: ItemOut
    previous_status: Status
    advanced: bool


class StatusSummary(BaseModel):
    total: int
    active: int
    archived: int
    by_status: Dict[str, int]


class MappingRule(BaseModel):
    csv_header: str = Field(..., alias="csvHeader", min_length=1)
    type: Literal["static", "field"]
    value: str = ""

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, value):
        """Static cells may be given as numbers or booleans."""
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        return value


class ExportProfileCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    mappings: List[MappingRule]


class ExportProfileOut(BaseModel):
    id: int
    name: str
    mappings: List[MappingRule]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CsvGenerateRequest(BaseModel):
    profile_id: int
    item_ids: List[int]


class EbayExportRequest(BaseModel):
    item_ids: List[int]


class AuditLogOut(BaseModel):
    id: int
    actor_id: Optional[str] = None
    action: str
    entity_type: str
    entity_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EbayCategoryOut(BaseModel):
    id: str
    name: str
    parent_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class EbayConditionOut(BaseModel):
    id: str
    name: str
    description: str

    model_config = ConfigDict(from_attributes=True)
