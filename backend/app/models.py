"""SQLAlchemy models."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from .database import Base


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String(64), nullable=False, unique=True, index=True)
    status = Column(String(32), nullable=False, default="intake", index=True)

    # Intake
    intake_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    source = Column(String(255), nullable=True)
    source_location = Column(String(255), nullable=True)
    dropoff_type = Column(String(32), nullable=True)
    category = Column(String(64), nullable=True)
    power_test = Column(Boolean, nullable=True)
    intake_notes = Column(Text, nullable=True)

    # Specs
    brand = Column(String(128), nullable=True)
    model = Column(String(128), nullable=True)
    cpu = Column(String(128), nullable=True)
    ram = Column(String(64), nullable=True)
    storage_type = Column(String(32), nullable=True)
    storage_size = Column(String(64), nullable=True)
    battery_health = Column(String(64), nullable=True)
    charger_included = Column(String(32), nullable=True)
    resolution = Column(String(64), nullable=True)
    os = Column(String(128), nullable=True)
    gpu = Column(String(128), nullable=True)

    # Testing
    bench_tested = Column(Boolean, nullable=True)
    test_tool = Column(String(128), nullable=True)
    magic_octopus_run = Column(Boolean, nullable=True, default=False)
    data_destruction = Column(Boolean, nullable=True)
    bench_notes = Column(Text, nullable=True)
    test_notes = Column(Text, nullable=True)

    # Listing
    ebay_category_id = Column(String(32), nullable=True)
    ebay_condition_id = Column(String(32), nullable=True)
    listing_format = Column(String(32), nullable=True)
    list_price = Column(Numeric(12, 2), nullable=True)
    research_price = Column(Numeric(12, 2), nullable=True)
    quantity = Column(Integer, nullable=True, default=1)
    upc = Column(String(64), nullable=True)
    storage_location = Column(String(128), nullable=True)
    listing_title = Column(String(255), nullable=True)
    listing_description = Column(Text, nullable=True)
    source_vendor = Column(String(255), nullable=True)

    # Chain of custody
    intake_confirmed_by = Column(String(64), nullable=True)
    processing_confirmed_by = Column(String(64), nullable=True)
    listing_confirmed_by = Column(String(64), nullable=True)
    review_confirmed_by = Column(String(64), nullable=True)

    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    photos = relationship(
        "Photo",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="[Photo.sort_order, Photo.id]",
        lazy="selectin",
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Item id={self.id} sku={self.sku!r} status={self.status}>"


class Photo(Base):
    __tablename__ = "photos"

    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(16), nullable=False, default="intake")
    url = Column(Text, nullable=False)
    storage_key = Column(String(255), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    item = relationship("Item", back_populates="photos")

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Photo id={self.id} item_id={self.item_id} sort_order={self.sort_order}>"


class ExportProfile(Base):
    __tablename__ = "export_profiles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    mappings = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    actor_id = Column(String(64), nullable=True)
    action = Column(String(64), nullable=False)
    entity_type = Column(String(32), nullable=False)
    entity_id = Column(String(64), nullable=True)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
