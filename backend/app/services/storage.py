"""Persistence operations for items, photos and export profiles."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import Settings
from ..errors import DuplicateKey, NotFound, ValidationFailed
from ..models import ExportProfile, Item, Photo
from ..schemas import ExportProfileCreate, ItemCreate, PhotoCreate
from ..workflow import (
    ARCHIVED_STATUSES,
    CONFIRMATION_FIELDS,
    Status,
    check_ready_policy,
    filter_clause,
    initial_status,
    next_status,
    parse_status,
)
from .audit import log_action
from .csv_export import validate_mappings

logger = logging.getLogger(__name__)

# columns an update may change but never set to NULL
REQUIRED_ITEM_FIELDS = frozenset(
    column.key for column in Item.__table__.columns if not column.nullable and not column.primary_key
)
UNIQUE_VIOLATION = "23505"


class InventoryStorage:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    # Items

    def _listing_stmt(self, status: Optional[str], search: Optional[str]):
        stmt = select(Item)
        clause = filter_clause(status, search)
        if clause is not None:
            stmt = stmt.where(clause)
        return stmt

    def get_items(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Item]:
        stmt = self._listing_stmt(status, search).order_by(Item.intake_date.desc(), Item.id.desc())
        limit = limit if limit is not None else self.settings.default_page_limit
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return self.db.scalars(stmt).all()

    def count_items(self, status: Optional[str] = None, search: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(Item)
        clause = filter_clause(status, search)
        if clause is not None:
            stmt = stmt.where(clause)
        return self.db.scalar(stmt) or 0

    def get_item(self, item_id: int) -> Optional[Item]:
        return self.db.get(Item, item_id)

    def require_item(self, item_id: int) -> Item:
        item = self.get_item(item_id)
        if item is None:
            raise NotFound(f"Item {item_id} not found")
        return item

    def get_item_by_sku(self, sku: str) -> Optional[Item]:
        return self.db.scalar(select(Item).where(Item.sku == sku))

    def get_items_by_ids(self, ids: Sequence[int]) -> List[Item]:
        """Fetch items in the order their ids were given; unknown ids are dropped."""
        if not ids:
            return []
        found = {item.id: item for item in self.db.scalars(select(Item).where(Item.id.in_(ids))).all()}
        ordered, seen = [], set()
        for item_id in ids:
            if item_id in found and item_id not in seen:
                ordered.append(found[item_id])
                seen.add(item_id)
        return ordered

    def create_item(self, payload: ItemCreate, actor_id: Optional[str] = None) -> Item:
        data = payload.model_dump(exclude_none=True, exclude={"decision", "status"})
        if payload.decision == "scrap" or payload.status is None:
            status = initial_status(payload.decision)
        else:
            status = payload.status
        data["status"] = status.value
        data.setdefault("intake_date", datetime.now(timezone.utc))
        if actor_id and "created_by" not in data:
            data["created_by"] = actor_id

        item = Item(**data)
        check_ready_policy(item, status, self.settings.require_confirmations_for_ready)
        self.db.add(item)
        self._flush(f"SKU {item.sku} already exists")
        self._audit("item.create", "item", item.id, {"sku": item.sku, "status": item.status}, actor_id)
        self.db.commit()
        self.db.refresh(item)
        logger.info("Created item %s (%s) with status %s", item.id, item.sku, item.status)
        return item

    def update_item(self, item_id: int, updates: Dict[str, Any], actor_id: Optional[str] = None) -> Item:
        """Apply a partial update; only keys present in ``updates`` are touched."""
        item = self.require_item(item_id)
        updates = dict(updates)

        for field in REQUIRED_ITEM_FIELDS.intersection(updates):
            if updates[field] is None:
                raise ValidationFailed(f"{field} cannot be cleared", field=field)
        if "status" in updates:
            updates["status"] = parse_status(updates["status"]).value
        if "sku" in updates and not updates["sku"]:
            raise ValidationFailed("SKU cannot be empty", field="sku")

        for field in CONFIRMATION_FIELDS:
            if field not in updates:
                continue
            current, incoming = getattr(item, field), updates[field]
            if incoming and current and incoming != current:
                raise ValidationFailed(f"{field} already confirmed by {current}", field=field)

        merged = SimpleNamespace(
            sku=item.sku,
            **{field: updates.get(field, getattr(item, field)) for field in CONFIRMATION_FIELDS},
        )
        check_ready_policy(
            merged,
            parse_status(updates.get("status", item.status)),
            self.settings.require_confirmations_for_ready and "status" in updates,
        )

        for field, value in updates.items():
            setattr(item, field, value)
        self._flush(f"SKU {updates.get('sku')} already exists")
        self._audit("item.update", "item", item.id, {"fields": sorted(updates)}, actor_id)
        self.db.commit()
        self.db.refresh(item)
        logger.info("Updated item %s fields=%s", item.id, sorted(updates))
        return item

    def advance_item(self, item_id: int, actor_id: Optional[str] = None) -> Tuple[Item, Status, bool]:
        """Move an item one step along the workflow; terminal items are left alone."""
        item = self.require_item(item_id)
        previous = parse_status(item.status)
        target = next_status(previous)
        if target is None:
            return item, previous, False
        item = self.update_item(item_id, {"status": target.value}, actor_id=actor_id)
        return item, previous, True

    def delete_item(self, item_id: int, actor_id: Optional[str] = None) -> None:
        item = self.require_item(item_id)
        sku = item.sku
        self._audit("item.delete", "item", item_id, {"sku": sku}, actor_id)
        self.db.delete(item)
        self.db.commit()
        logger.info("Deleted item %s (%s)", item_id, sku)

    def status_counts(self) -> Dict[str, int]:
        rows = self.db.execute(select(Item.status, func.count()).group_by(Item.status)).all()
        counts = {status.value: 0 for status in Status}
        for status_value, count in rows:
            counts[status_value] = count
        return counts

    def summary(self) -> Dict[str, Any]:
        counts = self.status_counts()
        archived = sum(counts.get(status.value, 0) for status in ARCHIVED_STATUSES)
        total = sum(counts.values())
        return {"total": total, "active": total - archived, "archived": archived, "by_status": counts}

    # Photos

    def get_photos(self, item_id: int) -> List[Photo]:
        self.require_item(item_id)
        return self.db.scalars(
            select(Photo).where(Photo.item_id == item_id).order_by(Photo.sort_order, Photo.id)
        ).all()

    def add_photo(self, item_id: int, payload: PhotoCreate, actor_id: Optional[str] = None) -> Photo:
        self.require_item(item_id)
        data = payload.model_dump(exclude_none=True)
        if "sort_order" not in data:
            last = self.db.scalar(select(func.max(Photo.sort_order)).where(Photo.item_id == item_id))
            data["sort_order"] = 0 if last is None else last + 1
        photo = Photo(item_id=item_id, **data)
        self.db.add(photo)
        self._audit("photo.add", "item", item_id, {"url": photo.url}, actor_id)
        self.db.commit()
        self.db.refresh(photo)
        return photo

    def delete_photo(self, photo_id: int, actor_id: Optional[str] = None) -> None:
        photo = self.db.get(Photo, photo_id)
        if photo is None:
            raise NotFound(f"Photo {photo_id} not found")
        item_id = photo.item_id
        self._audit("photo.delete", "item", item_id, {"photo_id": photo_id}, actor_id)
        self.db.delete(photo)
        self.db.commit()

    def reorder_photos(self, item_id: int, ordered_ids: Sequence[int], actor_id: Optional[str] = None) -> List[Photo]:
        """Assign sort orders 0..n-1 following ``ordered_ids``."""
        photos = {photo.id: photo for photo in self.get_photos(item_id)}
        if len(set(ordered_ids)) != len(ordered_ids):
            raise ValidationFailed("Photo ids must not repeat", field="photo_ids")
        foreign = [photo_id for photo_id in ordered_ids if photo_id not in photos]
        if foreign:
            raise ValidationFailed(
                f"Photos {foreign} do not belong to item {item_id}", field="photo_ids"
            )
        for position, photo_id in enumerate(ordered_ids):
            photos[photo_id].sort_order = position
        # photos left out keep their relative order after the listed ones
        listed = set(ordered_ids)
        trailing = [photo for photo_id, photo in photos.items() if photo_id not in listed]
        for offset, photo in enumerate(trailing, start=len(ordered_ids)):
            photo.sort_order = offset
        self._audit("photo.reorder", "item", item_id, {"photo_ids": list(ordered_ids)}, actor_id)
        self.db.commit()
        return self.get_photos(item_id)

    # Export profiles

    def get_export_profiles(self) -> List[ExportProfile]:
        return self.db.scalars(
            select(ExportProfile).order_by(ExportProfile.created_at.desc(), ExportProfile.id.desc())
        ).all()

    def get_export_profile(self, profile_id: int) -> ExportProfile:
        profile = self.db.get(ExportProfile, profile_id)
        if profile is None:
            raise NotFound(f"Export profile {profile_id} not found")
        return profile

    def create_export_profile(self, payload: ExportProfileCreate, actor_id: Optional[str] = None) -> ExportProfile:
        rules = validate_mappings(payload.mappings)
        profile = ExportProfile(
            name=payload.name,
            mappings=[rule.model_dump(by_alias=True) for rule in rules],
        )
        self.db.add(profile)
        self.db.flush()
        self._audit("export_profile.create", "export_profile", profile.id, {"name": payload.name}, actor_id)
        self.db.commit()
        self.db.refresh(profile)
        logger.info("Created export profile %s (%s) with %d columns", profile.id, profile.name, len(rules))
        return profile

    def delete_export_profile(self, profile_id: int, actor_id: Optional[str] = None) -> None:
        profile = self.get_export_profile(profile_id)
        self._audit("export_profile.delete", "export_profile", profile_id, {"name": profile.name}, actor_id)
        self.db.delete(profile)
        self.db.commit()

    # Internals

    def record_export(self, kind: str, details: Dict[str, Any], actor_id: Optional[str] = None) -> None:
        self._audit(f"export.{kind}", "export", None, details, actor_id)
        self.db.commit()

    def _audit(self, action, entity_type, entity_id, details, actor_id) -> None:
        if self.settings.audit_enabled:
            log_action(self.db, action, entity_type, entity_id, details, actor_id)

    def _flush(self, duplicate_message: str) -> None:
        try:
            self.db.flush()
        except IntegrityError as exc:
            self.db.rollback()
            if _is_unique_violation(exc):
                raise DuplicateKey(duplicate_message, field="sku") from exc
            raise ValidationFailed(f"Rejected by the database: {exc.orig}") from exc


def _is_unique_violation(exc: IntegrityError) -> bool:
    code = getattr(exc.orig, "pgcode", None)
    if code is not None:
        return code == UNIQUE_VIOLATION
    return "unique" in str(exc.orig).lower()
