"""Append-only activity log."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import AuditLog


def log_action(
    db: Session,
    action: str,
    entity_type: str,
    entity_id: Any = None,
    details: Optional[Dict[str, Any]] = None,
    actor_id: Optional[str] = None,
) -> AuditLog:
    """Stage an audit row; the caller's commit persists it with the change."""
    entry = AuditLog(
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        details=details or None,
    )
    db.add(entry)
    return entry


def recent_actions(db: Session, limit: int = 50) -> List[AuditLog]:
    return db.scalars(select(AuditLog).order_by(AuditLog.id.desc()).limit(limit)).all()
