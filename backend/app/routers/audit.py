"""Activity feed API."""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services.audit import recent_actions

router = APIRouter(prefix="/api/audit", tags=["Audit"])


@router.get("/", response_model=List[schemas.AuditLogOut])
def list_audit_entries(limit: int = Query(50, ge=1, le=500), db: Session = Depends(get_db)):
    return recent_actions(db, limit=limit)
