"""Request-scoped collaborators."""

from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from .config import Settings
from .database import get_db
from .services.storage import InventoryStorage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> InventoryStorage:
    return InventoryStorage(db, settings)


def get_actor_id(x_user_id: Optional[str] = Header(None, max_length=64)) -> Optional[str]:
    """User id forwarded by the auth proxy in front of the API, if any."""
    return x_user_id or None
