"""Domain errors and their HTTP mapping."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Base class for errors the API layer turns into JSON responses."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "inventory_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.field:
            payload["field"] = self.field
        return payload


class DuplicateKey(InventoryError):
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate_key"


class NotFound(InventoryError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class InvalidProfile(InventoryError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_profile"


class ValidationFailed(InventoryError):
    status_code = 422
    code = "validation_failed"


class NoEligibleItems(InventoryError):
    """Raised when a template export has nothing left after the eligibility check."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "no_eligible_items"

    def __init__(self, message: str, skipped_skus: List[str]):
        super().__init__(message)
        self.skipped_skus = list(skipped_skus)

    @property
    def exported_count(self) -> int:
        return 0

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_skus)

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload.update(
            exported=self.exported_count,
            skipped_count=self.skipped_count,
            skipped=self.skipped_skus,
        )
        return payload


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InventoryError)
    async def inventory_error_handler(request: Request, exc: InventoryError):
        logger.info("%s on %s: %s", exc.code, request.url.path, exc.message)
        return JSONResponse(content=exc.to_payload(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            content={"detail": jsonable_encoder(exc.errors()), "code": ValidationFailed.code},
            status_code=ValidationFailed.status_code,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s", request.url.path)
        return JSONResponse(
            content={"detail": "Internal server error", "code": "internal_error"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
