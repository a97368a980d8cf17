"""FastAPI entrypoint with API + work-queue dashboard."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, Form, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from .config import Settings, get_settings
from .database import Base, build_engine, build_session_factory
from .dependencies import get_actor_id, get_storage
from .ebay_catalog import category_name, condition_name
from .errors import InventoryError, setup_exception_handlers
from .routers import audit, ebay, exports, items, photos
from .schemas import ItemCreate
from .services.storage import InventoryStorage
from .workflow import NEXT_STATUS, STATUS_LABELS, Status, partition

TEMPLATE_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.globals.update(category_name=category_name, condition_name=condition_name)
QUEUE_STAGES = [Status.INTAKE, Status.PROCESSING, Status.DRAFTED, Status.REVIEW, Status.READY]

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s]: %(message)s",
    )


def _redirect(error: Optional[str] = None) -> RedirectResponse:
    url = f"/?error={quote(error)}" if error else "/"
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    engine = build_engine(settings)
    # Fast path for local runs; production schemas come from migrations
    Base.metadata.create_all(bind=engine)

    app = FastAPI(title=settings.app_name, version="1.0.0")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_exception_handlers(app)

    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "ok", "environment": settings.environment}

    @app.get("/", response_class=HTMLResponse, tags=["Dashboard"])
    def dashboard(
        request: Request,
        error: Optional[str] = None,
        storage: InventoryStorage = Depends(get_storage),
    ):
        all_items = storage.get_items()
        active, archived = partition(all_items)
        labels = dict(STATUS_LABELS)

        columns = []
        for stage in QUEUE_STAGES:
            stage_items = [item for item in active if item.status == stage.value]
            columns.append(
                {
                    "status": stage.value,
                    "label": labels[stage],
                    "next": NEXT_STATUS[stage],
                    "items": stage_items,
                }
            )

        summary = storage.summary()
        context = {
            "request": request,
            "columns": columns,
            "archived": archived,
            "stats": summary,
            "chart": {
                "labels": [labels[value] for value, _ in STATUS_LABELS],
                "counts": [summary["by_status"][value.value] for value, _ in STATUS_LABELS],
            },
            "error": error,
            "now": datetime.now().strftime("%Y-%m-%d %H:%M"),
        }
        return templates.TemplateResponse(request, "dashboard.html", context)

    @app.post("/admin/items", response_class=HTMLResponse, tags=["Dashboard"])
    def create_item_form(
        sku: str = Form(..., max_length=64),
        category: str = Form(None),
        brand: str = Form(None),
        model: str = Form(None),
        source: str = Form(None),
        intake_notes: str = Form(None),
        decision: str = Form("research"),
        storage: InventoryStorage = Depends(get_storage),
        actor_id: Optional[str] = Depends(get_actor_id),
    ):
        try:
            payload = ItemCreate(
                sku=sku.strip(),
                category=category or None,
                brand=brand or None,
                model=model or None,
                source=source or None,
                intake_notes=intake_notes or None,
                decision="scrap" if decision == "scrap" else "research",
                intake_confirmed_by=actor_id,
            )
            storage.create_item(payload, actor_id=actor_id)
        except ValidationError as exc:
            return _redirect(exc.errors()[0]["msg"])
        except InventoryError as exc:
            return _redirect(exc.message)
        return _redirect()

    @app.post("/admin/items/{item_id}/advance", tags=["Dashboard"])
    def advance_item_form(
        item_id: int,
        storage: InventoryStorage = Depends(get_storage),
        actor_id: Optional[str] = Depends(get_actor_id),
    ):
        try:
            storage.advance_item(item_id, actor_id=actor_id)
        except InventoryError as exc:
            return _redirect(exc.message)
        return _redirect()

    @app.post("/admin/items/{item_id}/delete", tags=["Dashboard"])
    def remove_item_form(
        item_id: int,
        storage: InventoryStorage = Depends(get_storage),
        actor_id: Optional[str] = Depends(get_actor_id),
    ):
        try:
            storage.delete_item(item_id, actor_id=actor_id)
        except InventoryError as exc:
            return _redirect(exc.message)
        return _redirect()

    app.include_router(items.router)
    app.include_router(photos.router)
    app.include_router(exports.router)
    app.include_router(audit.router)
    app.include_router(ebay.router)

    logger.info("%s started (environment=%s)", settings.app_name, settings.environment)
    return app


app = create_app()
