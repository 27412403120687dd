# erp_console/main.py
# ERP Console - FastAPI service in front of the ERP backend
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import Any, Dict, List, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from . import __version__
from .deps import build_console
from .errors import ErpApiError
from .settings import settings

from erp_console.routers.auth import router as auth_router
from erp_console.routers.catalog import router as catalog_router
from erp_console.routers.finance import router as finance_router
from erp_console.routers.hr import router as hr_router
from erp_console.routers.inventory import router as inventory_router
from erp_console.routers.notifications import router as notifications_router
from erp_console.routers.production import router as production_router
from erp_console.routers.purchasing import router as purchasing_router
from erp_console.routers.reports import router as reports_router
from erp_console.routers.sales import router as sales_router

# ---------------------------------------------------------
# Logging setup
# ---------------------------------------------------------
from erp_console.logging_setup import setup_logging
setup_logging(settings)

logger = logging.getLogger(__name__)


async def _cache_gc_loop(cache, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        dropped = cache.gc()
        if dropped:
            logger.info("Cache GC dropped %d entries", dropped)


# ---------------------------------------------------------
# Lifespan: backend client, cache, notification poller
# ---------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    console = getattr(app.state, "console", None)
    if console is None:
        console = build_console(settings)
        app.state.console = console
    logger.info("ERP backend: %s (session %s)", settings.ERP_API_URL,
                "restored" if console.session.is_authenticated else "empty")
    gc_task = asyncio.create_task(_cache_gc_loop(console.cache, max(1.0, settings.CACHE_GC_SECONDS / 2)))
    if settings.NOTIFICATION_POLLING and console.poller is not None:
        console.poller.start()
    yield
    # Shutdown
    if console.poller is not None:
        await console.poller.stop()
    gc_task.cancel()
    with suppress(asyncio.CancelledError):
        await gc_task
    console.close()
    logger.info("ERP console stopped")


# ---------------------------------------------------------
# FastAPI app + CORS
# ---------------------------------------------------------
app = FastAPI(
    title="ERP Console API",
    version=__version__,
    description=settings.APP_NAME,
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


# ---------------------------------------------------------
# Errors -> backend error envelope
# ---------------------------------------------------------
def _validation_envelope(errors: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    details: List[Dict[str, Any]] = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = str(err.get("msg", "")).removeprefix("Value error, ")
        details.append({"field": ".".join(loc), "message": msg})
    message = details[0]["message"] if details else "Dữ liệu không hợp lệ"
    return {
        "success": False,
        "error": {"code": "VALIDATION_ERROR", "message": message, "details": details},
    }


@app.exception_handler(ErpApiError)
async def erp_error_handler(request: Request, exc: ErpApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=422, content=_validation_envelope(exc.errors()))


@app.exception_handler(ValidationError)
async def model_validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content=_validation_envelope(exc.errors()))


# ---------------------------------------------------------
# Routers
# ---------------------------------------------------------
app.include_router(auth_router)
app.include_router(catalog_router)
app.include_router(inventory_router)
app.include_router(production_router)
app.include_router(sales_router)
app.include_router(purchasing_router)
app.include_router(finance_router)
app.include_router(hr_router)
app.include_router(notifications_router)
app.include_router(reports_router)


# ---------------------------------------------------------
# Health
# ---------------------------------------------------------
@app.get("/health")
def health(request: Request):
    console = request.app.state.console
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": __version__,
        "backend": settings.ERP_API_URL,
        "session": {
            "authenticated": console.session.is_authenticated,
            "user": (console.session.user or {}).get("email"),
        },
        "cache": console.cache.stats(),
        "poller": console.poller.state() if console.poller else None,
    }
