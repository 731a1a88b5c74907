"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.logging import setup_logging
from app.api import health, menu, orders

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    yield
    # Shutdown
    pass


app = FastAPI(
    title="Kiosk Order Ledger",
    description="Order endpoints for dessert kiosks backed by a Google Sheets ledger",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report invalid bodies in the same {"error": ...} shape as other failures."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    logger.info(f"[VALIDATION] {request.method} {request.url.path} rejected - {problems}")
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request: " + "; ".join(problems)},
    )


# Menu routes must come first: /api/{kiosk_id} would otherwise catch /api/kiosks
app.include_router(health.router, tags=["health"])
app.include_router(menu.router, tags=["menu"])
app.include_router(orders.router, tags=["orders"])
