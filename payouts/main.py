"""FastAPI application instance and startup wiring."""
from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from payouts.core import get_logger
from payouts.core.config import Settings, get_settings
from payouts.core.log import init_logging
from payouts.routers import payouts_router
from payouts.services import PayoutTable

LOGGER = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or get_settings()
    init_logging(level=settings.log_level, log_dir=settings.log_dir)

    app = FastAPI(title="Payout Table", version="0.1.0")
    app.state.settings = settings
    app.state.payout_table = PayoutTable.from_settings(settings.payouts)
    app.include_router(payouts_router)

    @app.get("/", include_in_schema=False)
    async def root_redirect():
        return RedirectResponse(url="/payouts/")

    LOGGER.info("FastAPI application initialised")
    return app


app = create_app()
