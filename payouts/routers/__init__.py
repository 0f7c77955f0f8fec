"""FastAPI routers for the payout table."""

from .payouts import router as payouts_router

__all__ = ["payouts_router"]
