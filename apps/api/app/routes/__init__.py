"""Route modules."""

from .transcriptions import router as transcriptions_router
from .webhooks import router as webhooks_router

__all__ = ["transcriptions_router", "webhooks_router"]
