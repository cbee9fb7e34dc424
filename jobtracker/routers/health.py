"""Health check endpoint.

Reports which storage backend the selector picked and whether it came up
degraded.  Returns 503 while the backend is unavailable so load balancers
can take the instance out of rotation.
"""

import logging
from typing import Any

from fastapi import APIRouter
from starlette.responses import JSONResponse

from jobtracker.db.selector import selector

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> Any:
    """Return storage status; 200 when usable, 503 when degraded."""
    adapter = await selector.get_adapter()

    payload: dict[str, str | None] = {
        "status": "degraded" if selector.degraded else "ok",
        "backend": adapter.backend,
        "storage": "connected" if adapter.initialized else "unavailable",
        "error": str(adapter.init_error) if adapter.init_error else None,
    }

    if selector.degraded:
        logger.warning("health_degraded", extra={"backend": adapter.backend})
        return JSONResponse(status_code=503, content=payload)

    return payload
