"""
Relay Routes
=============

CORS-friendly pass-through from the editor to the queueing service.
"""

import logging
from typing import Any, Optional
from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse

from ..services.orchestrator_client import OrchestratorClient

logger = logging.getLogger(__name__)
router = APIRouter(tags=["relay"])

# Injected by server
orchestrator_client: Optional[OrchestratorClient] = None


@router.post("/proxy-post-api")
async def proxy_post_api(payload: Any = Body(...)):
    """
    Forward an arbitrary JSON body as a queue item.

    Returns the queue API's status and JSON body, or 500 with
    ``{message, error}`` when the token or the queue call fails.
    """
    if orchestrator_client is None:
        raise HTTPException(500, "Orchestrator client not initialized")

    logger.info("[RELAY] Received request on /proxy-post-api")
    result = await orchestrator_client.forward(payload)

    if not result.success:
        logger.error(f"[RELAY] Error calling external API: {result.error}")
        return JSONResponse(
            status_code=500,
            content={"message": "Failed to call external API", "error": result.error},
        )

    return JSONResponse(status_code=result.status_code, content=result.body)
