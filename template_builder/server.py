"""
Template Builder Server
========================

FastAPI server for the drag-and-drop document template builder.

Features:
- Canvas sessions with drag-create, drag-move and resize gestures
- Properties panel edits, including table column controls
- Export to an HTML document plus a parallel JSON description
- Relay endpoint forwarding exports to the workflow queue
"""

import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Import services
from .services.document_compiler import DocumentCompiler
from .services.queue_gateway import QueueSubmissionGateway, RELAY_URL
from .services.orchestrator_client import OrchestratorClient

# Import canvas manager
from .canvas.state_manager import StateManager
from .canvas.interaction import ResizeDirection, MIN_ELEMENT_SIZE
from .canvas.table_codec import SPLIT_SENTINEL, NAME_MARKER, DESCRIPTION_MARKER, VALUE_MARKER
from .models.element_config import PALETTE

# Import API routers
from .api import canvas_routes, element_routes, export_routes, relay_routes


# Shared service instances
state_manager: StateManager = None
compiler: DocumentCompiler = None
queue_gateway: QueueSubmissionGateway = None
orchestrator_client: OrchestratorClient = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global state_manager, compiler, queue_gateway, orchestrator_client

    logger.info("[TEMPLATE-BUILDER] Starting up...")

    state_manager = StateManager()
    compiler = DocumentCompiler()

    # Gateway posts exports to the relay (by default this same server)
    queue_gateway = QueueSubmissionGateway(
        timeout=60.0  # 60 second timeout for the relay round trip
    )

    orchestrator_client = OrchestratorClient(
        timeout=30.0  # 30 second timeout per downstream hop
    )

    # Inject into route modules
    canvas_routes.state_manager = state_manager
    element_routes.state_manager = state_manager

    export_routes.state_manager = state_manager
    export_routes.compiler = compiler
    export_routes.queue_gateway = queue_gateway

    relay_routes.orchestrator_client = orchestrator_client

    logger.info("[TEMPLATE-BUILDER] Services initialized")

    yield

    # Cleanup
    logger.info("[TEMPLATE-BUILDER] Shutting down...")
    if state_manager:
        state_manager.close()
    if queue_gateway:
        await queue_gateway.close()
    if orchestrator_client:
        await orchestrator_client.close()


# Create FastAPI app
app = FastAPI(
    title="Document Template Builder",
    description="Drag-and-drop HTML template builder with JSON export",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(canvas_routes.router)
app.include_router(element_routes.router)
app.include_router(export_routes.router)
app.include_router(relay_routes.router)


@app.get("/")
async def root():
    """Return API info."""
    return {
        "service": "Document Template Builder",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "canvas": "/api/canvas/state/{session_id}",
            "elements": "/api/element/{session_id}/{element_id}",
            "export": "/api/export/{session_id}/submit",
            "relay": "/proxy-post-api"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "template-builder",
        "relay_url": RELAY_URL
    }


@app.get("/api/info")
async def api_info():
    """Get API information, palette and export conventions."""
    return {
        "service": "Document Template Builder",
        "version": "1.0.0",
        "palette": [{"type": t.value, "label": label} for t, label in PALETTE],
        "resize": {
            "directions": [d.value for d in ResizeDirection],
            "min_size": MIN_ELEMENT_SIZE
        },
        "table_markers": {
            "split": SPLIT_SENTINEL,
            "name": NAME_MARKER,
            "description": DESCRIPTION_MARKER,
            "value": VALUE_MARKER
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "template_builder.server:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8080")),
        reload=True
    )
