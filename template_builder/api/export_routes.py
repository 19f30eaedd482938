"""
Export Routes
==============

Compile the canvas into the template documents and submit them to the queue.
"""

import logging
from fastapi import APIRouter, HTTPException
from typing import Optional
from pydantic import BaseModel

from ..canvas.state_manager import CanvasSession
from ..services.document_compiler import DocumentCompiler
from ..services.queue_gateway import QueueSubmissionGateway

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/export", tags=["export"])

# Injected by server
state_manager = None
compiler: Optional[DocumentCompiler] = None
queue_gateway: Optional[QueueSubmissionGateway] = None


class ExportRequest(BaseModel):
    """Template name and description typed next to the export button."""
    name: str = ""
    description: str = ""


def _get_session(session_id: str) -> CanvasSession:
    if not state_manager:
        raise HTTPException(status_code=500, detail="State manager not initialized")

    session = state_manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def get_compiler() -> DocumentCompiler:
    if compiler is None:
        raise HTTPException(500, "Document compiler not initialized")
    return compiler


def get_queue_gateway() -> QueueSubmissionGateway:
    if queue_gateway is None:
        raise HTTPException(500, "Queue gateway not initialized")
    return queue_gateway


@router.post("/{session_id}/compile")
async def compile_template(session_id: str, request: ExportRequest):
    """Compile without submitting: HTML document and JSON document."""
    session = _get_session(session_id)
    compiled = get_compiler().compile(session.store.elements, request.name, request.description)
    return {
        "html": compiled.html,
        "json": compiled.document.to_dict(),
        "json_text": compiled.json_text,
    }


@router.post("/{session_id}/submit")
async def submit_template(session_id: str, request: ExportRequest):
    """
    Compile the canvas and submit it through the relay.

    Only one submission per session runs at a time; a second request while
    one is in flight gets 409.
    """
    session = _get_session(session_id)
    gateway = get_queue_gateway()
    if session.submission_in_progress:
        raise HTTPException(status_code=409, detail="Submission already in progress")

    compiled = get_compiler().compile(session.store.elements, request.name, request.description)
    session.submission_in_progress = True
    try:
        result = await gateway.submit(compiled)
    finally:
        session.submission_in_progress = False

    logger.info(f"[EXPORT] Session {session_id} submission success={result.success}")
    return result.model_dump()
