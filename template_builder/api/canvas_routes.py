"""
Canvas Routes
==============

API routes for canvas sessions, selection and pointer gestures.
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse
from typing import Optional, Dict, Any, List
from pydantic import BaseModel

from ..canvas.interaction import GestureError, ResizeDirection
from ..canvas.state_manager import CanvasSession
from ..canvas.surface import render_surface
from ..models.canvas_models import ElementType, Point, Rect
from ..models.element_config import PALETTE

router = APIRouter(prefix="/api/canvas", tags=["canvas"])

# Injected by server
state_manager = None


class CanvasStateResponse(BaseModel):
    """Response for canvas state."""
    session_id: str
    elements: List[Dict[str, Any]]
    selected_element_id: Optional[str] = None
    canvas_height: str
    gesture: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PaletteDragRequest(BaseModel):
    type: ElementType


class MoveStartRequest(BaseModel):
    element_id: str
    pointer: Point
    element_origin: Point


class DropRequest(BaseModel):
    pointer: Point
    canvas_rect: Rect


class ResizeStartRequest(BaseModel):
    element_id: str
    direction: ResizeDirection
    pointer: Point
    rendered_width: Optional[float] = None
    rendered_height: Optional[float] = None


class PointerRequest(BaseModel):
    pointer: Point


class SelectRequest(BaseModel):
    element_id: Optional[str] = None


class ViewportRequest(BaseModel):
    width: float


def _get_session(session_id: str) -> CanvasSession:
    if not state_manager:
        raise HTTPException(status_code=500, detail="State manager not initialized")

    session = state_manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _state_response(session: CanvasSession) -> CanvasStateResponse:
    state = session.snapshot()
    return CanvasStateResponse(
        session_id=state.session_id,
        elements=[e.model_dump(by_alias=True) for e in state.elements],
        selected_element_id=state.selected_element_id,
        canvas_height=state.canvas_height,
        gesture=session.engine.mode.value,
        created_at=session.created_at.isoformat(),
        updated_at=session.updated_at.isoformat() if session.updated_at else None
    )


@router.post("/session")
async def create_session():
    """Create a new canvas session."""
    if not state_manager:
        raise HTTPException(status_code=500, detail="State manager not initialized")

    session_id = state_manager.create_session()
    return {"session_id": session_id, "message": "Session created"}


@router.get("/palette")
async def get_palette():
    """Creatable element types in palette order."""
    return {"items": [{"type": t.value, "label": label} for t, label in PALETTE]}


@router.get("/state/{session_id}")
async def get_state(session_id: str) -> CanvasStateResponse:
    """Get canvas state for session."""
    return _state_response(_get_session(session_id))


@router.delete("/state/{session_id}")
async def clear_canvas(session_id: str):
    """Clear all elements from canvas."""
    if not state_manager:
        raise HTTPException(status_code=500, detail="State manager not initialized")

    if not state_manager.clear_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")

    return {"message": "Canvas cleared", "session_id": session_id}


@router.get("/{session_id}/surface", response_class=HTMLResponse)
async def get_surface(session_id: str):
    """Render the editable canvas surface."""
    session = _get_session(session_id)
    return render_surface(session.store.elements, session.store.selected_id, session.engine.canvas_height)


@router.post("/{session_id}/viewport")
async def update_viewport(session_id: str, request: ViewportRequest):
    """Report the rendered canvas width; the height follows it."""
    session = _get_session(session_id)
    return {"canvas_height": session.engine.on_canvas_resize(request.width)}


@router.post("/{session_id}/select")
async def select_element(session_id: str, request: SelectRequest):
    """Select an element, or clear the selection with a null id."""
    session = _get_session(session_id)
    if request.element_id is not None and session.store.get(request.element_id) is None:
        raise HTTPException(status_code=404, detail="Element not found")
    session.store.select(request.element_id)
    return {"selected_element_id": session.store.selected_id}


@router.post("/{session_id}/drag/palette")
async def start_palette_drag(session_id: str, request: PaletteDragRequest):
    """Pick up a palette item."""
    session = _get_session(session_id)
    try:
        session.engine.begin_palette_drag(request.type)
    except GestureError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"gesture": session.engine.mode.value}


@router.post("/{session_id}/drag/element")
async def start_move(session_id: str, request: MoveStartRequest):
    """Pick up a placed element."""
    session = _get_session(session_id)
    try:
        started = session.engine.begin_move(request.element_id, request.pointer, request.element_origin)
    except GestureError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"started": started, "gesture": session.engine.mode.value}


@router.post("/{session_id}/drop")
async def drop(session_id: str, request: DropRequest):
    """Release the dragged item over the canvas."""
    session = _get_session(session_id)
    try:
        element = session.engine.drop(request.pointer, request.canvas_rect)
    except GestureError as e:
        raise HTTPException(status_code=409, detail=str(e))
    session.touch()
    return {"element": element.model_dump(by_alias=True) if element else None}


@router.post("/{session_id}/resize/start")
async def start_resize(session_id: str, request: ResizeStartRequest):
    """Press a resize handle."""
    session = _get_session(session_id)
    try:
        start = session.engine.begin_resize(
            request.element_id,
            request.direction,
            request.pointer,
            rendered_width=request.rendered_width,
            rendered_height=request.rendered_height,
        )
    except GestureError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"gesture": session.engine.mode.value, "start": start.model_dump()}


@router.post("/{session_id}/pointer/move")
async def pointer_move(session_id: str, request: PointerRequest):
    """Pointer moved while a gesture is held."""
    session = _get_session(session_id)
    session.engine.pointer_move(request.pointer)
    preview = session.engine.resize_preview
    return {"preview": preview.model_dump() if preview else None}


@router.post("/{session_id}/pointer/up")
async def pointer_up(session_id: str, request: PointerRequest):
    """Pointer released; commits a running resize."""
    session = _get_session(session_id)
    session.engine.pointer_up(request.pointer)
    session.touch()
    return {"gesture": session.engine.mode.value}


@router.post("/{session_id}/gesture/cancel")
async def cancel_gesture(session_id: str):
    """Abandon the running gesture."""
    session = _get_session(session_id)
    session.engine.cancel()
    return {"gesture": session.engine.mode.value}
