"""
Element Routes
===============

API routes for element management and the properties panel.
"""

from fastapi import APIRouter, HTTPException
from typing import Optional, Dict, Any
from pydantic import BaseModel, ValidationError

from ..canvas.properties_editor import PropertiesEditor, PropertyError
from ..canvas.state_manager import CanvasSession
from ..models.canvas_models import ElementType, Point

router = APIRouter(prefix="/api/element", tags=["elements"])

# Injected by server
state_manager = None


class ElementRequest(BaseModel):
    """Request to add an element without a drag gesture."""
    type: ElementType
    position: Point = Point(x=0, y=0)
    select: bool = True


class PropertyEditRequest(BaseModel):
    key: str
    value: str


class ColumnUpdateRequest(BaseModel):
    """Edit of one column header; unset fields are left alone."""
    content: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None


class TableMarkupRequest(BaseModel):
    html: str


def _get_session(session_id: str) -> CanvasSession:
    if not state_manager:
        raise HTTPException(status_code=500, detail="State manager not initialized")

    session = state_manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _get_editor(session_id: str, element_id: str) -> PropertiesEditor:
    session = _get_session(session_id)
    if session.store.get(element_id) is None:
        raise HTTPException(status_code=404, detail="Element not found")
    session.touch()
    return PropertiesEditor(session.store, element_id)


def _element_response(element, message: str) -> Dict[str, Any]:
    if element is None:
        raise HTTPException(status_code=404, detail="Element not found")
    return {"message": message, "element": element.model_dump(by_alias=True)}


@router.post("/{session_id}")
async def add_element(session_id: str, request: ElementRequest):
    """Add element to canvas."""
    session = _get_session(session_id)
    element = session.store.create(request.type, request.position)
    if request.select:
        session.store.select(element.id)
    session.touch()
    return _element_response(element, "Element added")


@router.get("/{session_id}/{element_id}")
async def get_element(session_id: str, element_id: str):
    session = _get_session(session_id)
    element = session.store.get(element_id)
    return _element_response(element, "Element found")


@router.patch("/{session_id}/{element_id}")
async def update_element(session_id: str, element_id: str, updates: Dict[str, Any]):
    """Partial update: fields replaced, styles merged, tableData replaced."""
    session = _get_session(session_id)
    try:
        element = session.store.update(element_id, updates)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    session.touch()
    return _element_response(element, "Element updated")


@router.delete("/{session_id}/{element_id}")
async def remove_element(session_id: str, element_id: str):
    """Remove element from canvas."""
    session = _get_session(session_id)
    if not session.store.delete(element_id):
        raise HTTPException(status_code=404, detail="Element not found")
    session.touch()
    return {"message": "Element removed", "element_id": element_id}


@router.get("/{session_id}/{element_id}/properties")
async def get_properties(session_id: str, element_id: str):
    """Form controls for the properties panel."""
    editor = _get_editor(session_id, element_id)
    return {"fields": [field.model_dump() for field in editor.form_fields()]}


@router.put("/{session_id}/{element_id}/properties")
async def edit_property(session_id: str, element_id: str, request: PropertyEditRequest):
    """Write one form field back to the element."""
    editor = _get_editor(session_id, element_id)
    try:
        element = editor.edit(request.key, request.value)
    except PropertyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _element_response(element, "Property updated")


@router.post("/{session_id}/{element_id}/columns")
async def add_column(session_id: str, element_id: str):
    editor = _get_editor(session_id, element_id)
    try:
        element = editor.add_column()
    except PropertyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _element_response(element, "Column added")


@router.delete("/{session_id}/{element_id}/columns/last")
async def remove_last_column(session_id: str, element_id: str):
    editor = _get_editor(session_id, element_id)
    try:
        element = editor.remove_last_column()
    except PropertyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _element_response(element, "Column removed")


@router.put("/{session_id}/{element_id}/columns/{index}")
async def update_column(session_id: str, element_id: str, index: int, request: ColumnUpdateRequest):
    editor = _get_editor(session_id, element_id)
    element = editor.element
    try:
        if request.content is not None:
            element = editor.set_header_content(index, request.content)
        if request.name is not None:
            element = editor.set_header_name(index, request.name)
        if request.description is not None:
            element = editor.set_header_description(index, request.description)
    except PropertyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _element_response(element, "Column updated")


@router.put("/{session_id}/{element_id}/table/html")
async def import_table_markup(session_id: str, element_id: str, request: TableMarkupRequest):
    """Replace the table structure with one parsed from raw markup."""
    editor = _get_editor(session_id, element_id)
    try:
        element = editor.import_table_html(request.html)
    except PropertyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _element_response(element, "Table imported")
