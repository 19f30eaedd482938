"""
Element Store
=============

Single owner of the placed elements of one canvas and of the selection.
Every mutation goes through create/update/select/delete.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from ..models.canvas_models import CanvasElement, ElementType, Point, TableData
from ..models.element_config import initial_element_fields

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = ("id", "type")


def new_element_id() -> str:
    return f"element-{uuid.uuid4().hex[:12]}"


class ElementStore:
    """Ordered element list with lookup by id."""

    def __init__(self):
        self._elements: List[CanvasElement] = []
        self.selected_id: Optional[str] = None

    @property
    def elements(self) -> List[CanvasElement]:
        return list(self._elements)

    @property
    def selected(self) -> Optional[CanvasElement]:
        return self.get(self.selected_id) if self.selected_id else None

    def __len__(self) -> int:
        return len(self._elements)

    def _index_of(self, element_id: str) -> Optional[int]:
        for index, element in enumerate(self._elements):
            if element.id == element_id:
                return index
        return None

    def get(self, element_id: str) -> Optional[CanvasElement]:
        index = self._index_of(element_id)
        return self._elements[index] if index is not None else None

    def create(self, element_type: ElementType, position: Point) -> CanvasElement:
        """Append a new element with the per-type defaults at the given position."""
        element_id = new_element_id()
        while self._index_of(element_id) is not None:
            element_id = new_element_id()

        element = CanvasElement(
            id=element_id,
            type=ElementType(element_type),
            **initial_element_fields(ElementType(element_type), position.x, position.y),
        )
        self._elements.append(element)
        logger.info(f"[ELEMENT-STORE] Created {element.type.value} {element.id}")
        return element

    def update(self, element_id: str, updates: Dict[str, Any]) -> Optional[CanvasElement]:
        """
        Apply a partial update to an element.

        Top-level fields are replaced, ``styles`` is merged key by key and
        ``tableData`` is replaced wholesale. ``id`` and ``type`` never change.
        The merged element is validated before it replaces the old one, so
        a rejected update leaves the store untouched.

        Args:
            element_id: Element to update
            updates: Partial fields, by field name or wire alias

        Returns:
            The updated element, or None when the id is unknown
        """
        index = self._index_of(element_id)
        if index is None:
            logger.debug(f"[ELEMENT-STORE] Ignoring update for unknown element {element_id}")
            return None

        changes = dict(updates)
        for key in IMMUTABLE_FIELDS:
            if key in changes:
                changes.pop(key)
                logger.warning(f"[ELEMENT-STORE] Refusing to change '{key}' of {element_id}")

        current = self._elements[index]
        data = current.model_dump()

        if "styles" in changes:
            styles = changes.pop("styles")
            # Non-mappings go to validation unmerged and are rejected there
            if isinstance(styles, dict):
                data["styles"] = {**current.styles, **styles}
            elif styles is not None:
                data["styles"] = styles

        for alias in ("tableData", "table_data"):
            if alias in changes:
                table_data = changes.pop(alias)
                if isinstance(table_data, TableData):
                    table_data = table_data.model_dump()
                data["table_data"] = table_data

        data.update(changes)
        element = CanvasElement.model_validate(data)
        self._elements[index] = element
        return element

    def select(self, element_id: Optional[str]) -> Optional[CanvasElement]:
        """Select an element, or clear the selection with None."""
        if element_id is not None and self._index_of(element_id) is None:
            logger.debug(f"[ELEMENT-STORE] Ignoring selection of unknown element {element_id}")
            return None
        self.selected_id = element_id
        return self.selected

    def delete(self, element_id: str) -> bool:
        """Remove an element; clears the selection if it was selected."""
        index = self._index_of(element_id)
        if index is None:
            return False
        del self._elements[index]
        if self.selected_id == element_id:
            self.selected_id = None
        logger.info(f"[ELEMENT-STORE] Deleted {element_id}")
        return True

    def clear(self) -> None:
        self._elements = []
        self.selected_id = None
