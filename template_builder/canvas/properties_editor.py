"""
Properties Editor
=================

Reads the selected element and writes every field edit straight back into
the element store. Also owns the table column operations.
"""

import logging
from typing import Any, List, Optional
from pydantic import BaseModel, Field

from .element_store import ElementStore
from .table_codec import parse_table_html
from ..models.canvas_models import (
    CanvasElement, ElementType, TableColumn, TableData, CONTENTLESS_TYPES
)

logger = logging.getLogger(__name__)

NEW_CELL_CONTENT = "New Cell"

BASIC_STYLE_FIELDS = [
    ("Background Color", "backgroundColor", "color"),
    ("Text Color", "color", "color"),
    ("Font Size (px)", "fontSize", "text"),
    ("Width (px, %, auto)", "width", "text"),
    ("Height (px, %, auto)", "height", "text"),
    ("Padding (px)", "padding", "text"),
    ("Margin (px)", "margin", "text"),
    ("Border (e.g., 1px solid #ccc)", "border", "text"),
    ("Border Radius (px, %)", "borderRadius", "text"),
]

DISPLAY_OPTIONS = ["block", "flex", "inline-block"]
FLEX_DIRECTION_OPTIONS = ["row", "column", "row-reverse", "column-reverse"]
JUSTIFY_CONTENT_OPTIONS = ["flex-start", "flex-end", "center", "space-between", "space-around", "space-evenly"]
ALIGN_ITEMS_OPTIONS = ["flex-start", "flex-end", "center", "baseline", "stretch"]


class PropertyError(ValueError):
    """An edit that the selected element cannot take."""


class FormField(BaseModel):
    """One control of the properties panel."""
    key: str
    label: str
    input_type: str = "text"
    value: str = ""
    options: List[str] = Field(default_factory=list)
    column_index: Optional[int] = None


def add_column(table: Optional[TableData]) -> TableData:
    """Append a header with positional defaults and a new cell to every row."""
    table = table or TableData()
    position = len(table.headers) + 1
    headers = table.headers + [
        TableColumn(
            content=f"Header {position}",
            name=f"Column {position} Name",
            description=f"Description for column {position}",
        )
    ]
    rows = [row + [NEW_CELL_CONTENT] for row in table.body_rows]
    return TableData(headers=headers, body_rows=rows)


def remove_last_column(table: Optional[TableData]) -> TableData:
    """
    Drop the last header and the last cell of every row.

    Removing the only column empties the table entirely, rows included.
    """
    table = table or TableData()
    if not table.headers:
        return table
    if len(table.headers) == 1:
        return TableData()
    return TableData(
        headers=table.headers[:-1],
        body_rows=[row[:-1] for row in table.body_rows],
    )


class PropertiesEditor:
    """Form surface bound to one element of a store."""

    def __init__(self, store: ElementStore, element_id: str):
        self.store = store
        self.element_id = element_id

    @property
    def element(self) -> Optional[CanvasElement]:
        return self.store.get(self.element_id)

    def _write(self, updates: dict) -> Optional[CanvasElement]:
        return self.store.update(self.element_id, updates)

    # --- form description ---

    def form_fields(self) -> List[FormField]:
        """Controls shown for the element, in panel order."""
        element = self.element
        if element is None:
            return []
        styles = element.styles
        fields = [
            FormField(key="name", label="Name", value=element.name),
            FormField(key="description", label="Description", input_type="textarea",
                      value=element.description),
        ]
        if element.type not in CONTENTLESS_TYPES:
            fields.append(FormField(key="content", label="Content", input_type="textarea",
                                    value=element.content))
        if element.type == ElementType.IMAGE:
            fields.append(FormField(key="styles.src", label="Image Source URL",
                                    value=styles.get("src", "")))

        for label, key, input_type in BASIC_STYLE_FIELDS:
            fields.append(FormField(key=f"styles.{key}", label=label, input_type=input_type,
                                    value=styles.get(key, "")))

        if element.type == ElementType.TEXT_BLOCK:
            display = styles.get("display", "block")
            fields.append(FormField(key="styles.display", label="Display", input_type="select",
                                    value=display, options=DISPLAY_OPTIONS))
            if display == "flex":
                fields.extend([
                    FormField(key="styles.flexDirection", label="Flex Direction", input_type="select",
                              value=styles.get("flexDirection", "row"), options=FLEX_DIRECTION_OPTIONS),
                    FormField(key="styles.justifyContent", label="Justify Content", input_type="select",
                              value=styles.get("justifyContent", "flex-start"),
                              options=JUSTIFY_CONTENT_OPTIONS),
                    FormField(key="styles.alignItems", label="Align Items", input_type="select",
                              value=styles.get("alignItems", "flex-start"), options=ALIGN_ITEMS_OPTIONS),
                ])

        if element.type == ElementType.TABLE:
            fields.append(FormField(key="styles.borderCollapse", label="Border Collapse",
                                    value=styles.get("borderCollapse", "")))
            fields.append(FormField(key="styles.tableLayout", label="Table Layout",
                                    value=styles.get("tableLayout", "")))
            table = element.table_data or TableData()
            for index, column in enumerate(table.headers):
                fields.extend([
                    FormField(key="header.content", label=f"Header {index + 1} Content",
                              value=column.content, column_index=index),
                    FormField(key="header.name", label=f"Column {index + 1} Name",
                              value=column.name, column_index=index),
                    FormField(key="header.description", label=f"Column {index + 1} Description",
                              input_type="textarea", value=column.description, column_index=index),
                ])
        return fields

    # --- scalar fields ---

    def set_name(self, value: str) -> Optional[CanvasElement]:
        return self._write({"name": value})

    def set_description(self, value: str) -> Optional[CanvasElement]:
        return self._write({"description": value})

    def set_content(self, value: str) -> Optional[CanvasElement]:
        element = self.element
        if element is not None and element.type in CONTENTLESS_TYPES:
            raise PropertyError(f"'{element.type.value}' elements have no content field")
        return self._write({"content": value})

    def set_style(self, key: str, value: str) -> Optional[CanvasElement]:
        return self._write({"styles": {key: value}})

    def set_image_source(self, url: str) -> Optional[CanvasElement]:
        element = self.element
        if element is not None and element.type != ElementType.IMAGE:
            raise PropertyError("Only image elements have a source")
        return self.set_style("src", url)

    def edit(self, key: str, value: str) -> Optional[CanvasElement]:
        """Apply an edit addressed by a form field key (``name``, ``styles.color``, ...)."""
        if key == "name":
            return self.set_name(value)
        if key == "description":
            return self.set_description(value)
        if key == "content":
            return self.set_content(value)
        if key == "styles.src":
            return self.set_image_source(value)
        if key.startswith("styles.") and len(key) > len("styles."):
            return self.set_style(key[len("styles."):], value)
        raise PropertyError(f"Unknown property '{key}'")

    # --- table columns ---

    def _table(self) -> Optional[TableData]:
        element = self.element
        if element is None:
            return None
        if element.type != ElementType.TABLE:
            raise PropertyError(f"'{element.type.value}' elements have no columns")
        return element.table_data or TableData()

    def add_column(self) -> Optional[CanvasElement]:
        table = self._table()
        if table is None:
            return None
        return self._write({"tableData": add_column(table)})

    def remove_last_column(self) -> Optional[CanvasElement]:
        table = self._table()
        if table is None:
            return None
        if not table.headers:
            logger.debug(f"[PROPERTIES] No columns to remove on {self.element_id}")
            return self.element
        return self._write({"tableData": remove_last_column(table)})

    def _set_header_field(self, index: int, field: str, value: Any) -> Optional[CanvasElement]:
        table = self._table()
        if table is None:
            return None
        if not 0 <= index < len(table.headers):
            raise PropertyError(f"Column {index} does not exist")
        headers = list(table.headers)
        headers[index] = headers[index].model_copy(update={field: value})
        return self._write({"tableData": TableData(headers=headers, body_rows=table.body_rows)})

    def set_header_content(self, index: int, value: str) -> Optional[CanvasElement]:
        return self._set_header_field(index, "content", value)

    def set_header_name(self, index: int, value: str) -> Optional[CanvasElement]:
        return self._set_header_field(index, "name", value)

    def set_header_description(self, index: int, value: str) -> Optional[CanvasElement]:
        return self._set_header_field(index, "description", value)

    def import_table_html(self, markup: str) -> Optional[CanvasElement]:
        """Replace the table with the structure parsed from raw markup."""
        if self._table() is None:
            return None
        parsed = parse_table_html(markup)
        return self._write({"tableData": parsed.to_table_data()})

    def delete(self) -> bool:
        return self.store.delete(self.element_id)
