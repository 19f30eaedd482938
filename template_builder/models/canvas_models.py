"""
Canvas Models for Template Builder
===================================

Models for placed elements, table data and canvas geometry.
"""

from enum import Enum
from typing import List, Optional, Dict
from pydantic import BaseModel, ConfigDict, Field, model_validator


class ElementType(str, Enum):
    """
    Creatable element types (7 types).

    The value doubles as the exported HTML tag for the generic types.
    """
    TEXT_BLOCK = "div"
    PARAGRAPH = "p"
    HEADING = "h1"
    IMAGE = "img"
    TABLE = "table"
    HORIZONTAL_RULE = "hr"
    VERTICAL_RULE = "vline"


# Types that carry no editable content payload
CONTENTLESS_TYPES = (
    ElementType.IMAGE,
    ElementType.TABLE,
    ElementType.HORIZONTAL_RULE,
    ElementType.VERTICAL_RULE,
)


class TableColumn(BaseModel):
    """A table header with its semantic metadata."""
    content: str = ""
    name: str = ""
    description: str = ""


class TableData(BaseModel):
    """Structured header/row model backing a table element."""
    model_config = ConfigDict(populate_by_name=True)

    headers: List[TableColumn] = Field(default_factory=list)
    body_rows: List[List[str]] = Field(default_factory=list, alias="bodyRows")

    @model_validator(mode="after")
    def check_row_lengths(self) -> "TableData":
        width = len(self.headers)
        for index, row in enumerate(self.body_rows):
            if len(row) != width:
                raise ValueError(
                    f"row {index} has {len(row)} cells, expected {width}"
                )
        return self


class CanvasElement(BaseModel):
    """An element placed on the canvas."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: ElementType
    content: str = ""
    name: str = ""
    description: str = ""
    styles: Dict[str, str] = Field(default_factory=dict)
    table_data: Optional[TableData] = Field(default=None, alias="tableData")


class Point(BaseModel):
    """A pointer position in client coordinates."""
    x: float
    y: float


class Rect(BaseModel):
    """A rectangle: canvas bounds or element geometry."""
    left: float = 0
    top: float = 0
    width: float = 0
    height: float = 0


class CanvasState(BaseModel):
    """Snapshot of a session's canvas."""
    session_id: str
    elements: List[CanvasElement] = Field(default_factory=list)
    selected_element_id: Optional[str] = None
    canvas_height: str = "600px"
