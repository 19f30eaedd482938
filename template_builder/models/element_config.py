"""
Element Configuration for Template Builder
===========================================

Palette entries and per-type creation defaults.
"""

from typing import Dict, List, Optional, Tuple

from .canvas_models import ElementType, TableData

PLACEHOLDER_IMAGE_SRC = "https://placehold.co/100x100/A0A0A0/FFFFFF?text=Image"

# Palette order and labels are user-visible
PALETTE: List[Tuple[ElementType, str]] = [
    (ElementType.TEXT_BLOCK, "Div"),
    (ElementType.PARAGRAPH, "P"),
    (ElementType.HEADING, "H1"),
    (ElementType.IMAGE, "Img"),
    (ElementType.TABLE, "Table"),
    (ElementType.HORIZONTAL_RULE, "HR (Line)"),
    (ElementType.VERTICAL_RULE, "VLine (Line)"),
]


def format_number(value: float) -> str:
    """Render a number the way it appears in CSS values (no trailing .0)."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def px(value: float) -> str:
    return f"{format_number(value)}px"


def badge_label(element_type: ElementType) -> str:
    """Short label shown on the element while it sits on the canvas."""
    if element_type == ElementType.HORIZONTAL_RULE:
        return "HR"
    if element_type == ElementType.VERTICAL_RULE:
        return "VLine"
    return element_type.value.capitalize()


def _base_styles(left: str, top: str) -> Dict[str, str]:
    return {
        "position": "absolute",
        "left": left,
        "top": top,
        "minWidth": "50px",
        "minHeight": "30px",
        "padding": "8px",
        "backgroundColor": "#ffffff",
        "color": "#333333",
        "fontSize": "16px",
        "border": "1px solid #ddd",
        "borderRadius": "4px",
        "display": "flex",
        "justifyContent": "flex-start",
        "alignItems": "flex-start",
        "flexDirection": "row",
    }


def initial_element_fields(element_type: ElementType, x: float, y: float) -> Dict:
    """
    Build content, metadata, styles and table data for a freshly dropped element.

    Style key order is preserved into the exported ``style`` attribute, so
    overrides are merged on top of the base mapping rather than rebuilt.

    Args:
        element_type: Type picked from the palette
        x: Drop position relative to the canvas origin
        y: Drop position relative to the canvas origin

    Returns:
        Dict with content, name, description, styles and table_data keys
    """
    left, top = px(x), px(y)
    type_name = element_type.value

    styles = _base_styles(left, top)
    content = f"New {type_name}"
    name = f"My {type_name}"
    description = f"This is a new {type_name} element."
    table_data: Optional[TableData] = None

    if element_type == ElementType.IMAGE:
        content = ""
        styles = {
            **styles,
            "width": "100px",
            "height": "100px",
            "border": "1px solid #ddd",
            "backgroundColor": "#f0f0f0",
            "display": "block",
            "objectFit": "contain",
            "src": PLACEHOLDER_IMAGE_SRC,
        }
    elif element_type == ElementType.TEXT_BLOCK:
        styles = {
            **styles,
            "minWidth": "200px",
            "minHeight": "100px",
            "backgroundColor": "#e0e7ff",
            "border": "1px dashed #99aaff",
            "display": "flex",
            "flexDirection": "column",
            "justifyContent": "flex-start",
            "alignItems": "flex-start",
        }
    elif element_type == ElementType.TABLE:
        table_data = TableData()
        content = ""
        styles = {
            **styles,
            "left": "auto",
            "right": "0px",
            "width": "100%",
            "borderCollapse": "collapse",
            "minWidth": "300px",
            "backgroundColor": "#f9f9f9",
            "border": "1px solid #ccc",
            "display": "block",
        }
        name = "New Table"
        description = "An empty table. Use column controls to add headers and rows."
    elif element_type == ElementType.HORIZONTAL_RULE:
        content = ""
        name = "Horizontal Line"
        description = "A horizontal rule for separating content."
        styles = {
            "position": "absolute",
            "left": left,
            "top": top,
            "width": "150px",
            "height": "2px",
            "backgroundColor": "#333333",
            "border": "none",
            "margin": "0",
        }
    elif element_type == ElementType.VERTICAL_RULE:
        content = ""
        name = "Vertical Line"
        description = "A vertical line for visual separation."
        styles = {
            "position": "absolute",
            "left": left,
            "top": top,
            "width": "2px",
            "height": "100px",
            "backgroundColor": "#333333",
            "border": "none",
        }

    return {
        "content": content,
        "name": name,
        "description": description,
        "styles": styles,
        "table_data": table_data,
    }
