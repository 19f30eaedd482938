"""
Canvas Surface
==============

Renders the editable canvas as HTML: every element absolutely positioned
with its full style mapping, a type badge, and corner resize handles on the
selected element.
"""

from typing import List, Optional

from .css import attr, style_string
from .interaction import CORNER_HANDLES, DEFAULT_CANVAS_HEIGHT
from .table_codec import encode_table_html
from ..models.canvas_models import CanvasElement, ElementType
from ..models.element_config import PLACEHOLDER_IMAGE_SRC, badge_label

EMPTY_CANVAS_HINT = "Drag and Drop Elements Here"


def _element_body(element: CanvasElement) -> str:
    if element.type == ElementType.IMAGE:
        src = element.styles.get("src") or PLACEHOLDER_IMAGE_SRC
        return f'<img src="{attr(src)}" alt="Generated Image" class="canvas-image">'
    if element.type in (ElementType.HORIZONTAL_RULE, ElementType.VERTICAL_RULE):
        return ""
    if element.type == ElementType.TABLE:
        return f'<div class="canvas-table"><table>{encode_table_html(element.table_data)}</table></div>'
    return element.content


def render_element(element: CanvasElement, selected: bool = False) -> str:
    classes = "canvas-element selected" if selected else "canvas-element"
    parts = [
        f'<div id="{attr(element.id)}" class="{classes}" draggable="true" '
        f'data-type="{element.type.value}" style="{attr(style_string(element.styles, exclude=()))}">',
        _element_body(element),
        f'<span class="element-badge">{badge_label(element.type)}</span>',
    ]
    if selected:
        parts.extend(
            f'<div class="resize-handle" data-direction="{direction.value}"></div>'
            for direction in CORNER_HANDLES
        )
    parts.append("</div>")
    return "".join(parts)


def render_surface(
    elements: List[CanvasElement],
    selected_id: Optional[str] = None,
    canvas_height: str = DEFAULT_CANVAS_HEIGHT,
) -> str:
    """Canvas container holding every element in store order."""
    if elements:
        inner = "\n".join(render_element(e, selected=e.id == selected_id) for e in elements)
    else:
        inner = f'<div class="canvas-empty">{EMPTY_CANVAS_HINT}</div>'
    return (
        f'<div class="canvas" style="position: relative; height: {attr(canvas_height)};">\n'
        f"{inner}\n"
        f"</div>"
    )
