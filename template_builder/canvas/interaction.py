"""
Canvas Interaction Engine
=========================

Turns pointer gestures into element store mutations.

One gesture is active at a time:
- create: palette pick-up -> drop on canvas
- move: pick-up of a placed element -> drop on canvas
- resize: handle press -> pointer moves -> release

Resize listens for document-level mousemove/mouseup only while the gesture
runs; the listeners are detached on release, cancel and close.
"""

import logging
import re
from enum import Enum
from typing import Callable, Dict, List, Optional

from .element_store import ElementStore
from ..models.canvas_models import CanvasElement, ElementType, Point, Rect
from ..models.element_config import format_number, px

logger = logging.getLogger(__name__)

MIN_ELEMENT_SIZE = 20
DEFAULT_CANVAS_HEIGHT = "600px"


class GestureError(Exception):
    """A gesture step arrived in the wrong state."""


class GestureMode(str, Enum):
    IDLE = "idle"
    DRAGGING_NEW = "dragging_new"
    DRAGGING_EXISTING = "dragging_existing"
    RESIZING = "resizing"


class ResizeDirection(str, Enum):
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


# Corner handles shown on a selected element
CORNER_HANDLES = (
    ResizeDirection.TOP_LEFT,
    ResizeDirection.TOP_RIGHT,
    ResizeDirection.BOTTOM_LEFT,
    ResizeDirection.BOTTOM_RIGHT,
)

_NUMBER = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


def parse_px(value: Optional[str]) -> float:
    """Leading number of a CSS length; 0 when there is none."""
    match = _NUMBER.match(value or "")
    return float(match.group(1)) if match else 0.0


def compute_resize(direction: ResizeDirection, start: Rect, dx: float, dy: float) -> Rect:
    """
    Geometry after dragging a resize handle by (dx, dy).

    Right/bottom handles grow the size in place. Left/top handles grow the
    size and shift the origin by the delta. Width and height are clamped to
    MIN_ELEMENT_SIZE after the origin has moved, so the origin follows the
    unclamped delta.
    """
    width, height = start.width, start.height
    left, top = start.left, start.top
    direction = ResizeDirection(direction)

    if direction in (ResizeDirection.RIGHT, ResizeDirection.TOP_RIGHT, ResizeDirection.BOTTOM_RIGHT):
        width = start.width + dx
    if direction in (ResizeDirection.LEFT, ResizeDirection.TOP_LEFT, ResizeDirection.BOTTOM_LEFT):
        width = start.width - dx
        left = start.left + dx
    if direction in (ResizeDirection.BOTTOM, ResizeDirection.BOTTOM_LEFT, ResizeDirection.BOTTOM_RIGHT):
        height = start.height + dy
    if direction in (ResizeDirection.TOP, ResizeDirection.TOP_LEFT, ResizeDirection.TOP_RIGHT):
        height = start.height - dy
        top = start.top + dy

    return Rect(
        left=left,
        top=top,
        width=max(width, MIN_ELEMENT_SIZE),
        height=max(height, MIN_ELEMENT_SIZE),
    )


def canvas_height_for_width(width: float) -> str:
    return px(width * 2)


PointerHandler = Callable[[Point], None]


class PointerEventSource:
    """Document-level pointer events with attachable handlers."""

    def __init__(self):
        self._listeners: Dict[str, List[PointerHandler]] = {}

    def add_listener(self, event: str, handler: PointerHandler) -> None:
        self._listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: PointerHandler) -> None:
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event: Optional[str] = None) -> int:
        if event is not None:
            return len(self._listeners.get(event, []))
        return sum(len(handlers) for handlers in self._listeners.values())

    def dispatch(self, event: str, point: Point) -> None:
        for handler in list(self._listeners.get(event, [])):
            handler(point)


class _ResizeGesture:
    """A running resize: snapshot, live preview and its listeners."""

    def __init__(self, element_id: str, direction: ResizeDirection, origin: Point, start: Rect):
        self.element_id = element_id
        self.direction = direction
        self.origin = origin
        self.start = start
        self.preview = start


class CanvasInteractionEngine:
    """
    Gesture state machine over an ElementStore.

    Usage:
        engine = CanvasInteractionEngine(store)
        engine.begin_palette_drag(ElementType.PARAGRAPH)
        element = engine.drop(Point(x=240, y=180), canvas_rect)
    """

    def __init__(self, store: ElementStore, events: Optional[PointerEventSource] = None,
                 canvas_width: Optional[float] = None):
        self.store = store
        self.events = events or PointerEventSource()
        self.mode = GestureMode.IDLE
        self.canvas_height = DEFAULT_CANVAS_HEIGHT
        self._dragged_type: Optional[ElementType] = None
        self._moving_id: Optional[str] = None
        self._grab_offset = Point(x=0, y=0)
        self._resize: Optional[_ResizeGesture] = None
        if canvas_width is not None:
            self.on_canvas_resize(canvas_width)

    # --- canvas ---

    def on_canvas_resize(self, width: float) -> str:
        """Keep the canvas twice as tall as it is wide."""
        self.canvas_height = canvas_height_for_width(width)
        return self.canvas_height

    # --- create ---

    def begin_palette_drag(self, element_type: ElementType) -> None:
        self._require_idle("palette drag")
        self._dragged_type = ElementType(element_type)
        self.mode = GestureMode.DRAGGING_NEW

    # --- move ---

    def is_resizing(self, element_id: Optional[str] = None) -> bool:
        if self._resize is None:
            return False
        return element_id is None or self._resize.element_id == element_id

    def begin_move(self, element_id: str, pointer: Point, element_origin: Point) -> bool:
        """
        Pick up a placed element.

        Args:
            element_id: Element under the pointer
            pointer: Pointer position in client coordinates
            element_origin: Element's top-left corner in client coordinates

        Returns:
            False when the move is suppressed (element resizing or unknown)
        """
        if self.is_resizing(element_id):
            logger.debug(f"[INTERACTION] Move of {element_id} suppressed during resize")
            return False
        if self.store.get(element_id) is None:
            return False
        self._require_idle("move")
        self._moving_id = element_id
        self._grab_offset = Point(x=pointer.x - element_origin.x, y=pointer.y - element_origin.y)
        self.mode = GestureMode.DRAGGING_EXISTING
        return True

    def drop(self, pointer: Point, canvas_rect: Rect) -> Optional[CanvasElement]:
        """
        Release the dragged item over the canvas.

        Creates the picked palette type at the drop point and selects it, or
        moves the picked element so the grab offset is kept.
        """
        local = Point(x=pointer.x - canvas_rect.left, y=pointer.y - canvas_rect.top)

        if self.mode == GestureMode.DRAGGING_NEW:
            element = self.store.create(self._dragged_type, local)
            self.store.select(element.id)
            self._reset()
            return element

        if self.mode == GestureMode.DRAGGING_EXISTING:
            element_id = self._moving_id
            new_left = local.x - self._grab_offset.x
            new_top = local.y - self._grab_offset.y
            self._reset()
            return self.store.update(element_id, {"styles": {"left": px(new_left), "top": px(new_top)}})

        raise GestureError(f"Nothing is being dragged (mode={self.mode.value})")

    # --- resize ---

    def begin_resize(
        self,
        element_id: str,
        direction: ResizeDirection,
        pointer: Point,
        rendered_width: Optional[float] = None,
        rendered_height: Optional[float] = None,
    ) -> Rect:
        """
        Press a resize handle and start listening for pointer events.

        The snapshot uses the rendered size when given, otherwise the
        element's width/height styles.
        """
        element = self.store.get(element_id)
        if element is None:
            raise GestureError(f"Unknown element {element_id}")
        self._require_idle("resize")

        start = Rect(
            left=parse_px(element.styles.get("left")),
            top=parse_px(element.styles.get("top")),
            width=rendered_width if rendered_width is not None else parse_px(element.styles.get("width")),
            height=rendered_height if rendered_height is not None else parse_px(element.styles.get("height")),
        )
        self._resize = _ResizeGesture(element_id, ResizeDirection(direction), pointer, start)
        self.mode = GestureMode.RESIZING
        self.events.add_listener("mousemove", self._on_mouse_move)
        self.events.add_listener("mouseup", self._on_mouse_up)
        logger.debug(f"[INTERACTION] Resize {direction} started on {element_id}")
        return start

    def pointer_move(self, pointer: Point) -> None:
        self.events.dispatch("mousemove", pointer)

    def pointer_up(self, pointer: Point) -> None:
        self.events.dispatch("mouseup", pointer)

    @property
    def resize_preview(self) -> Optional[Rect]:
        return self._resize.preview if self._resize else None

    def _on_mouse_move(self, pointer: Point) -> None:
        gesture = self._resize
        if gesture is None:
            return
        gesture.preview = compute_resize(
            gesture.direction,
            gesture.start,
            pointer.x - gesture.origin.x,
            pointer.y - gesture.origin.y,
        )

    def _on_mouse_up(self, pointer: Point) -> None:
        gesture = self._resize
        self._detach_resize_listeners()
        self._reset()
        if gesture is None or gesture.preview == gesture.start:
            return
        rect = gesture.preview
        self.store.update(gesture.element_id, {
            "styles": {
                "width": px(rect.width),
                "height": px(rect.height),
                "left": px(rect.left),
                "top": px(rect.top),
            }
        })
        logger.debug(
            f"[INTERACTION] Resized {gesture.element_id} to "
            f"{format_number(rect.width)}x{format_number(rect.height)}"
        )

    def _detach_resize_listeners(self) -> None:
        self.events.remove_listener("mousemove", self._on_mouse_move)
        self.events.remove_listener("mouseup", self._on_mouse_up)

    # --- lifecycle ---

    def cancel(self) -> None:
        """Abandon the active gesture without touching the store."""
        self._detach_resize_listeners()
        self._reset()

    def close(self) -> None:
        self.cancel()

    def _require_idle(self, gesture: str) -> None:
        if self.mode != GestureMode.IDLE:
            raise GestureError(f"Cannot start {gesture} while {self.mode.value}")

    def _reset(self) -> None:
        self.mode = GestureMode.IDLE
        self._dragged_type = None
        self._moving_id = None
        self._grab_offset = Point(x=0, y=0)
        self._resize = None
