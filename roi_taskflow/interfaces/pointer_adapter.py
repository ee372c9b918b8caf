"""
Pointer adapter for the annotation canvas.

Bridges raw pointer events in pixel space with the normalized canvas engine.
"""

from typing import Callable, List, Optional

import numpy as np

from ..core.annotation import (
    AnnotationCanvas,
    EventType,
    OverlayShape,
    Primitive,
    TaskflowEvent,
    rasterize_overlay,
    render_overlay,
)
from ..core.annotation.utils import ARROW_HEAD_LENGTH, OVERLAY_SCALE, pixel_to_normalized


class PointerCanvasAdapter:
    """
    Adapter connecting pointer events to an AnnotationCanvas.

    Provides a compatibility layer that:
    - Normalizes pixel positions against the canvas bounds
    - Routes pointer-leave through the same completion path as pointer-up
    - Triggers a redraw callback on canvas events
    - Produces the overlay for display
    """

    def __init__(
        self,
        canvas: AnnotationCanvas,
        width: float,
        height: float,
        left: float = 0.0,
        top: float = 0.0,
        update_overlay_callback: Optional[Callable] = None,
        head_length: float = ARROW_HEAD_LENGTH,
    ):
        """
        Initialize adapter.

        Args:
            canvas: Core annotation canvas
            width: Canvas width in pixels
            height: Canvas height in pixels
            left: Canvas left offset in the pointer's coordinate space
            top: Canvas top offset in the pointer's coordinate space
            update_overlay_callback: Callback to redraw the overlay
            head_length: Arrow head length in overlay units
        """
        self.canvas = canvas
        self.update_overlay_callback = update_overlay_callback
        self.head_length = head_length
        self.set_bounds(width, height, left, top)

        # Subscribe to canvas events
        self._setup_event_handlers()

    def set_bounds(self, width: float, height: float, left: float = 0.0, top: float = 0.0):
        """Update the canvas bounds, e.g. after a resize."""
        self.width = width
        self.height = height
        self.left = left
        self.top = top

    def _setup_event_handlers(self):
        for event_type in (
            EventType.STROKE_STARTED,
            EventType.STROKE_EXTENDED,
            EventType.PRIMITIVE_COMMITTED,
            EventType.STROKE_DISCARDED,
            EventType.PRIMITIVE_UNDONE,
            EventType.CANVAS_CLEARED,
        ):
            self.canvas.events.on(event_type, self._on_canvas_changed)

    def _on_canvas_changed(self, event: TaskflowEvent):
        if self.update_overlay_callback:
            self.update_overlay_callback()

    def _normalize(self, px: float, py: float):
        return pixel_to_normalized(px, py, self.left, self.top, self.width, self.height)

    def pointer_down(self, px: float, py: float):
        point = self._normalize(px, py)
        self.canvas.begin(point.x, point.y)

    def pointer_move(self, px: float, py: float):
        if not self.canvas.is_drawing:
            return
        point = self._normalize(px, py)
        self.canvas.extend(point.x, point.y)

    def pointer_up(self) -> Optional[Primitive]:
        return self.canvas.end()

    def pointer_leave(self) -> Optional[Primitive]:
        return self.canvas.end()

    def get_overlay(self) -> List[OverlayShape]:
        return render_overlay(
            self.canvas.primitives,
            self.canvas.pending,
            head_length=self.head_length,
            scale=OVERLAY_SCALE,
        )

    def get_visualization(
        self, image: np.ndarray, colormap: Optional[str] = None
    ) -> np.ndarray:
        """
        Get the overlay drawn on top of the preview frame.

        Args:
            image: RGB preview frame
            colormap: Matplotlib colormap for per-primitive colors

        Returns:
            RGB visualization image
        """
        return rasterize_overlay(self.get_overlay(), image, colormap=colormap)
