"""
Core annotation module - UI-agnostic drawing logic.

This module provides the canvas engine and renderer used to author
regions of interest, usable with any UI framework (Web, desktop, CLI).
"""

from .canvas import AnnotationCanvas
from .events import TaskflowEvent, EventType, EventEmitter
from .primitives import Coordinate, PendingStroke, Primitive, PrimitiveKind
from .render import OverlayShape, render_overlay, overlay_to_svg, rasterize_overlay

__all__ = [
    "AnnotationCanvas",
    "TaskflowEvent",
    "EventType",
    "EventEmitter",
    "Coordinate",
    "PendingStroke",
    "Primitive",
    "PrimitiveKind",
    "OverlayShape",
    "render_overlay",
    "overlay_to_svg",
    "rasterize_overlay",
]
