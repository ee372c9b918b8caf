"""
Primitive renderer.

Turns the committed primitive list, plus the stroke being drawn, into a
vector overlay expressed in percentage units of the canvas (0-100).
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import cv2

from .primitives import Coordinate, PendingStroke, Primitive, PrimitiveKind
from .utils import (
    ARROW_HEAD_LENGTH,
    OVERLAY_SCALE,
    arrow_head_points,
    simplify_for_display,
    to_overlay_units,
)

STROKE_COLOR = "#007aff"
FILL_COLOR = "rgba(0, 122, 255, 0.3)"
FILL_ALPHA = 0.3

Point2D = Tuple[float, float]


@dataclass
class OverlayShape:
    """One drawable item of the overlay."""

    kind: PrimitiveKind
    points: List[Point2D]
    closed: bool = False
    filled: bool = False
    head: Optional[List[Point2D]] = None
    primitive_id: Optional[str] = None
    pending: bool = False

    def outline(self) -> List[Point2D]:
        """Path vertices, repeating the first one when the path is closed."""
        if self.closed and self.points:
            return self.points + [self.points[0]]
        return list(self.points)

    def to_svg_path(self) -> str:
        """SVG path data for the shaft or outline."""
        if not self.points:
            return ""
        first, *rest = self.points
        parts = [f"M {first[0]:.3f} {first[1]:.3f}"]
        parts.extend(f"L {x:.3f} {y:.3f}" for x, y in rest)
        if self.closed:
            parts.append("Z")
        return " ".join(parts)

    def head_polygon(self) -> List[Point2D]:
        """Filled head triangle: tip plus the two barbs."""
        if not self.head:
            return []
        return [self.points[-1], *self.head]


def _render_segment(points, head_length, scale) -> OverlayShape:
    return OverlayShape(PrimitiveKind.SEGMENT, to_overlay_units(points, scale))


def _render_arrow(points, head_length, scale) -> OverlayShape:
    shape = OverlayShape(PrimitiveKind.ARROW, to_overlay_units(points, scale))
    if len(points) >= 2:
        shape.head = arrow_head_points(points[0], points[-1], head_length, scale)
    return shape


def _render_curve(points, head_length, scale) -> OverlayShape:
    return OverlayShape(
        PrimitiveKind.CURVE, to_overlay_units(simplify_for_display(points), scale)
    )


def _render_polygon(points, head_length, scale) -> OverlayShape:
    return OverlayShape(
        PrimitiveKind.POLYGON,
        to_overlay_units(simplify_for_display(points), scale),
        closed=True,
        filled=True,
    )


_RENDERERS: Dict[PrimitiveKind, Callable[..., OverlayShape]] = {
    PrimitiveKind.SEGMENT: _render_segment,
    PrimitiveKind.ARROW: _render_arrow,
    PrimitiveKind.CURVE: _render_curve,
    PrimitiveKind.POLYGON: _render_polygon,
}


def render_shape(
    kind: PrimitiveKind,
    points: Sequence[Coordinate],
    head_length: float = ARROW_HEAD_LENGTH,
    scale: float = OVERLAY_SCALE,
) -> OverlayShape:
    """Render a single point list of the given kind."""
    try:
        renderer = _RENDERERS[kind]
    except KeyError:
        raise ValueError(f"Unsupported primitive kind: {kind!r}")
    return renderer(list(points), head_length, scale)


def render_overlay(
    primitives: Sequence[Primitive],
    pending: Optional[PendingStroke] = None,
    head_length: float = ARROW_HEAD_LENGTH,
    scale: float = OVERLAY_SCALE,
) -> List[OverlayShape]:
    """
    Build the overlay for committed primitives and the in-progress stroke.

    Args:
        primitives: Committed primitives, in drawing order
        pending: Stroke currently being drawn, drawn last
        head_length: Arrow head length in overlay units
        scale: Overlay units per normalized unit

    Returns:
        Shapes in drawing order
    """
    shapes = []
    for primitive in primitives:
        shape = render_shape(primitive.kind, primitive.points, head_length, scale)
        shape.primitive_id = primitive.id
        shapes.append(shape)

    if pending is not None and pending.points:
        shape = render_shape(pending.kind, pending.points, head_length, scale)
        shape.pending = True
        shapes.append(shape)

    return shapes


def overlay_to_svg(shapes: Sequence[OverlayShape], scale: float = OVERLAY_SCALE) -> str:
    """Serialize shapes into a standalone SVG document."""
    body = []
    for shape in shapes:
        fill = FILL_COLOR if shape.filled else "none"
        dash = ' stroke-dasharray="2 1"' if shape.pending else ""
        body.append(
            f'<path d="{shape.to_svg_path()}" fill="{fill}" '
            f'stroke="{STROKE_COLOR}" stroke-width="0.5"{dash} />'
        )
        if shape.head:
            head = " ".join(f"{x:.3f},{y:.3f}" for x, y in shape.head_polygon())
            body.append(f'<polygon points="{head}" fill="{STROKE_COLOR}" />')
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {scale:g} {scale:g}" '
        f'preserveAspectRatio="none">' + "".join(body) + "</svg>"
    )


def _shape_colors(shapes, colormap: Optional[str]) -> List[Tuple[int, int, int]]:
    if colormap is None:
        return [(0, 122, 255)] * len(shapes)

    import matplotlib.pyplot as plt

    cmap = plt.get_cmap(colormap)
    colors = []
    for idx in range(len(shapes)):
        color = np.array(cmap(idx / max(len(shapes), 1))[:3]) * 255
        colors.append(tuple(int(c) for c in color))
    return colors


def rasterize_overlay(
    shapes: Sequence[OverlayShape],
    image: np.ndarray,
    scale: float = OVERLAY_SCALE,
    alpha: float = FILL_ALPHA,
    thickness: int = 2,
    colormap: Optional[str] = None,
) -> np.ndarray:
    """
    Draw the overlay onto an RGB image.

    Args:
        shapes: Overlay shapes in percentage units
        image: RGB image (H, W, 3)
        scale: Overlay units per normalized unit
        alpha: Opacity of polygon fills
        thickness: Line thickness in pixels
        colormap: Optional matplotlib colormap giving each shape its own color

    Returns:
        New image with the overlay drawn
    """
    height, width = image.shape[:2]
    factor = np.array([width / scale, height / scale])
    colors = _shape_colors(shapes, colormap)

    def to_pixels(points):
        return np.round(np.asarray(points, dtype=np.float64) * factor).astype(np.int32)

    fills = image.copy()
    for shape, color in zip(shapes, colors):
        if shape.filled and len(shape.points) >= 3:
            cv2.fillPoly(fills, [to_pixels(shape.points)], color)
    result = cv2.addWeighted(fills, alpha, image, 1 - alpha, 0)

    for shape, color in zip(shapes, colors):
        if len(shape.points) < 2:
            continue
        cv2.polylines(
            result, [to_pixels(shape.points)], shape.closed, color, thickness
        )
        if shape.head:
            cv2.fillPoly(result, [to_pixels(shape.head_polygon())], color)

    return result
