"""
Pure utility functions for annotation geometry.

These functions have no side effects and can be tested in isolation.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

from ...utils.config import DEFAULT_CONFIG
from .primitives import Coordinate

ARROW_HEAD_LENGTH = DEFAULT_CONFIG["canvas"]["arrow_head_length"]
ARROW_HEAD_ANGLE = math.pi / 6
OVERLAY_SCALE = DEFAULT_CONFIG["canvas"]["overlay_scale"]


def clamp_point(x: float, y: float) -> Coordinate:
    """
    Clamp a raw pointer position into the unit square.

    Args:
        x: Normalized x, possibly outside [0, 1]
        y: Normalized y, possibly outside [0, 1]

    Returns:
        Clamped coordinate
    """
    clipped = np.clip(np.array([x, y], dtype=np.float64), 0.0, 1.0)
    return Coordinate(float(clipped[0]), float(clipped[1]))


def pixel_to_normalized(
    px: float, py: float, left: float, top: float, width: float, height: float
) -> Coordinate:
    """
    Convert a pixel position to canvas-relative normalized coordinates.

    Raises:
        ValueError: If the canvas bounds are degenerate
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid canvas size {width}x{height}")
    return clamp_point((px - left) / width, (py - top) / height)


def points_to_array(points: Sequence[Coordinate]) -> np.ndarray:
    """Stack coordinates into an (N, 2) float array."""
    if not points:
        return np.zeros((0, 2), dtype=np.float64)
    return np.array([(p.x, p.y) for p in points], dtype=np.float64)


def to_overlay_units(
    points: Sequence[Coordinate], scale: float = OVERLAY_SCALE
) -> List[Tuple[float, float]]:
    """Scale normalized points into overlay (percentage) units."""
    scaled = points_to_array(points) * scale
    return [(float(x), float(y)) for x, y in scaled]


def simplify_for_display(points: Sequence[Coordinate]) -> List[Coordinate]:
    """
    Thin a freehand point list for rendering.

    Keeps every second sample and always the final point. Only the
    displayed list is reduced, the recorded one is left untouched.
    """
    kept = list(points[::2])
    if points and (len(points) - 1) % 2 != 0:
        kept.append(points[-1])
    return kept


def arrow_angle(start: Coordinate, end: Coordinate) -> float:
    """Direction of the shaft in normalized space."""
    return math.atan2(end.y - start.y, end.x - start.x)


def arrow_head_points(
    start: Coordinate,
    end: Coordinate,
    head_length: float = ARROW_HEAD_LENGTH,
    scale: float = OVERLAY_SCALE,
) -> List[Tuple[float, float]]:
    """
    Compute the two barbs of an arrow head.

    Args:
        start: Shaft start
        end: Shaft end, the tip of the head
        head_length: Barb length in overlay units
        scale: Overlay units per normalized unit

    Returns:
        Two (x, y) points in overlay units, at theta - 30 and theta + 30 degrees
    """
    theta = arrow_angle(start, end)
    tip = np.array([end.x, end.y]) * scale
    offsets = np.array([theta - ARROW_HEAD_ANGLE, theta + ARROW_HEAD_ANGLE])
    barbs = tip - head_length * np.stack([np.cos(offsets), np.sin(offsets)], axis=1)
    return [(float(x), float(y)) for x, y in barbs]
