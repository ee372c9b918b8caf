"""
Geometric primitives drawn on the annotation canvas.

All coordinates are normalized to the canvas bounds, so (0, 0) is the
top-left corner and (1, 1) the bottom-right one.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Tuple


class PrimitiveKind(Enum):
    """Closed set of drawable primitive kinds."""

    SEGMENT = "segment"
    CURVE = "curve"
    POLYGON = "polygon"
    ARROW = "arrow"

    @property
    def is_two_point(self) -> bool:
        """Segments and arrows only keep their first and latest point."""
        return self in (PrimitiveKind.SEGMENT, PrimitiveKind.ARROW)


def _clamp_unit(value: float) -> float:
    return min(1.0, max(0.0, float(value)))


@dataclass(frozen=True)
class Coordinate:
    """A point in the unit square."""

    x: float
    y: float

    @classmethod
    def clamped(cls, x: float, y: float) -> "Coordinate":
        """Create a coordinate, clamping both axes into [0, 1]."""
        return cls(_clamp_unit(x), _clamp_unit(y))

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self):
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> "Coordinate":
        return cls.clamped(data["x"], data["y"])


@dataclass(frozen=True)
class Primitive:
    """One committed annotation object."""

    id: str
    kind: PrimitiveKind
    points: Tuple[Coordinate, ...]

    @property
    def start(self) -> Coordinate:
        return self.points[0]

    @property
    def end(self) -> Coordinate:
        return self.points[-1]

    def to_dict(self):
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "points": [p.to_dict() for p in self.points],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Primitive":
        """Create from dictionary."""
        return cls(
            id=str(data["id"]),
            kind=PrimitiveKind(data["kind"]),
            points=tuple(Coordinate.from_dict(p) for p in data["points"]),
        )


@dataclass
class PendingStroke:
    """The stroke currently under the pointer, not yet committed."""

    kind: PrimitiveKind
    points: List[Coordinate] = field(default_factory=list)

    def record(self, point: Coordinate):
        if self.kind.is_two_point and len(self.points) >= 2:
            self.points[1] = point
        else:
            self.points.append(point)


def flatten_points(primitives: Iterable[Primitive]) -> Tuple[Coordinate, ...]:
    """Concatenate the points of every primitive, in commit order."""
    return tuple(p for primitive in primitives for p in primitive.points)
