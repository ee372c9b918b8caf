"""
Annotation canvas engine.

Core logic turning pointer gestures into normalized primitives.
UI-agnostic - can be used with any interface (GUI, Web, CLI).
"""

import logging
from typing import Iterator, List, Optional, Tuple

from ...utils.misc import prefixed_ids
from .events import EventEmitter, EventType, TaskflowEvent
from .primitives import (
    Coordinate,
    PendingStroke,
    Primitive,
    PrimitiveKind,
    flatten_points,
)
from .utils import clamp_point

logger = logging.getLogger(__name__)


class AnnotationCanvas:
    """
    Owns the annotation set of one drawing session.

    This class handles:
    - The single pending stroke (begin / extend / end)
    - The ordered list of committed primitives
    - LIFO undo and full clear
    - Event emission for UI updates

    The canvas is UI-agnostic - it emits events that UI components
    can listen to, rather than directly manipulating UI elements.
    """

    def __init__(
        self,
        kind: PrimitiveKind = PrimitiveKind.POLYGON,
        events: Optional[EventEmitter] = None,
        ids: Optional[Iterator[str]] = None,
    ):
        self.kind = kind
        self.events = events or EventEmitter()
        self._ids = ids or prefixed_ids("prim")
        self._primitives: List[Primitive] = []
        self._pending: Optional[PendingStroke] = None

    @property
    def primitives(self) -> Tuple[Primitive, ...]:
        return tuple(self._primitives)

    @property
    def pending(self) -> Optional[PendingStroke]:
        return self._pending

    @property
    def is_drawing(self) -> bool:
        return self._pending is not None

    def is_empty(self) -> bool:
        return not self._primitives

    def set_kind(self, kind: PrimitiveKind):
        """Select the kind used by the next stroke."""
        self.kind = PrimitiveKind(kind)

    def begin(self, x: float, y: float):
        """
        Start a new stroke at the given normalized position.

        A stroke still pending from a lost pointer-up is completed first.
        """
        if self._pending is not None:
            self.end()
        point = clamp_point(x, y)
        self._pending = PendingStroke(kind=self.kind, points=[point])
        self.events.emit(
            TaskflowEvent(
                EventType.STROKE_STARTED,
                {"kind": self.kind.value, "point": point.to_dict()},
            )
        )

    def extend(self, x: float, y: float):
        """Record a pointer movement for the pending stroke."""
        if self._pending is None:
            return
        point = clamp_point(x, y)
        self._pending.record(point)
        self.events.emit(
            TaskflowEvent(
                EventType.STROKE_EXTENDED,
                {"num_points": len(self._pending.points)},
            )
        )

    def end(self) -> Optional[Primitive]:
        """
        Complete the pending stroke.

        Returns:
            The committed primitive, or None when there was no stroke or
            it had fewer than two points
        """
        pending, self._pending = self._pending, None
        if pending is None:
            return None

        if len(pending.points) < 2:
            logger.debug("Discarding stroke with a single point")
            self.events.emit(
                TaskflowEvent(EventType.STROKE_DISCARDED, {"kind": pending.kind.value})
            )
            return None

        primitive = Primitive(
            id=next(self._ids), kind=pending.kind, points=tuple(pending.points)
        )
        self._primitives.append(primitive)
        self.events.emit(
            TaskflowEvent(
                EventType.PRIMITIVE_COMMITTED,
                {
                    "primitive": primitive.to_dict(),
                    "num_primitives": len(self._primitives),
                },
            )
        )
        return primitive

    def undo_last(self) -> Optional[Primitive]:
        """
        Remove the most recently committed primitive.

        Returns:
            The removed primitive, or None if the set was empty
        """
        if not self._primitives:
            return None
        primitive = self._primitives.pop()
        self.events.emit(
            TaskflowEvent(EventType.PRIMITIVE_UNDONE, {"primitive_id": primitive.id})
        )
        return primitive

    def clear(self):
        """Discard every committed primitive and any pending stroke."""
        self._primitives.clear()
        self._pending = None
        self.events.emit(TaskflowEvent(EventType.CANVAS_CLEARED))

    def snapshot(self) -> Tuple[Coordinate, ...]:
        """Flattened point list of all committed primitives."""
        return flatten_points(self._primitives)
