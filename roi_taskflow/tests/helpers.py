"""
Shared helpers for roi_taskflow tests.
"""

from roi_taskflow.core.annotation import PrimitiveKind
from roi_taskflow.core.tasks import AlarmLevel
from roi_taskflow.services.rules import ParsedRule, RuleParser

SQUARE = [(0.1, 0.1), (0.4, 0.1), (0.4, 0.4), (0.1, 0.4)]


def draw(canvas, points, kind=None):
    """Drive a full begin/extend/end gesture through the canvas."""
    if kind is not None:
        canvas.set_kind(kind)
    first, *rest = points
    canvas.begin(*first)
    for point in rest:
        canvas.extend(*point)
    return canvas.end()


def make_task(builder, points=SQUARE):
    """Build a saved task with a polygon ROI on cam1."""
    builder.toggle_camera("cam1")
    builder.select_algorithm("smoking")
    if points:
        draw(builder.canvas, points, PrimitiveKind.POLYGON)
    return builder.save()


class StaticRuleParser(RuleParser):
    """Rule parser returning a canned result, or raising it if an exception."""

    def __init__(self, result):
        self.result = result
        self.calls = []

    async def parse(self, text):
        self.calls.append(text)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def valid_rule(**kwargs):
    """Create a valid parsed rule, overriding fields from kwargs."""
    values = dict(
        object_name="Person",
        action_description="Smoking near tanks",
        suggested_duration=5,
        suggested_level=AlarmLevel.LOW,
        valid=True,
    )
    values.update(kwargs)
    return ParsedRule(**values)
