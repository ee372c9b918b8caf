"""
Task definition and lifecycle.
"""

from .builder import TaskDraftBuilder
from .confirmation import ConfirmationGate
from .lifecycle import TaskLifecycleManager, can_transition
from .models import (
    AlarmLevel,
    Algorithm,
    AlgorithmKind,
    Camera,
    CameraDirectory,
    PRESET_ALGORITHMS,
    SampleCounters,
    Task,
    TaskStatus,
)
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler

__all__ = [
    "TaskDraftBuilder",
    "ConfirmationGate",
    "TaskLifecycleManager",
    "can_transition",
    "AlarmLevel",
    "Algorithm",
    "AlgorithmKind",
    "Camera",
    "CameraDirectory",
    "PRESET_ALGORITHMS",
    "SampleCounters",
    "Task",
    "TaskStatus",
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
]
