"""
Task domain models.

Dataclasses for cameras, algorithms, sample counters and tasks. Tasks are
immutable; the lifecycle manager replaces them to change their status.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from gettext import gettext as _
from typing import Dict, Iterable, List, Optional, Tuple

from ..annotation.primitives import Coordinate, Primitive


class AlarmLevel(Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class TaskStatus(Enum):
    INIT = "INIT"
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"
    TRAINING = "TRAINING"
    ERROR = "ERROR"

    @property
    def label(self) -> str:
        """Human readable status, as shown on status badges."""
        return {
            TaskStatus.INIT: _("Initializing"),
            TaskStatus.RUNNING: _("Running"),
            TaskStatus.STOPPED: _("Stopped"),
            TaskStatus.TRAINING: _("Training"),
            TaskStatus.ERROR: _("Error"),
        }[self]


class AlgorithmKind(Enum):
    PRESET = "preset"
    GENERATED = "generated"


@dataclass(frozen=True)
class Algorithm:
    """A detection model identity."""

    id: str
    name: str
    description: str
    version: str
    kind: AlgorithmKind = AlgorithmKind.PRESET

    @classmethod
    def from_parsed_rule(cls, parsed, base: "Algorithm") -> "Algorithm":
        """Describe a preset refined by a parsed free-text rule."""
        return cls(
            id=f"{base.id}_gen",
            name=parsed.object_name or _("AI Custom"),
            description=parsed.action_description or _("Custom AI Rule"),
            version="v1.0-gen",
            kind=AlgorithmKind.GENERATED,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "kind": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Algorithm":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            version=data.get("version", ""),
            kind=AlgorithmKind(data.get("kind", AlgorithmKind.PRESET.value)),
        )


PRESET_ALGORITHMS: Tuple[Algorithm, ...] = (
    Algorithm("fire", "Fire Detection", "Open flames and early smoke", "v2.1"),
    Algorithm("helmet", "Helmet Detection", "People without a safety helmet", "v1.4"),
    Algorithm("intrusion", "Area Intrusion", "People entering a restricted area", "v3.0"),
    Algorithm("smoking", "Smoking Detection", "Smoking gestures", "v1.2"),
)


def find_preset(algorithm_id: str) -> Optional[Algorithm]:
    for algorithm in PRESET_ALGORITHMS:
        if algorithm.id == algorithm_id:
            return algorithm
    return None


@dataclass(frozen=True)
class Camera:
    id: str
    name: str
    location: str
    online: bool = True


class CameraDirectory:
    """Read-only view over the camera inventory."""

    def __init__(self, cameras: Iterable[Camera]):
        self._cameras: Dict[str, Camera] = {c.id: c for c in cameras}

    def __contains__(self, camera_id: str) -> bool:
        return camera_id in self._cameras

    def __iter__(self):
        return iter(self._cameras.values())

    def __len__(self):
        return len(self._cameras)

    def get(self, camera_id: str) -> Optional[Camera]:
        return self._cameras.get(camera_id)

    def online_cameras(self) -> List[Camera]:
        return [c for c in self._cameras.values() if c.online]


@dataclass(frozen=True)
class SampleCounters:
    positive_threshold: int
    negative_threshold: int
    observed_total: int = 0

    def to_dict(self):
        return {
            "positive_threshold": self.positive_threshold,
            "negative_threshold": self.negative_threshold,
            "observed_total": self.observed_total,
        }


@dataclass(frozen=True)
class Task:
    """
    A configured detection task.

    Attributes:
        id: Unique identifier
        name: Display name
        camera_ids: Cameras sharing the same region of interest
        roi: Flattened points of every drawn primitive; empty means full frame
        algorithm: Base preset algorithm
        augmentation_text: Optional free-text refinement of the preset
        duration: Trigger duration in seconds
        alarm_level: Alarm severity
        status: Lifecycle status, changed only by the lifecycle manager
        sample_counters: Training thresholds and committed sample total
        roi_primitives: The primitives the roi was flattened from
        refinement: Generated algorithm describing the parsed augmentation
        created_at: Creation timestamp
    """

    id: str
    name: str
    camera_ids: Tuple[str, ...]
    roi: Tuple[Coordinate, ...]
    algorithm: Algorithm
    augmentation_text: Optional[str]
    duration: int
    alarm_level: AlarmLevel
    status: TaskStatus
    sample_counters: SampleCounters
    roi_primitives: Tuple[Primitive, ...] = ()
    refinement: Optional[Algorithm] = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_full_frame(self) -> bool:
        return not self.roi

    def with_status(self, status: TaskStatus) -> "Task":
        return replace(self, status=status)

    def with_observed_total(self, observed_total: int) -> "Task":
        counters = replace(self.sample_counters, observed_total=observed_total)
        return replace(self, sample_counters=counters)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "camera_ids": list(self.camera_ids),
            "roi": [p.to_dict() for p in self.roi],
            "roi_primitives": [p.to_dict() for p in self.roi_primitives],
            "algorithm": self.algorithm.to_dict(),
            "refinement": self.refinement.to_dict() if self.refinement else None,
            "augmentation_text": self.augmentation_text,
            "duration": self.duration,
            "alarm_level": self.alarm_level.value,
            "status": self.status.value,
            "sample_counters": self.sample_counters.to_dict(),
            "created_at": self.created_at.isoformat(),
        }
