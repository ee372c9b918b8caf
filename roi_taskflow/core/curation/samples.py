"""
Pre-scored samples collected by a running task.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import List, Optional

import numpy as np

from ...utils.config import DEFAULT_CONFIG


class LabelStatus(Enum):
    UNLABELED = "unlabeled"
    POSITIVE = "positive"
    NEGATIVE = "negative"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Sample:
    """A detection candidate awaiting review."""

    id: str
    confidence: float
    label: LabelStatus = LabelStatus.UNLABELED
    url: Optional[str] = None
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be in [0, 1], got {self.confidence}")

    def with_label(self, label: LabelStatus) -> "Sample":
        return replace(self, label=label)

    def to_dict(self):
        return {
            "id": self.id,
            "confidence": self.confidence,
            "label": self.label.value,
            "url": self.url,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Sample":
        timestamp = data.get("timestamp")
        return cls(
            id=data["id"],
            confidence=float(data["confidence"]),
            label=LabelStatus(data.get("label", LabelStatus.UNLABELED.value)),
            url=data.get("url"),
            timestamp=datetime.fromisoformat(timestamp) if timestamp else None,
        )


def generate_samples(
    count: int,
    seed: Optional[int] = None,
    min_confidence: float = DEFAULT_CONFIG["samples"]["min_confidence"],
    max_confidence: float = DEFAULT_CONFIG["samples"]["max_confidence"],
) -> List[Sample]:
    """
    Simulate the unlabeled detections of a running task.

    Args:
        count: Number of samples
        seed: Seed for reproducible confidences
        min_confidence: Lower bound of the confidence range
        max_confidence: Upper bound (exclusive) of the confidence range

    Returns:
        Unlabeled samples with ids ``sample_0`` .. ``sample_{count-1}``
    """
    rng = np.random.default_rng(seed)
    confidences = rng.uniform(min_confidence, max_confidence, size=count)
    now = datetime.now()
    return [
        Sample(
            id=f"sample_{i}",
            confidence=float(conf),
            url=f"https://picsum.photos/300/200?random={i}",
            timestamp=now,
        )
        for i, conf in enumerate(confidences)
    ]
