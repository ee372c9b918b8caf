"""
Sample curation for the training gate.

Counts are always recomputed from the current labels, so there is no
cached counter that could drift from the collection.
"""

import logging
from dataclasses import dataclass
from gettext import gettext as _
from typing import Dict, Iterable, List, Optional

from ..annotation.events import EventEmitter, EventType, TaskflowEvent
from ..errors import UnknownSampleError, ValidationError
from .samples import LabelStatus, Sample

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleCounts:
    unlabeled: int
    positive: int
    negative: int


@dataclass(frozen=True)
class ThresholdProgress:
    """Progress of one polarity toward its threshold."""

    count: int
    threshold: int

    @property
    def percent(self) -> int:
        if self.threshold <= 0:
            return 100
        return min(100, round(self.count / self.threshold * 100))

    @property
    def remaining(self) -> int:
        return max(0, self.threshold - self.count)

    @property
    def reached(self) -> bool:
        return self.count >= self.threshold


def compute_counts(samples: Iterable[Sample]) -> SampleCounts:
    """Count visible samples per label. Ignored samples are left out."""
    unlabeled = positive = negative = 0
    for sample in samples:
        if sample.label is LabelStatus.UNLABELED:
            unlabeled += 1
        elif sample.label is LabelStatus.POSITIVE:
            positive += 1
        elif sample.label is LabelStatus.NEGATIVE:
            negative += 1
    return SampleCounts(unlabeled=unlabeled, positive=positive, negative=negative)


class SampleCurationStore:
    """
    Ordered sample collection of one task.

    Ignored samples stay in the collection but are hidden from the
    visible set and from every counter.
    """

    def __init__(
        self,
        samples: Iterable[Sample],
        positive_threshold: int,
        negative_threshold: int,
        events: Optional[EventEmitter] = None,
    ):
        if positive_threshold < 0 or negative_threshold < 0:
            raise ValidationError(_("Sample thresholds must not be negative"))
        self.positive_threshold = positive_threshold
        self.negative_threshold = negative_threshold
        self.events = events or EventEmitter()

        self._samples: Dict[str, Sample] = {}
        for sample in samples:
            self._samples[sample.id] = sample

    @classmethod
    def for_task(cls, task, samples: Iterable[Sample], **kwargs) -> "SampleCurationStore":
        counters = task.sample_counters
        return cls(
            samples,
            positive_threshold=counters.positive_threshold,
            negative_threshold=counters.negative_threshold,
            **kwargs,
        )

    def __len__(self):
        return len(self._samples)

    @property
    def samples(self) -> List[Sample]:
        """Every sample, ignored ones included."""
        return list(self._samples.values())

    def visible(self) -> List[Sample]:
        return [s for s in self._samples.values() if s.label is not LabelStatus.IGNORED]

    def get(self, sample_id: str) -> Sample:
        try:
            return self._samples[sample_id]
        except KeyError:
            raise UnknownSampleError(
                _("Unknown sample: {sample_id}").format(sample_id=sample_id)
            )

    def label(self, sample_id: str, label: LabelStatus) -> Sample:
        """Reassign the label of a sample."""
        sample = self.get(sample_id).with_label(LabelStatus(label))
        self._samples[sample_id] = sample
        self.events.emit(
            TaskflowEvent(
                EventType.SAMPLE_LABELED,
                {"sample_id": sample_id, "label": sample.label.value},
            )
        )
        return sample

    def counts(self) -> SampleCounts:
        return compute_counts(self._samples.values())

    def observed_total(self) -> int:
        counts = self.counts()
        return counts.positive + counts.negative

    def can_train(self) -> bool:
        """Both thresholds must be reached, independently."""
        counts = self.counts()
        return (
            counts.positive >= self.positive_threshold
            and counts.negative >= self.negative_threshold
        )

    def progress(self) -> Dict[str, ThresholdProgress]:
        counts = self.counts()
        return {
            "positive": ThresholdProgress(counts.positive, self.positive_threshold),
            "negative": ThresholdProgress(counts.negative, self.negative_threshold),
        }
