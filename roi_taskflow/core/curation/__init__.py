"""
Sample curation - labeling detections and gating training.
"""

from .samples import LabelStatus, Sample, generate_samples
from .store import SampleCounts, SampleCurationStore, ThresholdProgress, compute_counts

__all__ = [
    "LabelStatus",
    "Sample",
    "generate_samples",
    "SampleCounts",
    "SampleCurationStore",
    "ThresholdProgress",
    "compute_counts",
]
