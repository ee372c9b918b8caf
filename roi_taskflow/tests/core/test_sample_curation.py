"""
Tests for sample curation and the training gate.
"""

from unittest.mock import Mock

import pytest

from roi_taskflow.core.annotation import EventType
from roi_taskflow.core.curation import (
    LabelStatus,
    Sample,
    SampleCurationStore,
    compute_counts,
    generate_samples,
)
from roi_taskflow.core.errors import UnknownSampleError, ValidationError
from roi_taskflow.tests.helpers import make_task


def label_first(store, positive, negative):
    ids = [s.id for s in store.samples]
    for sample_id in ids[:positive]:
        store.label(sample_id, LabelStatus.POSITIVE)
    for sample_id in ids[positive : positive + negative]:
        store.label(sample_id, LabelStatus.NEGATIVE)


class TestCounts:
    """Tests for label counts."""

    def test_initial_counts(self, samples):
        """Test every sample starts unlabeled."""
        store = SampleCurationStore(samples, 3, 2)
        counts = store.counts()
        assert (counts.unlabeled, counts.positive, counts.negative) == (10, 0, 0)

    def test_counts_follow_labels(self, samples):
        """Test counts after labeling."""
        store = SampleCurationStore(samples, 3, 2)
        label_first(store, 3, 2)

        counts = store.counts()
        assert (counts.unlabeled, counts.positive, counts.negative) == (5, 3, 2)
        assert store.observed_total() == 5

    def test_relabeling_moves_counts(self, samples):
        """Test relabeling moves a sample between counts."""
        store = SampleCurationStore(samples, 3, 2)
        store.label("sample_0", LabelStatus.POSITIVE)
        store.label("sample_0", LabelStatus.NEGATIVE)

        counts = store.counts()
        assert counts.positive == 0
        assert counts.negative == 1

    def test_ignored_is_hidden_but_kept(self, samples):
        """Test ignored samples leave the view and the counts."""
        store = SampleCurationStore(samples, 3, 2)
        store.label("sample_0", LabelStatus.POSITIVE)
        store.label("sample_0", LabelStatus.IGNORED)

        assert len(store) == 10
        assert len(store.visible()) == 9
        assert store.get("sample_0").label is LabelStatus.IGNORED
        counts = store.counts()
        assert (counts.unlabeled, counts.positive, counts.negative) == (9, 0, 0)

    def test_compute_counts_on_plain_list(self):
        """Test counting a plain sample list."""
        counts = compute_counts(
            [
                Sample("a", 0.5, LabelStatus.POSITIVE),
                Sample("b", 0.5, LabelStatus.IGNORED),
                Sample("c", 0.5),
            ]
        )
        assert (counts.unlabeled, counts.positive, counts.negative) == (1, 1, 0)

    def test_unknown_sample(self, samples):
        """Test labeling an unknown sample id."""
        store = SampleCurationStore(samples, 3, 2)
        with pytest.raises(UnknownSampleError):
            store.label("missing", LabelStatus.POSITIVE)
        with pytest.raises(KeyError):
            store.get("missing")

    def test_label_event(self, samples):
        """Test labeling notifies listeners."""
        store = SampleCurationStore(samples, 3, 2)
        listener = Mock()
        store.events.on(EventType.SAMPLE_LABELED, listener)

        store.label("sample_3", "negative")

        event = listener.call_args[0][0]
        assert event.data == {"sample_id": "sample_3", "label": "negative"}


class TestTrainingGate:
    """Tests for the training thresholds."""

    def test_both_thresholds_reached(self, samples):
        """Test gate opens when both thresholds are met."""
        store = SampleCurationStore(samples, 3, 2)
        label_first(store, 3, 2)
        assert store.can_train()

    def test_positives_alone_are_not_enough(self, samples):
        """Test gate stays closed without negatives."""
        store = SampleCurationStore(samples, 3, 2)
        label_first(store, 5, 0)
        assert not store.can_train()

    def test_negatives_alone_are_not_enough(self, samples):
        """Test gate stays closed without positives."""
        store = SampleCurationStore(samples, 3, 2)
        label_first(store, 0, 6)
        assert not store.can_train()

    def test_more_labels_never_close_the_gate(self, samples):
        """Test labeling more samples keeps the gate open."""
        store = SampleCurationStore(samples, 3, 2)
        label_first(store, 3, 2)
        for sample_id in ("sample_5", "sample_6"):
            store.label(sample_id, LabelStatus.POSITIVE)
            assert store.can_train()
        store.label("sample_7", LabelStatus.NEGATIVE)
        assert store.can_train()

    def test_zero_thresholds(self, samples):
        """Test zero thresholds open the gate immediately."""
        assert SampleCurationStore(samples, 0, 0).can_train()

    def test_negative_thresholds_rejected(self, samples):
        """Test negative thresholds."""
        with pytest.raises(ValidationError):
            SampleCurationStore(samples, -1, 2)

    def test_for_task_uses_task_thresholds(self, builder, samples):
        """Test store built from a task's counters."""
        store = SampleCurationStore.for_task(make_task(builder), samples)
        assert (store.positive_threshold, store.negative_threshold) == (3, 2)


class TestProgress:
    """Tests for threshold progress."""

    def test_progress_values(self, samples):
        """Test percent and remaining per label."""
        store = SampleCurationStore(samples, 4, 2)
        label_first(store, 1, 3)

        progress = store.progress()

        assert progress["positive"].percent == 25
        assert progress["positive"].remaining == 3
        assert not progress["positive"].reached
        assert progress["negative"].percent == 100
        assert progress["negative"].remaining == 0
        assert progress["negative"].reached

    def test_zero_threshold_is_complete(self, samples):
        """Test zero threshold shows full progress."""
        assert SampleCurationStore(samples, 0, 0).progress()["positive"].percent == 100


class TestGenerateSamples:
    """Tests for generated samples."""

    def test_count_and_range(self):
        """Test generated count and confidence range."""
        generated = generate_samples(50, seed=7)

        assert len(generated) == 50
        assert [s.id for s in generated[:2]] == ["sample_0", "sample_1"]
        for sample in generated:
            assert 0.4 <= sample.confidence < 0.9
            assert sample.label is LabelStatus.UNLABELED

    def test_seed_is_reproducible(self):
        """Test the same seed gives the same confidences."""
        first = [s.confidence for s in generate_samples(5, seed=1)]
        second = [s.confidence for s in generate_samples(5, seed=1)]
        assert first == second

    def test_confidence_out_of_range(self):
        """Test confidence above one."""
        with pytest.raises(ValueError):
            Sample("bad", 1.5)

    def test_dict_round_trip(self):
        """Test samples survive serialization."""
        sample = generate_samples(1, seed=3)[0].with_label(LabelStatus.POSITIVE)
        assert Sample.from_dict(sample.to_dict()) == sample
