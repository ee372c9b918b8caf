"""
End-to-end tests of the Workspace: wizard, lifecycle and curation together.
"""

import pytest

from roi_taskflow.core.annotation import EventType
from roi_taskflow.core.curation import LabelStatus, Sample
from roi_taskflow.core.errors import (
    ConfirmationRequired,
    TaskflowError,
    ThresholdNotMetError,
)
from roi_taskflow.core.tasks import TaskStatus
from roi_taskflow.tests.helpers import draw


def labeled_samples(positive, negative, total=40):
    samples = []
    for i in range(total):
        if i < positive:
            label = LabelStatus.POSITIVE
        elif i < positive + negative:
            label = LabelStatus.NEGATIVE
        else:
            label = LabelStatus.UNLABELED
        samples.append(Sample(f"sample_{i}", 0.6, label))
    return samples


def full_frame_draft(workspace):
    wizard = workspace.open_wizard()
    wizard.toggle_camera("cam2")
    wizard.select_algorithm("fire")
    return wizard


@pytest.fixture
def saved(workspace, square):
    wizard = workspace.open_wizard()
    wizard.toggle_camera("cam1")
    wizard.toggle_camera("cam2")
    wizard.select_algorithm("intrusion")
    draw(wizard.canvas, square)
    return workspace.save_wizard()


class TestWizard:
    """Tests for the draft session owned by the workspace."""

    def test_save_adds_init_task_and_closes_wizard(self, workspace, saved):
        """Test saving hands the task to the lifecycle."""
        assert workspace.wizard is None
        assert workspace.tasks() == [saved]
        assert saved.status is TaskStatus.INIT
        assert saved.camera_ids == ("cam1", "cam2")
        assert saved.sample_counters.positive_threshold == 20
        assert saved.sample_counters.negative_threshold == 10

    def test_save_without_wizard(self, workspace):
        """Test saving with no open draft."""
        with pytest.raises(TaskflowError):
            workspace.save_wizard()

    def test_full_frame_confirmation(self, workspace):
        """Test full-frame task is added once confirmed."""
        full_frame_draft(workspace)

        with pytest.raises(ConfirmationRequired) as excinfo:
            workspace.save_wizard()
        assert workspace.tasks() == []

        task = workspace.confirm(excinfo.value.token)

        assert task.is_full_frame
        assert workspace.tasks() == [task]

    def test_close_discards_draft(self, workspace, square):
        """Test a closed draft is not reused."""
        wizard = workspace.open_wizard()
        draw(wizard.canvas, square)
        workspace.close_wizard()

        assert workspace.open_wizard().canvas.is_empty()

    def test_close_invalidates_full_frame_confirmation(self, workspace):
        """Test confirming after closing the wizard creates no task."""
        full_frame_draft(workspace)
        with pytest.raises(ConfirmationRequired) as excinfo:
            workspace.save_wizard()

        workspace.close_wizard()

        assert workspace.gate.pending() == []
        with pytest.raises(TaskflowError):
            workspace.confirm(excinfo.value.token)
        assert workspace.tasks() == []

    def test_reopen_invalidates_full_frame_confirmation(self, workspace):
        """Test opening a new draft discards the old confirmation."""
        full_frame_draft(workspace)
        with pytest.raises(ConfirmationRequired) as excinfo:
            workspace.save_wizard()

        workspace.open_wizard()

        with pytest.raises(TaskflowError):
            workspace.confirm(excinfo.value.token)
        assert workspace.tasks() == []
        assert workspace.wizard is not None

    def test_repeated_save_creates_one_task(self, workspace):
        """Test saving twice then confirming both tokens adds one task."""
        full_frame_draft(workspace)
        tokens = []
        for _ in range(2):
            with pytest.raises(ConfirmationRequired) as excinfo:
                workspace.save_wizard()
            tokens.append(excinfo.value.token)

        with pytest.raises(TaskflowError):
            workspace.confirm(tokens[0])
        task = workspace.confirm(tokens[1])

        assert workspace.tasks() == [task]
        assert workspace.wizard is None


class TestFlow:
    """Tests for a task from creation to training."""

    def test_full_lifecycle(self, workspace, scheduler, saved):
        """Test provisioning, curation and confirmed training."""
        scheduler.advance(2.0)
        assert workspace.lifecycle.get(saved.id).status is TaskStatus.RUNNING

        workspace.open_curation(saved.id, labeled_samples(20, 10))
        assert workspace.can_start_training(saved.id)

        token = workspace.propose_training(saved.id)
        assert "30" in workspace.gate.describe(token).message
        assert "5" in workspace.gate.describe(token).message
        assert workspace.lifecycle.get(saved.id).status is TaskStatus.RUNNING

        training = workspace.confirm(token)
        assert training.status is TaskStatus.TRAINING
        assert training.sample_counters.observed_total == 30

        scheduler.advance(300)
        assert workspace.lifecycle.get(saved.id).status is TaskStatus.RUNNING

    def test_training_unavailable_below_thresholds(self, workspace, scheduler, saved):
        """Test training is refused with too few negatives."""
        scheduler.advance(2.0)
        workspace.open_curation(saved.id, labeled_samples(25, 9))

        assert not workspace.can_start_training(saved.id)
        with pytest.raises(ThresholdNotMetError):
            workspace.propose_training(saved.id)

    def test_mock_samples_generated(self, workspace, saved):
        """Test curation without samples generates them once."""
        store = workspace.open_curation(saved.id)

        assert len(store) == 50
        assert workspace.open_curation(saved.id) is store

    def test_delete_drops_curation_and_pending_transition(self, workspace, scheduler, saved):
        """Test confirmed deletion removes the task and its store."""
        workspace.open_curation(saved.id)

        token = workspace.propose_delete(saved.id)
        assert workspace.cancel(token)
        assert workspace.tasks() == [saved]

        workspace.confirm(workspace.propose_delete(saved.id))
        scheduler.advance(10)

        assert workspace.tasks() == []
        assert saved.id not in workspace._stores

    def test_events_reach_one_emitter(self, workspace, scheduler, saved):
        """Test status events arrive on the workspace emitter."""
        seen = []
        workspace.events.on(EventType.STATUS_CHANGED, lambda e: seen.append(e.data["to"]))

        scheduler.advance(2.0)
        workspace.lifecycle.stop(saved.id)

        assert seen == ["RUNNING", "STOPPED"]
