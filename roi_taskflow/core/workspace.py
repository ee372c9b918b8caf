"""
Application state.

A single owned object holding the task list, the open wizard session and
the curation stores, mutated only through the commands below.
"""

import logging
from gettext import gettext as _
from typing import Dict, Iterable, List, Optional

from .annotation.canvas import AnnotationCanvas
from .annotation.events import EventEmitter, EventType, TaskflowEvent
from .curation.samples import Sample, generate_samples
from .curation.store import SampleCurationStore
from .errors import TaskflowError, ThresholdNotMetError
from .tasks.builder import TaskDraftBuilder
from .tasks.confirmation import ConfirmationGate
from .tasks.lifecycle import TaskLifecycleManager
from .tasks.models import Camera, CameraDirectory, Task
from .tasks.scheduler import Scheduler

logger = logging.getLogger(__name__)


class Workspace:
    """
    Ties the wizard, the lifecycle manager and sample curation together.

    Args:
        cameras: Camera inventory
        scheduler: Scheduler for simulated delays
        cfg: Configuration tree, see ``roi_taskflow.utils.config``
    """

    def __init__(self, cameras: Iterable[Camera], scheduler: Scheduler, cfg):
        self.cfg = cfg
        self.cameras = CameraDirectory(cameras)
        self.events = EventEmitter()
        self.gate = ConfirmationGate()
        self.lifecycle = TaskLifecycleManager(
            scheduler,
            provisioning_delay=float(cfg.lifecycle.provisioning_delay),
            training_delay=float(cfg.lifecycle.training_delay),
            gate=self.gate,
            events=self.events,
        )
        self.wizard: Optional[TaskDraftBuilder] = None
        self._stores: Dict[str, SampleCurationStore] = {}
        self.events.on(EventType.TASK_DELETED, self._on_task_deleted)

    def tasks(self) -> List[Task]:
        return self.lifecycle.tasks()

    # Wizard

    def open_wizard(self) -> TaskDraftBuilder:
        """Start a draft session with an empty annotation set, discarding any open one."""
        self.close_wizard()
        self.wizard = TaskDraftBuilder(
            self.cameras,
            canvas=AnnotationCanvas(events=self.events),
            gate=self.gate,
            on_save=self._on_save,
            positive_threshold=int(self.cfg.samples.positive_threshold),
            negative_threshold=int(self.cfg.samples.negative_threshold),
            name_max_length=int(self.cfg.wizard.name_max_length),
        )
        return self.wizard

    def close_wizard(self):
        if self.wizard is not None:
            self.wizard.close()
        self.wizard = None

    def save_wizard(self) -> Task:
        """
        Save the open draft.

        Raises:
            ConfirmationRequired: Full-frame default needs confirmation;
                ``confirm`` the token to finish saving
        """
        if self.wizard is None:
            raise TaskflowError(_("No task wizard is open"))
        return self.wizard.save()

    def _on_save(self, task: Task):
        self.lifecycle.add(task)
        self.wizard = None

    # Curation

    def open_curation(
        self, task_id: str, samples: Optional[Iterable[Sample]] = None
    ) -> SampleCurationStore:
        """Curation store of a task, created on first access."""
        task = self.lifecycle.get(task_id)
        if task_id not in self._stores:
            if samples is None:
                samples = generate_samples(
                    int(self.cfg.samples.mock_count),
                    min_confidence=float(self.cfg.samples.min_confidence),
                    max_confidence=float(self.cfg.samples.max_confidence),
                )
            self._stores[task_id] = SampleCurationStore.for_task(
                task, samples, events=self.events
            )
        return self._stores[task_id]

    def can_start_training(self, task_id: str) -> bool:
        return self.lifecycle.can_start_training(task_id, self.open_curation(task_id))

    def propose_training(self, task_id: str) -> str:
        """
        First step of starting training.

        Raises:
            ThresholdNotMetError: The action is unavailable
        """
        store = self.open_curation(task_id)
        if not self.lifecycle.can_start_training(task_id, store):
            raise ThresholdNotMetError(_("Training is not available for this task"))
        message = _(
            "Fine-tune the model with the current {total} samples? "
            "This takes about {minutes} minutes."
        ).format(
            total=store.observed_total(),
            minutes=round(float(self.cfg.lifecycle.training_delay) / 60),
        )
        return self.gate.propose(
            "start_training", message, self.lifecycle.start_training, task_id, store
        )

    # Deletion

    def propose_delete(self, task_id: str) -> str:
        return self.lifecycle.propose_delete(task_id)

    def _on_task_deleted(self, event: TaskflowEvent):
        self._stores.pop(event.data["task_id"], None)

    def confirm(self, token: str):
        return self.gate.confirm(token)

    def cancel(self, token: str) -> bool:
        return self.gate.cancel(token)
