"""
Task lifecycle management.

Finite-state machine over ``TaskStatus``. Asynchronous steps (provisioning
and training completion) are scheduled callbacks keyed by task id, and
deletion cancels whatever is still pending for the task.
"""

import logging
from gettext import gettext as _
from typing import Any, Callable, Dict, List, Optional

from ..annotation.events import EventEmitter, EventType, TaskflowEvent
from ...utils.config import DEFAULT_CONFIG
from ..errors import (
    InvalidTransitionError,
    ThresholdNotMetError,
    UnknownTaskError,
)
from .confirmation import ConfirmationGate
from .models import Task, TaskStatus
from .scheduler import Scheduler

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    TaskStatus.INIT: {TaskStatus.RUNNING},
    TaskStatus.RUNNING: {TaskStatus.STOPPED, TaskStatus.TRAINING},
    TaskStatus.STOPPED: {TaskStatus.RUNNING, TaskStatus.TRAINING},
    TaskStatus.TRAINING: {TaskStatus.RUNNING},
    TaskStatus.ERROR: set(),
}


def can_transition(current: TaskStatus, target: TaskStatus) -> bool:
    """Whether ``current -> target`` is a defined transition."""
    if target is TaskStatus.ERROR:
        return True
    return target in ALLOWED_TRANSITIONS[current]


class TaskLifecycleManager:
    """
    Owns the task collection and every status change.

    Tasks are immutable; each transition stores a replaced copy, so the
    status can't be overwritten from outside.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        provisioning_delay: float = DEFAULT_CONFIG["lifecycle"]["provisioning_delay"],
        training_delay: float = DEFAULT_CONFIG["lifecycle"]["training_delay"],
        gate: Optional[ConfirmationGate] = None,
        events: Optional[EventEmitter] = None,
        on_update_status: Optional[Callable[[str, TaskStatus], None]] = None,
        on_update_sample_count: Optional[Callable[[str, int], None]] = None,
    ):
        """
        Initialize the lifecycle manager.

        Args:
            scheduler: Where delayed transitions are scheduled
            provisioning_delay: Seconds between INIT and RUNNING
            training_delay: Seconds between TRAINING and RUNNING
            gate: Confirmation gate for deletions
            events: Event emitter for UI notifications
            on_update_status: Called with (task_id, status) after each change
            on_update_sample_count: Called with (task_id, observed_total)
        """
        self.scheduler = scheduler
        self.provisioning_delay = provisioning_delay
        self.training_delay = training_delay
        self.gate = gate or ConfirmationGate()
        self.events = events or EventEmitter()
        self.on_update_status = on_update_status
        self.on_update_sample_count = on_update_sample_count

        self._tasks: Dict[str, Task] = {}
        self._scheduled: Dict[str, Any] = {}

    def __contains__(self, task_id: str) -> bool:
        return task_id in self._tasks

    def tasks(self) -> List[Task]:
        """All tasks, newest first."""
        return list(reversed(list(self._tasks.values())))

    def get(self, task_id: str) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise UnknownTaskError(_("Unknown task: {task_id}").format(task_id=task_id))

    def has_pending_transition(self, task_id: str) -> bool:
        return task_id in self._scheduled

    def add(self, task: Task) -> Task:
        """Register a freshly saved task and schedule its provisioning."""
        if task.status is not TaskStatus.INIT:
            raise InvalidTransitionError(
                _("New tasks must start in INIT, got {status}").format(
                    status=task.status.value
                )
            )
        self._tasks[task.id] = task
        logger.info(f"Task {task.id} created, provisioning")
        self.events.emit(TaskflowEvent(EventType.TASK_CREATED, {"task_id": task.id}))
        self._schedule(task.id, self.provisioning_delay, self._complete_provisioning)
        return task

    def stop(self, task_id: str) -> Task:
        return self._require_transition(task_id, TaskStatus.RUNNING, TaskStatus.STOPPED)

    def start(self, task_id: str) -> Task:
        return self._require_transition(task_id, TaskStatus.STOPPED, TaskStatus.RUNNING)

    def can_start_training(self, task_id: str, store) -> bool:
        """Precondition for the start-training action."""
        task = self.get(task_id)
        return can_transition(task.status, TaskStatus.TRAINING) and store.can_train()

    def start_training(self, task_id: str, store) -> Task:
        """
        Move a running or stopped task into TRAINING.

        Commits the labeled positive + negative total into the task's
        sample counters and schedules the training completion.

        Raises:
            InvalidTransitionError: If the task is neither RUNNING nor STOPPED
            ThresholdNotMetError: If either sample threshold is not reached
        """
        task = self.get(task_id)
        if not can_transition(task.status, TaskStatus.TRAINING):
            raise InvalidTransitionError(
                _("Cannot start training from {status}").format(status=task.status.value)
            )
        if not store.can_train():
            counts = store.counts()
            raise ThresholdNotMetError(
                _(
                    "Need {pos} positive and {neg} negative samples, have {have_pos} and {have_neg}"
                ).format(
                    pos=store.positive_threshold,
                    neg=store.negative_threshold,
                    have_pos=counts.positive,
                    have_neg=counts.negative,
                )
            )

        observed_total = store.observed_total()
        self._set_task(task.with_observed_total(observed_total))
        if self.on_update_sample_count is not None:
            self.on_update_sample_count(task_id, observed_total)
        self.events.emit(
            TaskflowEvent(
                EventType.SAMPLE_COUNT_UPDATED,
                {"task_id": task_id, "observed_total": observed_total},
            )
        )

        task = self._transition(task_id, TaskStatus.TRAINING)
        self._schedule(task_id, self.training_delay, self._complete_training)
        return task

    def fail(self, task_id: str, reason: str = "") -> Task:
        """Unrecoverable failure signal, valid from any state."""
        self._cancel_scheduled(task_id)
        logger.error(f"Task {task_id} failed: {reason}")
        return self._transition(task_id, TaskStatus.ERROR)

    def propose_delete(self, task_id: str) -> str:
        """First step of deletion; confirm the returned token to delete."""
        task = self.get(task_id)
        return self.gate.propose(
            "delete_task",
            _('Delete task "{name}"?').format(name=task.name),
            self._delete,
            task_id,
        )

    def _delete(self, task_id: str) -> Optional[Task]:
        self._cancel_scheduled(task_id)
        task = self._tasks.pop(task_id, None)
        if task is None:
            return None
        logger.info(f"Task {task_id} deleted")
        self.events.emit(TaskflowEvent(EventType.TASK_DELETED, {"task_id": task_id}))
        return task

    def _complete_provisioning(self, task_id: str):
        self._scheduled.pop(task_id, None)
        self._complete(task_id, TaskStatus.INIT)

    def _complete_training(self, task_id: str):
        self._scheduled.pop(task_id, None)
        self._complete(task_id, TaskStatus.TRAINING)

    def _complete(self, task_id: str, expected: TaskStatus):
        task = self._tasks.get(task_id)
        if task is None:
            logger.debug(f"Ignoring callback for removed task {task_id}")
            return
        if task.status is not expected:
            logger.debug(
                f"Ignoring callback for task {task_id}: status is {task.status.value}"
            )
            return
        self._transition(task_id, TaskStatus.RUNNING)

    def _require_transition(
        self, task_id: str, current: TaskStatus, target: TaskStatus
    ) -> Task:
        task = self.get(task_id)
        if task.status is not current:
            raise InvalidTransitionError(
                _("Cannot move task from {current} to {target}").format(
                    current=task.status.value, target=target.value
                )
            )
        return self._transition(task_id, target)

    def _transition(self, task_id: str, target: TaskStatus) -> Task:
        task = self.get(task_id)
        if not can_transition(task.status, target):
            raise InvalidTransitionError(
                _("Cannot move task from {current} to {target}").format(
                    current=task.status.value, target=target.value
                )
            )
        previous = task.status
        task = self._set_task(task.with_status(target))
        logger.info(f"Task {task_id}: {previous.value} -> {target.value}")
        if self.on_update_status is not None:
            self.on_update_status(task_id, target)
        self.events.emit(
            TaskflowEvent(
                EventType.STATUS_CHANGED,
                {"task_id": task_id, "from": previous.value, "to": target.value},
            )
        )
        return task

    def _set_task(self, task: Task) -> Task:
        self._tasks[task.id] = task
        return task

    def _schedule(self, task_id: str, delay: float, callback: Callable):
        self._cancel_scheduled(task_id)
        self._scheduled[task_id] = self.scheduler.call_later(delay, callback, task_id)

    def _cancel_scheduled(self, task_id: str):
        handle = self._scheduled.pop(task_id, None)
        if handle is not None:
            logger.debug(f"Cancelled pending transition of task {task_id}")
            handle.cancel()
