"""
Task definition builder.

Collects the wizard inputs (cameras, preset algorithm, annotation set,
optional augmentation text, strategy parameters) and validates them into
an immutable ``Task`` in the INIT status.
"""

import logging
import uuid
from datetime import date
from gettext import gettext as _
from typing import Callable, List, Optional, Union

from ..annotation.canvas import AnnotationCanvas
from ...utils.config import DEFAULT_CONFIG
from ..errors import (
    CollaboratorFailure,
    ConfirmationRequired,
    TaskflowError,
    ValidationError,
)
from .confirmation import ConfirmationGate
from .models import (
    AlarmLevel,
    Algorithm,
    CameraDirectory,
    SampleCounters,
    Task,
    TaskStatus,
    find_preset,
)

logger = logging.getLogger(__name__)


def _new_task_id() -> str:
    return f"task_{uuid.uuid4().hex[:12]}"


class TaskDraftBuilder:
    """
    One wizard session.

    The annotation canvas belongs to the session, so switching or
    toggling cameras never touches the drawn region: the same ROI applies
    to every selected camera.
    """

    def __init__(
        self,
        cameras: CameraDirectory,
        canvas: Optional[AnnotationCanvas] = None,
        gate: Optional[ConfirmationGate] = None,
        on_save: Optional[Callable[[Task], None]] = None,
        positive_threshold: int = DEFAULT_CONFIG["samples"]["positive_threshold"],
        negative_threshold: int = DEFAULT_CONFIG["samples"]["negative_threshold"],
        name_max_length: int = DEFAULT_CONFIG["wizard"]["name_max_length"],
        today: Callable[[], date] = date.today,
    ):
        self.cameras = cameras
        self.canvas = canvas or AnnotationCanvas()
        self.gate = gate or ConfirmationGate()
        self.on_save = on_save
        self.name_max_length = name_max_length
        self._today = today
        self._full_frame_token: Optional[str] = None
        self.closed = False

        self.selected_camera_ids: List[str] = []
        self.active_camera_id: Optional[str] = None

        self.algorithm: Optional[Algorithm] = None
        self.augmentation_text: Optional[str] = None
        self.parsed_rule = None
        self.augmentation_error: Optional[str] = None

        self.name = ""
        self.duration = 0
        self.alarm_level = AlarmLevel.HIGH
        self.positive_threshold = 0
        self.negative_threshold = 0
        self.set_thresholds(positive_threshold, negative_threshold)

    # Cameras

    def toggle_camera(self, camera_id: str):
        """
        Add or remove a camera from the selection.

        A newly selected camera becomes the preview. Removing the previewed
        camera moves the preview to the first remaining selection.
        """
        if camera_id not in self.cameras:
            raise ValidationError(
                _("Unknown camera: {camera_id}").format(camera_id=camera_id), "camera_ids"
            )

        if camera_id in self.selected_camera_ids:
            self.selected_camera_ids.remove(camera_id)
            if self.active_camera_id == camera_id:
                self.active_camera_id = (
                    self.selected_camera_ids[0] if self.selected_camera_ids else None
                )
        else:
            self.selected_camera_ids.append(camera_id)
            self.active_camera_id = camera_id

    def set_active_camera(self, camera_id: str):
        """Switch the preview without changing the selection."""
        if camera_id not in self.cameras:
            raise ValidationError(
                _("Unknown camera: {camera_id}").format(camera_id=camera_id), "camera_ids"
            )
        self.active_camera_id = camera_id

    # Algorithm

    def select_algorithm(self, algorithm_id: str) -> Algorithm:
        algorithm = find_preset(algorithm_id)
        if algorithm is None:
            raise ValidationError(
                _("Unknown preset algorithm: {algorithm_id}").format(
                    algorithm_id=algorithm_id
                ),
                "algorithm",
            )
        self.algorithm = algorithm
        self._autofill_name()
        return algorithm

    def set_augmentation_text(self, text: Optional[str]):
        """Attach free text refining the selected preset; empty text detaches it."""
        text = (text or "").strip() or None
        if text is not None and self.algorithm is None:
            raise ValidationError(
                _("Select a preset algorithm before adding a description"), "augmentation"
            )
        if text != self.augmentation_text:
            self.parsed_rule = None
            self.augmentation_error = None
        self.augmentation_text = text

    @property
    def augmentation_valid(self) -> bool:
        return self.parsed_rule is not None and self.parsed_rule.valid

    async def parse_augmentation(self, parser):
        """
        Send the augmentation text to the rule-parsing collaborator.

        The outcome is mapped into ``augmentation_valid`` and
        ``augmentation_error`` first; suggested duration and alarm level are
        applied only from a valid result.

        Returns:
            The parsed rule, or None when there is nothing to parse or the
            text changed while the call was in flight
        """
        from ...services.rules import parse_rule_safely

        text = self.augmentation_text
        if not text:
            return None

        self.parsed_rule = None
        self.augmentation_error = None
        result = await parse_rule_safely(parser, text)

        if text != self.augmentation_text:
            logger.debug("Augmentation text changed during parsing, dropping result")
            return None

        self.parsed_rule = result
        if result.valid:
            self.set_duration(result.suggested_duration)
            self.alarm_level = result.suggested_level
        else:
            self.augmentation_error = result.reason
        return result

    # Strategy

    def set_name(self, name: str):
        self.name = (name or "")[: self.name_max_length]

    def _autofill_name(self):
        if self.name.strip() or self.algorithm is None:
            return
        name = f"{self.algorithm.name}_{self._today():%m%d}"
        self.name = name[: self.name_max_length]

    def set_duration(self, seconds: Union[int, float, str]):
        try:
            self.duration = max(0, int(float(seconds)))
        except (TypeError, ValueError):
            self.duration = 0

    def set_alarm_level(self, level: Union[AlarmLevel, str]):
        self.alarm_level = AlarmLevel(level)

    def set_thresholds(self, positive: int, negative: int):
        if int(positive) < 0 or int(negative) < 0:
            raise ValidationError(
                _("Sample thresholds must not be negative"), "thresholds"
            )
        self.positive_threshold = int(positive)
        self.negative_threshold = int(negative)

    # Saving

    def validate(self):
        """
        Check the draft, in wizard order.

        Raises:
            ValidationError: Missing camera, preset algorithm or name
            CollaboratorFailure: Attached text without a valid parse
        """
        if not self.selected_camera_ids:
            raise ValidationError(_("Select at least one camera"), "camera_ids")
        if self.algorithm is None:
            raise ValidationError(_("Select a preset algorithm"), "algorithm")
        if self.augmentation_text and not self.augmentation_valid:
            raise CollaboratorFailure(
                self.augmentation_error
                or _("Parse the description and make sure it is valid first")
            )
        if not self.name.strip():
            raise ValidationError(_("Enter a task name"), "name")

    def save(self) -> Task:
        """
        Validate and produce the task.

        Only the latest full-frame confirmation of a session stays valid;
        saving again replaces it.

        Raises:
            TaskflowError: The session was already saved or closed
            ConfirmationRequired: No region was drawn; confirming the token
                saves the task with full-frame detection
        """
        self._ensure_open()
        self.validate()
        self._cancel_full_frame()
        if self.canvas.is_empty():
            message = _(
                "No detection area was drawn, the whole frame will be analyzed. Continue?"
            )
            self._full_frame_token = self.gate.propose(
                "full_frame_default", message, self._commit
            )
            raise ConfirmationRequired(message, self._full_frame_token)
        return self._commit()

    def close(self):
        """Discard the session, invalidating any pending full-frame confirmation."""
        self._cancel_full_frame()
        self.closed = True

    def _ensure_open(self):
        if self.closed:
            raise TaskflowError(_("This task draft was already saved or discarded"))

    def _cancel_full_frame(self):
        if self._full_frame_token is not None:
            self.gate.cancel(self._full_frame_token)
            self._full_frame_token = None

    def _commit(self) -> Task:
        self._ensure_open()
        self.validate()
        self._full_frame_token = None
        refinement = None
        if self.augmentation_valid:
            refinement = Algorithm.from_parsed_rule(self.parsed_rule, self.algorithm)

        task = Task(
            id=_new_task_id(),
            name=self.name.strip(),
            camera_ids=tuple(self.selected_camera_ids),
            roi=self.canvas.snapshot(),
            algorithm=self.algorithm,
            augmentation_text=self.augmentation_text,
            duration=self.duration,
            alarm_level=self.alarm_level,
            status=TaskStatus.INIT,
            sample_counters=SampleCounters(
                positive_threshold=self.positive_threshold,
                negative_threshold=self.negative_threshold,
                observed_total=0,
            ),
            roi_primitives=self.canvas.primitives,
            refinement=refinement,
        )
        self.closed = True
        logger.info(f"Saved task draft {task.id} ({task.name})")
        if self.on_save is not None:
            self.on_save(task)
        return task
