"""
Error hierarchy for roi_taskflow.

Every condition raised here is recoverable: the caller corrects the draft,
retries the collaborator call, or waits for the precondition to hold.
"""

from typing import Optional


class TaskflowError(Exception):
    """Base class for all roi_taskflow errors."""


class ValidationError(TaskflowError, ValueError):
    """A task draft is incomplete or inconsistent."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class CollaboratorFailure(TaskflowError):
    """The rule-parsing collaborator failed or rejected the description."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ThresholdNotMetError(TaskflowError):
    """Training requested before both sample thresholds are reached."""


class InvalidTransitionError(TaskflowError):
    """Lifecycle command not allowed from the current status."""


class ConfirmationRequired(TaskflowError):
    """A destructive or defaulting action needs an explicit confirmation."""

    def __init__(self, message: str, token: str):
        super().__init__(message)
        self.token = token


class UnknownTaskError(TaskflowError, KeyError):
    def __str__(self):
        return str(self.args[0]) if self.args else ""


class UnknownSampleError(TaskflowError, KeyError):
    def __str__(self):
        return str(self.args[0]) if self.args else ""
