"""
Two-step commands for actions that need the user's consent.

``propose`` registers the action and hands back a token; nothing happens
until ``confirm`` is called with that token.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from ..errors import TaskflowError

logger = logging.getLogger(__name__)


@dataclass
class PendingAction:
    action: str
    message: str
    callback: Callable
    args: Tuple[Any, ...] = field(default_factory=tuple)


class ConfirmationGate:
    """Holds proposed actions until they are confirmed or cancelled."""

    def __init__(self):
        self._pending: Dict[str, PendingAction] = {}

    def propose(self, action: str, message: str, callback: Callable, *args) -> str:
        token = uuid.uuid4().hex
        self._pending[token] = PendingAction(action, message, callback, args)
        logger.debug(f"Proposed {action} ({token})")
        return token

    def describe(self, token: str) -> PendingAction:
        try:
            return self._pending[token]
        except KeyError:
            raise TaskflowError(f"Unknown or expired confirmation token: {token}")

    def confirm(self, token: str) -> Any:
        """Run the proposed action. A token can be confirmed only once."""
        pending = self.describe(token)
        del self._pending[token]
        logger.debug(f"Confirmed {pending.action} ({token})")
        return pending.callback(*pending.args)

    def cancel(self, token: str) -> bool:
        return self._pending.pop(token, None) is not None

    def pending(self) -> List[str]:
        return list(self._pending)
