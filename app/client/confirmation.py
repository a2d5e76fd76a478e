"""
Confirmation workflow for sensitive mutations.

    IDLE -> PENDING_CONFIRMATION -> CONFIRMED | CANCELLED -> IDLE

A row action calls request(); the UI shows prompt() in a modal; the user
either confirm()s (the API call runs) or cancel()s (nothing is sent).
Only one request can be pending: a second request() replaces the first.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Protocol

import structlog

from app.client.api import ApiError

logger = structlog.get_logger()


class WorkflowState(str, Enum):
    idle = "idle"
    pending_confirmation = "pending_confirmation"
    confirmed = "confirmed"
    cancelled = "cancelled"


class ConfirmAction(str, Enum):
    delete = "delete"
    verify = "verify"
    unverify = "unverify"
    set_role = "set_role"
    assign_company = "assign_company"


@dataclass(frozen=True)
class ConfirmationRequest:
    target: dict
    action: ConfirmAction
    value: Any = None


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


# executor(target, value) -> server message
Executor = Callable[[dict, Any], str]

BUTTON_TITLES = {
    ConfirmAction.delete: "Delete",
    ConfirmAction.verify: "Verify",
    ConfirmAction.unverify: "Unverify",
    ConfirmAction.set_role: "Change Role",
    ConfirmAction.assign_company: "Update Placement",
}


def prompt_for(request: ConfirmationRequest) -> str:
    name = request.target.get("name", "this record")
    if request.action == ConfirmAction.set_role:
        return f"Are you sure you want to change the role of {name} to {request.value}?"
    if request.action == ConfirmAction.assign_company:
        return f"Are you sure you want to update the placement of {name}?"
    return f"Are you sure you want to {request.action.value} {name}?"


class ConfirmationWorkflow:
    """
    Finite-state confirmation gate.

    Args:
        executors: action -> callable performing the API call
        notifier: receives success/error toasts
        refetch: reloads the list after a successful mutation
    """

    def __init__(
        self,
        executors: Dict[ConfirmAction, Executor],
        notifier: Notifier,
        refetch: Callable[[], None],
    ):
        self.executors = executors
        self.notifier = notifier
        self.refetch = refetch
        self.state = WorkflowState.idle
        self.pending: Optional[ConfirmationRequest] = None
        self.last_outcome: Optional[WorkflowState] = None

    @property
    def is_pending(self) -> bool:
        return self.state == WorkflowState.pending_confirmation

    def request(self, target: dict, action: ConfirmAction, value: Any = None) -> ConfirmationRequest:
        """Ask for confirmation; replaces any request still pending."""
        if action not in self.executors:
            raise ValueError(f"No executor registered for {action.value}")
        if self.is_pending:
            logger.debug("confirmation.replaced", previous=self.pending.action.value, action=action.value)
        self.pending = ConfirmationRequest(target=target, action=action, value=value)
        self.state = WorkflowState.pending_confirmation
        return self.pending

    def prompt(self) -> Optional[dict]:
        """Modal contents for the pending request: message and button title."""
        if not self.is_pending:
            return None
        return {"message": prompt_for(self.pending), "button_title": BUTTON_TITLES[self.pending.action]}

    def cancel(self) -> None:
        if not self.is_pending:
            return
        self.state = WorkflowState.cancelled
        self._reset()

    def confirm(self) -> Optional[bool]:
        """
        Run the pending mutation.

        Returns True on success, False if the server rejected it or could
        not be reached, and None when nothing was pending.
        """
        if not self.is_pending:
            return None

        request = self.pending
        self.state = WorkflowState.confirmed
        try:
            message = self.executors[request.action](request.target, request.value)
        except ApiError as e:
            self.notifier.error(e.message)
            return False
        finally:
            self._reset()

        self.notifier.success(message)
        self.refetch()
        return True

    def _reset(self) -> None:
        self.last_outcome = self.state
        self.pending = None
        self.state = WorkflowState.idle
