# src/a2a/task.py — v1
"""Per-request task lifecycle.

    submitted ──> working ──> completed
        │            │
        └────────────┴──────> failed

No state is entered twice and terminal records never change again.
History only grows: the inbound message first, the agent reply last.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from trendscout.a2a.models import A2AResponse, Message, TaskResult, TaskStatus, TextPart
from trendscout.core.errors import TrendscoutError


class TaskState(str, Enum):
    SUBMITTED = "submitted"
    WORKING = "working"
    COMPLETED = "completed"
    FAILED = "failed"


_TRANSITIONS: dict[TaskState, frozenset[TaskState]] = {
    TaskState.SUBMITTED: frozenset({TaskState.WORKING, TaskState.FAILED}),
    TaskState.WORKING: frozenset({TaskState.COMPLETED, TaskState.FAILED}),
    TaskState.COMPLETED: frozenset(),
    TaskState.FAILED: frozenset(),
}


class InvalidTransition(TrendscoutError):
    """A task was moved to a state it may not enter."""


def rfc3339_now() -> str:
    """UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def agent_message(text: str, task_id: str | None = None) -> Message:
    return Message(
        role="agent",
        parts=[TextPart(text=text)],
        message_id=str(uuid.uuid4()),
        task_id=task_id,
    )


class TaskRecord:
    """State of one request from receipt to response."""

    def __init__(
        self,
        request_id: str | int,
        request_message: Message,
        task_id: str | None = None,
        context_id: str | None = None,
    ) -> None:
        self.request_id = request_id
        self.id = task_id or request_message.task_id or str(uuid.uuid4())
        self.context_id = context_id or str(uuid.uuid4())
        self.state = TaskState.SUBMITTED
        self.timestamp = rfc3339_now()
        self.result_message: str | None = None
        self.error_code: int | None = None
        self.error_message: str | None = None
        self.error_suggestion: str | None = None
        self._history: list[Message] = [request_message]
        self._status_message: Message | None = None

    @property
    def history(self) -> tuple[Message, ...]:
        return tuple(self._history)

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.state]

    def start(self) -> None:
        """Mark the task as handed to the pipeline."""
        self._move(TaskState.WORKING)

    def complete(self, text: str) -> None:
        """Attach the formatted reply and finish."""
        self._move(TaskState.COMPLETED)
        self.result_message = text
        self._status_message = agent_message(text, task_id=self.id)
        self._history.append(self._status_message)

    def fail(self, code: int, message: str, suggestion: str) -> None:
        self._move(TaskState.FAILED)
        self.error_code = code
        self.error_message = message
        self.error_suggestion = suggestion

    def to_response(self) -> A2AResponse:
        """Render the envelope for a terminal task."""
        if self.state is TaskState.FAILED:
            return A2AResponse.failure(
                self.request_id,
                self.error_code,  # type: ignore[arg-type]
                self.error_message or "",
                self.error_suggestion or "",
            )
        if self.state is not TaskState.COMPLETED:
            raise InvalidTransition(f"Task {self.id} is still {self.state.value}")
        return A2AResponse(
            id=self.request_id,
            result=TaskResult(
                id=self.id,
                context_id=self.context_id,
                status=TaskStatus(
                    state=self.state.value,
                    timestamp=self.timestamp,
                    message=self._status_message,
                ),
                artifacts=[],
                history=list(self._history),
            ),
        )

    def _move(self, target: TaskState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransition(
                f"Task {self.id}: {self.state.value} -> {target.value} is not allowed"
            )
        self.state = target
        self.timestamp = rfc3339_now()
