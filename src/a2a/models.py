# src/a2a/models.py — v1
"""Protocol envelope models (JSON-RPC 2.0 style "message/send").

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# === MESSAGE PARTS ===


class TextPart(_WireModel):
    kind: Literal["text"] = "text"
    text: str


class DataPart(_WireModel):
    kind: Literal["data"] = "data"
    data: Any


Part = Annotated[Union[TextPart, DataPart], Field(discriminator="kind")]


class Message(_WireModel):
    """One message exchanged between user and agent."""

    kind: Literal["message"] = "message"
    role: Literal["user", "agent"]
    parts: list[Part]
    message_id: str = Field(alias="messageId")
    task_id: str | None = Field(default=None, alias="taskId")

    def first_text(self) -> str | None:
        """First non-blank text part, stripped."""
        for part in self.parts:
            if isinstance(part, TextPart) and part.text.strip():
                return part.text.strip()
        return None


# === REQUEST ===


class Configuration(_WireModel):
    blocking: bool = False


class RequestParams(_WireModel):
    message: Message
    configuration: Configuration | None = None


class A2ARequest(_WireModel):
    """Inbound request envelope."""

    jsonrpc: str
    id: str | int
    method: str
    params: RequestParams


# === RESPONSE ===


class TaskStatus(_WireModel):
    state: Literal["submitted", "working", "completed", "failed"]
    timestamp: str
    message: Message | None = None


class Artifact(_WireModel):
    artifact_id: str = Field(alias="artifactId")
    name: str
    parts: list[Part]


class TaskResult(_WireModel):
    kind: Literal["task"] = "task"
    id: str
    context_id: str = Field(alias="contextId")
    status: TaskStatus
    artifacts: list[Artifact] = Field(default_factory=list)
    history: list[Message] = Field(default_factory=list)


class ErrorDetail(_WireModel):
    code: int
    message: str
    data: dict[str, Any] | None = None


class A2AResponse(_WireModel):
    """Outbound envelope: exactly one of result or error is set."""

    jsonrpc: str = "2.0"
    id: str | int | None = None
    result: TaskResult | None = None
    error: ErrorDetail | None = None

    @classmethod
    def failure(
        cls, request_id: str | int | None, code: int, message: str, suggestion: str
    ) -> A2AResponse:
        return cls(
            id=request_id,
            error=ErrorDetail(code=code, message=message, data={"suggestion": suggestion}),
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys; id is always present."""
        payload = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        payload.setdefault("id", None)
        return payload
