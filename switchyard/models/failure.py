"""Failure record delivered to a node's failure capability."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from switchyard.models.message import Message


class FailureRecord(BaseModel):
    """Structured error produced when a node's work fails.

    ``node`` is the node whose work (or asynchronous continuation) failed,
    ``message`` the envelope being processed and ``cause`` the raised or
    reported exception.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    node: Any
    message: Message
    cause: BaseException

    @property
    def correlation_id(self) -> str:
        return self.message.correlation_id
