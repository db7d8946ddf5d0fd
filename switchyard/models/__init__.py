"""Switchyard data models — envelopes, failure records and trace events."""

from switchyard.models.failure import FailureRecord
from switchyard.models.message import (
    CallerInfo,
    Message,
    MessageContext,
    create_message,
)
from switchyard.models.trace import DEFAULT_CHANNEL, TraceEvent, TraceKind

__all__ = [
    "DEFAULT_CHANNEL",
    "CallerInfo",
    "FailureRecord",
    "Message",
    "MessageContext",
    "TraceEvent",
    "TraceKind",
    "create_message",
]
