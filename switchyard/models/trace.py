"""Diagnostic trace events emitted by the dispatch engine."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CHANNEL = "default"


class TraceKind(str, Enum):
    """Points in a traversal at which the engine emits a trace event."""

    ENTRY = "entry"
    POST = "post"
    FANOUT = "fanout"
    FAILURE = "failure"


class TraceEvent(BaseModel):
    """A single structured trace point.

    ``channel`` is set for fan-out events, ``target_id`` names the downstream
    node for fan-out, and ``detail`` carries free-form diagnostics such as
    the failure cause.
    """

    model_config = ConfigDict(frozen=True)

    kind: TraceKind
    node_id: str
    correlation_id: str
    channel: str | None = None
    target_id: str | None = None
    detail: dict[str, Any] = {}
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
