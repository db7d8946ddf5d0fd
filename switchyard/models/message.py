"""Message envelope — the unit of work flowing through a node graph.

An envelope carries a mutable ``payload``, a private deep snapshot of the
payload as it was at construction (``original_payload``), an immutable
``context`` and a scratch ``vars`` mapping used by variable-store nodes.

The engine never validates or copies ``payload`` on a node's behalf.  Node
work mutates the envelope fields directly.
"""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CallerInfo(BaseModel):
    """Identity of the external party that created the envelope."""

    model_config = ConfigDict(frozen=True)

    user: str | None = None
    system: str | None = None
    correlation_id: str | None = None


class MessageContext(BaseModel):
    """Immutable identity of one envelope's traversal."""

    model_config = ConfigDict(frozen=True)

    created_timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    correlation_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    caller: CallerInfo = CallerInfo()


class Message:
    """A message travelling through the graph.

    Parameters
    ----------
    payload:
        Arbitrary structured value.  Shared by reference with the caller.
    caller_user, caller_system, caller_correlation_id:
        Optional identity of the caller, recorded in ``context.caller``.
    """

    __slots__ = ("payload", "vars", "_original_payload", "_context")

    def __init__(
        self,
        payload: Any = None,
        caller_user: str | None = None,
        caller_system: str | None = None,
        caller_correlation_id: str | None = None,
    ) -> None:
        self.payload = payload
        self.vars: dict[str, Any] = {}
        self._original_payload = copy.deepcopy(payload)
        self._context = MessageContext(
            caller=CallerInfo(
                user=caller_user,
                system=caller_system,
                correlation_id=caller_correlation_id,
            )
        )

    @property
    def original_payload(self) -> Any:
        """Snapshot of the payload taken at construction.

        Every read returns a fresh deep copy, so callers may change, compare
        or serialise the result without touching the stored snapshot.
        """
        return copy.deepcopy(self._original_payload)

    @property
    def context(self) -> MessageContext:
        return self._context

    @property
    def correlation_id(self) -> str:
        """Shortcut for ``context.correlation_id``."""
        return self._context.correlation_id

    def fork(self) -> Message:
        """Return a branch copy for isolated fan-out.

        The branch shares ``context`` and the stored ``original_payload``
        snapshot and receives deep copies of ``payload`` and ``vars``.
        """
        branch = Message.__new__(Message)
        branch.payload = copy.deepcopy(self.payload)
        branch.vars = copy.deepcopy(self.vars)
        branch._original_payload = self._original_payload
        branch._context = self._context
        return branch

    def __repr__(self) -> str:
        return (
            f"Message(correlation_id={self.correlation_id!r}, "
            f"payload={self.payload!r}, vars={sorted(self.vars)!r})"
        )


def create_message(
    payload: Any = None,
    caller_user: str | None = None,
    caller_system: str | None = None,
    caller_correlation_id: str | None = None,
) -> Message:
    """Build a fresh envelope for one external request."""
    return Message(payload, caller_user, caller_system, caller_correlation_id)
