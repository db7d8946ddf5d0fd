"""Fixed-delay node: holds a message for a duration, then forwards it."""

from __future__ import annotations

import logging

from switchyard.core.node import Node
from switchyard.models.message import Message

logger = logging.getLogger(__name__)


class DelayWork:
    """Schedules exactly one timer per message; forwards it unchanged on expiry.

    The timer goes through the node's scheduler, so other messages keep
    flowing while this one waits.
    """

    kind = "delay"

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds

    def __call__(self, node: Node, message: Message) -> None:
        logger.debug(
            "Node %s holding message %s for %.3fs",
            node.id,
            message.correlation_id,
            self.seconds,
        )
        node.scheduler.call_later(self.seconds, self._resume, node, message)

    @staticmethod
    def _resume(node: Node, message: Message) -> None:
        """Forward *message* once its timer fires, reporting any failure."""
        try:
            node.next(message)
        except Exception as exc:  # noqa: BLE001
            node.report_failure(message, exc)
