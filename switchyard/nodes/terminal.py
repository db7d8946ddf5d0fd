"""Terminal and pass-through nodes: completion sink and message logger."""

from __future__ import annotations

import logging
from collections.abc import Callable

from switchyard.core.node import Node
from switchyard.models.message import Message

logger = logging.getLogger(__name__)

Completion = Callable[[BaseException | None, Message], None]


class SinkWork:
    """Ends the traversal by invoking ``completion(None, message)``."""

    kind = "sink"

    def __init__(self, completion: Completion) -> None:
        self.completion = completion

    def __call__(self, node: Node, message: Message) -> None:
        logger.debug(
            "Node %s completing message %s", node.id, message.correlation_id
        )
        self.completion(None, message)


class LoggerWork:
    """Logs the full message at INFO and forwards it unchanged."""

    kind = "logger"

    def __call__(self, node: Node, message: Message) -> None:
        logger.info(
            "Logger node %s processing message %s: payload=%r vars=%r context=%s",
            node.id,
            message.correlation_id,
            message.payload,
            message.vars,
            message.context.model_dump_json(),
        )
        node.next(message)
