"""Variable-store nodes: snapshot, restore and merge ``message.vars`` entries."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping, MutableMapping

from switchyard.core.node import Node
from switchyard.models.message import Message

logger = logging.getLogger(__name__)


class VarSetWork:
    """Stores a deep copy of the payload under ``vars[name]``."""

    kind = "var_set"

    def __init__(self, name: str) -> None:
        self.name = name

    def __call__(self, node: Node, message: Message) -> None:
        message.vars[self.name] = copy.deepcopy(message.payload)
        logger.debug(
            "Node %s stored payload of message %s under variable %s",
            node.id,
            message.correlation_id,
            self.name,
        )
        node.next(message)


class VarGetWork:
    """Replaces the payload with a deep copy of ``vars[name]`` when present."""

    kind = "var_get"

    def __init__(self, name: str) -> None:
        self.name = name

    def __call__(self, node: Node, message: Message) -> None:
        if self.name in message.vars:
            message.payload = copy.deepcopy(message.vars[self.name])
            logger.debug(
                "Node %s restored payload of message %s from variable %s",
                node.id,
                message.correlation_id,
                self.name,
            )
        node.next(message)


class MergeWork:
    """Shallow-merges ``vars[name]`` onto the payload; variable keys win."""

    kind = "merge"

    def __init__(self, name: str) -> None:
        self.name = name

    def __call__(self, node: Node, message: Message) -> None:
        if self.name in message.vars:
            partial = message.vars[self.name]
            if not isinstance(partial, Mapping) or not isinstance(
                message.payload, MutableMapping
            ):
                raise TypeError(
                    f"Cannot merge a {type(partial).__name__} variable "
                    f"{self.name!r} into a {type(message.payload).__name__} payload"
                )
            message.payload.update(partial)
        logger.debug(
            "Node %s merged variable %s into payload of message %s",
            node.id,
            self.name,
            message.correlation_id,
        )
        node.next(message)
