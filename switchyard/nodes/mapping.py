"""Declarative payload mapping for the transform node.

A mapping is a dict from a dotted *source path* to one or more
destinations.  A destination is either a dotted path, a list of
destinations, or a rule dict::

    {
        "customer.name": "name",
        "customer.id": ["id", "meta.customerId"],
        "total": {"key": "amount", "transform": lambda v: v * 100},
        "currency": {"key": "currency", "default": "EUR"},
    }

Source keys that are absent are skipped unless the rule carries a
``default``.  Numeric path segments index into lists.  The source value is
never mutated; the result is a fresh dict.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, NamedTuple

from switchyard.core.node import ConfigurationError, Node
from switchyard.models.message import Message

logger = logging.getLogger(__name__)

_NO_DEFAULT: Any = object()


class Destination(NamedTuple):
    key: str
    transform: Callable[[Any], Any] | None = None
    default: Any = _NO_DEFAULT


def lookup(source: Any, path: str) -> tuple[bool, Any]:
    """Resolve a dotted *path* in *source*.  Returns ``(found, value)``."""
    current = source
    for segment in path.split("."):
        if isinstance(current, Mapping) and segment in current:
            current = current[segment]
        elif (
            isinstance(current, Sequence)
            and not isinstance(current, (str, bytes))
            and segment.isdigit()
            and int(segment) < len(current)
        ):
            current = current[int(segment)]
        else:
            return False, None
    return True, current


def assign(target: dict[str, Any], path: str, value: Any) -> None:
    """Set *value* at dotted *path* in *target*, creating nested dicts."""
    *parents, leaf = path.split(".")
    current = target
    for segment in parents:
        child = current.get(segment)
        if not isinstance(child, dict):
            child = current[segment] = {}
        current = child
    current[leaf] = value


def _parse_destination(source_path: str, rule: Any) -> list[Destination]:
    if isinstance(rule, str) and rule:
        return [Destination(rule)]
    if isinstance(rule, list):
        return [d for item in rule for d in _parse_destination(source_path, item)]
    if isinstance(rule, Mapping):
        key = rule.get("key")
        transform = rule.get("transform")
        if not isinstance(key, str) or not key:
            raise ConfigurationError(
                f"Mapping rule for {source_path!r} needs a non-empty 'key'"
            )
        if transform is not None and not callable(transform):
            raise ConfigurationError(
                f"Mapping rule for {source_path!r} has a non-callable transform"
            )
        return [Destination(key, transform, rule.get("default", _NO_DEFAULT))]
    raise ConfigurationError(
        f"Invalid destination for {source_path!r}: {rule!r}"
    )


def compile_mapping(
    mapping: Mapping[str, Any] | Callable[[Any], Any],
) -> Callable[[Any], Any]:
    """Validate *mapping* and return a function applying it to a payload."""
    if callable(mapping) and not isinstance(mapping, Mapping):
        return mapping
    if not isinstance(mapping, Mapping) or not mapping:
        raise ConfigurationError("Transform mapping must be a non-empty mapping")

    rules: list[tuple[str, list[Destination]]] = []
    for source_path, rule in mapping.items():
        if not isinstance(source_path, str) or not source_path:
            raise ConfigurationError(
                f"Mapping source paths must be non-empty strings, got {source_path!r}"
            )
        rules.append((source_path, _parse_destination(source_path, rule)))

    def apply(source: Any) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for source_path, destinations in rules:
            found, value = lookup(source, source_path)
            for destination in destinations:
                if found:
                    mapped = value
                elif destination.default is not _NO_DEFAULT:
                    mapped = copy.deepcopy(destination.default)
                else:
                    continue
                if destination.transform is not None:
                    mapped = destination.transform(mapped)
                assign(result, destination.key, mapped)
        return result

    return apply


class TransformWork:
    """Replaces the payload with the mapped result.  Never touches ``vars``."""

    kind = "transform"

    def __init__(self, mapping: Mapping[str, Any] | Callable[[Any], Any]) -> None:
        self.mapping = mapping
        self._apply = compile_mapping(mapping)

    def __call__(self, node: Node, message: Message) -> None:
        source = message.payload
        result = self._apply(source)
        logger.debug(
            "Node %s mapped payload of message %s: %r -> %r",
            node.id,
            message.correlation_id,
            source,
            result,
        )
        message.payload = result
        node.next(message)
