"""Built-in node kinds.

Each factory validates its options, wraps the matching work object in a
``Node`` and returns it.  Extra keyword arguments (``scheduler``,
``trace_dispatcher``, ``isolate_fanout``, ``name``) are passed to ``Node``.

>>> entry = transform_node({"order.id": "id"})
>>> entry.connect(var_set_node("order"))
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import httpx

from switchyard.config import settings
from switchyard.core.node import ConfigurationError, FailureHandler, Node
from switchyard.nodes.call import CallWork, ClientFactory
from switchyard.nodes.mapping import TransformWork
from switchyard.nodes.options import (
    CallOptions,
    DelayOptions,
    VariableOptions,
    build_options,
)
from switchyard.nodes.terminal import Completion, LoggerWork, SinkWork
from switchyard.nodes.timing import DelayWork
from switchyard.nodes.variables import MergeWork, VarGetWork, VarSetWork


def transform_node(
    mapping: Mapping[str, Any] | Callable[[Any], Any],
    on_failure: FailureHandler | None = None,
    **node_options: Any,
) -> Node:
    """Node replacing the payload with a declarative mapping of it."""
    return Node(TransformWork(mapping), on_failure, **node_options)


def delay_node(
    seconds: float,
    on_failure: FailureHandler | None = None,
    **node_options: Any,
) -> Node:
    """Node forwarding each message after *seconds*."""
    options = build_options(DelayOptions, seconds=seconds)
    return Node(DelayWork(options.seconds), on_failure, **node_options)


def var_set_node(
    name: str, on_failure: FailureHandler | None = None, **node_options: Any
) -> Node:
    options = build_options(VariableOptions, name=name)
    return Node(VarSetWork(options.name), on_failure, **node_options)


def var_get_node(
    name: str, on_failure: FailureHandler | None = None, **node_options: Any
) -> Node:
    options = build_options(VariableOptions, name=name)
    return Node(VarGetWork(options.name), on_failure, **node_options)


def var_node(
    name: str,
    operation: str,
    on_failure: FailureHandler | None = None,
    **node_options: Any,
) -> Node:
    """``"SET"`` builds a var-set node; any other operation a var-get node."""
    if not isinstance(operation, str):
        raise ConfigurationError(f"Variable operation must be a string, got {operation!r}")
    if operation.upper() == "SET":
        return var_set_node(name, on_failure, **node_options)
    return var_get_node(name, on_failure, **node_options)


def merge_node(
    name: str, on_failure: FailureHandler | None = None, **node_options: Any
) -> Node:
    """Node shallow-merging ``vars[name]`` onto the payload."""
    options = build_options(VariableOptions, name=name)
    return Node(MergeWork(options.name), on_failure, **node_options)


def call_node(
    url: str,
    method: str = "GET",
    path_arguments: Mapping[str, Any] | None = None,
    on_failure: FailureHandler | None = None,
    *,
    request_timeout: float | None = None,
    response_timeout: float | None = None,
    client_factory: ClientFactory = httpx.Client,
    **node_options: Any,
) -> Node:
    """Node invoking an HTTP endpoint and adopting its response body.

    Timeouts default to ``settings.request_timeout`` (connect) and
    ``settings.response_timeout`` (read).
    """
    options = build_options(
        CallOptions,
        url=url,
        method=method,
        path_arguments=dict(path_arguments or {}),
        request_timeout=(
            settings.request_timeout if request_timeout is None else request_timeout
        ),
        response_timeout=(
            settings.response_timeout if response_timeout is None else response_timeout
        ),
    )
    return Node(CallWork(options, client_factory), on_failure, **node_options)


def sink_node(
    completion: Completion,
    on_failure: FailureHandler | None = None,
    **node_options: Any,
) -> Node:
    """Terminal node invoking ``completion(None, message)``."""
    if not callable(completion):
        raise ConfigurationError(
            f"Completion capability must be callable, got {completion!r}"
        )
    return Node(SinkWork(completion), on_failure, **node_options)


def logger_node(
    on_failure: FailureHandler | None = None, **node_options: Any
) -> Node:
    """Pass-through node logging every message it sees."""
    return Node(LoggerWork(), on_failure, **node_options)


__all__ = [
    "call_node",
    "delay_node",
    "logger_node",
    "merge_node",
    "sink_node",
    "transform_node",
    "var_get_node",
    "var_node",
    "var_set_node",
]
