"""Switchyard: in-process message routing through a graph of nodes.

Messages are created once per request, injected into an entry node with
``send`` (synchronous) or ``post`` (deferred), and flow along named
channels through transform, delay, variable, merge, call, logger and sink
nodes until a node absorbs them or fails.
"""

__version__ = "0.1.0"
__description__ = "In-process message routing through a graph of processing nodes"

from switchyard.core.node import (
    ConfigurationError,
    Node,
    set_default_failure_handler,
)
from switchyard.core.scheduler import (
    AsyncioScheduler,
    CooperativeScheduler,
    Scheduler,
    get_default_scheduler,
    set_default_scheduler,
)
from switchyard.models import (
    DEFAULT_CHANNEL,
    FailureRecord,
    Message,
    create_message,
)
from switchyard.nodes import (
    call_node,
    delay_node,
    logger_node,
    merge_node,
    sink_node,
    transform_node,
    var_get_node,
    var_node,
    var_set_node,
)

__all__ = [
    "DEFAULT_CHANNEL",
    "AsyncioScheduler",
    "ConfigurationError",
    "CooperativeScheduler",
    "FailureRecord",
    "Message",
    "Node",
    "Scheduler",
    "__version__",
    "call_node",
    "create_message",
    "delay_node",
    "get_default_scheduler",
    "logger_node",
    "merge_node",
    "set_default_failure_handler",
    "set_default_scheduler",
    "sink_node",
    "transform_node",
    "var_get_node",
    "var_node",
    "var_set_node",
]
