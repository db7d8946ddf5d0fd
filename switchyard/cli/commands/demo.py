"""``switchyard demo`` — run the sample graph on one message.

The graph multiplies ``payload["v"]``, snapshots the result, holds the
message for a short delay, restores the snapshot and completes::

    logger -> transform(v * factor) -> var_set("snap") -> delay
           -> var_get("snap") -> sink
"""

from __future__ import annotations

import json
import time
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from switchyard.config import configure_logging
from switchyard.core.node import FailureHandler, Node
from switchyard.core.scheduler import CooperativeScheduler, Scheduler
from switchyard.models.failure import FailureRecord
from switchyard.models.message import Message, create_message
from switchyard.models.trace import TraceKind
from switchyard.nodes import (
    delay_node,
    logger_node,
    sink_node,
    transform_node,
    var_get_node,
    var_set_node,
)
from switchyard.nodes.terminal import Completion
from switchyard.tracing.dispatcher import TraceDispatcher
from switchyard.tracing.tracers import LoggingTracer, RecordingTracer

console = Console()


def build_demo_graph(
    completion: Completion,
    *,
    factor: int = 10,
    delay_seconds: float = 0.01,
    on_failure: FailureHandler | None = None,
    scheduler: Scheduler | None = None,
    trace_dispatcher: TraceDispatcher | None = None,
) -> Node:
    """Assemble the demo graph and return its entry node."""
    node_options: dict[str, Any] = {
        "scheduler": scheduler,
        "trace_dispatcher": trace_dispatcher,
    }
    entry = logger_node(on_failure, name="entry", **node_options)
    multiply = transform_node(
        {"v": {"key": "v", "transform": lambda value: value * factor}},
        on_failure,
        **node_options,
    )
    snapshot = var_set_node("snap", on_failure, **node_options)
    hold = delay_node(delay_seconds, on_failure, **node_options)
    restore = var_get_node("snap", on_failure, **node_options)
    done = sink_node(completion, on_failure, **node_options)

    entry.connect(multiply)
    multiply.connect(snapshot)
    snapshot.connect(hold)
    hold.connect(restore)
    restore.connect(done)
    return entry


def demo_cmd(
    value: int = typer.Option(1, "--value", "-v", help="Initial value of payload['v']."),
    factor: int = typer.Option(10, "--factor", "-f", help="Multiplier applied by the transform node."),
    delay_ms: int = typer.Option(10, "--delay-ms", "-d", help="Delay node duration in milliseconds."),
    trace: bool = typer.Option(False, "--trace", help="Log every trace event at DEBUG."),
) -> None:
    """Run the sample graph on ``{"v": VALUE}`` and show the completed message."""
    configure_logging("DEBUG" if trace else None)

    scheduler = CooperativeScheduler()
    recorder = RecordingTracer()
    dispatcher = TraceDispatcher()
    dispatcher.register_tracer(recorder)
    if trace:
        dispatcher.register_tracer(LoggingTracer())

    completed: list[Message] = []
    failures: list[FailureRecord] = []

    def _complete(error: BaseException | None, message: Message) -> None:
        completed.append(message)

    entry = build_demo_graph(
        _complete,
        factor=factor,
        delay_seconds=delay_ms / 1000,
        on_failure=failures.append,
        scheduler=scheduler,
        trace_dispatcher=dispatcher,
    )

    message = create_message({"v": value}, caller_user="cli", caller_system="switchyard")
    started = time.monotonic()
    entry.post(message)
    scheduler.run()
    elapsed_ms = (time.monotonic() - started) * 1000

    if failures:
        for record in failures:
            console.print(
                f"[bold red]Node {record.node.name} failed:[/bold red] {record.cause}"
            )
        raise typer.Exit(code=1)
    if not completed:
        console.print("[bold red]Message never reached the sink.[/bold red]")
        raise typer.Exit(code=1)

    result = completed[0]
    table = Table(title="Completed message", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("correlation_id", result.correlation_id)
    table.add_row("payload", json.dumps(result.payload))
    table.add_row("original_payload", json.dumps(result.original_payload))
    table.add_row("vars", json.dumps(result.vars))
    table.add_row("elapsed", f"{elapsed_ms:.1f} ms")
    table.add_row("fan-outs", str(len(recorder.of_kind(TraceKind.FANOUT))))
    console.print(table)
    console.print(
        Panel("[bold green]Traversal complete[/bold green]", border_style="green")
    )
