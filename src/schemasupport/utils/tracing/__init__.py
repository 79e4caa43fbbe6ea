"""
Distributed tracing using OpenTelemetry.

Spans cover discovery, ledger access, reconciliation and execution so a
slow or failing run can be inspected in Jaeger/Tempo next to the database.
"""

from .context import add_span_event, trace_operation
from .tracer import get_tracer, initialize_tracing, shutdown_tracing

__all__ = [
    "initialize_tracing",
    "get_tracer",
    "shutdown_tracing",
    "trace_operation",
    "add_span_event",
]
