import os
import sys
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource


def setup_tracing(service_name="ai-orch"):
    """
    Configures OpenTelemetry tracing for the router.

    Modes:
    1. ENABLE_CONSOLE_TRACING=true -> Spans printed to stdout.
    2. ENABLE_FILE_TRACING=true -> Spans appended to the file named by
       TRACE_FILE (default 'traces.json').
    3. Default -> Tracing enabled but no exporter (silent).
    """
    resource = Resource(attributes={"service.name": service_name})
    provider = TracerProvider(resource=resource)

    if os.getenv("ENABLE_CONSOLE_TRACING", "false").lower() == "true":
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    elif os.getenv("ENABLE_FILE_TRACING", "false").lower() == "true":
        try:
            trace_file = open(os.getenv("TRACE_FILE", "traces.json"), "a")
            provider.add_span_processor(
                BatchSpanProcessor(ConsoleSpanExporter(out=trace_file))
            )
        except OSError as e:
            print(f"Failed to setup file tracing: {e}", file=sys.stderr)

    trace.set_tracer_provider(provider)

    return trace.get_tracer(__name__)
