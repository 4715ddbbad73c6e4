"""OpenTelemetry tracing for the policy service.

Spans cover HTTP requests, SQL statements and PolicyService calls (see
tracing.traced). Exporters: console for development, OTLP gRPC for a
collector, or none (spans are created and dropped).
"""

import logging
import threading
from collections.abc import Callable

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import Settings

logger = logging.getLogger(__name__)

# Probes are polled by the orchestrator; tracing them is noise.
UNTRACED_URLS = "/api/v1/health,/api/v1/health/ready"


def build_exporter(kind: str, otlp_endpoint: str | None) -> SpanExporter | None:
    """Return the span exporter for kind, or None for "none"."""
    match kind:
        case "none":
            return None
        case "otlp" if otlp_endpoint:
            return OTLPSpanExporter(
                endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
            )
        case "otlp":
            logger.warning("TELEMETRY_OTLP_ENDPOINT not set; falling back to console")
            return ConsoleSpanExporter()
        case _:
            return ConsoleSpanExporter()


class TelemetryConfig:
    """Tracer provider plus FastAPI, SQLAlchemy and logging instrumentation.

    Instrumentation failures are logged and never stop the service.
    """

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryConfig":
        telemetry = cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
        )
        telemetry.setup(
            exporter=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        return telemetry

    def setup(
        self,
        exporter: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> TracerProvider:
        """Create the tracer provider and install it globally.

        Args:
            exporter: "console", "otlp" or "none".
            otlp_endpoint: OTLP gRPC endpoint (e.g. http://localhost:4317).
            sample_rate: Fraction of root traces kept, 0.0 to 1.0.
        """
        resource = Resource(
            attributes={
                SERVICE_NAME: self.service_name,
                SERVICE_VERSION: self.service_version,
                "deployment.environment": self.environment,
            }
        )
        provider = TracerProvider(
            resource=resource, sampler=ParentBased(TraceIdRatioBased(sample_rate))
        )
        span_exporter = build_exporter(exporter, otlp_endpoint)
        if span_exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(span_exporter))
        trace.set_tracer_provider(provider)
        self.tracer_provider = provider
        logger.info(
            "OpenTelemetry initialized: service=%s version=%s exporter=%s sample_rate=%s",
            self.service_name,
            self.service_version,
            exporter,
            sample_rate,
        )
        return provider

    def _instrument(self, what: str, apply: Callable[[TracerProvider], None]) -> None:
        if self.tracer_provider is None:
            return
        try:
            apply(self.tracer_provider)
        except Exception as e:
            logger.exception("Failed to instrument %s: %s", what, e)
        else:
            logger.info("%s instrumentation enabled", what)

    def instrument_fastapi(self, app: FastAPI) -> None:
        self._instrument(
            "FastAPI",
            lambda provider: FastAPIInstrumentor.instrument_app(
                app, tracer_provider=provider, excluded_urls=UNTRACED_URLS
            ),
        )

    def instrument_sqlalchemy(self, engine: AsyncEngine) -> None:
        self._instrument(
            "SQLAlchemy",
            lambda provider: SQLAlchemyInstrumentor().instrument(
                engine=engine.sync_engine, tracer_provider=provider
            ),
        )

    def instrument_logging(self) -> None:
        """Add trace_id and span_id to log records."""
        self._instrument(
            "Logging",
            lambda provider: LoggingInstrumentor().instrument(
                tracer_provider=provider, set_logging_format=True
            ),
        )

    def shutdown(self) -> None:
        """Flush pending spans and shut the provider down."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception as e:
            logger.exception("Error during telemetry shutdown: %s", e)
        else:
            logger.info("Telemetry shutdown complete")


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    """Return the process-wide telemetry instance (set at startup)."""
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    """Set (or clear, with None) the process-wide telemetry instance."""
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
