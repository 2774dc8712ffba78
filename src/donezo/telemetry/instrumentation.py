"""OpenTelemetry provider setup."""

import logging

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    MetricExporter,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter
from opentelemetry.semconv.resource import ResourceAttributes

from donezo import __version__
from donezo.config import Settings

logger = logging.getLogger(__name__)

METRIC_EXPORT_INTERVAL_MS = 60_000


class TelemetryManager:
    """Owns the tracer and meter providers for one application instance.

    Nothing is registered globally unless ``otel_enabled`` is set, so the
    module-level instruments in :mod:`donezo.telemetry.metrics` stay no-ops
    in tests and in default deployments.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.tracer_provider: TracerProvider | None = None
        self.meter_provider: MeterProvider | None = None

    def setup(self) -> None:
        """Create and register providers according to the exporter settings."""
        if not self.settings.otel_enabled:
            logger.info("OpenTelemetry is disabled")
            return

        resource = self.resource()

        self.tracer_provider = TracerProvider(resource=resource)
        span_exporter = self._span_exporter()
        if span_exporter is not None:
            self.tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))
        trace.set_tracer_provider(self.tracer_provider)

        readers = []
        metric_exporter = self._metric_exporter()
        if metric_exporter is not None:
            readers.append(
                PeriodicExportingMetricReader(
                    metric_exporter, export_interval_millis=METRIC_EXPORT_INTERVAL_MS
                )
            )
        self.meter_provider = MeterProvider(resource=resource, metric_readers=readers)
        metrics.set_meter_provider(self.meter_provider)

        logger.info(
            f"OpenTelemetry enabled: traces={self.settings.otel_traces_exporter} "
            f"metrics={self.settings.otel_metrics_exporter}"
        )

    def resource(self) -> Resource:
        """Resource describing this service instance."""
        attributes = {
            ResourceAttributes.SERVICE_NAME: self.settings.otel_service_name,
            ResourceAttributes.SERVICE_VERSION: __version__,
            ResourceAttributes.DEPLOYMENT_ENVIRONMENT: self.settings.environment,
        }
        attributes.update(self.settings.get_resource_attributes())
        return Resource.create(attributes)

    def _endpoint(self, suffix: str) -> str:
        endpoint = self.settings.otel_exporter_otlp_endpoint.rstrip("/")
        return endpoint if endpoint.endswith(suffix) else f"{endpoint}{suffix}"

    def _span_exporter(self) -> SpanExporter | None:
        kind = self.settings.otel_traces_exporter
        if kind == "otlp":
            return OTLPSpanExporter(
                endpoint=self._endpoint("/v1/traces"),
                headers=self.settings.get_otlp_headers(),
            )
        if kind == "console":
            return ConsoleSpanExporter()
        return None

    def _metric_exporter(self) -> MetricExporter | None:
        kind = self.settings.otel_metrics_exporter
        if kind == "otlp":
            return OTLPMetricExporter(
                endpoint=self._endpoint("/v1/metrics"),
                headers=self.settings.get_otlp_headers(),
            )
        if kind == "console":
            return ConsoleMetricExporter()
        return None

    def shutdown(self) -> None:
        """Flush and stop the providers created by :meth:`setup`."""
        if self.tracer_provider is not None:
            self.tracer_provider.shutdown()
        if self.meter_provider is not None:
            self.meter_provider.shutdown()
        if self.settings.otel_enabled:
            logger.info("OpenTelemetry shutdown complete")
