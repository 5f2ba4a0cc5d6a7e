"""OpenTelemetry tracer and meter providers.

Spans wrap calls to the identity provider; they are only
exported when ``OTEL_EXPORTER_OTLP_ENDPOINT`` is set.
"""

from __future__ import annotations

import logging

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from pastoral.core.config import settings

logger = logging.getLogger(__name__)

METRIC_EXPORT_INTERVAL_MS = 60_000

_initialized = False


def _service_resource() -> Resource:
    return Resource.create(
        {
            "service.name": settings.otel_service_name or settings.app_name,
            "service.namespace": settings.metrics_namespace
            or settings.app_name.replace(" ", "/"),
            "deployment.environment": settings.app_env,
        }
    )


def _build_providers(
    resource: Resource, endpoint: str | None
) -> tuple[TracerProvider, MeterProvider]:
    tracer_provider = TracerProvider(resource=resource)
    if not endpoint:
        return tracer_provider, MeterProvider(resource=resource)

    base = endpoint.rstrip("/")
    tracer_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{base}/v1/traces"))
    )
    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=f"{base}/v1/metrics"),
        export_interval_millis=METRIC_EXPORT_INTERVAL_MS,
    )
    return tracer_provider, MeterProvider(resource=resource, metric_readers=[reader])


def setup_opentelemetry() -> None:
    """Install the global providers once per process. No-op when metrics are off."""
    global _initialized
    if _initialized or not settings.enable_metrics:
        return

    endpoint = settings.otel_exporter_otlp_endpoint
    try:
        tracer_provider, meter_provider = _build_providers(_service_resource(), endpoint)
        trace.set_tracer_provider(tracer_provider)
        metrics.set_meter_provider(meter_provider)
    except Exception as e:
        # Telemetry must never take the API down
        logger.warning("OpenTelemetry setup failed: %s", e, exc_info=True)
        return

    _initialized = True
    logger.info("OpenTelemetry ready (exporting to %s)", endpoint or "nowhere")


def get_tracer(name: str) -> trace.Tracer:
    """Tracer from the global provider; spans are no-ops until setup runs."""
    return trace.get_tracer(name)
