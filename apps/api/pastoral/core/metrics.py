"""Metrics as CloudWatch Embedded Metric Format (EMF) log lines.

Each call writes one JSON record through the ``pastoral.core.metrics``
logger; the log shipper turns the ``_aws`` block into CloudWatch metrics.
Nothing is written when ``ENABLE_METRICS`` is off.
"""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any

from pastoral.core.config import settings

logger = logging.getLogger(__name__)

_ID_SEGMENT = re.compile(r"/(\d+|manual_[0-9a-f]+|user_[A-Za-z0-9]+)(?=/|$)")


@dataclass(frozen=True)
class Metric:
    name: str
    value: float
    unit: str = "Count"


class EMFMetrics:
    def __init__(self, namespace: str | None = None):
        self.namespace = (
            namespace
            or settings.metrics_namespace
            or settings.app_name.replace(" ", "/")
        )

    def record(
        self,
        *metrics: Metric,
        dimensions: dict[str, str] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Write ``metrics`` as a single EMF entry sharing one dimension set."""
        # Read per call so tests can toggle it at runtime
        if not settings.enable_metrics or not metrics:
            return

        dimensions = dimensions or {}
        entry: dict[str, Any] = {
            "_aws": {
                "Timestamp": int(time.time() * 1000),
                "CloudWatchMetrics": [
                    {
                        "Namespace": self.namespace,
                        "Dimensions": [sorted(dimensions)],
                        "Metrics": [{"Name": m.name, "Unit": m.unit} for m in metrics],
                    }
                ],
            },
            "Environment": settings.app_env,
            **dimensions,
        }
        for key, value in (metadata or {}).items():
            if value is not None:
                entry.setdefault(key, value)
        for m in metrics:
            entry[m.name] = m.value

        logger.info(json.dumps(entry, default=str))


_emf_metrics: EMFMetrics | None = None


def get_metrics() -> EMFMetrics:
    global _emf_metrics
    if _emf_metrics is None:
        _emf_metrics = EMFMetrics()
    return _emf_metrics


def _normalize_path(path: str) -> str:
    """Collapse id segments to ``{id}`` so paths stay low-cardinality."""
    return _ID_SEGMENT.sub("/{id}", path)


def emit_http_request(
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    **metadata: Any,
) -> None:
    get_metrics().record(
        Metric("RequestCount", 1),
        Metric("RequestDuration", duration_ms, "Milliseconds"),
        dimensions={
            "Method": method,
            "Path": _normalize_path(path),
            "StatusCode": str(status_code),
        },
        metadata={"request_path": path, **metadata},
    )


def emit_error(
    error_code: str,
    status_code: int,
    path: str | None = None,
    method: str | None = None,
    **metadata: Any,
) -> None:
    dimensions = {"ErrorCode": error_code, "StatusCode": str(status_code)}
    if path:
        dimensions["Path"] = _normalize_path(path)
    if method:
        dimensions["Method"] = method
    get_metrics().record(Metric("ErrorCount", 1), dimensions=dimensions, metadata=metadata)


def emit_business_metric(
    metric_name: str,
    value: float = 1,
    unit: str = "Count",
    **metadata: Any,
) -> None:
    """Record a domain event such as ``scale.presence_updated``.

    The part before the first dot becomes the ``Domain`` dimension.
    """
    get_metrics().record(
        Metric(metric_name, value, unit),
        dimensions={"Domain": metric_name.split(".", 1)[0]},
        metadata=metadata,
    )
