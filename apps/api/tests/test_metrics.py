"""Tests for EMF metric records and the JSON log formatter."""

from __future__ import annotations

import json
import logging

from pastoral.core.config import settings
from pastoral.core.logging_setup import JsonLogFormatter, RequestIDDefaultFilter
from pastoral.core.metrics import EMFMetrics, Metric, emit_business_metric, emit_error


def _emf_records(caplog) -> list[dict]:
    return [
        json.loads(r.message)
        for r in caplog.records
        if r.name == "pastoral.core.metrics"
    ]


class TestEMFMetrics:
    def test_record_writes_one_entry(self, caplog, monkeypatch):
        monkeypatch.setattr(settings, "enable_metrics", True)
        caplog.set_level(logging.INFO, logger="pastoral.core.metrics")

        EMFMetrics(namespace="Pastoral/Test").record(
            Metric("RequestCount", 1),
            Metric("RequestDuration", 12.5, "Milliseconds"),
            dimensions={"Method": "GET", "Path": "/x"},
            metadata={"request_id": "r-1", "user_id": None},
        )

        [entry] = _emf_records(caplog)
        directive = entry["_aws"]["CloudWatchMetrics"][0]
        assert directive["Namespace"] == "Pastoral/Test"
        assert directive["Dimensions"] == [["Method", "Path"]]
        assert {m["Name"] for m in directive["Metrics"]} == {"RequestCount", "RequestDuration"}
        assert entry["RequestDuration"] == 12.5
        assert entry["Method"] == "GET"
        assert entry["request_id"] == "r-1"
        assert "user_id" not in entry

    def test_disabled_writes_nothing(self, caplog, monkeypatch):
        monkeypatch.setattr(settings, "enable_metrics", False)
        caplog.set_level(logging.INFO, logger="pastoral.core.metrics")

        emit_error("not_found", 404, path="/api/v1/baptisms/3", method="GET")

        assert _emf_records(caplog) == []

    def test_error_path_is_normalized(self, caplog, monkeypatch):
        monkeypatch.setattr(settings, "enable_metrics", True)
        caplog.set_level(logging.INFO, logger="pastoral.core.metrics")

        emit_error("not_found", 404, path="/api/v1/baptisms/3", method="GET")

        [entry] = _emf_records(caplog)
        assert entry["Path"] == "/api/v1/baptisms/{id}"
        assert entry["ErrorCount"] == 1

    def test_business_metric_domain(self, caplog, monkeypatch):
        monkeypatch.setattr(settings, "enable_metrics", True)
        caplog.set_level(logging.INFO, logger="pastoral.core.metrics")

        emit_business_metric("scale.presence_updated", status="confirmado")

        [entry] = _emf_records(caplog)
        assert entry["Domain"] == "scale"
        assert entry["status"] == "confirmado"


class TestJsonLogFormatter:
    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord(
            "pastoral.test", logging.WARNING, __file__, 10, "hello %s", ("world",), None
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_context_fields_included(self):
        out = json.loads(JsonLogFormatter().format(self._record(request_id="abc", status_code=404)))

        assert out["message"] == "hello world"
        assert out["level"] == "WARNING"
        assert out["request_id"] == "abc"
        assert out["status_code"] == 404

    def test_placeholder_request_id_dropped(self):
        record = self._record()
        RequestIDDefaultFilter().filter(record)

        out = json.loads(JsonLogFormatter().format(record))

        assert record.request_id == "-"
        assert "request_id" not in out
