from __future__ import annotations

import re
from collections.abc import Iterator
from contextlib import contextmanager
from time import perf_counter

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, ProcessCollector, generate_latest


HTTP_LABELS = ["method", "path", "status_code"]

_SUMMARY_CATEGORIES: dict[str, list[str]] = {
    "Request Metrics": ["http_requests_total", "http_active_requests"],
    "Performance Metrics": ["http_request_duration_seconds", "roman_numeral_conversion_duration_seconds"],
    "Error Metrics": ["http_errors_total"],
    "Roman Numeral Conversion": ["roman_numeral_conversions_total"],
    "System Metrics": ["process_resident_memory_bytes", "process_virtual_memory_bytes", "process_cpu"],
}

_LABEL_PAIR = re.compile(r'(\w+)="((?:[^"\\]|\\.)*)"')


class ServiceMetrics:
    """Prometheus instruments on a registry owned by this instance."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        ProcessCollector(registry=self.registry)

        self.http_requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            HTTP_LABELS,
            registry=self.registry,
        )
        self.http_request_duration_seconds = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            HTTP_LABELS,
            buckets=(0.1, 0.3, 0.5, 0.7, 1.0, 3.0, 5.0, 7.0, 10.0),
            registry=self.registry,
        )
        self.http_errors_total = Counter(
            "http_errors_total",
            "Total number of HTTP errors",
            [*HTTP_LABELS, "error_type"],
            registry=self.registry,
        )
        self.http_active_requests = Gauge(
            "http_active_requests",
            "Number of HTTP requests currently being served",
            registry=self.registry,
        )
        self.conversions_total = Counter(
            "roman_numeral_conversions_total",
            "Roman numeral conversion requests by outcome",
            ["result"],
            registry=self.registry,
        )
        self.conversion_duration_seconds = Histogram(
            "roman_numeral_conversion_duration_seconds",
            "Time spent converting a number to a Roman numeral",
            buckets=(0.00001, 0.00005, 0.0001, 0.0005, 0.001, 0.005, 0.01),
            registry=self.registry,
        )

    def observe_http_request(self, method: str, path: str, status_code: int, elapsed_s: float) -> None:
        labels = (method, path, str(status_code))
        self.http_requests_total.labels(*labels).inc()
        self.http_request_duration_seconds.labels(*labels).observe(elapsed_s)
        if status_code >= 400:
            error_type = "server_error" if status_code >= 500 else "client_error"
            self.http_errors_total.labels(*labels, error_type).inc()

    def observe_conversion(self, result: str) -> None:
        self.conversions_total.labels(result=result).inc()

    @contextmanager
    def time_conversion(self) -> Iterator[None]:
        start = perf_counter()
        try:
            yield
        finally:
            self.conversion_duration_seconds.observe(perf_counter() - start)

    def exposition(self) -> bytes:
        return generate_latest(self.registry)


def format_metrics_summary(exposition: str) -> str:
    """Render Prometheus exposition text as a human-readable summary grouped by category."""

    lines = exposition.splitlines()
    out = ["=== Application Metrics Summary ===", ""]

    for category, metric_names in _SUMMARY_CATEGORIES.items():
        out.append(f"=== {category} ===")
        out.append("")
        for line in lines:
            if not line or not any(name in line for name in metric_names):
                continue
            if line.startswith("# HELP"):
                out.append("Description: " + line[len("# HELP") :].strip())
            elif line.startswith("# TYPE"):
                out.append("Type: " + line.split(" ")[3])
            elif not line.startswith("#"):
                sample, _, value = line.rpartition(" ")
                if "{" in sample:
                    name, _, raw_labels = sample.partition("{")
                    labels = ", ".join(f'{k}="{v}"' for k, v in _LABEL_PAIR.findall(raw_labels))
                    out.append(f"Value: {value} ({name}; {labels})")
                else:
                    out.append(f"Value: {value} ({sample})")
        out.append("")

    return "\n".join(out) + "\n"


_METRICS: ServiceMetrics | None = None


def get_metrics() -> ServiceMetrics:
    global _METRICS
    if _METRICS is None:
        _METRICS = ServiceMetrics()
    return _METRICS


def reset_metrics() -> None:
    """Swap in a fresh registry with zeroed instruments (used by tests)."""

    global _METRICS
    _METRICS = ServiceMetrics()
