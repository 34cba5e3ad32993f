"""Observability helpers for the conversion service.

structlog JSON logging with request-scoped contextvars, a Prometheus registry
exposed at /metrics, and OpenTelemetry spans exported over OTLP/HTTP.
"""
