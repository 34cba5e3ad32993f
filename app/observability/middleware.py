from __future__ import annotations

import uuid
from time import perf_counter
from typing import Any, Callable

import structlog
from opentelemetry import propagate
from opentelemetry.trace import SpanKind, Status, StatusCode
from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import JSONResponse

from app.observability.metrics import get_metrics
from app.observability.tracing import get_tracer


def _route_label(scope: dict[str, Any]) -> str:
    """Metric label for the matched route template; unmatched paths share one label."""
    route = scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class RequestContextMiddleware:
    """Adds request_id context, a server span, access logs, and HTTP metrics."""

    def __init__(self, app: Callable[..., Any]) -> None:
        self.app = app
        # Avoid self-observing the observability endpoint.
        self._excluded_metric_paths = {"/metrics"}

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())
        path = scope.get("path")
        method = scope.get("method")
        query_string = scope.get("query_string", b"").decode("latin-1")

        metrics = get_metrics()
        parent = propagate.extract(Headers(scope=scope))

        with get_tracer().start_as_current_span(
            f"{method} {path}",
            context=parent,
            kind=SpanKind.SERVER,
        ) as span:
            span.set_attribute("http.request.method", method)
            span.set_attribute("url.path", path)
            span.set_attribute("http.request.query", query_string)

            trace_id = span.get_span_context().trace_id
            structlog.contextvars.bind_contextvars(
                request_id=request_id,
                path=path,
                method=method,
                trace_id=f"{trace_id:032x}" if trace_id else None,
            )

            start = perf_counter()
            status_code: int = 500
            response_started = False

            async def send_wrapper(message: dict[str, Any]) -> None:
                nonlocal status_code, response_started

                if message.get("type") == "http.response.start":
                    response_started = True
                    status_code = int(message.get("status", 500))
                    headers = MutableHeaders(scope=message)
                    headers["X-Request-ID"] = request_id

                await send(message)

            observed = path not in self._excluded_metric_paths
            if observed:
                metrics.http_active_requests.inc()

            try:
                await self.app(scope, receive, send_wrapper)
            except Exception as exc:
                if response_started:
                    raise
                span.record_exception(exc)
                structlog.get_logger("app").error("unhandled_error", exc_info=exc)
                # 500s leave through send_wrapper too, so they carry X-Request-ID and CORS headers.
                response = JSONResponse(status_code=500, content={"detail": "Internal server error"})
                await response(scope, receive, send_wrapper)
            finally:
                elapsed_s = perf_counter() - start

                span.set_attribute("http.response.status_code", status_code)
                if status_code >= 500:
                    span.set_status(Status(StatusCode.ERROR))

                # Update metrics first so they update even if logging misbehaves.
                if observed:
                    metrics.http_active_requests.dec()
                    metrics.observe_http_request(
                        method=method,
                        path=_route_label(scope),
                        status_code=status_code,
                        elapsed_s=elapsed_s,
                    )

                structlog.get_logger("access").info(
                    "http_request",
                    status_code=status_code,
                    elapsed_ms=round(elapsed_s * 1000.0, 2),
                )

                structlog.contextvars.clear_contextvars()
